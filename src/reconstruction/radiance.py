"""Brightness equalization of radiance samples."""

from collections.abc import Sequence

import numpy as np
from loguru import logger

from container_models.radiance_sample import RadianceSample


def balance_radiances(
    samples: Sequence[RadianceSample],
) -> tuple[RadianceSample, ...]:
    """
    Scale the luminance of every sample so that all samples share the same mean.

    Each sample is multiplied by `overall_mean / sample_mean` and clipped to [0, 1].
    Completely black samples are returned unchanged.
    """
    if not samples:
        return ()
    sample_means = np.array([sample.luminance.mean() for sample in samples])
    overall_mean = float(sample_means.mean())
    logger.debug(f"Overall mean luminance: {overall_mean:.4f}")

    balanced = []
    for sample, sample_mean in zip(samples, sample_means, strict=True):
        if sample_mean == 0.0:
            logger.warning(f"Sample {sample.source or ''} is black, not balanced")
            balanced.append(sample)
            continue
        scale = overall_mean / sample_mean
        logger.debug(f"Mean luminance {sample_mean:.4f}, scaled by {scale:.4f}")
        balanced.append(
            sample.with_luminance(np.clip(sample.luminance * scale, 0.0, 1.0))
        )
    return tuple(balanced)
