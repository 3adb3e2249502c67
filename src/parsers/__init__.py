"""
Loading of photographs into the internal containers.

All loaders return IOResult containers and are decorated with logging, so a missing
or undecodable file ends up on the failure track of a pipeline instead of raising.

- :func:`load_radiance_sample` converts a photograph to grey levels in [0, 1].
- :func:`load_rgb_image` reads a photograph as 8-bit RGB, used for the albedo map.
- :func:`validate_radiance_samples` checks a set of samples before reconstruction.
"""

from .loaders import load_radiance_sample, load_rgb_image, validate_radiance_samples

__all__ = (
    "load_radiance_sample",
    "load_rgb_image",
    "validate_radiance_samples",
)
