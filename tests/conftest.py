import logging

import numpy as np
import pytest
from loguru import logger

from container_models import LightSource, NormalField, RadianceSample
from helper_function import render_radiance_samples
from mutations import reorient_normals

FIELD_WIDTH = 24
FIELD_HEIGHT = 16


class PropagateHandler(logging.Handler):
    """Handler that propagates loguru records to standard logging."""

    def emit(self, record: logging.LogRecord) -> None:
        logging.getLogger(record.name).handle(record)


@pytest.fixture
def caplog(caplog):
    """Fixture to enable caplog to capture loguru logs."""
    handler_id = logger.add(PropagateHandler(), format="{message}")
    yield caplog
    logger.remove(handler_id)


@pytest.fixture(scope="session")
def light_sources() -> tuple[LightSource, ...]:
    """Three lights at equal elevation, spread evenly in azimuth."""
    return tuple(
        LightSource(azimuth=azimuth, elevation=60) for azimuth in (0, 120, 240)
    )


@pytest.fixture(scope="session")
def curved_normal_field() -> NormalField:
    """A bump facing the camera, lit from all three lights at every pixel."""
    return reorient_normals(NormalField.dome(FIELD_WIDTH, FIELD_HEIGHT))


@pytest.fixture(scope="session")
def flat_normal_field() -> NormalField:
    return NormalField(
        data=np.broadcast_to([0.0, 0.0, 1.0], (FIELD_HEIGHT, FIELD_WIDTH, 3)).copy()
    )


@pytest.fixture(scope="session")
def curved_samples(
    curved_normal_field: NormalField, light_sources: tuple[LightSource, ...]
) -> tuple[RadianceSample, ...]:
    return render_radiance_samples(curved_normal_field, light_sources)


@pytest.fixture(scope="session")
def flat_samples(
    flat_normal_field: NormalField, light_sources: tuple[LightSource, ...]
) -> tuple[RadianceSample, ...]:
    return render_radiance_samples(flat_normal_field, light_sources)


@pytest.fixture
def rgb_image() -> np.ndarray:
    """A horizontal gradient that is brighter on the right."""
    gradient = np.linspace(40, 200, FIELD_WIDTH)
    image = np.broadcast_to(gradient[np.newaxis, :, np.newaxis], (FIELD_HEIGHT, FIELD_WIDTH, 3))
    return image.astype(np.uint8)
