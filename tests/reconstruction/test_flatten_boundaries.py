import numpy as np
import pytest
from numpy.testing import assert_array_equal
from returns.pipeline import is_successful

from container_models import NormalField
from helper_function import mean_deviation_from_camera_axis, unwrap_result
from mutations import reorient_normals
from reconstruction import flatten_boundaries, flattening_pass
from utils.constants import FlatteningStrategy


@pytest.fixture
def dome() -> NormalField:
    return reorient_normals(NormalField.dome(24, 16))


@pytest.mark.parametrize("strategy", list(FlatteningStrategy))
def test_flattening_reduces_deviation_from_camera_axis(
    dome: NormalField, strategy: FlatteningStrategy
):
    # Act
    result = unwrap_result(flatten_boundaries(dome, passes=10, strategy=strategy))
    # Assert
    assert mean_deviation_from_camera_axis(result) < mean_deviation_from_camera_axis(dome)
    assert np.allclose(np.linalg.norm(result.flat, axis=-1), 1.0)


def test_each_pass_ends_with_reorientation(dome: NormalField):
    result = unwrap_result(flattening_pass(dome, FlatteningStrategy.EDGE))
    mean = result.mean_normal / np.linalg.norm(result.mean_normal)
    assert np.allclose(mean, [0.0, 0.0, 1.0])


def test_zero_passes_return_the_field(dome: NormalField):
    result = unwrap_result(flatten_boundaries(dome, passes=0))
    assert_array_equal(result.data, dome.data)


def test_failure_stops_the_passes(dome: NormalField, monkeypatch: pytest.MonkeyPatch):
    # Arrange
    calls = []

    def failing_alignment(self, field):
        calls.append(field)
        raise RuntimeError("boom")

    monkeypatch.setattr(
        "mutations.flattening.CornerFlatten.alignment_targets", failing_alignment
    )
    # Act
    result = flatten_boundaries(dome, passes=5, strategy=FlatteningStrategy.CORNER)
    # Assert
    assert not is_successful(result)
    assert len(calls) == 1
