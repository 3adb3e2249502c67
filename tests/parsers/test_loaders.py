from pathlib import Path

import numpy as np
import pytest
from numpy.testing import assert_array_almost_equal, assert_array_equal
from PIL import Image
from returns.pipeline import is_successful

from container_models import RadianceSample
from exceptions import ImageShapeMismatchError, InsufficientSamplesError
from helper_function import unwrap_result
from parsers import load_radiance_sample, load_rgb_image, validate_radiance_samples


@pytest.fixture
def image_file(tmp_path: Path, rgb_image: np.ndarray) -> Path:
    path = tmp_path / "photo.png"
    Image.fromarray(rgb_image).save(path)
    return path


class TestLoadRadianceSample:
    def test_loads_grey_levels_in_unit_range(self, image_file: Path, rgb_image):
        # Act
        sample = unwrap_result(load_radiance_sample(image_file))
        # Assert
        assert isinstance(sample, RadianceSample)
        assert sample.dimensions == (rgb_image.shape[1], rgb_image.shape[0])
        assert_array_almost_equal(sample.luminance, rgb_image[..., 0] / 255.0)
        assert sample.source == image_file
        assert_array_equal(sample.lighting_direction, [0.0, 0.0, 1.0])

    def test_missing_file_is_a_failure(self, tmp_path: Path, caplog):
        result = load_radiance_sample(tmp_path / "missing.png")
        assert not is_successful(result)
        assert "Failed to load radiance sample" in caplog.text

    def test_undecodable_file_is_a_failure(self, tmp_path: Path):
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        assert not is_successful(load_radiance_sample(path))


def test_load_rgb_image(image_file: Path, rgb_image: np.ndarray):
    image = unwrap_result(load_rgb_image(image_file))
    assert image.dtype == np.uint8
    assert_array_equal(image, rgb_image)


class TestValidateRadianceSamples:
    @pytest.fixture
    def samples(self) -> list[RadianceSample]:
        return [RadianceSample(luminance=np.full((4, 6), value)) for value in (0.2, 0.4, 0.6)]

    def test_accepts_matching_samples(self, samples):
        assert len(unwrap_result(validate_radiance_samples(samples))) == 3

    @pytest.mark.parametrize("count", [0, 2])
    def test_rejects_too_few_samples(self, samples, count: int):
        result = validate_radiance_samples(samples[:count])
        assert isinstance(result.failure(), InsufficientSamplesError)

    def test_rejects_mismatching_dimensions(self, samples):
        samples.append(RadianceSample(luminance=np.full((6, 4), 0.5)))
        result = validate_radiance_samples(samples)
        assert isinstance(result.failure(), ImageShapeMismatchError)
