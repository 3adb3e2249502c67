import numpy as np
import pytest
from numpy.testing import assert_array_equal
from returns.pipeline import is_successful

from exceptions import ImageShapeMismatchError
from helper_function import unwrap_result
from renders import generate_albedo
from renders.albedo import (
    CornerIntensities,
    average_images,
    brightness_tilt,
    corner_weight_flatten,
    corner_weights,
)

UNIFORM = CornerIntensities(1.0, 1.0, 1.0, 1.0)


class TestAverageImages:
    def test_truncates_the_mean(self):
        images = [np.full((2, 2, 3), value, dtype=np.uint8) for value in (10, 11)]
        assert_array_equal(average_images(images), np.full((2, 2, 3), 10))

    def test_rejects_empty_input(self):
        with pytest.raises(ValueError):
            average_images([])

    def test_rejects_different_sizes(self):
        images = [np.zeros((2, 2, 3), np.uint8), np.zeros((2, 3, 3), np.uint8)]
        with pytest.raises(ImageShapeMismatchError):
            average_images(images)


class TestBrightnessTilt:
    def test_uniform_intensity_keeps_the_image(self, rgb_image: np.ndarray):
        result = brightness_tilt(rgb_image, UNIFORM)
        assert np.abs(result.astype(int) - rgb_image).max() <= 1

    def test_divides_by_interpolated_intensity(self):
        # Arrange
        image = np.full((2, 2, 3), 100, dtype=np.uint8)
        corners = CornerIntensities(0.5, 2.0, 1.0, 1.0)
        # Act
        result = brightness_tilt(image, corners)
        # Assert
        assert_array_equal(result[0, 0], [200, 200, 200])
        # x = 1 of 2 and y = 0: 0.5 * 0.5 + 2.0 * 0.5
        assert_array_equal(result[0, 1], [80, 80, 80])

    def test_caps_at_white(self):
        image = np.full((2, 2, 3), 200, dtype=np.uint8)
        result = brightness_tilt(image, CornerIntensities(0.1, 0.1, 0.1, 0.1))
        assert np.all(result == 255)

    @pytest.mark.parametrize(
        "pixel",
        [
            pytest.param([0, 0, 0], id="black pixel"),
            pytest.param([50, 50, 50], id="grey pixel"),
        ],
    )
    def test_zero_intensity_becomes_white(self, pixel: list[int]):
        image = np.array([[pixel]], dtype=np.uint8)
        result = brightness_tilt(image, CornerIntensities(0.0, 0.0, 0.0, 0.0))
        assert_array_equal(result, [[[255, 255, 255]]])


class TestCornerWeights:
    def test_uniform_image_has_equal_weights(self):
        weights = corner_weights(np.full((8, 8, 3), 120, dtype=np.uint8))
        assert np.allclose(weights, 1.0)

    def test_brighter_side_has_larger_weights(self, rgb_image: np.ndarray):
        weights = corner_weights(rgb_image)
        assert weights.upper_right > weights.upper_left
        assert weights.lower_right > weights.lower_left

    def test_black_image_has_no_weights(self):
        assert corner_weights(np.zeros((4, 4, 3), dtype=np.uint8)) is None

    def test_black_image_is_not_flattened(self, caplog):
        image = np.zeros((4, 4, 3), dtype=np.uint8)
        assert corner_weight_flatten(image) is image
        assert "no brightness" in caplog.text


class TestGenerateAlbedo:
    def test_balances_uneven_illumination(self, rgb_image: np.ndarray):
        # Act
        albedo = unwrap_result(generate_albedo([rgb_image, rgb_image], passes=10))
        # Assert
        left, right = albedo[:, :4].mean(), albedo[:, -4:].mean()
        assert abs(right - left) < rgb_image[:, -4:].mean() - rgb_image[:, :4].mean()

    def test_zero_passes_return_the_average(self, rgb_image: np.ndarray):
        image = np.zeros_like(rgb_image)
        albedo = unwrap_result(generate_albedo([rgb_image, image], passes=0))
        assert_array_equal(albedo, (rgb_image.astype(float) / 2).astype(np.uint8))

    def test_failure_for_mismatching_images(self, rgb_image: np.ndarray):
        result = generate_albedo([rgb_image, rgb_image[:4]])
        assert not is_successful(result)
