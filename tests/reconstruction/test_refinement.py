import numpy as np
import pytest
from numpy.testing import assert_array_almost_equal

from computations.vectors import angular_deviation
from container_models import NormalField
from exceptions import UnderconstrainedSystemError
from helper_function import hemisphere_field, mean_light_error, render_radiance_samples
from mutations import reorient_normals
from reconstruction import RefinementState, refine, refinement_round
from reconstruction.refinement import initial_state
from utils.constants import SingularSystemPolicy


class TestRefinementRound:
    def test_initial_state_is_the_dome(self, curved_samples):
        state = initial_state(curved_samples)
        assert state.round_index == 0
        assert_array_almost_equal(state.normal_field.data, NormalField.dome(24, 16).data)

    def test_round_does_not_modify_previous_state(self, curved_samples):
        # Arrange
        state = initial_state(curved_samples)
        # Act
        next_state = refinement_round(state)
        # Assert
        assert next_state.round_index == 1
        assert all(
            np.array_equal(sample.lighting_direction, [0.0, 0.0, 1.0])
            for sample in state.samples
        )
        assert not any(
            np.array_equal(sample.lighting_direction, [0.0, 0.0, 1.0])
            for sample in next_state.samples
        )

    def test_round_from_true_normals_is_a_fixed_point(
        self, curved_normal_field, curved_samples
    ):
        # Arrange
        state = RefinementState(0, curved_normal_field, curved_samples)
        # Act
        next_state = refinement_round(state)
        # Assert
        assert_array_almost_equal(next_state.normal_field.data, curved_normal_field.data)


class TestRefine:
    def test_recovers_lighting_directions(self, curved_samples, light_sources):
        # Act
        result = refine(curved_samples, rounds=4)
        # Assert
        expected = np.stack([light.unit_vector for light in light_sources])
        for estimated, true in zip(result.lighting_directions, expected):
            assert angular_deviation(estimated, true) < 5.0

    def test_recovers_normals(self, curved_samples, curved_normal_field):
        # Act
        result = refine(curved_samples, rounds=4)
        # Assert
        cosines = np.sum(result.normal_field.flat * curved_normal_field.flat, axis=-1)
        assert np.degrees(np.arccos(np.clip(cosines, -1.0, 1.0))).max() < 1.0

    def test_logs_estimated_lighting(self, curved_samples, caplog):
        refine(curved_samples, rounds=2)
        assert caplog.text.count("Estimated lighting") == 3
        assert "elevation=60.0°" in caplog.text

    def test_returns_samples_with_final_directions(self, curved_samples):
        result = refine(curved_samples, rounds=1)
        assert len(result.samples) == 3
        assert result.dimensions == (24, 16)
        assert_array_almost_equal(
            result.lighting_directions,
            np.stack([sample.lighting_direction for sample in result.samples]),
        )

    def test_flat_surface_fails_by_default(self, flat_samples):
        with pytest.raises(UnderconstrainedSystemError):
            refine(flat_samples, rounds=4)

    def test_flat_surface_faces_the_camera_with_camera_axis_policy(self, flat_samples):
        # Act
        result = refine(flat_samples, rounds=4, policy=SingularSystemPolicy.CAMERA_AXIS)
        # Assert
        assert_array_almost_equal(
            result.normal_field.flat, np.tile([0.0, 0.0, 1.0], (24 * 16, 1))
        )

    def test_requires_a_round(self, curved_samples):
        with pytest.raises(ValueError, match="At least one refinement round"):
            refine(curved_samples, rounds=0)


class TestConvergence:
    @pytest.fixture(scope="class")
    def steep_samples(self, light_sources):
        """A bump much steeper than the dome the refinement starts from."""
        steep_field = reorient_normals(hemisphere_field(24, 16, apex_height=12.0))
        return render_radiance_samples(steep_field, light_sources)

    def test_lighting_error_shrinks_with_more_rounds(self, steep_samples, light_sources):
        # Act
        errors = [
            mean_light_error(
                refine(steep_samples, rounds=rounds).lighting_directions, light_sources
            )
            for rounds in (1, 4, 20)
        ]
        # Assert
        assert errors[0] > 10.0, "The seed should not already match the surface."
        assert errors[0] > errors[1] > errors[2]
        assert errors[2] < 8.0
