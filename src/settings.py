"""Reconstruction settings and configuration."""

from __future__ import annotations

from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Annotated

from loguru import logger
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.constants import (
    DEFAULT_ALBEDO_PASSES,
    DEFAULT_FLATTENING_PASSES,
    DEFAULT_REFINEMENT_ROUNDS,
    FlatteningStrategy,
    SingularSystemPolicy,
)


class Settings(BaseSettings):
    """
    Reconstruction configuration settings.

    Settings can be configured via:

    1. Environment variables (e.g., NORMALS_REFINEMENT_ROUNDS=6)
    2. .env file in the working directory
    3. Default values defined below

    All settings use the NORMALS_ prefix for environment variables.

    .. rubric:: Examples

    Use edge flattening and substitute the camera axis for unsolvable systems::

        export NORMALS_FLATTENING_STRATEGY=edge
        export NORMALS_SINGULAR_SYSTEM_POLICY=camera-axis

    Or create a .env file::

        NORMALS_FLATTENING_PASSES=20
        NORMALS_BALANCE_RADIANCES=true
    """

    # Estimation
    refinement_rounds: Annotated[
        int,
        Field(
            default=DEFAULT_REFINEMENT_ROUNDS,
            description="Number of alternating lighting / normal estimation rounds",
            gt=0,
        ),
    ]
    singular_system_policy: Annotated[
        SingularSystemPolicy,
        Field(
            default=SingularSystemPolicy.FAIL,
            description="Abort on an underconstrained least-squares system, or "
            "substitute the camera axis / previous estimate.",
        ),
    ]
    balance_radiances: Annotated[
        bool,
        Field(
            default=False,
            description="Equalize the mean brightness of all input images before estimation",
        ),
    ]

    # Post-processing
    flattening_passes: Annotated[
        int,
        Field(
            default=DEFAULT_FLATTENING_PASSES,
            description="Number of boundary flattening passes",
            ge=0,
        ),
    ]
    flattening_strategy: Annotated[
        FlatteningStrategy,
        Field(
            default=FlatteningStrategy.CORNER,
            description="Boundary references used for flattening",
        ),
    ]
    albedo_passes: Annotated[
        int,
        Field(
            default=DEFAULT_ALBEDO_PASSES,
            description="Number of corner brightness balancing passes for the albedo map",
            ge=0,
        ),
    ]

    # Output
    normal_map_path: Annotated[
        Path,
        Field(
            default=Path("normal_map.png"),
            description="Where the normal map is written",
        ),
    ]
    verbose: Annotated[
        bool,
        Field(default=False, description="Log debug diagnostics"),
    ]

    model_config = SettingsConfigDict(
        env_prefix="NORMALS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        validate_assignment=True,
        extra="forbid",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def app_version(self) -> str:
        """
        Get the application version from package metadata.

        :return: The installed version, or "0.0.0" when the package is not installed.
        """
        try:
            return version("normals-from-shading")
        except PackageNotFoundError:
            logger.warning("Could not determine package version, using fallback '0.0.0'")
            return "0.0.0"

    def log_configuration(self) -> None:
        """Log the effective configuration of a reconstruction run."""
        logger.info("=" * 60)
        logger.info("Normal map reconstruction - Configuration:")
        logger.info(f"  Version: {self.app_version}")
        logger.info(f"  Refinement rounds: {self.refinement_rounds}")
        logger.info(f"  Singular systems: {self.singular_system_policy}")
        logger.info(f"  Balance radiances: {self.balance_radiances}")
        logger.info(
            f"  Flattening: {self.flattening_passes} x {self.flattening_strategy}"
        )
        logger.info(f"  Normal map: {self.normal_map_path}")
        logger.info("=" * 60)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: The settings instance, read once from the environment.
    """
    return Settings()  # type: ignore
