"""Command line interface: reconstruct a normal map from photographs."""

import argparse
import sys
from collections.abc import Sequence
from functools import partial
from pathlib import Path

from loguru import logger

from exceptions import ReconstructionError
from parsers import load_radiance_sample, load_rgb_image
from pipelines import run_pipeline
from reconstruction import reconstruct_normal_map
from renders import albedo_to_image, generate_albedo, normal_field_to_image, save_image
from settings import Settings, get_settings
from utils.constants import FlatteningStrategy, SingularSystemPolicy
from utils.logger import configure_logging

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="normals-from-shading",
        description="Reconstruct a normal map from photographs of a surface lit from "
        "different, unknown directions.",
    )
    parser.add_argument("images", nargs="+", type=Path, help="Input photographs")
    parser.add_argument("-o", "--output", type=Path, help="Normal map output path")
    parser.add_argument("--albedo-output", type=Path, help="Also write an albedo map")
    parser.add_argument("--rounds", type=_positive_int, help="Refinement rounds")
    parser.add_argument("--passes", type=_non_negative_int, help="Flattening passes")
    parser.add_argument(
        "--strategy",
        choices=[strategy.value for strategy in FlatteningStrategy],
        help="Boundary flattening strategy",
    )
    parser.add_argument(
        "--on-singular",
        choices=[policy.value for policy in SingularSystemPolicy],
        help="Handling of unsolvable least-squares systems",
    )
    parser.add_argument(
        "--balance",
        action="store_true",
        default=None,
        help="Equalize the brightness of the photographs first",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", default=None, help="Debug logging"
    )
    return parser


def settings_from_arguments(arguments: argparse.Namespace, settings: Settings) -> Settings:
    """Override `settings` with the options given on the command line."""
    overrides = {
        "normal_map_path": arguments.output,
        "refinement_rounds": arguments.rounds,
        "flattening_passes": arguments.passes,
        "flattening_strategy": arguments.strategy
        and FlatteningStrategy(arguments.strategy),
        "singular_system_policy": arguments.on_singular
        and SingularSystemPolicy(arguments.on_singular),
        "balance_radiances": arguments.balance,
        "verbose": arguments.verbose,
    }
    return settings.model_copy(
        update={key: value for key, value in overrides.items() if value is not None}
    )


def write_normal_map(images: Sequence[Path], settings: Settings) -> Path:
    samples = [
        run_pipeline(
            load_radiance_sample(image),
            error_message=f"Could not load image {image}",
        )
        for image in images
    ]
    reconstruction = run_pipeline(
        reconstruct_normal_map(samples, settings),
        error_message="Normal map reconstruction failed",
    )
    return run_pipeline(
        reconstruction.normal_map,
        normal_field_to_image,
        partial(save_image, output_path=settings.normal_map_path),
        error_message=f"Could not write normal map to {settings.normal_map_path}",
    )


def write_albedo(images: Sequence[Path], output_path: Path, settings: Settings) -> Path:
    photographs = [
        run_pipeline(load_rgb_image(image), error_message=f"Could not load image {image}")
        for image in images
    ]
    return run_pipeline(
        generate_albedo(photographs, passes=settings.albedo_passes),
        albedo_to_image,
        partial(save_image, output_path=output_path),
        error_message=f"Could not write albedo map to {output_path}",
    )


def main(argv: Sequence[str] | None = None) -> int:
    arguments = build_parser().parse_args(argv)
    settings = settings_from_arguments(arguments, get_settings())
    configure_logging(settings.verbose)
    settings.log_configuration()

    try:
        output = write_normal_map(arguments.images, settings)
        logger.info(f"Normal map written to {output}")
        if arguments.albedo_output:
            output = write_albedo(arguments.images, arguments.albedo_output, settings)
            logger.info(f"Albedo map written to {output}")
    except ReconstructionError as error:
        logger.error(f"{error}: {error.__cause__}" if error.__cause__ else str(error))
        return EXIT_FAILURE
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
