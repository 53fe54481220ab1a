"""High-level command helpers for designing parachutes from the terminal."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Sequence

from exporters.patterns import SUPPORTED_FORMATS, PatternExporter
from parachute.design import EXPORT_RESOLUTION, ChuteDesign
from parachute.errors import ChuteError
from schemas.validators import SchemaValidationError, dump_design, load_design

from .logging_config import setup_logging

__all__ = [
    "build_cli",
    "load_design_or_default",
    "run_evaluate",
    "run_export",
    "run_init",
    "run_report",
]

logger = logging.getLogger(__name__)


def load_design_or_default(path: Path | None) -> ChuteDesign:
    """Load the design at *path*, or the built-in default design."""

    if path is None:
        logger.info("No design given, using the default design")
        return ChuteDesign.default()
    logger.info("Loading design from %s", path)
    return load_design(path)


def run_evaluate(design: ChuteDesign, *, imperial: bool = False) -> bool:
    """Print every variable and section of *design*; return whether all evaluated."""

    evaluation = design.evaluate()
    units = [item.unit for item in design.inputs]
    units.extend(item.display_unit for item in design.parameters)

    print(f"Design: {design.name}")
    print("Variables:")
    for status, unit in zip(evaluation.variables, units):
        if status.ok:
            shown = unit.to_display(status.value, imperial)
            print(f"  {status.id} = {shown:g} {unit.display_label(imperial)}".rstrip())
        else:
            print(f"  {status.id}: {status.message}")

    print("Sections:")
    for index, (section, result) in enumerate(zip(design.sections, evaluation.sections), start=1):
        begin, end = result.curve.to_points(2)
        print(
            f"  section{index}: ({begin[0]:g}, {begin[1]:g}) -> ({end[0]:g}, {end[1]:g}), "
            f"{section.gores} gores, {section.fabric.name_weight(imperial)}"
        )
        for issue in result.issues:
            print(f"    Error: {issue.error}")
    return evaluation.ok


def run_report(design: ChuteDesign, *, resolution: int = EXPORT_RESOLUTION) -> float:
    """Print pattern piece areas and the fabric mass; return the mass in kilograms."""

    collection = design.pattern_pieces(resolution)
    print(f"Design: {design.name}")
    for piece, count in collection:
        print(
            f"  {piece.name} x{count}: canopy {piece.chute_area:.4f} m^2, "
            f"fabric {piece.fabric_area:.4f} m^2"
        )
        for warning in piece.warnings:
            print(f"    Warning: {warning}")
    mass = design.fabric_mass(resolution)
    print(f"Pieces to cut: {collection.piece_count()}")
    print(f"Canopy area: {collection.total_area():.4f} m^2")
    print(f"Fabric area: {collection.total_area(including_seams=True):.4f} m^2")
    print(f"Fabric mass: {mass * 1000.0:.1f} g")
    for step, instruction in enumerate(design.instructions, start=1):
        print(f"  {step}. {instruction}")
    return mass


def run_export(
    design: ChuteDesign,
    output_dir: Path,
    *,
    formats: Iterable[str] = SUPPORTED_FORMATS,
    resolution: int = EXPORT_RESOLUTION,
    scale: float = 1000.0,
) -> dict[str, Path]:
    """Write the pattern pieces of *design* to drawing files in *output_dir*."""

    collection = design.pattern_pieces(resolution)
    exporter = PatternExporter(scale=scale)
    created = exporter.export(
        collection,
        output_dir=output_dir,
        formats=formats,
        metadata={"design": design.name},
    )
    for fmt, path in created.items():
        print(f"Wrote {fmt.upper()} pattern to {path}")
    return created


def run_init(output: Path) -> Path:
    """Save the default design to *output* as a starting point."""

    path = dump_design(ChuteDesign.default(), output)
    print(f"Wrote default design to {path}")
    return path


def _add_design_argument(parser) -> None:
    parser.add_argument(
        "design",
        type=Path,
        nargs="?",
        help="Design document (JSON or YAML). Defaults to the built-in design.",
    )


def build_cli(argv: Sequence[str] | None = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(description="Parametric parachute designer")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-file", type=str, help="Also write log records to this file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    evaluate = subparsers.add_parser(
        "evaluate",
        help="Evaluate the inputs, parameters and sections of a design",
    )
    _add_design_argument(evaluate)
    evaluate.add_argument(
        "--imperial",
        action="store_true",
        help="Show lengths in feet and inches",
    )

    report = subparsers.add_parser(
        "report",
        help="Print pattern piece areas and fabric mass",
    )
    _add_design_argument(report)
    report.add_argument(
        "--resolution",
        type=int,
        default=EXPORT_RESOLUTION,
        help=f"Points per section curve (default: {EXPORT_RESOLUTION})",
    )

    export = subparsers.add_parser(
        "export",
        help="Export the pattern pieces of a design as drawing files",
    )
    _add_design_argument(export)
    export.add_argument(
        "--output",
        type=Path,
        default=Path("exports/patterns"),
        help="Directory where exported pattern files will be stored.",
    )
    export.add_argument(
        "--formats",
        nargs="+",
        choices=SUPPORTED_FORMATS,
        default=list(SUPPORTED_FORMATS),
        help="One or more formats to export (default: dxf svg).",
    )
    export.add_argument(
        "--resolution",
        type=int,
        default=EXPORT_RESOLUTION,
        help=f"Points per section curve (default: {EXPORT_RESOLUTION})",
    )
    export.add_argument(
        "--scale",
        type=float,
        default=1000.0,
        help="Drawing units per metre (default: 1000, millimetres).",
    )

    init = subparsers.add_parser(
        "init",
        help="Write the default design to a JSON or YAML file",
    )
    init.add_argument("output", type=Path, help="Destination design document")

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        if args.command == "init":
            run_init(args.output)
            return 0

        design = load_design_or_default(args.design)

        if args.command == "evaluate":
            if not run_evaluate(design, imperial=args.imperial):
                logger.warning("Some entries failed to evaluate and were replaced by 0.0")
            return 0

        if args.command == "report":
            run_report(design, resolution=args.resolution)
            return 0

        if args.command == "export":
            run_export(
                design,
                args.output,
                formats=args.formats,
                resolution=args.resolution,
                scale=args.scale,
            )
            return 0
    except SchemaValidationError as exc:
        logger.error("%s", exc)
        return 1
    except (ChuteError, OSError, ValueError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1

    parser.error(f"Unknown command: {args.command}")
    return 0
