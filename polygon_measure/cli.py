"""Command-line entry point for polygon-measure.

This module is purely the wiring layer between the command line and the
package: it reads a file, hands it to a ``MeasurementSession`` and prints
what the session measured. Import errors become a one-line notice on
stderr and a non-zero exit status.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from polygon_measure import __version__
from polygon_measure.core.config import ConfigValidationError, MeasureConfig
from polygon_measure.crs_detect import detect_crs
from polygon_measure.import_geojson import (
    DocumentImportError,
    load_document,
    parse_document,
    read_document,
)
from polygon_measure.measure import AreaUnit, LengthUnit
from polygon_measure.models.report import ImportReport
from polygon_measure.session import MeasurementSession

logger = logging.getLogger("polygon_measure.cli")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_config() -> MeasureConfig:
    try:
        return MeasureConfig.from_env()
    except (ConfigValidationError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc


def _notice(exc: DocumentImportError) -> click.ClickException:
    logger.warning("Import failed | %s", exc.to_error_dict())
    return click.ClickException(f"{exc.user_message}: {exc.message}")


@click.group()
@click.version_option(__version__, prog_name="polygon-measure")
def main() -> None:
    """Geodesic area and edge lengths of GeoJSON polygons."""


@main.command(name="measure")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--area-unit",
    type=click.Choice([u.value for u in AreaUnit]),
    default=None,
    help="Area unit (default from AREA_UNIT, else auto).",
)
@click.option(
    "--length-unit",
    type=click.Choice([u.value for u in LengthUnit]),
    default=None,
    help="Length unit (default from LENGTH_UNIT, else auto).",
)
@click.option("--json", "output_json", is_flag=True, help="Print the report as JSON.")
@click.option("--verbose", "-v", is_flag=True, help="Log pipeline details.")
def measure_command(
    path: Path,
    area_unit: str | None,
    length_unit: str | None,
    output_json: bool,
    verbose: bool,
) -> None:
    """Import a GeoJSON file and print each polygon's area and edge lengths.

    Examples:
        polygon-measure measure fields.geojson
        polygon-measure measure fields.geojson --area-unit ha --json
    """
    _configure_logging(verbose)
    session = MeasurementSession(_load_config())
    session.set_units(area_unit=area_unit, length_unit=length_unit)

    try:
        text = read_document(path)
        result = load_document(text, config=session.config, source_filename=path.name)
    except DocumentImportError as exc:
        raise _notice(exc) from exc

    for polygon in result.polygons:
        session.add_polygon(polygon)

    report = ImportReport.from_session(
        session,
        crs_guess=result.crs_guess,
        source_file=path.name,
    )
    if output_json:
        click.echo(report.to_json())
        return

    crs = report.crs
    click.echo(
        f"{path.name}: {len(report.polygons)} polygon(s), source CRS {crs.crs} ({crs.method})"
    )
    if crs.fallback:
        click.echo(f"note: CRS not declared and coordinates inconclusive, assumed {crs.crs}")
    for entry in report.polygons:
        click.echo(f"[{entry.polygon_id}] {entry.name}  {entry.area_label}")
        for idx, label in enumerate(entry.edge_labels, start=1):
            click.echo(f"    edge {idx}: {label}")


@main.command(name="detect-crs")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--verbose", "-v", is_flag=True, help="Log detection details.")
def detect_crs_command(path: Path, verbose: bool) -> None:
    """Print the CRS detected for a GeoJSON file."""
    _configure_logging(verbose)
    config = _load_config()
    try:
        document = parse_document(read_document(path))
    except DocumentImportError as exc:
        raise _notice(exc) from exc

    guess = detect_crs(
        document,
        max_features=config.crs_sample_max_features,
        max_coords=config.crs_sample_max_coords,
        source_filename=path.name,
    )
    click.echo(f"{guess.crs} ({guess.method}: {guess.detail})")


if __name__ == "__main__":
    main()
