"""CLI entry point for warranty-ocr."""

import logging
import sys
from datetime import datetime
from pathlib import Path

import click
import yaml

from . import build_validation_service
from .config import load_settings
from .domain.acquisition import preflight
from .domain.errors import ImageInvalidError
from .domain.extraction import extract_dates
from .domain.tolerance import check_tolerance

logger = logging.getLogger(__name__)

DATE_TYPE = click.DateTime(formats=["%Y-%m-%d"])


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-c", "--config", type=click.Path(exists=True), help="Config file path")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config: str | None) -> None:
    """Warranty OCR - invoice date validation."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = Path(config) if config else None


@cli.command()
@click.argument("image", type=click.Path(path_type=Path))
@click.argument("installation_date", type=DATE_TYPE)
@click.option("--yaml", "as_yaml", is_flag=True, help="Print the result as YAML")
@click.pass_context
def validate(
    ctx: click.Context, image: Path, installation_date: datetime, as_yaml: bool
) -> None:
    """Validate an invoice image against an installation date (YYYY-MM-DD)."""
    settings = load_settings(ctx.obj["config_path"])
    service = build_validation_service(settings)

    result = service.validate_warranty_by_ocr(image, installation_date.date())

    if as_yaml:
        click.echo(yaml.safe_dump(result.as_dict(), allow_unicode=True, sort_keys=False))
        return

    click.echo(f"status: {result.status.value}")
    if result.needs_review:
        click.echo("needs manual review")
    if result.matching_date:
        click.echo(f"matching_date: {result.matching_date.isoformat()}")
        click.echo(f"days_difference: {result.days_difference}")
    click.echo(f"extracted_dates: {', '.join(d.isoformat() for d in result.extracted_dates)}")
    click.echo(f"text_length: {len(result.raw_text)}")
    if result.error:
        click.echo(f"error: {result.error}", err=True)


@cli.command(name="extract-dates")
@click.argument("text")
@click.option("--installation-date", type=DATE_TYPE, help="Also apply the tolerance check")
@click.pass_context
def extract_dates_command(
    ctx: click.Context, text: str, installation_date: datetime | None
) -> None:
    """Extract candidate dates from a text snippet."""
    settings = load_settings(ctx.obj["config_path"])
    validation = settings.validation

    dates = extract_dates(
        text,
        min_year=validation.min_year,
        max_year=validation.max_year,
        min_token_length=validation.min_token_length,
    )
    click.echo(f"Found {len(dates)} dates")
    for d in dates:
        click.echo(f"  {d.isoformat()}")

    if installation_date:
        decision = check_tolerance(installation_date, dates, validation.tolerance_days)
        click.echo(f"status: {decision.status.value}")
        if decision.matching_date:
            click.echo(
                f"match: {decision.matching_date.isoformat()} "
                f"({decision.days_difference} days difference)"
            )


@cli.command(name="check-image")
@click.argument("image", type=click.Path(path_type=Path))
@click.pass_context
def check_image(ctx: click.Context, image: Path) -> None:
    """Run the pre-flight image checks only."""
    settings = load_settings(ctx.obj["config_path"])
    try:
        size = preflight(image, settings.images)
    except ImageInvalidError as e:
        click.echo(f"Invalid: {e}", err=True)
        sys.exit(1)
    click.echo(f"OK: {image.name} ({round(size / 1024)}KB)")


if __name__ == "__main__":
    cli()
