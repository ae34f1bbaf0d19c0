"""
Typer CLI for placing objects and reading positions back.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import typer

from .. import constants
from ..altitude import AltitudeResolver
from ..common_core import GeographicPosition, Vector3, parse_location, parse_offset
from ..placement import PlacementPipeline

log = logging.getLogger(__name__)

app = typer.Typer(help="Place 3D scene objects on the WGS84 ellipsoid")

_DEFAULT_LOCATION = f"{constants.DEFAULT_ANCHOR['lat']}, {constants.DEFAULT_ANCHOR['lng']}"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _build_pipeline(precise: bool, strategy: str, api_key: Optional[str]) -> PlacementPipeline:
    resolver = None
    if precise:
        log.info("Resolving precise altitude from elevation and geoid services")
        resolver = AltitudeResolver.create(api_key=api_key)
    return PlacementPipeline(resolver=resolver, strategy=strategy)


def _anchor(location: str, altitude: float) -> GeographicPosition:
    lat, lng = parse_location(location)
    return GeographicPosition(latitude_deg=lat, longitude_deg=lng, altitude_m=altitude)


def _fail(exc: Exception) -> None:
    typer.echo(f"error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command("place")
def cli_place(
    location: str = typer.Argument(_DEFAULT_LOCATION, help='Anchor as "lat, lng"'),
    altitude: float = typer.Option(constants.DEFAULT_ANCHOR["altitude"], help="Anchor altitude above the ellipsoid (m)"),
    offset: str = typer.Option("0,0,0", help='Local offset as "x,y,z" meters'),
    precise: bool = typer.Option(False, help="Resolve altitude from elevation + geoid services"),
    strategy: str = typer.Option(constants.ORIENTATION_STRATEGY, help="tangent_frame | radial_axis_angle"),
    api_key: Optional[str] = typer.Option(None, help="Google Maps API key"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print the ECEF position and orientation of an object as JSON."""
    _configure_logging(verbose)
    try:
        pipeline = _build_pipeline(precise, strategy, api_key)
        placement = pipeline.place_object(_anchor(location, altitude), parse_offset(offset), use_precise_altitude=precise)
    except (RuntimeError, ValueError) as exc:
        _fail(exc)
    typer.echo(json.dumps(placement.to_dict(), indent=2))


@app.command("export")
def cli_export(
    location: str = typer.Argument(_DEFAULT_LOCATION, help='Anchor as "lat, lng"'),
    altitude: float = typer.Option(constants.DEFAULT_ANCHOR["altitude"], help="Anchor altitude above the ellipsoid (m)"),
    offset: str = typer.Option("0,0,0", help='Local offset as "x,y,z" meters'),
    precise: bool = typer.Option(True, help="Resolve altitude from elevation + geoid services"),
    strategy: str = typer.Option(constants.ORIENTATION_STRATEGY, help="tangent_frame | radial_axis_angle"),
    api_key: Optional[str] = typer.Option(None, help="Google Maps API key"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Print the world transform an exporter should bake into a Y-up asset."""
    _configure_logging(verbose)
    try:
        pipeline = _build_pipeline(precise, strategy, api_key)
        placement = pipeline.bake_export_transform(
            _anchor(location, altitude), parse_offset(offset), use_precise_altitude=precise
        )
    except (RuntimeError, ValueError) as exc:
        _fail(exc)
    typer.echo(json.dumps(placement.to_dict(), indent=2))


@app.command("locate")
def cli_locate(
    x: float = typer.Argument(...),
    y: float = typer.Argument(...),
    z: float = typer.Argument(...),
) -> None:
    """Approximate lat/lng/altitude of an Earth-centered vector (display only)."""
    position = PlacementPipeline().local_to_geographic(Vector3(x, y, z))
    typer.echo(json.dumps(position.to_dict(), indent=2))


if __name__ == "__main__":
    app()
