"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.table import Table

from .crop.frame import CropFramePolicy
from .crop.geometry import Point, Size
from .crop.session import CropOptions, begin_session
from .errors import ThreadCropError
from .render.renderer import CropFailure
from .settings import SettingsManager
from .storage import DirectoryImageStore, FileImageSource

app = typer.Typer(help="Pan-and-zoom square cropping for wardrobe photos")


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ThreadCropError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


def _parse_pair(text: str, separator: str, label: str) -> tuple[float, float]:
    first, sep, second = text.lower().partition(separator)
    try:
        if not sep:
            raise ValueError(text)
        return float(first), float(second)
    except ValueError as exc:
        raise typer.BadParameter(f"{label} must look like A{separator}B, got {text!r}") from exc


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _options(settings: Optional[Path], policy: Optional[str], size: Optional[int]) -> CropOptions:
    if settings is not None:
        manager = SettingsManager(settings)
        manager.load(persist=False)
        options = manager.crop_options()
    else:
        options = CropOptions()
    if policy is not None:
        try:
            parsed = CropFramePolicy.parse(policy)
        except ValueError as exc:
            raise typer.BadParameter(f"unknown frame policy {policy!r}") from exc
        options = replace(options, policy=parsed)
    if size is not None:
        options = replace(options, output_size=(size, size))
    return options


@app.command()
@_handle_errors
def crop(
    source: Path = typer.Argument(..., exists=True, dir_okay=False),
    destination: Path = typer.Argument(...),
    viewport: str = typer.Option("390x600", help="Viewport size as WIDTHxHEIGHT"),
    zoom: float = typer.Option(1.0, help="Pinch factor applied after framing"),
    pan: str = typer.Option("0,0", help="Drag translation as X,Y in viewport units"),
    policy: Optional[str] = typer.Option(None, help="Frame policy, e.g. fraction:0.7 or margin:40"),
    size: Optional[int] = typer.Option(None, help="Square output side in pixels"),
    settings: Optional[Path] = typer.Option(None, help="Settings JSON to read options from"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Frame SOURCE in a simulated viewport, replay a pinch and drag, save the crop.

    When DESTINATION is an existing directory the crop is stored there as
    ``<uuid>.jpg``.
    """

    _configure_logging(verbose)
    view_w, view_h = _parse_pair(viewport, "x", "viewport")
    pan_x, pan_y = _parse_pair(pan, ",", "pan")
    image = FileImageSource(source).capture()
    session = begin_session(image, Size(view_w, view_h), **_session_kwargs(_options(settings, policy, size)))

    session.on_magnify(zoom)
    session.on_magnify_end()
    session.on_drag(Point(pan_x, pan_y))
    session.on_drag_end()

    outcome = session.commit()
    if isinstance(outcome, CropFailure):
        typer.echo(f"Error: crop failed ({outcome.reason.value}): {outcome.message}", err=True)
        raise typer.Exit(1)
    if destination.is_dir():
        store = DirectoryImageStore(destination)
        identifier = store.save(outcome.image)
        if identifier is None:
            typer.echo(f"Error: could not store crop in {destination}", err=True)
            raise typer.Exit(1)
        destination = store.path_for(identifier)
    else:
        destination.parent.mkdir(parents=True, exist_ok=True)
        outcome.image.save(destination)
    rect = outcome.source_rect
    print(
        f"[green]Saved {outcome.size[0]}x{outcome.size[1]} crop to {destination} "
        f"from ({rect.x:.1f}, {rect.y:.1f}, {rect.width:.1f}, {rect.height:.1f})"
    )


@app.command()
@_handle_errors
def inspect(
    source: Path = typer.Argument(..., exists=True, dir_okay=False),
    viewport: str = typer.Option("390x600", help="Viewport size as WIDTHxHEIGHT"),
    policy: Optional[str] = typer.Option(None, help="Frame policy, e.g. fraction:0.7 or margin:40"),
) -> None:
    """Print the derived crop geometry for SOURCE without rendering."""

    view_w, view_h = _parse_pair(viewport, "x", "viewport")
    image = FileImageSource(source).capture()
    session = begin_session(image, Size(view_w, view_h), **_session_kwargs(_options(None, policy, None)))
    layout = session.layout
    mapping = session.current_mapping()
    if layout is None or mapping is None:
        typer.echo("Error: source or viewport has a zero dimension", err=True)
        raise typer.Exit(1)

    table = Table(title=str(source))
    table.add_column("Quantity")
    table.add_column("Value")
    upright = image.upright_size
    table.add_row("Upright source", f"{upright.width:g} x {upright.height:g}")
    table.add_row("Orientation", str(image.orientation))
    table.add_row("Rendered size", f"{layout.rendered_size.width:.2f} x {layout.rendered_size.height:.2f}")
    frame = layout.frame
    table.add_row("Crop frame", f"({frame.x:.2f}, {frame.y:.2f}) {frame.width:.2f} x {frame.height:.2f}")
    table.add_row("Coverage scale", f"{layout.coverage_scale:.4f}")
    rect = mapping.source_rect
    table.add_row("Source rect", f"({rect.x:.1f}, {rect.y:.1f}) {rect.width:.1f} x {rect.height:.1f}")
    print(table)


def _session_kwargs(options: CropOptions) -> dict:
    return {
        "policy": options.policy,
        "output_size": options.output_size,
        "eager_initial_clamp": options.eager_initial_clamp,
        "max_zoom": options.max_zoom,
        "fallback_to_full_image": options.fallback_to_full_image,
    }


if __name__ == "__main__":
    app()
