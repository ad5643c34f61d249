"""Command line interface for the ROI color coder."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from PIL import Image, UnidentifiedImageError
from rich.console import Console
from rich.table import Table

from roicoder.libs.lut import InvalidLUTError, available_luts, get_lut
from roicoder.logging_utils import configure_logging

from ..core.config import load_config
from ..core.engine import ColorCodingEngine
from ..core.errors import ColorCoderError
from ..core.inputs import load_measurements, load_regions
from ..core.reporting import write_jsonl, write_markdown

LOG_PATH = configure_logging("roi_color_coder")
logger = logging.getLogger(__name__)
logger.info("ROI color coder logging initialised → %s", LOG_PATH)

app = typer.Typer(help="Color-code ROIs by measurement and render a matching legend.")
console = Console()


@app.command()
def apply(
    image: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="Image the regions are painted onto."
    ),
    regions_path: Path = typer.Option(
        ..., "--regions", "-r", exists=True, dir_okay=False, help="JSON list of regions."
    ),
    measurements_path: Path = typer.Option(
        ...,
        "--measurements",
        "-m",
        exists=True,
        dir_okay=False,
        help="CSV measurement table keyed by region id.",
    ),
    column: str = typer.Option(..., "--column", "-c", help="Measurement column to color by."),
    id_column: str = typer.Option("id", "--id-column", help="Column holding region ids."),
    lut: Optional[str] = typer.Option(None, "--lut", help="Built-in LUT name (see `luts`)."),
    lut_file: Optional[Path] = typer.Option(
        None, "--lut-file", exists=True, dir_okay=False, help="Custom LUT file (.lut or text)."
    ),
    reverse_lut: Optional[bool] = typer.Option(
        None, "--reverse-lut/--no-reverse-lut", help="Invert the LUT."
    ),
    mode: Optional[str] = typer.Option(
        None, "--mode", help="LUT sampling mode (discrete, continuous)."
    ),
    value_range: Optional[str] = typer.Option(
        None, "--range", help="Fixed range as MIN,MAX (keeps scales comparable across images)."
    ),
    auto_range: bool = typer.Option(
        False, "--auto-range", help="Ignore any configured default range override."
    ),
    clamp: Optional[str] = typer.Option(
        None, "--clamp", help="Clamp the range to percentiles LOW,HIGH (e.g. 5,95)."
    ),
    no_clamp: bool = typer.Option(
        False, "--no-clamp", help="Ignore any configured default percentile clamp."
    ),
    no_data: Optional[str] = typer.Option(
        None, "--no-data", help="Policy for regions without data (skip, fixed_color)."
    ),
    no_data_color: Optional[str] = typer.Option(
        None, "--no-data-color", help="Color for regions without data (#rrggbb or R,G,B)."
    ),
    style: Optional[str] = typer.Option(None, "--style", help="Paint style (fill, outline)."),
    stroke_width: Optional[int] = typer.Option(
        None, "--stroke-width", help="Outline width in pixels."
    ),
    opacity: Optional[float] = typer.Option(None, "--opacity", help="Paint opacity 0..1."),
    ticks: Optional[int] = typer.Option(None, "--ticks", help="Number of legend ticks."),
    decimals: Optional[int] = typer.Option(
        None, "--decimals", help="Decimal places of legend labels (default: automatic)."
    ),
    scientific: Optional[bool] = typer.Option(
        None,
        "--scientific/--no-scientific",
        help="Force scientific notation on or off (default: automatic).",
    ),
    legend_length: Optional[int] = typer.Option(
        None, "--legend-length", help="Ramp length in pixels."
    ),
    legend_thickness: Optional[int] = typer.Option(
        None, "--legend-thickness", help="Ramp thickness in pixels."
    ),
    legend_orientation: Optional[str] = typer.Option(
        None, "--legend-orientation", help="Legend orientation (vertical, horizontal)."
    ),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Directory for the painted image, legend and reports."
    ),
) -> None:
    """Paint IMAGE's regions by measurement and write the legend and reports."""

    overrides: dict[str, object] = {
        "lut": lut,
        "lut_path": lut_file,
        "reverse_lut": reverse_lut,
        "mode": mode,
        "range_override": value_range.split(",") if value_range else None,
        "auto_range": auto_range,
        "clamp_percentile": clamp.split(",") if clamp else None,
        "no_clamp": no_clamp,
        "no_data_policy": no_data,
        "no_data_color": no_data_color,
        "fill_style": style,
        "stroke_width": stroke_width,
        "opacity": opacity,
        "tick_count": ticks,
        "decimal_places": decimals,
        "scientific": scientific,
        "legend_length": legend_length,
        "legend_thickness": legend_thickness,
        "legend_orientation": legend_orientation,
        "output_dir": output_dir,
    }

    try:
        config = load_config(**{k: v for k, v in overrides.items() if v is not None})
        regions = load_regions(regions_path)
        measurements = load_measurements(measurements_path, column, id_column=id_column)
    except (ColorCoderError, ValueError, OSError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    logger.info(
        "color_coder_run_config",
        extra={
            "event_type": "config",
            "image": str(image),
            "regions": len(regions),
            "column": column,
            "lut": str(config.lut_path or config.lut),
            "mode": config.mode.value,
            "range_override": config.range_override,
            "clamp_percentile": config.clamp_percentile,
            "no_data_policy": config.no_data_policy.value,
        },
    )

    try:
        with Image.open(image) as source:
            canvas = source.convert("RGBA" if "A" in source.getbands() else "RGB")
    except (UnidentifiedImageError, OSError) as exc:
        typer.echo(f"Error: cannot read image {image}: {exc}", err=True)
        raise typer.Exit(1)

    engine = ColorCodingEngine(config)
    try:
        result = engine.run(regions, measurements, canvas)
    except (ColorCoderError, InvalidLUTError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)

    out_dir = config.output_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    stem = image.stem
    coded_path = out_dir / f"{stem}_coded.png"
    legend_path = out_dir / f"{stem}_legend.png"
    jsonl_path = out_dir / f"{stem}_regions.jsonl"
    summary_path = out_dir / f"{stem}_summary.md"

    canvas.save(coded_path)
    result.legend.image.save(legend_path)
    write_jsonl(result, regions, measurements, jsonl_path)
    write_markdown(result, regions, measurements, summary_path)

    assignment = result.assignment
    typer.echo(
        f"Colored {len(assignment.normalized)} region(s); "
        f"no data: {len(assignment.no_data)}; skipped: {len(assignment.skipped)}"
    )
    typer.echo(
        f"Range: {result.value_range.minimum:g} – {result.value_range.maximum:g}"
        f" | Legend: {', '.join(result.legend.labels)}"
    )
    for note in result.notes:
        typer.echo(f"  • {note}")
    typer.echo(
        f"\nPainted image → {coded_path}\nLegend → {legend_path}"
        f"\nDetailed JSONL → {jsonl_path}\nMarkdown summary → {summary_path}"
    )


@app.command("luts")
def list_luts() -> None:
    """List the built-in LUT catalog."""

    table = Table(title="Built-in LUTs")
    table.add_column("Name")
    table.add_column("Entries", justify="right")
    table.add_column("First", justify="center")
    table.add_column("Last", justify="center")
    for name in available_luts():
        lut = get_lut(name)
        table.add_row(
            name,
            str(len(lut)),
            "#{:02x}{:02x}{:02x}".format(*lut.colors[0]),
            "#{:02x}{:02x}{:02x}".format(*lut.colors[-1]),
        )
    console.print(table)


if __name__ == "__main__":
    app()
