"""Resolve per-region colors and paint them onto a canvas."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence, Union

from PIL import Image, ImageDraw

from roicoder.libs.lut import RGB, LookupTable

from .models import (
    ColorAssignment,
    FillStyle,
    MeasurementRange,
    NoDataPolicy,
    PaintStyle,
    Region,
    SamplingMode,
)
from .normalizer import is_missing, normalize
from .sampler import ModeLike, sample

logger = logging.getLogger(__name__)

DEFAULT_NO_DATA_COLOR: RGB = (128, 128, 128)


def index_measurements(measurements_by_id: Mapping[object, object]) -> Dict[str, object]:
    """Key measurements by ``str(id)`` so they match :class:`Region` ids."""
    return {str(key): value for key, value in measurements_by_id.items()}


def colorize(
    regions: Sequence[Region],
    measurements_by_id: Mapping[object, object],
    value_range: MeasurementRange,
    lut: LookupTable,
    mode: ModeLike = SamplingMode.CONTINUOUS,
    no_data_policy: Union[NoDataPolicy, str] = NoDataPolicy.SKIP,
    *,
    no_data_color: RGB = DEFAULT_NO_DATA_COLOR,
) -> ColorAssignment:
    """Map every region's measurement to a LUT color.

    Regions whose measurement is absent or non-finite are resolved through
    *no_data_policy*: left out of the assignment (``skip``) or given
    *no_data_color* (``fixed_color``).
    """

    policy = NoDataPolicy(no_data_policy)
    sampling = SamplingMode(mode)
    measurements = index_measurements(measurements_by_id)

    colors: Dict[str, RGB] = {}
    normalized: Dict[str, float] = {}
    no_data: List[str] = []
    skipped: List[str] = []

    for region in regions:
        value = measurements.get(region.id)
        if is_missing(value):
            logger.debug("No measurement for region %s (%r)", region.id, value)
            no_data.append(region.id)
            if policy is NoDataPolicy.FIXED_COLOR:
                colors[region.id] = tuple(no_data_color)  # type: ignore[assignment]
            else:
                skipped.append(region.id)
            continue

        t = normalize(float(value), value_range)  # type: ignore[arg-type]
        normalized[region.id] = t
        colors[region.id] = sample(lut, t, sampling)

    if no_data:
        logger.info(
            "regions_without_measurement",
            extra={
                "event_type": "no_data",
                "count": len(no_data),
                "policy": policy.value,
            },
        )

    return ColorAssignment(
        colors=colors,
        normalized=normalized,
        no_data=tuple(no_data),
        skipped=tuple(skipped),
    )


def paint_regions(
    canvas: Image.Image,
    regions: Sequence[Region],
    assignment: ColorAssignment,
    style: Optional[PaintStyle] = None,
) -> int:
    """Paint assigned colors onto *canvas* in region order (last drawn wins).

    The canvas is modified in place. Returns the number of regions painted.
    """

    style = style or PaintStyle()
    if canvas.mode not in {"RGB", "RGBA"}:
        raise ValueError(f"Canvas must be RGB or RGBA, got mode {canvas.mode!r}")

    alpha = int(round(style.opacity * 255))
    layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(layer)

    painted = 0
    for region in regions:
        color = assignment.get(region.id)
        if color is None:
            continue
        if len(region.points) < 2:
            logger.debug("Region %s has no drawable outline; skipping", region.id)
            continue
        rgba = (color[0], color[1], color[2], alpha)
        points = list(region.points)
        if style.fill_style is FillStyle.FILL and len(points) >= 3:
            draw.polygon(points, fill=rgba)
        else:
            draw.line(points + points[:1], fill=rgba, width=style.stroke_width, joint="curve")
        painted += 1

    if painted:
        base = canvas.convert("RGBA")
        composed = Image.alpha_composite(base, layer)
        canvas.paste(composed if canvas.mode == "RGBA" else composed.convert(canvas.mode))

    return painted
