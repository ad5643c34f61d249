"""Legend rendering: a labeled color ramp matching the region colors."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from roicoder.libs.lut import RGB, LookupTable

from .formatting import LabelFormatter
from .models import Legend, LegendOrientation, LegendTick, MeasurementRange, SamplingMode
from .normalizer import DEGENERATE_POSITION
from .sampler import ModeLike, sample_many

logger = logging.getLogger(__name__)

DEFAULT_LENGTH = 256
DEFAULT_THICKNESS = 20
TICK_LENGTH = 5
LABEL_GAP = 3
MARGIN = 8
BACKGROUND: RGB = (255, 255, 255)
FOREGROUND: RGB = (0, 0, 0)


def tick_positions(tick_count: int) -> List[float]:
    """Evenly spaced positions across ``[0, 1]``; a single tick sits mid-ramp."""
    if tick_count < 1:
        raise ValueError("Tick count must be a positive integer")
    if tick_count == 1:
        return [DEGENERATE_POSITION]
    last = tick_count - 1
    return [index / last for index in range(tick_count)]


def build_ticks(
    value_range: MeasurementRange,
    lut: LookupTable,
    mode: ModeLike,
    tick_count: int,
    label_formatter: Optional[LabelFormatter] = None,
) -> Tuple[LegendTick, ...]:
    formatter = label_formatter or LabelFormatter()
    if value_range.is_degenerate:
        positions = [DEGENERATE_POSITION]
        values = [value_range.minimum]
    else:
        positions = tick_positions(tick_count)
        values = [value_range.value_at(t) for t in positions]
    labels = formatter.format_all(values)
    colors = sample_many(lut, positions, mode)
    return tuple(
        LegendTick(position=t, value=v, label=label, color=color)
        for t, v, label, color in zip(positions, values, labels, colors)
    )


def _text_size(draw: ImageDraw.ImageDraw, text: str, font) -> Tuple[int, int]:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    return right - left, bottom - top


def _ramp_pixels(
    lut: LookupTable, mode: ModeLike, length: int, thickness: int, orientation: LegendOrientation
) -> np.ndarray:
    # One LUT sample per pixel along the long axis.
    positions = [index / (length - 1) for index in range(length)]
    colors = np.asarray(sample_many(lut, positions, mode), dtype=np.uint8)
    if orientation is LegendOrientation.VERTICAL:
        # Maximum at the top.
        return np.repeat(colors[::-1][:, None, :], thickness, axis=1)
    return np.repeat(colors[None, :, :], thickness, axis=0)


def _swatch_pixels(color: RGB, thickness: int) -> np.ndarray:
    return np.full((thickness, thickness, 3), color, dtype=np.uint8)


def render_legend(
    value_range: MeasurementRange,
    lut: LookupTable,
    mode: ModeLike = SamplingMode.CONTINUOUS,
    tick_count: int = 5,
    label_formatter: Optional[LabelFormatter] = None,
    *,
    length: int = DEFAULT_LENGTH,
    thickness: int = DEFAULT_THICKNESS,
    orientation: Union[LegendOrientation, str] = LegendOrientation.VERTICAL,
) -> Legend:
    """Render the color ramp and its labeled ticks.

    A degenerate range renders a single labeled swatch instead of a ramp.
    """

    if tick_count < 1:
        raise ValueError("Tick count must be a positive integer")
    if length < 2:
        raise ValueError("Legend length must be at least 2 pixels")
    if thickness < 1:
        raise ValueError("Legend thickness must be at least 1 pixel")

    sampling = SamplingMode(mode)
    layout = LegendOrientation(orientation)
    ticks = build_ticks(value_range, lut, sampling, tick_count, label_formatter)

    if value_range.is_degenerate:
        bar = _swatch_pixels(ticks[0].color, thickness)
    else:
        bar = _ramp_pixels(lut, sampling, length, thickness, layout)
    bar_image = Image.fromarray(bar)
    bar_w, bar_h = bar_image.size

    font = ImageFont.load_default()
    probe = ImageDraw.Draw(Image.new("RGB", (1, 1)))
    label_sizes = [_text_size(probe, tick.label, font) for tick in ticks]
    max_w = max(w for w, _ in label_sizes)
    max_h = max(h for _, h in label_sizes)

    if layout is LegendOrientation.VERTICAL:
        width = MARGIN + bar_w + TICK_LENGTH + LABEL_GAP + max_w + MARGIN
        height = bar_h + 2 * max(MARGIN, max_h)
        origin = (MARGIN, max(MARGIN, max_h))
    else:
        width = bar_w + 2 * max(MARGIN, max_w // 2 + 1)
        height = MARGIN + bar_h + TICK_LENGTH + LABEL_GAP + max_h + MARGIN
        origin = (max(MARGIN, max_w // 2 + 1), MARGIN)

    image = Image.new("RGB", (width, height), BACKGROUND)
    image.paste(bar_image, origin)
    draw = ImageDraw.Draw(image)
    x0, y0 = origin

    for tick, (text_w, text_h) in zip(ticks, label_sizes):
        if layout is LegendOrientation.VERTICAL:
            offset = round((1.0 - tick.position) * (bar_h - 1))
            y = y0 + offset
            x = x0 + bar_w
            draw.line([(x, y), (x + TICK_LENGTH, y)], fill=FOREGROUND)
            draw.text(
                (x + TICK_LENGTH + LABEL_GAP, y - text_h // 2),
                tick.label,
                fill=FOREGROUND,
                font=font,
            )
        else:
            offset = round(tick.position * (bar_w - 1))
            x = x0 + offset
            y = y0 + bar_h
            draw.line([(x, y), (x, y + TICK_LENGTH)], fill=FOREGROUND)
            draw.text(
                (x - text_w // 2, y + TICK_LENGTH + LABEL_GAP),
                tick.label,
                fill=FOREGROUND,
                font=font,
            )

    logger.debug(
        "Rendered %s legend with %d tick(s) for range [%s, %s]",
        "swatch" if value_range.is_degenerate else "ramp",
        len(ticks),
        value_range.minimum,
        value_range.maximum,
    )

    return Legend(
        ticks=ticks,
        image=image,
        value_range=value_range,
        lut_name=lut.name,
        mode=sampling,
        bar_box=(x0, y0, x0 + bar_w, y0 + bar_h),
    )
