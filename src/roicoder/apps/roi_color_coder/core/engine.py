"""Core execution engine for the ROI color coder."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from PIL import Image

from roicoder.libs.lut import LookupTable, get_lut, load_lut

from .colorizer import colorize, index_measurements, paint_regions
from .config import ColorCoderConfig
from .formatting import LabelFormatter
from .legend import render_legend
from .models import ColorCodingResult, MeasurementRange, PaintStyle, Region
from .normalizer import compute_range

logger = logging.getLogger(__name__)


class ColorCodingEngine:
    """Coordinate range computation, colorization, painting and the legend.

    Every fatal condition is checked before the canvas is touched, so a run
    either paints all resolvable regions and builds the legend, or raises
    and leaves the canvas unchanged.
    """

    def __init__(
        self,
        config: ColorCoderConfig,
        *,
        lut: Optional[LookupTable] = None,
    ) -> None:
        self.config = config
        self._lut = lut

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def lut(self) -> LookupTable:
        if self._lut is None:
            self._lut = self._resolve_lut()
        return self._lut

    def run(
        self,
        regions: Sequence[Region],
        measurements_by_id: Mapping[object, object],
        canvas: Optional[Image.Image] = None,
    ) -> ColorCodingResult:
        """Color-code *regions* and, when given, paint them onto *canvas*."""

        lut, value_range, style, formatter = self._validate(
            regions, measurements_by_id, canvas
        )

        logger.info(
            "color_coding_start",
            extra={
                "event_type": "color_coding_start",
                "regions": len(regions),
                "lut": lut.name,
                "mode": self.config.mode.value,
                "range": [value_range.minimum, value_range.maximum],
                "clamp_percentile": self.config.clamp_percentile,
            },
        )

        assignment = colorize(
            regions,
            measurements_by_id,
            value_range,
            lut,
            self.config.mode,
            self.config.no_data_policy,
            no_data_color=self.config.no_data_color,
        )

        legend = render_legend(
            value_range,
            lut,
            self.config.mode,
            self.config.tick_count,
            formatter,
            length=self.config.legend_length,
            thickness=self.config.legend_thickness,
            orientation=self.config.legend_orientation,
        )

        result = ColorCodingResult(
            value_range=value_range,
            lut=lut,
            assignment=assignment,
            legend=legend,
        )

        if canvas is not None:
            painted = paint_regions(canvas, regions, assignment, style)
            result.painted = True
            logger.debug("Painted %d of %d regions", painted, len(regions))

        if value_range.is_degenerate:
            result.notes.append(
                "All measurements share one value; every region uses the midpoint color"
            )
        if assignment.skipped:
            result.notes.append(
                f"{len(assignment.skipped)} region(s) without measurement were skipped"
            )
        elif assignment.no_data:
            result.notes.append(
                f"{len(assignment.no_data)} region(s) without measurement use the no-data color"
            )

        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _resolve_lut(self) -> LookupTable:
        if self.config.lut_path is not None:
            lut = load_lut(self.config.lut_path)
        else:
            lut = get_lut(self.config.lut)
        return lut.reversed() if self.config.reverse_lut else lut

    def _validate(
        self,
        regions: Sequence[Region],
        measurements_by_id: Mapping[object, object],
        canvas: Optional[Image.Image],
    ) -> tuple[LookupTable, MeasurementRange, PaintStyle, LabelFormatter]:
        lut = self.lut
        measurements = index_measurements(measurements_by_id)
        value_range = compute_range(
            (measurements.get(region.id) for region in regions),
            override=self.config.range_override,
            clamp_percentile=self.config.clamp_percentile,
        )
        if self.config.tick_count < 1:
            raise ValueError("Tick count must be a positive integer")
        style = PaintStyle(
            fill_style=self.config.fill_style,
            stroke_width=self.config.stroke_width,
            opacity=self.config.opacity,
        )
        formatter = LabelFormatter(
            decimal_places=self.config.decimal_places,
            scientific=self.config.scientific,
        )
        if canvas is not None and canvas.mode not in {"RGB", "RGBA"}:
            raise ValueError(f"Canvas must be RGB or RGBA, got mode {canvas.mode!r}")
        return lut, value_range, style, formatter
