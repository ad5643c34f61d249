"""Data models for ROI color coding."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from PIL import Image

from roicoder.libs.lut import RGB, LookupTable

Point = Tuple[float, float]


class SamplingMode(str, Enum):
    """How a normalized value is turned into a LUT color."""

    DISCRETE = "discrete"
    CONTINUOUS = "continuous"


class NoDataPolicy(str, Enum):
    """What happens to a region without a usable measurement."""

    SKIP = "skip"
    FIXED_COLOR = "fixed_color"


class FillStyle(str, Enum):
    FILL = "fill"
    OUTLINE = "outline"


class LegendOrientation(str, Enum):
    VERTICAL = "vertical"
    HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class Region:
    """A labeled region of interest: identifier plus polygon outline."""

    id: str
    points: Tuple[Point, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id))
        object.__setattr__(
            self,
            "points",
            tuple((float(x), float(y)) for x, y in self.points),
        )

    @classmethod
    def from_points(cls, region_id: str, points: Sequence[Sequence[float]]) -> "Region":
        return cls(id=region_id, points=tuple((p[0], p[1]) for p in points))

    def as_dict(self) -> Dict[str, object]:
        return {"id": self.id, "points": [list(point) for point in self.points]}


@dataclass(frozen=True)
class MeasurementRange:
    """Effective ``[minimum, maximum]`` used to normalize measurements."""

    minimum: float
    maximum: float
    clamp_percentile: Optional[Tuple[float, float]] = None
    overridden: bool = False

    @property
    def span(self) -> float:
        return self.maximum - self.minimum

    @property
    def is_degenerate(self) -> bool:
        return self.maximum == self.minimum

    def value_at(self, t: float) -> float:
        """Inverse of normalization: the measurement shown at ramp position *t*."""
        return self.minimum + t * self.span

    def as_dict(self) -> Dict[str, object]:
        return {
            "min": self.minimum,
            "max": self.maximum,
            "clamp_percentile": list(self.clamp_percentile)
            if self.clamp_percentile
            else None,
            "overridden": self.overridden,
        }


@dataclass(frozen=True)
class PaintStyle:
    """How resolved colors are painted onto the canvas."""

    fill_style: FillStyle = FillStyle.FILL
    stroke_width: int = 1
    opacity: float = 1.0

    def __post_init__(self) -> None:
        if self.stroke_width < 1:
            raise ValueError("Stroke width must be at least 1 pixel")
        if not 0.0 <= self.opacity <= 1.0:
            raise ValueError("Opacity must be in the range [0, 1]")


@dataclass(frozen=True)
class ColorAssignment:
    """Region id → RGB color for one run. Read-only once built."""

    colors: Mapping[str, RGB]
    normalized: Mapping[str, float] = field(default_factory=dict)
    no_data: Tuple[str, ...] = ()
    skipped: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", MappingProxyType(dict(self.colors)))
        object.__setattr__(self, "normalized", MappingProxyType(dict(self.normalized)))
        object.__setattr__(self, "no_data", tuple(self.no_data))
        object.__setattr__(self, "skipped", tuple(self.skipped))

    def __getitem__(self, region_id: str) -> RGB:
        return self.colors[region_id]

    def __contains__(self, region_id: object) -> bool:
        return region_id in self.colors

    def __len__(self) -> int:
        return len(self.colors)

    def get(self, region_id: str, default: Optional[RGB] = None) -> Optional[RGB]:
        return self.colors.get(region_id, default)

    def to_json(self) -> Dict[str, object]:
        return {
            "colors": {key: list(value) for key, value in self.colors.items()},
            "normalized": dict(self.normalized),
            "no_data": list(self.no_data),
            "skipped": list(self.skipped),
        }


@dataclass(frozen=True)
class LegendTick:
    position: float
    value: float
    label: str
    color: RGB

    def as_dict(self) -> Dict[str, object]:
        return {
            "position": self.position,
            "value": self.value,
            "label": self.label,
            "color": list(self.color),
        }


@dataclass(frozen=True)
class Legend:
    """Labeled color ramp built from the same range and LUT as the regions."""

    ticks: Tuple[LegendTick, ...]
    image: Image.Image
    value_range: MeasurementRange
    lut_name: str
    mode: SamplingMode
    bar_box: Tuple[int, int, int, int] = (0, 0, 0, 0)

    @property
    def is_swatch(self) -> bool:
        return self.value_range.is_degenerate

    @property
    def labels(self) -> List[str]:
        return [tick.label for tick in self.ticks]

    def to_json(self) -> Dict[str, object]:
        return {
            "range": self.value_range.as_dict(),
            "lut": self.lut_name,
            "mode": self.mode.value,
            "swatch": self.is_swatch,
            "size": list(self.image.size),
            "ticks": [tick.as_dict() for tick in self.ticks],
        }


@dataclass
class ColorCodingResult:
    """Everything produced by one color coding run."""

    value_range: MeasurementRange
    lut: LookupTable
    assignment: ColorAssignment
    legend: Legend
    painted: bool = False
    notes: List[str] = field(default_factory=list)
