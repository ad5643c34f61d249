"""Configuration helpers for the ROI color coder."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

import tomllib

from roicoder.libs.lut import RGB

from .errors import InvalidRangeError
from .models import FillStyle, LegendOrientation, NoDataPolicy, SamplingMode

logger = logging.getLogger(__name__)

_CONFIG_ENV_PREFIX = "ROICODER_ROI_COLOR_CODER__"


def _find_pyproject(start: Optional[Path] = None) -> Optional[Path]:
    """Locate the closest ``pyproject.toml`` relative to *start*."""

    current = (start or Path.cwd()).resolve()
    for candidate in [current, *current.parents]:
        pyproject = candidate / "pyproject.toml"
        if pyproject.exists():
            return pyproject
    return None


def _coerce_bool(value: object, default: Optional[bool]) -> Optional[bool]:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        if lowered in {"auto", "none", ""}:
            return None
    return default


def _coerce_int(value: object, default: Optional[int]) -> Optional[int]:
    if value is None:
        return default
    if isinstance(value, str) and value.strip().lower() in {"auto", "none", ""}:
        return None
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Ignoring non-integer setting value %r", value)
        return default


def _required_int(value: object, default: int) -> int:
    resolved = _coerce_int(value, default)
    return default if resolved is None else resolved


def _coerce_float(value: object, default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        logger.warning("Ignoring non-numeric setting value %r", value)
        return default


def _coerce_pair(value: object) -> Optional[Tuple[float, float]]:
    """Accept ``[a, b]`` lists or ``"a,b"`` strings; ``"none"`` clears the pair."""
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip().lower()
        if text in {"", "none", "auto", "off"}:
            return None
        parts = [part for part in text.replace(":", ",").split(",") if part.strip()]
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        raise ValueError(f"Expected a pair of numbers, got {value!r}")
    if len(parts) != 2:
        raise ValueError(f"Expected a pair of numbers, got {value!r}")
    return float(parts[0]), float(parts[1])


def parse_color(value: object) -> RGB:
    """Parse ``#rrggbb``, ``"r,g,b"`` or a 3-sequence into an RGB triple."""
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("#") and len(text) == 7:
            try:
                return (int(text[1:3], 16), int(text[3:5], 16), int(text[5:7], 16))
            except ValueError:
                raise ValueError(f"Invalid hex color {value!r}") from None
        parts = [part.strip() for part in text.split(",")]
    elif isinstance(value, (list, tuple)):
        parts = list(value)
    else:
        raise ValueError(f"Invalid color {value!r}")
    if len(parts) != 3:
        raise ValueError(f"Color must have three channels, got {value!r}")
    try:
        channels = tuple(int(part) for part in parts)
    except (TypeError, ValueError):
        raise ValueError(f"Color channels must be integers, got {value!r}") from None
    if any(not 0 <= channel <= 255 for channel in channels):
        raise ValueError(f"Color channels must be within 0..255, got {value!r}")
    return channels  # type: ignore[return-value]


def _as_path(value: object) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    if isinstance(value, str) and value.strip():
        return Path(value).expanduser()
    return None


@dataclass(frozen=True)
class ColorCoderSettings:
    """Default configuration values sourced from project metadata."""

    default_lut: str = "fire"
    default_lut_path: Optional[Path] = None
    default_reverse_lut: bool = False
    default_mode: str = SamplingMode.CONTINUOUS.value
    default_range: Optional[Tuple[float, float]] = None
    default_clamp_percentile: Optional[Tuple[float, float]] = None
    default_no_data_policy: str = NoDataPolicy.SKIP.value
    default_no_data_color: RGB = (128, 128, 128)
    default_fill_style: str = FillStyle.FILL.value
    default_stroke_width: int = 2
    default_opacity: float = 1.0
    default_tick_count: int = 5
    default_decimal_places: Optional[int] = None
    default_scientific: Optional[bool] = None
    default_legend_length: int = 256
    default_legend_thickness: int = 20
    default_legend_orientation: str = LegendOrientation.VERTICAL.value
    default_output_dir: Path = Path("outputs/roi_color_coder")


@dataclass(frozen=True)
class ColorCoderConfig:
    """Fully resolved runtime configuration for one color coding run."""

    lut: str
    lut_path: Optional[Path]
    reverse_lut: bool
    mode: SamplingMode
    range_override: Optional[Tuple[float, float]]
    clamp_percentile: Optional[Tuple[float, float]]
    no_data_policy: NoDataPolicy
    no_data_color: RGB
    fill_style: FillStyle
    stroke_width: int
    opacity: float
    tick_count: int
    decimal_places: Optional[int]
    scientific: Optional[bool]
    legend_length: int
    legend_thickness: int
    legend_orientation: LegendOrientation
    output_dir: Path


def _load_pyproject_settings(start: Optional[Path]) -> Dict[str, object]:
    pyproject = _find_pyproject(start)
    if not pyproject:
        return {}

    try:
        with pyproject.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Unable to read %s: %s", pyproject, exc)
        return {}

    tool_cfg = data.get("tool", {}).get("roicoder", {})
    if not isinstance(tool_cfg, dict):
        return {}

    coder_cfg = tool_cfg.get("roi_color_coder")
    return dict(coder_cfg) if isinstance(coder_cfg, dict) else {}


def _load_env_settings() -> Dict[str, object]:
    values: Dict[str, object] = {}
    for env_key, env_value in os.environ.items():
        if not env_key.startswith(_CONFIG_ENV_PREFIX):
            continue
        key = env_key[len(_CONFIG_ENV_PREFIX) :].lower()
        values[key] = env_value
    return values


def load_settings(start: Optional[Path] = None) -> ColorCoderSettings:
    """Load project defaults, applying environment overrides when present."""

    raw = _load_pyproject_settings(start)
    raw.update(_load_env_settings())
    defaults = ColorCoderSettings()

    no_data_color = defaults.default_no_data_color
    if raw.get("default_no_data_color") is not None:
        no_data_color = parse_color(raw["default_no_data_color"])

    return ColorCoderSettings(
        default_lut=str(raw.get("default_lut") or defaults.default_lut).strip(),
        default_lut_path=_as_path(raw.get("default_lut_path")),
        default_reverse_lut=bool(
            _coerce_bool(raw.get("default_reverse_lut"), defaults.default_reverse_lut)
        ),
        default_mode=str(raw.get("default_mode") or defaults.default_mode).strip().lower(),
        default_range=_coerce_pair(raw.get("default_range")),
        default_clamp_percentile=_coerce_pair(raw.get("default_clamp_percentile")),
        default_no_data_policy=str(
            raw.get("default_no_data_policy") or defaults.default_no_data_policy
        )
        .strip()
        .lower(),
        default_no_data_color=no_data_color,
        default_fill_style=str(
            raw.get("default_fill_style") or defaults.default_fill_style
        )
        .strip()
        .lower(),
        default_stroke_width=_required_int(
            raw.get("default_stroke_width"), defaults.default_stroke_width
        ),
        default_opacity=_coerce_float(raw.get("default_opacity"), defaults.default_opacity),
        default_tick_count=_required_int(
            raw.get("default_tick_count"), defaults.default_tick_count
        ),
        default_decimal_places=_coerce_int(
            raw.get("default_decimal_places"), defaults.default_decimal_places
        ),
        default_scientific=_coerce_bool(
            raw.get("default_scientific"), defaults.default_scientific
        ),
        default_legend_length=_required_int(
            raw.get("default_legend_length"), defaults.default_legend_length
        ),
        default_legend_thickness=_required_int(
            raw.get("default_legend_thickness"), defaults.default_legend_thickness
        ),
        default_legend_orientation=str(
            raw.get("default_legend_orientation") or defaults.default_legend_orientation
        )
        .strip()
        .lower(),
        default_output_dir=_as_path(raw.get("default_output_dir"))
        or defaults.default_output_dir,
    )


def _parse_enum(enum_cls, value: str, label: str):
    try:
        return enum_cls(value.strip().lower().replace("-", "_"))
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"Unknown {label} '{value}'. Expected one of: {allowed}") from None


def build_runtime_config(
    *,
    settings: ColorCoderSettings,
    lut: Optional[str] = None,
    lut_path: Optional[Path] = None,
    reverse_lut: Optional[bool] = None,
    mode: Optional[str] = None,
    range_override: Optional[Sequence[float]] = None,
    auto_range: bool = False,
    clamp_percentile: Optional[Sequence[float]] = None,
    no_clamp: bool = False,
    no_data_policy: Optional[str] = None,
    no_data_color: Optional[object] = None,
    fill_style: Optional[str] = None,
    stroke_width: Optional[int] = None,
    opacity: Optional[float] = None,
    tick_count: Optional[int] = None,
    decimal_places: Optional[int] = None,
    scientific: Optional[bool] = None,
    legend_length: Optional[int] = None,
    legend_thickness: Optional[int] = None,
    legend_orientation: Optional[str] = None,
    output_dir: Optional[Path] = None,
) -> ColorCoderConfig:
    """Merge explicit overrides with defaults to produce a runtime config.

    ``auto_range`` discards a configured default range override and
    ``no_clamp`` discards a configured default clamp.
    """

    resolved_lut = (lut or settings.default_lut).strip()
    if not resolved_lut and lut_path is None and settings.default_lut_path is None:
        raise ValueError("A LUT name or LUT file must be configured")
    resolved_lut_path = lut_path if lut_path is not None else settings.default_lut_path
    if resolved_lut_path is not None:
        resolved_lut_path = Path(resolved_lut_path).expanduser()

    resolved_reverse = (
        settings.default_reverse_lut if reverse_lut is None else bool(reverse_lut)
    )
    resolved_mode = _parse_enum(SamplingMode, mode or settings.default_mode, "sampling mode")

    if range_override is not None:
        resolved_range = _coerce_pair(list(range_override))
    elif auto_range:
        resolved_range = None
    else:
        resolved_range = settings.default_range
    if resolved_range is not None:
        low, high = resolved_range
        if not (math.isfinite(low) and math.isfinite(high)):
            raise InvalidRangeError("Range override bounds must be finite")
        if low > high:
            raise InvalidRangeError(
                f"Range override minimum {low} is greater than maximum {high}"
            )

    if clamp_percentile is not None:
        resolved_clamp = _coerce_pair(list(clamp_percentile))
    elif no_clamp:
        resolved_clamp = None
    else:
        resolved_clamp = settings.default_clamp_percentile
    if resolved_clamp is not None:
        low, high = resolved_clamp
        if not (0.0 <= low <= high <= 100.0):
            raise InvalidRangeError(
                "Clamp percentiles must satisfy 0 <= low <= high <= 100"
            )

    resolved_policy = _parse_enum(
        NoDataPolicy, no_data_policy or settings.default_no_data_policy, "no-data policy"
    )
    resolved_no_data_color = (
        parse_color(no_data_color)
        if no_data_color is not None
        else settings.default_no_data_color
    )
    resolved_fill = _parse_enum(
        FillStyle, fill_style or settings.default_fill_style, "fill style"
    )

    resolved_stroke = (
        settings.default_stroke_width if stroke_width is None else int(stroke_width)
    )
    if resolved_stroke < 1:
        raise ValueError("Stroke width must be at least 1 pixel")
    resolved_opacity = (
        settings.default_opacity if opacity is None else float(opacity)
    )
    if not 0.0 <= resolved_opacity <= 1.0:
        raise ValueError("Opacity must be in the range [0, 1]")

    resolved_ticks = settings.default_tick_count if tick_count is None else int(tick_count)
    if resolved_ticks < 1:
        raise ValueError("Tick count must be a positive integer")

    resolved_decimals = (
        settings.default_decimal_places if decimal_places is None else int(decimal_places)
    )
    if resolved_decimals is not None and resolved_decimals < 0:
        raise ValueError("Decimal places must be zero or positive")
    resolved_scientific = settings.default_scientific if scientific is None else scientific

    resolved_length = (
        settings.default_legend_length if legend_length is None else int(legend_length)
    )
    if resolved_length < 2:
        raise ValueError("Legend length must be at least 2 pixels")
    resolved_thickness = (
        settings.default_legend_thickness
        if legend_thickness is None
        else int(legend_thickness)
    )
    if resolved_thickness < 1:
        raise ValueError("Legend thickness must be at least 1 pixel")
    resolved_orientation = _parse_enum(
        LegendOrientation,
        legend_orientation or settings.default_legend_orientation,
        "legend orientation",
    )

    resolved_output = (output_dir or settings.default_output_dir).expanduser()

    return ColorCoderConfig(
        lut=resolved_lut,
        lut_path=resolved_lut_path,
        reverse_lut=resolved_reverse,
        mode=resolved_mode,
        range_override=resolved_range,
        clamp_percentile=resolved_clamp,
        no_data_policy=resolved_policy,
        no_data_color=resolved_no_data_color,
        fill_style=resolved_fill,
        stroke_width=resolved_stroke,
        opacity=resolved_opacity,
        tick_count=resolved_ticks,
        decimal_places=resolved_decimals,
        scientific=resolved_scientific,
        legend_length=resolved_length,
        legend_thickness=resolved_thickness,
        legend_orientation=resolved_orientation,
        output_dir=resolved_output,
    )


def load_config(*, start: Optional[Path] = None, **overrides: object) -> ColorCoderConfig:
    """Convenience helper used by the CLI to resolve the runtime config."""

    settings = load_settings(start)
    return build_runtime_config(settings=settings, **overrides)  # type: ignore[arg-type]
