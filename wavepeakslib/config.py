from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any

PRESET_SCHEMA_VERSION = "1.0"

# Keys that are internal/CLI-only and should not be saved in presets
_INTERNAL_KEYS = {"input", "verbose", "_source_file"}


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class ConfigFieldError:
    """A single validation error for one configuration field.

    Attributes:
        key:     The config key that failed validation.
        value:   The offending value.
        message: Human-readable explanation of what is wrong.
    """
    key: str
    value: Any
    message: str


@dataclass(frozen=True)
class ParamSpec:
    """Declarative specification for a single configuration parameter.

    Describes the cache and view parameters (type, default, valid range,
    allowed values, and human-readable labels) so the CLI, the GUI
    settings file and presets validate against the same table.
    """
    key: str
    type: type | tuple              # expected Python type(s)
    default: Any
    label: str                       # short UI label
    description: str = ""            # longer tooltip / help text
    min: float | int | None = None   # inclusive lower bound (unless min_exclusive)
    max: float | int | None = None   # inclusive upper bound (unless max_exclusive)
    min_exclusive: bool = False
    max_exclusive: bool = False
    choices: list | None = None      # allowed string values
    nullable: bool = False           # True if None is valid

    def check(self, value: Any) -> str | None:
        """Return an error message for *value*, or None if it is valid."""
        if value is None:
            return None if self.nullable else f"{self.label} must not be empty."

        # bool is an int subclass; only accept it where bool is expected
        if isinstance(value, bool) and self.type is not bool:
            return f"{self.label} must be {_type_label(self.type)}, got boolean."
        if not isinstance(value, self.type):
            return (f"{self.label} must be {_type_label(self.type)}, "
                    f"got {type(value).__name__}.")

        if self.choices is not None and value not in self.choices:
            opts = ", ".join(repr(c) for c in self.choices)
            return f"{self.label} must be one of {opts}."

        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if self.min is not None:
            if self.min_exclusive and value <= self.min:
                return f"{self.label} must be greater than {self.min}."
            if not self.min_exclusive and value < self.min:
                return f"{self.label} must be at least {self.min}."
        if self.max is not None:
            if self.max_exclusive and value >= self.max:
                return f"{self.label} must be less than {self.max}."
            if not self.max_exclusive and value > self.max:
                return f"{self.label} must be at most {self.max}."
        return None


# ---------------------------------------------------------------------------
# Parameter sections
# ---------------------------------------------------------------------------

CACHE_PARAMS: list[ParamSpec] = [
    ParamSpec(
        key="progress_chunk", type=int, default=10000, min=1,
        label="Progress chunk (columns)",
        description=(
            "Number of pixel columns processed between progress reports. "
            "After each report the host gets a chance to handle events."
        ),
    ),
    ParamSpec(
        key="rough_quantum", type=int, default=100, min=1,
        label="Resolution quantum",
        description=(
            "Coarser resolution levels are rounded up to multiples of this "
            "value, bounding the number of distinct cache levels."
        ),
    ),
    ParamSpec(
        key="multiplicator", type=int, default=2, min=2,
        label="Level fan-in",
        description="How many coarser cached entries are merged into one column.",
    ),
    ParamSpec(
        key="warmup_span", type=int, default=20_000_000, min=1,
        label="Warmup span (samples)",
        description="One warmup level is added per this many samples of audio.",
    ),
    ParamSpec(
        key="warmup_step", type=int, default=100, min=1,
        label="Warmup step (samples/px)",
        description="Warmup level i is cached at (i + 2) * step samples per pixel.",
    ),
]

VIEW_PARAMS: list[ParamSpec] = [
    ParamSpec(
        key="mode", type=str, default="peak",
        choices=["peak", "rms"],
        label="Reduction mode",
        description="Peak keeps signed extremes, RMS keeps sign-split energy.",
    ),
    ParamSpec(
        key="log_scale", type=bool, default=False,
        label="Logarithmic amplitude",
        description="Draw amplitudes on a log10 scale.",
    ),
    ParamSpec(
        key="scale", type=(int, float), default=1.0, min=0.1, max=5.0,
        label="Vertical scale",
        description="Amplitude multiplier applied when drawing.",
    ),
    ParamSpec(
        key="pan_speed", type=(int, float), default=1000.0,
        min=0.0, min_exclusive=True,
        label="Pan speed",
        description="Virtual units panned per full viewport width of wheel delta.",
    ),
    ParamSpec(
        key="width", type=int, default=1000, min=1,
        label="Viewport width (px)",
        description="Pixel width used when no widget provides one (CLI).",
    ),
]


_SECTIONS: dict[str, list[ParamSpec]] = {
    "cache": CACHE_PARAMS,
    "view": VIEW_PARAMS,
}

_PRESET_META_KEYS = ("schema_version", "_description")


def default_config() -> dict[str, Any]:
    """Flat dict of every parameter's default."""
    return {p.key: p.default for params in _SECTIONS.values() for p in params}


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge config dicts left to right.

    A ``None`` never replaces a value set by an earlier dict, so options
    left unset on the command line keep the preset's value.
    """
    result: dict[str, Any] = {}
    for cfg in configs:
        result.update({k: v for k, v in cfg.items()
                       if v is not None or k not in result})
    return result


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

def load_preset(path: str) -> dict[str, Any]:
    """Read a JSON preset and return its (partial) flat config.

    Raises :class:`ConfigError` when the file is missing, unreadable, not
    JSON, or not a JSON object.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Preset file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in preset file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read preset file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Preset file must contain a JSON object, got {type(data).__name__}")
    return {k: v for k, v in data.items() if k not in _PRESET_META_KEYS}


def save_preset(config: dict[str, Any], path: str, *,
                description: str | None = None) -> None:
    """Write the values of *config* that differ from the defaults.

    CLI-only keys and keys starting with ``_`` are never written.
    """
    defaults = default_config()
    preset: dict[str, Any] = {"schema_version": PRESET_SCHEMA_VERSION}
    if description:
        preset["_description"] = description
    preset.update({
        k: v for k, v in config.items()
        if k not in _INTERNAL_KEYS and not k.startswith("_")
        and not (k in defaults and defaults[k] == v)
    })

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(preset, f, indent=4, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def validate_param_values(
    params: list[ParamSpec],
    values: dict[str, Any],
) -> list[ConfigFieldError]:
    """Check the keys of *values* that *params* describes.

    Missing keys are fine (they fall back to their default); unknown keys
    are ignored.  Never raises.
    """
    errors: list[ConfigFieldError] = []
    for spec in params:
        if spec.key not in values:
            continue
        message = spec.check(values[spec.key])
        if message is not None:
            errors.append(ConfigFieldError(spec.key, values[spec.key], message))
    return errors


def validate_config_fields(config: dict[str, Any]) -> list[ConfigFieldError]:
    """Validate a flat config against every known parameter."""
    return validate_param_values(CACHE_PARAMS + VIEW_PARAMS, config)


def validate_config(config: dict[str, Any]) -> None:
    """Raise :class:`ConfigError` listing every invalid field of a flat config."""
    errors = validate_config_fields(config)
    if errors:
        bullets = "".join(f"\n  • {e.message}" for e in errors)
        raise ConfigError(f"Configuration has invalid values:{bullets}")


# ---------------------------------------------------------------------------
# Structured form  ({"cache": {...}, "view": {...}}, used by the GUI file)
# ---------------------------------------------------------------------------

def build_structured_defaults() -> dict[str, Any]:
    return {
        name: {p.key: p.default for p in params}
        for name, params in _SECTIONS.items()
    }


def flatten_structured_config(structured: dict[str, Any]) -> dict[str, Any]:
    """Merge the known sections into one flat dict; other keys are dropped."""
    flat: dict[str, Any] = {}
    for name in _SECTIONS:
        section = structured.get(name)
        if isinstance(section, dict):
            flat.update(section)
    return flat


def validate_structured_config(
    structured: dict[str, Any],
) -> list[ConfigFieldError]:
    """Validate each section; error keys read ``"<section>.<key>"``."""
    errors: list[ConfigFieldError] = []
    for name, params in _SECTIONS.items():
        section = structured.get(name, {})
        if not isinstance(section, dict):
            errors.append(ConfigFieldError(
                name, section, f"Section '{name}' must be an object."))
            continue
        errors.extend(
            ConfigFieldError(f"{name}.{e.key}", e.value, e.message)
            for e in validate_param_values(params, section)
        )
    return errors


def _type_label(t) -> str:
    """``int``, or ``int or float`` for a tuple of types."""
    if isinstance(t, tuple):
        return " or ".join(x.__name__ for x in t)
    return t.__name__
