from ._version import __version__
from .models import (
    ReductionMode,
    PeakPair,
    ViewportState,
    Extent,
    Region,
    QueryWindow,
    WaveformSource,
)
from .aggregate import aggregate
from .cache import PeakCache
from .warmup import warmup, warmup_ladder
from .scaler import (
    ViewportScaler,
    clamp,
    to_pixels,
    to_screen_offset,
    to_virtual,
    extent_on_screen,
)
from .viewport import (
    query_window,
    peaks_opacity,
    zoom_at,
    pan_by,
    scale_by,
)
from .rendering import PeakGeometry, scale_peaks
from .audio import AudioLoadError, load_source, source_from_array
from .config import (
    default_config,
    merge_configs,
    validate_config,
    validate_config_fields,
    validate_structured_config,
    build_structured_defaults,
    flatten_structured_config,
    load_preset,
    save_preset,
    ConfigError,
    ConfigFieldError,
    ParamSpec,
    CACHE_PARAMS,
    VIEW_PARAMS,
)
from .events import EventBus

__all__ = [
    "__version__",
    "ReductionMode",
    "PeakPair",
    "ViewportState",
    "Extent",
    "Region",
    "QueryWindow",
    "WaveformSource",
    "aggregate",
    "PeakCache",
    "warmup",
    "warmup_ladder",
    "ViewportScaler",
    "clamp",
    "to_pixels",
    "to_screen_offset",
    "to_virtual",
    "extent_on_screen",
    "query_window",
    "peaks_opacity",
    "zoom_at",
    "pan_by",
    "scale_by",
    "PeakGeometry",
    "scale_peaks",
    "AudioLoadError",
    "load_source",
    "source_from_array",
    "default_config",
    "merge_configs",
    "validate_config",
    "validate_config_fields",
    "validate_structured_config",
    "build_structured_defaults",
    "flatten_structured_config",
    "load_preset",
    "save_preset",
    "ConfigError",
    "ConfigFieldError",
    "ParamSpec",
    "CACHE_PARAMS",
    "VIEW_PARAMS",
    "EventBus",
]
