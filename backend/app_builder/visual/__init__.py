# Style state and entity field lookup for the generated mock UI

from app_builder.visual.field_map import EntityFieldMap
from app_builder.visual.visual_style import (
    DEFAULT_STYLE,
    STYLE_KEYS,
    default_style,
    filter_style_overrides,
    merge_style,
)

__all__ = [
    "EntityFieldMap",
    "DEFAULT_STYLE",
    "STYLE_KEYS",
    "default_style",
    "filter_style_overrides",
    "merge_style",
]
