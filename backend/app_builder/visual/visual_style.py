from typing import Any, Dict, Mapping, Optional

# StyleOverrideSet: partial mapping of these keys to CSS values.
STYLE_KEYS = ("formBackground", "buttonColor", "fontSize", "borderRadius")

DEFAULT_STYLE = {
    "formBackground": "#2a2a2a",
    "buttonColor": "#4ade80",
    "fontSize": "1.1rem",
    "borderRadius": "16px",
}


def filter_style_overrides(data: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    """
    Keep only recognized keys with non-blank string values.
    Everything else is dropped silently.
    """
    if not isinstance(data, Mapping):
        return {}

    overrides = {}
    for key in STYLE_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            overrides[key] = value.strip()
    return overrides


def merge_style(
    current: Mapping[str, str],
    overrides: Optional[Mapping[str, Any]],
) -> Dict[str, str]:
    merged = filter_style_overrides(current)
    merged.update(filter_style_overrides(overrides))
    return merged


def default_style() -> Dict[str, str]:
    return dict(DEFAULT_STYLE)
