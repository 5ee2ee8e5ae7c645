from typing import Any, Dict, Mapping

from app_builder.errors import IncompleteResultError
from app_builder.inference.base import ResponseFormat
from app_builder.ir.app_description import AppDescription, normalize_items
from app_builder.utils.json_extract import extract_json
from app_builder.visual.visual_style import filter_style_overrides

LIST_FIELDS = ("entities", "roles", "features")


def validate_app_description(data: Mapping[str, Any], description: str) -> AppDescription:
    """
    Check the parsed model output has every field an AppDescription needs.

    appName must be a non-empty string and entities, roles and features
    must all be JSON arrays. Anything else raises IncompleteResultError.
    """
    if not isinstance(data, Mapping):
        raise IncompleteResultError("Result is not an object", missing=["appName", *LIST_FIELDS])

    missing = []

    app_name = data.get("appName")
    if not isinstance(app_name, str) or not app_name.strip():
        missing.append("appName")

    for field_name in LIST_FIELDS:
        if not isinstance(data.get(field_name), (list, tuple)):
            missing.append(field_name)

    if missing:
        raise IncompleteResultError(
            f"Incomplete result, missing or invalid: {', '.join(missing)}",
            missing=missing,
        )

    return AppDescription(
        app_name=app_name.strip(),
        entities=normalize_items("entities", data["entities"]),
        roles=normalize_items("roles", data["roles"]),
        features=normalize_items("features", data["features"]),
        description=description,
    )


def extract_app_description(
    raw: str,
    description: str,
    response_format: ResponseFormat = ResponseFormat.RAW_WITH_COMMENTARY,
) -> AppDescription:
    return validate_app_description(extract_json(raw, response_format), description)


def extract_style_overrides(
    raw: str,
    response_format: ResponseFormat = ResponseFormat.RAW_WITH_COMMENTARY,
) -> Dict[str, str]:
    return filter_style_overrides(extract_json(raw, response_format))
