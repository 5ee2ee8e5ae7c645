from datetime import datetime
from typing import Any

from app_builder.ir.app_description import AppDescription, SavedRecord


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def serialize(obj: Any):
    """
    Turn domain objects into JSON-compatible structures.
    """
    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    if isinstance(obj, (AppDescription, SavedRecord)):
        return obj.to_dict()

    if isinstance(obj, datetime):
        return obj.isoformat()

    if isinstance(obj, (list, tuple)):
        return [serialize(item) for item in obj]

    if isinstance(obj, dict):
        return {k: serialize(v) for k, v in obj.items()}

    return str(obj)
