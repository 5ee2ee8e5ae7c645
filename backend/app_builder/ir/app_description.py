import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, Tuple

logger = logging.getLogger(__name__)

MAX_LIST_ITEMS = 5


def normalize_items(field_name: str, items: Iterable[Any]) -> Tuple[str, ...]:
    """
    Coerce list items to stripped strings, dropping None, blank and nested
    items, and keep at most MAX_LIST_ITEMS of them.
    """
    normalized = []
    for item in items:
        if item is None or isinstance(item, (dict, list, tuple)):
            continue
        text = str(item).strip()
        if text:
            normalized.append(text)

    if len(normalized) > MAX_LIST_ITEMS:
        logger.warning(
            "Got %d %s, keeping the first %d",
            len(normalized), field_name, MAX_LIST_ITEMS,
        )
        normalized = normalized[:MAX_LIST_ITEMS]

    return tuple(normalized)


@dataclass(frozen=True)
class AppDescription:
    app_name: str
    entities: Tuple[str, ...] = ()
    roles: Tuple[str, ...] = ()
    features: Tuple[str, ...] = ()
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "appName": self.app_name,
            "entities": list(self.entities),
            "roles": list(self.roles),
            "features": list(self.features),
            "description": self.description,
        }


@dataclass(frozen=True)
class SavedRecord:
    id: str
    app: AppDescription
    created_at: datetime = field(compare=False)

    def to_dict(self) -> Dict[str, Any]:
        data = {"_id": self.id}
        data.update(self.app.to_dict())
        data["createdAt"] = self.created_at.isoformat()
        return data
