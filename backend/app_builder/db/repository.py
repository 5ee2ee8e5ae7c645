import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.engine import Engine

from app_builder.db.models import AppRecord, Base
from app_builder.db.session import make_session_factory
from app_builder.errors import MissingFieldError, PersistenceError
from app_builder.ir.app_description import AppDescription, SavedRecord, normalize_items

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("appName", "entities", "roles", "features", "description")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def app_description_from_payload(payload: Mapping[str, Any]) -> AppDescription:
    """
    Build an AppDescription from a client payload, as sent to /api/save-app.
    """
    if not isinstance(payload, Mapping):
        raise MissingFieldError("appName")

    for name in REQUIRED_FIELDS:
        value = payload.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise MissingFieldError(name)
        if name in ("appName", "description") and not isinstance(value, str):
            raise MissingFieldError(name)
        if name not in ("appName", "description") and not isinstance(value, (list, tuple)):
            raise MissingFieldError(name)

    return AppDescription(
        app_name=payload["appName"].strip(),
        entities=normalize_items("entities", payload["entities"]),
        roles=normalize_items("roles", payload["roles"]),
        features=normalize_items("features", payload["features"]),
        description=payload["description"],
    )


class RecordStore:
    """
    Append-only store of extraction results.

    save() and load_all() are the whole interface; records are never
    updated or deleted and duplicate app names are allowed.
    """

    def __init__(
        self,
        engine: Engine,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.engine = engine
        self.session_factory = make_session_factory(engine)
        self.clock = clock

    def create_schema(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def save(self, record: Union[AppDescription, Mapping[str, Any]]) -> str:
        if not isinstance(record, AppDescription):
            record = app_description_from_payload(record)
        if not record.app_name:
            raise MissingFieldError("appName")
        if not record.description:
            raise MissingFieldError("description")

        record_id = str(uuid.uuid4())
        row = AppRecord(
            id=record_id,
            app_name=record.app_name,
            entities=list(normalize_items("entities", record.entities)),
            roles=list(normalize_items("roles", record.roles)),
            features=list(normalize_items("features", record.features)),
            description=record.description,
            created_at=self.clock(),
        )

        try:
            with self.session_factory() as session:
                session.add(row)
                session.commit()
        except SQLAlchemyError as e:
            logger.error("Failed to save app %r: %r", record.app_name, e)
            raise PersistenceError(f"Failed to save app: {e}") from e

        logger.info("Saved app %r as %s", record.app_name, record_id)
        return record_id

    def load_all(self) -> List[SavedRecord]:
        try:
            with self.session_factory() as session:
                rows = (
                    session.query(AppRecord)
                    .order_by(AppRecord.created_at.desc())
                    .all()
                )
        except SQLAlchemyError as e:
            logger.error("Failed to load apps: %r", e)
            raise PersistenceError(f"Failed to load apps: {e}") from e

        return [self._to_saved_record(row) for row in rows]

    @staticmethod
    def _to_saved_record(row: AppRecord) -> SavedRecord:
        created_at = row.created_at
        # SQLite hands back naive datetimes.
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)

        return SavedRecord(
            id=row.id,
            app=AppDescription(
                app_name=row.app_name,
                entities=tuple(row.entities or ()),
                roles=tuple(row.roles or ()),
                features=tuple(row.features or ()),
                description=row.description,
            ),
            created_at=created_at,
        )
