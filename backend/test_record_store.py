import pytest
from sqlalchemy import create_engine

from app_builder.db.repository import RecordStore, app_description_from_payload
from app_builder.errors import MissingFieldError, PersistenceError
from app_builder.ir.app_description import AppDescription


def make_app(name, description="an idea"):
    return AppDescription(
        app_name=name,
        entities=("Student",),
        roles=("Admin",),
        features=("Enroll",),
        description=description,
    )


def test_save_then_load_newest_first(store):
    first = store.save(make_app("First"))
    second = store.save(make_app("Second"))

    records = store.load_all()

    assert [r.id for r in records] == [second, first]
    assert records[0].app == make_app("Second")
    assert records[0].created_at > records[1].created_at
    assert records[0].created_at.tzinfo is not None


def test_duplicate_app_names_are_allowed(store):
    store.save(make_app("Same"))
    store.save(make_app("Same"))

    assert [r.app.app_name for r in store.load_all()] == ["Same", "Same"]


def test_save_accepts_client_payload(store):
    record_id = store.save({
        "appName": "Pet Clinic",
        "entities": ["Pet", "Owner"],
        "roles": ["Vet"],
        "features": [],
        "description": "a clinic app",
    })

    (record,) = store.load_all()
    assert record.id == record_id
    assert record.app.entities == ("Pet", "Owner")
    assert record.to_dict()["_id"] == record_id


@pytest.mark.parametrize("missing", ["appName", "entities", "roles", "features", "description"])
def test_missing_field_is_rejected(store, missing):
    payload = {
        "appName": "X",
        "entities": [],
        "roles": [],
        "features": [],
        "description": "idea",
    }
    del payload[missing]

    with pytest.raises(MissingFieldError) as excinfo:
        store.save(payload)

    assert excinfo.value.field_name == missing
    assert store.load_all() == []


def test_scalar_list_field_is_rejected():
    with pytest.raises(MissingFieldError):
        app_description_from_payload({
            "appName": "X", "entities": "Student", "roles": [], "features": [], "description": "d",
        })


def test_empty_description_on_domain_object_is_rejected(store):
    with pytest.raises(MissingFieldError):
        store.save(make_app("X", description=""))


def test_unavailable_store_raises_persistence_error():
    # Schema never created, so the table does not exist.
    store = RecordStore(create_engine("sqlite://"))

    with pytest.raises(PersistenceError):
        store.save(make_app("X"))
    with pytest.raises(PersistenceError):
        store.load_all()


def test_saved_lists_keep_item_invariants(store):
    store.save({
        "appName": "Zoo",
        "entities": ["A", "B", "C", "D", "E", "F", "G", None],
        "roles": [" Keeper ", "", {"name": "Vet"}],
        "features": [7],
        "description": "a zoo app",
    })

    (record,) = store.load_all()
    assert record.app.entities == ("A", "B", "C", "D", "E")
    assert record.app.roles == ("Keeper",)
    assert record.app.features == ("7",)


def test_domain_object_lists_are_capped_on_save(store):
    store.save(AppDescription(
        app_name="Big",
        entities=tuple(f"E{i}" for i in range(8)),
        description="idea",
    ))

    (record,) = store.load_all()
    assert len(record.app.entities) == 5
