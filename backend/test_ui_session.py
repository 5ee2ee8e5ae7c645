import json

import pytest

from app_builder.errors import InvalidTransitionError, ModelGatewayError
from app_builder.session.ui_session import UISession, UIState
from app_builder.visual.visual_style import DEFAULT_STYLE
from conftest import COURSE_APP

DESCRIPTION = "I want an app to manage student courses and grades"


def test_submit_description_end_to_end(make_pipeline, spy_store, course_app_json):
    pipeline, gateway = make_pipeline(course_app_json)
    session = UISession(pipeline, spy_store)
    assert session.state == UIState.IDLE

    assert session.submit_description(DESCRIPTION) is True

    assert session.state == UIState.DISPLAYING
    assert len(spy_store.saved) == 1
    saved = spy_store.saved[0]
    assert saved.app_name == COURSE_APP["appName"]
    assert list(saved.entities) == COURSE_APP["entities"]
    assert list(saved.roles) == COURSE_APP["roles"]
    assert list(saved.features) == COURSE_APP["features"]
    assert saved.description == DESCRIPTION
    assert DESCRIPTION in gateway.prompts[0]
    assert [n.kind for n in session.notifications] == ["success"]


def test_gateway_failure_stays_idle(make_pipeline, spy_store):
    pipeline, _ = make_pipeline(error=ModelGatewayError("connection refused", "local"))
    session = UISession(pipeline, spy_store)

    assert session.submit_description(DESCRIPTION) is False

    assert session.state == UIState.IDLE
    assert session.app is None
    assert [n.kind for n in session.notifications] == ["error"]
    assert spy_store.saved == []
    assert session.loading is False


def test_unusable_model_output_stays_idle(make_pipeline, spy_store):
    pipeline, _ = make_pipeline('{"appName": "X"}')
    session = UISession(pipeline, spy_store)

    assert session.submit_description(DESCRIPTION) is False
    assert session.state == UIState.IDLE
    assert len(session.notifications) == 1
    assert spy_store.saved == []


def test_blank_description_never_calls_the_model(make_pipeline, spy_store):
    pipeline, gateway = make_pipeline()
    session = UISession(pipeline, spy_store)

    assert session.submit_description("   ") is False

    assert gateway.prompts == []
    assert session.notifications[0].message == "Please describe your app idea."


def test_save_failure_still_displays(make_pipeline, failing_store, course_app_json):
    pipeline, _ = make_pipeline(course_app_json)
    session = UISession(pipeline, failing_store)

    assert session.submit_description(DESCRIPTION) is True

    assert session.state == UIState.DISPLAYING
    assert session.app.app_name == "Course Manager"
    assert [n.kind for n in session.notifications] == ["error"]


def test_style_instruction_requires_displaying(make_pipeline, spy_store):
    pipeline, _ = make_pipeline()
    session = UISession(pipeline, spy_store)

    with pytest.raises(InvalidTransitionError):
        session.submit_style_instruction("make buttons red")


def test_style_instruction_merges_overrides(make_pipeline, spy_store, course_app_json):
    pipeline, gateway = make_pipeline(
        course_app_json,
        'Here: {"buttonColor": "#ff0000", "unknownKey": "x"}',
        '{"fontSize": "20px"}',
    )
    session = UISession(pipeline, spy_store)
    session.submit_description(DESCRIPTION)

    assert session.submit_style_instruction("make buttons red") is True
    assert session.submit_style_instruction("bigger text") is True

    assert session.style == dict(DEFAULT_STYLE, buttonColor="#ff0000", fontSize="20px")
    # The current style is sent along with the instruction.
    assert '"buttonColor": "#ff0000"' in gateway.prompts[2]
    assert 'background-color:#ff0000' in session.render()


def test_style_failure_leaves_style_unchanged(make_pipeline, spy_store, course_app_json):
    pipeline, gateway = make_pipeline(course_app_json, "I cannot help with that.")
    session = UISession(pipeline, spy_store)
    session.submit_description(DESCRIPTION)
    before = dict(session.style)

    assert session.submit_style_instruction("make it pop") is False

    assert session.style == before
    assert session.state == UIState.DISPLAYING
    assert session.notifications[-1].kind == "error"


def test_empty_override_is_a_no_op(make_pipeline, spy_store, course_app_json):
    pipeline, _ = make_pipeline(course_app_json, "{}")
    session = UISession(pipeline, spy_store)
    session.submit_description(DESCRIPTION)

    assert session.submit_style_instruction("do a barrel roll") is True
    assert session.style == DEFAULT_STYLE


def test_new_description_resets_style(make_pipeline, spy_store, course_app_json):
    pet_app = json.dumps({"appName": "Pet Clinic", "entities": ["Pet"], "roles": ["Vet"], "features": []})
    pipeline, _ = make_pipeline(course_app_json, '{"buttonColor": "red"}', pet_app)
    session = UISession(pipeline, spy_store)
    session.submit_description(DESCRIPTION)
    session.submit_style_instruction("red buttons")

    session.submit_description("a pet clinic")

    assert session.app.app_name == "Pet Clinic"
    assert session.style == DEFAULT_STYLE
    assert len(spy_store.saved) == 2


def test_reset_returns_to_idle(make_pipeline, spy_store, course_app_json):
    pipeline, _ = make_pipeline(course_app_json)
    session = UISession(pipeline, spy_store)
    session.submit_description(DESCRIPTION)

    session.reset()

    assert session.state == UIState.IDLE
    assert session.app is None
    assert session.notifications == []
    with pytest.raises(InvalidTransitionError):
        session.render()


def test_submission_while_loading_is_refused(make_pipeline, spy_store):
    pipeline, gateway = make_pipeline()
    session = UISession(pipeline, spy_store)
    session.loading = True

    assert session.submit_description(DESCRIPTION) is False
    assert gateway.prompts == []
