import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Request
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse

from app_builder.api.serializers import serialize
from app_builder.db.repository import RecordStore
from app_builder.errors import (
    IncompleteResultError,
    MissingFieldError,
    ModelGatewayError,
    ParseError,
    PersistenceError,
    ValidationError,
)
from app_builder.pipeline.extractor import validate_app_description
from app_builder.pipeline.requirements import RequirementsPipeline
from app_builder.renderer.html_renderer import render_mock_ui
from app_builder.schemas import (
    AppDescriptionResponse,
    CustomizeRequest,
    ParseRequest,
    RenderRequest,
    SaveResponse,
    StyleOverridesResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

PROCESSING_FAILED = "Failed to process AI response"


def _error(
    status_code: int, error: str, details: Optional[str] = None, mode: Optional[str] = None
) -> JSONResponse:
    body = {"error": error}
    if details is not None:
        body["details"] = details
    if mode is not None:
        body["mode"] = mode
    return JSONResponse(status_code=status_code, content=body)


def _pipeline(request: Request) -> RequirementsPipeline:
    return request.app.state.pipeline


def _store(request: Request) -> RecordStore:
    return request.app.state.store


def _run_model_step(pipeline: RequirementsPipeline, call, *args):
    """
    Run one pipeline call and map its failures to HTTP responses.

    Raw model output never reaches the client.
    """
    try:
        return call(*args), None
    except ValidationError as e:
        return None, _error(400, str(e))
    except ModelGatewayError as e:
        logger.error("Model gateway failure (%s): %s", e.backend, e.detail)
        return None, _error(500, "AI request failed", details=e.detail, mode=e.backend)
    except (ParseError, IncompleteResultError) as e:
        logger.error("Unusable model output (%s): %s", pipeline.mode, e)
        return None, _error(
            500,
            PROCESSING_FAILED,
            details="The AI response could not be processed.",
            mode=pipeline.mode,
        )


@router.get("/", response_class=PlainTextResponse)
def root():
    return "Backend is running"


@router.post("/api/parse-requirements", response_model=AppDescriptionResponse)
def parse_requirements(body: ParseRequest, request: Request):
    logger.info("Incoming request to /api/parse-requirements")
    pipeline = _pipeline(request)

    result, error = _run_model_step(pipeline, pipeline.parse_requirements, body.description)
    if error is not None:
        return error
    return result.to_dict()


@router.post("/api/customize-ui", response_model=StyleOverridesResponse)
def customize_ui(body: CustomizeRequest, request: Request):
    logger.info("Incoming request to /api/customize-ui")
    pipeline = _pipeline(request)

    overrides, error = _run_model_step(
        pipeline, pipeline.customize_ui, body.instruction, body.currentUI
    )
    if error is not None:
        return error
    return {"styleOverrides": overrides}


@router.post("/api/save-app", status_code=201, response_model=SaveResponse)
def save_app(request: Request, payload: Dict[str, Any] = Body(...)):
    try:
        record_id = _store(request).save(payload)
    except MissingFieldError as e:
        return _error(400, str(e))
    except PersistenceError as e:
        return _error(500, "Failed to save app", details=str(e))

    return {"message": "App saved successfully", "id": record_id}


@router.get("/api/load-apps")
def load_apps(request: Request):
    try:
        records = _store(request).load_all()
    except PersistenceError as e:
        return _error(500, "Failed to load apps", details=str(e))
    return serialize(records)


@router.post("/api/render-ui", response_class=HTMLResponse)
def render_ui(body: RenderRequest, request: Request):
    try:
        app = validate_app_description(body.app, body.app.get("description") or "")
    except IncompleteResultError as e:
        return _error(400, str(e))

    return render_mock_ui(app, body.styleOverrides, request.app.state.field_map)
