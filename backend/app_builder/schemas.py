from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ParseRequest(BaseModel):
    # Typed loosely so a bad value gets the pipeline's 400, not a 422.
    description: Any = None


class CustomizeRequest(BaseModel):
    instruction: Any = None
    currentUI: Optional[Dict[str, Any]] = None


class AppDescriptionResponse(BaseModel):
    appName: str
    entities: List[str]
    roles: List[str]
    features: List[str]
    description: str


class StyleOverridesResponse(BaseModel):
    styleOverrides: Dict[str, str] = Field(default_factory=dict)


class SaveResponse(BaseModel):
    message: str
    id: str


class RenderRequest(BaseModel):
    app: Dict[str, Any]
    styleOverrides: Optional[Dict[str, Any]] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
    mode: Optional[str] = None
