import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from app_builder.db.repository import RecordStore
from app_builder.errors import (
    IncompleteResultError,
    InvalidTransitionError,
    ModelGatewayError,
    ParseError,
    PersistenceError,
    ValidationError,
)
from app_builder.ir.app_description import AppDescription
from app_builder.pipeline.requirements import RequirementsPipeline
from app_builder.renderer.html_renderer import render_mock_ui
from app_builder.visual.field_map import EntityFieldMap
from app_builder.visual.visual_style import default_style, merge_style

logger = logging.getLogger(__name__)

PIPELINE_ERRORS = (ValidationError, ModelGatewayError, ParseError, IncompleteResultError)


class UIState(str, Enum):
    IDLE = "idle"
    DISPLAYING = "displaying"


@dataclass(frozen=True)
class Notification:
    kind: str  # success | error
    message: str


class UISession:
    """
    One user's builder session.

    IDLE -> DISPLAYING on the first successful description. Style
    instructions are only accepted while DISPLAYING. Every outcome is
    reported through `notifications`.
    """

    def __init__(
        self,
        pipeline: RequirementsPipeline,
        store: RecordStore,
        field_map: Optional[EntityFieldMap] = None,
    ):
        self.pipeline = pipeline
        self.store = store
        self.field_map = field_map or EntityFieldMap()

        self.state = UIState.IDLE
        self.app: Optional[AppDescription] = None
        self.style: Dict[str, str] = default_style()
        self.notifications: List[Notification] = []
        self.loading = False

    def _notify(self, kind: str, message: str) -> None:
        self.notifications.append(Notification(kind, message))

    def submit_description(self, description: str) -> bool:
        if self.loading:
            logger.info("Ignoring submission while a request is in flight")
            return False

        if not description or not description.strip():
            self._notify("error", "Please describe your app idea.")
            return False

        self.loading = True
        try:
            try:
                app = self.pipeline.parse_requirements(description)
            except PIPELINE_ERRORS as e:
                logger.warning("Failed to generate app: %s", e)
                self._notify("error", "Failed to generate app. Please try again.")
                return False

            self.app = app
            self.style = default_style()
            self.state = UIState.DISPLAYING

            try:
                self.store.save(app)
            except PersistenceError as e:
                logger.error("App generated but not saved: %s", e)
                self._notify("error", "App generated, but it could not be saved.")
            else:
                self._notify("success", "App design generated and saved!")
            return True
        finally:
            self.loading = False

    def submit_style_instruction(self, instruction: str) -> bool:
        if self.state != UIState.DISPLAYING:
            raise InvalidTransitionError("Generate an app before customizing its UI.")
        if self.loading:
            logger.info("Ignoring style instruction while a request is in flight")
            return False

        self.loading = True
        try:
            overrides = self.pipeline.customize_ui(instruction, self.style)
        except PIPELINE_ERRORS as e:
            logger.warning("Failed to customize UI: %s", e)
            self._notify("error", "Failed to update the UI. Please try again.")
            return False
        finally:
            self.loading = False

        if not overrides:
            self._notify("success", "No style changes applied.")
            return True

        self.style = merge_style(self.style, overrides)
        self._notify("success", "UI updated!")
        return True

    def reset(self) -> None:
        self.state = UIState.IDLE
        self.app = None
        self.style = default_style()
        self.notifications = []

    def render(self) -> str:
        if self.app is None:
            raise InvalidTransitionError("Nothing to render yet.")
        return render_mock_ui(self.app, self.style, self.field_map)
