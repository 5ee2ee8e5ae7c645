import logging
from typing import Any, Dict, Mapping, Optional

from app_builder.errors import ValidationError
from app_builder.inference.base import ModelGateway
from app_builder.inference.prompt import PromptTask, build_prompt
from app_builder.ir.app_description import AppDescription
from app_builder.pipeline.extractor import extract_app_description, extract_style_overrides
from app_builder.visual.visual_style import filter_style_overrides

logger = logging.getLogger(__name__)


def _require_text(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Invalid input: '{field_name}' must be a non-empty string.")
    return value


class RequirementsPipeline:
    """
    Free text in, validated structure out.

    prompt -> gateway -> extractor. Every step is single-attempt;
    failures propagate to the caller unchanged.
    """

    def __init__(self, gateway: ModelGateway):
        self.gateway = gateway

    @property
    def mode(self) -> str:
        return self.gateway.backend

    def parse_requirements(self, description: Any) -> AppDescription:
        description = _require_text(description, "description")

        prompt = build_prompt(PromptTask.EXTRACT_REQUIREMENTS, description)
        raw = self.gateway.generate(prompt)
        logger.debug("Raw extraction output (%s): %s", self.mode, raw)

        result = extract_app_description(raw, description, self.gateway.response_format)
        logger.info(
            "Extracted app %r: entities=%s roles=%s features=%s",
            result.app_name, list(result.entities), list(result.roles), list(result.features),
        )
        return result

    def customize_ui(
        self,
        instruction: Any,
        current_style: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, str]:
        instruction = _require_text(instruction, "instruction")

        context = filter_style_overrides(current_style)
        prompt = build_prompt(PromptTask.CUSTOMIZE_UI, instruction, context)
        raw = self.gateway.generate(prompt)
        logger.debug("Raw customization output (%s): %s", self.mode, raw)

        overrides = extract_style_overrides(raw, self.gateway.response_format)
        logger.info("Style overrides for %r: %s", instruction, overrides)
        return overrides
