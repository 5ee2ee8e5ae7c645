import json
from enum import Enum
from typing import Mapping, Optional

from app_builder.ir.app_description import MAX_LIST_ITEMS
from app_builder.visual.visual_style import STYLE_KEYS


class PromptTask(str, Enum):
    EXTRACT_REQUIREMENTS = "extract_requirements"
    CUSTOMIZE_UI = "customize_ui"


EXTRACTION_PROMPT = """
You are a software requirements analyst.

Read the app description below and extract its structure.

Rules:
- Output EXACTLY ONE JSON object
- No markdown, no explanations
- "appName": a short product name (string)
- "entities": the main data objects the app manages (array of at most {max_items} strings)
- "roles": the kinds of users of the app (array of at most {max_items} strings)
- "features": the key things users can do (array of at most {max_items} strings)

JSON schema:
{{
  "appName": "string",
  "entities": ["string"],
  "roles": ["string"],
  "features": ["string"]
}}

App description:
\"\"\"{description}\"\"\"
"""


CUSTOMIZATION_PROMPT = """
You are a UI styling assistant for a generated form-based app.

The current style settings are:
{current_style}

Apply the user's instruction to these settings.

Rules:
- Output ONLY a JSON object
- No markdown, no explanations
- Allowed keys: {allowed_keys}
- Include only the keys that change
- Values must be valid CSS values (colors, sizes such as "18px" or "1.2rem")
- If the instruction cannot be applied, output {{}}

Instruction:
\"\"\"{instruction}\"\"\"
"""


def build_extraction_prompt(description: str) -> str:
    return EXTRACTION_PROMPT.format(
        max_items=MAX_LIST_ITEMS,
        description=description,
    )


def build_customization_prompt(
    instruction: str,
    current_style: Optional[Mapping[str, str]] = None,
) -> str:
    return CUSTOMIZATION_PROMPT.format(
        current_style=json.dumps(dict(current_style or {}), indent=2),
        allowed_keys=", ".join(STYLE_KEYS),
        instruction=instruction,
    )


def build_prompt(
    task: PromptTask,
    text: str,
    context: Optional[Mapping[str, str]] = None,
) -> str:
    if task == PromptTask.EXTRACT_REQUIREMENTS:
        return build_extraction_prompt(text)
    if task == PromptTask.CUSTOMIZE_UI:
        return build_customization_prompt(text, context)
    raise ValueError(f"Unknown prompt task: {task}")
