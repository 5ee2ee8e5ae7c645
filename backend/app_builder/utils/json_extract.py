import json
from typing import Any, Dict

from app_builder.errors import ParseError
from app_builder.inference.base import ResponseFormat


def slice_json_object(text: str) -> str:
    """
    Return the substring from the first "{" to the last "}" inclusive.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ParseError("No JSON object found in model output")
    return text[start:end + 1]


def extract_json(
    text: str,
    response_format: ResponseFormat = ResponseFormat.RAW_WITH_COMMENTARY,
) -> Dict[str, Any]:
    """
    Parse the JSON object embedded in LLM output.

    RAW_WITH_COMMENTARY tolerates text around the object.
    STRICT_JSON expects the whole payload to be the object.
    """
    if not text or not isinstance(text, str):
        raise ParseError("Model output is empty")

    if response_format == ResponseFormat.STRICT_JSON:
        candidate = text.strip()
    else:
        candidate = slice_json_object(text)

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ParseError(f"Model output is not valid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise ParseError("Model output is not a JSON object")

    return data
