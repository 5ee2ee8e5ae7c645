from typing import Optional


class AppBuilderError(Exception):
    """Base class for every failure raised by the app builder pipeline."""


class ConfigurationError(AppBuilderError):
    pass


class ValidationError(AppBuilderError):
    """Client input is missing or malformed."""


class ModelGatewayError(AppBuilderError):
    """
    Transport or upstream failure while talking to an LLM backend.

    Carries the backend identifier so failures can be diagnosed
    without guessing which provider was configured.
    """

    def __init__(self, detail: str, backend: str):
        super().__init__(f"[{backend}] {detail}")
        self.detail = detail
        self.backend = backend


class ParseError(AppBuilderError):
    """The model output did not contain usable JSON."""


class IncompleteResultError(AppBuilderError):
    """The model output parsed, but is missing required fields."""

    def __init__(self, message: str, missing: Optional[list] = None):
        super().__init__(message)
        self.missing = missing or []


class PersistenceError(AppBuilderError):
    pass


class MissingFieldError(PersistenceError):
    def __init__(self, field_name: str):
        super().__init__(f"Missing required field: {field_name}")
        self.field_name = field_name


class InvalidTransitionError(AppBuilderError):
    """A UI session action was attempted from a state that does not allow it."""
