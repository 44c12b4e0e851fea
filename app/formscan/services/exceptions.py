"""
Shared exceptions for the upload pipeline and its collaborators.

Every pipeline stage raises exactly one kind of error; the routers map the
kind to an HTTP status.
"""


class FormPipelineError(Exception):
    """Base class for every stage failure."""

    code = "pipeline_error"

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage


class InvalidInput(FormPipelineError):
    """The request itself is unusable (user-correctable)."""

    code = "invalid_input"


class StorageError(FormPipelineError):
    """Raised when the image could not be stored or signed."""

    code = "storage_error"


class ExtractionError(FormPipelineError):
    """Raised when the vision model call fails or returns nothing."""

    code = "extraction_error"


class ExtractionParseError(ExtractionError):
    """Raised when the model response is not a JSON object."""

    code = "extraction_parse_error"


class SchemaValidationError(FormPipelineError):
    """Raised when required fields are missing from the extraction output."""

    code = "schema_validation_error"

    def __init__(
        self,
        message: str,
        missing_fields: list[str] | None = None,
        stage: str | None = None,
    ):
        super().__init__(message, stage=stage)
        self.missing_fields = missing_fields or []


class PersistenceError(FormPipelineError):
    """Raised when the document store rejects a read or write."""

    code = "persistence_error"


class SpreadsheetError(FormPipelineError):
    """Raised when the spreadsheet mirror row could not be appended."""

    code = "spreadsheet_error"


class ServiceUnavailable(FormPipelineError):
    """A backend dependency is not provisioned or not reachable."""

    code = "service_unavailable"

    def __init__(
        self,
        message: str,
        hint: str = "",
        details: str = "",
        stage: str | None = None,
    ):
        super().__init__(message, stage=stage)
        self.hint = hint
        self.details = details
