"""Error taxonomy shared by the generation pipeline, the store and the routers.

Every error carries a ``kind`` discriminant and the HTTP status it maps to at
the request boundary (see ``main.handle_service_error``).
"""

from __future__ import annotations

from typing import Optional


class ProblemServiceError(Exception):
    kind = "internal"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ExtractionError(ProblemServiceError):
    """No JSON-shaped region in the model output."""

    kind = "extraction"


class ParseError(ProblemServiceError):
    """A JSON-shaped region was found but it is not valid JSON."""

    kind = "parse"


class SchemaError(ProblemServiceError):
    """Valid JSON with a missing or invalid required field."""

    kind = "schema"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ModelError(ProblemServiceError):
    kind = "model"


class StorageError(ProblemServiceError):
    kind = "storage"


class CatalogError(ProblemServiceError):
    kind = "catalog"


class NotFoundError(ProblemServiceError):
    kind = "not_found"
    status_code = 404


class BadRequestError(ProblemServiceError):
    kind = "bad_request"
    status_code = 400
