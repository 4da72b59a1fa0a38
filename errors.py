"""
errors.py — Error taxonomy for the integration & analysis pipeline.

Every error a caller can see carries the HTTP status the API blueprint
renders it with; the core itself never imports Flask.
"""
from typing import Any, Dict, Optional


class OracleError(Exception):
    """Base class for caller-visible errors."""
    status_code = 500
    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "kind": self.kind}


class NotFound(OracleError):
    status_code = 404
    kind = "not_found"


class InvalidCredential(OracleError):
    status_code = 401
    kind = "invalid_credential"

    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message)


class IntegrationInactive(OracleError):
    status_code = 403
    kind = "integration_inactive"

    def __init__(self, message: str = "Integration is inactive"):
        super().__init__(message)


class Forbidden(OracleError):
    """Caller identity does not own the requested integration."""
    status_code = 403
    kind = "forbidden"


class InferenceFailure(OracleError):
    """The analysis reached the Failed state; ``result`` is the terminal record."""
    status_code = 502
    kind = "inference_failure"

    def __init__(self, message: str, result: Optional[Any] = None):
        super().__init__(message)
        self.result = result

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.result is not None:
            body["result"] = self.result.to_dict()
        return body


class NotificationFailure(OracleError):
    """Webhook/callback delivery failed. Logged by the dispatcher, never surfaced."""
    kind = "notification_failure"


class InferenceError(Exception):
    """Raised by inference clients when the model call cannot produce text."""


class InvalidRequest(OracleError):
    """Malformed request body or query parameter."""
    status_code = 400
    kind = "bad_request"


class Unauthenticated(OracleError):
    """No caller identity supplied on an owner-scoped route."""
    status_code = 401
    kind = "unauthenticated"
