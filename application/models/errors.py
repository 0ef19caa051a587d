"""Error taxonomy shared by the dispatcher, the HTTP layer and the client.

Every failure is classified once, where it happens, into an ErrorKind. The
kind travels on the wire as `errorType` so callers never match on message text.
"""

from enum import Enum
from typing import Iterable, List, Optional

from application.models.operations import FREE_TRIAL_LIMIT_MESSAGE, SUPPORTED_OPERATIONS


class ErrorKind(str, Enum):
    validation_error = "VALIDATION_ERROR"
    unsupported_operation = "UNSUPPORTED_OPERATION"
    free_trial_limit = "FREE_TRIAL_LIMIT"
    timeout = "TIMEOUT"
    network_unavailable = "NETWORK_UNAVAILABLE"
    backend_error = "BACKEND_ERROR"
    malformed_response = "MALFORMED_RESPONSE"
    configuration_error = "CONFIGURATION_ERROR"

    @property
    def retryable(self) -> bool:
        """Whether a caller may retry an attempt that failed with this kind."""
        return self in _RETRYABLE

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ErrorKind"]:
        for kind in cls:
            if kind.value == value:
                return kind
        return None


_RETRYABLE = frozenset(
    {ErrorKind.timeout, ErrorKind.network_unavailable, ErrorKind.backend_error}
)


class OperationError(Exception):
    """Base class for classified operation failures.

    `message` is safe to show to the end user.
    """

    kind: ErrorKind = ErrorKind.backend_error

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(OperationError):
    kind = ErrorKind.validation_error


class MissingParameters(ValidationError):
    def __init__(self, operation: str, missing: Iterable[str]):
        self.operation = operation
        self.missing: List[str] = list(missing)
        super().__init__(
            f"Missing required parameters: {', '.join(self.missing)} for operation {operation}"
        )


class UnsupportedOperation(OperationError):
    kind = ErrorKind.unsupported_operation

    def __init__(self, operation: Optional[str]):
        self.operation = operation
        self.supported_operations: List[str] = list(SUPPORTED_OPERATIONS)
        super().__init__(f"Operation not supported: {operation}")


class FreeTrialLimitReached(OperationError):
    kind = ErrorKind.free_trial_limit

    def __init__(self, message: str = FREE_TRIAL_LIMIT_MESSAGE):
        super().__init__(message)


class GenerationTimeout(OperationError):
    kind = ErrorKind.timeout

    def __init__(self, message: str = "Request to AI service timed out. Please try again."):
        super().__init__(message)


class NetworkUnavailable(OperationError):
    kind = ErrorKind.network_unavailable

    def __init__(
        self,
        message: str = "Network error connecting to AI service. Please check your connection.",
    ):
        super().__init__(message)


class BackendFault(OperationError):
    kind = ErrorKind.backend_error

    def __init__(self, detail: str = "Unknown error"):
        self.detail = detail
        super().__init__(f"AI service error: {detail}")


class MalformedResponse(OperationError):
    kind = ErrorKind.malformed_response

    def __init__(self, message: str = "No response from AI service"):
        super().__init__(message)


class ConfigurationError(OperationError):
    """Raised when a server credential is missing. Carries no detail."""

    kind = ErrorKind.configuration_error

    def __init__(self):
        super().__init__("Server configuration error")
