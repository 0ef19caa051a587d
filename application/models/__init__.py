"""Application domain models for AI operations."""

from .errors import (
    BackendFault,
    ConfigurationError,
    ErrorKind,
    FreeTrialLimitReached,
    GenerationTimeout,
    MalformedResponse,
    MissingParameters,
    NetworkUnavailable,
    OperationError,
    UnsupportedOperation,
    ValidationError,
)
from .operations import (
    FREE_TRIAL_LIMIT_MESSAGE,
    FREE_TRIAL_STATUS,
    GENERATION_SETTINGS,
    REQUIRED_PARAMS,
    SUPPORTED_OPERATIONS,
    GenerationSettings,
    OperationKind,
    OperationRecord,
    QuotaDecision,
    missing_params,
)

__all__ = [
    "BackendFault",
    "ConfigurationError",
    "ErrorKind",
    "FreeTrialLimitReached",
    "GenerationTimeout",
    "MalformedResponse",
    "MissingParameters",
    "NetworkUnavailable",
    "OperationError",
    "UnsupportedOperation",
    "ValidationError",
    "FREE_TRIAL_LIMIT_MESSAGE",
    "FREE_TRIAL_STATUS",
    "GENERATION_SETTINGS",
    "REQUIRED_PARAMS",
    "SUPPORTED_OPERATIONS",
    "GenerationSettings",
    "OperationKind",
    "OperationRecord",
    "QuotaDecision",
    "missing_params",
]
