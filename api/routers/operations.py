"""AI operation dispatch endpoint.

POST /.netlify/functions/ai-operations - path kept for existing front ends
POST /ai-operations                    - same handler

Request body: {"operation": str, "params": {...}, "userId": str | null}
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.deps import get_dispatch_operation_use_case
from application.models.errors import (
    BackendFault,
    ErrorKind,
    OperationError,
    UnsupportedOperation,
    ValidationError,
)
from application.use_cases.dispatch_operation import DispatchOperationUseCase

logger = logging.getLogger(__name__)

router = APIRouter(tags=["operations"])

LEGACY_PATH = "/.netlify/functions/ai-operations"

# Quota denials answer 200 so existing front ends read the body as a result.
STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.validation_error: 400,
    ErrorKind.unsupported_operation: 400,
    ErrorKind.free_trial_limit: 200,
    ErrorKind.timeout: 408,
    ErrorKind.network_unavailable: 503,
    ErrorKind.backend_error: 500,
    ErrorKind.malformed_response: 500,
    ErrorKind.configuration_error: 500,
}


def error_response(error: OperationError) -> JSONResponse:
    """Render a classified failure as the wire error body."""
    content: Dict[str, Any] = {"error": error.message, "errorType": error.kind.value}
    if isinstance(error, UnsupportedOperation):
        content["supportedOperations"] = error.supported_operations
    if error.kind is ErrorKind.free_trial_limit:
        content["isLimit"] = True
    return JSONResponse(status_code=STATUS_BY_KIND[error.kind], content=content)


@router.post(LEGACY_PATH)
@router.post("/ai-operations")
async def dispatch_operation(
    request: Request,
    use_case: DispatchOperationUseCase = Depends(get_dispatch_operation_use_case),
):
    """Run one AI operation and return `{"result": text}`.

    Classified failures return `{"error", "errorType"}` with the status from
    STATUS_BY_KIND.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid JSON in request body",
                "errorType": ErrorKind.validation_error.value,
            },
        )

    try:
        if not isinstance(body, dict):
            raise ValidationError("Request body must be a JSON object")
        params = body.get("params")
        if params is not None and not isinstance(params, dict):
            raise ValidationError("params must be a JSON object")

        result = await use_case.execute(
            operation=body.get("operation"),
            params=params,
            user_id=body.get("userId"),
        )
    except OperationError as e:
        if e.kind is ErrorKind.free_trial_limit:
            logger.info("Free trial limit reached for user %s", body.get("userId"))
        else:
            logger.warning("Operation failed (%s): %s", e.kind.value, e.message)
        return error_response(e)
    except Exception as e:
        logger.exception("Unexpected error dispatching operation: %s", e)
        return error_response(BackendFault("Internal server error"))

    return {"result": result}
