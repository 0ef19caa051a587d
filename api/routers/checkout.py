"""Subscription checkout endpoint.

POST /checkout - create a LemonSqueezy hosted checkout for a verified user
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from api.deps import get_checkout_service
from backend.services.checkout_service import CheckoutError, CheckoutService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checkout"])


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    customer_email: Optional[str] = Field(None, alias="customerEmail")
    user_id: Optional[str] = Field(None, alias="userId")
    variant_id: Optional[str] = Field(None, alias="variantId")


@router.post("/checkout")
async def create_checkout(
    body: CheckoutRequest,
    service: Optional[CheckoutService] = Depends(get_checkout_service),
):
    """Create a checkout and return its hosted URL.

    Returns 404 if the user cannot be verified, and the provider's status
    when LemonSqueezy rejects the request.
    """
    if service is None:
        logger.error("Checkout requested but LemonSqueezy or Supabase is not configured")
        return JSONResponse(status_code=500, content={"error": "Server configuration error"})

    if not (body.customer_email and body.user_id and body.variant_id):
        return JSONResponse(
            status_code=400,
            content={"error": "Missing required fields: customerEmail, userId, variantId"},
        )

    try:
        checkout = await service.create_checkout(
            customer_email=body.customer_email,
            user_id=body.user_id,
            variant_id=body.variant_id,
        )
    except CheckoutError as e:
        return JSONResponse(status_code=e.status_code, content={"error": e.message})
    except Exception as e:
        logger.exception("Unexpected checkout failure: %s", e)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    return {
        "checkout_url": checkout.checkout_url,
        "checkout_id": checkout.checkout_id,
        "userId": body.user_id,
        "success": True,
    }
