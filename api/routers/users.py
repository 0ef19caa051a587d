"""User signup endpoint.

POST /users/signup - get or create the user record for an email address
"""

import logging
import re
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from api.deps import get_user_repository_required
from application.ports.user_repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class SignupRequest(BaseModel):
    email: Optional[str] = None


@router.post("/signup")
async def signup(
    body: SignupRequest,
    user_repo: UserRepository = Depends(get_user_repository_required),
):
    """Return the existing user for this email, creating a `pending` one if needed.

    The returned `userId` is what the front end stores and sends with operations.
    """
    email = (body.email or "").strip().lower()
    if not _EMAIL_RE.match(email):
        return JSONResponse(status_code=400, content={"error": "A valid email is required"})

    try:
        user = await user_repo.get_or_create_by_email(email)
    except Exception as e:
        logger.exception("Signup failed: %s", e)
        return JSONResponse(status_code=500, content={"error": "Unable to create user"})

    return {"user": user, "userId": user.get("id")}
