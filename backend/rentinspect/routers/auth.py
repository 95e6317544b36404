"""Auth router - who am I."""

from fastapi import APIRouter, Depends

from rentinspect.core.security import get_current_actor
from rentinspect.models.user import User
from rentinspect.schemas.report import ActorResponse

router = APIRouter(prefix="/me", tags=["auth"])


@router.get("", response_model=ActorResponse)
async def get_me(actor: User = Depends(get_current_actor)):
    """Return the user the bearer token resolves to."""
    return actor
