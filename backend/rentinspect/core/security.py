"""Firebase ID token verification and actor resolution."""

import logging
from typing import Optional

import firebase_admin
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth, credentials
from sqlalchemy.ext.asyncio import AsyncSession

from rentinspect.core.config import get_settings
from rentinspect.core.database import get_db
from rentinspect.models.user import User
from rentinspect.services.record_store import RecordStore

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_firebase_app() -> firebase_admin.App:
    """Initialize the Firebase Admin SDK on first use."""
    if not firebase_admin._apps:
        settings = get_settings()
        options = {"projectId": settings.firebase_project_id}
        if settings.google_application_credentials:
            cred = credentials.Certificate(settings.google_application_credentials)
            return firebase_admin.initialize_app(cred, options)
        return firebase_admin.initialize_app(options=options)
    return firebase_admin.get_app()


def verify_session_token(token: str) -> Optional[dict]:
    """Verify a Firebase ID token. Returns the decoded claims, or None if invalid.

    This never mints tokens; it only verifies tokens issued by Firebase.
    """
    try:
        return auth.verify_id_token(token, app=get_firebase_app())
    except (auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError) as e:
        logger.info(f"[AUTH] Rejected token: {e}")
        return None
    except ValueError as e:
        logger.info(f"[AUTH] Malformed token: {e}")
        return None


async def resolve_actor(session_token: Optional[str], store: RecordStore) -> Optional[User]:
    """Resolve an opaque session token to the user it belongs to."""
    if not session_token:
        return None
    claims = verify_session_token(session_token)
    if claims is None:
        return None

    user = await store.get_user_by_firebase_uid(claims["uid"])
    if user is None and claims.get("email") and claims.get("email_verified", False):
        user = await store.get_user_by_email(claims["email"])
    return user


async def get_current_actor(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """FastAPI dependency: the authenticated, provisioned user."""
    actor = await resolve_actor(creds.credentials if creds else None, RecordStore(db))
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor
