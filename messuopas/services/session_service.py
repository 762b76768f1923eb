"""Login sessions: resolving a session secret to the signed-in user."""

import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from messuopas.exceptions import DatabaseError, NotFoundError
from messuopas.models import AuthSession, User
from messuopas.models.base import utcnow
from messuopas.storage.document_store import DocumentStore

logger = logging.getLogger(__name__)


class SessionService:
    """Creates, resolves and ends cookie sessions."""

    def __init__(self, session: Session):
        self.session = session
        self.store = DocumentStore(session)

    def create_session(self, user_id: str, expires_at: Optional[datetime] = None) -> AuthSession:
        """
        Start a session for a user.

        Raises:
            NotFoundError: If the user does not exist
            DatabaseError: If database operation fails
        """
        self.store.get_document("users", user_id)
        try:
            auth_session = self.store.create_document(
                "sessions",
                {
                    "secret": secrets.token_urlsafe(32),
                    "user_id": user_id,
                    "expires_at": expires_at,
                },
            )
            self.session.commit()
            return auth_session

        except NotFoundError:
            raise
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to create session: {str(e)}", e) from e

    def resolve_user(self, secret: Optional[str]) -> Optional[User]:
        """Return the user behind a session secret, or None when it is unknown or expired."""
        if not secret:
            return None
        auth_session = self.store.find_one("sessions", secret=secret)
        if auth_session is None:
            return None
        if auth_session.expires_at is not None:
            expires_at = auth_session.expires_at
            if expires_at.tzinfo is None:
                expires_at = expires_at.replace(tzinfo=timezone.utc)
            if expires_at < utcnow():
                logger.debug("Session %s has expired", auth_session.id)
                return None
        return self.session.get(User, auth_session.user_id)

    def end_session(self, secret: str) -> bool:
        auth_session = self.store.find_one("sessions", secret=secret)
        if auth_session is None:
            return False
        try:
            self.store.delete_document("sessions", auth_session.id)
            self.session.commit()
            return True
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to end session: {str(e)}", e) from e
