import secrets

from src.farmconnect.core.models.session import UserSession
from src.farmconnect.core.security import hash_client_fingerprint
from src.farmconnect.core.storage.session_storage import SessionStorage
from src.farmconnect.runtime.context import get_config


def _key(session_id: str) -> str:
    return f"user:{session_id}"


class UserSessionService:
    """Service for managing signed-in user sessions."""

    def __init__(self, session_storage: SessionStorage) -> None:
        self._storage = session_storage

    async def create_user_session(
        self, user_id: str, user_agent: str | None, user_type: str | None = None
    ) -> str:
        """Create a session for ``user_id`` bound to the client's user agent.

        Returns:
            Session ID
        """
        max_age = get_config().app.session_max_age
        user_session = UserSession.create(
            session_id=secrets.token_urlsafe(32),
            user_id=user_id,
            user_type=user_type,
            client_fingerprint=hash_client_fingerprint(user_agent),
            session_max_age=max_age,
        )
        await self._storage.set(_key(user_session.id), user_session, max_age)
        return user_session.id

    async def get_user_session(self, session_id: str) -> UserSession | None:
        """Get a live session by ID, refreshing its last-access time."""
        user_session = await self._storage.get(_key(session_id), UserSession)
        if not user_session:
            return None

        if user_session.is_expired():
            await self._storage.delete(_key(session_id))
            return None

        user_session.update_access()
        await self._storage.set(
            _key(user_session.id), user_session, get_config().app.session_max_age
        )
        return user_session

    async def validate_user_session(
        self, session_id: str, user_agent: str | None
    ) -> UserSession | None:
        """Return the session if it exists and belongs to this client.

        A fingerprint mismatch deletes the session.
        """
        user_session = await self.get_user_session(session_id)
        if not user_session:
            return None

        if hash_client_fingerprint(user_agent) != user_session.client_fingerprint:
            await self.delete_user_session(session_id)
            return None

        return user_session

    async def delete_user_session(self, session_id: str) -> None:
        await self._storage.delete(_key(session_id))

    async def delete_sessions_for_user(self, user_id: str, keep: str | None = None) -> int:
        """Drop every session of ``user_id`` except ``keep``."""
        removed = 0
        for key in await self._storage.list_keys("user:*"):
            user_session = await self._storage.get(key, UserSession)
            if user_session and user_session.user_id == user_id and user_session.id != keep:
                await self._storage.delete(key)
                removed += 1
        return removed

    async def purge_expired(self) -> int:
        return await self._storage.cleanup_expired()
