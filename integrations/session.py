"""Admin session state: bearer token and admin profile.

The session is held in memory and mirrored into the local store under
``adminToken`` / ``adminUser`` so it survives restarts.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

from pydantic import ValidationError

from app.config import Capability, StorageKey
from core.errors import NotAuthenticatedError, PermissionDeniedError
from database.json_repository import LocalStore
from database.models import AdminUserModel, has_capability


logger = logging.getLogger(__name__)


class SessionState:
    """Single source of truth for "am I logged in, as whom, with what token"."""

    def __init__(self, store: LocalStore):
        """Initialize an empty session.

        Args:
            store: Local store the session is mirrored into.
        """
        self.store = store
        self._token: Optional[str] = None
        self._admin: Optional[AdminUserModel] = None

    @classmethod
    async def restore(cls, store: LocalStore) -> SessionState:
        """Build a session from whatever the local store holds."""
        session = cls(store)
        await session.load()
        return session

    async def load(self) -> None:
        """Reload token and profile from the local store."""
        token = await self.store.get(StorageKey.ADMIN_TOKEN.value)
        self._token = token if isinstance(token, str) and token else None

        raw_admin = await self.store.get(StorageKey.ADMIN_USER.value)
        self._admin = None
        if raw_admin:
            try:
                self._admin = AdminUserModel.model_validate(raw_admin)
            except ValidationError as e:
                logger.warning(f"Ignoring unreadable stored admin profile: {e}")

        if self._token:
            logger.info(f"Restored admin session for {self.admin_email or 'unknown admin'}")

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def current_admin(self) -> Optional[AdminUserModel]:
        return self._admin

    @property
    def admin_email(self) -> Optional[str]:
        return self._admin.email if self._admin else None

    def is_authenticated(self) -> bool:
        """True iff a non-empty token is present."""
        return bool(self._token)

    def auth_headers(self) -> Dict[str, str]:
        """Authorization header for the current token (empty when logged out)."""
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    async def start(self, token: str, admin: Optional[AdminUserModel]) -> None:
        """Store a freshly issued token and profile."""
        self._token = token or None
        self._admin = admin

        if self._token:
            await self.store.set(StorageKey.ADMIN_TOKEN.value, self._token)
        else:
            await self.store.remove(StorageKey.ADMIN_TOKEN.value)

        await self.update_profile(admin)

    async def update_profile(self, admin: Optional[AdminUserModel]) -> None:
        """Replace the cached admin profile."""
        self._admin = admin
        if admin is None:
            await self.store.remove(StorageKey.ADMIN_USER.value)
        else:
            await self.store.set(StorageKey.ADMIN_USER.value, admin.to_wire())

    async def clear(self) -> None:
        """Forget token and profile. Safe to call repeatedly."""
        self._token = None
        self._admin = None
        await self.store.remove(StorageKey.ADMIN_TOKEN.value)
        await self.store.remove(StorageKey.ADMIN_USER.value)

    def has_capability(self, capability: Capability) -> bool:
        """Check the logged-in admin's role against ``capability``."""
        return self.is_authenticated() and has_capability(self._admin, capability)

    def require_capability(self, capability: Capability) -> None:
        """Raise unless the logged-in admin has ``capability``.

        Raises:
            NotAuthenticatedError: Nobody is logged in.
            PermissionDeniedError: The admin's role lacks the capability.
        """
        if not self.is_authenticated():
            raise NotAuthenticatedError()
        if not has_capability(self._admin, capability):
            raise PermissionDeniedError(
                f"{capability.value} requires super admin access"
            )


__all__ = ["SessionState"]
