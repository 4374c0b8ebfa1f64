"""Admin authentication and admin-user management.

Unlike entity reads and writes, every error here propagates to the caller so
it can be shown to the admin (invalid credentials, weak password, ...).
"""

from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import quote

from pydantic import TypeAdapter

from app.config import AdminRole, Capability
from core.errors import DataLayerError, NotAuthenticatedError, RequestFailedError
from database.models import AdminUserModel
from integrations.api_client import ApiClient
from integrations.session import SessionState


logger = logging.getLogger(__name__)


class AuthService:
    """Login/logout, token verification and admin user management."""

    def __init__(self, client: ApiClient, session: SessionState):
        """
        Initialize auth service.

        Args:
            client: API client
            session: Session receiving the issued token
        """
        self.client = client
        self.session = session

    def is_authenticated(self) -> bool:
        return self.session.is_authenticated()

    @property
    def current_admin(self) -> Optional[AdminUserModel]:
        return self.session.current_admin

    async def login(self, email: str, password: str) -> AdminUserModel:
        """
        Exchange credentials for a bearer token.

        Args:
            email: Admin email
            password: Admin password

        Returns:
            Logged-in admin profile

        Raises:
            RequestFailedError: Server rejected the request (message from server)
            AuthenticationExpiredError: Server answered 401 (invalid credentials)
            NetworkError: Server unreachable
        """
        response = await self.client.request(
            "/admin/login",
            method="POST",
            body={"email": email, "password": password},
            authenticated=False,
        )

        token = (response or {}).get("token")
        if not token:
            raise RequestFailedError(200, "Login response did not include a token")

        admin_data = response.get("admin")
        admin = AdminUserModel.model_validate(admin_data) if admin_data else None
        await self.session.start(token, admin)

        logger.info(f"Admin logged in: {admin.email if admin else email}")
        return admin

    async def logout(self) -> None:
        """Forget the session. Idempotent."""
        await self.session.clear()

    async def verify(self) -> AdminUserModel:
        """
        Check the stored token with the server and refresh the profile.

        Any failure logs the admin out before the error propagates.

        Raises:
            NotAuthenticatedError: No token is stored
        """
        if not self.session.is_authenticated():
            raise NotAuthenticatedError()

        try:
            response = await self.client.request("/admin/verify")
            admin = AdminUserModel.model_validate((response or {}).get("admin") or {})
        except (DataLayerError, ValueError) as e:
            logger.error(f"Token verification failed: {e}")
            await self.session.clear()
            raise

        await self.session.update_profile(admin)
        return admin

    async def change_password(self, current_password: str, new_password: str) -> dict:
        """Change the logged-in admin's password."""
        if not self.session.is_authenticated():
            raise NotAuthenticatedError()

        return await self.client.request(
            "/admin/change-password",
            method="POST",
            body={"currentPassword": current_password, "newPassword": new_password},
        )

    # Admin management (super admins only)

    async def get_admin_users(self) -> List[AdminUserModel]:
        self.session.require_capability(Capability.MANAGE_ADMINS)
        payload = await self.client.request("/admin/users")
        return TypeAdapter(List[AdminUserModel]).validate_python(payload or [])

    async def create_admin_user(
        self,
        email: str,
        password: str,
        role: AdminRole = AdminRole.ADMIN
    ) -> AdminUserModel:
        self.session.require_capability(Capability.MANAGE_ADMINS)
        payload = await self.client.request(
            "/admin/users",
            method="POST",
            body={"email": email, "password": password, "role": AdminRole(role).value},
        )
        admin = (payload or {}).get("admin", payload)
        return AdminUserModel.model_validate(admin)

    async def delete_admin_user(self, admin_id: str) -> dict:
        self.session.require_capability(Capability.MANAGE_ADMINS)
        logger.info(f"Deleting admin user {admin_id}")
        return await self.client.request(
            f"/admin/users/{quote(str(admin_id), safe='')}",
            method="DELETE",
        )


__all__ = ["AuthService"]
