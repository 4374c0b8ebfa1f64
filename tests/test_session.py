from __future__ import annotations

import pytest

from app.config import Capability, StorageKey
from core.errors import NotAuthenticatedError, PermissionDeniedError
from integrations.session import SessionState


@pytest.mark.asyncio
async def test_start_persists_and_restore_recovers(store, session, admin_user):
    await session.start("tok-1", admin_user)

    assert session.is_authenticated()
    assert session.auth_headers() == {"Authorization": "Bearer tok-1"}
    assert await store.get(StorageKey.ADMIN_TOKEN.value) == "tok-1"

    restored = await SessionState.restore(store)
    assert restored.token == "tok-1"
    assert restored.admin_email == "admin@example.com"


@pytest.mark.asyncio
async def test_restore_ignores_unreadable_profile(store):
    await store.set(StorageKey.ADMIN_TOKEN.value, "tok-1")
    await store.set(StorageKey.ADMIN_USER.value, {"role": "admin"})

    restored = await SessionState.restore(store)

    assert restored.is_authenticated()
    assert restored.current_admin is None


@pytest.mark.asyncio
async def test_clear_is_idempotent(store, session, admin_user):
    await session.start("tok-1", admin_user)

    await session.clear()
    await session.clear()

    assert not session.is_authenticated()
    assert session.auth_headers() == {}
    assert await store.get(StorageKey.ADMIN_TOKEN.value) is None


@pytest.mark.asyncio
async def test_require_capability(session, admin_user, super_admin_user):
    with pytest.raises(NotAuthenticatedError):
        session.require_capability(Capability.MANAGE_CONTENT)

    await session.start("tok-1", admin_user)
    session.require_capability(Capability.MANAGE_CONTENT)
    with pytest.raises(PermissionDeniedError):
        session.require_capability(Capability.MANAGE_ADMINS)

    await session.update_profile(super_admin_user)
    session.require_capability(Capability.MANAGE_ADMINS)
    assert session.has_capability(Capability.MANAGE_SETTINGS)
