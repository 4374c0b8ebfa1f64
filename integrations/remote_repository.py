"""Repository backed by the remote REST API.

Reads go to the admin endpoints when an admin is logged in and to the public
read-only mirrors (``/public/...``) otherwise. Properties and the contact list
are admin-only; contact submission always uses the public endpoint.
A 404 on get/delete means "not found", every other failure raises.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Type, TypeVar
from urllib.parse import quote

from pydantic import TypeAdapter

from core.errors import RequestFailedError
from database.models import (
    CommunityModel,
    ContactModel,
    ListingModel,
    PropertyModel,
    WireModel,
)
from database.repository import BaseRepository
from integrations.api_client import ApiClient


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=WireModel)


def _path(collection: str, record_id: str) -> str:
    return f"{collection}/{quote(str(record_id), safe='')}"


def _body(record: WireModel) -> dict:
    """Wire payload without a null ID (the server assigns one)."""
    payload = record.to_wire()
    if payload.get("id") is None:
        payload.pop("id", None)
    return payload


class RemoteRepository(BaseRepository):
    """Entity operations over `ApiClient`."""

    def __init__(self, client: ApiClient):
        """Initialize remote repository.

        Args:
            client: API client (its session selects admin vs public routes).
        """
        self.client = client

    def _use_admin(self, admin: Optional[bool]) -> bool:
        if admin is None:
            return self.client.session.is_authenticated()
        return admin

    # Generic helpers

    async def _list(
        self,
        model: Type[RecordT],
        collection: str,
        admin: bool,
        params: Optional[dict] = None,
    ) -> List[RecordT]:
        endpoint = collection if admin else f"/public{collection}"
        payload = await self.client.request(
            endpoint, params=params, authenticated=admin
        )
        return TypeAdapter(List[model]).validate_python(payload or [])

    async def _get(
        self,
        model: Type[RecordT],
        collection: str,
        record_id: str,
        admin: bool,
    ) -> Optional[RecordT]:
        endpoint = _path(collection, record_id)
        if not admin:
            endpoint = f"/public{endpoint}"

        try:
            payload = await self.client.request(endpoint, authenticated=admin)
        except RequestFailedError as e:
            if e.is_not_found:
                return None
            raise

        if payload is None:
            return None
        return model.model_validate(payload)

    async def _create(
        self,
        model: Type[RecordT],
        collection: str,
        record: RecordT,
        authenticated: bool = True,
    ) -> RecordT:
        payload = await self.client.request(
            collection,
            method="POST",
            body=_body(record),
            authenticated=authenticated,
        )
        return _merge_response(model, record, payload)

    async def _update(
        self,
        model: Type[RecordT],
        collection: str,
        record: RecordT,
    ) -> RecordT:
        if record.id is None:
            raise ValueError(f"Cannot update {model.__name__} without an id")

        payload = await self.client.request(
            _path(collection, record.id),
            method="PUT",
            body=_body(record),
        )
        return _merge_response(model, record, payload)

    async def _delete(self, collection: str, record_id: str) -> bool:
        try:
            await self.client.request(_path(collection, record_id), method="DELETE")
        except RequestFailedError as e:
            if e.is_not_found:
                return False
            raise
        return True

    # Community operations

    async def get_communities(self, admin: Optional[bool] = None) -> List[CommunityModel]:
        return await self._list(CommunityModel, "/communities", self._use_admin(admin))

    async def get_community(
        self,
        community_id: str,
        admin: Optional[bool] = None
    ) -> Optional[CommunityModel]:
        return await self._get(
            CommunityModel, "/communities", community_id, self._use_admin(admin)
        )

    async def create_community(self, community: CommunityModel) -> CommunityModel:
        return await self._create(CommunityModel, "/communities", community)

    async def update_community(self, community: CommunityModel) -> CommunityModel:
        return await self._update(CommunityModel, "/communities", community)

    async def delete_community(self, community_id: str) -> bool:
        return await self._delete("/communities", community_id)

    # Listing operations

    async def get_listings(
        self,
        community_id: Optional[str] = None,
        admin: Optional[bool] = None
    ) -> List[ListingModel]:
        return await self._list(
            ListingModel,
            "/listings",
            self._use_admin(admin),
            params={"communityId": community_id},
        )

    async def get_listing(
        self,
        listing_id: str,
        admin: Optional[bool] = None
    ) -> Optional[ListingModel]:
        return await self._get(ListingModel, "/listings", listing_id, self._use_admin(admin))

    async def create_listing(self, listing: ListingModel) -> ListingModel:
        return await self._create(ListingModel, "/listings", listing)

    async def update_listing(self, listing: ListingModel) -> ListingModel:
        return await self._update(ListingModel, "/listings", listing)

    async def delete_listing(self, listing_id: str) -> bool:
        return await self._delete("/listings", listing_id)

    # Property operations (admin only)

    async def get_properties(self) -> List[PropertyModel]:
        return await self._list(PropertyModel, "/properties", admin=True)

    async def get_property(self, property_id: str) -> Optional[PropertyModel]:
        return await self._get(PropertyModel, "/properties", property_id, admin=True)

    async def create_property(self, prop: PropertyModel) -> PropertyModel:
        return await self._create(PropertyModel, "/properties", prop)

    async def update_property(self, prop: PropertyModel) -> PropertyModel:
        return await self._update(PropertyModel, "/properties", prop)

    async def delete_property(self, property_id: str) -> bool:
        return await self._delete("/properties", property_id)

    # Contact operations

    async def get_contacts(self) -> List[ContactModel]:
        return await self._list(ContactModel, "/contacts", admin=True)

    async def create_contact(self, contact: ContactModel) -> ContactModel:
        """Submit a contact form through the unauthenticated endpoint."""
        return await self._create(
            ContactModel, "/public/contacts", contact, authenticated=False
        )

    async def delete_contact(self, contact_id: str) -> bool:
        return await self._delete("/contacts", contact_id)


def _merge_response(model: Type[RecordT], sent: RecordT, payload: Any) -> RecordT:
    """Prefer the server's echo of a record; fall back to what was sent.

    Some endpoints answer a write with only ``{"id": ..., "message": ...}``.
    """
    if not isinstance(payload, dict):
        return sent

    merged = sent.to_wire()
    merged.update({k: v for k, v in payload.items() if v is not None})
    return model.model_validate(merged)


__all__ = ["RemoteRepository"]
