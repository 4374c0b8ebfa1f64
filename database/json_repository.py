"""JSON-file local storage used as the offline fallback for the remote API.

`LocalStore` is a small async key-value store (the role localStorage plays in a
browser). `LocalRepository` implements every entity operation on top of it.
Storage failures never propagate: reads degrade to "no data" and writes are
dropped, both with a logged error.
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

import aiofiles
from pydantic import ValidationError

from app.config import StorageKey
from core.errors import LocalStorageError
from database.models import (
    CommunityModel,
    ContactModel,
    ListingModel,
    PropertyModel,
    WireModel,
)
from database.repository import BaseRepository
from utils.helpers import generate_id


logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=WireModel)


class LocalStore:
    """
    JSON file-based key-value store with async operations.

    Every value is JSON-serialized; a missing key reads as None.
    Safe for concurrent coroutines using an asyncio lock.
    """

    def __init__(self, store_path: Path):
        """
        Initialize local store.

        Args:
            store_path: Path to the JSON file backing the store
        """
        self.store_path = Path(store_path)
        self._lock = asyncio.Lock()
        self._ensure_store_exists()

    def _ensure_store_exists(self) -> None:
        """Create store directory and file if not exists."""
        try:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            if not self.store_path.exists():
                self.store_path.write_text("{}", encoding="utf-8")
        except OSError as e:
            logger.error(f"Cannot initialize local store at {self.store_path}: {e}")

    async def _load_data(self) -> Dict[str, Any]:
        """Load the whole store from disk."""
        try:
            async with aiofiles.open(self.store_path, "r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise LocalStorageError(f"read failed: {e}") from e

        if not content.strip():
            return {}

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise LocalStorageError(f"corrupted JSON: {e}") from e

        if not isinstance(data, dict):
            raise LocalStorageError("store root is not a JSON object")
        return data

    async def _save_data(self, data: Dict[str, Any]) -> None:
        """Write the whole store to disk."""
        try:
            payload = json.dumps(data, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as e:
            raise LocalStorageError(f"value is not JSON-serializable: {e}") from e

        try:
            async with aiofiles.open(self.store_path, "w", encoding="utf-8") as f:
                await f.write(payload)
        except OSError as e:
            raise LocalStorageError(f"write failed: {e}") from e

    async def get(self, key: str) -> Any:
        """
        Read a value.

        Args:
            key: Storage key

        Returns:
            Stored value, or None when missing or unreadable
        """
        async with self._lock:
            try:
                data = await self._load_data()
            except LocalStorageError as e:
                logger.error(f"Error getting '{key}' from local store: {e}")
                return None

        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        """
        Write a value. Failures are logged and the write is dropped.

        Args:
            key: Storage key
            value: JSON-serializable value
        """
        async with self._lock:
            try:
                data = await self._load_data()
            except LocalStorageError as e:
                logger.warning(f"Local store unreadable, starting fresh: {e}")
                data = {}

            data[key] = value
            try:
                await self._save_data(data)
            except LocalStorageError as e:
                logger.error(f"Error setting '{key}' in local store: {e}")

    async def remove(self, key: str) -> None:
        """Remove a key if present."""
        async with self._lock:
            try:
                data = await self._load_data()
                if key not in data:
                    return
                del data[key]
                await self._save_data(data)
            except LocalStorageError as e:
                logger.error(f"Error removing '{key}' from local store: {e}")

    async def clear(self) -> None:
        """Drop every key."""
        async with self._lock:
            try:
                await self._save_data({})
            except LocalStorageError as e:
                logger.error(f"Error clearing local store: {e}")


class LocalRepository(BaseRepository):
    """
    Entity repository over `LocalStore`.

    Each entity family lives under its own key as a JSON array. Records are
    upserted and deleted by ID; unknown or malformed records already in storage
    are kept as-is on write and skipped on read.
    """

    def __init__(self, store: LocalStore):
        """
        Initialize local repository.

        Args:
            store: Local key-value store
        """
        self.store = store

    # Generic helpers

    async def _load_raw(self, key: StorageKey) -> List[Dict[str, Any]]:
        """Load the raw record list stored under ``key``."""
        raw = await self.store.get(key.value)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.error(f"Local '{key.value}' is not a list, ignoring it")
            return []
        return [item for item in raw if isinstance(item, dict)]

    async def _load_records(
        self,
        key: StorageKey,
        model: Type[RecordT]
    ) -> List[RecordT]:
        """Load and validate records, skipping malformed ones."""
        records = []
        for item in await self._load_raw(key):
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    f"Skipping malformed {model.__name__} "
                    f"{item.get('id')!r} in local '{key.value}': {e.error_count()} errors"
                )
        return records

    async def _find(
        self,
        key: StorageKey,
        model: Type[RecordT],
        record_id: str
    ) -> Optional[RecordT]:
        for record in await self._load_records(key, model):
            if record.id == record_id:
                return record
        return None

    async def _upsert(self, key: StorageKey, record: RecordT) -> RecordT:
        """Replace the record with the same ID, or append it."""
        if record.id is None:
            record = record.model_copy(update={"id": generate_id()})

        items = await self._load_raw(key)
        payload = record.to_wire()

        for index, item in enumerate(items):
            if str(item.get("id")) == record.id:
                items[index] = payload
                break
        else:
            items.append(payload)

        await self.store.set(key.value, items)
        return record

    async def _delete(self, key: StorageKey, record_id: str) -> bool:
        """Remove the record with ``record_id``; True if something was removed."""
        items = await self._load_raw(key)
        remaining = [item for item in items if str(item.get("id")) != record_id]

        if len(remaining) == len(items):
            return False

        await self.store.set(key.value, remaining)
        return True

    # Community operations

    async def get_communities(self) -> List[CommunityModel]:
        return await self._load_records(StorageKey.COMMUNITIES, CommunityModel)

    async def get_community(self, community_id: str) -> Optional[CommunityModel]:
        return await self._find(StorageKey.COMMUNITIES, CommunityModel, community_id)

    async def create_community(self, community: CommunityModel) -> CommunityModel:
        return await self._upsert(StorageKey.COMMUNITIES, community)

    async def update_community(self, community: CommunityModel) -> CommunityModel:
        return await self._upsert(StorageKey.COMMUNITIES, community)

    async def delete_community(self, community_id: str) -> bool:
        return await self._delete(StorageKey.COMMUNITIES, community_id)

    # Listing operations

    async def get_listings(
        self,
        community_id: Optional[str] = None
    ) -> List[ListingModel]:
        """
        Get listings from local storage.

        Args:
            community_id: Optional community filter

        Returns:
            List of listing models
        """
        listings = await self._load_records(StorageKey.LISTINGS, ListingModel)
        if community_id is None:
            return listings
        return [listing for listing in listings if listing.community_id == community_id]

    async def get_listing(self, listing_id: str) -> Optional[ListingModel]:
        return await self._find(StorageKey.LISTINGS, ListingModel, listing_id)

    async def create_listing(self, listing: ListingModel) -> ListingModel:
        return await self._upsert(StorageKey.LISTINGS, listing)

    async def update_listing(self, listing: ListingModel) -> ListingModel:
        return await self._upsert(StorageKey.LISTINGS, listing)

    async def delete_listing(self, listing_id: str) -> bool:
        return await self._delete(StorageKey.LISTINGS, listing_id)

    # Property operations

    async def get_properties(self) -> List[PropertyModel]:
        return await self._load_records(StorageKey.PROPERTIES, PropertyModel)

    async def get_property(self, property_id: str) -> Optional[PropertyModel]:
        return await self._find(StorageKey.PROPERTIES, PropertyModel, property_id)

    async def create_property(self, prop: PropertyModel) -> PropertyModel:
        return await self._upsert(StorageKey.PROPERTIES, prop)

    async def update_property(self, prop: PropertyModel) -> PropertyModel:
        return await self._upsert(StorageKey.PROPERTIES, prop)

    async def delete_property(self, property_id: str) -> bool:
        return await self._delete(StorageKey.PROPERTIES, property_id)

    # Contact operations

    async def get_contacts(self) -> List[ContactModel]:
        return await self._load_records(StorageKey.CONTACTS, ContactModel)

    async def create_contact(self, contact: ContactModel) -> ContactModel:
        """Append a contact submission (contacts are never updated)."""
        if contact.id is None:
            contact = contact.model_copy(update={"id": generate_id()})

        items = await self._load_raw(StorageKey.CONTACTS)
        items.append(contact.to_wire())
        await self.store.set(StorageKey.CONTACTS.value, items)
        return contact

    async def delete_contact(self, contact_id: str) -> bool:
        return await self._delete(StorageKey.CONTACTS, contact_id)

    async def clear_contacts(self) -> None:
        """Remove every stored contact submission."""
        await self.store.remove(StorageKey.CONTACTS.value)

    # Seeding

    async def seed(
        self,
        communities: List[CommunityModel],
        listings: List[ListingModel]
    ) -> bool:
        """
        Store example data when no communities exist locally.

        Returns:
            True if data was written
        """
        if await self._load_raw(StorageKey.COMMUNITIES):
            return False

        await self.store.set(
            StorageKey.COMMUNITIES.value,
            [community.to_wire() for community in communities]
        )
        await self.store.set(
            StorageKey.LISTINGS.value,
            [listing.to_wire() for listing in listings]
        )
        logger.info(
            f"Seeded local store with {len(communities)} communities "
            f"and {len(listings)} listings"
        )
        return True


__all__ = ["LocalStore", "LocalRepository"]
