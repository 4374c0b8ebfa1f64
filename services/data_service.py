"""
Data facade - the single entry point for entity data.

Every entity operation tries the remote API first and, on any remote failure,
answers from local fallback storage instead of raising. Results are wrapped in
`DataResult` so callers can tell authoritative remote data from a degraded
local answer (and warn the admin that an edit was only saved locally).

Usage:
------
service = container.get_data_service()

result = await service.get_communities()
if result.is_degraded:
    logger.warning(f"Showing offline data: {result.error}")
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    List,
    Mapping,
    Optional,
    Type,
    TypeVar,
    Union,
)

from app.config import AdminRole, DataSource, SortKey
from core.errors import AuthenticationExpiredError, DataLayerError
from core.middleware import MetricsCollector
from database.example_data import example_communities, example_listings
from database.json_repository import LocalRepository
from database.models import (
    AdminUserModel,
    CommunityModel,
    ContactModel,
    ListingModel,
    PropertyModel,
    WireModel,
)
from integrations.remote_repository import RemoteRepository
from services.auth_service import AuthService
from services.community_cache import CommunityCache
from services.listing_search import FiltersLike, search_listings, sort_listings


logger = logging.getLogger(__name__)

T = TypeVar("T")
RecordT = TypeVar("RecordT", bound=WireModel)

# ValueError covers pydantic's ValidationError on malformed remote payloads
FALLBACK_ERRORS = (DataLayerError, ValueError)


@dataclass(frozen=True)
class DataResult(Generic[T]):
    """Facade answer tagged with where it came from."""

    data: T
    source: DataSource
    error: Optional[str] = None
    auth_expired: bool = False

    @property
    def is_degraded(self) -> bool:
        """True when the remote API failed and local storage answered."""
        return self.source == DataSource.LOCAL

    @property
    def found(self) -> bool:
        return self.data is not None


def _coerce(model: Type[RecordT], record: Union[RecordT, Mapping[str, Any]]) -> RecordT:
    if isinstance(record, model):
        return record
    return model.model_validate(record)


class DataService:
    """
    Facade over the remote repository, local fallback storage and the
    community lookup cache.

    Construct once per application (see `core.container.Container`) and pass
    it to consumers.
    """

    def __init__(
        self,
        remote: RemoteRepository,
        local: LocalRepository,
        cache: CommunityCache,
        auth: AuthService,
        metrics: Optional[MetricsCollector] = None,
    ):
        """
        Initialize the data facade.

        Args:
            remote: Repository over the REST API
            local: Repository over local fallback storage
            cache: Community lookup cache
            auth: Auth service (owns the session)
            metrics: Optional metrics collector
        """
        self.remote = remote
        self.local = local
        self.cache = cache
        self.auth = auth
        self.metrics = metrics or MetricsCollector()

    # =========================================================================
    # FALLBACK POLICY
    # =========================================================================

    async def _with_fallback(
        self,
        operation: str,
        remote_call: Callable[[], Awaitable[T]],
        local_call: Callable[[], Awaitable[T]],
    ) -> DataResult[T]:
        """Run ``remote_call``; on failure log it and answer with ``local_call``."""
        try:
            data = await remote_call()
        except FALLBACK_ERRORS as e:
            logger.error(f"API {operation} failed: {e} - using local storage")
            self.metrics.record_fallback(operation)
            data = await local_call()
            return DataResult(
                data=data,
                source=DataSource.LOCAL,
                error=str(e),
                auth_expired=isinstance(e, AuthenticationExpiredError),
            )

        self.metrics.record_remote(operation)
        return DataResult(data=data, source=DataSource.REMOTE)

    async def _save(
        self,
        operation: str,
        record: RecordT,
        create: Optional[bool],
        lookup: Callable[[str], Awaitable[Optional[RecordT]]],
        remote_create: Callable[[RecordT], Awaitable[RecordT]],
        remote_update: Callable[[RecordT], Awaitable[RecordT]],
        local_upsert: Callable[[RecordT], Awaitable[RecordT]],
    ) -> DataResult[RecordT]:
        """Create or update remotely, falling back to a local upsert.

        ``create`` states the intent. When it is None the record is created
        if it has no ID or the remote API does not know its ID yet (one extra
        round-trip, not atomic with the write).
        """
        async def remote_save() -> RecordT:
            should_create = create
            if should_create is None:
                should_create = record.id is None or await lookup(record.id) is None
            if should_create:
                return await remote_create(record)
            return await remote_update(record)

        return await self._with_fallback(
            operation, remote_save, lambda: local_upsert(record)
        )

    # =========================================================================
    # AUTHENTICATION (errors propagate)
    # =========================================================================

    async def login(self, email: str, password: str) -> AdminUserModel:
        try:
            return await self.auth.login(email, password)
        except DataLayerError as e:
            logger.error(f"Login failed: {e}")
            raise

    async def logout(self) -> None:
        await self.auth.logout()

    async def verify_authentication(self) -> AdminUserModel:
        return await self.auth.verify()

    def is_authenticated(self) -> bool:
        return self.auth.is_authenticated()

    def get_current_admin(self) -> Optional[AdminUserModel]:
        return self.auth.current_admin

    async def change_password(self, current_password: str, new_password: str) -> dict:
        try:
            return await self.auth.change_password(current_password, new_password)
        except DataLayerError as e:
            logger.error(f"Password change failed: {e}")
            raise

    async def get_admin_users(self) -> List[AdminUserModel]:
        return await self.auth.get_admin_users()

    async def create_admin_user(
        self,
        email: str,
        password: str,
        role: AdminRole = AdminRole.ADMIN
    ) -> AdminUserModel:
        return await self.auth.create_admin_user(email, password, role)

    async def delete_admin_user(self, admin_id: str) -> dict:
        return await self.auth.delete_admin_user(admin_id)

    # =========================================================================
    # COMMUNITY CACHE
    # =========================================================================

    async def preload_all_communities(self) -> int:
        """Warm the lookup cache with every community's full record.

        Returns:
            Number of communities cached (may be fewer than exist)
        """
        async def list_loader() -> List[CommunityModel]:
            return (await self.get_communities()).data

        async def detail_loader(community_id: str) -> Optional[CommunityModel]:
            return (await self.get_community(community_id, use_cache=False)).data

        try:
            return await self.cache.preload(list_loader, detail_loader)
        except FALLBACK_ERRORS as e:
            logger.error(f"Error preloading communities: {e}")
            return 0

    def get_community_from_cache(self, community_id: str) -> Optional[CommunityModel]:
        return self.cache.get(community_id)

    # =========================================================================
    # COMMUNITIES
    # =========================================================================

    async def get_communities(self) -> DataResult[List[CommunityModel]]:
        return await self._with_fallback(
            "get_communities",
            self.remote.get_communities,
            self.local.get_communities,
        )

    async def get_community(
        self,
        community_id: str,
        use_cache: bool = True
    ) -> DataResult[Optional[CommunityModel]]:
        """
        Get one community, consulting the lookup cache first.

        Args:
            community_id: Community ID
            use_cache: Skip the cache read when False (the result is still cached)

        Returns:
            Result whose data is None when the community does not exist
        """
        if use_cache:
            cached = self.cache.get(community_id)
            if cached is not None:
                self.metrics.record_cache_hit()
                return DataResult(data=cached, source=DataSource.CACHE)

        result = await self._with_fallback(
            "get_community",
            lambda: self.remote.get_community(community_id),
            lambda: self.local.get_community(community_id),
        )
        if result.source == DataSource.REMOTE:
            self.cache.put(result.data)
        return result

    async def create_community(
        self,
        community: Union[CommunityModel, Mapping[str, Any]]
    ) -> DataResult[CommunityModel]:
        return await self.save_community(community, create=True)

    async def update_community(
        self,
        community: Union[CommunityModel, Mapping[str, Any]]
    ) -> DataResult[CommunityModel]:
        return await self.save_community(community, create=False)

    async def save_community(
        self,
        community: Union[CommunityModel, Mapping[str, Any]],
        create: Optional[bool] = None
    ) -> DataResult[CommunityModel]:
        """Create or update a community and refresh its cache entry."""
        record = _coerce(CommunityModel, community)
        result = await self._save(
            "save_community",
            record,
            create,
            lookup=self.remote.get_community,
            remote_create=self.remote.create_community,
            remote_update=self.remote.update_community,
            local_upsert=self.local.update_community,
        )
        self.cache.put(result.data)
        return result

    async def delete_community(self, community_id: str) -> DataResult[bool]:
        """Delete a community and evict it from the lookup cache."""
        result = await self._with_fallback(
            "delete_community",
            lambda: self.remote.delete_community(community_id),
            lambda: self.local.delete_community(community_id),
        )
        self.cache.evict(community_id)
        return result

    async def get_admin_communities(self) -> List[CommunityModel]:
        """Admin community list; errors propagate."""
        try:
            return await self.remote.get_communities(admin=True)
        except FALLBACK_ERRORS as e:
            logger.error(f"API get_admin_communities failed: {e}")
            raise

    async def get_admin_community(self, community_id: str) -> Optional[CommunityModel]:
        """Admin community detail; errors propagate."""
        try:
            community = await self.remote.get_community(community_id, admin=True)
        except FALLBACK_ERRORS as e:
            logger.error(f"API get_admin_community failed: {e}")
            raise
        self.cache.put(community)
        return community

    # =========================================================================
    # LISTINGS
    # =========================================================================

    async def get_listings(
        self,
        community_id: Optional[str] = None
    ) -> DataResult[List[ListingModel]]:
        return await self._with_fallback(
            "get_listings",
            lambda: self.remote.get_listings(community_id),
            lambda: self.local.get_listings(community_id),
        )

    async def get_listings_by_community(
        self,
        community_id: str
    ) -> DataResult[List[ListingModel]]:
        result = await self.get_listings(community_id)
        listings = [
            listing for listing in result.data
            if listing.community_id == community_id
        ]
        return DataResult(listings, result.source, result.error, result.auth_expired)

    async def get_listing(self, listing_id: str) -> DataResult[Optional[ListingModel]]:
        return await self._with_fallback(
            "get_listing",
            lambda: self.remote.get_listing(listing_id),
            lambda: self.local.get_listing(listing_id),
        )

    async def create_listing(
        self,
        listing: Union[ListingModel, Mapping[str, Any]]
    ) -> DataResult[ListingModel]:
        return await self.save_listing(listing, create=True)

    async def update_listing(
        self,
        listing: Union[ListingModel, Mapping[str, Any]]
    ) -> DataResult[ListingModel]:
        return await self.save_listing(listing, create=False)

    async def save_listing(
        self,
        listing: Union[ListingModel, Mapping[str, Any]],
        create: Optional[bool] = None
    ) -> DataResult[ListingModel]:
        return await self._save(
            "save_listing",
            _coerce(ListingModel, listing),
            create,
            lookup=self.remote.get_listing,
            remote_create=self.remote.create_listing,
            remote_update=self.remote.update_listing,
            local_upsert=self.local.update_listing,
        )

    async def delete_listing(self, listing_id: str) -> DataResult[bool]:
        return await self._with_fallback(
            "delete_listing",
            lambda: self.remote.delete_listing(listing_id),
            lambda: self.local.delete_listing(listing_id),
        )

    async def get_admin_listings(
        self,
        community_id: Optional[str] = None
    ) -> List[ListingModel]:
        """Admin listing list; errors propagate."""
        try:
            return await self.remote.get_listings(community_id, admin=True)
        except FALLBACK_ERRORS as e:
            logger.error(f"API get_admin_listings failed: {e}")
            raise

    async def get_admin_listing(self, listing_id: str) -> Optional[ListingModel]:
        """Admin listing detail; errors propagate."""
        try:
            return await self.remote.get_listing(listing_id, admin=True)
        except FALLBACK_ERRORS as e:
            logger.error(f"API get_admin_listing failed: {e}")
            raise

    async def search_listings(
        self,
        query: str = "",
        filters: FiltersLike = None
    ) -> DataResult[List[ListingModel]]:
        """
        Search listings by text and filters.

        Community names known to the lookup cache are searched as well.
        """
        result = await self.get_listings()
        names = {
            community.id: community.name
            for community in self.cache.values()
            if community.id
        }
        matches = search_listings(result.data, query, filters, community_names=names)
        return DataResult(matches, result.source, result.error, result.auth_expired)

    @staticmethod
    def sort_listings(
        listings: List[Any],
        key: Union[SortKey, str, None]
    ) -> List[Any]:
        return sort_listings(listings, key)

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    async def get_properties(self) -> DataResult[List[PropertyModel]]:
        return await self._with_fallback(
            "get_properties",
            self.remote.get_properties,
            self.local.get_properties,
        )

    async def get_property(self, property_id: str) -> DataResult[Optional[PropertyModel]]:
        return await self._with_fallback(
            "get_property",
            lambda: self.remote.get_property(property_id),
            lambda: self.local.get_property(property_id),
        )

    async def create_property(
        self,
        prop: Union[PropertyModel, Mapping[str, Any]]
    ) -> DataResult[PropertyModel]:
        return await self.save_property(prop, create=True)

    async def update_property(
        self,
        prop: Union[PropertyModel, Mapping[str, Any]]
    ) -> DataResult[PropertyModel]:
        return await self.save_property(prop, create=False)

    async def save_property(
        self,
        prop: Union[PropertyModel, Mapping[str, Any]],
        create: Optional[bool] = None
    ) -> DataResult[PropertyModel]:
        return await self._save(
            "save_property",
            _coerce(PropertyModel, prop),
            create,
            lookup=self.remote.get_property,
            remote_create=self.remote.create_property,
            remote_update=self.remote.update_property,
            local_upsert=self.local.update_property,
        )

    async def delete_property(self, property_id: str) -> DataResult[bool]:
        return await self._with_fallback(
            "delete_property",
            lambda: self.remote.delete_property(property_id),
            lambda: self.local.delete_property(property_id),
        )

    async def get_admin_properties(self) -> List[PropertyModel]:
        """Admin property list; errors propagate."""
        try:
            return await self.remote.get_properties()
        except FALLBACK_ERRORS as e:
            logger.error(f"API get_admin_properties failed: {e}")
            raise

    # =========================================================================
    # CONTACTS
    # =========================================================================

    async def get_contacts(self) -> DataResult[List[ContactModel]]:
        return await self._with_fallback(
            "get_contacts",
            self.remote.get_contacts,
            self.local.get_contacts,
        )

    async def save_contact(
        self,
        contact: Union[ContactModel, Mapping[str, Any]]
    ) -> DataResult[ContactModel]:
        """Submit a contact form, keeping it locally if the API is down."""
        record = _coerce(ContactModel, contact)
        return await self._with_fallback(
            "save_contact",
            lambda: self.remote.create_contact(record),
            lambda: self.local.create_contact(record),
        )

    async def delete_contact(self, contact_id: str) -> DataResult[bool]:
        return await self._with_fallback(
            "delete_contact",
            lambda: self.remote.delete_contact(contact_id),
            lambda: self.local.delete_contact(contact_id),
        )

    async def clear_all_contacts(self) -> DataResult[None]:
        """Delete every contact submission."""
        async def remote_clear() -> None:
            contacts = await self.remote.get_contacts()
            ids = [contact.id for contact in contacts if contact.id]
            results = await asyncio.gather(
                *(self.remote.delete_contact(contact_id) for contact_id in ids),
                return_exceptions=True,
            )

            failed = [
                contact_id for contact_id, outcome in zip(ids, results)
                if isinstance(outcome, BaseException)
            ]
            if failed:
                raise DataLayerError(
                    f"Failed to delete {len(failed)} of {len(ids)} contacts: "
                    f"{', '.join(failed)}"
                )

        return await self._with_fallback(
            "clear_all_contacts",
            remote_clear,
            self.local.clear_contacts,
        )

    async def get_admin_contacts(self) -> List[ContactModel]:
        """Admin contact list; errors propagate."""
        try:
            return await self.remote.get_contacts()
        except FALLBACK_ERRORS as e:
            logger.error(f"API get_admin_contacts failed: {e}")
            raise

    async def delete_admin_contact(self, contact_id: str) -> bool:
        """Delete a contact remotely; errors propagate."""
        try:
            return await self.remote.delete_contact(contact_id)
        except FALLBACK_ERRORS as e:
            logger.error(f"API delete_admin_contact failed: {e}")
            raise

    async def create_public_contact(
        self,
        contact: Union[ContactModel, Mapping[str, Any]]
    ) -> ContactModel:
        """Submit a contact form; errors propagate so the form can show them."""
        try:
            return await self.remote.create_contact(_coerce(ContactModel, contact))
        except FALLBACK_ERRORS as e:
            logger.error(f"API create_public_contact failed: {e}")
            raise

    # =========================================================================
    # ANALYTICS & INITIALIZATION
    # =========================================================================

    async def get_analytics(self) -> DataResult[Dict[str, Any]]:
        """Dashboard counts computed from the facade's own reads."""
        communities = await self.get_communities()
        listings = await self.get_listings()

        available = [listing for listing in listings.data if listing.is_available]
        avg_price = (
            sum(listing.price for listing in available) / len(available)
            if available
            else 0
        )

        analytics = {
            "communities": len(communities.data),
            "builders": sum(len(c.builders) for c in communities.data),
            "homes": sum(len(c.homes) for c in communities.data),
            "listings": {
                "total": len(listings.data),
                "available": len(available),
                "avg_price": avg_price,
            },
        }

        degraded = next((r for r in (communities, listings) if r.is_degraded), None)
        if degraded is None:
            return DataResult(analytics, DataSource.REMOTE)
        return DataResult(analytics, DataSource.LOCAL, degraded.error, degraded.auth_expired)

    async def initialize_example_data(self) -> bool:
        """Seed local storage with example data when no communities are visible.

        Returns:
            True if example data was written
        """
        result = await self.get_communities()
        if result.data:
            return False
        return await self.local.seed(example_communities(), example_listings())

    def get_stats(self) -> Dict[str, Any]:
        stats = self.metrics.get_stats()
        stats["cached_communities"] = len(self.cache)
        return stats


__all__ = ["DataResult", "DataService", "FALLBACK_ERRORS"]
