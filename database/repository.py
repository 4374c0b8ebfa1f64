"""Repository pattern for entity operations.

Implemented by `RemoteRepository` (REST API) and `LocalRepository`
(local fallback storage) so the data facade can treat both the same way.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from database.models import (
    CommunityModel,
    ContactModel,
    ListingModel,
    PropertyModel,
)


class BaseRepository(ABC):
    """Abstract base repository interface."""

    # Communities

    @abstractmethod
    async def get_communities(self) -> List[CommunityModel]:
        """Get all communities."""
        pass

    @abstractmethod
    async def get_community(self, community_id: str) -> Optional[CommunityModel]:
        """Get community by ID."""
        pass

    @abstractmethod
    async def create_community(self, community: CommunityModel) -> CommunityModel:
        """Create a new community."""
        pass

    @abstractmethod
    async def update_community(self, community: CommunityModel) -> CommunityModel:
        """Update an existing community."""
        pass

    @abstractmethod
    async def delete_community(self, community_id: str) -> bool:
        """Delete a community."""
        pass

    # Listings

    @abstractmethod
    async def get_listings(
        self,
        community_id: Optional[str] = None
    ) -> List[ListingModel]:
        """Get all listings, optionally only those of one community."""
        pass

    @abstractmethod
    async def get_listing(self, listing_id: str) -> Optional[ListingModel]:
        """Get listing by ID."""
        pass

    @abstractmethod
    async def create_listing(self, listing: ListingModel) -> ListingModel:
        """Create a new listing."""
        pass

    @abstractmethod
    async def update_listing(self, listing: ListingModel) -> ListingModel:
        """Update an existing listing."""
        pass

    @abstractmethod
    async def delete_listing(self, listing_id: str) -> bool:
        """Delete a listing."""
        pass

    # Properties

    @abstractmethod
    async def get_properties(self) -> List[PropertyModel]:
        """Get all properties."""
        pass

    @abstractmethod
    async def get_property(self, property_id: str) -> Optional[PropertyModel]:
        """Get property by ID."""
        pass

    @abstractmethod
    async def create_property(self, prop: PropertyModel) -> PropertyModel:
        """Create a new property."""
        pass

    @abstractmethod
    async def update_property(self, prop: PropertyModel) -> PropertyModel:
        """Update an existing property."""
        pass

    @abstractmethod
    async def delete_property(self, property_id: str) -> bool:
        """Delete a property."""
        pass

    # Contacts

    @abstractmethod
    async def get_contacts(self) -> List[ContactModel]:
        """Get all contact submissions."""
        pass

    @abstractmethod
    async def create_contact(self, contact: ContactModel) -> ContactModel:
        """Store a contact submission."""
        pass

    @abstractmethod
    async def delete_contact(self, contact_id: str) -> bool:
        """Delete a contact submission by its ID."""
        pass


__all__ = ["BaseRepository"]
