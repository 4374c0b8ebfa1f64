"""Data models with Pydantic validation.

Field names are snake_case in Python and camelCase on the wire
(``priceRange``, ``communityId``, ``createdAt``), matching the API server.
"""
import re
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.config import (
    AdminRole,
    Capability,
    ListingStatus,
    PropertyType,
    ROLE_CAPABILITIES,
)
from utils.helpers import normalize_enum_value, sanitize_user_text


_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class WireModel(BaseModel):
    """Base for every record exchanged with the API or local storage."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("id", mode="before", check_fields=False)
    @classmethod
    def coerce_id(cls, v: Any) -> Optional[str]:
        """Identifiers are opaque strings; numeric ids are stringified."""
        if v is None or v == "":
            return None
        return str(v)

    @field_validator("created_at", mode="after", check_fields=False)
    @classmethod
    def ensure_timezone(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Treat naive timestamps as UTC so records stay comparable."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_wire(self) -> dict:
        """Serialize to the camelCase JSON shape used by the API."""
        return self.model_dump(mode="json", by_alias=True)


class ThemeModel(WireModel):
    """Per-community styling."""

    model_config = ConfigDict(extra="allow")

    primary_color: str = Field(default="#007AFF", description="Primary brand color")
    border_radius: str = Field(default="12px", description="Corner radius")
    border_radius_large: str = Field(default="16px", description="Large corner radius")


class SectionModel(WireModel):
    """Visibility and copy for one community page section."""

    model_config = ConfigDict(extra="allow")

    visible: bool = Field(default=True, description="Section is shown")
    title: Optional[str] = Field(default=None, description="Section title")
    subtitle: Optional[str] = Field(default=None, description="Section subtitle")
    content: Optional[str] = Field(default=None, description="Section body")


class SectionsModel(WireModel):
    """Page sections of a community."""

    model_config = ConfigDict(extra="allow")

    hero: SectionModel = Field(default_factory=SectionModel)
    about: SectionModel = Field(default_factory=SectionModel)
    homes: SectionModel = Field(
        default_factory=lambda: SectionModel(title="Available Homes")
    )
    builders: SectionModel = Field(
        default_factory=lambda: SectionModel(title="Our Builders")
    )


class BuilderModel(WireModel):
    """Home builder active in a community (owned by the community)."""

    id: Optional[str] = Field(default=None, description="Builder ID")
    name: str = Field(..., min_length=1, description="Builder name")
    description: str = Field(default="", description="Short pitch")
    contact: str = Field(default="", description="Phone or email")
    website: Optional[str] = Field(default=None, description="Builder website")


class HomePlanModel(WireModel):
    """Home model offered in a community (owned by the community)."""

    id: Optional[str] = Field(default=None, description="Home model ID")
    name: str = Field(..., min_length=1, description="Plan name")
    sqft: int = Field(default=0, ge=0, description="Square footage")
    bedrooms: int = Field(default=0, ge=0, description="Bedroom count")
    bathrooms: float = Field(default=0, ge=0, description="Bathroom count")
    price: float = Field(default=0, ge=0, description="Starting price")


class CommunityModel(WireModel):
    """Master-planned community with its builders and home models."""

    id: Optional[str] = Field(default=None, description="Stable community ID / slug")
    name: str = Field(default="", description="Community name")
    description: str = Field(default="", description="Marketing description")
    location: str = Field(default="", description="City, state")
    price_range: str = Field(default="", description="Display price range")
    image: str = Field(
        default="/images/communities/default.jpg",
        description="Hero image path"
    )
    amenities: list[str] = Field(default_factory=list, description="Amenity names")
    builders: list[BuilderModel] = Field(default_factory=list)
    homes: list[HomePlanModel] = Field(default_factory=list)
    theme: ThemeModel = Field(default_factory=ThemeModel)
    sections: SectionsModel = Field(default_factory=SectionsModel)
    schools: list[str] = Field(default_factory=list, description="Zoned schools")
    created_at: datetime = Field(default_factory=_utcnow)

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "riverstone",
                "name": "Riverstone",
                "location": "Sugar Land, TX",
                "priceRange": "$400K - $800K",
                "amenities": ["Swimming Pool", "Golf Course"],
            }
        }
    }

    @field_validator("amenities", "builders", "homes", "schools", mode="before")
    @classmethod
    def none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("theme", "sections", mode="before")
    @classmethod
    def none_as_default(cls, v: Any) -> Any:
        return {} if v is None else v


class HomeRecordModel(WireModel):
    """Fields shared by listings and properties."""

    id: Optional[str] = Field(default=None, description="Record ID")
    title: str = Field(default="", description="Headline")
    description: str = Field(default="", description="Details")
    address: str = Field(default="", description="Street address")
    bedrooms: int = Field(default=0, ge=0, description="Bedroom count")
    bathrooms: float = Field(default=0, ge=0, description="Bathroom count")
    sqft: int = Field(default=0, ge=0, description="Square footage")
    type: PropertyType = Field(default=PropertyType.HOUSE)
    status: ListingStatus = Field(default=ListingStatus.AVAILABLE)
    created_at: datetime = Field(default_factory=_utcnow)

    @field_validator("type", "status", mode="before")
    @classmethod
    def normalize_casing(cls, v: Any) -> Any:
        """Accept 'house' as well as 'HOUSE'."""
        return normalize_enum_value(v, upper=True)

    @property
    def is_available(self) -> bool:
        return self.status == ListingStatus.AVAILABLE


class ListingModel(HomeRecordModel):
    """Home for sale, optionally assigned to a community."""

    price: float = Field(..., gt=0, description="Asking price")
    community_id: Optional[str] = Field(
        default=None,
        description="Owning community ID (None for unassigned listings)"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "id": "listing-1",
                "title": "Stunning 4BR Home in Riverstone",
                "price": 485000,
                "bedrooms": 4,
                "bathrooms": 3,
                "communityId": "riverstone",
                "type": "HOUSE",
                "status": "AVAILABLE",
            }
        }
    }


class PropertyModel(HomeRecordModel):
    """Inventory property managed from the admin area."""

    price: float = Field(default=0, ge=0, description="Price")
    community: Optional[str] = Field(default=None, description="Community name")


class ContactModel(WireModel):
    """Contact form submission."""

    id: Optional[str] = Field(default=None, description="Stable contact ID")
    name: str = Field(..., min_length=1, description="Sender name")
    email: str = Field(..., description="Sender email")
    phone: Optional[str] = Field(default=None, description="Sender phone")
    message: str = Field(..., min_length=1, description="Message body")
    interest: Optional[str] = Field(
        default=None,
        description="Community or topic the sender is interested in"
    )
    listing_id: Optional[str] = Field(default=None, description="Related listing")
    community_id: Optional[str] = Field(default=None, description="Related community")
    status: str = Field(default="new", description="Follow-up status")
    created_at: datetime = Field(
        default_factory=_utcnow,
        validation_alias=AliasChoices("createdAt", "submittedAt", "created_at"),
        serialization_alias="createdAt",
        description="Submission timestamp"
    )

    @field_validator("name", "message", mode="before")
    @classmethod
    def sanitize_text(cls, v: Any) -> Any:
        """Collapse whitespace and bound length of free text."""
        if not isinstance(v, str):
            return v
        return sanitize_user_text(v, max_len=2000)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not _EMAIL_PATTERN.match(v):
            raise ValueError("Please enter a valid email address.")
        return v

    @field_validator("phone")
    @classmethod
    def strip_phone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class AdminUserModel(WireModel):
    """Admin account profile as returned by the auth endpoints."""

    id: Optional[str] = Field(default=None, description="Admin ID")
    email: str = Field(..., description="Login email")
    role: AdminRole = Field(default=AdminRole.ADMIN)
    is_active: bool = Field(default=True)
    created_at: Optional[datetime] = Field(default=None)

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, v: Any) -> Any:
        """Accept 'SUPER_ADMIN' (database casing) as well as 'super_admin'."""
        return normalize_enum_value(v, upper=False)

    @property
    def is_super_admin(self) -> bool:
        return self.role == AdminRole.SUPER_ADMIN

    def has_capability(self, capability: Capability) -> bool:
        """Check whether this admin's role grants ``capability``."""
        if not self.is_active:
            return False
        return capability in ROLE_CAPABILITIES[self.role]


def has_capability(user: Optional[AdminUserModel], capability: Capability) -> bool:
    """Capability check that treats a missing user as anonymous."""
    return user is not None and user.has_capability(capability)


# Export models
__all__ = [
    "WireModel",
    "ThemeModel",
    "SectionModel",
    "SectionsModel",
    "BuilderModel",
    "HomePlanModel",
    "CommunityModel",
    "HomeRecordModel",
    "ListingModel",
    "PropertyModel",
    "ContactModel",
    "AdminUserModel",
    "has_capability",
]
