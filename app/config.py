"""Configuration management with pydantic-settings."""
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PropertyType(Enum):
    """Listing property types (canonical upper-case, as stored remotely)."""
    HOUSE = "HOUSE"
    TOWNHOME = "TOWNHOME"
    CONDO = "CONDO"
    APARTMENT = "APARTMENT"


class ListingStatus(Enum):
    """Listing availability statuses."""
    AVAILABLE = "AVAILABLE"
    PENDING = "PENDING"
    SOLD = "SOLD"


class AdminRole(Enum):
    """Admin roles issued by the auth endpoint."""
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


class Capability(Enum):
    """Features gated by admin role."""
    MANAGE_CONTENT = "manage_content"
    MANAGE_CONTACTS = "manage_contacts"
    MANAGE_ADMINS = "manage_admins"
    MANAGE_SETTINGS = "manage_settings"


# Two-tier authorization: super admins get everything
ROLE_CAPABILITIES: dict[AdminRole, frozenset[Capability]] = {
    AdminRole.ADMIN: frozenset({
        Capability.MANAGE_CONTENT,
        Capability.MANAGE_CONTACTS,
    }),
    AdminRole.SUPER_ADMIN: frozenset(Capability),
}


class DataSource(Enum):
    """Where a facade result came from."""
    REMOTE = "remote"
    LOCAL = "local"
    CACHE = "cache"


class SortKey(Enum):
    """Supported listing sort orders."""
    PRICE_ASC = "price-asc"
    PRICE_DESC = "price-desc"
    SQFT_ASC = "sqft-asc"
    SQFT_DESC = "sqft-desc"
    BEDROOMS_ASC = "bedrooms-asc"
    BEDROOMS_DESC = "bedrooms-desc"
    NEWEST = "newest"
    OLDEST = "oldest"


class StorageKey(str, Enum):
    """Keys in the local persistent store."""
    COMMUNITIES = "communities"
    LISTINGS = "listings"
    PROPERTIES = "properties"
    CONTACTS = "contacts"
    ADMIN_TOKEN = "adminToken"
    ADMIN_USER = "adminUser"


class Settings(BaseSettings):
    """Application settings with validation."""

    # Remote API
    api_base_url: str = Field(
        default="http://localhost:3001",
        description="Base URL of the admin/public API server"
    )
    api_prefix: str = Field(
        default="/api",
        description="Path prefix for every API endpoint"
    )
    request_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Request timeout in seconds (None keeps the HTTP client default)"
    )

    # Local fallback storage
    local_store_path: Path = Field(
        default=Path("./data/local_storage.json"),
        description="Path to the JSON key-value store used as offline fallback"
    )
    seed_example_data: bool = Field(
        default=False,
        description="Seed example communities when local storage is empty"
    )

    # Community lookup cache
    community_cache_size: int = Field(
        default=1024,
        gt=0,
        description="Max communities kept in the in-memory lookup cache"
    )

    # Application
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("api_base_url")
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Require an http(s) URL without a trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("API_BASE_URL must start with http:// or https://")

        return v.rstrip("/")

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalise prefix to '/segment' form."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = f"/{v}"
        return v

    @property
    def api_root(self) -> str:
        """Base URL including the API prefix."""
        return f"{self.api_base_url}{self.api_prefix}"


# Global settings instance
settings = Settings()


__all__ = [
    "settings",
    "Settings",
    "PropertyType",
    "ListingStatus",
    "AdminRole",
    "Capability",
    "ROLE_CAPABILITIES",
    "DataSource",
    "SortKey",
    "StorageKey",
]
