"""Database package.

Exports:
- Pydantic models
- Repository interface and the local JSON implementation
"""

from database.models import (
    AdminUserModel,
    BuilderModel,
    CommunityModel,
    ContactModel,
    HomePlanModel,
    ListingModel,
    PropertyModel,
)
from database.repository import BaseRepository
from database.json_repository import LocalRepository, LocalStore

__all__ = [
    "AdminUserModel",
    "BuilderModel",
    "CommunityModel",
    "ContactModel",
    "HomePlanModel",
    "ListingModel",
    "PropertyModel",
    "BaseRepository",
    "LocalRepository",
    "LocalStore",
]
