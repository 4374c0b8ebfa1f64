"""In-memory community lookup cache.

Entries live for the lifetime of the owning facade: created on the first
successful fetch, refreshed on every write, evicted on delete. There is no
TTL, so changes made by other clients show up only after a cold fetch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from cachetools import Cache

from database.models import CommunityModel


logger = logging.getLogger(__name__)


class CommunityCache:
    """Map from community ID to full community record."""

    def __init__(self, maxsize: int = 1024):
        """Initialize cache.

        Args:
            maxsize: Max number of communities held at once.
        """
        self._entries: Cache[str, CommunityModel] = Cache(maxsize=maxsize)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, community_id: object) -> bool:
        return community_id in self._entries

    def get(self, community_id: str) -> Optional[CommunityModel]:
        """Cached community, or None when not cached."""
        return self._entries.get(community_id)

    def put(self, community: Optional[CommunityModel]) -> None:
        """Upsert by the record's ID; records without an ID are ignored."""
        if community is None or not community.id:
            return
        self._entries[community.id] = community

    def values(self) -> List[CommunityModel]:
        return list(self._entries.values())

    def evict(self, community_id: str) -> None:
        self._entries.pop(community_id, None)

    def clear(self) -> None:
        self._entries.clear()

    async def preload(
        self,
        list_loader: Callable[[], Awaitable[List[CommunityModel]]],
        detail_loader: Callable[[str], Awaitable[Optional[CommunityModel]]],
    ) -> int:
        """Fetch the community list, then every community's details concurrently.

        A failing detail fetch is logged and skipped, so the cache may be
        incomplete afterwards.

        Args:
            list_loader: Returns the community summaries.
            detail_loader: Returns one full community by ID.

        Returns:
            Number of communities cached by this call.
        """
        summaries = await list_loader()
        ids = [summary.id for summary in summaries if summary.id]

        results = await asyncio.gather(
            *(detail_loader(community_id) for community_id in ids),
            return_exceptions=True,
        )

        loaded = 0
        for community_id, result in zip(ids, results):
            if isinstance(result, BaseException):
                logger.warning(f"Preload of community {community_id} failed: {result}")
                continue
            if result is None:
                logger.warning(f"Preload of community {community_id} returned nothing")
                continue
            self.put(result)
            loaded += 1

        logger.info(f"Preloaded {loaded}/{len(ids)} communities")
        return loaded


__all__ = ["CommunityCache"]
