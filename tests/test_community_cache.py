from __future__ import annotations

import pytest

from conftest import make_community
from database.models import CommunityModel
from services.community_cache import CommunityCache


def _community(community_id: str) -> CommunityModel:
    return CommunityModel.model_validate(make_community(community_id))


def test_put_get_evict():
    cache = CommunityCache()
    cache.put(_community("riverstone"))

    assert "riverstone" in cache
    assert cache.get("riverstone").name == "Riverstone"

    cache.evict("riverstone")
    cache.evict("riverstone")
    assert cache.get("riverstone") is None
    assert len(cache) == 0


def test_put_ignores_records_without_id():
    cache = CommunityCache()
    cache.put(None)
    cache.put(CommunityModel(name="No id"))
    assert len(cache) == 0


def test_put_replaces_existing_entry():
    cache = CommunityCache()
    cache.put(_community("riverstone"))
    cache.put(CommunityModel.model_validate(make_community(name="Renamed")))

    assert len(cache) == 1
    assert cache.get("riverstone").name == "Renamed"


def test_size_is_bounded():
    cache = CommunityCache(maxsize=2)
    for community_id in ("a", "b", "c"):
        cache.put(_community(community_id))

    assert len(cache) == 2
    assert "c" in cache


@pytest.mark.asyncio
async def test_preload_skips_failed_details():
    async def list_loader():
        return [_community("a"), _community("b"), _community("c")]

    async def detail_loader(community_id):
        if community_id == "b":
            raise RuntimeError("boom")
        if community_id == "c":
            return None
        return _community(community_id)

    cache = CommunityCache()
    loaded = await cache.preload(list_loader, detail_loader)

    assert loaded == 1
    assert "a" in cache
    assert "b" not in cache
    assert "c" not in cache


@pytest.mark.asyncio
async def test_clear_empties_cache():
    cache = CommunityCache()
    cache.put(_community("a"))
    cache.clear()
    assert len(cache) == 0
