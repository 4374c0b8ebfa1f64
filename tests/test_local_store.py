from __future__ import annotations

import json

import pytest

from conftest import make_community, make_listing
from database.json_repository import LocalRepository, LocalStore
from database.models import CommunityModel, ContactModel, ListingModel, PropertyModel


# ---------------------------------------------------------------------------
# LocalStore
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_set_and_get_round_trip(store):
    await store.set("communities", [{"id": "a"}])
    assert await store.get("communities") == [{"id": "a"}]
    assert await store.get("missing") is None


@pytest.mark.asyncio
async def test_creates_missing_file(tmp_path):
    path = tmp_path / "nested" / "store.json"
    LocalStore(path)
    assert json.loads(path.read_text()) == {}


@pytest.mark.asyncio
async def test_corrupted_file_reads_as_empty_and_recovers_on_write(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json")
    store = LocalStore(path)

    assert await store.get("communities") is None

    await store.set("listings", [])
    assert json.loads(path.read_text()) == {"listings": []}


@pytest.mark.asyncio
async def test_non_object_root_reads_as_empty(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("[1, 2, 3]")
    assert await LocalStore(path).get("communities") is None


@pytest.mark.asyncio
async def test_remove_and_clear(store):
    await store.set("a", 1)
    await store.set("b", 2)

    await store.remove("a")
    await store.remove("a")
    assert await store.get("a") is None
    assert await store.get("b") == 2

    await store.clear()
    assert await store.get("b") is None


@pytest.mark.asyncio
async def test_unserializable_value_is_dropped(store):
    await store.set("ok", 1)
    await store.set("bad", object())
    assert await store.get("ok") == 1
    assert await store.get("bad") is None


# ---------------------------------------------------------------------------
# LocalRepository
# ---------------------------------------------------------------------------

@pytest.fixture
def repo(store):
    return LocalRepository(store)


@pytest.mark.asyncio
async def test_create_assigns_id_when_missing(repo):
    created = await repo.create_listing(ListingModel(title="New", price=1000))
    assert created.id

    stored = await repo.get_listing(created.id)
    assert stored.title == "New"


@pytest.mark.asyncio
async def test_update_replaces_record_with_same_id(repo):
    await repo.create_community(CommunityModel.model_validate(make_community()))
    await repo.update_community(
        CommunityModel.model_validate(make_community(name="Riverstone Updated"))
    )

    communities = await repo.get_communities()
    assert len(communities) == 1
    assert communities[0].name == "Riverstone Updated"


@pytest.mark.asyncio
async def test_delete_reports_whether_anything_was_removed(repo):
    await repo.create_property(PropertyModel(id="p1", title="Lot 1", price=1))

    assert await repo.delete_property("p1") is True
    assert await repo.delete_property("p1") is False
    assert await repo.get_property("p1") is None


@pytest.mark.asyncio
async def test_malformed_records_are_skipped(store, repo):
    await store.set("listings", [
        make_listing("good"),
        make_listing("bad", price=-5),
        "not a record",
    ])

    listings = await repo.get_listings()
    assert [listing.id for listing in listings] == ["good"]


@pytest.mark.asyncio
async def test_get_listings_filters_by_community(store, repo):
    await store.set("listings", [
        make_listing("a", communityId="riverstone"),
        make_listing("b", communityId="brookewater"),
        make_listing("c", communityId=None),
    ])

    listings = await repo.get_listings("brookewater")
    assert [listing.id for listing in listings] == ["b"]


@pytest.mark.asyncio
async def test_contacts_are_appended_and_deleted_by_id(repo):
    first = await repo.create_contact(
        ContactModel(name="Ann", email="ann@example.com", message="Hi")
    )
    second = await repo.create_contact(
        ContactModel(name="Ann", email="ann@example.com", message="Hi")
    )
    assert first.id != second.id

    assert await repo.delete_contact(first.id) is True
    remaining = await repo.get_contacts()
    assert [contact.id for contact in remaining] == [second.id]

    await repo.clear_contacts()
    assert await repo.get_contacts() == []


@pytest.mark.asyncio
async def test_seed_only_when_no_communities(repo):
    communities = [CommunityModel.model_validate(make_community())]
    listings = [ListingModel.model_validate(make_listing())]

    assert await repo.seed(communities, listings) is True
    assert await repo.seed(communities, listings) is False
    assert len(await repo.get_communities()) == 1
    assert len(await repo.get_listings()) == 1
