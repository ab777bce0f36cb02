"""Tests for the warpplate registry cache."""

import pytest

from warpplates.errors import WarpplateNotFoundError, WarpplateStorageError
from warpplates.registry import WarpplateRegistry

from tests.conftest import OTHER_WORLD_ID, TEST_WORLD_ID, make_warpplate


class FailingStore:
    """Store whose writes always fail."""

    def __init__(self, warpplates=None):
        self.warpplates = warpplates or []

    async def create_warpplate(self, warpplate):
        raise WarpplateStorageError("create failed")

    async def load_warpplates(self, world_id):
        return [w for w in self.warpplates if w.world_id == world_id]

    async def delete_warpplate(self, warpplate):
        raise WarpplateStorageError("delete failed")

    async def update_warpplate(self, warpplate):
        raise WarpplateStorageError("update failed")


class TestLookup:
    """Tests for name and point lookups."""

    @pytest.mark.asyncio
    async def test_get_is_exact_and_case_sensitive(self, registry):
        await registry.add(make_warpplate("Spawn"))

        assert registry.get("Spawn") is not None
        assert registry.get("spawn") is None
        assert registry.get("Spaw") is None

    @pytest.mark.asyncio
    async def test_get_at_includes_far_edges(self, registry):
        """An area at (10, 10) sized 3x3 covers 10..13 on both axes."""
        await registry.add(make_warpplate("A", x=10, y=10))

        assert registry.get_at(10, 10).name == "A"
        assert registry.get_at(13, 13).name == "A"
        assert registry.get_at(14, 13) is None
        assert registry.get_at(9, 10) is None

    @pytest.mark.asyncio
    async def test_get_at_empty_registry(self, registry):
        assert registry.get_at(0, 0) is None

    @pytest.mark.asyncio
    async def test_get_at_returns_first_of_overlapping(self, registry):
        """Overlaps can appear after a resize; the earliest warpplate wins."""
        await registry.add(make_warpplate("First", x=0, y=0, width=5, height=5))
        await registry.add(make_warpplate("Second", x=4, y=4))

        assert registry.get_at(5, 5).name == "First"


class TestLoad:
    """Tests for loading a world's warpplates."""

    @pytest.mark.asyncio
    async def test_load_replaces_cache(self, repository):
        await repository.create_warpplate(make_warpplate("A"))
        await repository.create_warpplate(make_warpplate("B", world_id=OTHER_WORLD_ID))
        registry = WarpplateRegistry(repository)

        await registry.load(TEST_WORLD_ID)
        assert [w.name for w in registry.all()] == ["A"]

        await registry.load(OTHER_WORLD_ID)
        assert [w.name for w in registry.all()] == ["B"]
        assert registry.world_id == OTHER_WORLD_ID


class TestMutations:
    """Tests for add, remove and update."""

    @pytest.mark.asyncio
    async def test_add_then_remove(self, registry, repository):
        warpplate = make_warpplate("A")
        await registry.add(warpplate)
        await registry.remove(warpplate)

        assert registry.get("A") is None
        assert await repository.load_warpplates(TEST_WORLD_ID) == []

    @pytest.mark.asyncio
    async def test_update_replaces_cached_record(self, registry, repository):
        await registry.add(make_warpplate("A"))
        before = registry.get("A")

        def set_tag(warpplate):
            warpplate.tag = "Home"

        updated = await registry.update("A", set_tag)

        assert updated.tag == "Home"
        assert registry.get("A") is updated
        assert before.tag == "A"
        [stored] = await repository.load_warpplates(TEST_WORLD_ID)
        assert stored.tag == "Home"

    @pytest.mark.asyncio
    async def test_update_unknown_name(self, registry):
        with pytest.raises(WarpplateNotFoundError):
            await registry.update("missing", lambda w: None)

    @pytest.mark.asyncio
    async def test_failed_store_leaves_cache_unchanged(self):
        store = FailingStore([make_warpplate("A")])
        registry = WarpplateRegistry(store)
        await registry.load(TEST_WORLD_ID)

        def set_public(warpplate):
            warpplate.is_public = False

        with pytest.raises(WarpplateStorageError):
            await registry.update("A", set_public)
        with pytest.raises(WarpplateStorageError):
            await registry.add(make_warpplate("B", x=20))
        with pytest.raises(WarpplateStorageError):
            await registry.remove(registry.get("A"))

        assert registry.get("A").is_public is True
        assert registry.get("B") is None
        assert [w.name for w in registry.all()] == ["A"]


class TestLoadConsistency:
    """The cache stays whole while a load is pending or after it fails."""

    @pytest.mark.asyncio
    async def test_cache_kept_while_loading(self, repository):
        await repository.create_warpplate(make_warpplate("A"))
        registry = WarpplateRegistry(repository)
        await registry.load(TEST_WORLD_ID)
        seen_during_load = []
        load = repository.load_warpplates

        async def observing_load(world_id):
            seen_during_load.append([w.name for w in registry.all()])
            return await load(world_id)

        repository.load_warpplates = observing_load

        await registry.load(OTHER_WORLD_ID)

        assert seen_during_load == [["A"]]
        assert registry.all() == []
        assert registry.world_id == OTHER_WORLD_ID

    @pytest.mark.asyncio
    async def test_failed_load_keeps_previous_world(self):
        store = FailingStore([make_warpplate("A")])
        registry = WarpplateRegistry(store)
        await registry.load(TEST_WORLD_ID)

        async def fail(world_id):
            raise WarpplateStorageError("load failed")

        store.load_warpplates = fail

        with pytest.raises(WarpplateStorageError):
            await registry.load(OTHER_WORLD_ID)

        assert registry.world_id == TEST_WORLD_ID
        assert [w.name for w in registry.all()] == ["A"]
