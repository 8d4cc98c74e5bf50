"""Tests for the state store."""

import pytest

from acigroup.engine.state import StateStore
from acigroup.models.container_group import ContainerGroupState


@pytest.fixture
def state(group_spec, group_id):
    """State of the container group."""
    return ContainerGroupState(**group_spec.model_dump(), id=group_id, ip_address="20.1.2.3")


@pytest.mark.asyncio
class TestStateStore:
    """Test StateStore."""

    async def test_load_untracked(self, tmp_path):
        """Test loading a name that was never saved."""
        assert await StateStore(tmp_path / "state").load("web") is None

    async def test_save_and_load(self, tmp_path, state):
        """Test saved state loads back including write-only values."""
        store = StateStore(tmp_path / "state")

        await store.save(state)
        loaded = await store.load("web")

        assert loaded == state
        assert loaded.image_registry_credentials[0].password == "hunter2"
        assert (tmp_path / "state" / "web.json").exists()
        assert not (tmp_path / "state" / "web.json.tmp").exists()

    async def test_save_under_name(self, tmp_path, state):
        """Test state can be saved under a different name."""
        store = StateStore(tmp_path)

        await store.save(state, "frontend")

        assert await store.list_names() == ["frontend"]

    async def test_remove(self, tmp_path, state):
        """Test removing state, twice."""
        store = StateStore(tmp_path)
        await store.save(state)

        await store.remove("web")
        await store.remove("web")

        assert await store.load("web") is None

    async def test_list_names(self, tmp_path, state):
        """Test names are listed in order."""
        store = StateStore(tmp_path / "state")
        assert await store.list_names() == []

        await store.save(state, "web")
        await store.save(state, "api")

        assert await store.list_names() == ["api", "web"]
