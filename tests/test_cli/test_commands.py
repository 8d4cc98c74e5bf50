"""Tests for CLI command implementations."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from acigroup.cli.commands import apply_groups, destroy_group, list_groups, show_group, validate_config
from acigroup.errors import AcigroupError, ConfigValidationError
from acigroup.models.container_group import ContainerGroupState


@pytest.fixture
def state(group_spec, group_id):
    """State of the container group."""
    return ContainerGroupState(**group_spec.model_dump(), id=group_id, ip_address="20.1.2.3")


@pytest.fixture
def engine(group_spec):
    """Lifecycle engine."""
    engine = MagicMock()
    engine.config_manager.groups = {"web": group_spec}
    engine.config_manager.errors = {}
    engine.provider.validate_spec = AsyncMock(return_value=True)
    engine.state_store.load = AsyncMock(return_value=None)
    return engine


def _printed(mock_console):
    return "\n".join(str(call.args[0]) for call in mock_console.print.call_args_list if call.args)


@pytest.mark.asyncio
class TestCommands:
    """Test command output."""

    @patch("acigroup.cli.commands.console")
    async def test_validate_valid(self, mock_console, engine):
        """Test a valid configuration is reported."""
        await validate_config(engine)

        assert "Configuration is valid" in _printed(mock_console)

    @patch("acigroup.cli.commands.console")
    async def test_validate_invalid(self, mock_console, engine):
        """Test load errors and failed expansions are reported."""
        engine.config_manager.errors = {"broken": "containers: too short"}
        engine.provider.validate_spec.return_value = False

        with pytest.raises(ConfigValidationError, match="2 invalid"):
            await validate_config(engine)

        output = _printed(mock_console)
        assert "broken: containers: too short" in output
        assert "web:" in output

    @patch("acigroup.cli.commands.console")
    async def test_apply_all_failures(self, mock_console, engine):
        """Test apply --all fails when any group fails."""
        engine.apply_all = AsyncMock(return_value={"web": None, "api": AcigroupError("quota exceeded")})

        with pytest.raises(AcigroupError, match="1 container group"):
            await apply_groups(engine, None, True)

        assert "api: quota exceeded" in _printed(mock_console)

    @patch("acigroup.cli.commands.console")
    async def test_show_hides_secrets(self, mock_console, engine, state):
        """Test show never prints write-only values."""
        engine.state_store.load.return_value = state

        await show_group(engine, "web")

        output = _printed(mock_console)
        assert state.id in output
        assert "hunter2" not in output
        assert "s3cr3t" not in output

    @patch("acigroup.cli.commands.console")
    async def test_show_untracked(self, mock_console, engine):
        """Test show of an untracked group."""
        await show_group(engine, "web")

        assert "not tracked" in _printed(mock_console)

    @patch("acigroup.cli.commands.console")
    async def test_destroy_untracked(self, mock_console, engine):
        """Test destroying an untracked group is reported."""
        engine.destroy = AsyncMock(return_value=False)

        await destroy_group(engine, "web")

        assert "nothing to destroy" in _printed(mock_console)

    @patch("acigroup.cli.commands.console")
    async def test_list(self, mock_console, engine):
        """Test list prints a table."""
        engine.get_all_statuses = AsyncMock(return_value=[{
            "name": "web",
            "configured": True,
            "tracked": False,
            "id": None,
            "resource_group": "rg-web",
            "location": "westeurope",
            "ip_address": None,
            "fqdn": None,
        }])

        await list_groups(engine)

        mock_console.print.assert_called_once()
