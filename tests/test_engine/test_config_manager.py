"""Tests for configuration loading."""

from unittest.mock import AsyncMock, patch

import pytest

from acigroup.engine.config import ConfigManager


@pytest.fixture
def config_dir(tmp_path, subscription_id):
    """Create a temporary config directory structure."""
    (tmp_path / "groups").mkdir()

    # Create main config
    (tmp_path / "config.yaml").write_text(f"""
azure:
  subscription_id: "{subscription_id}"
timeouts:
  delete: 600
log_level: debug
state_dir: ./state
""")

    (tmp_path / "groups" / "web.yaml").write_text("""
web:
  resource_group_name: rg-web
  location: West Europe
  os_type: Linux
  exposed_ports:
    - port: 80
  containers:
    - name: nginx
      image: nginx:1.25
      cpu: 0.5
      memory: 1.5
      ports:
        - port: 80
      volumes:
        - name: cache
          mount_path: /cache
          empty_dir: true
""")
    return tmp_path


@pytest.mark.asyncio
class TestConfigManager:
    """Test ConfigManager async operations."""

    async def test_load(self, config_dir, subscription_id):
        """Test the main configuration and group documents are loaded."""
        manager = ConfigManager(config_dir)

        await manager.load()

        assert manager.config.azure.subscription_id == subscription_id
        assert manager.config.timeouts.delete == 600
        assert manager.config.log_level == "DEBUG"

        spec = manager.get_group_spec("web")
        assert spec.name == "web"
        assert spec.location == "westeurope"
        assert spec.containers[0].volumes[0].source.kind == "empty_dir"
        assert manager.errors == {}

    async def test_missing_main_config(self, tmp_path):
        """Test a missing config.yaml is an error."""
        manager = ConfigManager(tmp_path)

        with pytest.raises(FileNotFoundError):
            await manager.load()

    async def test_missing_groups_dir(self, config_dir):
        """Test a configuration without groups directory loads no groups."""
        (config_dir / "groups" / "web.yaml").unlink()
        (config_dir / "groups").rmdir()
        manager = ConfigManager(config_dir)

        await manager.load()

        assert manager.groups == {}

    async def test_invalid_group_skipped(self, config_dir):
        """Test an invalid document is reported and the others still load."""
        (config_dir / "groups" / "broken.yaml").write_text("""
broken:
  resource_group_name: rg-web
  location: westeurope
  os_type: Linux
  containers: []
""")
        manager = ConfigManager(config_dir)

        await manager.load()

        assert "web" in manager.groups
        assert "broken" not in manager.groups
        assert "broken" in manager.errors

    async def test_unparseable_file_skipped(self, config_dir):
        """Test YAML syntax errors are reported per file."""
        bad_file = config_dir / "groups" / "bad.yaml"
        bad_file.write_text("web: [unterminated\n")
        manager = ConfigManager(config_dir)

        await manager.load()

        assert str(bad_file) in manager.errors
        assert "web" in manager.groups

    async def test_duplicate_group_keeps_first(self, config_dir):
        """Test a group defined in two files keeps the first definition."""
        (config_dir / "groups" / "zz-web.yaml").write_text((config_dir / "groups" / "web.yaml").read_text())
        manager = ConfigManager(config_dir)

        await manager.load()

        assert "web" in manager.groups
        assert "duplicate" in manager.errors["web"]

    async def test_state_dir_relative_to_config_dir(self, config_dir):
        """Test relative state directories resolve against the config directory."""
        manager = ConfigManager(config_dir)

        await manager.load()

        assert manager.state_dir == config_dir / "state"

    async def test_read_yaml_threading(self, config_dir):
        """Test that YAML reading is offloaded to a thread."""
        manager = ConfigManager(config_dir)
        test_file = config_dir / "test.yaml"
        test_file.write_text("key: value")

        # Patch asyncio.to_thread to verify it's called
        with patch("asyncio.to_thread", new_callable=AsyncMock) as mock_to_thread:
            mock_to_thread.return_value = {"key": "value"}

            result = await manager._read_yaml(test_file)

            assert result == {"key": "value"}
            mock_to_thread.assert_called_once()
