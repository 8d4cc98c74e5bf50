"""Configuration loading for container group documents."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from pydantic import ValidationError

from acigroup.models.config import AcigroupConfig
from acigroup.models.container_group import ContainerGroupSpec


logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads the main configuration and the container group documents.

    Layout of the configuration directory::

        config.yaml         main configuration
        groups/*.yaml       mapping of container group name -> specification
    """

    def __init__(self, config_dir: Path):
        """Initialize configuration manager."""
        self.config_dir = Path(config_dir)
        self.yaml = YAML(typ="safe")
        self.config: Optional[AcigroupConfig] = None
        self.groups: Dict[str, ContainerGroupSpec] = {}
        self.errors: Dict[str, str] = {}

    async def load(self):
        """Load all configuration files."""
        logger.info(f"Loading configuration from {self.config_dir}")

        await self._load_main_config()
        await self._load_groups()

        logger.info(f"Configuration loaded: {len(self.groups)} container group(s)")

    async def _load_main_config(self):
        """Load main configuration file."""
        config_file = self.config_dir / "config.yaml"
        if not config_file.exists():
            raise FileNotFoundError(f"Main config not found: {config_file}")

        try:
            data = await self._read_yaml(config_file)
            self.config = AcigroupConfig(**data)
            logger.debug(f"Loaded main config: {config_file}")
        except ValidationError as e:
            logger.error(f"Invalid main config: {e}")
            raise

    async def _load_groups(self):
        """Load container group documents."""
        groups_dir = self.config_dir / "groups"
        if not groups_dir.exists():
            logger.warning(f"Groups directory not found: {groups_dir}")
            return

        self.groups.clear()
        self.errors.clear()
        for yaml_file in sorted(groups_dir.glob("*.yaml")):
            try:
                data = await self._read_yaml(yaml_file)
            except Exception as e:
                logger.error(f"Error loading {yaml_file}: {e}")
                self.errors[str(yaml_file)] = str(e)
                continue

            if not isinstance(data, dict):
                logger.error(f"Expected a mapping of container groups in {yaml_file}")
                self.errors[str(yaml_file)] = "not a mapping of container group name to specification"
                continue

            for name, spec in data.items():
                if name in self.groups:
                    logger.error(f"Container group {name} defined more than once, keeping the first definition")
                    self.errors[name] = f"duplicate definition in {yaml_file}"
                    continue
                try:
                    self.groups[name] = ContainerGroupSpec(name=name, **(spec or {}))
                except (ValidationError, TypeError) as e:
                    logger.error(f"Invalid container group {name} in {yaml_file}: {e}")
                    self.errors[name] = str(e)
            logger.debug(f"Loaded container groups from {yaml_file}")

    async def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse YAML file."""
        data = await asyncio.to_thread(self._load_file, file_path)
        return data or {}

    def _load_file(self, file_path: Path) -> Any:
        with open(file_path) as f:
            return self.yaml.load(f)

    @property
    def state_dir(self) -> Path:
        """State directory; relative paths are resolved against the config directory."""
        state_dir = Path(self.config.state_dir if self.config else "./state")
        if not state_dir.is_absolute():
            state_dir = self.config_dir / state_dir
        return state_dir

    def get_group_spec(self, name: str) -> Optional[ContainerGroupSpec]:
        """Get container group specification by name."""
        return self.groups.get(name)
