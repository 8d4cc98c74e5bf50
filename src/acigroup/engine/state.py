"""On-disk store for container group state."""

import asyncio
import logging
import os
from pathlib import Path
from typing import List, Optional

from acigroup.models.container_group import ContainerGroupState


logger = logging.getLogger(__name__)


class StateStore:
    """Keeps the last observed state of each container group as JSON."""

    def __init__(self, state_dir: Path):
        self.state_dir = Path(state_dir)

    def _path(self, name: str) -> Path:
        return self.state_dir / f"{name}.json"

    async def load(self, name: str) -> Optional[ContainerGroupState]:
        path = self._path(name)
        if not await asyncio.to_thread(path.exists):
            return None
        content = await asyncio.to_thread(path.read_text)
        return ContainerGroupState.model_validate_json(content)

    async def save(self, state: ContainerGroupState, name: Optional[str] = None) -> None:
        path = self._path(name or state.name)
        await asyncio.to_thread(lambda: self.state_dir.mkdir(parents=True, exist_ok=True))

        # Write then rename so a crash never leaves a truncated state file
        tmp_path = path.with_suffix(".json.tmp")
        await asyncio.to_thread(tmp_path.write_text, state.model_dump_json(indent=2))
        await asyncio.to_thread(os.replace, tmp_path, path)
        logger.debug(f"Saved state to {path}")

    async def remove(self, name: str) -> None:
        path = self._path(name)
        await asyncio.to_thread(lambda: path.unlink(missing_ok=True))
        logger.debug(f"Removed state {path}")

    async def list_names(self) -> List[str]:
        if not await asyncio.to_thread(self.state_dir.exists):
            return []
        paths = await asyncio.to_thread(lambda: sorted(self.state_dir.glob("*.json")))
        return [path.stem for path in paths]
