"""Lifecycle engine for configured container groups."""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from acigroup.engine.config import ConfigManager
from acigroup.engine.state import StateStore
from acigroup.errors import AcigroupError, ReplacementRequiredError
from acigroup.models.container_group import ContainerGroupSpec, ContainerGroupState, fields_requiring_replacement
from acigroup.providers.base import BaseProvider


logger = logging.getLogger(__name__)


class LifecycleEngine:
    """Applies container group documents and tracks what was created."""

    def __init__(self, config_manager: ConfigManager, provider: BaseProvider, state_store: StateStore):
        """Initialize lifecycle engine."""
        self.config_manager = config_manager
        self.provider = provider
        self.state_store = state_store
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock(self, name: str) -> asyncio.Lock:
        # One operation per container group at a time
        if name not in self._locks:
            self._locks[name] = asyncio.Lock()
        return self._locks[name]

    def _get_spec(self, name: str) -> ContainerGroupSpec:
        spec = self.config_manager.get_group_spec(name)
        if spec is None:
            raise AcigroupError(f"Container group {name} not found in configuration")
        return spec

    async def apply(self, name: str) -> ContainerGroupState:
        """Create the container group or bring its tags up to date."""
        spec = self._get_spec(name)

        async with self._lock(name):
            current = await self.state_store.load(name)

            if current is None:
                logger.info(f"Container group {name} is not tracked, creating")
                state = await self.provider.create(spec)
                await self.state_store.save(state, name)
                return state

            observed = await self.provider.read(current.id, current)
            if observed is None:
                logger.warning(f"Container group {name} no longer exists remotely, recreating")
                state = await self.provider.create(spec)
                await self.state_store.save(state, name)
                return state

            changed = fields_requiring_replacement(spec, observed)
            if changed:
                raise ReplacementRequiredError(name, changed)

            if dict(spec.tags) != dict(observed.tags):
                logger.info(f"Updating tags of container group {name}")
                state = await self.provider.update(current.id, spec, spec)
            else:
                logger.info(f"Container group {name} is up to date")
                state = await self.provider.read(current.id, spec)

            if state is None:
                raise AcigroupError(f"Container group {name} disappeared while being applied")

            await self.state_store.save(state, name)
            return state

    async def apply_all(self) -> Dict[str, Optional[Exception]]:
        """Apply every configured container group; return the error per group, if any."""
        names = list(self.config_manager.groups)
        results = await asyncio.gather(
            *(self.apply(name) for name in names),
            return_exceptions=True,
        )

        outcome: Dict[str, Optional[Exception]] = {}
        for name, result in zip(names, results):
            if isinstance(result, AcigroupError):
                logger.error(f"Failed to apply container group {name}: {result}")
                outcome[name] = result
            elif isinstance(result, BaseException):
                raise result
            else:
                outcome[name] = None
        return outcome

    async def refresh(self, name: str) -> Optional[ContainerGroupState]:
        """Re-read a tracked container group; forget it when it is gone."""
        async with self._lock(name):
            current = await self.state_store.load(name)
            if current is None:
                raise AcigroupError(f"Container group {name} is not tracked")

            state = await self.provider.read(current.id, current)
            if state is None:
                logger.warning(f"Container group {name} no longer exists, removing it from state")
                await self.state_store.remove(name)
                return None

            await self.state_store.save(state, name)
            return state

    async def destroy(self, name: str) -> bool:
        """Delete a tracked container group. Returns False when nothing was tracked."""
        async with self._lock(name):
            current = await self.state_store.load(name)
            if current is None:
                logger.info(f"Container group {name} is not tracked, nothing to destroy")
                return False

            await self.provider.delete(current.id)
            await self.state_store.remove(name)
            logger.info(f"Destroyed container group {name}")
            return True

    async def import_group(self, name: str, resource_id: str) -> ContainerGroupState:
        """Start tracking an existing container group."""
        async with self._lock(name):
            if await self.state_store.load(name) is not None:
                raise AcigroupError(f"Container group {name} is already tracked")

            prior = self.config_manager.get_group_spec(name)
            state = await self.provider.import_(resource_id, prior)
            await self.state_store.save(state, name)
            logger.info(f"Imported container group {name} from {resource_id}")
            return state

    async def get_status(self, name: str) -> Dict[str, Any]:
        """Summary of a container group from configuration and state."""
        spec = self.config_manager.get_group_spec(name)
        state = await self.state_store.load(name)
        source = state or spec

        return {
            "name": name,
            "configured": spec is not None,
            "tracked": state is not None,
            "id": state.id if state else None,
            "resource_group": source.resource_group_name if source else None,
            "location": source.location if source else None,
            "ip_address": state.ip_address if state else None,
            "fqdn": state.fqdn if state else None,
        }

    async def get_all_statuses(self) -> List[Dict[str, Any]]:
        """Status of every configured or tracked container group."""
        names = set(self.config_manager.groups)
        names.update(await self.state_store.list_names())
        return [await self.get_status(name) for name in sorted(names)]
