"""Container group provider for Azure Container Instances."""

import asyncio
import logging
from typing import Any, Awaitable, Optional, Tuple

from azure.core.exceptions import AzureError, ResourceNotFoundError

from acigroup.azure.ids import ContainerGroupId, NetworkProfileId
from acigroup.azure.resources import ContainerGroupsClient, NetworkProfilesClient
from acigroup.errors import (
    AcigroupError,
    ConfigValidationError,
    ContainerGroupNotFoundError,
    InvalidResourceIdError,
    OperationError,
    OperationTimeoutError,
    PollTimeoutError,
    ResourceExistsError,
    UnexpectedStateError,
)
from acigroup.models.config import PollingConfig, TimeoutsConfig
from acigroup.models.container_group import ContainerGroupSpec, ContainerGroupState
from acigroup.providers.base import BaseProvider
from acigroup.providers.expand import expand_container_group
from acigroup.providers.flatten import flatten_container_group
from acigroup.utils.polling import DetachState, wait_for_state


logger = logging.getLogger(__name__)


class ContainerGroupProvider(BaseProvider):
    """Provider mapping ContainerGroupSpec documents to container groups."""

    def __init__(
        self,
        groups: ContainerGroupsClient,
        profiles: NetworkProfilesClient,
        subscription_id: str,
        timeouts: Optional[TimeoutsConfig] = None,
        polling: Optional[PollingConfig] = None,
    ):
        """Initialize container group provider."""
        self.groups = groups
        self.profiles = profiles
        self.subscription_id = subscription_id
        self.timeouts = timeouts or TimeoutsConfig()
        self.polling = polling or PollingConfig()

    async def _bounded(self, operation: str, name: str, resource_group: str, timeout: float, coro: Awaitable):
        try:
            return await asyncio.wait_for(coro, timeout=timeout)
        except asyncio.TimeoutError as e:
            raise OperationTimeoutError(operation, name, resource_group, timeout) from e

    async def create(self, spec: ContainerGroupSpec, is_new: bool = True) -> ContainerGroupState:
        """Create the container group, then read it back."""
        return await self._bounded(
            "creating", spec.name, spec.resource_group_name, self.timeouts.create,
            self._create(spec, is_new),
        )

    async def _create(self, spec: ContainerGroupSpec, is_new: bool) -> ContainerGroupState:
        name = spec.name
        resource_group = spec.resource_group_name

        if is_new:
            try:
                existing = await self.groups.get(resource_group, name)
            except ResourceNotFoundError:
                existing = None
            except AzureError as e:
                raise OperationError("checking for presence of existing", name, resource_group, e) from e

            if existing and existing.get("id"):
                raise ResourceExistsError(existing["id"])

        body = expand_container_group(spec)

        logger.info(f"Creating container group {name} in resource group {resource_group}")
        try:
            operation = await self.groups.begin_create_or_update(resource_group, name, body)
        except AzureError as e:
            raise OperationError("creating/updating", name, resource_group, e) from e

        try:
            await operation.result()
        except AzureError as e:
            raise OperationError("waiting for completion of", name, resource_group, e) from e

        try:
            created = await self.groups.get(resource_group, name)
        except AzureError as e:
            raise OperationError("retrieving", name, resource_group, e) from e

        if not created.get("id"):
            raise AcigroupError(f"Cannot read container group {name} (resource group {resource_group}) ID")

        state = await self._read(ContainerGroupId.parse(created["id"]), spec)
        if state is None:
            raise AcigroupError(f"Container group {name} (resource group {resource_group}) vanished after creation")

        logger.info(f"Created container group {state.id}")
        return state

    async def read(
        self, resource_id: str, prior: Optional[ContainerGroupSpec] = None
    ) -> Optional[ContainerGroupState]:
        """Read the container group; None when it no longer exists.

        ``prior`` supplies the write-only values the API does not return.
        """
        group_id = ContainerGroupId.parse(resource_id)
        return await self._bounded(
            "reading", group_id.name, group_id.resource_group, self.timeouts.read,
            self._read(group_id, prior),
        )

    async def _read(
        self, group_id: ContainerGroupId, prior: Optional[ContainerGroupSpec]
    ) -> Optional[ContainerGroupState]:
        try:
            resource = await self.groups.get(group_id.resource_group, group_id.name)
        except ResourceNotFoundError:
            logger.debug(
                f"Container Group {group_id.name!r} was not found in Resource Group "
                f"{group_id.resource_group!r} - treating as deleted"
            )
            return None
        except AzureError as e:
            raise OperationError("retrieving", group_id.name, group_id.resource_group, e) from e

        return flatten_container_group(resource, group_id, prior)

    async def update(
        self,
        resource_id: str,
        spec: ContainerGroupSpec,
        prior: Optional[ContainerGroupSpec] = None,
    ) -> Optional[ContainerGroupState]:
        """Update tags; every other field requires replacement."""
        group_id = ContainerGroupId.parse(resource_id)
        return await self._bounded(
            "updating", group_id.name, group_id.resource_group, self.timeouts.update,
            self._update(group_id, spec, prior),
        )

    async def _update(
        self, group_id: ContainerGroupId, spec: ContainerGroupSpec, prior: Optional[ContainerGroupSpec]
    ) -> Optional[ContainerGroupState]:
        logger.info(f"Updating tags of container group {group_id}")
        try:
            await self.groups.update(group_id.resource_group, group_id.name, {"tags": dict(spec.tags)})
        except AzureError as e:
            raise OperationError("updating", group_id.name, group_id.resource_group, e) from e

        return await self._read(group_id, prior or spec)

    async def delete(self, resource_id: str) -> None:
        """Delete the container group and wait for its network profile to release it."""
        group_id = ContainerGroupId.parse(resource_id)
        await self._bounded(
            "deleting", group_id.name, group_id.resource_group, self.timeouts.delete,
            self._delete(group_id),
        )

    async def _delete(self, group_id: ContainerGroupId) -> None:
        loop = asyncio.get_running_loop()
        started = loop.time()
        name, resource_group = group_id.name, group_id.resource_group

        try:
            existing = await self.groups.get(resource_group, name)
        except ResourceNotFoundError:
            logger.debug(f"Container group {group_id} already deleted")
            return
        except AzureError as e:
            raise OperationError("retrieving", name, resource_group, e) from e

        network_profile_id = (
            ((existing.get("properties") or {}).get("networkProfile") or {}).get("id") or ""
        )

        logger.info(f"Deleting container group {group_id}")
        try:
            operation = await self.groups.begin_delete(resource_group, name)
        except AzureError as e:
            raise OperationError("deleting", name, resource_group, e) from e

        try:
            await operation.result()
        except AzureError as e:
            raise OperationError("waiting for deletion of", name, resource_group, e) from e

        if not network_profile_id:
            return

        # The delete operation can complete before the network profile lets go of the group.
        logger.debug(f"Waiting for container group {group_id} to detach from {network_profile_id}")
        remaining = max(self.timeouts.delete - (loop.time() - started), 0.0)
        try:
            profile_id = NetworkProfileId.parse(network_profile_id)
            await wait_for_state(
                self._detach_refresh(profile_id, group_id),
                pending=[DetachState.ATTACHED],
                target=[DetachState.DETACHED],
                timeout=remaining,
                min_interval=self.polling.detach_min_interval,
                continuous_target_occurrence=self.polling.detach_continuous_target_occurrence,
            )
        except (AzureError, InvalidResourceIdError, PollTimeoutError, UnexpectedStateError) as e:
            raise OperationError("waiting for network profile to release", name, resource_group, e) from e

    def _detach_refresh(self, profile_id: NetworkProfileId, group_id: ContainerGroupId):
        async def refresh() -> Tuple[Any, DetachState]:
            profile = await self.profiles.get(profile_id.resource_group, profile_id.name)

            props = profile.get("properties") or {}
            for nic in props.get("containerNetworkInterfaces") or []:
                container_id = (((nic.get("properties") or {}).get("container")) or {}).get("id")
                if not container_id:
                    continue

                attached = ContainerGroupId.parse(container_id)
                if attached.resource_group.lower() != group_id.resource_group.lower():
                    continue
                if attached.name != group_id.name:
                    continue

                return None, DetachState.ATTACHED

            return profile, DetachState.DETACHED

        return refresh

    async def import_(
        self, resource_id: str, prior: Optional[ContainerGroupSpec] = None
    ) -> ContainerGroupState:
        """Read an existing container group so it can be managed."""
        state = await self.read(resource_id, prior)
        if state is None:
            raise ContainerGroupNotFoundError(resource_id)
        return state

    async def validate_spec(self, spec: ContainerGroupSpec) -> bool:
        """Validate the specification locally by expanding it."""
        try:
            expand_container_group(spec)
        except ConfigValidationError as e:
            logger.error(f"Invalid container group {spec.name}: {e}")
            return False
        return True
