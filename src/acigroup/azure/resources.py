"""Resource-specific ARM clients."""

from typing import Any, Dict

from azure.core.polling import AsyncLROPoller

from acigroup.azure.client import ArmClient
from acigroup.azure.ids import ContainerGroupId, NetworkProfileId


class ContainerGroupsClient:
    """Microsoft.ContainerInstance/containerGroups operations."""

    def __init__(self, client: ArmClient, subscription_id: str, api_version: str = "2019-12-01"):
        self.client = client
        self.subscription_id = subscription_id
        self.api_version = api_version

    def _path(self, resource_group: str, name: str) -> str:
        return str(ContainerGroupId(self.subscription_id, resource_group, name))

    async def get(self, resource_group: str, name: str) -> Dict[str, Any]:
        return await self.client.get(self._path(resource_group, name), self.api_version)

    async def begin_create_or_update(
        self, resource_group: str, name: str, body: Dict[str, Any]
    ) -> AsyncLROPoller:
        return await self.client.begin_put(self._path(resource_group, name), self.api_version, body)

    async def update(self, resource_group: str, name: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Patch mutable properties; only tags are accepted by the API."""
        return await self.client.patch(self._path(resource_group, name), self.api_version, body)

    async def begin_delete(self, resource_group: str, name: str) -> AsyncLROPoller:
        return await self.client.begin_delete(self._path(resource_group, name), self.api_version)


class NetworkProfilesClient:
    """Microsoft.Network/networkProfiles operations."""

    def __init__(self, client: ArmClient, subscription_id: str, api_version: str = "2021-02-01"):
        self.client = client
        self.subscription_id = subscription_id
        self.api_version = api_version

    async def get(self, resource_group: str, name: str) -> Dict[str, Any]:
        path = str(NetworkProfileId(self.subscription_id, resource_group, name))
        return await self.client.get(path, self.api_version)
