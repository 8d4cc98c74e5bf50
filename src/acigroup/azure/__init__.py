"""Azure Resource Manager access."""

from acigroup.azure.client import ArmClient
from acigroup.azure.ids import ContainerGroupId, NetworkProfileId, UserAssignedIdentityId
from acigroup.azure.resources import ContainerGroupsClient, NetworkProfilesClient

__all__ = [
    "ArmClient",
    "ContainerGroupId",
    "NetworkProfileId",
    "UserAssignedIdentityId",
    "ContainerGroupsClient",
    "NetworkProfilesClient",
]
