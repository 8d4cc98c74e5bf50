"""Azure Resource Manager resource ids."""

from dataclasses import dataclass

from azure.mgmt.core.tools import is_valid_resource_id, parse_resource_id, resource_id

from acigroup.errors import InvalidResourceIdError


@dataclass(frozen=True)
class _TypedResourceId:
    """Id of a resource with a single name segment under a provider."""
    subscription_id: str
    resource_group: str
    name: str

    provider_namespace = ""
    segment = ""

    @classmethod
    def parse(cls, rid: str):
        """Parse ``/subscriptions/{sub}/resourceGroups/{rg}/providers/{ns}/{segment}/{name}``."""
        if not is_valid_resource_id(rid):
            raise InvalidResourceIdError(f"{rid!r} is not a valid resource id")

        parts = parse_resource_id(rid)
        if not parts.get("subscription"):
            raise InvalidResourceIdError(f"no subscription id found in {rid!r}")
        if not parts.get("resource_group"):
            raise InvalidResourceIdError(f"no resource group name found in {rid!r}")

        # Provider namespaces and types are case-insensitive in ARM.
        namespace = str(parts.get("namespace", ""))
        resource_type = str(parts.get("type", ""))
        if (
            namespace.lower() != cls.provider_namespace.lower()
            or resource_type.lower() != cls.segment.lower()
            or not parts.get("name")
        ):
            raise InvalidResourceIdError(
                f"resource id {rid!r} is not a {cls.provider_namespace}/{cls.segment} id"
            )
        if parts.get("last_child_num"):
            raise InvalidResourceIdError(f"resource id {rid!r} has unexpected child segments")

        return cls(
            subscription_id=str(parts["subscription"]),
            resource_group=str(parts["resource_group"]),
            name=str(parts["name"]),
        )

    def __str__(self) -> str:
        return resource_id(
            subscription=self.subscription_id,
            resource_group=self.resource_group,
            namespace=self.provider_namespace,
            type=self.segment,
            name=self.name,
        )


class ContainerGroupId(_TypedResourceId):
    """Id of a container group."""
    provider_namespace = "Microsoft.ContainerInstance"
    segment = "containerGroups"


class NetworkProfileId(_TypedResourceId):
    """Id of a network profile."""
    provider_namespace = "Microsoft.Network"
    segment = "networkProfiles"


class UserAssignedIdentityId(_TypedResourceId):
    """Id of a user-assigned managed identity."""
    provider_namespace = "Microsoft.ManagedIdentity"
    segment = "userAssignedIdentities"
