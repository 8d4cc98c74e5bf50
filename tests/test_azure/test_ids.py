"""Tests for resource id parsing."""

import pytest

from acigroup.azure.ids import ContainerGroupId, NetworkProfileId, UserAssignedIdentityId
from acigroup.errors import InvalidResourceIdError


class TestInvalidResourceIds:
    """Test malformed ids are rejected."""

    @pytest.mark.parametrize("resource_id", [
        "",
        "web",
        "subscriptions/sub/resourceGroups/rg/providers/Microsoft.ContainerInstance/containerGroups/web",
        "/subscriptions//resourceGroups/rg/providers/Microsoft.ContainerInstance/containerGroups/web",
        "/subscriptions/sub/providers/Microsoft.ContainerInstance/containerGroups/web",
        "/subscriptions/sub/resourceGroups/rg",
        "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.ContainerInstance/containerGroups/web/",
        "/resourceGroups/rg/providers/Microsoft.ContainerInstance/containerGroups/web",
    ])
    def test_invalid(self, resource_id):
        """Test ids missing a subscription, resource group or name are rejected."""
        with pytest.raises(InvalidResourceIdError):
            ContainerGroupId.parse(resource_id)

    def test_invalid_is_value_error(self):
        """Test parse errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            ContainerGroupId.parse("not-an-id")


class TestTypedResourceIds:
    """Test container group, network profile and identity ids."""

    def test_container_group(self, group_id, subscription_id):
        """Test parsing a container group id."""
        parsed = ContainerGroupId.parse(group_id)

        assert parsed.subscription_id == subscription_id
        assert parsed.resource_group == "rg-web"
        assert parsed.name == "web"
        assert str(parsed) == group_id

    def test_canonical_string(self):
        """Test rendering restores the canonical casing of the resourceGroups key."""
        parsed = UserAssignedIdentityId.parse(
            "/subscriptions/sub/resourcegroups/rg/providers/Microsoft.ManagedIdentity"
            "/userAssignedIdentities/identity"
        )
        assert str(parsed) == (
            "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.ManagedIdentity"
            "/userAssignedIdentities/identity"
        )

    def test_wrong_type(self, group_id):
        """Test a container group id is not a network profile id."""
        with pytest.raises(InvalidResourceIdError) as exc_info:
            NetworkProfileId.parse(group_id)
        assert "networkProfiles" in str(exc_info.value)

    def test_nested_rejected(self):
        """Test ids with extra segments are rejected."""
        with pytest.raises(InvalidResourceIdError):
            ContainerGroupId.parse(
                "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.ContainerInstance"
                "/containerGroups/web/containers/nginx"
            )

    def test_provider_namespace_case_insensitive(self):
        """Test namespace and type casing from the API is accepted."""
        parsed = NetworkProfileId.parse(
            "/subscriptions/sub/resourceGroups/RG/providers/microsoft.network/networkprofiles/np"
        )

        assert parsed.resource_group == "RG"
        assert parsed.name == "np"
        assert str(parsed) == (
            "/subscriptions/sub/resourceGroups/RG/providers/Microsoft.Network/networkProfiles/np"
        )

    def test_nested_network_id_rejected(self):
        """Test child resources under a network profile are not network profile ids."""
        with pytest.raises(InvalidResourceIdError):
            NetworkProfileId.parse(
                "/subscriptions/sub/resourceGroups/rg/providers/Microsoft.Network"
                "/networkProfiles/np/containerNetworkInterfaceConfigurations/eth0"
            )
