"""Shared fixtures for acigroup tests."""

import copy

import pytest

from acigroup.models.container_group import ContainerGroupSpec


SUBSCRIPTION_ID = "00000000-0000-0000-0000-000000000001"
WORKSPACE_ID = "6f2c1d3e-8a41-4b7e-9a55-0c1e2d3f4a5b"

GROUP_DOCUMENT = {
    "name": "web",
    "resource_group_name": "rg-web",
    "location": "West Europe",
    "os_type": "Linux",
    "dns_name_label": "web-demo",
    "tags": {"env": "test"},
    "exposed_ports": [{"port": 80}],
    "containers": [
        {
            "name": "nginx",
            "image": "nginx:1.25",
            "cpu": 0.5,
            "memory": 1.5,
            "ports": [{"port": 80}, {"port": 443}],
            "environment_variables": {"MODE": "prod"},
            "secure_environment_variables": {"API_KEY": "s3cr3t"},
            "volumes": [
                {"name": "cache", "mount_path": "/cache", "empty_dir": True},
                {
                    "name": "share",
                    "mount_path": "/share",
                    "share_name": "files",
                    "storage_account_name": "acct",
                    "storage_account_key": "key==",
                },
                {"name": "certs", "mount_path": "/certs", "read_only": True, "secret": {"tls.crt": "Y2VydA=="}},
            ],
            "liveness_probe": {"http_get": {"path": "/healthz", "port": 80}, "period_seconds": 10},
        }
    ],
    "image_registry_credentials": [
        {"server": "registry.example.com", "username": "bot", "password": "hunter2"}
    ],
    "diagnostics": {
        "log_analytics": {
            "workspace_id": WORKSPACE_ID,
            "workspace_key": "workspace-key",
            "log_type": "ContainerInsights",
            "metadata": {"team": "web"},
        }
    },
    "dns_config": {
        "nameservers": ["10.0.0.4"],
        "search_domains": ["b.local", "a.local"],
        "options": ["ndots:2"],
    },
}


@pytest.fixture
def subscription_id():
    """Subscription used throughout the tests."""
    return SUBSCRIPTION_ID


@pytest.fixture
def group_data():
    """A container group document using every feature."""
    return copy.deepcopy(GROUP_DOCUMENT)


@pytest.fixture
def group_spec(group_data):
    """Parsed container group specification."""
    return ContainerGroupSpec(**group_data)


@pytest.fixture
def group_id(subscription_id):
    """Resource id of the container group."""
    return (
        f"/subscriptions/{subscription_id}/resourceGroups/rg-web"
        f"/providers/Microsoft.ContainerInstance/containerGroups/web"
    )
