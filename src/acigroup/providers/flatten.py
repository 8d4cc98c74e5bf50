"""Flatten ARM container group responses back into specifications.

The API never returns write-only values (registry passwords, secure
environment variables, storage account keys, secret volume contents and the
Log Analytics workspace key). Those are carried over from ``prior``, the
previously known specification, when it is available.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from acigroup.azure.ids import ContainerGroupId, UserAssignedIdentityId
from acigroup.models.container_group import (
    ContainerGroupSpec,
    ContainerGroupState,
    ContainerSpec,
    VolumeSpec,
    normalize_location,
)


logger = logging.getLogger(__name__)


def flatten_container_group(
    resource: Dict[str, Any],
    resource_id: ContainerGroupId,
    prior: Optional[ContainerGroupSpec] = None,
) -> ContainerGroupState:
    """Build the state of a container group from its GET response."""
    props = resource.get("properties") or {}
    address = props.get("ipAddress") or {}

    state: Dict[str, Any] = {
        "id": resource.get("id") or str(resource_id),
        "name": resource_id.name,
        "resource_group_name": resource_id.resource_group,
        "location": normalize_location(resource.get("location") or (prior.location if prior else "")),
        "tags": dict(resource.get("tags") or {}),
        "identity": flatten_identity(resource.get("identity")),
        "os_type": props.get("osType"),
        "restart_policy": props.get("restartPolicy") or "Always",
        "containers": flatten_containers(
            props.get("containers") or [],
            props.get("volumes") or [],
            prior.containers if prior else [],
        ),
        "image_registry_credentials": flatten_image_registry_credentials(
            props.get("imageRegistryCredentials") or [],
            prior.image_registry_credentials if prior else [],
        ),
        "dns_config": flatten_dns_config(props.get("dnsConfig")),
        "diagnostics": flatten_diagnostics(props.get("diagnostics"), prior),
    }

    if address:
        state["ip_address_type"] = address.get("type") or "Public"
        state["ip_address"] = address.get("ip")
        state["exposed_ports"] = flatten_ports(address.get("ports") or [])
        state["dns_name_label"] = address.get("dnsNameLabel")
        state["fqdn"] = address.get("fqdn")

    network_profile = props.get("networkProfile") or {}
    if network_profile.get("id"):
        state["network_profile_id"] = network_profile["id"]

    return ContainerGroupState.model_validate(state)


def flatten_ports(ports: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {"port": port["port"], "protocol": (port.get("protocol") or "TCP").upper()}
        for port in ports
        if port.get("port") is not None
    ]


def flatten_identity(identity: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not identity or not identity.get("type") or identity.get("type") == "None":
        return None

    identity_ids = [
        str(UserAssignedIdentityId.parse(key))
        for key in (identity.get("userAssignedIdentities") or {})
    ]
    return {
        "type": identity["type"],
        "principal_id": identity.get("principalId"),
        "identity_ids": identity_ids,
    }


def flatten_image_registry_credentials(
    credentials: List[Dict[str, Any]],
    prior: List[Any],
) -> List[Dict[str, Any]]:
    output = []
    for i, credential in enumerate(credentials):
        password = ""
        # Passwords are only known for the credential stored at the same position
        if i < len(prior) and credential.get("server") == prior[i].server:
            password = prior[i].password
        output.append({
            "server": credential.get("server"),
            "username": credential.get("username"),
            "password": password,
        })
    return output


def flatten_containers(
    containers: List[Dict[str, Any]],
    group_volumes: List[Dict[str, Any]],
    prior: List[ContainerSpec],
) -> List[Dict[str, Any]]:
    prior_by_name = {container.name: container for container in prior}

    output = []
    for container in containers:
        name = container["name"]
        props = container.get("properties") or {}
        old = prior_by_name.get(name)

        config: Dict[str, Any] = {
            "name": name,
            "image": props.get("image"),
        }

        requests = (props.get("resources") or {}).get("requests") or {}
        config["cpu"] = requests.get("cpu")
        config["memory"] = requests.get("memoryInGB")
        if requests.get("gpu"):
            config["gpu"] = {
                "count": requests["gpu"].get("count"),
                "sku": requests["gpu"].get("sku"),
            }

        config["ports"] = flatten_ports(props.get("ports") or [])

        plain, secure = flatten_environment_variables(props.get("environmentVariables") or [], old)
        config["environment_variables"] = plain
        config["secure_environment_variables"] = secure

        config["commands"] = list(props.get("command") or [])
        config["volumes"] = flatten_volumes(props.get("volumeMounts") or [], group_volumes, old)
        config["liveness_probe"] = flatten_probe(props.get("livenessProbe"))
        config["readiness_probe"] = flatten_probe(props.get("readinessProbe"))

        output.append(config)

    return output


def flatten_environment_variables(
    variables: List[Dict[str, Any]],
    prior: Optional[ContainerSpec],
) -> Tuple[Dict[str, str], Dict[str, str]]:
    """Split variables into plain and secure maps.

    A variable with a name but no value is secure; its value is looked up in
    the prior container.
    """
    plain: Dict[str, str] = {}
    secure: Dict[str, str] = {}
    known_secrets = prior.secure_environment_variables if prior else {}

    for variable in variables:
        name = variable.get("name")
        if not name:
            continue
        if variable.get("value") is not None:
            plain[name] = variable["value"]
        else:
            secure[name] = known_secrets.get(name, "")

    return plain, secure


def flatten_volumes(
    mounts: List[Dict[str, Any]],
    group_volumes: List[Dict[str, Any]],
    prior: Optional[ContainerSpec],
) -> List[Dict[str, Any]]:
    volumes_by_name = {volume.get("name"): volume for volume in group_volumes}
    prior_by_name = {volume.name: volume for volume in prior.volumes} if prior else {}

    output = []
    for mount in mounts:
        name = mount.get("name")
        old = prior_by_name.get(name)
        output.append({
            "name": name,
            "mount_path": mount.get("mountPath"),
            "read_only": bool(mount.get("readOnly", False)),
            "source": _flatten_volume_source(volumes_by_name.get(name) or {}, old),
        })

    return output


def _flatten_volume_source(volume: Dict[str, Any], prior: Optional[VolumeSpec]) -> Dict[str, Any]:
    if volume.get("azureFile") is not None:
        azure_file = volume["azureFile"]
        key = ""
        if prior is not None and prior.source.kind == "azure_file":
            key = prior.source.storage_account_key
        return {
            "kind": "azure_file",
            "share_name": azure_file.get("shareName", ""),
            "storage_account_name": azure_file.get("storageAccountName", ""),
            "storage_account_key": key,
        }

    if volume.get("emptyDir") is not None:
        return {"kind": "empty_dir"}

    if volume.get("gitRepo") is not None:
        git_repo = volume["gitRepo"]
        return {
            "kind": "git_repo",
            "url": git_repo.get("repository", ""),
            "directory": git_repo.get("directory"),
            "revision": git_repo.get("revision"),
        }

    if volume.get("secret") is None and prior is not None:
        logger.debug(f"Volume {volume.get('name')!r} returned without a source, keeping previous one")
        return prior.source.model_dump()

    values = {}
    if prior is not None and prior.source.kind == "secret":
        values = dict(prior.source.values)
    return {"kind": "secret", "values": values}


def flatten_probe(probe: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not probe:
        return None

    output: Dict[str, Any] = {
        "exec": list((probe.get("exec") or {}).get("command") or []),
        "initial_delay_seconds": probe.get("initialDelaySeconds") or 0,
        "period_seconds": probe.get("periodSeconds") or 0,
        "failure_threshold": probe.get("failureThreshold") or 0,
        "success_threshold": probe.get("successThreshold") or 0,
        "timeout_seconds": probe.get("timeoutSeconds") or 0,
    }

    http_get = probe.get("httpGet")
    if http_get:
        output["http_get"] = {
            "path": http_get.get("path"),
            "port": http_get.get("port"),
            "scheme": http_get.get("scheme"),
        }

    return output


def flatten_diagnostics(
    diagnostics: Optional[Dict[str, Any]],
    prior: Optional[ContainerGroupSpec],
) -> Optional[Dict[str, Any]]:
    if not diagnostics or not diagnostics.get("logAnalytics"):
        return None

    log_analytics = diagnostics["logAnalytics"]

    # Absent on import
    workspace_key = ""
    if prior is not None and prior.diagnostics is not None:
        workspace_key = prior.diagnostics.log_analytics.workspace_key or ""

    return {
        "log_analytics": {
            "workspace_id": log_analytics.get("workspaceId"),
            "workspace_key": workspace_key,
            "log_type": log_analytics.get("logType") or None,
            "metadata": dict(log_analytics.get("metadata") or {}),
        }
    }


def flatten_dns_config(dns_config: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not dns_config:
        return None

    # searchDomains and options come back as space separated strings
    return {
        "nameservers": list(dns_config.get("nameServers") or []),
        "search_domains": _split_spaces(dns_config.get("searchDomains")),
        "options": _split_spaces(dns_config.get("options")),
    }


def _split_spaces(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [entry for entry in value.split(" ") if entry]
