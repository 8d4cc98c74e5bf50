"""Expand container group specifications into ARM request bodies."""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from acigroup.errors import ConfigValidationError
from acigroup.models.container_group import (
    AzureFileVolume,
    ContainerGroupSpec,
    ContainerSpec,
    DiagnosticsSpec,
    DnsConfigSpec,
    EmptyDirVolume,
    GitRepoVolume,
    IdentitySpec,
    ImageRegistryCredential,
    Port,
    ProbeSpec,
    SecretVolume,
    VolumeSpec,
)


logger = logging.getLogger(__name__)


def expand_container_group(spec: ContainerGroupSpec) -> Dict[str, Any]:
    """Build the createOrUpdate body for a container group."""
    containers, group_ports, group_volumes = expand_containers(spec.containers, spec.exposed_ports)

    ip_address: Dict[str, Any] = {
        "type": spec.ip_address_type,
        "ports": group_ports,
    }
    if spec.dns_name_label:
        ip_address["dnsNameLabel"] = spec.dns_name_label

    properties: Dict[str, Any] = {
        "containers": containers,
        "restartPolicy": spec.restart_policy,
        "ipAddress": ip_address,
        "osType": spec.os_type,
        "volumes": group_volumes,
    }

    if spec.image_registry_credentials:
        properties["imageRegistryCredentials"] = expand_image_registry_credentials(
            spec.image_registry_credentials
        )
    if spec.diagnostics is not None:
        properties["diagnostics"] = expand_diagnostics(spec.diagnostics)
    if spec.dns_config is not None:
        properties["dnsConfig"] = expand_dns_config(spec.dns_config)

    if spec.network_profile_id:
        if spec.os_type.lower() != "linux":
            raise ConfigValidationError("Currently only Linux containers can be deployed to virtual networks")
        properties["networkProfile"] = {"id": spec.network_profile_id}

    body: Dict[str, Any] = {
        "name": spec.name,
        "location": spec.location,
        "tags": dict(spec.tags),
        "properties": properties,
    }
    if spec.identity is not None:
        body["identity"] = expand_identity(spec.identity)

    return body


def expand_containers(
    containers: List[ContainerSpec],
    exposed_ports: Optional[List[Port]],
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Expand containers; return (containers, group ports, group volumes)."""
    expanded = []
    container_ports: List[Port] = []
    group_volumes: List[Dict[str, Any]] = []
    added_empty_dirs: Set[str] = set()

    for container in containers:
        expanded.append(expand_container(container))

        for port in container.ports:
            if port not in container_ports:
                container_ports.append(port)

        for volume in container.volumes:
            if isinstance(volume.source, EmptyDirVolume):
                # Containers may share an empty_dir volume; the group declares it once.
                if volume.name in added_empty_dirs:
                    continue
                added_empty_dirs.add(volume.name)
            group_volumes.append(expand_volume(volume))

    if exposed_ports:
        available = set(container_ports)
        group_ports = []
        for port in exposed_ports:
            if port not in available:
                raise ConfigValidationError(
                    f"Port {port.port}/{port.protocol} is not exposed on any individual container in the "
                    f"container group.\nAn exposed_ports block contains {port.port}/{port.protocol}, but no "
                    f"individual container has a ports block with the same port and protocol. Any ports "
                    f"exposed on the container group must also be exposed on an individual container."
                )
            group_ports.append(port)
    else:
        # Legacy default, to be removed along with the optional exposed_ports
        logger.debug("exposed_ports not set, exposing every container port on the group")
        group_ports = container_ports

    return expanded, [expand_port(port) for port in group_ports], group_volumes


def expand_container(container: ContainerSpec) -> Dict[str, Any]:
    requests: Dict[str, Any] = {
        "cpu": container.cpu,
        "memoryInGB": container.memory,
    }
    if container.gpu is not None:
        requests["gpu"] = {"count": container.gpu.count, "sku": container.gpu.sku}

    properties: Dict[str, Any] = {
        "image": container.image,
        "resources": {"requests": requests},
        "environmentVariables": expand_environment_variables(
            container.environment_variables,
            container.secure_environment_variables,
        ),
    }

    if container.ports:
        properties["ports"] = [expand_port(port) for port in container.ports]
    if container.commands:
        properties["command"] = list(container.commands)
    if container.volumes:
        properties["volumeMounts"] = [
            {
                "name": volume.name,
                "mountPath": volume.mount_path,
                "readOnly": volume.read_only,
            }
            for volume in container.volumes
        ]
    if container.liveness_probe is not None:
        properties["livenessProbe"] = expand_probe(container.liveness_probe)
    if container.readiness_probe is not None:
        properties["readinessProbe"] = expand_probe(container.readiness_probe)

    return {"name": container.name, "properties": properties}


def expand_port(port: Port) -> Dict[str, Any]:
    return {"port": port.port, "protocol": port.protocol}


def expand_environment_variables(plain: Dict[str, str], secure: Dict[str, str]) -> List[Dict[str, str]]:
    """Merge plain and secure variables, plain ones first."""
    variables = [{"name": name, "value": value} for name, value in plain.items()]
    variables.extend({"name": name, "secureValue": value} for name, value in secure.items())
    return variables


def expand_volume(volume: VolumeSpec) -> Dict[str, Any]:
    source = volume.source
    output: Dict[str, Any] = {"name": volume.name}

    if isinstance(source, EmptyDirVolume):
        output["emptyDir"] = {}
    elif isinstance(source, GitRepoVolume):
        git_repo = {"repository": source.url}
        if source.directory:
            git_repo["directory"] = source.directory
        if source.revision:
            git_repo["revision"] = source.revision
        output["gitRepo"] = git_repo
    elif isinstance(source, SecretVolume):
        output["secret"] = dict(source.values)
    elif isinstance(source, AzureFileVolume):
        if not source.storage_account_key:
            raise ConfigValidationError(
                f"volume {volume.name!r}: storage_account_key must be specified"
            )
        output["azureFile"] = {
            "shareName": source.share_name,
            "readOnly": volume.read_only,
            "storageAccountName": source.storage_account_name,
            "storageAccountKey": source.storage_account_key,
        }

    return output


def expand_probe(probe: ProbeSpec) -> Dict[str, Any]:
    output: Dict[str, Any] = {}

    for field, key in (
        ("initial_delay_seconds", "initialDelaySeconds"),
        ("period_seconds", "periodSeconds"),
        ("failure_threshold", "failureThreshold"),
        ("success_threshold", "successThreshold"),
        ("timeout_seconds", "timeoutSeconds"),
    ):
        value = getattr(probe, field)
        if value > 0:
            output[key] = value

    if probe.exec:
        output["exec"] = {"command": list(probe.exec)}

    if probe.http_get is not None:
        http_get: Dict[str, Any] = {"port": probe.http_get.port}
        if probe.http_get.path:
            http_get["path"] = probe.http_get.path
        if probe.http_get.scheme:
            http_get["scheme"] = probe.http_get.scheme.lower()
        output["httpGet"] = http_get

    return output


def expand_identity(identity: IdentitySpec) -> Dict[str, Any]:
    output: Dict[str, Any] = {"type": identity.type}
    if "UserAssigned" in identity.type:
        output["userAssignedIdentities"] = {identity_id: {} for identity_id in identity.identity_ids}
    return output


def expand_image_registry_credentials(credentials: List[ImageRegistryCredential]) -> List[Dict[str, str]]:
    output = []
    for credential in credentials:
        if not credential.password:
            raise ConfigValidationError(
                f"image registry credential for {credential.server!r}: password must be specified"
            )
        output.append({
            "server": credential.server,
            "username": credential.username,
            "password": credential.password,
        })
    return output


def expand_diagnostics(diagnostics: DiagnosticsSpec) -> Dict[str, Any]:
    log_analytics = diagnostics.log_analytics
    if not log_analytics.workspace_key:
        raise ConfigValidationError("diagnostics log_analytics: workspace_key must be specified")

    output: Dict[str, Any] = {
        "workspaceId": log_analytics.workspace_id,
        "workspaceKey": log_analytics.workspace_key,
    }
    if log_analytics.log_type:
        output["logType"] = log_analytics.log_type
        output["metadata"] = dict(log_analytics.metadata)

    return {"logAnalytics": output}


def expand_dns_config(dns_config: DnsConfigSpec) -> Dict[str, Any]:
    output: Dict[str, Any] = {"nameServers": list(dns_config.nameservers)}
    if dns_config.search_domains:
        output["searchDomains"] = " ".join(sorted(dns_config.search_domains))
    if dns_config.options:
        output["options"] = " ".join(sorted(dns_config.options))
    return output
