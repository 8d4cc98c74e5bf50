"""Pydantic models for configuration and validation."""

from acigroup.models.config import AcigroupConfig, AzureConfig, PollingConfig, TimeoutsConfig
from acigroup.models.container_group import (
    AzureFileVolume,
    ContainerGroupSpec,
    ContainerGroupState,
    ContainerSpec,
    DiagnosticsSpec,
    DnsConfigSpec,
    EmptyDirVolume,
    GitRepoVolume,
    GpuSpec,
    HttpGetSpec,
    IdentitySpec,
    ImageRegistryCredential,
    LogAnalyticsSpec,
    Port,
    ProbeSpec,
    SecretVolume,
    VolumeSpec,
    fields_requiring_replacement,
)

__all__ = [
    "AcigroupConfig",
    "AzureConfig",
    "PollingConfig",
    "TimeoutsConfig",
    "AzureFileVolume",
    "ContainerGroupSpec",
    "ContainerGroupState",
    "ContainerSpec",
    "DiagnosticsSpec",
    "DnsConfigSpec",
    "EmptyDirVolume",
    "GitRepoVolume",
    "GpuSpec",
    "HttpGetSpec",
    "IdentitySpec",
    "ImageRegistryCredential",
    "LogAnalyticsSpec",
    "Port",
    "ProbeSpec",
    "SecretVolume",
    "VolumeSpec",
    "fields_requiring_replacement",
]
