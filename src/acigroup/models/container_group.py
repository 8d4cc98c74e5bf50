"""Container group specification models."""

import uuid
from typing import Annotated, Any, Dict, List, Literal, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from acigroup.azure.ids import UserAssignedIdentityId
from acigroup.errors import InvalidResourceIdError


ONLY_ONE_VOLUME_KIND = (
    "only one of `empty_dir` volume, `git_repo` volume, `secret` volume or storage account volume "
    "(`share_name`, `storage_account_name`, and `storage_account_key`) can be specified"
)
STORAGE_ACCOUNT_FIELDS_REQUIRED = (
    "when using a storage account volume, all of `share_name`, `storage_account_name`, "
    "`storage_account_key` must be specified"
)


def _canonical_choice(value: Any, choices: List[str]) -> Any:
    """Map a case-insensitive choice to its canonical spelling."""
    if isinstance(value, str):
        for choice in choices:
            if value.lower() == choice.lower():
                return choice
    return value


def _unique_ports(ports: Optional[List["Port"]]) -> Optional[List["Port"]]:
    """Drop repeated ports, keeping the first occurrence."""
    if ports is None:
        return None
    return list(dict.fromkeys(ports))


def normalize_location(location: str) -> str:
    """Normalise an Azure location ("West Europe" -> "westeurope")."""
    return location.replace(" ", "").lower()


class Port(BaseModel):
    """A port and protocol pair."""
    port: int = Field(..., ge=1, le=65535)
    protocol: Literal["TCP", "UDP"] = Field(default="TCP")

    model_config = ConfigDict(extra="forbid", frozen=True)


class GpuSpec(BaseModel):
    """GPU request for a container."""
    count: Literal[1, 2, 4]
    sku: Literal["K80", "P100", "V100"]

    model_config = ConfigDict(extra="forbid")


class HttpGetSpec(BaseModel):
    """HTTP GET action of a probe."""
    path: Optional[str] = None
    port: int = Field(..., ge=1, le=65535)
    scheme: Optional[Literal["Http", "Https"]] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("scheme", mode="before")
    @classmethod
    def validate_scheme(cls, v):
        return _canonical_choice(v, ["Http", "Https"])


class ProbeSpec(BaseModel):
    """Liveness or readiness probe.

    Integer settings are only sent to the API when positive, so 0 means
    "use the platform default".
    """
    exec: List[str] = Field(default_factory=list)
    http_get: Optional[HttpGetSpec] = None
    initial_delay_seconds: int = Field(default=0, ge=0)
    period_seconds: int = Field(default=0, ge=0)
    failure_threshold: int = Field(default=0, ge=0)
    success_threshold: int = Field(default=0, ge=0)
    timeout_seconds: int = Field(default=0, ge=0)

    model_config = ConfigDict(extra="forbid")


class EmptyDirVolume(BaseModel):
    kind: Literal["empty_dir"] = "empty_dir"


class GitRepoVolume(BaseModel):
    kind: Literal["git_repo"] = "git_repo"
    url: str = Field(..., min_length=1)
    directory: Optional[str] = None
    revision: Optional[str] = None


class SecretVolume(BaseModel):
    kind: Literal["secret"] = "secret"
    values: Dict[str, str] = Field(default_factory=dict, repr=False)


class AzureFileVolume(BaseModel):
    kind: Literal["azure_file"] = "azure_file"
    share_name: str
    storage_account_name: str
    storage_account_key: str = Field(default="", repr=False)


VolumeSource = Annotated[
    Union[EmptyDirVolume, GitRepoVolume, SecretVolume, AzureFileVolume],
    Field(discriminator="kind"),
]


class VolumeSpec(BaseModel):
    """A volume mounted into a container.

    Documents are written in the flat form (``empty_dir``, ``git_repo``,
    ``secret`` or the three storage account fields). They are decoded into
    exactly one ``source`` variant here; persisted state carries ``source``
    directly.
    """
    name: str = Field(..., min_length=1)
    mount_path: str = Field(..., min_length=1)
    read_only: bool = Field(default=False)
    source: VolumeSource

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def decode_flat_source(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "source" in data:
            return data

        data = dict(data)
        empty_dir = data.pop("empty_dir", False)
        git_repo = data.pop("git_repo", None)
        secret = data.pop("secret", None)
        share_name = data.pop("share_name", None)
        account_name = data.pop("storage_account_name", None)
        account_key = data.pop("storage_account_key", None)

        storage_fields = [share_name, account_name, account_key]
        candidates = []
        if empty_dir:
            candidates.append({"kind": "empty_dir"})
        if git_repo:
            candidates.append({"kind": "git_repo", **git_repo})
        if secret:
            candidates.append({"kind": "secret", "values": secret})
        if any(storage_fields):
            candidates.append({
                "kind": "azure_file",
                "share_name": share_name,
                "storage_account_name": account_name,
                "storage_account_key": account_key,
            })

        if len(candidates) > 1:
            raise ValueError(ONLY_ONE_VOLUME_KIND)
        if any(storage_fields) and not all(storage_fields):
            raise ValueError(STORAGE_ACCOUNT_FIELDS_REQUIRED)
        if not candidates:
            raise ValueError(ONLY_ONE_VOLUME_KIND)

        data["source"] = candidates[0]
        return data


class ContainerSpec(BaseModel):
    """Container specification."""
    name: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)
    cpu: float = Field(..., gt=0)
    memory: float = Field(..., gt=0)
    gpu: Optional[GpuSpec] = None
    ports: List[Port] = Field(default_factory=list)
    environment_variables: Dict[str, str] = Field(default_factory=dict)
    secure_environment_variables: Dict[str, str] = Field(default_factory=dict, repr=False)
    commands: List[str] = Field(default_factory=list)
    volumes: List[VolumeSpec] = Field(default_factory=list)
    liveness_probe: Optional[ProbeSpec] = None
    readiness_probe: Optional[ProbeSpec] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("ports")
    @classmethod
    def validate_ports(cls, v):
        return _unique_ports(v)

    @field_validator("commands")
    @classmethod
    def validate_commands(cls, v):
        if any(not command for command in v):
            raise ValueError("commands must not contain empty strings")
        return v


class IdentitySpec(BaseModel):
    """Managed identity block."""
    type: Literal["SystemAssigned", "UserAssigned", "SystemAssigned, UserAssigned"]
    identity_ids: List[str] = Field(default_factory=list)
    principal_id: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("identity_ids")
    @classmethod
    def validate_identity_ids(cls, v):
        """Check every id is a user-assigned identity and canonicalise it."""
        try:
            return [str(UserAssignedIdentityId.parse(identity_id)) for identity_id in v]
        except InvalidResourceIdError as e:
            raise ValueError(str(e)) from e


class ImageRegistryCredential(BaseModel):
    """Credentials for a private image registry."""
    server: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1)
    password: str = Field(default="", repr=False)

    model_config = ConfigDict(extra="forbid")


class LogAnalyticsSpec(BaseModel):
    """Log Analytics workspace settings."""
    workspace_id: str
    workspace_key: str = Field(default="", repr=False)
    log_type: Optional[Literal["ContainerInsights", "ContainerInstanceLogs"]] = None
    metadata: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @field_validator("workspace_id")
    @classmethod
    def validate_workspace_id(cls, v):
        uuid.UUID(v)
        return v


class DiagnosticsSpec(BaseModel):
    """Diagnostics block."""
    log_analytics: LogAnalyticsSpec

    model_config = ConfigDict(extra="forbid")


class DnsConfigSpec(BaseModel):
    """DNS settings for the group."""
    nameservers: List[str] = Field(..., min_length=1)
    search_domains: Set[str] = Field(default_factory=set)
    options: Set[str] = Field(default_factory=set)

    model_config = ConfigDict(extra="forbid")

    @field_validator("search_domains", "options")
    @classmethod
    def validate_entries(cls, v):
        if any(not entry for entry in v):
            raise ValueError("entries must not be empty")
        return v


class ContainerGroupSpec(BaseModel):
    """Container group specification.

    Every field other than ``tags`` forces replacement of the remote
    resource when changed.
    """
    name: str = Field(..., min_length=1)
    resource_group_name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    os_type: Literal["Linux", "Windows"]
    ip_address_type: Literal["Public", "Private"] = Field(default="Public")
    network_profile_id: Optional[str] = None
    dns_name_label: Optional[str] = None
    restart_policy: Literal["Always", "Never", "OnFailure"] = Field(default="Always")
    identity: Optional[IdentitySpec] = None
    tags: Dict[str, str] = Field(default_factory=dict)
    # TODO: make exposed_ports required once the all-container-ports default is removed
    exposed_ports: Optional[List[Port]] = None
    containers: List[ContainerSpec] = Field(..., min_length=1)
    diagnostics: Optional[DiagnosticsSpec] = None
    dns_config: Optional[DnsConfigSpec] = None
    image_registry_credentials: List[ImageRegistryCredential] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @field_validator("location")
    @classmethod
    def validate_location(cls, v):
        return normalize_location(v)

    @field_validator("os_type", mode="before")
    @classmethod
    def validate_os_type(cls, v):
        return _canonical_choice(v, ["Linux", "Windows"])

    @field_validator("ip_address_type", mode="before")
    @classmethod
    def validate_ip_address_type(cls, v):
        return _canonical_choice(v, ["Public", "Private"])

    @field_validator("restart_policy", mode="before")
    @classmethod
    def validate_restart_policy(cls, v):
        return _canonical_choice(v, ["Always", "Never", "OnFailure"])

    @field_validator("exposed_ports")
    @classmethod
    def validate_exposed_ports(cls, v):
        return _unique_ports(v)

    @model_validator(mode="after")
    def validate_network_profile(self):
        # Groups in a virtual network support neither public DNS labels nor managed identity.
        if self.network_profile_id:
            if self.dns_name_label:
                raise ValueError("network_profile_id conflicts with dns_name_label")
            if self.identity is not None:
                raise ValueError("network_profile_id conflicts with identity")
        return self


class ContainerGroupState(ContainerGroupSpec):
    """Container group as last observed remotely."""
    id: str
    ip_address: Optional[str] = None
    fqdn: Optional[str] = None


_COMPUTED_FIELDS = {"id", "ip_address", "fqdn"}
_UPDATABLE_FIELDS = {"tags"}


def fields_requiring_replacement(desired: ContainerGroupSpec, current: ContainerGroupSpec) -> List[str]:
    """Names of force-replacement fields that differ between desired and current."""
    changed = []
    for name in ContainerGroupSpec.model_fields:
        if name in _UPDATABLE_FIELDS or name in _COMPUTED_FIELDS:
            continue

        wanted = getattr(desired, name)
        actual = getattr(current, name)

        if name == "exposed_ports":
            # Unset means "whatever the containers expose"
            if not wanted:
                continue
            if set(wanted) != set(actual or []):
                changed.append(name)
            continue

        if name == "identity" and wanted is not None and actual is not None:
            if wanted.model_dump(exclude={"principal_id"}) != actual.model_dump(exclude={"principal_id"}):
                changed.append(name)
            continue

        if isinstance(wanted, BaseModel) or isinstance(actual, BaseModel):
            wanted = wanted.model_dump() if wanted is not None else None
            actual = actual.model_dump() if actual is not None else None
        elif isinstance(wanted, list):
            wanted = [w.model_dump() if isinstance(w, BaseModel) else w for w in wanted]
            actual = [a.model_dump() if isinstance(a, BaseModel) else a for a in actual]

        if wanted != actual:
            changed.append(name)

    return changed
