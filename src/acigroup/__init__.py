"""
acigroup - Azure Container Instances container groups as YAML documents.

Expands container group specifications into Azure Resource Manager requests,
flattens the responses back while keeping write-only secrets, and manages the
create, update, delete and import lifecycle.
"""

__version__ = "1.0.0"

# Re-export key components for easier access
from acigroup.models.config import AcigroupConfig
from acigroup.models.container_group import ContainerGroupSpec, ContainerGroupState

__all__ = [
    "AcigroupConfig",
    "ContainerGroupSpec",
    "ContainerGroupState",
]
