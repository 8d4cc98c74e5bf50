"""Resource providers for acigroup."""

from acigroup.providers.base import BaseProvider
from acigroup.providers.container_group import ContainerGroupProvider

__all__ = [
    "BaseProvider",
    "ContainerGroupProvider",
]
