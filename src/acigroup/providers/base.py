"""Base provider interface."""

from abc import ABC, abstractmethod
from typing import Optional
from pydantic import BaseModel


class BaseProvider(ABC):
    """Base provider interface that all providers must implement."""

    @abstractmethod
    async def create(self, spec: BaseModel, is_new: bool = True) -> BaseModel:
        """Create the resource and return its state."""
        pass

    @abstractmethod
    async def read(self, resource_id: str, prior: Optional[BaseModel] = None) -> Optional[BaseModel]:
        """Read the resource; None when it no longer exists."""
        pass

    @abstractmethod
    async def update(self, resource_id: str, spec: BaseModel, prior: Optional[BaseModel] = None) -> BaseModel:
        """Apply in-place changes and return the new state."""
        pass

    @abstractmethod
    async def delete(self, resource_id: str) -> None:
        """Delete the resource; absent resources are not an error."""
        pass

    @abstractmethod
    async def validate_spec(self, spec: BaseModel) -> bool:
        """Validate the resource specification."""
        pass
