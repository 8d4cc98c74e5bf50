"""Configuration, state and lifecycle management."""

from acigroup.engine.config import ConfigManager
from acigroup.engine.engine import LifecycleEngine
from acigroup.engine.state import StateStore

__all__ = ["ConfigManager", "LifecycleEngine", "StateStore"]
