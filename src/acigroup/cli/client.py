"""Wiring of the Azure clients behind the CLI commands."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from azure.identity.aio import DefaultAzureCredential

from acigroup.azure import ArmClient, ContainerGroupsClient, NetworkProfilesClient
from acigroup.engine import ConfigManager, LifecycleEngine, StateStore
from acigroup.providers import ContainerGroupProvider
from acigroup.utils.logging import setup_logging


logger = logging.getLogger(__name__)


@asynccontextmanager
async def open_engine(config_dir: Path) -> AsyncIterator[LifecycleEngine]:
    """Load configuration and yield a lifecycle engine bound to Azure."""
    config_manager = ConfigManager(config_dir)
    await config_manager.load()
    config = config_manager.config

    setup_logging(config.log_level)

    credential = DefaultAzureCredential()
    arm = ArmClient(
        credential,
        endpoint=config.azure.endpoint,
        timeout=config.azure.request_timeout,
        poll_interval=config.polling.operation_interval,
    )
    try:
        provider = ContainerGroupProvider(
            ContainerGroupsClient(arm, config.azure.subscription_id, config.azure.container_instance_api_version),
            NetworkProfilesClient(arm, config.azure.subscription_id, config.azure.network_api_version),
            config.azure.subscription_id,
            timeouts=config.timeouts,
            polling=config.polling,
        )
        yield LifecycleEngine(config_manager, provider, StateStore(config_manager.state_dir))
    finally:
        await arm.close()
        await credential.close()
