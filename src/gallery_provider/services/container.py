"""
Services container for the gallery provider.

Builds the provider and its notification transport from configuration so
the CLI and tests share one construction path.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gallery_provider.core.config import GalleryConfig, load_config
from gallery_provider.infrastructure.notifications import (
    InMemoryNotificationTransport,
    NotificationTransport,
)
from gallery_provider.services.provider import GalleryProvider, ProviderContext


@dataclass
class ServicesContainer:
    """
    Container holding the shared service instances.

    Attributes:
        config: Application configuration
        transport: Notification transport the provider publishes on
        provider: The gallery provider
    """

    config: GalleryConfig
    transport: NotificationTransport
    provider: GalleryProvider

    def close(self) -> None:
        self.provider.close()


def create_services(
    config_path: Optional[Path] = None,
    db_path: Optional[Path] = None,
    transport: Optional[NotificationTransport] = None,
) -> ServicesContainer:
    """
    Create the provider from configuration.

    Args:
        config_path: Optional path to configuration file. If None, uses
                    environment variables and defaults.
        db_path: Optional database path overriding the configured one.
        transport: Optional notification transport. Defaults to an
                   in-memory transport.

    Returns:
        ServicesContainer with the initialized provider.
    """
    config = load_config(config_path)
    transport = transport or InMemoryNotificationTransport()
    provider = GalleryProvider(
        db_path or config.database.db_path,
        context=ProviderContext(transport=transport),
        authority=config.provider.authority,
    )
    return ServicesContainer(config=config, transport=transport, provider=provider)
