"""Dependency injection container for the flashcard generator.

Replaces a module-level client singleton: the container owns one client
per container instance, built lazily from settings on first use.
"""

from __future__ import annotations

from dependency_injector import containers, providers

from ..infrastructure.llm.factory import create_flashcard_client
from .config import Settings, get_settings


class Container(containers.DeclarativeContainer):
    """Main DI container for the application."""

    # Configuration
    settings = providers.Singleton(get_settings)

    # Infrastructure services
    flashcard_client = providers.Singleton(
        create_flashcard_client,
        settings=settings,
        allow_mock=settings.provided.ALLOW_MOCK_CLIENT,
    )


def create_container(settings: Settings | None = None) -> Container:
    """Create a container, optionally bound to explicit settings."""
    container = Container()
    if settings is not None:
        container.settings.override(providers.Object(settings))
    return container
