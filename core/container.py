"""
Dependency Injection container for centralized dependency management.

Owns one instance of each data-layer service for the lifetime of the
application. Nothing is a module-level singleton, so tests can build as many
independent containers as they need.
"""
from __future__ import annotations

import logging
from typing import Optional

import httpx

from app.config import Settings, settings as default_settings
from core.middleware import MetricsCollector
from database.json_repository import LocalRepository, LocalStore
from integrations.api_client import ApiClient
from integrations.remote_repository import RemoteRepository
from integrations.session import SessionState
from services.auth_service import AuthService
from services.community_cache import CommunityCache
from services.data_service import DataService


logger = logging.getLogger(__name__)


class Container:
    """
    Dependency injection container.

    Provides access to application dependencies with lazy initialization.

    Example Usage:
        async with Container() as container:
            result = await container.get_data_service().get_communities()
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize container.

        Args:
            settings: Application settings (defaults to the global settings)
            transport: Optional HTTP transport override for the API client
        """
        self.settings = settings or default_settings
        self._transport = transport

        self._store: Optional[LocalStore] = None
        self._session: Optional[SessionState] = None
        self._api_client: Optional[ApiClient] = None
        self._remote_repository: Optional[RemoteRepository] = None
        self._local_repository: Optional[LocalRepository] = None
        self._cache: Optional[CommunityCache] = None
        self._metrics: Optional[MetricsCollector] = None
        self._auth_service: Optional[AuthService] = None
        self._data_service: Optional[DataService] = None

    async def __aenter__(self) -> Container:
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def get_store(self) -> LocalStore:
        if self._store is None:
            self._store = LocalStore(self.settings.local_store_path)
        return self._store

    def get_session(self) -> SessionState:
        """Session shared by the API client and the auth service."""
        if self._session is None:
            self._session = SessionState(self.get_store())
        return self._session

    def get_api_client(self) -> ApiClient:
        if self._api_client is None:
            self._api_client = ApiClient(
                self.settings.api_root,
                self.get_session(),
                timeout=self.settings.request_timeout,
                transport=self._transport,
            )
        return self._api_client

    def get_remote_repository(self) -> RemoteRepository:
        if self._remote_repository is None:
            self._remote_repository = RemoteRepository(self.get_api_client())
        return self._remote_repository

    def get_local_repository(self) -> LocalRepository:
        if self._local_repository is None:
            self._local_repository = LocalRepository(self.get_store())
        return self._local_repository

    def get_cache(self) -> CommunityCache:
        if self._cache is None:
            self._cache = CommunityCache(maxsize=self.settings.community_cache_size)
        return self._cache

    def get_metrics(self) -> MetricsCollector:
        if self._metrics is None:
            self._metrics = MetricsCollector()
        return self._metrics

    def get_auth_service(self) -> AuthService:
        if self._auth_service is None:
            self._auth_service = AuthService(self.get_api_client(), self.get_session())
        return self._auth_service

    def get_data_service(self) -> DataService:
        """
        Get the data facade.

        Returns:
            DataService wired to this container's repositories and cache
        """
        if self._data_service is None:
            self._data_service = DataService(
                remote=self.get_remote_repository(),
                local=self.get_local_repository(),
                cache=self.get_cache(),
                auth=self.get_auth_service(),
                metrics=self.get_metrics(),
            )
        return self._data_service

    async def start(self) -> None:
        """Restore the persisted admin session and seed example data if enabled."""
        await self.get_session().load()

        if self.settings.seed_example_data:
            seeded = await self.get_data_service().initialize_example_data()
            if seeded:
                logger.info("Example data written to local storage")

    async def aclose(self) -> None:
        """Close the HTTP client if one was created."""
        if self._api_client is not None:
            await self._api_client.aclose()
            self._api_client = None
            self._remote_repository = None
            self._auth_service = None
            self._data_service = None


__all__ = ["Container"]
