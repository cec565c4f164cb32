"""
Service Container - Dependency Injection Container

Holds the process-wide persistence gateway and builds a ProgressEngine for
each identity. There is no global engine: every UI session or API request
gets its own instance wired to the shared gateway.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from wellness import config
from wellness.db.gateway import InMemoryGateway, PersistenceGateway
from wellness.exceptions import ConfigurationError
from wellness.identity import IdentityProvider
from wellness.services.progress_engine import ProgressEngine

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Simple dependency injection container for services.

    The gateway is injected; engines are created per identity.
    """

    gateway: PersistenceGateway
    backend: str = "memory"

    _started: bool = field(default=False, init=False, repr=False)

    def progress_engine(self, identity: IdentityProvider) -> ProgressEngine:
        """Build a ProgressEngine acting for ``identity``"""
        return ProgressEngine(self.gateway, identity)

    async def startup(self) -> None:
        if self._started:
            return
        db = getattr(self.gateway, "db", None)
        if db is not None:
            from wellness.db.postgres_gateway import init_schema

            await db.init_pool()
            await init_schema(db)
        self._started = True
        logger.info(f"Service container started ({self.backend} storage)")

    async def shutdown(self) -> None:
        await self.gateway.close()
        self._started = False
        logger.info("Service container stopped")


def create_gateway(backend: Optional[str] = None) -> PersistenceGateway:
    """
    Build the gateway for a storage backend

    Args:
        backend: 'memory', 'postgres' or 'rest' (defaults to STORAGE_BACKEND)
    """
    backend = (backend or config.STORAGE_BACKEND).lower()

    if backend == "memory":
        logger.warning("Using in-memory storage - progress is NOT persisted across restarts")
        return InMemoryGateway()

    if backend == "postgres":
        from wellness.db.connection import Database
        from wellness.db.postgres_gateway import PostgresGateway

        return PostgresGateway(Database(config.DATABASE_URL))

    if backend == "rest":
        from wellness.db.rest_gateway import RestGateway

        return RestGateway(config.SUPABASE_URL, config.SUPABASE_KEY)

    raise ConfigurationError(f"Unknown storage backend '{backend}'", config_key="STORAGE_BACKEND")


# Global container instance (initialized by the API server)
_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """
    Get the global service container.

    Raises:
        RuntimeError: If container not initialized
    """
    if _container is None:
        raise RuntimeError("Service container not initialized. Call init_container() first.")
    return _container


def init_container(gateway: Optional[PersistenceGateway] = None, backend: Optional[str] = None) -> ServiceContainer:
    """Initialize the global service container"""
    global _container
    backend = (backend or config.STORAGE_BACKEND).lower()
    _container = ServiceContainer(gateway=gateway or create_gateway(backend), backend=backend)
    logger.info("Service container initialized")
    return _container


def reset_container() -> None:
    """Drop the global container (tests)"""
    global _container
    _container = None
