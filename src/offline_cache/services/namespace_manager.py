"""Cache namespace manager.

Owns the mapping from cache role to the current-version namespace name and
is the only component allowed to create or delete namespaces.
"""

import logging

from offline_cache.config import settings
from offline_cache.entities import CacheRole
from offline_cache.protocols import CacheStorage, CacheStore

logger = logging.getLogger(__name__)


class NamespaceManager:
    """Versioned namespaces on top of a CacheStorage backend.

    Namespace names follow ``<prefix>-<role>-<version>``, for example
    ``offline-cache-static-v1.0.2``. Bumping the version makes every
    namespace of the previous version garbage, to be removed by
    ``reconcile()`` at activation.

    Example:
        ```python
        manager = NamespaceManager(MemoryCacheStorage(), version="v2")
        store = await manager.open(CacheRole.STATIC)
        deleted = await manager.reconcile()
        ```
    """

    def __init__(
        self,
        storage: CacheStorage,
        prefix: str | None = None,
        version: str | None = None,
    ) -> None:
        """Initialize the namespace manager.

        Args:
            storage: Storage backend holding the namespaces (required).
            prefix: Namespace name prefix. Defaults to settings.
            version: Version tag embedded in every name. Defaults to settings.
        """
        self._storage = storage
        self._prefix = prefix or settings.cache_prefix
        self._version = version or settings.cache_version
        self._handles: dict[str, CacheStore] = {}

    @property
    def version(self) -> str:
        return self._version

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def storage(self) -> CacheStorage:
        """Get the underlying storage (for testing)."""
        return self._storage

    def namespace_for(self, role: CacheRole) -> str:
        """Current-version namespace name for ``role``."""
        return f"{self._prefix}-{CacheRole(role).value}-{self._version}"

    async def open(self, role: CacheRole) -> CacheStore:
        """Return the store for ``role``, creating the namespace if absent.

        Idempotent: every call for the same role returns the same handle.
        """
        name = self.namespace_for(role)
        handle = self._handles.get(name)
        if handle is not None:
            return handle

        store = await self._storage.open(name)
        return self._handles.setdefault(name, store)

    async def reconcile(self, active_roles: set[CacheRole] | None = None) -> list[str]:
        """Delete every namespace that is not current for an active role.

        Must run once at activation, before any request is served. Deletion
        is best-effort: a failure for one namespace is logged and the rest
        are still processed.

        Args:
            active_roles: Roles whose current namespace survives. Defaults to all roles.

        Returns:
            Names of the namespaces that were deleted
        """
        roles = set(CacheRole) if active_roles is None else set(active_roles)
        keep = {self.namespace_for(role) for role in roles}

        deleted = []
        for name in await self._storage.names():
            if name in keep:
                continue
            logger.info("Deleting old cache: %s", name)
            try:
                await self._storage.delete(name)
            except Exception as e:
                logger.warning("Failed to delete cache %s: %s", name, e)
                continue
            self._handles.pop(name, None)
            deleted.append(name)

        return deleted

    async def clear_all(self) -> int:
        """Delete every namespace regardless of role or version.

        Returns:
            Number of namespaces deleted
        """
        count = 0
        for name in await self._storage.names():
            if await self._storage.delete(name):
                count += 1
        self._handles.clear()
        logger.info("All caches cleared (%d namespaces)", count)
        return count

    async def stats(self) -> dict:
        """Get namespace statistics.

        Returns:
            Dictionary with prefix, version and per-namespace entry counts
        """
        namespaces = {}
        for name in await self._storage.names():
            store = await self._storage.open(name)
            namespaces[name] = await store.count()

        return {
            "prefix": self._prefix,
            "version": self._version,
            "namespaces": namespaces,
            "total_entries": sum(namespaces.values()),
        }
