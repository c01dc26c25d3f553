"""Service layer for business logic.

This layer contains the cache engine: classification, strategies,
namespace management, offline detection and the lifecycle that ties
them together. Services depend on protocols (interfaces), not concrete
implementations, making them testable and flexible.

Architecture:
    Handler -> LifecycleService -> StrategyExecutor -> Repository
    (HTTP)  -> (Orchestration)  -> (Strategies)     -> (Storage / Network)

Usage:
    ```python
    from offline_cache.services import LifecycleService

    # Using factory method (recommended)
    service = LifecycleService.create(storage=storage, fetcher=fetcher)

    # Or manual creation
    service = LifecycleService(namespaces=..., fetcher=..., executor=...)
    ```
"""

from .background import BackgroundTasks
from .classifier import (
    ClassificationRule,
    ClassifierConfig,
    RequestClassifier,
    classify,
    is_eligible,
)
from .lifecycle import SYNC_TAG, LifecycleService
from .namespace_manager import NamespaceManager
from .offline_detector import FetchReachabilityProbe, OfflineDetector
from .strategy_executor import OFFLINE_PAGE_HTML, ROUTES, StrategyExecutor, StrategyRoute

__all__ = [
    "BackgroundTasks",
    "ClassificationRule",
    "ClassifierConfig",
    "FetchReachabilityProbe",
    "LifecycleService",
    "NamespaceManager",
    "OFFLINE_PAGE_HTML",
    "OfflineDetector",
    "ROUTES",
    "RequestClassifier",
    "StrategyExecutor",
    "StrategyRoute",
    "SYNC_TAG",
    "classify",
    "is_eligible",
]
