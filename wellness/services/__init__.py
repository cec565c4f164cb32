"""
Service Layer Package

Business logic between the UI/API layer and the persistence gateways.

- ProgressEngine: XP, levels, streaks, badges and the reward ledger
- ServiceContainer: gateway wiring and per-identity engine construction
"""

from wellness.services.progress_engine import ProgressEngine
from wellness.services.container import ServiceContainer, create_gateway, get_container, init_container

__all__ = [
    "ProgressEngine",
    "ServiceContainer",
    "create_gateway",
    "get_container",
    "init_container",
]
