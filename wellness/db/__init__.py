"""Persistence gateways for progress, badges and rewards"""
from wellness.db.gateway import (
    BADGES_TABLE,
    PROGRESS_TABLE,
    REWARDS_TABLE,
    InMemoryGateway,
    PersistenceGateway,
)

__all__ = [
    "BADGES_TABLE",
    "PROGRESS_TABLE",
    "REWARDS_TABLE",
    "InMemoryGateway",
    "PersistenceGateway",
]
