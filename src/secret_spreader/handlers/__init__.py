"""Reconciliation handlers for replicated secrets."""

from .garbage_collector import GarbageCollector
from .reconciler import Reconciler
from .synchronizer import SecretSynchronizer

__all__ = [
    "GarbageCollector",
    "Reconciler",
    "SecretSynchronizer",
]
