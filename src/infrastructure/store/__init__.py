"""In-memory backend store."""

from src.infrastructure.store.helpers import audit_log
from src.infrastructure.store.memory_store import InsightsStore

__all__ = ["InsightsStore", "audit_log"]
