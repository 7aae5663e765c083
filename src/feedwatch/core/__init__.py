"""Core configuration and orchestration."""

from feedwatch.core.feedwatch import FeedWatch, summary_message
from feedwatch.core.reconciler import Reconciler, normalize_urls

__all__ = [
    # Orchestrator
    "FeedWatch",
    "summary_message",
    # Reconciliation
    "Reconciler",
    "normalize_urls",
]
