"""
Infrastructure metadata module.

Contains adapters for fetching anime metadata from external sources.
"""

from anisub.infrastructure.metadata.bangumi_adapter import BangumiAdapter

__all__ = [
    'BangumiAdapter',
]
