"""
Index package: per-document payload postings and the positional index.
"""

from .position_index import IndexQueryService, PositionIndex, PositionSpec, QueryDocument
from .posting import (
    DocumentPostingList,
    PayloadCoordinator,
    PayloadPostingList,
    PositionPayloadCoordinator,
)

__all__ = [
    "DocumentPostingList",
    "PayloadPostingList",
    "PayloadCoordinator",
    "PositionPayloadCoordinator",
    "IndexQueryService",
    "PositionIndex",
    "PositionSpec",
    "QueryDocument",
]
