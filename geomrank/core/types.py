from dataclasses import dataclass, field
from typing import Hashable, List, NamedTuple, Optional, Tuple

import numpy as np

Term = Hashable


class Point2d(NamedTuple):
    x: float
    y: float


class Correspondence(NamedTuple):
    """A query point paired with a document point through a shared term."""
    query_point: Point2d
    document_point: Point2d


@dataclass(frozen=True)
class VerificationResult:
    did_fit: bool
    n_inliers: int
    n_outliers: int

    @classmethod
    def no_match(cls) -> "VerificationResult":
        return cls(did_fit=False, n_inliers=0, n_outliers=0)


@dataclass
class Candidate:
    rank: int
    doc_id: int
    original_score: float
    correspondences: List[Correspondence] = field(default_factory=list)
    result: Optional[VerificationResult] = None


@dataclass(frozen=True)
class LexiconEntry:
    term: Term
    document_frequency: int
    frequency: int


@dataclass(frozen=True)
class QueryTerm:
    """One term occurrence of a query image with its encoded position."""
    term: Term
    position: Tuple[float, ...]


@dataclass
class ResultSet:
    """Ranked documents as parallel id/score arrays; scores are updated in place."""
    doc_ids: np.ndarray
    scores: np.ndarray

    def __post_init__(self):
        self.doc_ids = np.asarray(self.doc_ids, dtype=np.int64)
        self.scores = np.asarray(self.scores, dtype=np.float64)
        if self.doc_ids.shape != self.scores.shape:
            raise ValueError(
                f"doc_ids and scores differ in shape: {self.doc_ids.shape} != {self.scores.shape}"
            )

    @property
    def size(self) -> int:
        return int(self.doc_ids.shape[0])
