"""
Correspondence collection and ambiguity filtering.
"""

from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..core.types import Correspondence, Point2d, ResultSet
from ..index.position_index import IndexQueryService, PositionSpec, QueryDocument
from ..utils.log import LoggerMixin


def rerank_window(n_rerank: int, result_size: int) -> int:
    """Number of leading results to re-rank; non-positive or oversized requests mean all."""
    if n_rerank <= 0 or n_rerank > result_size:
        return result_size
    return n_rerank


class CorrespondenceCollector(LoggerMixin):
    """Pairs query term positions with document term positions for top-ranked documents."""

    def __init__(self, position_spec: Optional[PositionSpec] = None):
        self.position_spec = position_spec or PositionSpec()

    def collect(
        self,
        index: IndexQueryService,
        query: QueryDocument,
        result_set: ResultSet,
        n_rerank: int = 0,
    ) -> Dict[int, List[Correspondence]]:
        """Build the correspondence list of every document in the re-ranking window.

        Args:
            index: Index answering lexicon and position lookups
            query: Query document; it is rescanned from its first term
            result_set: Ranked results
            n_rerank: Requested window size (clamped to the result size)

        Returns:
            Mapping of document id to its correspondences. Documents with no
            shared term are absent.
        """
        window = rerank_window(n_rerank, result_set.size)
        window_docs = set(int(d) for d in result_set.doc_ids[:window])
        matches: Dict[int, List[Correspondence]] = {}

        skipped_terms = 0
        for term in query:
            if index.get_lexicon_entry(term) is None:
                skipped_terms += 1
                continue
            query_point = Point2d(*self.position_spec.extract_position(query))
            doc_positions = index.lookup_positions(term)

            # iterate the smaller side
            if len(doc_positions) < len(window_docs):
                hits = ((d, pos) for d, pos in doc_positions.items() if d in window_docs)
            else:
                hits = ((d, doc_positions[d]) for d in window_docs if d in doc_positions)

            for doc_id, positions in hits:
                pairs = matches.get(doc_id)
                if pairs is None:
                    pairs = matches[doc_id] = []
                pairs.extend(
                    Correspondence(query_point, Point2d(float(x), float(y)))
                    for x, y in positions
                )

        self.logger.debug(
            "Correspondences collected",
            window=window,
            matched_documents=len(matches),
            skipped_terms=skipped_terms,
        )
        return matches


def filter_correspondences(
    correspondences: Sequence[Correspondence], threshold: float
) -> Sequence[Correspondence]:
    """Drop correspondences whose endpoints take part in very unequal numbers of matches.

    For each pair the imbalance is ``min(fwd, rev) / max(fwd, rev)``, where
    ``fwd`` counts the pairs sharing its query point and ``rev`` those sharing
    its document point. Pairs with imbalance below ``threshold`` are removed;
    ``threshold <= 0`` returns the input unchanged.
    """
    if threshold <= 0:
        return correspondences

    forward = Counter(c.query_point for c in correspondences)
    reverse = Counter(c.document_point for c in correspondences)

    kept = []
    for c in correspondences:
        f, r = forward[c.query_point], reverse[c.document_point]
        if min(f, r) / max(f, r) >= threshold:
            kept.append(c)
    return kept
