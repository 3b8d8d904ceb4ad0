"""
Per-document posting lists built at indexing time.

A posting list lives for exactly one document: it is filled by sequential
``insert`` calls while the document's terms are extracted, read once when the
document is flushed into the index, and then thrown away.
"""

from collections import defaultdict
from typing import Any, Dict, Generic, Iterator, List, Optional, Sequence, TypeVar

import numpy as np

from ..core.types import Term
from ..utils.error_handler import MissingTermError, UnsupportedConversionError

PAYLOAD = TypeVar("PAYLOAD")


class PayloadCoordinator(Generic[PAYLOAD]):
    """Knows how to pack the payloads of one term into a fixed-size array."""

    def make_payload_array(self, payloads: Sequence[PAYLOAD]) -> Sequence[PAYLOAD]:
        return tuple(payloads)


class PositionPayloadCoordinator(PayloadCoordinator[Sequence[float]]):
    """Packs ``(x, y)`` payloads into an ``(n, 2)`` float array."""

    def make_payload_array(self, payloads: Sequence[Sequence[float]]) -> np.ndarray:
        if not payloads:
            return np.empty((0, 2), dtype=np.float64)
        return np.asarray(payloads, dtype=np.float64).reshape(len(payloads), 2)


class DocumentPostingList:
    """Term frequencies and length of a single document."""

    def __init__(self):
        self.occurrences: Dict[Term, int] = defaultdict(int)
        self.document_length = 0

    def insert(self, term: Term) -> None:
        """Record one occurrence of ``term``."""
        self.occurrences[term] += 1
        self.document_length += 1

    def get_frequency(self, term: Term) -> int:
        return self.occurrences.get(term, 0)

    @property
    def number_of_pointers(self) -> int:
        """Number of unique terms in the document."""
        return len(self.occurrences)

    def terms(self) -> Iterator[Term]:
        return iter(self.occurrences)

    def get_postings(self) -> List[List[int]]:
        """Return ``[term_ids, frequencies]`` for integer-coded terms, ordered by term."""
        term_ids = sorted(self.occurrences)
        return [list(term_ids), [self.occurrences[t] for t in term_ids]]

    def __len__(self) -> int:
        return self.document_length


class PayloadPostingList(DocumentPostingList, Generic[PAYLOAD]):
    """
    Payload postings of one document, keyed by term.

    Each ``insert`` appends its payload to the term's sequence in occurrence
    order. A ``None`` payload still counts as an occurrence but adds nothing
    to the sequence.

    There is no initial-capacity hint (an expected unique-terms-per-document
    setting): the term dict and payload lists grow in amortized O(1), so no
    such configuration key is read.
    """

    def __init__(self, coordinator: Optional[PayloadCoordinator[PAYLOAD]] = None):
        super().__init__()
        self.coordinator = coordinator or PayloadCoordinator()
        self.term_payloads: Dict[Term, List[PAYLOAD]] = {}
        # number of insert calls; equals document_length
        self.block_count = 0

    def insert(self, term: Term, payload: Optional[PAYLOAD] = None) -> None:
        super().insert(term)
        payloads = self.term_payloads.get(term)
        if payloads is None:
            payloads = self.term_payloads[term] = []
        if payload is not None:
            payloads.append(payload)
        self.block_count += 1

    def get_payloads(self, term: Term) -> Sequence[PAYLOAD]:
        """
        Get all the payloads recorded for ``term`` in this document.

        Raises:
            MissingTermError: if ``term`` was never inserted
        """
        try:
            payloads = self.term_payloads[term]
        except KeyError:
            raise MissingTermError(
                f"Term {term!r} has no postings in this document",
                details={"term": term, "unique_terms": self.number_of_pointers}
            ) from None
        return self.coordinator.make_payload_array(payloads)

    def has_term(self, term: Term) -> bool:
        return term in self.term_payloads

    def get_postings(self) -> Any:
        """Payloads are caller-defined and have no generic integer encoding."""
        raise UnsupportedConversionError(
            "Payload posting lists cannot be converted to positional postings",
            details={"coordinator": type(self.coordinator).__name__}
        )
