"""
In-memory positional index and the query-side position helpers.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple

import numpy as np

from ..core.constants import POSITION_X_INDEX, POSITION_Y_INDEX
from ..core.types import LexiconEntry, QueryTerm, Term
from ..utils.error_handler import ConfigurationError
from ..utils.log import LoggerMixin
from .posting import PayloadPostingList


class IndexQueryService(Protocol):
    """What the re-ranker needs from an index."""

    def get_lexicon_entry(self, term: Term) -> Optional[LexiconEntry]:
        ...

    def lookup_positions(self, term: Term) -> Dict[int, np.ndarray]:
        ...


class PositionIndex(LoggerMixin):
    """
    Inverted index of term positions, held in memory.

    Documents are added by flushing their ``PayloadPostingList``; each
    payload must be an ``(x, y)`` position.
    """

    def __init__(self):
        self._postings: Dict[Term, Dict[int, np.ndarray]] = {}
        self._frequencies: Dict[Term, int] = {}
        self.num_documents = 0

    def add_document(self, doc_id: int, posting_list: PayloadPostingList) -> None:
        """Flush one document's posting list into the index."""
        for term in posting_list.terms():
            positions = np.asarray(posting_list.get_payloads(term), dtype=np.float64)
            if positions.size == 0:
                # positionless occurrences still count towards frequency
                positions = np.empty((0, 2), dtype=np.float64)
            self._postings.setdefault(term, {})[doc_id] = positions.reshape(-1, 2)
            self._frequencies[term] = self._frequencies.get(term, 0) + posting_list.get_frequency(term)
        self.num_documents += 1
        self.logger.debug(
            "Document indexed",
            doc_id=doc_id,
            unique_terms=posting_list.number_of_pointers,
            length=posting_list.document_length,
        )

    def get_lexicon_entry(self, term: Term) -> Optional[LexiconEntry]:
        docs = self._postings.get(term)
        if docs is None:
            return None
        return LexiconEntry(
            term=term,
            document_frequency=len(docs),
            frequency=self._frequencies[term],
        )

    def lookup_positions(self, term: Term) -> Dict[int, np.ndarray]:
        """Map of document id to the ``(k, 2)`` positions of ``term`` in that document."""
        return self._postings.get(term, {})

    def __contains__(self, term: Term) -> bool:
        return term in self._postings

    def __len__(self) -> int:
        return len(self._postings)


class QueryDocument:
    """
    The terms of a query image with their encoded positions.

    Iteration always starts from the first term, so the same query can be
    scanned any number of times. ``reset``/``next_term`` give the cursor
    view used by ``PositionSpec``.
    """

    def __init__(self, terms: Iterable[QueryTerm]):
        self._terms: List[QueryTerm] = list(terms)
        self._cursor = -1

    @classmethod
    def from_positions(cls, pairs: Iterable[Tuple[Term, Sequence[float]]]) -> "QueryDocument":
        return cls(QueryTerm(term, tuple(pos)) for term, pos in pairs)

    def reset(self) -> None:
        self._cursor = -1

    def end_of_document(self) -> bool:
        return self._cursor + 1 >= len(self._terms)

    def next_term(self) -> Term:
        if self.end_of_document():
            raise IndexError("End of query document")
        self._cursor += 1
        return self._terms[self._cursor].term

    @property
    def current(self) -> QueryTerm:
        if self._cursor < 0:
            raise IndexError("Cursor has not been advanced")
        return self._terms[self._cursor]

    def __iter__(self) -> Iterator[Term]:
        self.reset()
        while not self.end_of_document():
            yield self.next_term()

    def __len__(self) -> int:
        return len(self._terms)


class PositionSpec:
    """Locates x and y inside an encoded query position."""

    def __init__(self, x_index: int = POSITION_X_INDEX, y_index: int = POSITION_Y_INDEX):
        if x_index < 0 or y_index < 0 or x_index == y_index:
            raise ConfigurationError(
                "Position indices must be distinct and non-negative",
                details={"x_index": x_index, "y_index": y_index}
            )
        self.x_index = x_index
        self.y_index = y_index

    def extract_position(self, query: QueryDocument) -> Tuple[float, float]:
        position = query.current.position
        return float(position[self.x_index]), float(position[self.y_index])
