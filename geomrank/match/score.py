"""
Scoring schemes combining the original score with geometric evidence.
"""

from enum import Enum
from typing import Callable, Dict

from ..utils.error_handler import ConfigurationParseError

Scorer = Callable[[float, bool, int, int], float]


class ScoringScheme(str, Enum):
    BINARY = "BINARY"
    MULTIPLY_NUM_MATCHES = "MULTIPLY_NUM_MATCHES"
    NUM_MATCHES = "NUM_MATCHES"
    MULTIPLY_PERCENTAGE_MATCHES = "MULTIPLY_PERCENTAGE_MATCHES"
    PERCENTAGE_MATCHES = "PERCENTAGE_MATCHES"

    @classmethod
    def from_name(cls, name: str) -> "ScoringScheme":
        """Look up a scheme by name, case-insensitively.

        Raises:
            ConfigurationParseError: If the name is not a known scheme
        """
        if isinstance(name, cls):
            return name
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ConfigurationParseError(
                f"Unknown scoring scheme: {name!r}",
                details={"scheme": name, "allowed": [s.name for s in cls]}
            ) from None

    def score(self, original_score: float, did_fit: bool, n_inliers: int, n_outliers: int) -> float:
        return _SCORERS[self](original_score, did_fit, n_inliers, n_outliers)


def _inlier_fraction(n_inliers: int, n_outliers: int) -> float:
    total = n_inliers + n_outliers
    return n_inliers / total if total > 0 else 0.0


def _binary(s: float, f: bool, i: int, o: int) -> float:
    return s if f else 0.0


def _multiply_num_matches(s: float, f: bool, i: int, o: int) -> float:
    return i * s if f else 0.0


def _num_matches(s: float, f: bool, i: int, o: int) -> float:
    return float(i) if f else 0.0


def _multiply_percentage_matches(s: float, f: bool, i: int, o: int) -> float:
    return _inlier_fraction(i, o) * s if f else 0.0


def _percentage_matches(s: float, f: bool, i: int, o: int) -> float:
    return _inlier_fraction(i, o) if f else 0.0


_SCORERS: Dict[ScoringScheme, Scorer] = {
    ScoringScheme.BINARY: _binary,
    ScoringScheme.MULTIPLY_NUM_MATCHES: _multiply_num_matches,
    ScoringScheme.NUM_MATCHES: _num_matches,
    ScoringScheme.MULTIPLY_PERCENTAGE_MATCHES: _multiply_percentage_matches,
    ScoringScheme.PERCENTAGE_MATCHES: _percentage_matches,
}


def get_scorer(scheme) -> Scorer:
    """Return the scoring function for a scheme or scheme name.

    Args:
        scheme: A ScoringScheme or its name

    Returns:
        Function of (original_score, did_fit, n_inliers, n_outliers) -> score
    """
    return _SCORERS[ScoringScheme.from_name(scheme)]
