"""geomrank - Geometric-consistency re-ranking for visual-term image search."""

__version__ = "1.0.0"
__author__ = "geomrank Team"
__description__ = "Re-rank image search results by RANSAC fitting of matched visual term positions"

from .core.types import Correspondence, Point2d, ResultSet, VerificationResult
from .index import PayloadPostingList, PositionIndex, PositionSpec, QueryDocument
from .match import (
    GeometricVerifier,
    ModelSpec,
    RerankConfig,
    ScoringScheme,
    affine_verifier,
    homography_verifier,
)
from .utils.config import settings

# Core functionality imports
from .utils.log import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__description__",
    # Core components
    "configure_logging",
    "get_logger",
    "settings",
    "PayloadPostingList",
    "PositionIndex",
    "PositionSpec",
    "QueryDocument",
    "Point2d",
    "Correspondence",
    "ResultSet",
    "VerificationResult",
    "GeometricVerifier",
    "ModelSpec",
    "RerankConfig",
    "ScoringScheme",
    "affine_verifier",
    "homography_verifier",
]
