"""
Match module: correspondence collection, RANSAC fitting and geometric re-ranking.
"""

from .correspondences import CorrespondenceCollector, filter_correspondences, rerank_window
from .models import AffineModel, GeometricModel, HomographyModel
from .ransac import (
    RANSAC,
    BestFitStoppingCondition,
    NumberInliersStoppingCondition,
    PercentageInliersStoppingCondition,
    ProbabilisticMinInliersStoppingCondition,
    algebraic_residual,
    stopping_condition_for,
)
from .rerank import (
    GeometricVerifier,
    ModelSpec,
    RerankConfig,
    affine_verifier,
    homography_verifier,
    verifier_from_settings,
)
from .score import ScoringScheme, get_scorer

__all__ = [
    "CorrespondenceCollector",
    "filter_correspondences",
    "rerank_window",
    "GeometricModel",
    "AffineModel",
    "HomographyModel",
    "RANSAC",
    "algebraic_residual",
    "stopping_condition_for",
    "NumberInliersStoppingCondition",
    "PercentageInliersStoppingCondition",
    "ProbabilisticMinInliersStoppingCondition",
    "BestFitStoppingCondition",
    "GeometricVerifier",
    "ModelSpec",
    "RerankConfig",
    "affine_verifier",
    "homography_verifier",
    "verifier_from_settings",
    "ScoringScheme",
    "get_scorer",
]
