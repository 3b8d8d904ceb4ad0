"""
Geometric verification and RANSAC re-ranking of image search results.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import numpy as np

from ..core.constants import (
    DEFAULT_FILTER_THRESHOLD,
    DEFAULT_NUM_DOCS_RERANK,
    DEFAULT_RANSAC_MAX_ITER,
    DEFAULT_RANSAC_SUCCESS_THRESHOLD,
)
from ..core.types import Candidate, Correspondence, ResultSet, VerificationResult
from ..index.position_index import IndexQueryService, PositionSpec, QueryDocument
from ..utils.config import Settings
from ..utils.error_handler import (
    ErrorContext,
    ModelEstimationError,
    handle_error,
)
from ..utils.log import LoggerMixin
from ..utils.validation import validate_enum_value, validate_numeric_range
from .correspondences import CorrespondenceCollector, filter_correspondences, rerank_window
from .models import AffineModel, GeometricModel, HomographyModel
from .ransac import RANSAC, algebraic_residual, stopping_condition_for
from .score import ScoringScheme, get_scorer


MODEL_NAMES = ("affine", "homography")


@dataclass(frozen=True)
class RerankConfig:
    """Tuning of one re-ranking pass."""
    n_rerank: int = DEFAULT_NUM_DOCS_RERANK
    filter_threshold: float = DEFAULT_FILTER_THRESHOLD
    ransac_success_threshold: float = DEFAULT_RANSAC_SUCCESS_THRESHOLD
    ransac_max_iter: int = DEFAULT_RANSAC_MAX_ITER
    scoring_scheme: ScoringScheme = ScoringScheme.NUM_MATCHES

    def __post_init__(self):
        validate_numeric_range(self.n_rerank, field_name="n_rerank")
        validate_numeric_range(self.filter_threshold, field_name="filter_threshold")
        validate_numeric_range(self.ransac_success_threshold, field_name="ransac_success_threshold")
        validate_numeric_range(self.ransac_max_iter, min_value=1, field_name="ransac_max_iter")
        object.__setattr__(self, "scoring_scheme", ScoringScheme.from_name(self.scoring_scheme))

    @classmethod
    def from_settings(cls, settings: Settings) -> "RerankConfig":
        return cls(
            n_rerank=settings.GEOM_NUM_DOCS_RERANK,
            filter_threshold=settings.GEOM_FILTER_THRESHOLD,
            ransac_success_threshold=settings.GEOM_RANSAC_SUCCESS_THRESHOLD,
            ransac_max_iter=settings.GEOM_RANSAC_MAX_ITER,
            scoring_scheme=settings.GEOM_SCORING_SCHEME,
        )


@dataclass(frozen=True)
class ModelSpec:
    """Which transform to fit and how far a pair may stray from it."""
    model_factory: Callable[[], GeometricModel]
    tolerance: float

    def __post_init__(self):
        validate_numeric_range(self.tolerance, min_value=0.0, field_name="tolerance")


class GeometricVerifier(LoggerMixin):
    """
    Re-scores top-ranked documents by how well their matched term positions
    agree with a single geometric transform of the query.

    Apart from its random generator the verifier holds configuration only;
    every call builds its own fitter and stopping condition.
    """

    def __init__(
        self,
        model_spec: ModelSpec,
        config: Optional[RerankConfig] = None,
        position_spec: Optional[PositionSpec] = None,
        rng: Optional[np.random.Generator] = None,
    ):
        self.model_spec = model_spec
        self.config = config or RerankConfig()
        self.collector = CorrespondenceCollector(position_spec)
        self.rng = rng if rng is not None else np.random.default_rng()

    def _make_fitter(self) -> RANSAC:
        return RANSAC(
            self.model_spec.model_factory,
            algebraic_residual,
            self.model_spec.tolerance,
            self.config.ransac_max_iter,
            stopping_condition_for(self.config.ransac_success_threshold),
            improve_estimate=False,
            rng=self.rng,
        )

    def verify(self, correspondences: Optional[Sequence[Correspondence]]) -> VerificationResult:
        """Filter one candidate's correspondences and fit the model to them.

        Never raises for degenerate input; an empty or unfittable set is
        reported as no match.
        """
        if not correspondences:
            return VerificationResult.no_match()

        data = filter_correspondences(correspondences, self.config.filter_threshold)
        if not data:
            self.logger.debug(
                "All correspondences filtered as ambiguous",
                num_correspondences=len(correspondences),
                filter_threshold=self.config.filter_threshold,
            )
            return VerificationResult.no_match()

        fitter = self._make_fitter()
        try:
            did_fit = fitter.fit(data)
        except (ModelEstimationError, np.linalg.LinAlgError) as e:
            return handle_error(
                e,
                ErrorContext(
                    operation="model fit",
                    module=__name__,
                    function="verify",
                    input_data={"num_correspondences": len(data)},
                ),
                self.logger,
                reraise=False,
                default_return=VerificationResult.no_match(),
            )
        return VerificationResult(did_fit, fitter.num_inliers, fitter.num_outliers)

    def modify_scores(
        self,
        index: IndexQueryService,
        query: QueryDocument,
        result_set: ResultSet,
    ) -> bool:
        """Re-score the re-ranking window of ``result_set`` in place.

        Documents outside the window, and documents in it sharing no term
        with the query, keep their score.

        Returns:
            True if the window was non-empty
        """
        window = rerank_window(self.config.n_rerank, result_set.size)
        ctx = self.log_start(
            "Geometric re-ranking",
            window=window,
            result_size=result_set.size,
            scheme=self.config.scoring_scheme.value,
        )

        try:
            matches = self.collector.collect(index, query, result_set, window)
            scorer = get_scorer(self.config.scoring_scheme)
            scores = result_set.scores

            fitted = 0
            for rank in range(window):
                doc_id = int(result_set.doc_ids[rank])
                correspondences = matches.get(doc_id)
                if correspondences is None:
                    continue
                candidate = Candidate(rank, doc_id, float(scores[rank]), correspondences)
                candidate.result = self.verify(candidate.correspondences)
                scores[rank] = scorer(
                    candidate.original_score,
                    candidate.result.did_fit,
                    candidate.result.n_inliers,
                    candidate.result.n_outliers,
                )
                fitted += candidate.result.did_fit
        except Exception as e:
            # data-shape failures abort the pass
            self.log_error(ctx, e)
            raise

        self.log_success(ctx, matched_documents=len(matches), fitted_documents=fitted)
        return window > 0


def affine_verifier(tolerance: float, config: Optional[RerankConfig] = None, **kwargs) -> GeometricVerifier:
    """Verifier fitting an affine transform."""
    return GeometricVerifier(ModelSpec(AffineModel, tolerance), config, **kwargs)


def homography_verifier(tolerance: float, config: Optional[RerankConfig] = None, **kwargs) -> GeometricVerifier:
    """Verifier fitting a planar homography."""
    return GeometricVerifier(ModelSpec(HomographyModel, tolerance), config, **kwargs)


def verifier_from_settings(model: str, settings: Settings, **kwargs) -> GeometricVerifier:
    """Build an ``affine`` or ``homography`` verifier from application settings."""
    validate_enum_value(model, list(MODEL_NAMES), field_name="model")
    config = RerankConfig.from_settings(settings)
    if settings.RANSAC_SEED is not None and "rng" not in kwargs:
        kwargs["rng"] = np.random.default_rng(settings.RANSAC_SEED)
    if model == "homography":
        return homography_verifier(settings.HOMOGRAPHY_TOLERANCE, config, **kwargs)
    return affine_verifier(settings.AFFINE_TOLERANCE, config, **kwargs)
