"""
RANSAC robust model fitting over point correspondences.

Random Sample Consensus repeatedly draws a minimal set of correspondences,
estimates a transform from it and splits every correspondence into inliers
and outliers by residual. A stopping condition decides when a split is good
enough to stop early and whether the final split counts as a fit.
"""

import math
from typing import Callable, List, Optional, Sequence

import numpy as np

from ..core.constants import INLIER_IS_BAD_PROBABILITY
from ..core.types import Correspondence
from ..utils.error_handler import DegenerateFitInput
from ..utils.log import LoggerMixin
from .models import GeometricModel

Residual = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]


def algebraic_residual(matrix: np.ndarray, src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """Squared algebraic error of each pair under a 3x3 transform.

    With ``h = M @ [x, y, 1]`` the residual of ``(x, y) -> (X, Y)`` is
    ``(h0 - X*h2)^2 + (h1 - Y*h2)^2``; no perspective division is done.
    """
    h = np.hstack([src, np.ones((len(src), 1))]) @ matrix.T
    rx = h[:, 0] - dst[:, 0] * h[:, 2]
    ry = h[:, 1] - dst[:, 1] * h[:, 2]
    return rx * rx + ry * ry


class StoppingCondition:
    """Decides when RANSAC may stop and whether its final split is a fit."""

    def init(self, num_items: int, num_items_to_estimate: int) -> None:
        pass

    def should_stop(self, num_inliers: int, num_items: int) -> bool:
        raise NotImplementedError

    def final_fit(self, num_inliers: int) -> bool:
        raise NotImplementedError


class NumberInliersStoppingCondition(StoppingCondition):
    """Stop once a fixed number of inliers is reached."""

    def __init__(self, limit: int):
        self.limit = int(limit)

    def should_stop(self, num_inliers, num_items):
        return num_inliers >= self.limit

    def final_fit(self, num_inliers):
        return num_inliers >= self.limit


class PercentageInliersStoppingCondition(StoppingCondition):
    """Stop once a fraction of the data are inliers."""

    def __init__(self, percentage: float):
        self.percentage = percentage
        self.limit = 0

    def init(self, num_items, num_items_to_estimate):
        # round half up
        self.limit = int(math.floor(self.percentage * num_items + 0.5))

    def should_stop(self, num_inliers, num_items):
        return num_inliers >= self.limit

    def final_fit(self, num_inliers):
        return num_inliers >= self.limit


class ProbabilisticMinInliersStoppingCondition(StoppingCondition):
    """
    Stop once the inlier count is unlikely to have arisen by chance.

    Beyond the minimal sample, each remaining correspondence is assumed to
    agree with a wrong model with probability ``inlier_is_bad_probability``.
    The inlier threshold is the smallest count whose binomial tail under that
    assumption is at most ``error_probability``.
    """

    def __init__(self, error_probability: float,
                 inlier_is_bad_probability: float = INLIER_IS_BAD_PROBABILITY):
        self.error_probability = error_probability
        self.inlier_is_bad_probability = inlier_is_bad_probability
        self.min_inliers = 0

    def init(self, num_items, num_items_to_estimate):
        trials = max(num_items - num_items_to_estimate, 0)
        self.min_inliers = num_items + 1
        # walk the tail down from the largest count until it exceeds the error probability
        tail = 0.0
        for extra in range(trials, -1, -1):
            tail += self._pmf(trials, extra)
            if tail > self.error_probability:
                break
            self.min_inliers = num_items_to_estimate + extra

    def _pmf(self, n: int, k: int) -> float:
        p = self.inlier_is_bad_probability
        if p <= 0.0:
            return 1.0 if k == 0 else 0.0
        if p >= 1.0:
            return 1.0 if k == n else 0.0
        log_pmf = (math.lgamma(n + 1) - math.lgamma(k + 1) - math.lgamma(n - k + 1)
                   + k * math.log(p) + (n - k) * math.log1p(-p))
        return math.exp(log_pmf)

    def should_stop(self, num_inliers, num_items):
        return num_inliers >= self.min_inliers

    def final_fit(self, num_inliers):
        return num_inliers >= self.min_inliers


class BestFitStoppingCondition(StoppingCondition):
    """Run every iteration and keep the hypothesis with the most inliers."""

    def should_stop(self, num_inliers, num_items):
        return False

    def final_fit(self, num_inliers):
        return True


def stopping_condition_for(success_threshold: float) -> StoppingCondition:
    """Select a stopping condition from a signed success threshold.

    ``> 1`` is an absolute inlier count, ``(0, 1]`` an inlier fraction,
    ``(-1, 0)`` the probabilistic condition with ``abs(value)``; anything
    else means best fit over all iterations.
    """
    if success_threshold > 1:
        return NumberInliersStoppingCondition(int(success_threshold))
    if 0 < success_threshold <= 1:
        return PercentageInliersStoppingCondition(success_threshold)
    if -1 < success_threshold < 0:
        return ProbabilisticMinInliersStoppingCondition(abs(success_threshold))
    return BestFitStoppingCondition()


class RANSAC(LoggerMixin):
    """Robust fitter for one model type; reusable across correspondence sets."""

    def __init__(
        self,
        model_factory: Callable[[], GeometricModel],
        residual: Residual,
        tolerance: float,
        max_iterations: int,
        stopping_condition: StoppingCondition,
        improve_estimate: bool = False,
        rng: Optional[np.random.Generator] = None,
    ):
        self.model_factory = model_factory
        self.residual = residual
        self.tolerance = tolerance
        self.max_iterations = max_iterations
        self.stopping_condition = stopping_condition
        self.improve_estimate = improve_estimate
        self.rng = rng if rng is not None else np.random.default_rng()
        self.model: Optional[GeometricModel] = None
        self.inliers: List[Correspondence] = []
        self.outliers: List[Correspondence] = []

    def fit(self, data: Sequence[Correspondence]) -> bool:
        """Fit the model to ``data``; afterwards ``inliers``/``outliers`` hold the split.

        Raises:
            DegenerateFitInput: If ``data`` is empty
        """
        self.model = None
        self.inliers, self.outliers = [], []
        if not data:
            raise DegenerateFitInput("Cannot fit a model to an empty correspondence set")

        data = list(data)
        n = len(data)
        src = np.array([c.query_point for c in data], dtype=np.float64).reshape(n, 2)
        dst = np.array([c.document_point for c in data], dtype=np.float64).reshape(n, 2)

        sample_size = self.model_factory().num_items_to_estimate
        if n < sample_size:
            self.outliers = data
            return False

        self.stopping_condition.init(n, sample_size)

        best_model, best_mask, best_error = None, None, math.inf
        for _ in range(self.max_iterations):
            sample = self.rng.choice(n, size=sample_size, replace=False)
            model = self.model_factory()
            if not model.estimate(src[sample], dst[sample]):
                continue

            residuals = self.residual(model.matrix, src, dst)
            mask = residuals < self.tolerance
            num_inliers = int(mask.sum())

            if self.stopping_condition.should_stop(num_inliers, n):
                if self.improve_estimate:
                    model, mask = self._refit(model, mask, src, dst)
                self._set_split(data, model, mask)
                return True

            error = float(residuals[mask].sum())
            if best_mask is None or num_inliers > int(best_mask.sum()) or (
                num_inliers == int(best_mask.sum()) and error < best_error
            ):
                best_model, best_mask, best_error = model, mask, error

        if best_model is None:
            self.outliers = data
            self.logger.debug("No model could be estimated", num_items=n,
                              iterations=self.max_iterations)
            return False

        self._set_split(data, best_model, best_mask)
        return self.stopping_condition.final_fit(len(self.inliers))

    def _refit(self, model, mask, src, dst):
        refined = self.model_factory()
        if int(mask.sum()) < refined.num_items_to_estimate or not refined.estimate(src[mask], dst[mask]):
            return model, mask
        refined_mask = self.residual(refined.matrix, src, dst) < self.tolerance
        if refined_mask.sum() < mask.sum():
            return model, mask
        return refined, refined_mask

    def _set_split(self, data, model, mask):
        self.model = model
        self.inliers = [c for c, keep in zip(data, mask) if keep]
        self.outliers = [c for c, keep in zip(data, mask) if not keep]

    @property
    def num_inliers(self) -> int:
        return len(self.inliers)

    @property
    def num_outliers(self) -> int:
        return len(self.outliers)
