"""
Estimatable 2D point-to-point transforms.

Each model is estimated once from point pairs and then only read. Minimal
samples go through OpenCV's closed-form solvers; larger sets (a refit on
all inliers) are solved by least squares.
"""

from itertools import combinations
from typing import Optional

import cv2
import numpy as np

from ..core.constants import AFFINE_SAMPLE_SIZE, COLLINEARITY_EPS, HOMOGRAPHY_SAMPLE_SIZE
from ..utils.error_handler import ModelEstimationError


def _collinear(a: np.ndarray, b: np.ndarray, c: np.ndarray) -> bool:
    area2 = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
    return abs(area2) < COLLINEARITY_EPS


def _has_collinear_triple(pts: np.ndarray) -> bool:
    return any(_collinear(pts[i], pts[j], pts[k]) for i, j, k in combinations(range(len(pts)), 3))


class GeometricModel:
    """A 3x3 transform taking query points onto document points."""

    num_items_to_estimate = 0

    def __init__(self):
        self._matrix: Optional[np.ndarray] = None

    @property
    def matrix(self) -> np.ndarray:
        if self._matrix is None:
            raise ModelEstimationError(f"{type(self).__name__} has not been estimated")
        return self._matrix

    @property
    def is_estimated(self) -> bool:
        return self._matrix is not None

    def estimate(self, src: np.ndarray, dst: np.ndarray) -> bool:
        """Estimate the transform from ``(n, 2)`` source/destination points.

        Returns False for degenerate input; a model can only be estimated once.
        """
        if self._matrix is not None:
            raise ModelEstimationError(f"{type(self).__name__} is already estimated")
        src = np.asarray(src, dtype=np.float64).reshape(-1, 2)
        dst = np.asarray(dst, dtype=np.float64).reshape(-1, 2)
        if len(src) < self.num_items_to_estimate or len(src) != len(dst):
            return False
        try:
            matrix = self._solve(src, dst)
        except (cv2.error, np.linalg.LinAlgError):
            return False
        if matrix is None or not np.all(np.isfinite(matrix)):
            return False
        self._matrix = matrix
        return True

    def transform(self, pts: np.ndarray) -> np.ndarray:
        pts = np.asarray(pts, dtype=np.float64).reshape(-1, 2)
        h = np.hstack([pts, np.ones((len(pts), 1))]) @ self.matrix.T
        return h[:, :2] / h[:, 2:3]

    def _solve(self, src: np.ndarray, dst: np.ndarray) -> Optional[np.ndarray]:
        raise NotImplementedError


class AffineModel(GeometricModel):
    """Six degree of freedom affine transform."""

    num_items_to_estimate = AFFINE_SAMPLE_SIZE

    def _solve(self, src, dst):
        if len(src) == AFFINE_SAMPLE_SIZE:
            if _collinear(*src) or _collinear(*dst):
                return None
            affine = cv2.getAffineTransform(src.astype(np.float32), dst.astype(np.float32))
        else:
            A = np.hstack([src, np.ones((len(src), 1))])
            sol, _res, rank, _sv = np.linalg.lstsq(A, dst, rcond=None)
            if rank < 3:
                return None
            affine = sol.T
        return np.vstack([affine, [0.0, 0.0, 1.0]])


class HomographyModel(GeometricModel):
    """Eight degree of freedom planar homography."""

    num_items_to_estimate = HOMOGRAPHY_SAMPLE_SIZE

    def _solve(self, src, dst):
        if len(src) == HOMOGRAPHY_SAMPLE_SIZE:
            if _has_collinear_triple(src) or _has_collinear_triple(dst):
                return None
            H = cv2.getPerspectiveTransform(src.astype(np.float32), dst.astype(np.float32))
        else:
            H, _mask = cv2.findHomography(src, dst, 0)
        if H is None or abs(H[2, 2]) < np.finfo(np.float64).eps:
            return None
        return H / H[2, 2]
