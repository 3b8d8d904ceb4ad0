from typing import Final

# Re-ranking defaults
DEFAULT_NUM_DOCS_RERANK: Final[int] = 0
DEFAULT_FILTER_THRESHOLD: Final[float] = 0.5
DEFAULT_RANSAC_SUCCESS_THRESHOLD: Final[float] = 0.5
DEFAULT_RANSAC_MAX_ITER: Final[int] = 100
DEFAULT_SCORING_SCHEME: Final[str] = "NUM_MATCHES"

# Algebraic residual tolerance (squared units of the position encoding)
DEFAULT_TOLERANCE: Final[float] = 20.0

# Probabilistic stopping condition: chance that a wrong correspondence
# agrees with a wrong model
INLIER_IS_BAD_PROBABILITY: Final[float] = 0.1

# Minimal sample sizes
AFFINE_SAMPLE_SIZE: Final[int] = 3
HOMOGRAPHY_SAMPLE_SIZE: Final[int] = 4

# Twice the triangle area below which a sample is treated as collinear
COLLINEARITY_EPS: Final[float] = 1e-6

# Query position encoding: indices of x and y in an encoded position
POSITION_X_INDEX: Final[int] = 0
POSITION_Y_INDEX: Final[int] = 1
