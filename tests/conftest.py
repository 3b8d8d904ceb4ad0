"""Pytest configuration and shared fixtures for geomrank tests."""

import numpy as np
import pytest

from geomrank.core.types import Correspondence, Point2d, ResultSet
from geomrank.index.position_index import PositionIndex, QueryDocument
from geomrank.index.posting import PayloadPostingList, PositionPayloadCoordinator


# Query positions of the ten consistent terms t0..t9
QUERY_POINTS = [
    (10.0, 20.0), (40.0, 15.0), (70.0, 35.0), (25.0, 60.0), (55.0, 80.0),
    (90.0, 70.0), (15.0, 95.0), (80.0, 10.0), (60.0, 50.0), (35.0, 40.0),
]

# Three terms whose document positions agree with no common transform
OUTLIER_QUERY_POINTS = [(12.0, 70.0), (85.0, 45.0), (45.0, 5.0)]
OUTLIER_DOC_POINTS = [(300.0, -50.0), (-120.0, 400.0), (500.0, 500.0)]

AFFINE = np.array([
    [1.2, -0.3, 5.0],
    [0.25, 0.9, 12.0],
    [0.0, 0.0, 1.0],
])

HOMOGRAPHY = np.array([
    [1.1, 0.05, 3.0],
    [-0.02, 0.95, 7.0],
    [0.0005, 0.0002, 1.0],
])


def apply_transform(matrix, points):
    pts = np.asarray(points, dtype=np.float64)
    h = np.hstack([pts, np.ones((len(pts), 1))]) @ matrix.T
    return h[:, :2] / h[:, 2:3]


def make_correspondences(src, dst):
    return [
        Correspondence(Point2d(float(a[0]), float(a[1])), Point2d(float(b[0]), float(b[1])))
        for a, b in zip(src, dst)
    ]


def posting_list_from(rows):
    posting_list = PayloadPostingList(PositionPayloadCoordinator())
    for term, x, y in rows:
        posting_list.insert(term, (x, y))
    return posting_list


@pytest.fixture(scope="function")
def rng():
    """Seeded generator so RANSAC sampling is repeatable."""
    return np.random.default_rng(42)


@pytest.fixture(scope="function")
def affine_correspondences():
    """Ten affine-consistent correspondences followed by three outliers."""
    inliers = make_correspondences(QUERY_POINTS, apply_transform(AFFINE, QUERY_POINTS))
    outliers = make_correspondences(OUTLIER_QUERY_POINTS, OUTLIER_DOC_POINTS)
    return inliers + outliers


@pytest.fixture(scope="function")
def homography_correspondences():
    """Ten correspondences related by a planar homography."""
    return make_correspondences(QUERY_POINTS, apply_transform(HOMOGRAPHY, QUERY_POINTS))


@pytest.fixture(scope="function")
def scene():
    """
    A small index, a query and an initial ranking.

    Ranked docs are [2, 1, 3, 4]:
      - doc 1 has all ten consistent terms plus three outliers
      - doc 2 shares only two terms with the query
      - doc 3 shares no term with the query
      - doc 4 is a copy of doc 1
    """
    doc_points = apply_transform(AFFINE, QUERY_POINTS)
    consistent = [(f"t{i}", x, y) for i, (x, y) in enumerate(doc_points)]
    outliers = [(f"o{i}", x, y) for i, (x, y) in enumerate(OUTLIER_DOC_POINTS)]

    index = PositionIndex()
    index.add_document(1, posting_list_from(consistent + outliers))
    index.add_document(2, posting_list_from(consistent[:2]))
    index.add_document(3, posting_list_from([("x1", 1.0, 1.0), ("x2", 2.0, 2.0)]))
    index.add_document(4, posting_list_from(consistent + outliers))

    query = QueryDocument.from_positions(
        [(f"t{i}", p) for i, p in enumerate(QUERY_POINTS)]
        + [(f"o{i}", p) for i, p in enumerate(OUTLIER_QUERY_POINTS)]
        + [("not-in-lexicon", (1.0, 1.0))]
    )
    result_set = ResultSet(doc_ids=[2, 1, 3, 4], scores=[5.0, 4.0, 3.0, 2.0])
    return index, query, result_set


# Configure pytest options
def pytest_configure(config):
    """Configure pytest with custom options."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers automatically."""
    for item in items:
        # Mark integration tests
        if "integration" in item.name.lower() or "Integration" in str(item.cls):
            item.add_marker(pytest.mark.integration)

        # Mark slow tests
        if any(slow_indicator in item.name.lower() for slow_indicator in ['performance', 'bulk']):
            item.add_marker(pytest.mark.slow)

        # Mark unit tests (default)
        if not item.get_closest_marker('integration') and not item.get_closest_marker('slow'):
            item.add_marker(pytest.mark.unit)
