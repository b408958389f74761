"""
Shared test configuration.

``config`` builds its settings at import time, so the required environment
variables are seeded here before any test module imports application code.
"""

import os

os.environ.setdefault("GITHUB_TOKEN", "test-token")
os.environ.setdefault("REPOS", "test/repo1,test/repo2")
os.environ.setdefault("MONTH", "2024-01")
os.environ.setdefault("LOG_DIR", "")

import pytest  # noqa: E402

from analyzers.aggregator import AttributionAggregator  # noqa: E402
from miners.models import RepositoryRef, TimeWindow  # noqa: E402


@pytest.fixture
def window():
    """January 2024 collection window."""
    return TimeWindow.from_month("2024-01")


@pytest.fixture
def aggregator():
    return AttributionAggregator()


@pytest.fixture
def repository():
    return RepositoryRef(owner="test", name="repo")
