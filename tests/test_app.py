import os
from unittest.mock import AsyncMock, patch

import pytest

import app
from analyzers.models import CollectionResult, ContributorStat, RepoStat
from miners.graphql_client import RateLimitExhaustedError


@pytest.fixture
def result():
    stat = ContributorStat(login="alice", merged_prs=1, commits=2)
    return CollectionResult(
        month="2024-01",
        from_iso="2024-01-01T00:00:00.000Z",
        to_iso="2024-02-01T00:00:00.000Z",
        contributors={"alice": stat},
        repository_contributors={"test/repo1": {"alice": stat}},
        repositories=[RepoStat(name="test/repo1", url="https://github.com/test/repo1")],
    )


@pytest.fixture
def output_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(app.settings, "report_output_dir", str(tmp_path))
    monkeypatch.setattr(app.settings, "output_basename", "stats")
    monkeypatch.setattr(app.settings, "pdf_report", False)
    return tmp_path


def test_write_reports(result, output_dir):
    reports_dir = app.write_reports(result)

    assert reports_dir == os.path.join(str(output_dir), "2024-01")
    assert sorted(os.listdir(reports_dir)) == [
        "report.md",
        "stats-2024-01-enhanced.md",
        "stats-2024-01.csv",
        "stats-2024-01.json",
    ]


@pytest.mark.asyncio
async def test_main_writes_reports_after_collection(result, output_dir):
    with patch("app.collect", AsyncMock(return_value=result)):
        assert await app.main() == 0

    assert os.path.exists(output_dir / "2024-01" / "report.md")


@pytest.mark.asyncio
async def test_main_aborts_without_reports(output_dir):
    """Test a failed collection exits non-zero and writes nothing."""
    with patch("app.collect", AsyncMock(side_effect=RateLimitExhaustedError(100))):
        assert await app.main() == 1

    assert os.listdir(output_dir) == []
