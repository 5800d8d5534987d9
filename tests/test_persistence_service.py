from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from database.models.report_model import Report
from services.errors import PersistenceError
from services.persistence_service import ReportStore


@pytest.mark.asyncio
async def test_insert_returns_the_stored_record(report_store):
    papers = [{"title": "A", "authors": [], "abstract": "", "link": ""}]

    record = await report_store.insert(
        user_id="user-1",
        title="graph learning",
        content="## Report",
        papers=papers,
        record_type="report",
    )

    assert record["id"]
    assert record["user_id"] == "user-1"
    assert record["title"] == "graph learning"
    assert record["content"] == "## Report"
    assert record["papers"] == papers
    assert record["type"] == "report"
    assert record["created_at"]

    db = report_store.session_factory()
    try:
        assert db.query(Report).count() == 1
    finally:
        db.close()


@pytest.mark.asyncio
async def test_missing_title_is_a_persistence_error(report_store):
    with pytest.raises(PersistenceError, match="Failed to save search"):
        await report_store.insert(
            user_id="user-1",
            title=None,
            content="summary",
            papers=[],
            record_type="search",
        )


@pytest.mark.asyncio
async def test_database_failure_rolls_back_and_raises():
    session = MagicMock()
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("db down"))
    store = ReportStore(lambda: session)

    with pytest.raises(PersistenceError, match="Failed to save report"):
        await store.insert("user-1", "t", "c", [], "report")

    session.rollback.assert_called_once()
    session.close.assert_called_once()
