from pathlib import Path

import pytest

from services.models import Paper

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def arxiv_feed_xml():
    return (FIXTURES / "arxiv_two_entries.xml").read_text()


@pytest.fixture
def sample_papers():
    return [
        Paper(
            title="Graph Neural Networks for Molecules",
            authors=["Ada Lovelace", "Alan Turing"],
            abstract="We study message passing on molecular graphs.",
            link="http://arxiv.org/abs/2101.00001v1",
        ),
        Paper(
            title="Scaling Laws for Graph Transformers",
            authors=["Grace Hopper"],
            abstract="Larger graph transformers generalize better.",
            link="http://arxiv.org/abs/2102.00002v2",
        ),
    ]


@pytest.fixture
def report_store():
    from database.db import create_db_engine, create_session_factory, init_db
    from services.persistence_service import ReportStore

    engine = create_db_engine("sqlite:///:memory:")
    init_db(engine)
    yield ReportStore(create_session_factory(engine))
    engine.dispose()
