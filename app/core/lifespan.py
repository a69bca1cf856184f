from contextlib import asynccontextmanager
import logging

from app.ai.factory import get_ai_client
from app.core.session_store import SqliteKeyValueStore, build_session_store
from app.matching.orchestrator import JobRanker
from app.matching.scoring_client import ScoringClient
from app.matching.session import MatchingSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    store = build_session_store()
    scoring_client = ScoringClient(ai_client=get_ai_client())
    ranker = JobRanker(scoring_client)
    session = MatchingSession(ranker, store)
    session.restore()

    app.state.scoring_client = scoring_client
    app.state.ranker = ranker
    app.state.session = session
    logger.info(
        "matching_service_ready batch_size=%s batch_delay_s=%s store=%s",
        ranker.batch_size,
        ranker.batch_delay_s,
        type(store).__name__,
    )
    yield
    if isinstance(store, SqliteKeyValueStore):
        store.close()
