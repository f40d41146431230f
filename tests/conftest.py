import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("MODE", "test")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app.core.context import RequestContext  # noqa: E402
from app.db.database import create_db_engine  # noqa: E402
from app.db.init_db import init_database  # noqa: E402
from app.services.batch_service import AccountLockRegistry, BatchOperationService  # noqa: E402
from app.services.youtube_service import YouTubeService  # noqa: E402
from tests.fakes import FakeYouTubeAPI, RecordingQuotaService  # noqa: E402

TODAY = date(2026, 10, 19)
DAILY_LIMIT = 10000


class FakeClock:
    def __init__(self, day: date = TODAY):
        self.day = day

    def __call__(self) -> date:
        return self.day


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    init_database(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def quota(db, clock):
    return RecordingQuotaService(db, daily_limit=DAILY_LIMIT, today=clock)


@pytest.fixture
def context():
    return RequestContext(account_id="account-1", access_token="google-token", trace_id="trace-1")


@pytest.fixture
def api():
    return FakeYouTubeAPI()


@pytest.fixture
def youtube(api, quota, context):
    return YouTubeService(api, quota, context)


@pytest.fixture
def batch(youtube, quota):
    return BatchOperationService(youtube, quota, locks=AccountLockRegistry())
