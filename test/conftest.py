"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module reads settings
- A throwaway SQLite database for integration and API tests
- The session-scoped TestClient for API tests

Architecture:
- Unit tests (test/**/unit/): pure, use the fakes in test/service/booking/unit/helpers.py
- Integration tests (test/**/integration/): real SQLAlchemy session on SQLite
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings are read at import time (src.platform.config.core_setting)
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    worker_id = os.environ.get('PYTEST_XDIST_WORKER', 'master')
    db_dir = Path(tempfile.mkdtemp(prefix=f'mailer_booking_{worker_id}_'))
    os.environ['DATABASE_URL'] = f'sqlite+aiosqlite:///{db_dir / "api.db"}'
    os.environ['UPLOAD_DIR'] = str(db_dir / 'uploads')

    # The reaper is exercised directly; keep it out of the API app
    os.environ['ENABLE_EXPIRATION_REAPER'] = 'false'


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from collections.abc import AsyncGenerator, Generator  # noqa: E402

from fastapi.testclient import TestClient  # noqa: E402
import pytest  # noqa: E402

from src.platform.database.orm_db_setting import Database  # noqa: E402
from src.platform.database.unit_of_work import (  # noqa: E402
    SqlAlchemyUnitOfWork,
    UnitOfWorkFactory,
)


@pytest.fixture
async def database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """
    Fresh SQLite file per test, one pooled connection.

    A single connection means a unit of work opened while another one is
    still open would dead-lock, which keeps use cases honest about nesting.
    """
    db = Database(
        db_url=f'sqlite+aiosqlite:///{tmp_path / "booking.db"}', pool_size=1, max_overflow=0
    )
    await db.create_db_and_tables()
    yield db
    await db.dispose()


@pytest.fixture
def uow_factory(database: Database) -> UnitOfWorkFactory:
    return lambda: SqlAlchemyUnitOfWork(session_maker=database.session_maker)


@pytest.fixture(scope='session')
def client() -> Generator[TestClient, None, None]:
    from src.main import app

    with TestClient(app) as test_client:
        yield test_client
