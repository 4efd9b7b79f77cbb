import pytest
from unittest.mock import AsyncMock, MagicMock

from src.app.services.risk_scorer import RiskPolicy


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    uow.ping = AsyncMock()
    return uow


@pytest.fixture
def uow_factory(mock_uow):
    return lambda: mock_uow


@pytest.fixture
def mock_audit_log():
    audit_log = MagicMock()
    audit_log.record = AsyncMock(return_value=1)
    return audit_log


@pytest.fixture
def policy():
    return RiskPolicy()
