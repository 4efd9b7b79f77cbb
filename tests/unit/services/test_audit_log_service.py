"""
Unit tests for the fail-open Audit Log Service
"""

import pytest
from unittest.mock import AsyncMock
from uuid import uuid4

from sqlalchemy.exc import OperationalError

from src.app.services.audit_log_service import AuditLogService
from src.domain.entities import ActionKind, AuditEvent


@pytest.mark.asyncio
async def test_record_appends_and_commits(mock_uow, uow_factory):
    async def create(audit):
        audit.id = 42
        return audit

    mock_uow.audit_events.create = AsyncMock(side_effect=create)
    actor_id = uuid4()

    event_id = await AuditLogService(uow_factory).record(
        ActionKind.IP_FRAUD_DETECTION,
        details={"suspicious_ips": ["10.0.0.5"], "total_suspicious_ips": 1},
        actor_id=actor_id,
    )

    assert event_id == 42
    stored: AuditEvent = mock_uow.audit_events.create.call_args.args[0]
    assert stored.action == "IP_FRAUD_DETECTION"
    assert stored.actor_id == actor_id
    assert stored.details["total_suspicious_ips"] == 1
    mock_uow.commit.assert_called_once()


@pytest.mark.asyncio
async def test_record_swallows_store_errors(mock_uow, uow_factory, caplog):
    mock_uow.audit_events.create = AsyncMock(
        side_effect=OperationalError("INSERT", {}, Exception("disk full"))
    )

    event_id = await AuditLogService(uow_factory).record(
        ActionKind.ANOMALY_DETECTION,
        details={"anomalous_users": [], "total_anomalies": 0},
    )

    assert event_id is None
    assert "Failed to record audit event ANOMALY_DETECTION" in caplog.text


@pytest.mark.asyncio
async def test_record_swallows_invalid_details(mock_uow, uow_factory):
    mock_uow.audit_events.create = AsyncMock()

    event_id = await AuditLogService(uow_factory).record(
        ActionKind.IP_FRAUD_DETECTION, details={"unexpected": True}
    )

    assert event_id is None
    mock_uow.audit_events.create.assert_not_called()
