"""
Collect Threat Intelligence Use Case

Pulls external threat feeds, ranks them and lists the accounts that
currently look anomalous as potential targets.
"""

import logging
from typing import Optional

from libs.result import Result, Return
from src.app.services.audit_log_service import AuditLogService
from src.app.services.risk_scorer import RiskPolicy, load_risk_policy
from src.app.services.threat_intelligence import (
    IThreatFeedClient,
    analyze_threat_distribution,
    correlate_threats,
    high_severity_threats,
)
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.fraud.detect_anomalies_use_case import DetectAnomaliesUseCase
from src.domain.base import utcnow
from src.domain.entities import ActionKind
from .dtos import PotentialTarget, ThreatAnalysis, ThreatIntelligenceReport

logger = logging.getLogger(__name__)


class CollectThreatIntelligenceUseCase:
    """
    Business Rules:
    - Feeds that fail contribute no threats; collection still succeeds
    - Threats are ordered by severity, highest first
    - High severity means severity > 7
    - Collection is written back as THREAT_INTELLIGENCE_COLLECTION
    """

    def __init__(
        self,
        uow: UnitOfWork,
        audit_log: AuditLogService,
        feed_client: IThreatFeedClient,
        policy: Optional[RiskPolicy] = None,
    ):
        self.uow = uow
        self.audit_log = audit_log
        self.feed_client = feed_client
        self.policy = policy or load_risk_policy()

    async def execute(self) -> Result[ThreatIntelligenceReport]:
        threats = correlate_threats(await self.feed_client.fetch_threats())
        high_severity = high_severity_threats(threats)
        logger.info(
            f"Collected {len(threats)} threats, {len(high_severity)} high severity"
        )

        await self.audit_log.record(
            ActionKind.THREAT_INTELLIGENCE_COLLECTION,
            details={
                "total_threats": len(threats),
                "high_severity_threats": len(high_severity),
            },
        )

        anomalies = await DetectAnomaliesUseCase(
            self.uow, self.audit_log, self.policy
        ).execute()
        if anomalies.is_err():
            return Return.err(anomalies.error)

        return Return.ok(
            ThreatIntelligenceReport(
                threats=threats,
                analysis=ThreatAnalysis(
                    total_threats=len(threats),
                    high_severity_threats=high_severity,
                    threat_distribution=analyze_threat_distribution(threats),
                    potential_targets=[
                        PotentialTarget(user_id=a.user_id, username=a.username)
                        for a in anomalies.value.anomalies
                    ],
                ),
                collected_at=utcnow(),
            )
        )
