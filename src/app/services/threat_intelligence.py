"""
Threat Intelligence

Normalized threat records from external feeds and the correlation
functions that rank them. Fetching lives behind IThreatFeedClient so the
use cases never talk HTTP directly.
"""

from abc import ABC, abstractmethod
from collections import Counter
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

THREAT_TYPE_WEIGHTS = {
    "malware": 5,
    "phishing": 4,
    "network_scan": 3,
}
INSTANCE_WEIGHT = 0.1
CROSS_REFERENCE_WEIGHT = 0.2
HIGH_SEVERITY_ABOVE = 7
MIN_SEVERITY = 0
MAX_SEVERITY = 10
UNKNOWN_TYPE = "unknown"


class ThreatRecord(BaseModel):
    """One threat as reported by a feed"""

    source: str
    type: Optional[str] = None
    observed_instances: int = 0
    timestamp: Optional[str] = None
    source_reputation: float = 0
    source_reliability: float = 0
    cross_referenced_sources: List[str] = Field(default_factory=list)
    historical_match_rate: float = 0


class CorrelatedThreat(ThreatRecord):
    severity_score: float
    correlation_confidence: float


class IThreatFeedClient(ABC):
    @abstractmethod
    async def fetch_threats(self) -> List[ThreatRecord]:
        """Fetch from every configured provider. A failing provider contributes nothing."""
        pass


def calculate_threat_severity(threat: ThreatRecord) -> float:
    score = THREAT_TYPE_WEIGHTS.get(threat.type or "", 0)
    score += threat.source_reputation or 0
    score += threat.observed_instances * INSTANCE_WEIGHT
    return min(max(score, MIN_SEVERITY), MAX_SEVERITY)


def calculate_correlation_confidence(threat: ThreatRecord) -> float:
    return (
        (threat.source_reliability or 0)
        + len(threat.cross_referenced_sources) * CROSS_REFERENCE_WEIGHT
        + (threat.historical_match_rate or 0)
    )


def correlate_threats(threats: Sequence[ThreatRecord]) -> List[CorrelatedThreat]:
    """Score every threat and sort by severity, highest first."""
    correlated = [
        CorrelatedThreat(
            **threat.model_dump(),
            severity_score=calculate_threat_severity(threat),
            correlation_confidence=calculate_correlation_confidence(threat),
        )
        for threat in threats
    ]
    return sorted(correlated, key=lambda t: t.severity_score, reverse=True)


def analyze_threat_distribution(threats: Sequence[ThreatRecord]) -> Dict[str, int]:
    return dict(Counter(threat.type or UNKNOWN_TYPE for threat in threats))


def high_severity_threats(threats: Sequence[CorrelatedThreat]) -> List[CorrelatedThreat]:
    return [t for t in threats if t.severity_score > HIGH_SEVERITY_ABOVE]
