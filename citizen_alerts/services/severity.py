"""Severity scoring from backend urgency and credibility scores."""

from citizen_alerts.schemas.alert import Severity

URGENCY_WEIGHT = 0.7
CREDIBILITY_WEIGHT = 0.3

# Upper bounds (exclusive) of the blended score for each band
LOW_BELOW = 25
MEDIUM_BELOW = 60
HIGH_BELOW = 85

# Canonical scores sent with a report of a given severity
_URGENCY_BY_SEVERITY = {
    Severity.LOW: 25,
    Severity.MEDIUM: 55,
    Severity.HIGH: 75,
    Severity.CRITICAL: 95,
}
_CREDIBILITY_BY_SEVERITY = {
    Severity.LOW: 30,
    Severity.MEDIUM: 50,
    Severity.HIGH: 70,
    Severity.CRITICAL: 90,
}


def blended_score(urgency: float | None, credibility: float | None) -> float:
    return URGENCY_WEIGHT * (urgency or 0) + CREDIBILITY_WEIGHT * (credibility or 0)


def severity_level(urgency: float | None, credibility: float | None) -> Severity:
    """Map urgency/credibility (missing = 0) onto a severity band."""
    blended = blended_score(urgency, credibility)
    if blended < LOW_BELOW:
        return Severity.LOW
    if blended < MEDIUM_BELOW:
        return Severity.MEDIUM
    if blended < HIGH_BELOW:
        return Severity.HIGH
    return Severity.CRITICAL


def urgency_for(severity: Severity) -> int:
    return _URGENCY_BY_SEVERITY[severity]


def credibility_for(severity: Severity) -> int:
    return _CREDIBILITY_BY_SEVERITY[severity]
