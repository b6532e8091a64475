from fraud_scoring.models.settings import ScoringSettings


def decide_status(fraud_score: int, thresholds: ScoringSettings) -> str:
    """Pick the initial status for a freshly scored transaction.

    Approval is checked first, so overlapping thresholds resolve to APPROVED.
    """
    if fraud_score < thresholds.auto_approve_below:
        return "APPROVED"
    if fraud_score >= thresholds.auto_block_above:
        return "BLOCKED"
    return "PENDING"
