"""
helpers mapping cdk.json context values to CDK enums
"""
from aws_cdk import RemovalPolicy
from aws_cdk.aws_logs import RetentionDays

_REMOVAL_POLICIES = {
    "destroy": RemovalPolicy.DESTROY,
    "retain": RemovalPolicy.RETAIN,
    "snapshot": RemovalPolicy.SNAPSHOT,
}

_RETENTION_DAYS = {
    1: RetentionDays.ONE_DAY,
    3: RetentionDays.THREE_DAYS,
    5: RetentionDays.FIVE_DAYS,
    7: RetentionDays.ONE_WEEK,
    14: RetentionDays.TWO_WEEKS,
    30: RetentionDays.ONE_MONTH,
    60: RetentionDays.TWO_MONTHS,
    90: RetentionDays.THREE_MONTHS,
    180: RetentionDays.SIX_MONTHS,
    365: RetentionDays.ONE_YEAR,
}


def get_removal_policy(policy: str) -> RemovalPolicy:
    """
    returns the removal policy named in the context, e.g. "destroy"
    """
    try:
        return _REMOVAL_POLICIES[policy.lower()]
    except KeyError:
        raise ValueError(f"Unsupported removal policy: {policy}") from None


def get_log_retention_days(days: int) -> RetentionDays:
    """
    returns the log retention for a number of days supported by CloudWatch Logs
    """
    try:
        return _RETENTION_DAYS[int(days)]
    except KeyError:
        raise ValueError(
            f"Unsupported log retention of {days} days, expected one of {sorted(_RETENTION_DAYS)}") from None
