"""Tunable policy constants for gap coverage planning"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CoveragePolicy:
    """
    Fractions and defaults that shape a coverage plan.

    Capacity ratios bound how much of each instrument the month can supply:
    - reschedule_capacity_ratio: share of non-risk expenses that can be postponed
    - receivables_capacity_ratio: share of expected income that can be pulled forward
    - transfer_buffer_ratio: share of the richest account's balance that can be moved

    Target ratios are the share of the total gap each instrument should cover
    before external financing absorbs the rest.
    """

    reschedule_capacity_ratio: float = 0.45
    receivables_capacity_ratio: float = 0.35
    transfer_buffer_ratio: float = 0.30

    reschedule_target_ratio: float = 0.35
    receivables_target_ratio: float = 0.25
    transfer_target_ratio: float = 0.20

    postpone_days: int = 5

    fallback_source_account: str = "Operating account (Sber)"
    fallback_target_account: str = "Operating account (VTB)"


DEFAULT_POLICY = CoveragePolicy()
