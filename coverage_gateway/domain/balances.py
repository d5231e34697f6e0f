"""Account balance aggregation and internal transfer pair selection"""

from typing import Dict, List, Sequence

from coverage_gateway.domain.models import LedgerTransaction, TransactionType, TransferPair
from coverage_gateway.domain.policy import CoveragePolicy, DEFAULT_POLICY
from coverage_gateway.utils.date_utils import month_key_for
from coverage_gateway.utils.rounding import round_half_up

TRANSFER_SEPARATOR = "->"


def filter_month_operations(operations: Sequence[LedgerTransaction], month_key: str) -> List[LedgerTransaction]:
    """Keep only operations dated within the reporting month"""
    return [operation for operation in operations if month_key_for(operation.date) == month_key]


def build_account_balances(operations: Sequence[LedgerTransaction]) -> Dict[str, int]:
    """
    Reduce ledger operations to net balance per account.

    Transfers written as "source -> target" move abs(amount) between the two
    accounts instead of counting as income or expense. Rows that do not split
    into two account names are booked directly against the account field.
    """
    balances: Dict[str, int] = {}

    for operation in operations:
        if operation.type == TransactionType.TRANSFER and TRANSFER_SEPARATOR in operation.account:
            parts = [part.strip() for part in operation.account.split(TRANSFER_SEPARATOR)]
            if len(parts) == 2 and all(parts):
                source, target = parts
                amount = abs(operation.amount)
                balances[source] = balances.get(source, 0) - amount
                balances[target] = balances.get(target, 0) + amount
                continue

        account = operation.account.strip()
        balances[account] = balances.get(account, 0) + operation.amount

    return balances


def resolve_transfer_pair(
    account_balances: Dict[str, int],
    policy: CoveragePolicy = DEFAULT_POLICY,
) -> TransferPair:
    """
    Pick the richest account as liquidity source and the poorest as target.

    Only transfer_buffer_ratio of the source balance is treated as movable.
    With no balances at all the policy's fallback accounts are returned
    with nothing available.
    """
    entries = list(account_balances.items())
    if not entries:
        return TransferPair(
            source_account=policy.fallback_source_account,
            target_account=policy.fallback_target_account,
            available_amount=0,
        )

    by_balance_desc = sorted(entries, key=lambda entry: entry[1], reverse=True)
    by_balance_asc = sorted(entries, key=lambda entry: entry[1])

    source_account, source_balance = by_balance_desc[0]
    target_account = by_balance_asc[0][0]

    # Single-account ledgers keep source == target
    if target_account == source_account and len(by_balance_asc) > 1:
        target_account = by_balance_asc[1][0]

    return TransferPair(
        source_account=source_account,
        target_account=target_account,
        available_amount=max(0, round_half_up(source_balance * policy.transfer_buffer_ratio)),
    )
