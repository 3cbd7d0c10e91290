"""
BASIS VALUE RESOLVER
Turn catalog accounts into numeric basis weights

RULES:
- Period-specific value wins when it is numeric
- Otherwise the default value, or 0
- Never raises
"""

from decimal import Decimal
from typing import Iterable, List, Optional, Sequence

from ledgermap.domain.models import (
    AllocationPreset,
    BasisAccount,
    GroupMemberValue,
    PresetBasisRow,
    SourceAccount,
)
from ledgermap.domain.services.rounding import is_numeric, to_decimal


def _resolve_value(account: BasisAccount, period_key: Optional[str]) -> Decimal:
    if period_key and account.values_by_period and period_key in account.values_by_period:
        value = account.values_by_period[period_key]
        if is_numeric(value):
            return to_decimal(value)
    if account.value is None or not is_numeric(account.value):
        return Decimal("0")
    return to_decimal(account.value)


def resolve_basis_value(account: BasisAccount, period_key: Optional[str] = None) -> Decimal:
    """
    Resolve the basis weight of an account for an optional reporting period.

    Args:
        account: Basis account from the catalog
        period_key: Reporting period key (e.g. "2024-01")

    Returns:
        Period value when numeric, else the default value, else 0
    """
    return _resolve_value(account, period_key)


def resolve_source_value(account: SourceAccount, period_key: Optional[str] = None) -> Decimal:
    """Resolve the amount to distribute; same fallback rules as basis values"""
    return _resolve_value(account, period_key)


def group_members_with_values(
    preset: AllocationPreset,
    basis_accounts: Sequence[BasisAccount],
    period_key: Optional[str] = None,
) -> List[GroupMemberValue]:
    """
    Resolve every member of a preset.

    Unknown basis accounts resolve to 0 and are named after their id.
    """
    by_id = {account.id: account for account in basis_accounts}
    members = []
    for row in preset.rows:
        account = by_id.get(row.dynamic_account_id)
        members.append(GroupMemberValue(
            account_id=row.dynamic_account_id,
            account_name=account.name if account else row.dynamic_account_id,
            value=resolve_basis_value(account, period_key) if account else Decimal("0"),
        ))
    return members


def group_total(
    preset: AllocationPreset,
    basis_accounts: Sequence[BasisAccount],
    period_key: Optional[str] = None,
) -> Decimal:
    """Sum of resolved member values of a preset"""
    return sum(
        (m.value for m in group_members_with_values(preset, basis_accounts, period_key)),
        Decimal("0"),
    )


def build_preset_basis_rows(
    presets: Iterable[AllocationPreset],
    basis_accounts: Sequence[BasisAccount],
    period_key: Optional[str] = None,
) -> List[PresetBasisRow]:
    """Flatten presets into working rows for the preset-aware allocator"""
    rows: List[PresetBasisRow] = []
    for preset in presets:
        members = group_members_with_values(preset, basis_accounts, period_key)
        for row, member in zip(preset.rows, members):
            rows.append(PresetBasisRow(
                dynamic_account_id=row.dynamic_account_id,
                target_account_id=row.target_account_id,
                basis_value=member.value,
                preset_id=preset.id,
                preset_name=preset.name,
            ))
    return rows
