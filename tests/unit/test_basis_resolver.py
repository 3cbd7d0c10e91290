from decimal import Decimal

import pytest

from ledgermap.domain.models import AllocationPreset, BasisAccount, PresetRow, SourceAccount
from ledgermap.domain.services.basis_resolver import (
    build_preset_basis_rows,
    group_members_with_values,
    group_total,
    resolve_basis_value,
    resolve_source_value,
)


@pytest.fixture
def accounts():
    return [
        BasisAccount(
            id="HC-N",
            name="Headcount North",
            value=Decimal("10"),
            values_by_period={"2024-01": 30, "2024-02": "n/a"},
        ),
        BasisAccount(id="HC-S", name="Headcount South", value=Decimal("20")),
    ]


@pytest.fixture
def preset():
    return AllocationPreset(
        id="hc",
        name="Headcount",
        rows=(
            PresetRow(dynamic_account_id="HC-N", target_account_id="OPS-N"),
            PresetRow(dynamic_account_id="HC-S", target_account_id="OPS-S"),
            PresetRow(dynamic_account_id="HC-X", target_account_id="OPS-X"),
        ),
    )


class TestResolveBasisValue:

    def test_period_value_wins(self, accounts):
        assert resolve_basis_value(accounts[0], "2024-01") == Decimal("30")

    def test_non_numeric_period_value_falls_back(self, accounts):
        assert resolve_basis_value(accounts[0], "2024-02") == Decimal("10")

    def test_missing_period_falls_back(self, accounts):
        assert resolve_basis_value(accounts[0], "2023-12") == Decimal("10")

    def test_no_period_uses_default(self, accounts):
        assert resolve_basis_value(accounts[0]) == Decimal("10")

    def test_undefined_default_is_zero(self):
        account = BasisAccount(id="A", name="A")
        assert resolve_basis_value(account, "2024-01") == Decimal("0")

    def test_boolean_period_value_is_not_numeric(self):
        account = BasisAccount(id="A", name="A", value=Decimal("4"), values_by_period={"p": True})
        assert resolve_basis_value(account, "p") == Decimal("4")

    def test_zero_period_value_is_kept(self):
        account = BasisAccount(id="A", name="A", value=Decimal("4"), values_by_period={"p": 0})
        assert resolve_basis_value(account, "p") == Decimal("0")


def test_resolve_source_value_same_rules():
    source = SourceAccount(id="GL-1", name="Rent", value=Decimal("500"), values_by_period={"2024-01": 1000.5})
    assert resolve_source_value(source, "2024-01") == Decimal("1000.5")
    assert resolve_source_value(source, "2024-03") == Decimal("500")


def test_group_members_with_values(preset, accounts):
    members = group_members_with_values(preset, accounts, "2024-01")

    assert [m.account_id for m in members] == ["HC-N", "HC-S", "HC-X"]
    assert [m.value for m in members] == [Decimal("30"), Decimal("20"), Decimal("0")]
    # Unknown account keeps its id as display name
    assert members[2].account_name == "HC-X"
    assert members[0].account_name == "Headcount North"


def test_group_total(preset, accounts):
    assert group_total(preset, accounts) == Decimal("30")
    assert group_total(preset, accounts, "2024-01") == Decimal("50")


def test_build_preset_basis_rows(preset, accounts):
    rows = build_preset_basis_rows([preset], accounts, "2024-01")

    assert len(rows) == 3
    assert rows[0].preset_id == "hc"
    assert rows[0].preset_name == "Headcount"
    assert rows[0].target_account_id == "OPS-N"
    assert rows[0].basis_value == Decimal("30")
    assert rows[2].basis_value == Decimal("0")
