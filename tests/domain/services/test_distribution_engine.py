from decimal import Decimal

import pytest

from ledgermap.domain.models import (
    DistributionRule,
    DistributionStatus,
    DistributionType,
    OperationShare,
    PresetBasisRow,
)
from ledgermap.domain.services.distribution_engine import (
    DistributionEngine,
    clamp_percentage,
    normalize_distribution_status,
    normalize_distribution_type,
)


def percentage_rule(*shares):
    return DistributionRule(
        scoa_account_id="6100",
        distribution_type=DistributionType.PERCENTAGE,
        operations=tuple(OperationShare(code, Decimal(str(pct))) for code, pct in shares),
    )


@pytest.fixture
def engine():
    return DistributionEngine()


@pytest.mark.parametrize("raw, expected", [
    ("direct", DistributionType.DIRECT),
    (" Percentage ", DistributionType.PERCENTAGE),
    ("DYNAMIC", DistributionType.DYNAMIC),
    ("fixed", None),
    ("", None),
    (None, None),
    (42, None),
])
def test_normalize_distribution_type(raw, expected):
    assert normalize_distribution_type(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    ("distributed", DistributionStatus.DISTRIBUTED),
    ("DISTRIBUTED", DistributionStatus.DISTRIBUTED),
    ("undistributed", DistributionStatus.UNDISTRIBUTED),
    ("pending", DistributionStatus.UNDISTRIBUTED),
    (None, DistributionStatus.UNDISTRIBUTED),
])
def test_normalize_distribution_status(raw, expected):
    assert normalize_distribution_status(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    (150, Decimal("100")),
    (-5, Decimal("0")),
    (42.5, Decimal("42.5")),
    ("40", None),
    (None, None),
])
def test_clamp_percentage(raw, expected):
    assert clamp_percentage(raw) == expected


class TestDirect:

    def test_single_operation_gets_full_amount(self, engine):
        rule = DistributionRule(
            scoa_account_id="6100",
            distribution_type=DistributionType.DIRECT,
            operations=(OperationShare("OPS-1"),),
        )

        result = engine.distribute(Decimal("1234.567"), rule)

        assert len(result) == 1
        assert result[0].operation_cd == "OPS-1"
        assert result[0].amount == Decimal("1234.57")
        assert result[0].percentage == Decimal("100")

    def test_multiple_operations_rejected(self, engine):
        rule = DistributionRule(
            scoa_account_id="6100",
            distribution_type=DistributionType.DIRECT,
            operations=(OperationShare("OPS-1"), OperationShare("OPS-2")),
        )

        with pytest.raises(ValueError, match="exactly one operation"):
            engine.distribute(100, rule)


class TestPercentage:

    def test_exact_percentages(self, engine):
        result = engine.distribute(Decimal("1000"), percentage_rule(("A", 50), ("B", 30), ("C", 20)))

        assert [r.amount for r in result] == [Decimal("500.00"), Decimal("300.00"), Decimal("200.00")]
        assert [r.percentage for r in result] == [Decimal("50"), Decimal("30"), Decimal("20")]

    def test_rounding_residual_keeps_total(self, engine):
        result = engine.distribute(Decimal("10"), percentage_rule(("A", "33.34"), ("B", "33.33"), ("C", "33.33")))

        assert [r.amount for r in result] == [Decimal("3.34"), Decimal("3.33"), Decimal("3.33")]

    def test_percentages_are_clamped(self, engine):
        result = engine.distribute(Decimal("250"), percentage_rule(("A", 150), ("B", -20)))

        assert [r.amount for r in result] == [Decimal("250.00"), Decimal("0.00")]
        assert result[1].percentage == Decimal("0")

    def test_total_must_be_100(self, engine):
        with pytest.raises(ValueError, match="totals 90%"):
            engine.distribute(100, percentage_rule(("A", 60), ("B", 30)))

    def test_no_operations_rejected(self, engine):
        with pytest.raises(ValueError, match="no operations"):
            engine.distribute(100, percentage_rule())


class TestDynamic:

    def test_distribute_rejects_dynamic_rule(self, engine):
        rule = DistributionRule(scoa_account_id="6100", distribution_type=DistributionType.DYNAMIC)

        with pytest.raises(ValueError, match="distribute_dynamic"):
            engine.distribute(100, rule)

    def test_rows_for_same_operation_are_summed(self, engine):
        rows = [
            PresetBasisRow("HC-1", "A", Decimal("1"), "p1", "P1"),
            PresetBasisRow("HC-2", "A", Decimal("1"), "p2", "P2"),
            PresetBasisRow("HC-3", "B", Decimal("2"), "p2", "P2"),
        ]

        result = engine.distribute_dynamic(Decimal("100"), rows)

        assert [(r.operation_cd, r.amount) for r in result] == [
            ("A", Decimal("50.00")),
            ("B", Decimal("50.00")),
        ]
