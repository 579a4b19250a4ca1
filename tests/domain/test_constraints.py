"""Tests for MomentConfig — builder immutability, argument checks, loading."""

from datetime import UTC, date, datetime

import pytest
from pydantic import ValidationError

from momentval.domain.constraints import ComparisonRule, MomentConfig, Ref, RuleKind, ref
from momentval.domain.units import Unit


class TestBuilder:
    def test_defaults(self, config: MomentConfig) -> None:
        assert config.tz is None
        assert config.start_unit is None
        assert config.end_unit is None
        assert config.min_bound is None
        assert config.max_bound is None
        assert config.rules == ()

    def test_methods_return_new_instances(self, config: MomentConfig) -> None:
        derived = config.timezone("UTC").start_of("day")
        assert derived is not config
        assert config.tz is None
        assert config.start_unit is None
        assert derived.tz == "UTC"
        assert derived.start_unit is Unit.DAY

    def test_frozen(self, config: MomentConfig) -> None:
        with pytest.raises(ValidationError):
            config.tz = "UTC"  # type: ignore[misc]

    def test_shared_base_is_not_affected_by_rules(self, config: MomentConfig) -> None:
        base = config.start_of("day")
        first = base.is_before("2024-01-01")
        second = base.is_after("2020-01-01")
        assert base.rules == ()
        assert [r.kind for r in first.rules] == [RuleKind.IS_BEFORE]
        assert [r.kind for r in second.rules] == [RuleKind.IS_AFTER]

    def test_rules_keep_declaration_order(self, config: MomentConfig) -> None:
        cfg = (
            config.is_same_or_after("2024-01-01", "day")
            .is_before(ref("end"))
            .is_after(datetime(2023, 1, 1, tzinfo=UTC), "months")
            .is_same_or_before(None)
        )
        assert [r.kind for r in cfg.rules] == [
            RuleKind.IS_SAME_OR_AFTER,
            RuleKind.IS_BEFORE,
            RuleKind.IS_AFTER,
            RuleKind.IS_SAME_OR_BEFORE,
        ]
        assert cfg.rules[0].precision is Unit.DAY
        assert cfg.rules[1].date == Ref(path="end")
        assert cfg.rules[2].precision is Unit.MONTH
        assert cfg.rules[3].date is None

    def test_units_normalized(self, config: MomentConfig) -> None:
        cfg = config.start_of("days").end_of("M")
        assert cfg.start_unit is Unit.DAY
        assert cfg.end_unit is Unit.MONTH

    def test_bounds_accept_literals_and_refs(self, config: MomentConfig) -> None:
        cfg = config.min_date("2024-01-01").max_date(ref("$deadline"))
        assert cfg.min_bound == "2024-01-01"
        assert isinstance(cfg.max_bound, Ref)
        assert cfg.max_bound.is_context

    def test_date_bound_kept_as_date(self, config: MomentConfig) -> None:
        assert config.min_date(date(2024, 1, 1)).min_bound == date(2024, 1, 1)

    def test_datetime_bound_kept_as_datetime(self, config: MomentConfig) -> None:
        moment = datetime(2024, 1, 1, 12, tzinfo=UTC)
        assert config.max_date(moment).max_bound == moment


class TestArgumentChecks:
    def test_unknown_timezone(self, config: MomentConfig) -> None:
        with pytest.raises(ValidationError, match="unknown timezone"):
            config.timezone("Mars/Olympus_Mons")

    def test_unknown_unit(self, config: MomentConfig) -> None:
        with pytest.raises(ValidationError, match="unknown unit"):
            config.start_of("fortnight")

    def test_unknown_precision(self, config: MomentConfig) -> None:
        with pytest.raises(ValidationError, match="unknown unit"):
            config.is_before("2024-01-01", "fortnight")

    @pytest.mark.parametrize("value", [42, 1.5, ["2024-01-01"]])
    def test_rule_date_must_be_date_like(self, config: MomentConfig, value: object) -> None:
        with pytest.raises(ValidationError, match="must be a date string"):
            config.is_after(value)  # type: ignore[arg-type]

    def test_bound_must_be_date_like(self, config: MomentConfig) -> None:
        with pytest.raises(ValidationError, match="must be a date string"):
            config.max_date(1700000000)  # type: ignore[arg-type]


class TestRef:
    def test_sibling_path(self) -> None:
        r = ref("period.start")
        assert not r.is_context
        assert r.keys == ["period", "start"]
        assert str(r) == "ref:period.start"

    def test_context_path(self) -> None:
        r = ref("$today")
        assert r.is_context
        assert r.keys == ["today"]

    @pytest.mark.parametrize("path", ["", "$", "."])
    def test_empty_path_rejected(self, path: str) -> None:
        with pytest.raises(ValidationError):
            ref(path)


class TestComparisonRule:
    def test_default_precision(self) -> None:
        rule = ComparisonRule(kind=RuleKind.IS_BEFORE, date="2024-01-01")
        assert rule.precision is None
        assert rule.effective_precision is Unit.MILLISECOND


class TestModelValidate:
    def test_from_mapping(self) -> None:
        cfg = MomentConfig.model_validate(
            {
                "tz": "Europe/Paris",
                "start_unit": "day",
                "max_bound": {"path": "end"},
                "rules": [{"kind": "isAfter", "date": {"path": "$today"}, "precision": "day"}],
            }
        )
        assert cfg.tz == "Europe/Paris"
        assert cfg.start_unit is Unit.DAY
        assert cfg.max_bound == Ref(path="end")
        assert cfg.rules[0].kind is RuleKind.IS_AFTER
        assert cfg.rules[0].date == Ref(path="$today")
        assert cfg.rules[0].precision is Unit.DAY

    def test_unknown_rule_kind(self) -> None:
        with pytest.raises(ValidationError):
            MomentConfig.model_validate({"rules": [{"kind": "isAround", "date": "2024-01-01"}]})
