"""
Tests for carbon_gap/engine/service.py.

What we test
------------
CarbonAccountingService.recompute_one():
  - Worked example end-to-end (305.00 / 5.50 / 299.50 / 6.10 / 0.66).
  - Idempotent: same record → identical metrics.
  - Malformed input behaves like 0.
  - Config overrides flow into every estimator.

assess() / assess_all():
  - Tier and recommendations match the gap; the tier is chosen from the
    rounded gap.
  - Order of input records is preserved.

apply_edit():
  - Recomputes the edited record in full; original record untouched.
  - Accepts external (camelCase) field names; rejects unknown fields.

validate_engine_config(), find_record(), replace_record().
"""

from __future__ import annotations

import pytest

from carbon_gap.config import AppConfig, CreditConfig, FootprintFactors, SolarConfig, TierBoundaries
from carbon_gap.engine.recommendations import NEUTRAL_MESSAGE
from carbon_gap.engine.rounding import round_metric
from carbon_gap.engine.service import (
    CarbonAccountingService,
    find_record,
    replace_record,
    validate_engine_config,
)
from carbon_gap.exceptions import InvalidConfigurationError
from carbon_gap.models.site import DerivedMetrics, SiteRecord
from carbon_gap.taxonomy.tiers import RecommendationTier


# ── recompute_one ──────────────────────────────────────────────────────────────

class TestRecomputeOne:
    def test_worked_example(self, service, worked_example_record):
        m = service.recompute_one(worked_example_record)
        assert m == DerivedMetrics(
            carbon_footprint=305.00,
            carbon_sink=5.50,
            gap=299.50,
            carbon_credits=6.10,
            land_for_solar=0.66,
        )

    def test_idempotent(self, service, worked_example_record):
        assert service.recompute_one(worked_example_record) == service.recompute_one(
            worked_example_record
        )

    def test_gap_matches_footprint_minus_sink(self, service):
        record = SiteRecord(name="S", excavation=12.345, afforestation=7.891)
        m = service.recompute_one(record)
        assert m.gap == round_metric(m.carbon_footprint - m.carbon_sink)

    def test_malformed_field_matches_zero(self, service):
        malformed = SiteRecord(name="S", excavation="abc", transportation=50)
        zeroed = SiteRecord(name="S", excavation=0, transportation=50)
        assert service.recompute_one(malformed) == service.recompute_one(zeroed)

    def test_credits_follow_footprint_not_gap(self, service):
        no_sink = SiteRecord(name="A", excavation=1000)
        with_sink = SiteRecord(name="B", excavation=1000, afforestation=1000)
        a = service.recompute_one(no_sink)
        b = service.recompute_one(with_sink)
        assert a.gap != b.gap
        assert a.carbon_credits == b.carbon_credits == 10.0

    def test_land_follows_energy_only(self, service):
        a = service.recompute_one(SiteRecord(name="A", energy_consumption=602.25))
        b = service.recompute_one(
            SiteRecord(name="B", energy_consumption=602.25, excavation=9999)
        )
        assert a.land_for_solar == b.land_for_solar == 2.0

    def test_config_overrides_are_used(self, worked_example_record):
        config = AppConfig(
            footprint=FootprintFactors(methane_emission=28.0),
            credits=CreditConfig(rate_per_ton=100.0),
        )
        m = CarbonAccountingService(config).recompute_one(worked_example_record)
        assert m.carbon_footprint == 311.00
        assert m.carbon_credits == 31.10

    def test_invalid_solar_config_raises(self, worked_example_record):
        service = CarbonAccountingService(AppConfig(solar=SolarConfig(panel_efficiency=0)))
        with pytest.raises(InvalidConfigurationError):
            service.recompute_one(worked_example_record)

    def test_default_config_when_none(self, worked_example_record):
        assert CarbonAccountingService().recompute_one(worked_example_record).gap == 299.50


# ── assess / assess_all ────────────────────────────────────────────────────────

class TestAssess:
    def test_worked_example_is_near_neutral(self, service, worked_example_record):
        a = service.assess(worked_example_record)
        assert a.tier is RecommendationTier.NEAR_NEUTRAL
        assert a.record is worked_example_record
        assert a.recommendations[0].startswith("You're close to carbon neutrality")

    def test_surplus_sink_is_neutral(self, service):
        a = service.assess(SiteRecord(name="Forest", afforestation=1000))
        assert a.metrics.gap == -400.0
        assert a.tier is RecommendationTier.NEUTRAL
        assert a.recommendations == (NEUTRAL_MESSAGE,)

    def test_custom_tier_boundaries(self, worked_example_record):
        config = AppConfig(
            tiers=TierBoundaries(neutral_max=0, near_neutral_max=100, moderate_max=200)
        )
        a = CarbonAccountingService(config).assess(worked_example_record)
        assert a.tier is RecommendationTier.SIGNIFICANT

    def test_tier_uses_rounded_gap(self, service):
        # 1219.5171 * 0.82 == 1000.004022, just above the Near-Neutral bound
        a = service.assess(SiteRecord(name="Edge", energy_consumption=1219.5171))
        assert a.metrics.carbon_footprint == 1000.0
        assert a.metrics.gap == 1000.0
        assert a.tier is RecommendationTier.NEAR_NEUTRAL

    def test_tier_just_over_bound_is_moderate(self, service):
        # 1219.5245 * 0.82 == 1000.01009
        a = service.assess(SiteRecord(name="Over", energy_consumption=1219.5245))
        assert a.metrics.gap == 1000.01
        assert a.tier is RecommendationTier.MODERATE

    def test_assess_all_preserves_order(self, service):
        records = [SiteRecord(name=n, excavation=i) for i, n in enumerate("CAB")]
        names = [a.name for a in service.assess_all(records)]
        assert names == ["C", "A", "B"]

    def test_assess_all_empty(self, service):
        assert service.assess_all([]) == []


# ── apply_edit ─────────────────────────────────────────────────────────────────

class TestApplyEdit:
    def test_recomputes_all_metrics(self, service, worked_example_record):
        a = service.apply_edit(worked_example_record, "energy_consumption", "1000")
        assert a.record.energy_consumption == 1000.0
        assert a.metrics.carbon_footprint == 961.00
        assert a.metrics.land_for_solar == 3.32
        assert a.metrics.gap == 955.50

    def test_original_record_unchanged(self, service, worked_example_record):
        service.apply_edit(worked_example_record, "excavation", "0")
        assert worked_example_record.excavation == 100

    def test_external_field_name(self, service, worked_example_record):
        a = service.apply_edit(worked_example_record, "methaneEmission", "0")
        assert a.metrics.carbon_footprint == 255.00

    def test_non_numeric_value_becomes_zero(self, service, worked_example_record):
        edited = service.apply_edit(worked_example_record, "excavation", "lots")
        zeroed = service.apply_edit(worked_example_record, "excavation", 0)
        assert edited == zeroed
        assert edited.metrics.carbon_footprint == 255.00

    def test_edit_can_change_tier(self, service, worked_example_record):
        a = service.apply_edit(worked_example_record, "afforestation", "2000")
        assert a.tier is RecommendationTier.NEUTRAL

    def test_unknown_field_raises(self, service, worked_example_record):
        with pytest.raises(ValueError, match="Unknown measurement field"):
            service.apply_edit(worked_example_record, "rainfall", "10")

    def test_name_is_not_editable(self, service, worked_example_record):
        with pytest.raises(ValueError):
            service.apply_edit(worked_example_record, "name", "Other")


# ── validate_engine_config ─────────────────────────────────────────────────────

class TestValidateEngineConfig:
    def test_defaults_pass(self):
        validate_engine_config(AppConfig())

    def test_zero_insolation_fails(self):
        with pytest.raises(InvalidConfigurationError):
            validate_engine_config(
                AppConfig(solar=SolarConfig(insolation_kwh_per_m2_day=0.0))
            )

    def test_negative_solar_pair_fails(self):
        solar = SolarConfig(panel_efficiency=-0.15, insolation_kwh_per_m2_day=-5.5)
        with pytest.raises(InvalidConfigurationError):
            validate_engine_config(AppConfig(solar=solar))

    def test_zero_divisor_fails(self):
        with pytest.raises(InvalidConfigurationError):
            validate_engine_config(AppConfig(credits=CreditConfig(kg_per_ton=0.0)))


# ── find_record / replace_record ───────────────────────────────────────────────

def test_find_record():
    records = [SiteRecord(name="A"), SiteRecord(name="B")]
    assert find_record(records, "B") is records[1]


def test_find_record_missing_raises():
    with pytest.raises(KeyError):
        find_record([SiteRecord(name="A")], "Z")


def test_replace_record_swaps_only_matching_name():
    records = [SiteRecord(name="A"), SiteRecord(name="B"), SiteRecord(name="C")]
    updated = SiteRecord(name="B", excavation=5)
    result = replace_record(records, updated)
    assert [r.name for r in result] == ["A", "B", "C"]
    assert result[1] is updated
    assert result[0] is records[0] and result[2] is records[2]
    assert records[1].excavation == 0


def test_replace_record_missing_raises():
    with pytest.raises(KeyError):
        replace_record([SiteRecord(name="A")], SiteRecord(name="Z"))
