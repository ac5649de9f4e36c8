"""Tests for the assessment analysis engine and its cache.

Covers: the KYC/AML scenario, idempotence, forced regeneration, the
no-gaps failure, access checks and the conditional write.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone

import pytest

from compliance_core.enums import AssessmentStatus, GapCategory, Severity
from compliance_core.errors import AssessmentNotFound, ErrorKind
from compliance_core.schemas.assessment import AnalysisOptions, Assessment
from compliance_core.services.analysis_cache import AnalysisCache
from compliance_core.services.analysis_engine import AssessmentAnalysisEngine
from compliance_core.services.risk_scoring import analyse_gaps
from compliance_core.services.strategy_matrix import build_strategy_matrix
from compliance_core.store import DataStore, data_store
from factories import ORG_ID, OTHER_ORG_ID, make_gap

FIXED_TIME = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _frozen_clock():
    return FIXED_TIME


# ─── Test 1: Scenario ────────────────────────────────────────────────────────

class TestGenerateAnalysis:
    """Generation against the sample KYC/AML assessment."""

    def test_kyc_scenario(self, sample_assessment):
        result = AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis("assess-1")
        assert result.success is True
        kyc = result.data.risk_analysis["KYC_AML"]
        assert kyc.total_gaps == 2
        assert kyc.critical_gaps == 1
        assert kyc.score >= 7.5
        rows = {row.risk_area.value: row for row in result.data.strategy_matrix}
        assert rows["KYC_AML"].business_owner == "Chief Compliance Officer"
        assert rows["DATA_PROTECTION"].business_owner == "Chief Information Security Officer"

    def test_every_category_has_one_matrix_row(self, sample_assessment):
        result = AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis("assess-1")
        areas = [row.risk_area.value for row in result.data.strategy_matrix]
        assert sorted(areas) == sorted(result.data.risk_analysis)

    def test_four_mitigations_per_category(self, sample_assessment):
        result = AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis("assess-1")
        for analysis in result.data.risk_analysis.values():
            assert len(analysis.mitigation_strategies) == 4

    def test_analysis_is_persisted(self, sample_assessment):
        engine = AssessmentAnalysisEngine(data_store, clock=_frozen_clock)
        engine.generate_and_store_ai_analysis("assess-1")
        stored = data_store.assessments["assess-1"]
        assert stored.ai_generated_at == FIXED_TIME
        assert set(stored.ai_risk_analysis) == {"KYC_AML", "DATA_PROTECTION"}
        assert len(stored.ai_strategy_matrix) == 2

    def test_only_analysis_fields_written(self, sample_assessment):
        before = data_store.assessments["assess-1"]
        AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis("assess-1")
        after = data_store.assessments["assess-1"]
        assert after.status == before.status
        assert after.credits_used == before.credits_used
        assert after.completed_at == before.completed_at

    def test_metrics_included(self, sample_assessment):
        result = AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis("assess-1")
        assert result.data.metrics.total_risk_reduction == 40
        assert result.data.metrics.avg_remediation_days == 67


# ─── Test 2: Idempotence ─────────────────────────────────────────────────────

class TestIdempotence:
    """Repeated calls return the stored analysis unchanged."""

    def test_second_call_is_byte_identical(self, sample_assessment):
        engine = AssessmentAnalysisEngine(data_store)
        first = engine.generate_and_store_ai_analysis("assess-1")
        second = engine.generate_and_store_ai_analysis("assess-1")
        assert first.model_dump_json(by_alias=True) == second.model_dump_json(by_alias=True)

    def test_cached_call_does_not_write(self, sample_assessment):
        engine = AssessmentAnalysisEngine(data_store)
        engine.generate_and_store_ai_analysis("assess-1")

        calls = []
        real_save = data_store.save_analysis

        def _spy(*args, **kwargs):
            calls.append(args)
            return real_save(*args, **kwargs)

        data_store.save_analysis = _spy
        try:
            engine.generate_and_store_ai_analysis("assess-1")
        finally:
            del data_store.save_analysis
        assert calls == []

    def test_cached_result_survives_new_gaps(self, sample_assessment):
        engine = AssessmentAnalysisEngine(data_store)
        first = engine.generate_and_store_ai_analysis("assess-1")
        data_store.add_gap(make_gap("gap-new", GapCategory.COMPLIANCE_TRAINING, Severity.LOW))
        second = engine.generate_and_store_ai_analysis("assess-1")
        assert "COMPLIANCE_TRAINING" not in second.data.risk_analysis
        assert second.data.generated_at == first.data.generated_at


# ─── Test 3: Forced regeneration ─────────────────────────────────────────────

class TestForceRegenerate:
    """force_regenerate recomputes and advances generatedAt."""

    def test_force_advances_generated_at_with_frozen_clock(self, sample_assessment):
        engine = AssessmentAnalysisEngine(data_store, clock=_frozen_clock)
        first = engine.generate_and_store_ai_analysis("assess-1")
        forced = engine.generate_and_store_ai_analysis(
            "assess-1", options=AnalysisOptions(force_regenerate=True)
        )
        assert forced.success is True
        assert forced.data.generated_at > first.data.generated_at
        assert forced.data.generated_at == FIXED_TIME + timedelta(microseconds=1)

    def test_force_picks_up_new_gaps(self, sample_assessment):
        engine = AssessmentAnalysisEngine(data_store)
        engine.generate_and_store_ai_analysis("assess-1")
        data_store.add_gap(make_gap("gap-new", GapCategory.COMPLIANCE_TRAINING, Severity.MEDIUM))
        forced = engine.generate_and_store_ai_analysis(
            "assess-1", options=AnalysisOptions(force_regenerate=True)
        )
        assert "COMPLIANCE_TRAINING" in forced.data.risk_analysis
        areas = [row.risk_area.value for row in forced.data.strategy_matrix]
        assert "COMPLIANCE_TRAINING" in areas

    def test_force_on_fresh_assessment_generates(self, sample_assessment):
        result = AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis(
            "assess-1", options=AnalysisOptions(force_regenerate=True)
        )
        assert result.success is True


# ─── Test 4: Failures ────────────────────────────────────────────────────────

class TestFailures:
    """Typed failures are returned, not raised."""

    def test_no_gaps(self, empty_assessment):
        result = AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis("assess-empty")
        assert result.success is False
        assert result.data is None
        assert "No gaps" in result.error.message
        assert result.error.kind == ErrorKind.PRECONDITION_FAILED
        assert result.error.code == "NO_GAPS_FOUND"

    def test_no_gaps_writes_nothing(self, empty_assessment):
        AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis("assess-empty")
        assert data_store.assessments["assess-empty"].ai_generated_at is None

    def test_unknown_assessment(self):
        result = AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis("missing")
        assert result.success is False
        assert result.error.kind == ErrorKind.NOT_FOUND
        assert result.error.code == "ASSESSMENT_NOT_FOUND"

    def test_other_organization_denied(self, sample_assessment):
        result = AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis(
            "assess-1", organization_id=OTHER_ORG_ID
        )
        assert result.success is False
        assert result.error.kind == ErrorKind.ACCESS_DENIED

    def test_owning_organization_allowed(self, sample_assessment):
        result = AssessmentAnalysisEngine(data_store).generate_and_store_ai_analysis(
            "assess-1", organization_id=ORG_ID
        )
        assert result.success is True


# ─── Test 5: Stored analysis lookup ──────────────────────────────────────────

class TestStoredAnalysis:
    """get_stored_analysis never generates."""

    def test_not_generated_raises(self, sample_assessment):
        engine = AssessmentAnalysisEngine(data_store)
        with pytest.raises(AssessmentNotFound) as exc_info:
            engine.get_stored_analysis("assess-1")
        assert exc_info.value.code == "AI_ANALYSIS_NOT_FOUND"

    def test_returns_stored(self, sample_assessment):
        engine = AssessmentAnalysisEngine(data_store)
        generated = engine.generate_and_store_ai_analysis("assess-1")
        stored = engine.get_stored_analysis("assess-1")
        assert stored == generated.data


# ─── Test 6: Conditional write ───────────────────────────────────────────────

class TestConditionalWrite:
    """At most one effective generation per assessment."""

    def _analysis(self):
        gaps = [make_gap("g1", GapCategory.KYC_AML, Severity.HIGH)]
        analysis = analyse_gaps(gaps)
        return analysis, build_strategy_matrix(analysis)

    def _store_with_assessment(self) -> DataStore:
        store = DataStore()
        store.add_assessment(
            Assessment(
                id="a1",
                organization_id=ORG_ID,
                user_id="u1",
                template_id="t1",
                status=AssessmentStatus.COMPLETED,
                gaps=[make_gap("g1", GapCategory.KYC_AML, Severity.HIGH, assessment_id="a1")],
            )
        )
        return store

    def test_stale_expectation_rejected(self):
        store = self._store_with_assessment()
        analysis, matrix = self._analysis()
        assert store.save_analysis("a1", analysis, matrix, FIXED_TIME, None) is True
        later = FIXED_TIME + timedelta(seconds=5)
        assert store.save_analysis("a1", analysis, matrix, later, None) is False
        assert store.assessments["a1"].ai_generated_at == FIXED_TIME

    def test_lost_write_returns_current_value(self):
        store = self._store_with_assessment()
        analysis, matrix = self._analysis()
        store.save_analysis("a1", analysis, matrix, FIXED_TIME, None)

        cache = AnalysisCache(store)
        later = FIXED_TIME + timedelta(seconds=5)
        data = cache.store("a1", analysis, matrix, later, expected_generated_at=None)
        assert data.generated_at == FIXED_TIME

    def test_concurrent_generation_yields_single_result(self):
        store = self._store_with_assessment()
        engine = AssessmentAnalysisEngine(store)
        results = []
        barrier = threading.Barrier(8)

        def _run():
            barrier.wait()
            results.append(engine.generate_and_store_ai_analysis("a1"))

        threads = [threading.Thread(target=_run) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(r.success for r in results)
        stored_at = store.assessments["a1"].ai_generated_at
        assert {r.data.generated_at for r in results} == {stored_at}
