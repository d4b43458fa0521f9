"""Unit tests for the aggregator and the search pass runner.

Covers:
- Company selection (inactive, custom, missing identifiers, name filter)
- Fan-out/join and per-company failure isolation
- Dedup of first sightings and resightings
- Miss counting and expiry after the configured number of passes
- Overlapping pass protection
"""

import threading
import time
from unittest.mock import patch

import pytest

from jobscout.adapters.exceptions import AdapterHTTPError
from jobscout.config.models import AdvancedConfig, AppConfig, ExpiryConfig
from jobscout.domain.models import Company, JobFilters, JobStatus
from jobscout.logging import log_context
from jobscout.logging.context import get_log_context
from jobscout.persistence import CompanyRepository, JobRepository, get_session
from jobscout.pipeline import Aggregator, SearchPipeline
from jobscout.utils.hashing import compute_job_id
from tests.helpers.fixture_adapter import StaticAdapter, StaticAdapterFactory, make_scraped_job

ACME = Company(name="Acme", provider="greenhouse", greenhouse_id="acme")
GLOBEX = Company(name="Globex", provider="lever", lever_id="globex")
INACTIVE = Company(name="Dormant", provider="lever", lever_id="dormant", active=False)
MANUAL = Company(name="Manual", provider="custom")


@pytest.fixture
def factory():
    factory = StaticAdapterFactory()
    with patch("jobscout.pipeline.aggregator.get_adapter", side_effect=factory):
        yield factory


# ============================================================================
# Aggregator
# ============================================================================


class TestAggregator:
    def test_skips_inactive_and_custom_companies(self, factory):
        factory.set_postings(ACME, ["Engineer"])
        factory.set_postings(INACTIVE, ["Engineer"])
        factory.set_postings(MANUAL, ["Engineer"])

        result = Aggregator().collect([ACME, INACTIVE, MANUAL])

        assert [job.company for job in result.jobs] == ["Acme"]
        assert result.attempted_companies == ["Acme"]
        assert factory.adapters["Dormant"].calls == 0
        assert factory.adapters["Manual"].calls == 0

    def test_company_without_adapter_is_reported_not_attempted(self, factory):
        factory.set_postings(ACME, ["Engineer"])

        result = Aggregator().collect([ACME, GLOBEX])

        stats = {s.company: s for s in result.company_stats}
        assert stats["Globex"].attempted is False
        assert result.attempted_companies == ["Acme"]

    def test_results_are_joined_in_company_order(self, factory):
        slow = factory.set_postings(ACME, ["Slow Role"])
        factory.set_postings(GLOBEX, ["Fast Role"])
        original = slow.fetch_jobs

        def delayed():
            time.sleep(0.05)
            return original()

        slow.fetch_jobs = delayed

        result = Aggregator(AdvancedConfig(max_workers=2)).collect([ACME, GLOBEX])

        assert [job.title for job in result.jobs] == ["Slow Role", "Fast Role"]
        assert [s.fetched_count for s in result.company_stats] == [1, 1]

    def test_one_failing_company_does_not_block_others(self, factory):
        broken = factory.set_postings(ACME, ["Engineer"])
        broken.error = AdapterHTTPError("HTTP 503", status_code=503, url="https://x")
        factory.set_postings(GLOBEX, ["Designer"])

        result = Aggregator().collect([ACME, GLOBEX])

        assert [job.title for job in result.jobs] == ["Designer"]
        stats = {s.company: s for s in result.company_stats}
        assert stats["Acme"].had_errors
        assert stats["Acme"].attempted
        assert not stats["Globex"].had_errors

    def test_name_filter_is_case_insensitive_and_ignores_unknown(self, factory, caplog):
        factory.set_postings(ACME, ["Engineer"])
        factory.set_postings(GLOBEX, ["Designer"])

        with caplog.at_level("WARNING"):
            result = Aggregator().collect([ACME, GLOBEX, MANUAL], names=["GLOBEX", "Nope", "manual"])

        assert [job.company for job in result.jobs] == ["Globex"]
        assert "Company not found: Nope" in caplog.text
        assert "Manual has no scraper configured" in caplog.text

    def test_workers_inherit_log_context(self, factory):
        seen = {}

        class ContextRecordingAdapter(StaticAdapter):
            def fetch_jobs(self):
                seen.update(get_log_context())
                return []

        factory.adapters["Acme"] = ContextRecordingAdapter(ACME)

        with log_context(run_id="run-123"):
            Aggregator().collect([ACME])

        assert seen["run_id"] == "run-123"
        assert seen["company"] == "Acme"


# ============================================================================
# SearchPipeline
# ============================================================================


@pytest.fixture
def pipeline(memory_db, factory):
    with get_session() as session:
        CompanyRepository(session).sync([ACME, GLOBEX])
    return SearchPipeline(AppConfig(expiry=ExpiryConfig(threshold=3)))


def stored_job(company, title):
    with get_session() as session:
        return JobRepository(session).get_by_id(compute_job_id(company, title))


class TestSearchPipeline:
    def test_first_pass_inserts_new_jobs(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer", "Data Engineer"])
        factory.set_postings(GLOBEX, ["Designer"])

        result = pipeline.run_once()

        assert [job.title for job in result.new_jobs] == [
            "Backend Engineer",
            "Data Engineer",
            "Designer",
        ]
        assert all(job.status == JobStatus.NEW for job in result.new_jobs)
        assert result.scraped_count == 3
        assert result.run_id

    def test_second_identical_pass_is_idempotent(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer"])
        factory.set_postings(GLOBEX, ["Designer"])

        pipeline.run_once()
        second = pipeline.run_once()

        assert second.new_jobs == []
        assert second.seen_count == 2
        with get_session() as session:
            jobs = JobRepository(session).get_jobs()
        assert len(jobs) == 2
        assert all(job.expiry_check_count == 0 for job in jobs)
        assert all(job.status == JobStatus.SEEN for job in jobs)

    def test_duplicate_identities_in_one_pass_are_inserted_once(self, pipeline, factory):
        adapter = factory.set_postings(ACME, ["Engineer"])
        adapter.postings.append(make_scraped_job("ACME", "  engineer "))
        factory.set_postings(GLOBEX, [])

        result = pipeline.run_once()

        assert len(result.new_jobs) == 1

    def test_job_expires_after_three_missed_passes(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer", "Keeper"])
        factory.set_postings(GLOBEX, [])
        pipeline.run_once()  # pass N

        factory.set_postings(ACME, ["Keeper"])
        pipeline.run_once()  # N+1
        pipeline.run_once()  # N+2
        job = stored_job("Acme", "Backend Engineer")
        assert job.status != JobStatus.EXPIRED
        assert job.expiry_check_count == 2

        result = pipeline.run_once()  # N+3
        job = stored_job("Acme", "Backend Engineer")
        assert job.status == JobStatus.EXPIRED
        assert job.expired_at is not None
        assert result.expired_job_ids == [job.job_id]
        assert stored_job("Acme", "Keeper").expiry_check_count == 0

    def test_resighting_before_threshold_resets_counter(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer"])
        factory.set_postings(GLOBEX, [])
        pipeline.run_once()  # N

        factory.set_postings(ACME, [])
        pipeline.run_once()  # N+1
        factory.set_postings(ACME, ["Backend Engineer"])
        pipeline.run_once()  # N+2, seen again
        assert stored_job("Acme", "Backend Engineer").expiry_check_count == 0

        factory.set_postings(ACME, [])
        pipeline.run_once()
        pipeline.run_once()
        job = stored_job("Acme", "Backend Engineer")
        assert job.status != JobStatus.EXPIRED
        assert job.expiry_check_count == 2

    def test_expired_job_is_revived_when_seen_again(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer"])
        factory.set_postings(GLOBEX, [])
        pipeline.run_once()
        factory.set_postings(ACME, [])
        for _ in range(3):
            pipeline.run_once()
        assert stored_job("Acme", "Backend Engineer").status == JobStatus.EXPIRED

        factory.set_postings(ACME, ["Backend Engineer"])
        result = pipeline.run_once()

        job = stored_job("Acme", "Backend Engineer")
        assert result.new_jobs == []
        assert job.status == JobStatus.SEEN
        assert job.expired_at is None
        assert job.expiry_check_count == 0

    def test_resighting_keeps_user_status(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer"])
        factory.set_postings(GLOBEX, [])
        pipeline.run_once()
        job = stored_job("Acme", "Backend Engineer")
        with get_session() as session:
            JobRepository(session).update_status(job.job_id, JobStatus.APPLIED)

        pipeline.run_once()

        assert stored_job("Acme", "Backend Engineer").status == JobStatus.APPLIED

    def test_company_filter_only_counts_misses_for_selected_companies(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer"])
        factory.set_postings(GLOBEX, ["Designer"])
        pipeline.run_once()

        factory.set_postings(ACME, [])
        pipeline.run_once(companies=["acme"])

        assert stored_job("Acme", "Backend Engineer").expiry_check_count == 1
        assert stored_job("Globex", "Designer").expiry_check_count == 0

    def test_jobs_of_deactivated_company_still_expire(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer"])
        factory.set_postings(GLOBEX, ["Designer"])
        pipeline.run_once()

        with get_session() as session:
            CompanyRepository(session).sync([GLOBEX])
        for _ in range(3):
            pipeline.run_once()

        job = stored_job("Acme", "Backend Engineer")
        assert factory.adapters["Acme"].calls == 1
        assert job.expiry_check_count == 3
        assert job.status == JobStatus.EXPIRED
        assert stored_job("Globex", "Designer").expiry_check_count == 0

    def test_jobs_of_company_without_adapter_still_expire(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer"])
        factory.set_postings(GLOBEX, [])
        pipeline.run_once()

        del factory.adapters["Acme"]
        for _ in range(3):
            pipeline.run_once()

        assert stored_job("Acme", "Backend Engineer").status == JobStatus.EXPIRED

    def test_revived_job_gets_its_workflow_status_back(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer"])
        factory.set_postings(GLOBEX, [])
        pipeline.run_once()
        job = stored_job("Acme", "Backend Engineer")
        with get_session() as session:
            JobRepository(session).update_status(job.job_id, JobStatus.APPLIED)

        factory.set_postings(ACME, [])
        for _ in range(3):
            pipeline.run_once()
        assert stored_job("Acme", "Backend Engineer").status == JobStatus.EXPIRED

        factory.set_postings(ACME, ["Backend Engineer"])
        pipeline.run_once()

        assert stored_job("Acme", "Backend Engineer").status == JobStatus.APPLIED

    def test_failed_company_counts_as_a_miss(self, pipeline, factory):
        adapter = factory.set_postings(ACME, ["Backend Engineer"])
        factory.set_postings(GLOBEX, [])
        pipeline.run_once()

        adapter.error = AdapterHTTPError("HTTP 500", status_code=500, url="https://x")
        result = pipeline.run_once()

        assert result.had_errors
        assert stored_job("Acme", "Backend Engineer").expiry_check_count == 1

    def test_expired_jobs_hidden_from_default_listing(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer"])
        factory.set_postings(GLOBEX, [])
        pipeline.run_once()
        factory.set_postings(ACME, [])
        for _ in range(3):
            pipeline.run_once()

        with get_session() as session:
            repo = JobRepository(session)
            assert repo.get_jobs() == []
            assert len(repo.get_jobs(JobFilters(include_expired=True))) == 1

    def test_overlapping_pass_is_skipped(self, pipeline, factory):
        factory.set_postings(ACME, ["Backend Engineer"])
        pipeline._lock.acquire()
        try:
            result = pipeline.run_once()
        finally:
            pipeline._lock.release()

        assert result.skipped
        assert result.new_jobs == []
        assert factory.adapters["Acme"].calls == 0

    def test_lock_released_after_pass(self, pipeline, factory):
        factory.set_postings(ACME, [])
        pipeline.run_once()
        assert pipeline._lock.acquire(blocking=False)
        pipeline._lock.release()

    def test_concurrent_passes_do_not_overlap(self, pipeline, factory):
        gate = threading.Event()
        adapter = factory.set_postings(ACME, ["Backend Engineer"])
        original = adapter.fetch_jobs

        def blocking():
            gate.wait(timeout=5)
            return original()

        adapter.fetch_jobs = blocking
        results = []
        worker = threading.Thread(target=lambda: results.append(pipeline.run_once()))
        worker.start()
        while not pipeline._lock.locked():
            time.sleep(0.01)

        skipped = pipeline.run_once()
        gate.set()
        worker.join(timeout=5)

        assert skipped.skipped
        assert len(results[0].new_jobs) == 1
