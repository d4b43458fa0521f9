"""End-to-end search passes with real adapters and a mocked HTTP layer.

Flow: companies in config -> adapters (HTTP mocked) -> dedup -> expiry ->
listing and scoring through JobResearchService, on an in-memory SQLite store.
"""

from unittest.mock import patch

import pytest
import requests

from jobscout.config import AppConfig, CompanyConfig, ExpiryConfig
from jobscout.domain.models import JobFilters, JobStatus
from jobscout.persistence import close_database, init_database
from jobscout.service import JobResearchService

GREENHOUSE_URL = "https://boards-api.greenhouse.io/v1/boards/acme/jobs"
LEVER_URL = "https://api.lever.co/v0/postings/globex"


def greenhouse_job(title, job_id):
    return {
        "id": job_id,
        "title": title,
        "absolute_url": f"https://boards.greenhouse.io/acme/jobs/{job_id}",
        "content": (
            "&lt;p&gt;Build APIs with Python, Django and PostgreSQL.&lt;/p&gt;"
            "&lt;h3&gt;Requirements&lt;/h3&gt;&lt;ul&gt;&lt;li&gt;5+ years of experience&lt;/li&gt;&lt;/ul&gt;"
        ),
        "location": {"name": "Remote - US"},
    }


LEVER_POSTINGS = [
    {
        "id": "abc",
        "text": "Product Designer",
        "hostedUrl": "https://jobs.lever.co/globex/abc",
        "descriptionPlain": "Design flows in Figma for our Berlin office.",
        "categories": {"location": "Berlin"},
        "lists": [{"text": "Requirements", "content": "<li>Portfolio</li>"}],
    }
]


class FakeATS:
    """Routes Session.request calls to per-URL payloads."""

    def __init__(self):
        self.payloads = {}
        self.failing = set()
        self.requests = []

    def __call__(self, method, url, params=None, json=None, timeout=None):
        self.requests.append((method, url, params))
        if url in self.failing:
            raise requests.exceptions.ConnectionError("connection refused")
        response = requests.Response()
        response.status_code = 200
        response.reason = "OK"
        response.json = lambda: self.payloads[url]
        return response


@pytest.fixture
def integration_database():
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def fake_ats():
    fake = FakeATS()
    fake.payloads[GREENHOUSE_URL] = {"jobs": [greenhouse_job("Senior Backend Engineer", 1)]}
    fake.payloads[LEVER_URL] = LEVER_POSTINGS
    with patch.object(requests.Session, "request", side_effect=fake):
        yield fake


@pytest.fixture
def service(integration_database):
    app_config = AppConfig(
        companies=[
            CompanyConfig(name="Acme", provider="greenhouse", greenhouse_id="acme"),
            CompanyConfig(name="Globex", provider="lever", lever_id="globex"),
            CompanyConfig(name="Initech", provider="workday"),
            CompanyConfig(name="Manual", provider="custom"),
        ],
        expiry=ExpiryConfig(threshold=3),
    )
    service = JobResearchService(app_config)
    service.sync_companies()
    return service


class TestSearchPassEndToEnd:
    def test_first_pass_stores_normalized_jobs(self, service, fake_ats):
        new_jobs = service.search_new_jobs()

        by_title = {job.title: job for job in new_jobs}
        assert set(by_title) == {"Senior Backend Engineer", "Product Designer"}

        backend = by_title["Senior Backend Engineer"]
        assert backend.company == "Acme"
        assert backend.remote is True
        assert backend.location == "Remote - US"
        assert backend.tech_stack == ["Python", "Django", "PostgreSQL"]
        assert backend.requirements.startswith("Requirements")
        assert backend.status == JobStatus.NEW

        designer = by_title["Product Designer"]
        assert designer.remote is False
        assert designer.requirements == "Portfolio"
        assert designer.tech_stack == []

        requested = {url for _, url, _ in fake_ats.requests}
        assert requested == {GREENHOUSE_URL, LEVER_URL}

    def test_repeat_pass_finds_nothing_new(self, service, fake_ats):
        service.search_new_jobs()

        assert service.search_new_jobs() == []
        jobs = service.get_jobs()
        assert {job.status for job in jobs} == {JobStatus.SEEN}
        assert all(job.expiry_check_count == 0 for job in jobs)

    def test_removed_posting_expires_after_three_passes(self, service, fake_ats):
        service.search_new_jobs()
        fake_ats.payloads[GREENHOUSE_URL] = {"jobs": []}

        for _ in range(3):
            service.search_new_jobs()

        assert [job.title for job in service.get_jobs()] == ["Product Designer"]
        expired = service.get_jobs(JobFilters(status=JobStatus.EXPIRED))
        assert [job.title for job in expired] == ["Senior Backend Engineer"]

    def test_unreachable_board_does_not_block_others(self, service, fake_ats):
        fake_ats.failing.add(GREENHOUSE_URL)

        new_jobs = service.search_new_jobs()

        assert [job.title for job in new_jobs] == ["Product Designer"]

    def test_moved_posting_keeps_identity_and_updates_url(self, service, fake_ats):
        service.search_new_jobs()
        moved = greenhouse_job("Senior Backend Engineer", 2)
        fake_ats.payloads[GREENHOUSE_URL] = {"jobs": [moved]}

        assert service.search_new_jobs() == []
        (job,) = service.get_jobs(JobFilters(companies=["acme"]))
        assert job.url == "https://boards.greenhouse.io/acme/jobs/2"

    def test_stored_job_can_be_scored(self, service, fake_ats):
        (job,) = [j for j in service.search_new_jobs() if j.company == "Acme"]

        result = service.analyze_job_fit(
            job.job_id,
            "Current role: Backend Engineer. Python, Django and PostgreSQL every day.",
            user_domains=["backend-engineering"],
        )

        assert result.alignment_score == 100
        (stored,) = service.get_jobs(JobFilters(min_alignment=90))
        assert stored.job_id == job.job_id
