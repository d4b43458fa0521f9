"""Unit tests for ATS adapters."""

from unittest.mock import Mock, patch

import pytest
import requests

from jobscout.adapters import (
    AdapterConfigurationError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
    AshbyAdapter,
    CustomAdapter,
    GreenhouseAdapter,
    LeverAdapter,
    SmartRecruitersAdapter,
    WorkdayAdapter,
    clean_html,
    extract_requirements,
    get_adapter,
    is_remote,
)
from jobscout.adapters.base import BaseAdapter
from jobscout.config.models import AdvancedConfig
from jobscout.domain.models import Company
from jobscout.utils.hashing import compute_job_id


def make_company(provider: str, **ids) -> Company:
    return Company(name="Example Corp", provider=provider, **ids)


def http_response(status_code=200, json_data=None, text="", reason="OK"):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.reason = reason
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = json_data
    return response


# ============================================================================
# Shared helpers
# ============================================================================


class TestHelpers:
    def test_clean_html_strips_tags_and_entities(self):
        assert clean_html("<p>Build &amp; ship</p><p>Fast<br/>always</p>") == "Build & ship\nFast\nalways"

    def test_clean_html_decodes_double_escaped_markup(self):
        assert clean_html("&lt;p&gt;Hello &amp;amp; welcome&lt;/p&gt;") == "Hello & welcome"

    def test_clean_html_empty(self):
        assert clean_html(None) == ""
        assert clean_html("") == ""

    def test_extract_requirements_finds_section(self):
        text = "About us. We build things. Requirements: 5 years of Python."
        assert extract_requirements(text) == "Requirements: 5 years of Python."

    def test_extract_requirements_is_bounded(self):
        text = "Qualifications " + "x" * 2000
        assert len(extract_requirements(text)) == 500

    def test_extract_requirements_falls_back_to_prefix(self):
        text = "a" * 800
        assert extract_requirements(text) == "a" * 500

    @pytest.mark.parametrize(
        "text",
        ["Remote (US)", "Work from home", "Home-based role", "Work from anywhere", "WFH friendly"],
    )
    def test_is_remote_positive(self, text):
        assert is_remote(text)

    @pytest.mark.parametrize("text", ["London, UK", "Onsite in Berlin", "Remoteness is not a word here"])
    def test_is_remote_negative(self, text):
        assert not is_remote(text)


class TestBaseAdapter:
    def test_cannot_instantiate_abstract_class(self):
        with pytest.raises(TypeError):
            BaseAdapter(make_company("greenhouse", greenhouse_id="x"))

    def test_invalid_timeout(self):
        with pytest.raises(AdapterConfigurationError):
            GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"), timeout=1)

    def test_empty_user_agent(self):
        with pytest.raises(AdapterConfigurationError):
            GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"), user_agent="  ")

    def test_http_error_maps_to_adapter_http_error(self):
        adapter = GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"))
        with patch.object(
            requests.Session, "request", return_value=http_response(404, reason="Not Found")
        ):
            with pytest.raises(AdapterHTTPError) as exc_info:
                adapter.fetch_jobs()
        assert exc_info.value.status_code == 404
        assert not exc_info.value.is_transient

    def test_timeout_maps_to_adapter_timeout_error(self):
        adapter = GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"))
        with patch.object(requests.Session, "request", side_effect=requests.exceptions.Timeout()):
            with pytest.raises(AdapterTimeoutError):
                adapter.fetch_jobs()

    def test_invalid_json_maps_to_response_error(self):
        adapter = GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"))
        with patch.object(requests.Session, "request", return_value=http_response(200)):
            with pytest.raises(AdapterResponseError):
                adapter.fetch_jobs()

    def test_request_sends_user_agent_and_timeout(self):
        adapter = GreenhouseAdapter(
            make_company("greenhouse", greenhouse_id="acme"), timeout=12, user_agent="tester/2"
        )
        with patch.object(
            requests.Session, "request", return_value=http_response(200, {"jobs": []})
        ) as mock_request:
            adapter.fetch_jobs()

        kwargs = mock_request.call_args.kwargs
        assert kwargs["timeout"] == 12
        assert kwargs["url"] == "https://boards-api.greenhouse.io/v1/boards/acme/jobs"
        assert kwargs["params"] == {"content": "true"}
        assert adapter._session.headers["User-Agent"] == "tester/2"

    def test_scrape_never_raises(self):
        adapter = GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"))
        with patch.object(
            requests.Session, "request", side_effect=requests.exceptions.ConnectionError("down")
        ):
            assert adapter.scrape() == []
        assert "down" in adapter.last_error

    def test_scrape_swallows_unexpected_errors(self):
        adapter = GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"))
        with patch.object(adapter, "fetch_jobs", side_effect=RuntimeError("bug")):
            assert adapter.scrape() == []
        assert adapter.last_error == "bug"

    def test_scrape_truncates_to_max_jobs(self):
        adapter = GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"), max_jobs=2)
        response = {
            "jobs": [
                {"title": f"Engineer {i}", "absolute_url": f"https://x/{i}", "content": ""}
                for i in range(5)
            ]
        }
        with patch.object(adapter, "_make_request", return_value=response):
            assert len(adapter.scrape()) == 2


# ============================================================================
# Provider variants
# ============================================================================


class TestGreenhouseAdapter:
    def test_fetch_jobs_success(self):
        adapter = GreenhouseAdapter(make_company("greenhouse", greenhouse_id="examplecorp"))
        response = {
            "jobs": [
                {
                    "id": 1,
                    "title": "Senior Backend Engineer",
                    "absolute_url": "https://boards.greenhouse.io/examplecorp/jobs/1",
                    "location": {"name": "Remote - US"},
                    "content": "&lt;p&gt;We use Python and PostgreSQL.&lt;/p&gt;"
                    "&lt;h3&gt;Requirements&lt;/h3&gt;&lt;p&gt;5+ years&lt;/p&gt;",
                }
            ]
        }
        with patch.object(adapter, "_make_request", return_value=response):
            jobs = adapter.fetch_jobs()

        assert len(jobs) == 1
        job = jobs[0]
        assert job.job_id == compute_job_id("Example Corp", "Senior Backend Engineer")
        assert job.company == "Example Corp"
        assert job.description.startswith("We use Python and PostgreSQL.")
        assert "<" not in job.description
        assert job.requirements.startswith("Requirements")
        assert job.location == "Remote - US"
        assert job.remote is True
        assert job.tech_stack == ["Python", "PostgreSQL"]

    def test_missing_location_defaults(self):
        adapter = GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"))
        response = {"jobs": [{"title": "Engineer", "absolute_url": "https://x/1", "location": None}]}
        with patch.object(adapter, "_make_request", return_value=response):
            assert adapter.fetch_jobs()[0].location == "Not specified"

    def test_malformed_response_raises(self):
        adapter = GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"))
        with patch.object(adapter, "_make_request", return_value=["not", "a", "dict"]):
            with pytest.raises(AdapterResponseError):
                adapter.fetch_jobs()

    def test_skips_invalid_jobs(self):
        adapter = GreenhouseAdapter(make_company("greenhouse", greenhouse_id="x"))
        response = {
            "jobs": [
                {"title": "Engineer", "absolute_url": "https://x/1"},
                {"title": "No URL"},
                {"title": "  ", "absolute_url": "https://x/3"},
            ]
        }
        with patch.object(adapter, "_make_request", return_value=response):
            jobs = adapter.fetch_jobs()
        assert [job.title for job in jobs] == ["Engineer"]


class TestLeverAdapter:
    def test_fetch_jobs_combines_sections(self):
        adapter = LeverAdapter(make_company("lever", lever_id="examplecorp"))
        response = [
            {
                "id": "abc",
                "text": "Frontend Engineer",
                "hostedUrl": "https://jobs.lever.co/examplecorp/abc",
                "description": "<div>Join our team.</div>",
                "descriptionPlain": "Join our team building React apps.",
                "categories": {"location": "Berlin"},
                "lists": [
                    {"text": "Requirements", "content": "<li>TypeScript</li><li>React</li>"},
                    {"text": "Benefits", "content": "<li>Snacks</li>"},
                ],
            }
        ]
        with patch.object(adapter, "_make_request", return_value=response) as mock_request:
            jobs = adapter.fetch_jobs()

        mock_request.assert_called_once_with(
            "https://api.lever.co/v0/postings/examplecorp", params={"mode": "json"}
        )
        job = jobs[0]
        assert job.title == "Frontend Engineer"
        assert "Join our team building React apps." in job.description
        assert "Snacks" in job.description
        assert job.requirements == "TypeScript\nReact"
        assert job.location == "Berlin"
        assert job.remote is False
        assert "React" in job.tech_stack

    def test_location_falls_back_to_all_locations(self):
        adapter = LeverAdapter(make_company("lever", lever_id="x"))
        response = [
            {
                "text": "Engineer",
                "hostedUrl": "https://jobs.lever.co/x/1",
                "categories": {"allLocations": ["Paris", "Remote"]},
            }
        ]
        with patch.object(adapter, "_make_request", return_value=response):
            job = adapter.fetch_jobs()[0]
        assert job.location == "Paris, Remote"
        assert job.remote is True

    def test_dict_response_fallback(self):
        adapter = LeverAdapter(make_company("lever", lever_id="x"))
        response = {"postings": [{"text": "Engineer", "hostedUrl": "https://jobs.lever.co/x/1"}]}
        with patch.object(adapter, "_make_request", return_value=response):
            assert len(adapter.fetch_jobs()) == 1


class TestWorkdayAdapter:
    def test_posts_search_and_builds_urls(self):
        adapter = WorkdayAdapter(make_company("workday", workday_id="globex", workday_site="Careers"))
        response = {
            "total": 1,
            "jobPostings": [
                {
                    "title": "Data Engineer",
                    "externalPath": "/job/Austin/Data-Engineer_R1",
                    "locationsText": "Austin, TX",
                    "bulletFields": ["R1", "Posted Today"],
                }
            ],
        }
        with patch.object(adapter, "_make_request", return_value=response) as mock_request:
            jobs = adapter.fetch_jobs()

        args, kwargs = mock_request.call_args
        assert args[0] == "https://globex.wd5.myworkdayjobs.com/wday/cxs/globex/Careers/jobs"
        assert kwargs["method"] == "POST"
        assert kwargs["json_data"] == {
            "appliedFacets": {},
            "limit": 20,
            "offset": 0,
            "searchText": "",
        }
        job = jobs[0]
        assert job.url == "https://globex.wd5.myworkdayjobs.com/job/Austin/Data-Engineer_R1"
        assert job.description == "R1\nPosted Today"
        assert job.location == "Austin, TX"

    def test_description_falls_back_to_title(self):
        adapter = WorkdayAdapter(make_company("workday", workday_id="globex"))
        response = {"total": 1, "jobPostings": [{"title": "Analyst", "externalPath": "/job/1"}]}
        with patch.object(adapter, "_make_request", return_value=response):
            assert adapter.fetch_jobs()[0].description == "Analyst"

    def test_pages_until_total(self):
        adapter = WorkdayAdapter(make_company("workday", workday_id="globex"))

        def page(offset):
            count = 20 if offset == 0 else 5
            return {
                "total": 25,
                "jobPostings": [
                    {"title": f"Role {offset + i}", "externalPath": f"/job/{offset + i}"}
                    for i in range(count)
                ],
            }

        with patch.object(adapter, "_make_request", side_effect=[page(0), page(20)]) as mock_request:
            jobs = adapter.fetch_jobs()

        assert len(jobs) == 25
        assert mock_request.call_count == 2
        assert mock_request.call_args.kwargs["json_data"]["offset"] == 20

    def test_paging_stops_at_max_jobs(self):
        adapter = WorkdayAdapter(make_company("workday", workday_id="globex"), max_jobs=20)
        full_page = {
            "total": 500,
            "jobPostings": [{"title": f"Role {i}", "externalPath": f"/job/{i}"} for i in range(20)],
        }
        with patch.object(adapter, "_make_request", return_value=full_page) as mock_request:
            adapter.fetch_jobs()
        assert mock_request.call_count == 1

    def test_repeated_page_stops_unlimited_paging(self):
        adapter = WorkdayAdapter(make_company("workday", workday_id="globex"), max_jobs=0)
        same_page = {
            "jobPostings": [{"title": f"Role {i}", "externalPath": f"/job/{i}"} for i in range(20)],
        }
        with patch.object(adapter, "_make_request", return_value=same_page) as mock_request:
            jobs = adapter.fetch_jobs()

        assert mock_request.call_count == 2
        assert len(jobs) == 20

    def test_page_limit_bounds_unlimited_paging(self):
        adapter = WorkdayAdapter(make_company("workday", workday_id="globex"), max_jobs=0)
        adapter.MAX_PAGES = 3
        calls = []

        def next_page(*args, **kwargs):
            offset = kwargs["json_data"]["offset"]
            calls.append(offset)
            return {
                "jobPostings": [
                    {"title": f"Role {offset + i}", "externalPath": f"/job/{offset + i}"}
                    for i in range(20)
                ],
            }

        with patch.object(adapter, "_make_request", side_effect=next_page):
            jobs = adapter.fetch_jobs()

        assert calls == [0, 20, 40]
        assert len(jobs) == 60


ASHBY_CARDS = """
<html><body>
  <div data-job-id="a1">
    <h3>Product Designer</h3>
    <span class="job-location">Remote</span>
    <div class="job-description">Figma and design systems.</div>
  </div>
  <div data-job-id="b2">
    <span data-testid="job-title">Backend Engineer</span>
    <span data-testid="job-location">New York</span>
  </div>
  <div data-job-id="c3"><span>No title here</span></div>
</body></html>
"""

ASHBY_LINKS = """
<html><body>
  <a href="/linear/abc">Senior Engineer</a>
  <a href="/linear/def">   </a>
  <a href="https://linear.app/about">About</a>
</body></html>
"""


class TestAshbyAdapter:
    def test_parses_job_cards(self):
        adapter = AshbyAdapter(make_company("ashby", ashby_id="linear"))
        with patch.object(adapter, "_fetch_html", return_value=ASHBY_CARDS) as mock_fetch:
            jobs = adapter.fetch_jobs()

        mock_fetch.assert_called_once_with("https://jobs.ashbyhq.com/linear")
        assert [job.title for job in jobs] == ["Product Designer", "Backend Engineer"]
        designer, backend = jobs
        assert designer.url == "https://jobs.ashbyhq.com/linear/a1"
        assert designer.location == "Remote"
        assert designer.remote is True
        assert designer.description == "Figma and design systems."
        assert backend.location == "New York"
        assert backend.description == "Backend Engineer"

    def test_falls_back_to_links(self):
        adapter = AshbyAdapter(make_company("ashby", ashby_id="linear"))
        with patch.object(adapter, "_fetch_html", return_value=ASHBY_LINKS):
            jobs = adapter.fetch_jobs()

        assert [job.title for job in jobs] == ["Senior Engineer", "About"]
        assert jobs[0].url == "https://jobs.ashbyhq.com/linear/abc"
        assert jobs[0].description == "Senior Engineer"
        assert jobs[0].requirements == ""
        assert jobs[1].url == "https://linear.app/about"

    def test_fetches_html_over_http(self):
        adapter = AshbyAdapter(make_company("ashby", ashby_id="linear"))
        with patch.object(
            requests.Session, "request", return_value=http_response(200, text=ASHBY_CARDS)
        ):
            assert len(adapter.scrape()) == 2


class TestSmartRecruitersAdapter:
    def test_fetch_jobs(self):
        adapter = SmartRecruitersAdapter(make_company("smartrecruiters", smartrecruiters_id="Initech"))
        response = {
            "content": [
                {
                    "id": "744",
                    "name": "QA Engineer",
                    "location": {"city": "Austin", "region": "TX", "country": "us"},
                },
                {"id": "745", "name": "", "title": ""},
                {"id": "746", "title": "Support Engineer", "location": {"remote": True}},
            ]
        }
        with patch.object(adapter, "_make_request", return_value=response) as mock_request:
            jobs = adapter.fetch_jobs()

        mock_request.assert_called_once_with(
            "https://api.smartrecruiters.com/v1/companies/Initech/postings"
        )
        assert [job.title for job in jobs] == ["QA Engineer", "Support Engineer"]
        assert jobs[0].url == "https://careers.smartrecruiters.com/Initech/744"
        assert jobs[0].location == "Austin, TX, us"
        assert jobs[0].description == "QA Engineer"
        assert jobs[1].location == "Remote"
        assert jobs[1].remote is True


class TestCustomAdapter:
    def test_returns_nothing_without_io(self):
        adapter = CustomAdapter(make_company("custom"))
        with patch.object(requests.Session, "request") as mock_request:
            assert adapter.scrape() == []
        mock_request.assert_not_called()


# ============================================================================
# Factory
# ============================================================================


class TestAdapterFactory:
    @pytest.mark.parametrize(
        "provider,ids,expected",
        [
            ("greenhouse", {"greenhouse_id": "a"}, GreenhouseAdapter),
            ("lever", {"lever_id": "a"}, LeverAdapter),
            ("workday", {"workday_id": "a"}, WorkdayAdapter),
            ("ashby", {"ashby_id": "a"}, AshbyAdapter),
            ("smartrecruiters", {"smartrecruiters_id": "a"}, SmartRecruitersAdapter),
            ("custom", {}, CustomAdapter),
        ],
    )
    def test_selects_adapter_by_provider(self, provider, ids, expected):
        adapter = get_adapter(make_company(provider, **ids), AdvancedConfig())
        assert isinstance(adapter, expected)

    def test_missing_identifier_returns_none(self, caplog):
        company = make_company("lever", greenhouse_id="wrong-provider")
        with caplog.at_level("WARNING"):
            assert get_adapter(company, AdvancedConfig()) is None
        assert "no lever identifier" in caplog.text

    def test_applies_advanced_config(self):
        config = AdvancedConfig(http_request_timeout=45, user_agent="bot/1", max_jobs_per_company=7)
        adapter = get_adapter(make_company("greenhouse", greenhouse_id="a"), config)
        assert adapter.timeout == 45
        assert adapter.user_agent == "bot/1"
        assert adapter.max_jobs == 7
