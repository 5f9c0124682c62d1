"""
Tests for the security scorer.
"""
from conftest import ALL_SECURITY_HEADERS

from analyzers.security import SecurityScorer, insecure_form_count


def _page(body: str = "") -> str:
    return f"<html><head><title>t</title></head><body>{body}</body></html>"


class TestSecurityScorer:

    def test_hardened_https_site(self, make_context):
        report = SecurityScorer().score(make_context(_page(), headers=ALL_SECURITY_HEADERS))
        assert report.score == 100
        assert report.level == "Excellent"
        assert report.issues == []
        assert len(report.good_points) == 7
        assert all(report.details["security_headers"].values())

    def test_plain_http_without_headers_is_critical(self, make_context):
        report = SecurityScorer().score(make_context(_page(), url="http://example.com/"))
        assert report.score == 10
        assert report.level == "Critical"
        assert report.issues[0] == "Insecure site (HTTP instead of HTTPS)"
        assert report.details["protocol"] == "http:"
        assert len(report.issues) == 7

    def test_each_missing_header_costs_ten(self, make_context):
        headers = dict(ALL_SECURITY_HEADERS)
        del headers["X-XSS-Protection"]
        report = SecurityScorer().score(make_context(_page(), headers=headers))
        assert report.score == 90
        assert report.issues == ["X-XSS-Protection (basic XSS filter) missing"]
        assert report.details["security_headers"]["x-xss-protection"] is False

    def test_forms_and_third_party_scripts(self, make_context):
        body = (
            '<form action="http://example.com/login"></form>'
            '<form action="/search"></form>'
            + "".join(f'<script src="https://ads{i}.tracker{i}.com/t.js"></script>' for i in range(6))
        )
        report = SecurityScorer().score(make_context(_page(body), headers=ALL_SECURITY_HEADERS))
        assert report.details["insecure_forms"] == 1
        assert report.details["external_scripts"] == 6
        assert report.score == 100 - 15 - 12
        assert report.level == "Good"

    def test_script_penalty_is_capped(self, make_context):
        body = "".join(f'<script src="https://x{i}.cdn{i}.io/a.js"></script>' for i in range(15))
        report = SecurityScorer().score(make_context(_page(body), headers=ALL_SECURITY_HEADERS))
        assert report.score == 80

    def test_score_clamped_at_zero(self, make_context):
        body = "<form></form>" * 10
        report = SecurityScorer().score(make_context(_page(body), url="http://example.com/"))
        assert report.score == 0


class TestInsecureForms:

    def test_relative_action_inherits_page_scheme(self, make_context):
        body = '<form action="/a"></form><form></form>'
        assert insecure_form_count(make_context(_page(body))) == 0
        assert insecure_form_count(make_context(_page(body), url="http://example.com/")) == 2
