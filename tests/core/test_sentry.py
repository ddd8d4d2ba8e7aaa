"""
Tests for Sentry event filtering.
"""
from funnel.core.sentry import before_send, before_send_transaction, init_sentry


class TestBeforeSend:
    """Tests for before_send()."""

    def test_redacts_credentials(self):
        event = {
            "request": {
                "url": "http://test/matches",
                "headers": {"authorization": "Bearer secret", "cookie": "session=1", "accept": "*/*"},
            }
        }

        result = before_send(event, {})

        assert result["request"]["headers"]["authorization"] == "[REDACTED]"
        assert result["request"]["headers"]["cookie"] == "[REDACTED]"
        assert result["request"]["headers"]["accept"] == "*/*"

    def test_drops_health_checks(self):
        assert before_send({"request": {"url": "http://test/health"}}, {}) is None

    def test_passes_events_without_request(self):
        event = {"message": "worker error"}
        assert before_send(event, {}) is event


class TestBeforeSendTransaction:
    """Tests for before_send_transaction()."""

    def test_skips_health_probes(self):
        assert before_send_transaction({"transaction": "/health/ready"}, {}) is None

    def test_keeps_api_transactions(self):
        event = {"transaction": "/matches"}
        assert before_send_transaction(event, {}) is event


def test_init_without_dsn_is_disabled(monkeypatch):
    monkeypatch.setattr("funnel.core.sentry.settings.sentry_dsn", None)

    assert init_sentry() is False
