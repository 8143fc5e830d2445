from __future__ import annotations

from types import SimpleNamespace

from gpa_tracker.infrastructure.notifications import SendGridEmailNotifier
from gpa_tracker.infrastructure.resilience import RetryPolicy
from gpa_tracker.shared.config.settings import EmailConfig


class FakeClient:
    def __init__(self, status_code: int = 202, error: Exception | None = None) -> None:
        self.sent = []
        self.calls = 0
        self._status_code = status_code
        self._error = error

    def send(self, message):
        self.calls += 1
        if self._error is not None:
            raise self._error
        self.sent.append(message)
        return SimpleNamespace(status_code=self._status_code)


NO_WAIT = RetryPolicy(max_retries=2, backoff_base=0, backoff_cap=0)


def _config(api_key: str | None = "SG.test") -> EmailConfig:
    return EmailConfig.model_validate(
        {
            "SENDGRID_API_KEY": api_key,
            "MAIL_FROM": "noreply@example.com",
            "FRONTEND_URL": "https://gpa.example.com/",
            "APP_NAME": "GPA Tracker",
        }
    )


def test_without_api_key_nothing_is_sent() -> None:
    client = FakeClient()
    notifier = SendGridEmailNotifier(_config(api_key=None), client=client)

    assert notifier.send_welcome("a@x.io", "alice") is False
    assert client.sent == []


def test_reset_mail_links_to_frontend() -> None:
    client = FakeClient()
    notifier = SendGridEmailNotifier(_config(), client=client)

    assert notifier.send_password_reset("a@x.io", "alice", "abc123") is True

    (message,) = client.sent
    body = message.get()
    html = body["content"][0]["value"]
    assert "https://gpa.example.com/reset-password?token=abc123" in html
    assert body["subject"] == "GPA Tracker Password Reset"


def test_welcome_mail_escapes_username() -> None:
    client = FakeClient()
    notifier = SendGridEmailNotifier(_config(), client=client)

    notifier.send_welcome("a@x.io", "<script>")

    html = client.sent[0].get()["content"][0]["value"]
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_provider_errors_are_retried_then_reported_as_false() -> None:
    client = FakeClient(error=RuntimeError("down"))
    failing = SendGridEmailNotifier(_config(), client=client, retry_policy=NO_WAIT)

    assert failing.send_welcome("a@x.io", "alice") is False
    assert client.calls == 3


def test_rejected_status_is_reported_as_false() -> None:
    rejected = SendGridEmailNotifier(_config(), client=FakeClient(status_code=401))

    assert rejected.send_welcome("a@x.io", "alice") is False
