# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Transactional e-mail via SendGrid."""

from __future__ import annotations

from html import escape

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail

from gpa_tracker.application.interfaces import NotificationPort
from gpa_tracker.infrastructure.resilience import RetryPolicy, call_with_retries
from gpa_tracker.shared.config.settings import EmailConfig
from gpa_tracker.shared.logging import logger

_BUTTON_STYLE = (
    "display: inline-block; padding: 12px 24px; text-decoration: none; "
    "background: linear-gradient(135deg, #2563eb 0%, #059669 100%); "
    "color: white; border-radius: 4px;"
)


class SendGridEmailNotifier(NotificationPort):
    """Sends welcome and password reset e-mails.

    Delivery problems are logged and reported as ``False``; callers decide
    whether that matters. Without an API key nothing is sent.
    """

    def __init__(
        self,
        config: EmailConfig,
        client: SendGridAPIClient | None = None,
        *,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.api_key = config.sendgrid_api_key
        self.from_email = config.from_email
        self.app_name = config.app_name
        self.frontend_url = config.frontend_url.rstrip("/")
        self._client = client
        self._retry_policy = retry_policy or RetryPolicy()

    def _get_client(self) -> SendGridAPIClient:
        if self._client is None:
            self._client = SendGridAPIClient(self.api_key)
        return self._client

    def send_welcome(self, to_email: str, username: str) -> bool:
        return self._send(
            to_email,
            subject=f"Welcome to {self.app_name}!",
            html=self._build_welcome_html(username=username),
            kind="welcome",
        )

    def send_password_reset(self, to_email: str, username: str, token: str) -> bool:
        reset_url = f"{self.frontend_url}/reset-password?token={token}"
        return self._send(
            to_email,
            subject=f"{self.app_name} Password Reset",
            html=self._build_reset_html(username=username, reset_url=reset_url),
            kind="password_reset",
        )

    def _send(self, to_email: str, *, subject: str, html: str, kind: str) -> bool:
        if not self.api_key:
            logger.info(f"email.{kind}: skipped, SENDGRID_API_KEY not configured")
            return False

        message = Mail(
            from_email=self.from_email,
            to_emails=to_email,
            subject=subject,
            html_content=html,
        )
        try:
            response = call_with_retries(
                self._get_client().send, message, policy=self._retry_policy
            )
        except Exception as e:
            # Provider errors stay in the logs; the HTTP caller never sees them.
            logger.exception(f"email.{kind}: send failed: {e}")
            return False

        status = getattr(response, "status_code", None)
        if status is not None and int(status) >= 400:
            logger.warning(f"email.{kind}: provider returned status={status}")
            return False
        logger.info(f"email.{kind}: sent to {to_email}")
        return True

    def _build_welcome_html(self, *, username: str) -> str:
        dashboard_url = f"{self.frontend_url}/dashboard"
        return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h1>Thank you for registering to {escape(self.app_name)}, {escape(username)}!</h1>
            <h4>Where tracking class grades and GPA becomes a breeze.</h4>
            <p>Click the button below to get started!</p>
            <a href="{escape(dashboard_url)}" style="{_BUTTON_STYLE}">Get Started!</a>
        </div>
        """

    def _build_reset_html(self, *, username: str, reset_url: str) -> str:
        url = escape(reset_url)
        return f"""
        <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
            <h2>Password Reset Request</h2>
            <p>Hi {escape(username)},</p>
            <p>Click the button below to reset your password:</p>
            <a href="{url}" style="{_BUTTON_STYLE}">Reset Password</a>
            <p>Or copy and paste this URL:</p>
            <p style="word-break: break-all;">{url}</p>
            <p><strong>This link will expire in 1 hour.</strong></p>
            <p>If you didn't make this request, you can safely ignore this email.</p>
        </div>
        """
