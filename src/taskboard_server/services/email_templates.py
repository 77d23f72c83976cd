"""Rendering of transactional emails with Jinja2."""

import os
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader, select_autoescape

from taskboard_server.services.mail_service import MailMessage
from taskboard_server.settings import Settings
from taskboard_server.utils.clock import utcnow

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")


class EmailTemplates:
    """Builds ready-to-send ``MailMessage`` objects for each kind of email."""

    def __init__(self, settings: Settings, template_dir: str = TEMPLATE_DIR):
        self.settings = settings
        self.env = Environment(loader=FileSystemLoader(template_dir), autoescape=select_autoescape(["html"]))

    def _render(self, template_name: str, **context) -> str:
        template = self.env.get_template(template_name)
        return template.render(current_year=utcnow().year, **context)

    def verification_email(self, username: str, email: str, otp: str) -> MailMessage:
        html = self._render(
            "otp_email.html",
            heading="Email Verification",
            username=username,
            intro="Use the code below to verify your email address.",
            otp=otp,
            expires_in_minutes=self.settings.otp_ttl_minutes,
            action_url=f"{self.settings.origin}/auth/verify?email={quote(email)}",
            action_label="Verify email",
        )
        return MailMessage(from_address=self.settings.mail_from, to=email, subject="Verify your email", html=html)

    def password_reset_email(self, username: str, email: str, otp: str) -> MailMessage:
        html = self._render(
            "otp_email.html",
            heading="Password Reset",
            username=username,
            intro="Use the code below to choose a new password.",
            otp=otp,
            expires_in_minutes=self.settings.otp_ttl_minutes,
            action_url=f"{self.settings.origin}/auth/update-password?email={quote(email)}",
            action_label="Reset password",
        )
        return MailMessage(from_address=self.settings.mail_from, to=email, subject="Reset your password", html=html)

    def team_invite_email(self, email: str, team_name: str, inviter_name: str, role: str, token: str) -> MailMessage:
        html = self._render(
            "team_invite_email.html",
            team_name=team_name,
            inviter_name=inviter_name,
            role=role,
            accept_url=f"{self.settings.origin}/invite/accept?token={quote(token)}",
            expires_in_days=self.settings.invite_ttl_days,
        )
        return MailMessage(
            from_address=self.settings.mail_from,
            to=email,
            subject=f"You're invited to join {team_name}",
            html=html,
        )
