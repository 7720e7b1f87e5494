"""ZeptoMail implementation of EmailProvider.

Sends the one-time verification code for signup, login and account deletion
through the ZeptoMail HTTP API, rendering the HTML body from a Jinja2
template and attaching a plain-text alternative.
"""

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from config import EmailSettings
from infrastructure.http_client import HttpClient
from schemas.models.verification import VerificationKind
from shared.logging import get_logger

log = get_logger(__name__)

_ZEPTO_API_URL = "https://api.zeptomail.in/v1.1/email"
_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)

ACTION_LABELS = {
    VerificationKind.SIGNUP: "sign up",
    VerificationKind.LOGIN: "login",
    VerificationKind.DELETE_ACCOUNT: "account deletion",
}


class ZeptoMailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        app_url: str = "https://mailgate.dev",
        app_name: str = "mailgate",
        code_ttl_seconds: int = 300,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._app_url = app_url
        self._app_name = app_name
        self._expires_in_minutes = max(1, code_ttl_seconds // 60)
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    async def _send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: Optional[str] = None,
    ) -> bool:
        if not self._settings.zepto_api_token:
            log.error("zepto_mail_send_failed", reason="token_not_configured")
            return False

        payload: dict = {
            "from": {
                "address": self._settings.zepto_from_email,
                "name": self._settings.zepto_from_name,
            },
            "to": [{"email_address": {"address": to_email, "name": to_email}}],
            "subject": subject,
            "htmlbody": html_body,
        }
        if text_body:
            payload["textbody"] = text_body

        token = self._settings.zepto_api_token
        if not token.startswith("Zoho-enczapikey "):
            token = f"Zoho-enczapikey {token}"

        headers = {"Authorization": token, "Content-Type": "application/json"}

        try:
            response = await self._http.post_json(
                _ZEPTO_API_URL, payload, headers=headers
            )
            if response.status_code in (200, 201, 202):
                log.info("email_sent_success", to_email=to_email, subject=subject)
                return True
            log.error(
                "email_sent_failed",
                to_email=to_email,
                subject=subject,
                status_code=response.status_code,
                response=response.text[:200],
            )
            return False
        except Exception as e:
            log.error(
                "email_send_error",
                to_email=to_email,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    async def send_verification_code(
        self, email: str, kind: VerificationKind, otp_code: str
    ) -> bool:
        action = ACTION_LABELS[VerificationKind(kind)]
        subject = f"Your {action} verification code - {self._app_name}"
        try:
            template = self._jinja.get_template("verification.html")
            html_body = template.render(
                otp_code=otp_code,
                action=action,
                expires_in_minutes=self._expires_in_minutes,
                app_name=self._app_name,
                app_url=self._app_url,
            )
        except TemplateError as e:
            log.error(
                "email_render_error",
                to_email=email,
                template="verification.html",
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        text_body = (
            f"Your {action} verification code is {otp_code}\n\n"
            f"This code expires in about {self._expires_in_minutes} minutes. "
            f"Do not share this code.\n\n"
            f"{self._app_name} - {self._app_url}"
        )
        return await self._send(email, subject, html_body, text_body)
