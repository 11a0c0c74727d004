"""ZeptoMail implementation of EmailProvider.

Bodies are rendered from the Jinja2 templates in ``templates/emails``.
Sending never raises: a missing token, a non-2xx answer or a transport
error are logged and reported as ``False`` so the caller decides whether
the email was critical.
"""

import os
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import EmailSettings
from infrastructure.http_client import HttpClient
from shared.logging import get_logger

log = get_logger(__name__)

_ZEPTO_API_URL = "https://api.zeptomail.in/v1.1/email"
_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)


class ZeptoMailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        http_client: HttpClient,
        app_name: str = "WSID",
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._settings = settings
        self._http = http_client
        self._app_name = app_name
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    async def _send(
        self,
        to_email: str,
        to_name: Optional[str],
        subject: str,
        html_body: str,
        text_body: str,
    ) -> bool:
        if not self._settings.zepto_api_token:
            log.error("email_send_failed", reason="token_not_configured")
            return False

        payload = {
            "from": {
                "address": self._settings.zepto_from_email,
                "name": self._settings.zepto_from_name,
            },
            "to": [
                {
                    "email_address": {
                        "address": to_email,
                        "name": to_name or to_email,
                    }
                }
            ],
            "subject": subject,
            "htmlbody": html_body,
            "textbody": text_body,
        }

        token = self._settings.zepto_api_token
        if not token.startswith("Zoho-enczapikey "):
            token = f"Zoho-enczapikey {token}"
        headers = {"Authorization": token, "Content-Type": "application/json"}

        try:
            response = await self._http.post(_ZEPTO_API_URL, json=payload, headers=headers)
        except Exception as e:
            log.error(
                "email_send_error",
                to_email=to_email,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

        if response.status_code in (200, 201, 202):
            log.info("email_sent", to_email=to_email, subject=subject)
            return True
        log.error(
            "email_send_failed",
            to_email=to_email,
            subject=subject,
            status_code=response.status_code,
            response=response.text[:200],
        )
        return False

    def _render(self, template_name: str, **context) -> str:
        return self._jinja.get_template(template_name).render(
            app_name=self._app_name, **context
        )

    async def send_otp_email(
        self, email: str, user_name: Optional[str], otp_code: str, expires_minutes: int
    ) -> bool:
        subject = f"Your {self._app_name} verification code"
        html_body = self._render(
            "otp.html",
            otp_code=otp_code,
            user_name=user_name,
            expires_minutes=expires_minutes,
        )
        text_body = (
            f"Hello{f' {user_name}' if user_name else ''},\n\n"
            f"Your {self._app_name} verification code is: {otp_code}\n\n"
            f"This code expires in {expires_minutes} minutes."
        )
        return await self._send(email, user_name, subject, html_body, text_body)

    async def send_password_reset_email(
        self, email: str, user_name: Optional[str], otp_code: str, expires_minutes: int
    ) -> bool:
        subject = f"Reset your {self._app_name} password"
        html_body = self._render(
            "password_reset.html",
            otp_code=otp_code,
            user_name=user_name,
            expires_minutes=expires_minutes,
        )
        text_body = (
            f"Hello{f' {user_name}' if user_name else ''},\n\n"
            f"Your password reset code is: {otp_code}\n\n"
            f"This code expires in {expires_minutes} minutes. "
            f"If you did not ask for a reset, ignore this email."
        )
        return await self._send(email, user_name, subject, html_body, text_body)
