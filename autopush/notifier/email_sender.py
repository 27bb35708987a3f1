import json
import logging
from typing import Dict, List

import requests

logger = logging.getLogger(__name__)

SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


def parse_recipients(collab_emails: str) -> List[str]:
    """
    Split a comma-separated recipient string into trimmed addresses
    """
    return [email.strip() for email in (collab_emails or "").split(",") if email.strip()]


class EmailSender:
    """
    Sends plaintext notifications through the SendGrid v3 mail/send endpoint
    """

    def __init__(self, api_key: str, sender: str, recipients: str, subject: str,
                 url: str = SENDGRID_SEND_URL, timeout: int = 30):
        self.api_key = api_key
        self.sender = sender
        self.recipients = parse_recipients(recipients)
        self.subject = subject
        self.url = url
        self.timeout = timeout

    def build_payload(self, body: str) -> Dict:
        return {
            "personalizations": [{"to": [{"email": email} for email in self.recipients]}],
            "from": {"email": self.sender},
            "subject": self.subject,
            "content": [{"type": "text/plain", "value": body}],
        }

    def send(self, body: str) -> bool:
        """
        POST the notification. Returns True on any 2xx response.
        Failures are logged and reported as False, never raised.
        """
        if not self.recipients:
            logger.warning("SendGrid: no recipients configured, skipping email")
            return False

        payload = self.build_payload(body)
        logger.debug(f"Sending payload to SendGrid: {json.dumps(payload, indent=2)}")

        try:
            response = requests.post(
                self.url,
                json=payload,
                timeout=self.timeout,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
            )
        except requests.exceptions.Timeout:
            logger.error(f"SendGrid: timeout after {self.timeout}s")
            return False
        except requests.exceptions.RequestException as e:
            logger.error(f"SendGrid: request error: {e}")
            return False

        if 200 <= response.status_code < 300:
            logger.info(f"SendGrid: email sent successfully (HTTP {response.status_code})")
            return True

        logger.error(f"SendGrid: failed to send email (HTTP {response.status_code}). Response:")
        logger.error(response.text)
        return False
