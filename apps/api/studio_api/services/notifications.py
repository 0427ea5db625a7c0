"""
Push (Expo) and SMS (Twilio) delivery.

Everything here is best effort: callers schedule these methods as
background tasks after the response is built, and every failure is
logged and swallowed.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional

import httpx

logger = logging.getLogger(__name__)

EXPO_TOKEN_RE = re.compile(r"^Expo(nent)?PushToken\[.+\]$")
PUSH_CHUNK_SIZE = 100
TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


def is_expo_push_token(token: str) -> bool:
    return bool(token) and EXPO_TOKEN_RE.match(token) is not None


@dataclass
class PushMessage:
    title: str
    body: str
    data: dict = field(default_factory=dict)


class NotificationDispatcher:
    def __init__(
        self,
        expo_push_url: str,
        twilio_account_sid: Optional[str] = None,
        twilio_auth_token: Optional[str] = None,
        twilio_from_number: Optional[str] = None,
        timeout: float = 10.0,
        client_factory: Callable[..., httpx.Client] = httpx.Client,
    ):
        self.expo_push_url = expo_push_url
        self.twilio_account_sid = twilio_account_sid
        self.twilio_auth_token = twilio_auth_token
        self.twilio_from_number = twilio_from_number
        self.timeout = timeout
        self.client_factory = client_factory

    def send_push(self, tokens: list[str], message: PushMessage) -> list[dict]:
        valid = [t for t in tokens if is_expo_push_token(t)]
        if not valid:
            logger.debug("No valid Expo tokens for push %r", message.title)
            return []

        messages = [
            {
                "to": token,
                "sound": "default",
                "title": message.title,
                "body": message.body,
                "data": message.data,
                "priority": "default",
            }
            for token in valid
        ]

        results: list[dict] = []
        with self.client_factory(timeout=self.timeout) as client:
            for i in range(0, len(messages), PUSH_CHUNK_SIZE):
                chunk = messages[i : i + PUSH_CHUNK_SIZE]
                try:
                    response = client.post(self.expo_push_url, json=chunk)
                    response.raise_for_status()
                    results.extend(response.json().get("data", []))
                except Exception as e:
                    logger.exception("Expo push send error")
                    results.append({"error": str(e)})
        logger.info("Push %r sent to %d device(s)", message.title, len(valid))
        return results

    def send_sms(self, to: Optional[str], body: str) -> bool:
        if not to:
            logger.debug("No phone number for SMS")
            return False
        if not (self.twilio_account_sid and self.twilio_auth_token and self.twilio_from_number):
            logger.warning("Twilio is not configured, skipping SMS to %s", to)
            return False

        try:
            with self.client_factory(timeout=self.timeout) as client:
                response = client.post(
                    TWILIO_MESSAGES_URL.format(sid=self.twilio_account_sid),
                    auth=(self.twilio_account_sid, self.twilio_auth_token),
                    data={"To": to, "From": self.twilio_from_number, "Body": body},
                )
                response.raise_for_status()
        except Exception:
            logger.exception("Failed to send SMS to %s", to)
            return False

        logger.info("SMS sent to %s", to)
        return True
