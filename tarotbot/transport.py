"""Outbound text delivery to the WhatsApp Cloud API."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from .result import Result

log = logging.getLogger("tarotbot.transport")


class OutboundTransport(ABC):
    """send() reports failures in the Result; it never raises."""

    @abstractmethod
    def send(self, to: str, body: str) -> Result[str]:
        pass


class WhatsAppTransport(OutboundTransport):
    BASE_URL = "https://graph.facebook.com/{version}/{phone_number_id}/messages"

    def __init__(
        self,
        phone_number_id: str,
        access_token: str,
        api_version: str = "v16.0",
        timeout_seconds: float = 15.0,
        client: Optional[httpx.Client] = None,
    ):
        self.url = self.BASE_URL.format(version=api_version, phone_number_id=phone_number_id)
        self.access_token = access_token
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _post(self, payload: dict) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.access_token}"}
        if self._client is not None:
            return self._client.post(self.url, json=payload, headers=headers)
        with httpx.Client(timeout=self.timeout_seconds) as client:
            return client.post(self.url, json=payload, headers=headers)

    def send(self, to: str, body: str) -> Result[str]:
        """Send a text message. Result value is the provider message id."""
        if not self.access_token:
            return Result.failure("WhatsApp access token not configured", "delivery_error")

        payload = {"messaging_product": "whatsapp", "to": to, "text": {"body": body}}
        try:
            response = self._post(payload)
        except httpx.HTTPError as e:
            log.warning("WhatsApp send failed to=%s error=%s", to, e)
            return Result.failure(str(e), "delivery_error")

        if response.status_code >= 400:
            log.warning("WhatsApp send rejected to=%s status=%s body=%s", to, response.status_code, response.text)
            return Result.failure(f"WhatsApp API error: {response.status_code} - {response.text}", "delivery_error")

        message_id = ""
        try:
            data = response.json()
            messages = data.get("messages") if isinstance(data, dict) else None
            if isinstance(messages, list) and messages and isinstance(messages[0], dict):
                message_id = messages[0].get("id") or ""
        except ValueError:
            log.debug("WhatsApp response was not JSON to=%s", to)
        return Result.success(message_id)
