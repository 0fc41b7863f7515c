"""Outbound n8n webhook client."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import httpx

from ...platform.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilePart:
    field_name: str
    filename: str
    content: bytes
    content_type: str = "text/csv"


@dataclass
class DeliveryResult:
    success: bool
    response: str | None
    attempts: int
    status_code: int | None = None

    def as_log_payload(self) -> dict:
        return {"success": self.success, "response": self.response, "attempts": self.attempts}


def _form_parts(fields: Mapping[str, Any], upload: FilePart | None) -> list[tuple[str, tuple]]:
    # Plain fields go as filename-less parts so the body is always multipart,
    # even when no file is attached.
    parts: list[tuple[str, tuple]] = [
        (name, (None, str(value).encode("utf-8"))) for name, value in fields.items()
    ]
    if upload is not None:
        parts.append((upload.field_name, (upload.filename, upload.content, upload.content_type)))
    return parts


class WebhookClient:
    """Posts JSON or multipart payloads to n8n, optionally with retry and backoff."""

    def __init__(
        self,
        *,
        timeout: float | None = None,
        max_attempts: int | None = None,
        backoff_base: float | None = None,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.timeout = timeout if timeout is not None else settings.WEBHOOK_TIMEOUT_SECONDS
        self.max_attempts = max(1, max_attempts if max_attempts is not None else settings.WEBHOOK_MAX_ATTEMPTS)
        self.backoff_base = backoff_base if backoff_base is not None else settings.WEBHOOK_BACKOFF_BASE_SECONDS
        self._transport = transport
        self._sleep = sleep

    def _headers(self, extra: Mapping[str, str] | None) -> dict[str, str]:
        headers = {"User-Agent": settings.WEBHOOK_USER_AGENT}
        if extra:
            headers.update({k: v for k, v in extra.items() if v is not None})
        return headers

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def post_json(self, url: str, payload: Any, *, headers: Mapping[str, str] | None = None) -> httpx.Response:
        logger.info("Making webhook request url=%s kind=json", url)
        with self._client() as client:
            response = client.post(url, json=payload, headers=self._headers(headers))
        logger.info("Webhook response url=%s status=%s", url, response.status_code)
        return response

    def post_form(
        self,
        url: str,
        fields: Mapping[str, Any],
        *,
        upload: FilePart | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        logger.info("Making webhook request url=%s kind=multipart file=%s", url, upload.filename if upload else None)
        with self._client() as client:
            response = client.post(url, files=_form_parts(fields, upload), headers=self._headers(headers))
        logger.info("Webhook response url=%s status=%s", url, response.status_code)
        return response

    def backoff_seconds(self, attempt: int) -> float:
        return float(self.backoff_base ** attempt)

    def post_form_with_retry(
        self,
        url: str,
        fields: Mapping[str, Any],
        *,
        headers: Mapping[str, str] | None = None,
        context: str = "",
    ) -> DeliveryResult:
        """Send a multipart webhook, retrying non-2xx and transport failures.

        Sleeps ``backoff_base ** attempt`` seconds between attempts and never
        after the final one.
        """
        last_status: int | None = None
        for attempt in range(1, self.max_attempts + 1):
            logger.info("Webhook attempt %d/%d %s", attempt, self.max_attempts, context)
            try:
                response = self.post_form(url, fields, headers=headers)
                last_status = response.status_code
                if response.is_success:
                    return DeliveryResult(True, response.text, attempt, last_status)
                logger.error(
                    "Webhook attempt %d failed status=%s reason=%s %s",
                    attempt,
                    response.status_code,
                    response.reason_phrase,
                    context,
                )
                if attempt == self.max_attempts:
                    return DeliveryResult(False, f"Failed after {self.max_attempts} attempts", attempt, last_status)
            except httpx.HTTPError as exc:
                logger.error("Webhook attempt %d error: %s %s", attempt, exc, context)
                if attempt == self.max_attempts:
                    return DeliveryResult(False, f"Error: {exc}", attempt, last_status)
            self._sleep(self.backoff_seconds(attempt))
        return DeliveryResult(False, f"Failed after {self.max_attempts} attempts", self.max_attempts, last_status)


def get_webhook_client() -> WebhookClient:
    """FastAPI dependency; tests override it with a client on a mock transport."""
    return WebhookClient()
