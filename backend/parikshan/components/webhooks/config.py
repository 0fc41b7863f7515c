"""n8n webhook URL sets and environment selection."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ...platform.config import settings

logger = logging.getLogger(__name__)

PROD = "PROD"
TEST = "TEST"

USER_CREATION_PATH = "/webhook-test/usercreation"
TEST_EVALUATION_PATH = "/webhook-test/testevaluation"


@dataclass(frozen=True)
class WebhookSet:
    user_creation: str
    test_evaluation: str


def _base_url() -> str:
    return (settings.N8N_BASE_URL or "").rstrip("/")


def build_webhooks() -> dict[str, WebhookSet]:
    base = _base_url()
    return {
        PROD: WebhookSet(
            user_creation=settings.N8N_PROD_USER_CREATION_URL or f"{base}{USER_CREATION_PATH}",
            test_evaluation=settings.N8N_PROD_TEST_EVALUATION_URL or f"{base}{TEST_EVALUATION_PATH}",
        ),
        TEST: WebhookSet(
            user_creation=settings.N8N_TEST_USER_CREATION_URL or f"{base}{USER_CREATION_PATH}",
            test_evaluation=settings.N8N_TEST_TEST_EVALUATION_URL or f"{base}{TEST_EVALUATION_PATH}",
        ),
    }


def current_env() -> str:
    return PROD if settings.is_production else TEST


def active_webhooks() -> WebhookSet:
    env = current_env()
    webhooks = build_webhooks()[env]
    logger.info(
        "Webhook config loaded env=%s user_creation_url=%s test_evaluation_url=%s",
        env,
        webhooks.user_creation,
        webhooks.test_evaluation,
    )
    return webhooks


def bulk_candidates_url() -> str | None:
    return (settings.N8N_BULK_CANDIDATES_URL or "").strip() or None


def candidate_webhook_url() -> str | None:
    return (settings.N8N_CANDIDATE_WEBHOOK_URL or "").strip() or None
