import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx
import openai
from fastapi import Request

from relayApi.config import Settings
from relayApi.service.metrics_service import missing_formula_labels
from relayApi.service.supabase_service import SupabaseStore

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Clients shared by every request, built once in the app lifespan."""

    settings: Settings
    http_client: httpx.AsyncClient
    openai_client: Optional[Any]
    store: SupabaseStore

    async def aclose(self) -> None:
        await self.http_client.aclose()


def check_label_consistency(settings: Settings) -> list:
    missing = missing_formula_labels(settings.candidate_labels)
    for label in missing:
        logger.warning("Metric label %r is not in the candidate label list; its metric will read 0", label)
    if missing and settings.strict_labels:
        raise RuntimeError(f"Metric labels missing from CANDIDATE_LABELS: {missing}")
    return missing


def build_context(settings: Settings, http_client: Optional[httpx.AsyncClient] = None) -> AppContext:
    check_label_consistency(settings)
    http_client = http_client or httpx.AsyncClient(timeout=settings.http_timeout_seconds, follow_redirects=True)
    openai_client = None
    if settings.openai_api_key:
        openai_client = openai.OpenAI(api_key=settings.openai_api_key)
    else:
        logger.warning("OPENAI_API_KEY not set; transcription requests will fail")
    store = SupabaseStore(http_client, settings.supabase_url, settings.supabase_key, settings.supabase_table)
    return AppContext(settings=settings, http_client=http_client, openai_client=openai_client, store=store)


def get_context(request: Request) -> AppContext:
    """Dependency that provides the application context."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("Application context not initialized. App lifespan not invoked?")
    return context
