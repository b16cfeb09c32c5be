import logging
from typing import Any, List, Optional

import httpx

from relayApi.model.clasificacion_response import Clasificacion
from relayApi.service.errors import ClassificationError

logger = logging.getLogger(__name__)

DEFAULT_HF_API_URL = "https://api-inference.huggingface.co/models"


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"


def parse_classification(data: Any) -> Clasificacion:
    """Normalise the two shapes the inference API answers with.

    Either ``{"sequence", "labels", "scores"}`` or a list of
    ``{"label", "score"}`` entries (possibly wrapped in a one-element list).
    """
    if isinstance(data, list) and len(data) == 1:
        inner = data[0]
        if isinstance(inner, list) or (isinstance(inner, dict) and "labels" in inner):
            data = inner

    if isinstance(data, dict) and "labels" in data and "scores" in data:
        return Clasificacion(
            labels=list(data["labels"]),
            scores=list(data["scores"]),
            sequence=data.get("sequence"),
        )
    if isinstance(data, list) and all(isinstance(item, dict) and "label" in item for item in data):
        return Clasificacion(
            labels=[item["label"] for item in data],
            scores=[item.get("score", 0.0) for item in data],
        )
    raise ClassificationError(data, "Unexpected classification response")


async def classify_text(
    client: httpx.AsyncClient,
    text: str,
    labels: List[str],
    *,
    model: str,
    token: Optional[str],
    base_url: str = DEFAULT_HF_API_URL,
) -> Clasificacion:
    """Zero-shot, multi-label classification of ``text`` against ``labels``."""
    url = f"{base_url.rstrip('/')}/{model}"
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    payload = {
        "inputs": text,
        "parameters": {
            "candidate_labels": labels,
            "multi_label": True,
        },
    }

    try:
        response = await client.post(url, json=payload, headers=headers)
    except httpx.HTTPError as e:
        raise ClassificationError(f"Classification request failed: {str(e)}") from e

    if response.status_code >= 400:
        logger.error("Classification service answered %s", response.status_code)
        raise ClassificationError(_error_payload(response))

    data = _error_payload(response)
    if isinstance(data, dict) and "error" in data:
        raise ClassificationError(data)
    return parse_classification(data)
