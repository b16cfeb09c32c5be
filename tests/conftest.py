"""Shared pytest fixtures for the relay tests.

External collaborators are replaced with fakes: the transcription SDK with a
``FakeOpenAI`` object, the datastore with ``FakeStore`` and every outgoing
HTTP call with an ``httpx.MockTransport`` routed through ``FakeNetwork``.
"""

from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from relayApi.config import Settings
from relayApi.dependencies import AppContext, get_context
from relayApi.main import app
from relayApi.service.errors import DatastoreError

AUDIO_URL = "https://x/a.mp3"
HF_URL = "https://hf.test/models"


class FakeTranscriptions:
    def __init__(self):
        self.text = "buen servicio"
        self.error = None
        self.calls = []

    def create(self, **kwargs):
        self.calls.append({**kwargs, "file_bytes": kwargs["file"].read()})
        if self.error is not None:
            raise self.error
        return self.text


class FakeOpenAI:
    def __init__(self):
        self.transcriptions = FakeTranscriptions()
        self.audio = SimpleNamespace(transcriptions=self.transcriptions)


class FakeStore:
    def __init__(self):
        self.updates = []
        self.upserts = []
        self.fail_on = set()
        self.update_error = None

    async def update_punto(self, punto_id, fields):
        self.updates.append((punto_id, fields))
        if self.update_error is not None:
            raise self.update_error
        if "update" in self.fail_on:
            raise DatastoreError({"message": "update failed"})

    async def upsert_punto(self, row):
        self.upserts.append(row)
        if row.get("nombre") in self.fail_on:
            raise DatastoreError({"message": f"upsert failed for {row['nombre']}"})


class FakeNetwork:
    """Answers the audio download and the classification call."""

    def __init__(self):
        self.audio_status = 200
        self.audio_bytes = b"ID3 fake mp3 content"
        self.hf_status = 200
        self.hf_json = {
            "sequence": "buen servicio",
            "labels": ["Satisfacción del cliente", "Buena atención del personal"],
            "scores": [0.9, 0.8],
        }
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET":
            return httpx.Response(self.audio_status, content=self.audio_bytes)
        return httpx.Response(self.hf_status, json=self.hf_json)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def settings(tmp_path):
    return Settings(
        hf_api_token="hf-token",
        hf_api_url=HF_URL,
        supabase_url="https://db.test",
        supabase_key="db-key",
        csv_path=str(tmp_path / "puntos.csv"),
        geojson_path=str(tmp_path / "puntos.geojson"),
        tmp_dir=str(tmp_path / "audio"),
    )


@pytest.fixture
def network():
    return FakeNetwork()


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def context(settings, network, fake_openai, fake_store):
    return AppContext(
        settings=settings,
        http_client=network.client(),
        openai_client=fake_openai,
        store=fake_store,
    )


@pytest.fixture
def client(context):
    """TestClient wired to the fakes through the context dependency."""
    app.dependency_overrides[get_context] = lambda: context
    yield TestClient(app)
    app.dependency_overrides.clear()
