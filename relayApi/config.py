"""Configuration for the audio classification relay.

Values come from the environment; ``load_dotenv()`` in ``main.py`` fills the
environment from a ``.env`` file first.
"""

import os
import tempfile
from dataclasses import dataclass, field
from typing import List, Optional

DEFAULT_CANDIDATE_LABELS = [
    "Satisfacción del cliente",
    "Buena atención del personal",
    "Surtido completo de productos",
    "Alta afluencia de clientes",
    "Producto dañado o defectuoso",
    "Producto faltante o no disponible",
    "Problemas de surtido",
]


def _parse_labels(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(DEFAULT_CANDIDATE_LABELS)
    labels = [label.strip() for label in raw.split("|")]
    return [label for label in labels if label]


def _parse_bool(raw: Optional[str]) -> bool:
    return (raw or "").strip().lower() in ("1", "true", "yes")


@dataclass
class Settings:
    openai_api_key: Optional[str] = None
    hf_api_token: Optional[str] = None
    hf_model: str = "joeddav/xlm-roberta-large-xnli"
    hf_api_url: str = "https://api-inference.huggingface.co/models"
    whisper_model: str = "whisper-1"
    language: str = "es"

    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    supabase_table: str = "puntos_venta"

    csv_path: str = "data/puntos_venta.csv"
    geojson_path: str = "data/puntos_venta.geojson"
    tmp_dir: str = field(default_factory=tempfile.gettempdir)
    http_timeout_seconds: float = 30.0

    candidate_labels: List[str] = field(default_factory=lambda: list(DEFAULT_CANDIDATE_LABELS))
    strict_labels: bool = False

    port: int = 3001

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from os.environ, falling back to the defaults above."""
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_KEY"),
            hf_api_token=os.getenv("API_TOKEN") or os.getenv("HF_API_TOKEN"),
            hf_model=os.getenv("HF_MODEL", "joeddav/xlm-roberta-large-xnli"),
            hf_api_url=os.getenv("HF_API_URL", "https://api-inference.huggingface.co/models"),
            whisper_model=os.getenv("WHISPER_MODEL", "whisper-1"),
            language=os.getenv("TRANSCRIPTION_LANGUAGE", "es"),
            supabase_url=os.getenv("SUPABASE_URL"),
            supabase_key=os.getenv("SUPABASE_KEY"),
            supabase_table=os.getenv("SUPABASE_TABLE", "puntos_venta"),
            csv_path=os.getenv("CSV_PATH", "data/puntos_venta.csv"),
            geojson_path=os.getenv("GEOJSON_PATH", "data/puntos_venta.geojson"),
            tmp_dir=os.getenv("AUDIO_TMP_DIR") or tempfile.gettempdir(),
            http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "30")),
            candidate_labels=_parse_labels(os.getenv("CANDIDATE_LABELS")),
            strict_labels=_parse_bool(os.getenv("STRICT_LABELS")),
            port=int(os.getenv("PORT", "3001")),
        )
