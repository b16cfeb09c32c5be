from pydantic import BaseModel
from typing import List, Optional


class Clasificacion(BaseModel):
    labels: List[str]
    scores: List[float]
    sequence: Optional[str] = None


class Metricas(BaseModel):
    nps: float = 0.0
    fillfoundrate: float = 0.0
    damage_rate: float = 0.0
    out_of_stock: float = 0.0


class ClasificarAudioResponse(BaseModel):
    texto: str
    clasificacion: Clasificacion
    metricas: Metricas


class CargaResponse(BaseModel):
    mensaje: str
