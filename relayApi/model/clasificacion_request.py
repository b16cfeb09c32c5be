from pydantic import BaseModel, field_validator
from typing import Optional, Union

class ClasificarAudioRequest(BaseModel):
    audioUrl: Optional[str] = None
    punto_id: Optional[Union[int, str]] = None # Record that receives the metrics

    @field_validator("punto_id")
    @classmethod
    def punto_id_as_str(cls, value):
        return None if value is None else str(value)
