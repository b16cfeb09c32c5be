from fastapi import APIRouter, Depends, HTTPException
from relayApi.dependencies import AppContext, get_context
from relayApi.model.clasificacion_request import ClasificarAudioRequest
from relayApi.model.clasificacion_response import ClasificarAudioResponse
from relayApi.controller.clasificacion_controller import handle_audio_classification

router = APIRouter()


@router.post("/audio-clasificar", response_model=ClasificarAudioResponse)
async def clasificar_audio(request: ClasificarAudioRequest, context: AppContext = Depends(get_context)):
    if not request.audioUrl or not request.audioUrl.strip():
        raise HTTPException(status_code=400, detail="Falta el campo 'audioUrl'")
    return await handle_audio_classification(request, context)
