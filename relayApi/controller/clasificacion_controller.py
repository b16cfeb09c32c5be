import logging

from fastapi import HTTPException

from relayApi.dependencies import AppContext
from relayApi.model.clasificacion_request import ClasificarAudioRequest
from relayApi.model.clasificacion_response import ClasificarAudioResponse
from relayApi.service.audio_service import download_audio, temporary_audio_file
from relayApi.service.errors import RelayError
from relayApi.service.huggingface_service import classify_text
from relayApi.service.metrics_service import compute_metrics, scores_by_label
from relayApi.service.openai_service import transcribe_audio

logger = logging.getLogger(__name__)


async def handle_audio_classification(request: ClasificarAudioRequest, context: AppContext) -> ClasificarAudioResponse:
    settings = context.settings
    try:
        with temporary_audio_file(settings.tmp_dir, request.audioUrl) as file_path:
            await download_audio(context.http_client, request.audioUrl, file_path)
            texto = await transcribe_audio(
                context.openai_client, file_path, settings.language, settings.whisper_model
            )
        clasificacion = await classify_text(
            context.http_client,
            texto,
            settings.candidate_labels,
            model=settings.hf_model,
            token=settings.hf_api_token,
            base_url=settings.hf_api_url,
        )
    except RelayError as e:
        logger.error("Audio classification failed at %s: %s", e.stage, e)
        raise HTTPException(status_code=500, detail=e.payload)
    except Exception as e:
        logger.exception("Unexpected error during audio classification")
        raise HTTPException(status_code=500, detail=str(e))

    metricas = compute_metrics(scores_by_label(clasificacion))

    if request.punto_id:
        try:
            await context.store.update_punto(request.punto_id, metricas.model_dump())
        except Exception:
            logger.exception("Could not update metrics for punto %s", request.punto_id)

    return ClasificarAudioResponse(texto=texto, clasificacion=clasificacion, metricas=metricas)
