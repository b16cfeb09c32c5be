import logging

from fastapi import HTTPException

from relayApi.dependencies import AppContext
from relayApi.model.clasificacion_response import CargaResponse
from relayApi.service.loader_service import load_csv, load_geojson

logger = logging.getLogger(__name__)


async def handle_csv_load(context: AppContext) -> CargaResponse:
    try:
        await load_csv(context.store, context.settings.csv_path)
    except Exception as e:
        logger.exception("CSV load failed")
        raise HTTPException(status_code=500, detail=f"CSV load failed: {str(e)}")
    return CargaResponse(mensaje="Datos CSV cargados correctamente")


async def handle_geojson_load(context: AppContext) -> CargaResponse:
    try:
        await load_geojson(context.store, context.settings.geojson_path)
    except Exception as e:
        logger.exception("GeoJSON load failed")
        raise HTTPException(status_code=500, detail=f"GeoJSON load failed: {str(e)}")
    return CargaResponse(mensaje="Datos GeoJSON cargados correctamente")
