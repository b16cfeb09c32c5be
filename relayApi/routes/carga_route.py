from fastapi import APIRouter, Depends
from relayApi.dependencies import AppContext, get_context
from relayApi.model.clasificacion_response import CargaResponse
from relayApi.controller.carga_controller import handle_csv_load, handle_geojson_load

router = APIRouter()


@router.post("/cargar-csv", response_model=CargaResponse)
async def cargar_csv(context: AppContext = Depends(get_context)):
    return await handle_csv_load(context)


@router.post("/cargar-geojson", response_model=CargaResponse)
async def cargar_geojson(context: AppContext = Depends(get_context)):
    return await handle_geojson_load(context)
