import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from relayApi.config import Settings
from relayApi.dependencies import AppContext, build_context, get_context
from relayApi.routes import carga_route, clasificacion_route
from relayApi.service.metrics_service import missing_formula_labels

# Load environment variables from .env file
load_dotenv()

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - [%(levelname)s] - %(name)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared clients on startup and close them on shutdown."""
    context = build_context(Settings.from_env())
    app.state.context = context
    logger.info("Classifying against %d candidate labels with %s",
                len(context.settings.candidate_labels), context.settings.hf_model)
    yield
    await context.aclose()


app = FastAPI(
    title="Punto de venta - Audio classification relay",
    description="Transcribes point-of-sale audio, classifies it and stores derived metrics.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Cuerpo de la solicitud inválido"})


app.include_router(clasificacion_route.router)
app.include_router(carga_route.router)


@app.get("/")
def read_root():
    return {"message": "Welcome to the audio classification relay"}


@app.get("/health")
def health_check(context: AppContext = Depends(get_context)):
    return {
        "status": "ok",
        "missing_labels": missing_formula_labels(context.settings.candidate_labels),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("relayApi.main:app", host="0.0.0.0", port=Settings.from_env().port)
