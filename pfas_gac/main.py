import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pfas_gac.config import get_settings
from pfas_gac.routers import analysis, breakthrough, datasets, health, isotherm, uncertainty

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting PFAS GAC Lifespan API in %s mode", settings.env)
    logger.info("CORS origins: %s", settings.cors_origins_list)
    yield
    logger.info("Shutting down PFAS GAC Lifespan API")


app = FastAPI(
    title="PFAS GAC Lifespan API",
    description="API for PFAS breakthrough and GAC vessel lifespan modeling",
    version="1.0.0",
    lifespan=lifespan,
)

settings = get_settings()

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(analysis.router)
app.include_router(breakthrough.router)
app.include_router(uncertainty.router)
app.include_router(datasets.router)
app.include_router(isotherm.router)


@app.get("/")
async def root():
    return {
        "name": "PFAS GAC Lifespan API",
        "version": "1.0.0",
        "status": "running",
    }
