import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from yojanamitra.config import settings
from yojanamitra.routes import eligibility_router, schemes_router
from yojanamitra.services.catalog_service import JsonSchemeCatalog
from yojanamitra.services.llm_service import create_llm_service
from yojanamitra.services.mongo_service import MongoSchemeCatalog

# Configure logging
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.catalog_backend == "mongo":
        catalog = MongoSchemeCatalog()
        await catalog.connect()
    else:
        catalog = JsonSchemeCatalog(settings.catalog_path)
        logger.info(f"Using scheme catalog file {settings.catalog_path}")
    app.state.catalog = catalog
    app.state.explainer = create_llm_service()
    yield
    # Shutdown
    if app.state.explainer is not None:
        await app.state.explainer.close()
    if isinstance(catalog, MongoSchemeCatalog):
        await catalog.close()


app = FastAPI(
    title=settings.app_name,
    description="Explainable eligibility matching for Indian government welfare schemes",
    version=settings.app_version,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(eligibility_router, prefix=settings.api_prefix)
app.include_router(schemes_router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    return {"message": f"{settings.app_name} is running", "version": settings.app_version}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "yojanamitra-backend",
        "catalog_backend": settings.catalog_backend,
        "explanations_enabled": settings.llm_enabled
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("yojanamitra.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
