# main.py

from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging

from routes import couriers as couriers_routes
from services.couriers.common import failure
from services.couriers.errors import UnsupportedProviderError
from settings import settings

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Parcel Hub",
    description="One API for booking, tracking and reporting on TCS and LCS shipments.",
    version="1.0.0"
)

app.include_router(couriers_routes.data_router)

# Load sheet PDFs are served back from here; the folder is created on startup
app.mount("/storage", StaticFiles(directory=settings.STORAGE_DIR, check_dir=False), name="storage")


@app.on_event("startup")
async def on_startup():
    Path(settings.STORAGE_DIR).mkdir(parents=True, exist_ok=True)


@app.exception_handler(UnsupportedProviderError)
async def unsupported_provider_handler(request: Request, exc: UnsupportedProviderError):
    logger.warning("Rejected request for unknown courier %r", exc.name)
    envelope = failure(str(exc), {"supported": exc.supported}, 404)
    return JSONResponse(status_code=404, content=envelope.model_dump(mode="json"))
