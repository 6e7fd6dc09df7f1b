"""Location Directory — FastAPI backend."""
import logging
import os
import subprocess
import sys
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from utils.config import LOG_LEVEL, PORT, RUN_MIGRATIONS_ON_STARTUP, SEED_DEMO_LOCATIONS

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

from api.locations import get_location_service, render_map_page, router as locations_router
from api.routes import router
from db import get_db, session_scope
from directory_core.cache import build_cache
from directory_core.cache_invalidation import LocationCacheInvalidator
from directory_core.errors import InvalidLocationSearchError, LocationNotFoundError
from directory_core.location_service import LocationService
from directory_core.status import LocationStatus
from repositories.location_repository import count_locations, create_location as repo_create_location
from schemas.locations import ErrorResponse, MapPageResponse

LOG = logging.getLogger(__name__)

# Demo points of interest inserted into an empty database.
_DEMO_LOCATIONS = (
    {
        "title": "Colosseo",
        "description": "Anfiteatro Flavio, il più grande anfiteatro romano.",
        "address": "Piazza del Colosseo, 1, 00184 Roma RM",
        "latitude": 41.89021,
        "longitude": 12.49223,
        "status": LocationStatus.Active,
        "opening_hours": "09:00 - 19:00",
        "ticket_price": "€18",
        "website": "https://colosseo.it",
    },
    {
        "title": "Galleria degli Uffizi",
        "description": "Museo con capolavori del Rinascimento.",
        "address": "Piazzale degli Uffizi, 6, 50122 Firenze FI",
        "latitude": 43.76780,
        "longitude": 11.25530,
        "status": LocationStatus.Active,
        "opening_hours": "08:15 - 18:30",
        "ticket_price": "€25",
        "website": "https://www.uffizi.it",
    },
    {
        "title": "Torre di Pisa",
        "description": "Campanile della cattedrale di Pisa.",
        "address": "Piazza del Duomo, 56126 Pisa PI",
        "latitude": 43.72297,
        "longitude": 10.39659,
        "status": LocationStatus.InAlarm,
        "visitor_notes": "Accesso contingentato.",
    },
    {
        "title": "Villa Reale di Monza",
        "description": "Residenza neoclassica con parco.",
        "address": "Viale Brianza, 1, 20900 Monza MB",
        "latitude": 45.59250,
        "longitude": 9.27540,
        "status": LocationStatus.Inactive,
    },
)


def _run_migrations() -> None:
    """Apply Alembic migrations (alembic upgrade head)."""
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=backend_dir,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"Alembic upgrade failed: {result.stderr or result.stdout}")


def _seed_locations_if_empty() -> None:
    """Insert demo locations so the map has something to show."""
    with session_scope() as db:
        if count_locations(db) > 0:
            return
        for row in _DEMO_LOCATIONS:
            repo_create_location(db, **row)
        LOG.info("Seeded %d demo locations", len(_DEMO_LOCATIONS))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run migrations, seed, and wire the location service with its cache."""
    if RUN_MIGRATIONS_ON_STARTUP:
        _run_migrations()
    service = LocationService(build_cache())
    invalidator = LocationCacheInvalidator(service)
    invalidator.install()
    app.state.location_service = service
    if SEED_DEMO_LOCATIONS:
        _seed_locations_if_empty()
    yield
    invalidator.uninstall()


app = FastAPI(
    title="Location Directory",
    description="Search and browse points of interest on a map",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8080", "http://127.0.0.1:8080"],
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api")
app.include_router(locations_router, prefix="/api")


@app.exception_handler(LocationNotFoundError)
async def location_not_found_handler(request: Request, exc: LocationNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content=ErrorResponse(message="Location not found", error=exc.error_code).model_dump(exclude_none=True),
    )


@app.exception_handler(InvalidLocationSearchError)
async def invalid_search_handler(request: Request, exc: InvalidLocationSearchError) -> JSONResponse:
    LOG.info("Rejected search parameters: %s", exc.errors)
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(message=str(exc), error=exc.error_code, errors=exc.errors).model_dump(),
    )


@app.get("/", response_model=MapPageResponse)
def root(
    request: Request,
    db: Session = Depends(get_db),
    service: LocationService = Depends(get_location_service),
) -> MapPageResponse:
    """Map page data; same as GET /api/locations."""
    return render_map_page(request, db, service)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=PORT)
