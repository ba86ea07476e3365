import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import SQLModel

import models  # noqa: F401  Ensure tables are registered before create_all
from api.admin_analytics_routes import router as admin_analytics_router
from api.admin_perimeter_routes import router as admin_perimeter_router
from api.auth_routes import router as auth_router
from api.clock_out_routes import router as clock_out_router
from api.perimeter_routes import router as perimeter_router
from api.time_routes import router as time_router
from core import config
from db.session import engine
from utils.timezone_helpers import validate_timezone

# This file is the control center of the whole application

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# Construct the list of allowed origins, always including both dev and production
allowed_origins_list = [
    config.DEV_DOMAIN,
    config.PRODUCTION_DOMAIN,
    "http://127.0.0.1:3000",  # Additional fallback for local dev
]

# Remove any None values and duplicates
allowed_origins_list = sorted(set(origin for origin in allowed_origins_list if origin))

logger.info(f"CORS: Allowing origins: {allowed_origins_list}")


# When We Start, Create the DB Tables if they don't exist
@asynccontextmanager
async def lifespan(app: FastAPI):
    if not validate_timezone(config.APP_TIMEZONE):
        raise RuntimeError(f"APP_TIMEZONE {config.APP_TIMEZONE!r} is not a valid IANA timezone")

    SQLModel.metadata.create_all(engine)

    yield


# Starts Fast API Up; Init
app = FastAPI(title="Shift Clock", lifespan=lifespan)

# Allow requests from the web client in dev & production
app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Connects Routes to main app
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(time_router, prefix="/time", tags=["Time"])
app.include_router(clock_out_router, tags=["Time"])
app.include_router(perimeter_router, prefix="/perimeters", tags=["Perimeters"])
app.include_router(admin_perimeter_router, prefix="/admin/perimeters", tags=["Admin", "Perimeters"])
app.include_router(admin_analytics_router, prefix="/admin/analytics", tags=["Admin", "Analytics"])
