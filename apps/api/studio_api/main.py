import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studio_api.core.config import settings
from studio_api.core.logging import configure_logging
from studio_api.routers.appointments import router as appointments_router
from studio_api.routers.availability import router as availability_router
from studio_api.routers.booking import router as booking_router
from studio_api.routers.cron import router as cron_router
from studio_api.routers.devices import router as devices_router
from studio_api.routers.time_off import router as time_off_router
from studio_api.routers.work_shifts import router as work_shifts_router
from studio_api.routers.working_hours import router as working_hours_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Studio Booking API")

allow_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]

# Safe fallback for local dev if env var not set
if not allow_origins:
  allow_origins = [
    "http://localhost:8081",
    "http://127.0.0.1:8081",
  ]

app.add_middleware(
  CORSMiddleware,
  allow_origins=allow_origins,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)

app.include_router(availability_router, prefix="/availability", tags=["availability"])
app.include_router(booking_router, prefix="/booking", tags=["booking"])
app.include_router(appointments_router, prefix="/appointments", tags=["appointments"])
app.include_router(working_hours_router, prefix="/working-hours", tags=["working-hours"])
app.include_router(time_off_router, prefix="/time-off", tags=["time-off"])
app.include_router(work_shifts_router, prefix="/work-shifts", tags=["work-shifts"])
app.include_router(devices_router, prefix="/devices", tags=["devices"])
app.include_router(cron_router, prefix="/cron", tags=["cron"])

logger.info("Studio Booking API ready (business timezone %s)", settings.business_timezone)

@app.get("/health")
def health():
  return {"status": "ok"}
