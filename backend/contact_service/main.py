# contact_service/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from contact_service.core.settings import settings
from contact_service.routers.contact import router as contact_router
from contact_service.routers.health import router as health_router

app = FastAPI(title=settings.api_title)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["*"],
)

logging.getLogger("uvicorn.error").info(
    f"[main] email_service = {settings.email_service}, rate_limit_backend = {settings.rate_limit_backend}"
)

# Routers; the site's frontend posts to /api/contact
app.include_router(contact_router)
app.include_router(contact_router, prefix="/api")
app.include_router(health_router)
