# Billing backend entrypoint: clients, invoices, quotes and PDF export.

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api import clients
from backend.app.api import dashboard
from backend.app.api import invoices
from backend.app.api import quotes
from backend.app.api import settings as settings_api
from backend.app.core.logging import configure_logging
from backend.app.core.settings import get_settings

settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title=settings.app_name, version=settings.api_version)

origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Document-Url"],
)

app.include_router(clients.router)
app.include_router(invoices.router)
app.include_router(quotes.router)
app.include_router(settings_api.router)
app.include_router(dashboard.router)


@app.get("/")
def read_root():
    return {"app": settings.app_name, "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def create_tables():
    from backend.app.db.base import Base
    from backend.app.db.session import engine

    Base.metadata.create_all(bind=engine)
