# LeadHub CRM backend entrypoint: FastAPI app, CORS, error handlers and routers.

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leadhub.app.api import auth
from leadhub.app.api import businesses
from leadhub.app.api import clients
from leadhub.app.api import dashboard
from leadhub.app.api import export
from leadhub.app.api import notes
from leadhub.app.core.errors import register_exception_handlers
from leadhub.app.core.logging_config import configure_logging
from leadhub.app.core.settings import get_settings
from leadhub.app.db.init_db import init_database
from leadhub.app.db.session import engine

configure_logging()
settings = get_settings()

app = FastAPI(title=settings.app_name, version=settings.api_version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(clients.router)
app.include_router(notes.router)
app.include_router(businesses.router)
app.include_router(dashboard.router)
app.include_router(export.router)


@app.get("/")
def read_root():
    return {"app": "LeadHub CRM backend", "status": "ok"}


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.on_event("startup")
def bootstrap_database():
    init_database(engine)
