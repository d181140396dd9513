# mspdesk/app/api.py
from fastapi import FastAPI

from .db import init_db
from .errors import register_error_handlers
from .relay import router as relay_router
from .routes.clients import router as clients_router
from .routes.dashboard import router as dashboard_router
from .routes.docs import router as docs_router
from .routes.integration import router as integration_router
from .routes.networks import router as networks_router
from .routes.packages import router as packages_router

app = FastAPI(title="MSP Desk API")

register_error_handlers(app)

app.include_router(clients_router)
app.include_router(networks_router)
app.include_router(docs_router)
app.include_router(packages_router)
app.include_router(dashboard_router)
app.include_router(integration_router)
app.include_router(relay_router)


# Startup: init DB
@app.on_event("startup")
def on_startup():
    init_db()


@app.get("/api/health")
def health():
    return {"ok": True}
