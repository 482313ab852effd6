from __future__ import annotations

from fastapi import FastAPI

from pms.api.errors import register_error_handlers
from pms.api.routers import customers, medicines, reports, sales, suppliers
from pms.application.container import AppContainer


def create_app(container: AppContainer, api_prefix: str = "/api") -> FastAPI:
    app = FastAPI(title="Pharmacy Manager API")
    app.state.container = container

    register_error_handlers(app)
    for module in (medicines, customers, suppliers, sales, reports):
        app.include_router(module.router, prefix=api_prefix)

    return app
