from fastapi import FastAPI

from .accounts import router as accounts_router
from .assessments import router as assessments_router
from .contacts import router as contacts_router
from .responses import router as responses_router
from .templates import router as templates_router


def include_modular_routers(app: FastAPI, prefix: str = "") -> None:
    app.include_router(accounts_router, prefix=prefix, tags=["accounts"])
    app.include_router(contacts_router, prefix=prefix, tags=["contacts"])
    app.include_router(templates_router, prefix=prefix, tags=["templates"])
    app.include_router(assessments_router, prefix=prefix, tags=["assessments"])
    app.include_router(responses_router, prefix=prefix, tags=["responses"])


__all__ = ["include_modular_routers"]
