from __future__ import annotations

from fastapi import FastAPI

from core.config import get_settings
from core.logging import get_logger

from api.routes.health import router as health_router
from api.routes.matches import router as matches_router

logger = get_logger("api.app")


def create_app() -> FastAPI:
    app = FastAPI(title="Futebol na TV API", version="0.1.0")
    try:
        get_settings()
    except Exception as exc:  # pragma: no cover
        logger.error("Impossibile caricare settings: %s", exc)

    app.include_router(health_router)
    app.include_router(matches_router)
    return app


app = create_app()


# Avvio rapido: python -m api.app
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.app:app", host="0.0.0.0", port=8000, reload=False)
