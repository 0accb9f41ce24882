"""FastAPI application main module.

This module defines the application factory and core API endpoints for the
BasketRec recommendation service. The affinity model is built from the
purchase CSV once, when the application starts, and is read-only afterwards.

Configuration is read from the environment:
    BASKETREC_DATA_PATH: purchase CSV to build the model from.
    BASKETREC_LOG_LEVEL: logging level for the JSON log output.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from basketrec import __version__
from basketrec.api.exceptions import BasketRecException
from basketrec.api.logging_config import RequestLoggingMiddleware, setup_logging
from basketrec.api.routes import recommend
from basketrec.recommender.train import train_affinity_model

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = "data/groceries.csv"
DATA_PATH_ENV = "BASKETREC_DATA_PATH"
LOG_LEVEL_ENV = "BASKETREC_LOG_LEVEL"


def build_model_state(app: FastAPI, data_path: str) -> None:
    """Build the affinity model and store it on the application state.

    A missing purchase file leaves the service running without a model;
    recommendation requests then answer 503. Any failure while building
    is kept on the state and reported as a 500 by the routes.

    Args:
        app: Application whose state receives the model.
        data_path: Path to the purchase CSV.
    """
    app.state.data_path = data_path
    app.state.model = None
    app.state.load_error = None
    app.state.loaded_at = None

    if not Path(data_path).exists():
        logger.warning(
            "Purchase data not found, serving without a model",
            extra={"data_path": data_path},
        )
        return

    try:
        app.state.model = train_affinity_model(data_path)
        app.state.loaded_at = datetime.now(timezone.utc)
    except Exception as e:
        logger.error(
            "Failed to build model",
            extra={"data_path": data_path, "error": str(e)},
            exc_info=True,
        )
        app.state.load_error = e


def create_app(data_path: Optional[str] = None) -> FastAPI:
    """Create the BasketRec FastAPI application.

    Args:
        data_path: Purchase CSV to build the model from. Defaults to the
            BASKETREC_DATA_PATH environment variable, then data/groceries.csv.

    Returns:
        Configured FastAPI application.
    """
    resolved_path = data_path or os.environ.get(DATA_PATH_ENV, DEFAULT_DATA_PATH)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        build_model_state(app, resolved_path)
        yield

    app = FastAPI(
        title="BasketRec API",
        description="Co-purchase product recommendation service",
        version=__version__,
        lifespan=lifespan,
    )

    # Readable before startup has run
    app.state.data_path = resolved_path
    app.state.model = None
    app.state.load_error = None
    app.state.loaded_at = None

    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(recommend.router)

    @app.exception_handler(BasketRecException)
    async def basketrec_exception_handler(
        request: Request, exc: BasketRecException
    ) -> JSONResponse:
        logger.error(
            exc.message,
            extra={"path": request.url.path, "status_code": exc.status_code},
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": type(exc).__name__,
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.get("/ping")
    def ping() -> Dict[str, str]:
        """Health check endpoint.

        Returns:
            Dictionary with status key set to "ok".
        """
        return {"status": "ok"}

    @app.get("/status")
    def model_status(request: Request) -> Dict[str, Any]:
        """Report whether a model is loaded and how large it is."""
        state = request.app.state
        model = state.model
        return {
            "model_loaded": model is not None,
            "timestamp_last_loaded": (
                state.loaded_at.isoformat() if state.loaded_at else None
            ),
            "data_path": state.data_path,
            "num_products": len(model) if model is not None else 0,
            "num_pairs": model.num_pairs if model is not None else 0,
        }

    return app


setup_logging(os.environ.get(LOG_LEVEL_ENV, "INFO"))

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "basketrec.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
