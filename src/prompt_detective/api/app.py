"""FastAPI app exposing the generation cache for debugging outside the UI."""

from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from prompt_detective.config.settings import Settings, settings
from prompt_detective.core.logging import get_logger, setup_logging
from prompt_detective.core.metrics import metrics
from prompt_detective.core.middleware import ObservabilityMiddleware
from prompt_detective.game.actions import GameService, get_game_service

setup_logging()
logger = get_logger(__name__)


def get_settings() -> Settings:
    return settings


def _not_found() -> Response:
    return PlainTextResponse("Not found", status_code=404)


app = FastAPI(title="Prompt Detective", version="0.1.0")
app.add_middleware(ObservabilityMiddleware)


@app.get("/health")
async def health() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse({"status": "ok", "service": "prompt-detective"})


@app.get("/metrics")
async def get_metrics() -> JSONResponse:
    """Metrics endpoint."""
    return JSONResponse(metrics.snapshot())


@app.get("/api/debug/case")
async def debug_case(
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    force: Optional[str] = None,
    options: Optional[str] = None,
    config: Settings = Depends(get_settings),
    service: GameService = Depends(get_game_service),
) -> Response:
    """Detective case for a session; ``options=1`` adds its rectification options."""
    if not config.debug_endpoints_enabled:
        return _not_found()

    case = await service.generate_case(session_id, force_new=force == "1")
    if options != "1":
        return JSONResponse(case.to_json())

    rectification_options = await service.generate_rectification_options(case, session_id)
    return JSONResponse(
        {
            "caseData": case.to_json(),
            "rectificationOptions": [option.to_json() for option in rectification_options],
        }
    )


@app.get("/api/debug/audit-case")
async def debug_audit_case(
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    force: Optional[str] = None,
    config: Settings = Depends(get_settings),
    service: GameService = Depends(get_game_service),
) -> Response:
    """Audit case for a session."""
    if not config.debug_endpoints_enabled:
        return _not_found()

    audit_case = await service.generate_audit_case(session_id, force_new=force == "1")
    return JSONResponse(audit_case.to_json())


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting Prompt Detective debug API...")
    uvicorn.run(app, host="0.0.0.0", port=8000)
