"""HTTP API for stopvot."""

from __future__ import annotations

from fastapi import FastAPI, HTTPException

from stopvot import __version__
from stopvot.config import load_config
from stopvot.core import analyze_textgrid
from stopvot.models import AnalyzeRequest, HealthResponse, VotResponse


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    app = FastAPI(
        title="stopvot",
        version=__version__,
        description="VOT and closure measurement service API.",
    )
    config = load_config()

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    def health() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__, env=config.env)

    @app.post("/v1/vot", response_model=VotResponse, tags=["analysis"])
    def analyze(request: AnalyzeRequest) -> VotResponse:
        try:
            outcome = analyze_textgrid(request.textgrid_path, request.settings)
        except (OSError, ValueError) as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if outcome.error is not None:
            raise HTTPException(status_code=422, detail=str(outcome.error))
        return outcome.to_response()

    return app


app = create_app()
