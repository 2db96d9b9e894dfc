from __future__ import annotations

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from riichi_score.config import settings
from riichi_score.errors import HandRejected
from riichi_score.hand_scoring import score_hand_shape
from riichi_score.log_config import setup_logging
from riichi_score.schemas import ErrorBody, ErrorResponse, ScoreRequest, ScoreResponse

setup_logging(settings.log_dir, settings.log_level)

app = FastAPI(title="Riichi Hand Score API", version="0.1.0")


@app.exception_handler(HandRejected)
def hand_rejected_handler(request: Request, exc: HandRejected) -> JSONResponse:
    body = ErrorResponse(error=ErrorBody(code=exc.reason.value, message=exc.message, details=exc.details))
    return JSONResponse(status_code=422, content=body.model_dump())


@app.get("/")
def root() -> dict[str, str]:
    return {
        "message": "Riichi Hand Score API",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/v1/score", response_model=ScoreResponse)
def score(req: ScoreRequest) -> ScoreResponse:
    result = score_hand_shape(req.hand, req.context, req.rules)
    return ScoreResponse(score_id=uuid4(), status="ok", result=result)
