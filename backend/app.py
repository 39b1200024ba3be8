from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

from schemas import (
    VerifyRequest, VerifyResponse,
    DrawingVerifyRequest,
    AnalyticsEventRequest, AnalyticsEventResponse,
    ChallengeResponse,
)
from config import ScoringConfig
from scoring import score_shooter_session, score_drawing_session, generate_session_id
from challenge_bank import get_game_challenge
from event_log import AnalyticsEventLog, compute_statistics
from cache import RedisEventStore

# Thresholds are read once at import; restart to pick up new values
scoring_config = ScoringConfig.from_env()

use_redis = os.getenv("EVENT_STORE", "memory").lower() == "redis"
event_log = AnalyticsEventLog(capacity=int(os.getenv("EVENT_LOG_CAPACITY", "1000")))
redis_store = RedisEventStore(capacity=event_log.capacity) if use_redis else None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    if redis_store:
        await redis_store.connect()
        logger.info("Redis event store connected")

    logger.info(f"Verification service ready (threshold={scoring_config.HUMAN_SCORE_THRESHOLD})")

    yield

    if redis_store:
        await redis_store.disconnect()


app = FastAPI(lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    # Echoed inputs may hold NaN/Infinity, which JSONResponse cannot render
    errors = [{k: v for k, v in err.items() if k != "input"} for err in exc.errors()]
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_encoder(errors)}
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _client_info(request: Request):
    return (
        request.headers.get("user-agent"),
        request.headers.get("x-forwarded-for") or "unknown",
    )


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/challenge/{game_type}", response_model=ChallengeResponse)
async def api_challenge(game_type: str):
    """
    Start a verification: a session id plus the game setup (and drawing prompt).
    """
    try:
        challenge = get_game_challenge(game_type)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown game type: {game_type}")

    return ChallengeResponse(session_id=generate_session_id(), **challenge)


@app.post("/verify", response_model=VerifyResponse)
async def api_verify(req: VerifyRequest, request: Request):
    """
    Score a finished shooter game.
    """
    if req.analytics is None:
        raise HTTPException(status_code=400, detail="Analytics data is required")

    analytics = req.analytics
    try:
        result = score_shooter_session(analytics, scoring_config)
    except Exception as e:
        logger.exception(f"Verification error: {e}")
        raise HTTPException(status_code=500, detail="Failed to process verification request")

    session_id = generate_session_id()
    user_agent, ip = _client_info(request)
    logger.info(
        f"Verification attempt: session={session_id} game={req.game_type} score={req.score} "
        f"human_score={result.total_score} is_human={result.is_human} ip={ip} ua={user_agent}"
    )

    duration = None
    if analytics.start_time is not None and analytics.end_time is not None:
        duration = analytics.end_time - analytics.start_time

    return VerifyResponse(
        success=True,
        verification={
            "is_human": result.is_human,
            "score": result.total_score,
            "confidence": result.confidence.value,
            "recommendation": result.recommendation,
            "session_id": session_id,
            "timestamp": _now_iso(),
        },
        analytics={
            "breakdown": result.to_dict()["breakdown"],
            "game_data": {
                "type": req.game_type,
                "final_score": req.score,
                "duration": duration,
                "shots": analytics.shots,
                "hits": analytics.hits,
                "accuracy": analytics.hits / analytics.shots if analytics.shots > 0 else 0,
            },
        },
    )


@app.post("/verify/drawing", response_model=VerifyResponse)
async def api_verify_drawing(req: DrawingVerifyRequest, request: Request):
    """
    Score a finished drawing against its prompt.
    """
    if req.drawing_data is None or not req.prompt:
        raise HTTPException(status_code=400, detail="Drawing data and prompt are required")

    try:
        result = score_drawing_session(req.drawing_data, req.prompt, req.analytics, scoring_config)
    except Exception as e:
        logger.exception(f"Drawing verification error: {e}")
        raise HTTPException(status_code=500, detail="Failed to process verification request")

    session_id = generate_session_id()
    user_agent, ip = _client_info(request)
    logger.info(
        f"Drawing verification attempt: session={session_id} prompt={req.prompt!r} "
        f"human_score={result.total_score} is_human={result.is_human} ip={ip} ua={user_agent}"
    )

    return VerifyResponse(
        success=True,
        verification={
            "is_human": result.is_human,
            "score": result.total_score,
            "confidence": result.confidence.value,
            "recommendation": result.recommendation,
            "session_id": session_id,
            "timestamp": _now_iso(),
        },
        analytics={
            "breakdown": result.to_dict()["breakdown"],
            "game_data": {
                "type": "drawing",
                "prompt": req.prompt,
                "strokes": len(req.drawing_data.strokes),
            },
        },
    )


@app.post("/analytics", response_model=AnalyticsEventResponse)
async def api_record_event(req: AnalyticsEventRequest, request: Request):
    """
    Store a client analytics event.
    """
    if not req.session_id or not req.event_type:
        raise HTTPException(status_code=400, detail="sessionId and eventType are required")

    user_agent, ip = _client_info(request)
    kwargs = dict(data=req.data, timestamp=req.timestamp, user_agent=user_agent, ip=ip)

    if redis_store:
        event = await redis_store.record(req.session_id, req.event_type, **kwargs)
    else:
        event = event_log.record(req.session_id, req.event_type, **kwargs)

    return AnalyticsEventResponse(success=True, event_id=event["id"])


@app.get("/analytics")
async def api_list_events(
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
    limit: int = Query(default=100, ge=1, le=1000)
):
    """
    List recent analytics events with summary statistics.
    """
    if redis_store:
        events = await redis_store.query(session_id=session_id, limit=limit)
    else:
        events = event_log.query(session_id=session_id, limit=limit)

    return {
        "success": True,
        "events": events,
        "statistics": compute_statistics(events),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))
