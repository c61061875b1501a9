"""FastAPI surface for the itinerary planner."""
from __future__ import annotations

# Load environment variables from .env file
from dotenv import load_dotenv

# Load .env file before any other imports that might need environment variables
load_dotenv()


from typing import Any, Dict
from fastapi import FastAPI, HTTPException
import logging
import sentry_sdk
from fastapi.middleware.cors import CORSMiddleware

from src.api.dependencies import get_planner_bundle, get_settings, lifespan
from src.api.schemas import ChatRequest, ChatResponse, ItineraryRequest, MapsConfig
from src.core.config import ApiSettings
from src.core.schemas import Itinerary
from src.workflows.planner import EmptyModelReplyError

logger = logging.getLogger(__name__)


def init_error_reporting(settings: ApiSettings) -> bool:
    """Start Sentry when a DSN is configured; return whether it was started."""

    if not settings.sentry_dsn:
        logger.info("SENTRY_DSN not set; error reporting disabled")
        return False
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        enable_logs=True,
        send_default_pii=True,
        traces_sample_rate=1.0,
    )
    return True


init_error_reporting(get_settings())

app = FastAPI(title="Itinerary Planner API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/itinerary", response_model=Itinerary, response_model_exclude_none=True)
async def create_itinerary(payload: ItineraryRequest) -> Itinerary:
    """Generate a map-ready itinerary for a city.

    The chat model drafts the plan; every stop is then placed on the map
    through Google Maps. Stops that cannot be placed are dropped, and the
    response always holds exactly ``metadata.days`` days, each with a label
    and a (possibly empty) list of stops.

    Example JSON payload:
        ```json
        {"city": "Lisbon", "days": 3}
        ```
    """

    logger.info(f"Itinerary request: {payload.city}, {payload.days} days")

    bundle = get_planner_bundle()
    try:
        itinerary = await bundle.generate_itinerary(city=payload.city, days=payload.days)
    except ValueError as exc:
        logger.error(f"Value error during itinerary generation: {str(exc)}")
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except EmptyModelReplyError as exc:
        logger.error(f"Language model returned nothing for {payload.city}")
        sentry_sdk.capture_exception(exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except Exception as exc:
        logger.error(f"Unexpected error during itinerary generation: {str(exc)}", exc_info=True)
        sentry_sdk.capture_exception(exc)
        raise HTTPException(status_code=500, detail=f"Failed to generate itinerary: {exc}") from exc

    logger.info(f"Itinerary for {payload.city} ready with {itinerary.metadata.days} days")
    return itinerary


@app.post("/api/chat", response_model=ChatResponse)
async def chat(payload: ChatRequest) -> ChatResponse:
    """Answer a free-text travel question.

    Model outages come back as a polite apology rather than an error.
    """

    bundle = get_planner_bundle()
    try:
        reply = await bundle.chat_reply(payload.text)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.error(f"Chat processing error: {str(exc)}", exc_info=True)
        sentry_sdk.capture_exception(exc)
        raise HTTPException(status_code=500, detail=f"Failed to process chat message: {exc}") from exc
    return ChatResponse(reply=reply)


@app.get("/api/config", response_model=MapsConfig)
async def maps_config() -> MapsConfig:
    """Expose the browser-side Google Maps key."""

    settings = get_settings()
    return MapsConfig(google_maps_api_key=settings.google_maps_api_key or "")


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """Simple health endpoint used for readiness checks."""

    return {"status": "healthy", "service": "itinerary-api"}


@app.get("/geocode/stats")
async def geocode_stats() -> Dict[str, Any]:
    """Report the geocode cache usage of the running planner."""

    bundle = get_planner_bundle()
    return {"geocode_cache": bundle.cache_stats()}
