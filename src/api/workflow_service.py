from src.core.config import ApiSettings
from src.core.schemas import Itinerary
from src.services.geocoding import create_place_resolver
from src.workflows.chat import TravelAssistant
from src.workflows.planner import ItineraryPlanner
from langchain_openai import ChatOpenAI


REQUIRED_SETTINGS = [
    "openai_api_key",
    "google_maps_api_key",
]


def _ensure_configuration(settings: ApiSettings) -> None:
    missing = [field for field in REQUIRED_SETTINGS if not getattr(settings, field)]
    if missing:
        joined = ", ".join(missing)
        raise RuntimeError(
            f"Missing required environment variables for itinerary planner: {joined}"
        )


class PlannerBundle:
    """Container for the itinerary planner and its dependencies.

    Holds the chat model and the Google Maps backed place resolver for the
    lifetime of the application. Place lookups go through the process-wide
    geocode cache, so repeated places across requests are resolved once.

    Attributes:
        settings: API configuration with external service credentials
        llm: Chat model that drafts the itinerary
        planner: Planner combining the model with place resolution
        assistant: Free-text travel assistant sharing the same model
    """

    def __init__(self, settings: ApiSettings) -> None:
        _ensure_configuration(settings)

        self.settings = settings
        self.llm = ChatOpenAI(
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
            api_key=settings.ensure("openai_api_key"),
        )
        self.resolver = create_place_resolver(settings)
        self.planner = ItineraryPlanner(self.llm, self.resolver)
        self.assistant = TravelAssistant(self.llm)

    def __repr__(self) -> str:
        llm_name = getattr(self.llm, "model_name", None) or type(self.llm).__name__
        return (
            f"PlannerBundle(llm='{llm_name}', "
            f"cached_places={len(self.resolver.cache)})"
        )

    async def chat_reply(self, text: str) -> str:
        return await self.assistant.reply(text)

    async def generate_itinerary(self, *, city: str, days: int) -> Itinerary:
        return await self.planner.generate(city, days)

    def cache_stats(self):
        return self.resolver.cache.stats()

    async def close(self) -> None:
        await self.planner.close()
