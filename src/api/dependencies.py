from src.api.workflow_service import PlannerBundle
from src.core.config import ApiSettings
from fastapi import FastAPI
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from functools import lru_cache


@lru_cache(maxsize=1)
def get_settings() -> ApiSettings:
    return ApiSettings.from_env()


@lru_cache(maxsize=1)
def get_planner_bundle() -> PlannerBundle:
    return PlannerBundle(get_settings())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    try:
        yield
    finally:
        # Only close a bundle that was actually built.
        if get_planner_bundle.cache_info().currsize:
            bundle = get_planner_bundle()
            await bundle.close()
