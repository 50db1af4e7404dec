from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from otf_level.api.level import router as level_router
from otf_level.config import ServiceSettings
from otf_level.services.scale_lookup import ScaleLookupClient


def create_app(settings: ServiceSettings, scale_lookup: ScaleLookupClient | None = None) -> FastAPI:
    lookup = scale_lookup or ScaleLookupClient(settings.nias_url, settings.niasToken)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await lookup.aclose()

    app = FastAPI(title="OTF Level Service", lifespan=lifespan)
    app.state.settings = settings
    app.state.scale_lookup = lookup
    app.include_router(level_router)
    return app
