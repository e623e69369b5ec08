from fastapi import Depends, Request

from sitegen.core.codegen_agent import SiteGenerator
from sitegen.core.publisher import Publisher
from sitegen.utils.config import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_site_generator(settings: Settings = Depends(get_app_settings)) -> SiteGenerator:
    return SiteGenerator(settings)


def get_publisher(request: Request) -> Publisher:
    # one long-lived publisher per app so detached cleanups can be awaited on shutdown
    return request.app.state.publisher
