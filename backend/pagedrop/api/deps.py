"""Request dependencies resolving the services built by create_app."""
from fastapi import Request

from pagedrop.config import Settings
from pagedrop.services.fetcher import UrlFetcher
from pagedrop.services.store import SiteStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> SiteStore:
    return request.app.state.store


def get_fetcher(request: Request) -> UrlFetcher:
    return request.app.state.fetcher
