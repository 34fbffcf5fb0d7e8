"""Pytest configuration and fixtures for the SLI service tests."""

import pytest

from sli_service.models import QueryContext, SLIFilter, get_settings
from sli_service.query import TimeWindow

# 2019-10-21T09:11:24Z .. 09:11:25Z
WINDOW_START = "1571649084"
WINDOW_END = "1571649085"


@pytest.fixture
def carts_context() -> QueryContext:
    """carts service of the sockshop project, dev stage, no filters."""
    return QueryContext(project="sockshop", stage="dev", service="carts")


@pytest.fixture
def handler_context() -> QueryContext:
    return QueryContext(
        project="sockshop",
        stage="dev",
        service="carts",
        filters=[SLIFilter(key="handler", value="=~'ItemsController'")],
    )


@pytest.fixture
def one_second() -> TimeWindow:
    return TimeWindow.parse(WINDOW_START, WINDOW_END)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Settings are cached per process; drop them around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
