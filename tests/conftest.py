"""Shared fixtures: mocked Playwright pages and a per-test session logger.

No real browser is launched anywhere in the suite.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from autofaucet.constants import AUTOFAUCET_DASHBOARD_URL
from autofaucet.log import get_session_logger


def _make_locator() -> MagicMock:
    locator = MagicMock()
    locator.click = AsyncMock()
    locator.press_sequentially = AsyncMock()
    return locator


def make_page(url: str = AUTOFAUCET_DASHBOARD_URL) -> MagicMock:
    """A Page stand-in whose locators are recorded in ``page.locators``."""
    page = MagicMock()
    page.url = url
    page.goto = AsyncMock()
    page.click = AsyncMock()
    page.evaluate = AsyncMock(return_value=[])
    page.wait_for_load_state = AsyncMock()

    locators: dict[str, MagicMock] = {}
    page.locators = locators
    page.locator = MagicMock(side_effect=lambda selector: locators.setdefault(selector, _make_locator()))
    return page


@pytest.fixture()
def mock_page() -> MagicMock:
    return make_page()


@pytest.fixture()
def session_logger(request):
    return get_session_logger(f"test-{request.node.name}")


@pytest.fixture()
def page_factory():
    return make_page
