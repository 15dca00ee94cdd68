"""Tests for captcha provider dispatch, detection and token injection."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from autofaucet.constants import (
    FIND_RECAPTCHAS_JS,
    HIGHLIGHT_DETECTED_COLOR,
    HIGHLIGHT_RECAPTCHAS_JS,
    HIGHLIGHT_SOLVED_COLOR,
    INJECT_RECAPTCHA_TOKEN_JS,
)
from autofaucet.models.captcha import CaptchaInfo
from autofaucet.models.session import CaptchaOptions
from autofaucet.session_manager.capmonster import CaptchaProviderError
from autofaucet.session_manager.captcha import (
    CaptchaProvider,
    CaptchaSolver,
    find_recaptchas,
    inject_token,
    solve_captchas,
)

WIDGET = {"id": "g-recaptcha", "sitekey": "6Lc-site-key", "invisible": False}


def _page_with_widgets(page, widgets):
    async def evaluate(script, arg=None):
        if script == FIND_RECAPTCHAS_JS:
            return widgets
        return True

    page.evaluate = AsyncMock(side_effect=evaluate)
    return page


@pytest.fixture()
def mock_client():
    """Patch CapMonsterClient with an async context manager double."""
    with patch("autofaucet.session_manager.captcha.CapMonsterClient") as mock_cls:
        client = MagicMock()
        client.solve_recaptcha = AsyncMock(return_value="solved-token")
        mock_cls.return_value.__aenter__ = AsyncMock(return_value=client)
        mock_cls.return_value.__aexit__ = AsyncMock(return_value=False)
        yield {"cls": mock_cls, "client": client}


class TestDispatch:
    async def test_no_options_returns_none(self, mock_page, session_logger):
        assert await solve_captchas(mock_page, None, session_logger) is None

    async def test_unknown_provider_returns_none(self, mock_page, session_logger, caplog):
        options = CaptchaOptions(id="anticaptcha", token="abc")
        with caplog.at_level(logging.ERROR):
            assert await solve_captchas(mock_page, options, session_logger) is None
        assert "Invalid captcha provider specified" in caplog.text
        mock_page.evaluate.assert_not_awaited()

    async def test_2captcha_not_implemented(self, mock_page, session_logger, caplog):
        options = CaptchaOptions(id="2captcha", token="abc")
        assert await solve_captchas(mock_page, options, session_logger) is None
        assert "not implemented" in caplog.text

    def test_provider_tags(self):
        assert CaptchaProvider("capmonster") is CaptchaProvider.CAPMONSTER
        assert CaptchaProvider("2captcha") is CaptchaProvider.TWOCAPTCHA


class TestCapMonsterHandler:
    async def test_solves_and_injects(self, mock_page, session_logger, mock_client):
        _page_with_widgets(mock_page, [WIDGET])
        options = CaptchaOptions(id="capmonster", token="api-key")

        result = await solve_captchas(mock_page, options, session_logger)

        assert result.ok
        assert [c.sitekey for c in result.captchas] == ["6Lc-site-key"]
        assert result.solutions[0].text == "solved-token"
        assert result.solutions[0].provider == "capmonster"
        assert result.solved[0].is_solved
        assert result.solved[0].callback_fired is True
        mock_client["cls"].assert_called_once_with("api-key", logger=session_logger)
        mock_client["client"].solve_recaptcha.assert_awaited_once_with(
            mock_page.url, "6Lc-site-key", invisible=False
        )
        mock_page.evaluate.assert_any_await(
            INJECT_RECAPTCHA_TOKEN_JS, {"sitekey": "6Lc-site-key", "token": "solved-token"}
        )

    async def test_no_captchas_is_ok(self, mock_page, session_logger, mock_client):
        _page_with_widgets(mock_page, [])
        result = await solve_captchas(mock_page, CaptchaOptions(id="capmonster", token="k"), session_logger)

        assert result.ok
        assert result.captchas == []
        mock_client["cls"].assert_not_called()

    async def test_provider_error_recorded(self, mock_page, session_logger, mock_client):
        _page_with_widgets(mock_page, [WIDGET])
        mock_client["client"].solve_recaptcha.side_effect = CaptchaProviderError(
            "ERROR_KEY_DOES_NOT_EXIST", "Wrong key"
        )

        result = await solve_captchas(mock_page, CaptchaOptions(id="capmonster", token="bad"), session_logger)

        assert not result.ok
        assert "ERROR_KEY_DOES_NOT_EXIST" in result.solutions[0].error
        assert result.solved[0].is_solved is False

    async def test_page_error_returns_none(self, mock_page, session_logger, mock_client):
        from playwright.async_api import Error as PlaywrightError

        mock_page.evaluate.side_effect = PlaywrightError("Execution context was destroyed")
        result = await solve_captchas(mock_page, CaptchaOptions(id="capmonster", token="k"), session_logger)
        assert result is None

    async def test_visual_feedback_highlights(self, mock_page, session_logger, mock_client):
        _page_with_widgets(mock_page, [WIDGET])
        options = CaptchaOptions(id="capmonster", token="k", visual_feedback=True)

        await solve_captchas(mock_page, options, session_logger)

        mock_page.evaluate.assert_any_await(HIGHLIGHT_RECAPTCHAS_JS, HIGHLIGHT_DETECTED_COLOR)
        mock_page.evaluate.assert_any_await(HIGHLIGHT_RECAPTCHAS_JS, HIGHLIGHT_SOLVED_COLOR)

    async def test_no_highlight_without_feedback(self, mock_page, session_logger, mock_client):
        _page_with_widgets(mock_page, [WIDGET])
        await solve_captchas(mock_page, CaptchaOptions(id="capmonster", token="k"), session_logger)

        scripts = [call.args[0] for call in mock_page.evaluate.await_args_list]
        assert HIGHLIGHT_RECAPTCHAS_JS not in scripts


class TestFindRecaptchas:
    async def test_attaches_page_url(self, page_factory):
        page = _page_with_widgets(page_factory("https://autofaucet.org/login"), [WIDGET])
        found = await find_recaptchas(page)
        assert found[0].url == "https://autofaucet.org/login"
        assert found[0].id == "g-recaptcha"


class TestCaptchaSolver:
    async def test_solve_uses_bound_options(self, mock_page, session_logger):
        solver = CaptchaSolver(CaptchaOptions(id="unsupported", token="k"), session_logger)
        assert solver.provider_id == "unsupported"
        assert await solver.solve(mock_page) is None


class TestInjectToken:
    async def test_records_missing_callback(self, mock_page):
        mock_page.evaluate = AsyncMock(return_value=False)
        captcha = CaptchaInfo(id="g1", sitekey="6Lc-site-key", url=mock_page.url)

        solved = await inject_token(mock_page, captcha, "tok")

        assert solved.is_solved is True
        assert solved.callback_fired is False

    async def test_page_error_marks_unsolved(self, mock_page):
        from playwright.async_api import Error as PlaywrightError

        mock_page.evaluate = AsyncMock(side_effect=PlaywrightError("Target closed"))
        captcha = CaptchaInfo(id="g1", sitekey="6Lc-site-key", url=mock_page.url)

        solved = await inject_token(mock_page, captcha, "tok")

        assert solved.is_solved is False
        assert "Target closed" in solved.error
