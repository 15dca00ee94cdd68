"""Captcha detection, provider dispatch and token injection."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from ..constants import (
    FIND_RECAPTCHAS_JS,
    HIGHLIGHT_DETECTED_COLOR,
    HIGHLIGHT_RECAPTCHAS_JS,
    HIGHLIGHT_SOLVED_COLOR,
    INJECT_RECAPTCHA_TOKEN_JS,
)
from ..models.captcha import CaptchaInfo, CaptchaSolution, SolveCaptchasResult, SolvedCaptcha
from ..models.session import CaptchaOptions
from .capmonster import CapMonsterClient, CaptchaProviderError

Logger = Union[logging.Logger, logging.LoggerAdapter]


class CaptchaProvider(str, Enum):
    CAPMONSTER = "capmonster"
    TWOCAPTCHA = "2captcha"


async def find_recaptchas(page: Page) -> list[CaptchaInfo]:
    """Return every reCAPTCHA widget present on the current page."""
    found = await page.evaluate(FIND_RECAPTCHAS_JS)
    return [CaptchaInfo(url=page.url, **item) for item in found]


async def highlight_recaptchas(page: Page, color: str):
    """Outline captcha widgets so a watching user can follow the solver."""
    await page.evaluate(HIGHLIGHT_RECAPTCHAS_JS, color)


async def inject_token(page: Page, captcha: CaptchaInfo, token: str) -> SolvedCaptcha:
    try:
        callback_fired = await page.evaluate(
            INJECT_RECAPTCHA_TOKEN_JS, {"sitekey": captcha.sitekey, "token": token}
        )
    except PlaywrightError as e:
        return SolvedCaptcha(id=captcha.id, is_solved=False, error=str(e))
    return SolvedCaptcha(id=captcha.id, is_solved=True, callback_fired=bool(callback_fired))


async def _solve_with_capmonster(
    page: Page, options: CaptchaOptions, logger: Logger
) -> Optional[SolveCaptchasResult]:
    logger.info("Solving captcha with CapMonster")
    try:
        captchas = await find_recaptchas(page)
        if options.visual_feedback and captchas:
            await highlight_recaptchas(page, HIGHLIGHT_DETECTED_COLOR)

        result = SolveCaptchasResult(captchas=captchas)
        if not captchas:
            logger.info("No captchas found on page")
            return result

        async with CapMonsterClient(options.token, logger=logger) as client:
            for captcha in captchas:
                requested_at = datetime.now(timezone.utc)
                started = time.monotonic()
                solution = CaptchaSolution(
                    id=captcha.id, provider=CaptchaProvider.CAPMONSTER.value, requested_at=requested_at
                )
                try:
                    solution.text = await client.solve_recaptcha(
                        captcha.url, captcha.sitekey, invisible=captcha.invisible
                    )
                except CaptchaProviderError as e:
                    logger.error(f"CapMonster could not solve {captcha.id}: {e}")
                    solution.error = str(e)
                solution.responded_at = datetime.now(timezone.utc)
                solution.duration = time.monotonic() - started
                result.solutions.append(solution)

                if solution.text:
                    result.solved.append(await inject_token(page, captcha, solution.text))
                else:
                    result.solved.append(SolvedCaptcha(id=captcha.id, error=solution.error))

        if options.visual_feedback and result.ok:
            await highlight_recaptchas(page, HIGHLIGHT_SOLVED_COLOR)
        return result

    except PlaywrightError as e:
        logger.error(f"Captcha solving failed on page: {e}")
        return None


async def _solve_with_2captcha(
    page: Page, options: CaptchaOptions, logger: Logger
) -> Optional[SolveCaptchasResult]:
    # TODO: add a 2captcha client (in.php / res.php polling) next to CapMonsterClient
    logger.warning("2captcha provider is not implemented yet")
    return None


_HANDLERS: dict[CaptchaProvider, Callable[[Page, CaptchaOptions, Logger], Awaitable[Optional[SolveCaptchasResult]]]] = {
    CaptchaProvider.CAPMONSTER: _solve_with_capmonster,
    CaptchaProvider.TWOCAPTCHA: _solve_with_2captcha,
}


async def solve_captchas(
    page: Page, options: Optional[CaptchaOptions], logger: Logger
) -> Optional[SolveCaptchasResult]:
    """Solve the captchas on ``page`` with the configured provider.

    Returns the structured result, or None when no provider is configured,
    the provider id is unknown, or solving failed.
    """
    if options is None:
        return None

    try:
        provider = CaptchaProvider(options.id)
    except ValueError:
        logger.error("Invalid captcha provider specified")
        return None

    return await _HANDLERS[provider](page, options, logger)


class CaptchaSolver:
    """Captcha provider registered on a browsing session."""

    def __init__(self, options: CaptchaOptions, logger: Logger):
        self.options = options
        self.logger = logger

    @property
    def provider_id(self) -> str:
        return self.options.id

    async def solve(self, page: Page) -> Optional[SolveCaptchasResult]:
        return await solve_captchas(page, self.options, self.logger)
