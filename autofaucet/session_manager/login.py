"""Login state machine for the AutoFaucet sign-in form."""

from __future__ import annotations

import logging
from typing import Optional, Union

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page

from ..constants import AUTOFAUCET_DASHBOARD_URL, SELECTORS
from ..models.session import LoginOptions, LoginResult
from .capmonster import CaptchaProviderError
from .captcha import CaptchaSolver

Logger = Union[logging.Logger, logging.LoggerAdapter]


class OutcomeLatch:
    """Holds the first committed login outcome; later commits are ignored."""

    def __init__(self, logger: Optional[Logger] = None):
        self._outcome: Optional[LoginResult] = None
        self._logger = logger

    @property
    def settled(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> Optional[LoginResult]:
        return self._outcome

    def commit(self, outcome: LoginResult) -> bool:
        if self._outcome is not None:
            if self._logger:
                self._logger.debug(f"Ignoring {outcome.value}, already settled on {self._outcome.value}")
            return False
        self._outcome = outcome
        return True


def _is_dashboard(url: str) -> bool:
    return url.rstrip("/") == AUTOFAUCET_DASHBOARD_URL.rstrip("/")


class LoginSequencer:
    """Drives one login attempt on an already navigated page.

    Steps run strictly in order and the first failing step settles the
    outcome; nothing after it is attempted.
    """

    def __init__(
        self,
        page: Page,
        login: LoginOptions,
        solver: Optional[CaptchaSolver],
        logger: Logger,
    ):
        self.page = page
        self.login = login
        self.solver = solver
        self.logger = logger
        self.latch = OutcomeLatch(logger)

    async def run(self) -> LoginResult:
        for step in (self._wait_for_page, self._fill_username, self._fill_password, self._solve_captcha, self._submit):
            await step()
            if self.latch.settled:
                return self.latch.outcome

        if _is_dashboard(self.page.url):
            self.latch.commit(LoginResult.LOGIN_SUCCESS)
        else:
            self.logger.warning(f"Login landed on {self.page.url}")
            self.latch.commit(LoginResult.INVALID_CREDENTIALS)
        return self.latch.outcome

    async def _wait_for_page(self):
        try:
            await self.page.wait_for_load_state("networkidle")
        except PlaywrightError as e:
            self.logger.error(f"Page did not settle: {e}")
            self.latch.commit(LoginResult.PAGE_OTHER_ERROR)

    async def _type_into(self, selector: str, value: str, failure: LoginResult):
        try:
            field = self.page.locator(selector)
            await field.click()
            await field.press_sequentially(value)
        except PlaywrightError as e:
            self.logger.error(f"Could not fill {selector}: {e}")
            self.latch.commit(failure)

    async def _fill_username(self):
        await self._type_into(SELECTORS["login_username"], self.login.username, LoginResult.USERNAME_FIELD_RELATED)

    async def _fill_password(self):
        await self._type_into(SELECTORS["login_password"], self.login.password, LoginResult.PASSWORD_FIELD_RELATED)

    async def _solve_captcha(self):
        if self.solver is None:
            self.logger.warning("No captcha provider configured, submitting without solving")
            return

        try:
            result = await self.solver.solve(self.page)
        except (PlaywrightError, CaptchaProviderError) as e:
            self.logger.error(f"Captcha solving raised: {e}")
            result = None

        if result is None or not result.ok:
            self.logger.error("Failed to solve captcha")
            self.latch.commit(LoginResult.CAPTCHA_FIELD_RELATED)
            return

        self.solver.logger.info(f"Successfully solved captcha! (Provider: {self.solver.provider_id})")

    async def _submit(self):
        try:
            async with self.page.expect_navigation():
                await self.page.click(SELECTORS["login_submit"])
        except PlaywrightError as e:
            self.logger.error(f"Submitting the login form failed: {e}")
            self.latch.commit(LoginResult.PAGE_OTHER_ERROR)
