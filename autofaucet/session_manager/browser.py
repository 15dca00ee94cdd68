"""Camoufox browser automation: validate, launch, navigate, log in."""

from __future__ import annotations

import uuid
from typing import Optional

from camoufox.async_api import AsyncCamoufox
from playwright.async_api import BrowserContext, Page

from ..config import BROWSER_TIMEOUT
from ..constants import AUTOFAUCET_DASHBOARD_URL
from ..helpers import non_null_empty
from ..log import SessionLogger, get_session_logger
from ..models.session import (
    CaptchaOptions,
    LoginOptions,
    LoginResult,
    SessionConfig,
    SessionReport,
    SessionState,
)
from .captcha import CaptchaSolver
from .login import LoginSequencer


class BrowsingSession:
    """A single browser session that logs into AutoFaucet.

    Owns its browser, context and page for its whole lifetime. Use as an
    async context manager to keep the page open after the login attempt:

        async with BrowsingSession(config) as session:
            report = await session.run()
            if report.logged_in:
                ...  # session.page is on the dashboard
    """

    def __init__(self, config: SessionConfig, logger: Optional[SessionLogger] = None):
        self.config = config
        self.logger = logger or get_session_logger(uuid.uuid4().hex[:8])
        self.captcha_solver: Optional[CaptchaSolver] = None
        self._camoufox = None
        self._browser = None
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    @property
    def session_id(self) -> str:
        return self.logger.session_id

    @property
    def is_running(self) -> bool:
        return self._page is not None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("BrowsingSession not started")
        return self._page

    async def __aenter__(self) -> BrowsingSession:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.stop()

    def validate(self) -> bool:
        """Check that captcha options (if any) and credentials are filled in."""
        captcha = self.config.captcha
        if captcha is not None and not non_null_empty(captcha.id, captcha.token):
            self.logger.source("CaptchaSolver").error("Invalid captcha options provided")
            return False

        login = self.config.login
        if not non_null_empty(login.username, login.password):
            self.logger.source("Login").error("Invalid login options provided")
            return False

        self.logger.source("Login").info("Login options set, continuing to run browsing session")
        return True

    def _register_captcha_solver(self):
        if self.config.captcha is None:
            return
        self.captcha_solver = CaptchaSolver(self.config.captcha, self.logger.source("CaptchaSolver"))
        self.logger.source("CaptchaSolver").info(
            f"Captcha options set (provider={self.config.captcha.id})"
        )

    def _report(self, state: SessionState, message: str, outcome: Optional[LoginResult] = None) -> SessionReport:
        return SessionReport(
            session_id=self.session_id,
            state=state,
            outcome=outcome,
            message=message,
            url=self._page.url if self._page is not None else None,
        )

    async def run(self) -> SessionReport:
        """Launch the browser, open the dashboard and attempt to log in."""
        if self.is_running:
            self.logger.warning("Browser already running, stop the session before running it again")
            return self._report(SessionState.ERROR, "Browser already running.")

        if not self.validate():
            return self._report(SessionState.INVALID_CONFIG, "Invalid session configuration.")

        self._register_captcha_solver()
        headless = not self.config.debug

        try:
            self.logger.info(f"Starting browsing session (headless={headless})")
            self._camoufox = AsyncCamoufox(headless=headless, humanize=True)
            self._browser = await self._camoufox.__aenter__()
            self._context = await self._browser.new_context(viewport={"width": 1366, "height": 768})

            self.logger.info("Session started, continuing to open page")
            self._page = await self._context.new_page()
            self._page.set_default_timeout(BROWSER_TIMEOUT)

            await self._page.goto(AUTOFAUCET_DASHBOARD_URL)
        except Exception as e:
            self.logger.source("Page").error(f"Failed to open {AUTOFAUCET_DASHBOARD_URL}: {e}")
            return self._report(SessionState.ERROR, f"Failed to open page: {e}")

        sequencer = LoginSequencer(
            self._page, self.config.login, self.captcha_solver, self.logger.source("Login")
        )
        outcome = await sequencer.run()
        self.logger.source("Login").info(f"Result for login attempt: {outcome.value}")
        return self._report(SessionState.FINISHED, f"Login attempt finished: {outcome.value}", outcome)

    async def stop(self):
        """Close the browser. Safe to call more than once."""
        if self._camoufox is None and self._context is None:
            return
        self.logger.info("Stopping browsing session...")

        try:
            if self._context:
                await self._context.close()
        except Exception as e:
            self.logger.warning(f"Error closing context: {e}")
        finally:
            self._context = None
            self._page = None

        try:
            if self._camoufox:
                await self._camoufox.__aexit__(None, None, None)
        except Exception as e:
            self.logger.warning(f"Error closing camoufox: {e}")
        finally:
            self._camoufox = None
            self._browser = None

        self.logger.info("Browsing session stopped.")


async def start_session(
    login: LoginOptions,
    captcha: Optional[CaptchaOptions] = None,
    debug: bool = False,
    *,
    logger: Optional[SessionLogger] = None,
) -> SessionReport:
    """Run one login attempt and return its report. The browser is always closed."""
    config = SessionConfig(login=login, captcha=captcha, debug=debug)
    async with BrowsingSession(config, logger=logger) as session:
        return await session.run()
