"""Run one AutoFaucet login attempt configured from the environment.

    python -m autofaucet

Prints the session report as JSON and exits non-zero unless the login
succeeded.
"""

from __future__ import annotations

import asyncio
import sys

from .config import CAPTCHA_PROVIDER, CAPTCHA_TOKEN, CAPTCHA_VISUAL_FEEDBACK, DEBUG, FAUCET_PASSWORD, FAUCET_USERNAME
from .models.session import CaptchaOptions, LoginOptions
from .session_manager.browser import start_session


def build_captcha_options() -> CaptchaOptions | None:
    """Captcha solving is enabled when either provider setting is present."""
    if not CAPTCHA_PROVIDER and not CAPTCHA_TOKEN:
        return None
    return CaptchaOptions(id=CAPTCHA_PROVIDER, token=CAPTCHA_TOKEN, visual_feedback=CAPTCHA_VISUAL_FEEDBACK)


def main() -> int:
    report = asyncio.run(
        start_session(
            LoginOptions(username=FAUCET_USERNAME, password=FAUCET_PASSWORD),
            build_captcha_options(),
            debug=DEBUG,
        )
    )
    print(report.model_dump_json(indent=2))
    return 0 if report.logged_in else 1


if __name__ == "__main__":
    sys.exit(main())
