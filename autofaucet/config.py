"""Application configuration loaded from environment variables."""

import os

from dotenv import load_dotenv

load_dotenv()

# Credentials
FAUCET_USERNAME = os.getenv("FAUCET_USERNAME", "")
FAUCET_PASSWORD = os.getenv("FAUCET_PASSWORD", "")

# Captcha provider
CAPTCHA_PROVIDER = os.getenv("CAPTCHA_PROVIDER", "")
CAPTCHA_TOKEN = os.getenv("CAPTCHA_TOKEN", "")
CAPTCHA_VISUAL_FEEDBACK = os.getenv("CAPTCHA_VISUAL_FEEDBACK", "false").lower() == "true"
CAPTCHA_SOLVE_TIMEOUT = int(os.getenv("CAPTCHA_SOLVE_TIMEOUT", "120"))
CAPTCHA_POLL_INTERVAL = float(os.getenv("CAPTCHA_POLL_INTERVAL", "5"))

# Browser
DEBUG = os.getenv("AUTOFAUCET_DEBUG", "false").lower() == "true"
BROWSER_TIMEOUT = int(os.getenv("BROWSER_TIMEOUT", "30000"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
