"""Pydantic models for session configuration and login outcomes."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class LoginOptions(BaseModel):
    """Credentials typed into the faucet login form."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str


class CaptchaOptions(BaseModel):
    """Captcha solving provider selection."""

    model_config = ConfigDict(frozen=True)

    id: str  # provider id, e.g. "capmonster"
    token: str
    visual_feedback: bool = False


class SessionConfig(BaseModel):
    """Everything a browsing session needs, fixed at construction."""

    model_config = ConfigDict(frozen=True)

    login: LoginOptions
    captcha: Optional[CaptchaOptions] = None
    debug: bool = False


class LoginResult(str, Enum):
    """Terminal outcome of a single login attempt."""

    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    USERNAME_FIELD_RELATED = "USERNAME_FIELD_RELATED"
    PASSWORD_FIELD_RELATED = "PASSWORD_FIELD_RELATED"
    CAPTCHA_FIELD_RELATED = "CAPTCHA_FIELD_RELATED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    PAGE_OTHER_ERROR = "PAGE_OTHER_ERROR"


class SessionState(str, Enum):
    INVALID_CONFIG = "invalid_config"
    ERROR = "error"
    FINISHED = "finished"


class SessionReport(BaseModel):
    """What a browsing session run ended with."""

    session_id: str
    state: SessionState
    outcome: Optional[LoginResult] = None
    message: str = ""
    url: Optional[str] = None

    @property
    def logged_in(self) -> bool:
        return self.outcome is LoginResult.LOGIN_SUCCESS
