"""Pydantic models for captcha detection and solving results."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CaptchaInfo(BaseModel):
    """A reCAPTCHA widget found on the page."""

    id: str
    sitekey: str
    url: str
    invisible: bool = False


class CaptchaSolution(BaseModel):
    """Token (or error) returned by a provider for one captcha."""

    id: str
    provider: str
    text: Optional[str] = None
    error: Optional[str] = None
    requested_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None
    duration: Optional[float] = None  # seconds


class SolvedCaptcha(BaseModel):
    """Whether a solution token was written into the page."""

    id: str
    is_solved: bool = False
    callback_fired: bool = False  # widget had a data-callback and it was invoked
    error: Optional[str] = None


class SolveCaptchasResult(BaseModel):
    """Structured result of a full detect / solve / inject pass."""

    captchas: list[CaptchaInfo] = Field(default_factory=list)
    solutions: list[CaptchaSolution] = Field(default_factory=list)
    solved: list[SolvedCaptcha] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        if self.error:
            return False
        return all(solution.error is None for solution in self.solutions)
