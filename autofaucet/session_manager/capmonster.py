"""Async client for the CapMonster Cloud task API.

Flow:
    1. POST /createTask with the site key and page URL -> taskId
    2. POST /getTaskResult until status is "ready" -> gRecaptchaResponse
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Union

import httpx

from ..config import CAPTCHA_POLL_INTERVAL, CAPTCHA_SOLVE_TIMEOUT
from ..constants import CAPMONSTER_API_URL, CAPMONSTER_INVISIBLE_TASK, CAPMONSTER_RECAPTCHA_TASK

Logger = Union[logging.Logger, logging.LoggerAdapter]


class CaptchaProviderError(Exception):
    """The provider rejected a request or did not answer in time."""

    def __init__(self, code: str, description: str = ""):
        self.code = code
        self.description = description
        super().__init__(f"{code}: {description}" if description else code)


class CapMonsterClient:
    """Solve reCAPTCHA v2 challenges through CapMonster Cloud."""

    def __init__(
        self,
        api_key: str,
        timeout: float = CAPTCHA_SOLVE_TIMEOUT,
        poll_interval: float = CAPTCHA_POLL_INTERVAL,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[Logger] = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=CAPMONSTER_API_URL, timeout=30.0)
        self.logger = logger or logging.getLogger(__name__)

    async def __aenter__(self) -> CapMonsterClient:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def close(self):
        if self._owns_client:
            await self._client.aclose()

    async def _post(self, path: str, payload: dict) -> dict:
        try:
            resp = await self._client.post(path, json={"clientKey": self.api_key, **payload})
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            raise CaptchaProviderError("HTTP_ERROR", str(e)) from e
        except ValueError as e:
            raise CaptchaProviderError("BAD_RESPONSE", f"{path} did not return JSON") from e

        if not isinstance(data, dict):
            raise CaptchaProviderError("BAD_RESPONSE", f"{path} returned {type(data).__name__}")

        if data.get("errorId", 0) != 0:
            raise CaptchaProviderError(
                data.get("errorCode", "UNKNOWN_ERROR"),
                data.get("errorDescription", ""),
            )
        return data

    async def create_task(self, website_url: str, website_key: str, invisible: bool = False) -> int:
        task = {
            "type": CAPMONSTER_INVISIBLE_TASK if invisible else CAPMONSTER_RECAPTCHA_TASK,
            "websiteURL": website_url,
            "websiteKey": website_key,
        }
        data = await self._post("/createTask", {"task": task})
        task_id = data.get("taskId")
        if task_id is None:
            raise CaptchaProviderError("BAD_RESPONSE", "createTask reply has no taskId")
        self.logger.info(f"CapMonster task created: {task_id}")
        return task_id

    async def get_task_result(self, task_id: int) -> Optional[str]:
        """Return the solution token, or None while the task is still processing."""
        data = await self._post("/getTaskResult", {"taskId": task_id})
        if data.get("status") != "ready":
            return None
        solution = data.get("solution")
        token = solution.get("gRecaptchaResponse") if isinstance(solution, dict) else None
        if not token:
            raise CaptchaProviderError("BAD_RESPONSE", f"Task {task_id} is ready but has no gRecaptchaResponse")
        return token

    async def solve_recaptcha(self, website_url: str, website_key: str, invisible: bool = False) -> str:
        task_id = await self.create_task(website_url, website_key, invisible=invisible)

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        while loop.time() < deadline:
            await asyncio.sleep(self.poll_interval)
            token = await self.get_task_result(task_id)
            if token is not None:
                self.logger.info(f"CapMonster task {task_id} solved.")
                return token

        raise CaptchaProviderError("TIMEOUT", f"Task {task_id} not ready after {self.timeout}s")
