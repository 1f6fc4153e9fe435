"""
Request timeout middleware.

Each HTTP request runs under a deadline; when it expires before any response
bytes were sent the request fails with ``TimeoutError``, which the error
handling middleware reports as an upstream failure. Nothing is retried.
"""

import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class RequestTimeoutMiddleware:
    def __init__(self, app: Callable, timeout_seconds: float = 10.0):
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: dict) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(
                self.app(scope, receive, send_wrapper), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Request exceeded {self.timeout_seconds}s: "
                f"{scope.get('method')} {scope.get('path')}"
            )
            if response_started:
                # headers are out, the client sees a truncated body
                return
            raise TimeoutError(f"Request exceeded {self.timeout_seconds}s") from None
