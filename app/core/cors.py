"""
CORS for the dashboard API.

The interview grading proxy is called straight from candidate-facing
frontends on any origin and sets its own permissive CORS headers
(see app/api/endpoints/grading.py). Paths listed in exempt_paths bypass
the origin allow-list so their route handlers answer preflights.
"""

from typing import Iterable

from starlette.middleware.cors import CORSMiddleware
from starlette.types import ASGIApp, Receive, Scope, Send


class DashboardCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves exempt paths to their routes"""

    def __init__(self, app: ASGIApp, exempt_paths: Iterable[str] = (), **kwargs) -> None:
        super().__init__(app, **kwargs)
        self.exempt_paths = {path.rstrip("/") for path in exempt_paths}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].rstrip("/") in self.exempt_paths:
            await self.app(scope, receive, send)
            return

        await super().__call__(scope, receive, send)
