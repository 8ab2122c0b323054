"""Home Assistant REST API client."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import aiohttp
from aiohttp import client_exceptions

from .const import API_ROOT, API_SERVICES, API_STATES, DEFAULT_REQUEST_TIMEOUT
from .exceptions import (
    HomeAssistantAuthenticationError,
    HomeAssistantCommandError,
    HomeAssistantConnectionError,
)
from .models import EntityState, ServiceCallResult

_LOGGER = logging.getLogger(__name__)


class HomeAssistantClient:
    """Async client for the Home Assistant REST API."""

    def __init__(
        self,
        base_url: str,
        token: str,
        request_timeout: int = DEFAULT_REQUEST_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
        debug: bool = False,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._request_timeout = request_timeout
        self._debug = debug

        self._session = session
        self._close_session = False

    # ------------------------------------------------------------------
    #  Connection
    # ------------------------------------------------------------------

    async def check_api(self) -> str:
        """Verify the API is reachable and the token accepted.

        Returns the API status message (``"API running."``).
        """
        _LOGGER.debug("Checking Home Assistant API at %s", self._base_url)
        result = await self._request("GET", API_ROOT)
        if not isinstance(result, dict):
            raise HomeAssistantCommandError(
                "Unexpected response from Home Assistant API root"
            )
        return str(result.get("message", ""))

    # ------------------------------------------------------------------
    #  States
    # ------------------------------------------------------------------

    async def get_state(self, entity_id: str) -> EntityState:
        """Read the current state and attributes of *entity_id*."""
        result = await self._request("GET", f"{API_STATES}{entity_id}")
        if not isinstance(result, dict):
            raise HomeAssistantCommandError(
                f"Malformed state for {entity_id}: {result!r}"
            )
        return EntityState.from_json(result)

    # ------------------------------------------------------------------
    #  Services
    # ------------------------------------------------------------------

    async def call_service(
        self,
        domain: str,
        service: str,
        service_data: dict[str, Any] | None = None,
    ) -> ServiceCallResult:
        """Call ``domain.service`` with *service_data*.

        Any non-2xx status raises; a returned result is always a success.
        """
        status = await self._request(
            "POST",
            f"{API_SERVICES}{domain}/{service}",
            service_data or {},
            want_status=True,
        )
        return ServiceCallResult(success=True, status_code=status)

    # ------------------------------------------------------------------
    #  HTTP transport
    # ------------------------------------------------------------------

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        want_status: bool = False,
    ) -> Any:
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._close_session = True

        url = f"{self._base_url}{path}"
        body_json = json.dumps(body) if body is not None else None

        if self._debug:
            _LOGGER.debug("Home Assistant request: %s %s\n%s", method, url, body_json)

        try:
            async with asyncio.timeout(self._request_timeout):
                resp = await self._session.request(
                    method, url, data=body_json, headers=self._headers()
                )
                raw = await resp.text()

                if self._debug:
                    _LOGGER.debug("Home Assistant response (%s):\n%s", resp.status, raw)

                if resp.status in (401, 403):
                    raise HomeAssistantAuthenticationError(
                        f"Home Assistant rejected the access token ({resp.status})"
                    )
                if not 200 <= resp.status < 300:
                    _LOGGER.error("%s %s failed: %s", method, path, resp.status)
                    raise HomeAssistantCommandError(
                        f"{method} {path} failed with status {resp.status}"
                    )

                if want_status:
                    return resp.status
                return json.loads(raw) if raw else {}

        except TimeoutError as exc:
            _LOGGER.error("Timeout talking to Home Assistant: %s %s", method, path)
            raise HomeAssistantConnectionError(
                f"Timeout communicating with Home Assistant ({method} {path})"
            ) from exc
        except json.JSONDecodeError as exc:
            raise HomeAssistantCommandError(
                f"Invalid JSON from Home Assistant for {path}"
            ) from exc
        except client_exceptions.ClientError as exc:
            raise HomeAssistantConnectionError(
                f"Cannot reach Home Assistant at {self._base_url}: {exc}"
            ) from exc

    # ------------------------------------------------------------------
    #  Session lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP session if we own it."""
        if self._session and self._close_session:
            await self._session.close()

    async def __aenter__(self) -> HomeAssistantClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
