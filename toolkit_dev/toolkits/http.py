from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from toolkit_dev.errors import ToolUpstreamError
from toolkit_dev.toolkits.types import ToolkitContext


class VendorClient:
    """
    Thin JSON client for one third-party API.

    Every transport or HTTP failure is wrapped in ToolUpstreamError with a
    message naming the vendor and the request.
    """

    def __init__(
        self,
        vendor: str,
        base_url: str,
        headers: Dict[str, str],
        context: ToolkitContext,
        timeout: float = 20.0,
    ) -> None:
        self.vendor = vendor
        self.base_url = base_url.rstrip("/")
        self.headers = headers
        self.context = context
        self.timeout = timeout

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = self.base_url + path
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}

        async with self.context.http_client(timeout=self.timeout) as client:
            try:
                resp = await client.request(
                    method,
                    url,
                    headers=self.headers,
                    params=clean_params or None,
                    json=json_body,
                )
            except httpx.RequestError as exc:
                raise ToolUpstreamError(f"Request error talking to {self.vendor}: {exc}") from exc

        if resp.status_code >= 400:
            try:
                body = resp.json()
            except ValueError:
                body = resp.text[:500]
            raise ToolUpstreamError(
                f"{self.vendor} returned {resp.status_code} for {method} {path}: {body}"
            )

        if not resp.content:
            return None

        try:
            return resp.json()
        except ValueError as exc:
            raise ToolUpstreamError(f"Invalid JSON from {self.vendor}: {exc}") from exc

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json_body: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, json_body=json_body)
