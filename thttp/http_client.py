from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

import httpx

from thttp.config import DEFAULT_SETTINGS
from thttp.models import Failure, Outcome, PendingRequest, Response

logger = logging.getLogger(__name__)


class RequestError(Exception):
    """Base exception for a single failed request attempt."""


class RequestConstructionError(RequestError):
    """Raised when the method, URL or headers cannot form a request."""


class TransportError(RequestError):
    """Raised on DNS, connection, TLS or timeout failures."""


class BodyReadError(RequestError):
    """Raised when the body stream fails after the headers arrived."""


def parse_headers(headers_text: str) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for line in headers_text.splitlines():
        line = line.strip()
        if not line:
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        headers[key.strip()] = value.strip()
    return headers


async def execute_request(
    request: PendingRequest,
    timeout: float = DEFAULT_SETTINGS.request_timeout,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Outcome:
    logger.info("Sending %s %s", request.method, request.url)
    try:
        response = await _send(request, timeout, transport)
    except RequestError as exc:
        logger.warning("%s %s failed: %s", request.method, request.url, exc)
        return Failure(error=str(exc))
    logger.info(
        "%s %s -> %s (%.0f ms)",
        request.method,
        request.url,
        response.status_code,
        response.elapsed_ms,
    )
    return response


async def _send(
    request: PendingRequest,
    timeout: float,
    transport: Optional[httpx.AsyncBaseTransport],
) -> Response:
    async with httpx.AsyncClient(
        timeout=timeout, follow_redirects=True, transport=transport
    ) as client:
        start = time.perf_counter()
        try:
            http_request = client.build_request(
                request.method,
                request.url,
                headers=request.headers,
                content=request.body if request.body else None,
            )
        except (httpx.InvalidURL, ValueError, TypeError) as exc:
            raise RequestConstructionError(_describe(exc)) from exc

        try:
            http_response = await client.send(http_request, stream=True)
        except (httpx.UnsupportedProtocol, httpx.LocalProtocolError) as exc:
            raise RequestConstructionError(_describe(exc)) from exc
        except httpx.HTTPError as exc:
            raise TransportError(_describe(exc)) from exc

        try:
            await http_response.aread()
        except httpx.HTTPError as exc:
            raise BodyReadError(_describe(exc)) from exc
        finally:
            await http_response.aclose()

        elapsed_ms = (time.perf_counter() - start) * 1000

    return Response(
        status_code=http_response.status_code,
        status=f"{http_response.status_code} {http_response.reason_phrase}".strip(),
        headers=_collect_headers(http_response.headers),
        body=http_response.text,
        elapsed_ms=elapsed_ms,
    )


def _collect_headers(headers: httpx.Headers) -> Dict[str, List[str]]:
    collected: Dict[str, List[str]] = {}
    for raw_key, raw_value in headers.raw:
        key = raw_key.decode(headers.encoding)
        collected.setdefault(key, []).append(raw_value.decode(headers.encoding))
    return collected


def _describe(exc: Exception) -> str:
    message = str(exc)
    return message if message else type(exc).__name__
