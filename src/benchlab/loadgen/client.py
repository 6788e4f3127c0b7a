from __future__ import annotations

import time
from dataclasses import dataclass

import httpx

from benchlab.config import TargetConfig
from benchlab.errors import TargetUnreachableError
from benchlab.metrics import ErrorType


@dataclass(frozen=True, slots=True)
class RequestOutcome:
    success: bool
    latency_ms: float
    error_type: ErrorType | None = None


def build_client(target: TargetConfig, concurrency: int) -> httpx.AsyncClient:
    """Create a client whose pool never queues a measurement worker.

    One keep-alive slot per worker plus one for the metrics poll.
    """
    limits = httpx.Limits(
        max_connections=None,
        max_keepalive_connections=concurrency + 1,
    )
    return httpx.AsyncClient(headers=dict(target.headers), limits=limits)


async def send_request(
    client: httpx.AsyncClient,
    url: str,
    timeout_sec: float,
) -> RequestOutcome:
    """Issue one GET and classify the outcome.

    Transport failures become error outcomes. A URL the client cannot address
    at all raises ``TargetUnreachableError`` instead, since every later
    request would fail the same way.
    """
    start = time.perf_counter()
    try:
        resp = await client.get(url, timeout=timeout_sec)
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
        msg = f"Cannot address target {url!r}: {exc}"
        raise TargetUnreachableError(msg) from exc
    except httpx.TimeoutException:
        err = ErrorType.TIMEOUT
    except httpx.ConnectError:
        err = ErrorType.CONNECT
    except httpx.ReadError:
        err = ErrorType.READ
    except httpx.HTTPError:
        err = ErrorType.OTHER
    else:
        latency_ms = (time.perf_counter() - start) * 1000.0
        if resp.is_success:
            return RequestOutcome(success=True, latency_ms=latency_ms)
        return RequestOutcome(success=False, latency_ms=latency_ms, error_type=ErrorType.STATUS)
    latency_ms = (time.perf_counter() - start) * 1000.0
    return RequestOutcome(success=False, latency_ms=latency_ms, error_type=err)
