"""steamgaug.es transport: one GET, parsed into a StatusDocument."""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from steamgauges import config
from steamgauges.errors import UpstreamUnavailableError
from steamgauges.models import StatusDocument

logger = logging.getLogger("steamgauges.upstream")
_HTTP_LOGGER = logging.getLogger("steamgauges.http")


def _log_http_response(response: httpx.Response) -> None:
    request = response.request
    _HTTP_LOGGER.debug(
        "HTTP response method=%s url=%s status=%d",
        request.method,
        request.url,
        response.status_code,
    )


def httpx_event_hooks() -> dict[str, list]:
    return {"response": [_log_http_response]}


def fetch_status_document(
    url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> StatusDocument:
    """Fetch and validate the current steamgaug.es payload.

    Every failure (timeout, connection error, non-2xx status, malformed JSON,
    schema mismatch) is raised as :class:`UpstreamUnavailableError`.
    """
    target = url or config.STEAMGAUGES_URL
    request_timeout = httpx.Timeout(timeout=timeout if timeout is not None else config.REQUEST_TIMEOUT_SECONDS)

    try:
        with httpx.Client(
            timeout=request_timeout,
            transport=transport,
            event_hooks=httpx_event_hooks(),
        ) as client:
            resp = client.get(target, headers={"Accept": "application/json"})
            resp.raise_for_status()
            payload = resp.json()
    except httpx.TimeoutException as exc:
        logger.warning("Timeout fetching %s", target)
        raise UpstreamUnavailableError(f"steamgaug.es timed out after {request_timeout.read}s") from exc
    except httpx.HTTPStatusError as exc:
        logger.warning("steamgaug.es returned status %d", exc.response.status_code)
        raise UpstreamUnavailableError(f"steamgaug.es returned HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        logger.warning("Error fetching %s (%s)", target, exc.__class__.__name__)
        raise UpstreamUnavailableError(f"Cannot reach steamgaug.es: {exc}") from exc
    except ValueError as exc:
        logger.warning("steamgaug.es returned a non-JSON body")
        raise UpstreamUnavailableError("steamgaug.es returned malformed JSON") from exc

    if not isinstance(payload, dict):
        logger.warning("steamgaug.es returned %s instead of an object", type(payload).__name__)
        raise UpstreamUnavailableError("steamgaug.es returned an unexpected payload")

    try:
        return StatusDocument.model_validate(payload)
    except ValidationError as exc:
        logger.warning("steamgaug.es payload failed validation (%d errors)", exc.error_count())
        raise UpstreamUnavailableError("steamgaug.es payload did not match the expected schema") from exc
