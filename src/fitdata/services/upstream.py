"""Turn raw adapter calls into provider results."""

import json
import logging
from collections.abc import Awaitable

import httpx

from fitdata.domain.results import Err, ErrorKind, Ok, ProviderError, Result
from fitdata.services.cancellation import (
    CancelToken,
    OperationCancelledError,
    run_cancellable,
)

_logger = logging.getLogger(__name__)


def status_code_from_exception(exc: Exception) -> int | None:
    """Extract the HTTP status code from an exception, if available."""
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None


async def call_upstream(
    provider: str,
    action: str,
    request: Awaitable[dict[str, object]],
    cancel: CancelToken | None = None,
) -> Result[dict[str, object]]:
    """Await an adapter call and classify how it ended."""
    try:
        payload = await run_cancellable(request, cancel)
    except OperationCancelledError:
        return Err(
            ProviderError(provider, ErrorKind.CANCELLED, f"{action} was cancelled")
        )
    except httpx.HTTPStatusError as exc:
        status_code = exc.response.status_code
        _logger.warning("%s %s failed with status %s", provider, action, status_code)
        return Err(
            ProviderError(
                provider,
                ErrorKind.UPSTREAM_STATUS,
                f"{provider} API error: {status_code}",
                status_code=status_code,
            )
        )
    except httpx.HTTPError as exc:
        _logger.warning("%s %s transport error: %s", provider, action, exc)
        return Err(ProviderError(provider, ErrorKind.TRANSPORT, str(exc)))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        _logger.warning("%s %s returned an unreadable body: %s", provider, action, exc)
        return Err(ProviderError(provider, ErrorKind.MALFORMED, str(exc)))

    if not isinstance(payload, dict):
        _logger.warning("%s %s returned a non-object body", provider, action)
        return Err(
            ProviderError(provider, ErrorKind.MALFORMED, "Expected a JSON object")
        )
    return Ok(payload)


def invalid_input(provider: str, message: str) -> Err:
    """Build an error for a request rejected before reaching upstream."""
    return Err(ProviderError(provider, ErrorKind.INVALID_INPUT, message))
