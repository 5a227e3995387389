"""
AgentScope error helpers

Builds structured errors from failed upstream responses.
"""

import json
import logging
from typing import Any

import httpx

from agentscope_provider.common.errors import APICallError, InvalidResponseDataError

logger = logging.getLogger(__name__)


async def build_agentscope_api_error(
    response: httpx.Response,
    url: str,
    request_body_values: Any,
) -> APICallError:
    """
    Build an APICallError from a non-2xx response

    The body is read best-effort; when it carries {"error": {"message": ...}}
    that message is used, otherwise a generic one.

    Args:
        response: Failed upstream response (may be a streaming response)
        url: Request URL
        request_body_values: Request payload, kept for diagnostics

    Returns:
        APICallError: retryable when the status is >= 500
    """
    message = f"AgentScope request failed with HTTP {response.status_code}"
    response_body = None

    try:
        await response.aread()
        response_body = response.text
        parsed = json.loads(response_body)
        if isinstance(parsed, dict):
            error = parsed.get("error")
            if isinstance(error, dict) and error.get("message"):
                message = str(error["message"])
    except (httpx.HTTPError, ValueError) as e:
        # Keep the generic message
        logger.debug("Could not parse AgentScope error body: %s", e)

    return APICallError(
        message=message,
        url=url,
        request_body_values=request_body_values,
        status_code=response.status_code,
        response_body=response_body,
        response_headers=dict(response.headers),
        is_retryable=response.status_code >= 500,
    )


def assert_object(value: Any, context: str) -> dict[str, Any]:
    """
    Ensure value is a JSON object

    Raises:
        InvalidResponseDataError: value is not a dict
    """
    if not isinstance(value, dict):
        raise InvalidResponseDataError(
            message=f"{context} is not a valid object",
            data=value,
        )
    return value
