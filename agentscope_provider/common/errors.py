"""
Error Definitions

Defines the exception classes raised by the AgentScope adapter so callers can
handle input, transport and response failures uniformly.
"""

from typing import Any, Optional


class AgentScopeError(Exception):
    """
    Adapter Base Exception

    Base class for all custom exceptions, containing error message, type, code
    and whether the caller may retry the request.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "agentscope_error",
        code: str = "internal_error",
        details: Optional[dict[str, Any]] = None,
        status_code: int = 500,
        is_retryable: bool = False,
    ):
        """
        Initialize exception

        Args:
            message: Error message
            error_type: Error type
            code: Error code
            details: Extra error details
            status_code: HTTP status code used when the error is served by the API
            is_retryable: Whether retrying the same call may succeed
        """
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.details = details or {}
        self.status_code = status_code
        self.is_retryable = is_retryable

    def to_dict(self, include_details: bool = True) -> dict[str, Any]:
        """
        Convert to dictionary format (for API response)

        Args:
            include_details: Whether to include the details mapping

        Returns:
            dict: Error information dictionary
        """
        result = {
            "error": {
                "message": self.message,
                "type": self.error_type,
                "code": self.code,
                "retryable": self.is_retryable,
            }
        }
        if include_details and self.details:
            result["error"]["details"] = self.details
        return result


class InvalidArgumentError(AgentScopeError):
    """
    Input Validation Error

    Raised before any network call when an argument (e.g., user id, provider options) is invalid.
    """

    def __init__(
        self,
        argument: str,
        message: str = "Invalid argument",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            error_type="invalid_argument_error",
            code="invalid_argument",
            details={"argument": argument, **(details or {})},
            status_code=422,
        )
        self.argument = argument


class InvalidPromptError(InvalidArgumentError):
    """
    Prompt Conversion Error

    Raised when a conversation turn has an unsupported role or content part.
    """

    def __init__(
        self,
        message: str,
        code: str = "unsupported_content",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(argument="prompt", message=message, details=details)
        self.code = code


class APICallError(AgentScopeError):
    """
    Upstream Call Error

    Raised when the AgentScope runtime answers with a non-2xx status or cannot be reached.
    """

    def __init__(
        self,
        message: str,
        url: str,
        request_body_values: Any = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        response_headers: Optional[dict[str, str]] = None,
        is_retryable: Optional[bool] = None,
    ):
        if is_retryable is None:
            is_retryable = status_code is not None and status_code >= 500
        super().__init__(
            message=message,
            error_type="api_call_error",
            code="upstream_error",
            details={"url": url, "upstream_status_code": status_code},
            status_code=status_code if status_code and status_code >= 400 else 502,
            is_retryable=is_retryable,
        )
        self.url = url
        self.request_body_values = request_body_values
        self.upstream_status_code = status_code
        self.response_body = response_body
        self.response_headers = response_headers or {}


class InvalidResponseDataError(AgentScopeError):
    """
    Malformed Response Error

    Raised when the upstream body is not valid JSON, not an object, missing, or reports an error.
    """

    def __init__(
        self,
        message: str = "Invalid response data",
        data: Any = None,
    ):
        super().__init__(
            message=message,
            error_type="invalid_response_data_error",
            code="invalid_response",
            status_code=502,
        )
        self.data = data


class NoContentGeneratedError(AgentScopeError):
    """
    No Content Error

    Raised when a single-shot response has no extractable assistant text.
    """

    def __init__(self, message: str = "No content generated"):
        super().__init__(
            message=message,
            error_type="no_content_generated_error",
            code="no_content",
            status_code=502,
        )


class NoSuchModelError(AgentScopeError):
    """
    Unknown Model Error

    Raised when a provider is asked for a model type it does not offer.
    """

    def __init__(self, model_id: str, model_type: str):
        super().__init__(
            message=f"No such {model_type}: {model_id}",
            error_type="no_such_model_error",
            code="model_not_found",
            details={"model_id": model_id, "model_type": model_type},
            status_code=404,
        )
        self.model_id = model_id
        self.model_type = model_type


class RequestAbortedError(AgentScopeError):
    """
    Aborted Request Error

    Raised when the caller's abort signal fires before the response is available.
    """

    def __init__(self, message: str = "Request aborted"):
        super().__init__(
            message=message,
            error_type="request_aborted_error",
            code="aborted",
            status_code=499,
        )
