"""
Error taxonomy and retry helper for Hoop Hub.

Provides:
1. Custom exception hierarchy separating caller mistakes from planner defects
2. Storage-layer errors raised by every DataStore backend
3. Retry logic with exponential backoff for the (out-of-band) catalog check
4. Error code constants for consistent error handling
"""

import asyncio
import logging
from functools import wraps
from typing import Any, Callable, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


# ============================================================================
# ERROR CODES
# ============================================================================


class ErrorCode:
    """Standard error codes for Hoop Hub."""

    # Caller errors
    INVALID_REQUEST = "INVALID_REQUEST"

    # Planner defects
    PLAN_INVARIANT_VIOLATION = "PLAN_INVARIANT_VIOLATION"

    # Storage errors
    STORE_ERROR = "STORE_ERROR"
    STORE_CONSTRAINT_VIOLATION = "STORE_CONSTRAINT_VIOLATION"

    # Catalog tooling
    CATALOG_CONTRACT_MISMATCH = "CATALOG_CONTRACT_MISMATCH"
    UPSTREAM_DOCS_ERROR = "UPSTREAM_DOCS_ERROR"

    INTERNAL_ERROR = "INTERNAL_ERROR"


# ============================================================================
# EXCEPTION HIERARCHY
# ============================================================================


class HoopHubError(Exception):
    """Base exception for all Hoop Hub errors."""

    def __init__(
        self,
        message: str,
        code: str = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a JSON-friendly dictionary."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidRequestError(HoopHubError):
    """Raised when a caller sends a malformed query request."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            code=ErrorCode.INVALID_REQUEST,
            details={"field": field},
        )
        self.field = field


class QueryPlanInvariantError(HoopHubError):
    """
    Raised when the planner produced a plan that fails validation.

    This is never a user error: an unsupported question yields a valid
    ``unsupported`` plan. Seeing this exception means the classifier or
    assembler emitted an inconsistent plan.
    """

    def __init__(self, violation: str, message: str, plan: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Internal query planning error: {message}",
            code=ErrorCode.PLAN_INVARIANT_VIOLATION,
            details={"violation": violation, "plan": plan},
        )
        self.violation = violation


class StoreError(HoopHubError):
    """Storage-layer failure (serialization, I/O, driver errors)."""

    def __init__(self, message: str, operation: Optional[str] = None, code: str = ErrorCode.STORE_ERROR):
        super().__init__(
            message=message,
            code=code,
            details={"operation": operation},
        )
        self.operation = operation


class StoreConstraintError(StoreError):
    """Raised when a write would violate a store constraint."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(
            message=message,
            operation=operation,
            code=ErrorCode.STORE_CONSTRAINT_VIOLATION,
        )


class CatalogContractError(HoopHubError):
    """Raised when the endpoint catalog disagrees with upstream docs."""

    def __init__(self, failures: list):
        super().__init__(
            message=f"Endpoint catalog contract check failed ({len(failures)} issue(s))",
            code=ErrorCode.CATALOG_CONTRACT_MISMATCH,
            details={"failures": failures},
        )
        self.failures = failures


class UpstreamDocsError(HoopHubError):
    """Raised when an endpoint doc cannot be fetched or parsed."""

    def __init__(self, endpoint_id: str, message: str):
        super().__init__(
            message=f"[{endpoint_id}] {message}",
            code=ErrorCode.UPSTREAM_DOCS_ERROR,
            details={"endpoint_id": endpoint_id},
        )
        self.endpoint_id = endpoint_id


# ============================================================================
# RETRY LOGIC WITH EXPONENTIAL BACKOFF
# ============================================================================


def retry_with_backoff(
    max_retries: int = 2,
    base_delay: float = 0.3,
    max_delay: float = 5.0,
    exponential_base: float = 2.0,
    retry_on: tuple = (httpx.HTTPError, asyncio.TimeoutError),
    retry_if: Optional[Callable[[Exception], bool]] = None,
):
    """
    Decorator for retrying async functions with exponential backoff.

    Args:
        max_retries: Retries after the first attempt (2 means 3 attempts total)
        base_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        exponential_base: Base for exponential backoff
        retry_on: Tuple of exceptions to retry on
        retry_if: Optional predicate; a caught exception it rejects is raised at once

    Example:
        @retry_with_backoff(max_retries=2, base_delay=0.3)
        async def fetch_doc():
            # Will retry up to 2 times with delays: 0.3s, 0.6s
            pass
    """

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return await func(*args, **kwargs)

                except retry_on as e:
                    if retry_if is not None and not retry_if(e):
                        logger.error(f"{func.__name__} failed with non-retryable error: {e}")
                        raise

                    if attempt == max_retries:
                        logger.error(
                            f"{func.__name__} failed after {max_retries + 1} attempts: {e}"
                        )
                        raise

                    delay = min(base_delay * (exponential_base**attempt), max_delay)

                    logger.warning(
                        f"{func.__name__} failed (attempt {attempt + 1}/{max_retries + 1}). "
                        f"Retrying in {delay:.1f}s: {e}"
                    )

                    await asyncio.sleep(delay)

        return wrapper

    return decorator
