"""Base service class with common patterns and error handling."""

import logging
from datetime import datetime
from typing import TypeVar, Generic, Optional, List, Dict, Any, Callable, Awaitable

from pydantic import BaseModel, Field, ValidationError

from ..api_client import KumaAPIError, KumaClient
from ..config import AppConfig
from ..utils.request_context import get_request_id, ensure_request_id, with_request_id

T = TypeVar("T")


class PatternError(ValueError):
    """A search term given as regular expression does not compile."""

    error_type = "pattern_error"


class ServiceResult(BaseModel, Generic[T]):
    """Standard service result wrapper for all operations."""

    model_config = {"arbitrary_types_allowed": True}

    success: bool = Field(description="Whether the operation was successful")
    data: Optional[T] = Field(None, description="Operation result data")
    error: Optional[str] = Field(None, description="Error message if operation failed")
    warnings: List[str] = Field(
        default_factory=list, description="Any warnings during operation"
    )
    metadata: Dict[str, Any] = Field(
        default_factory=dict, description="Additional metadata"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now, description="When operation was performed"
    )
    request_id: Optional[str] = Field(
        None, description="Request ID for tracing this operation"
    )

    @property
    def error_type(self) -> Optional[str]:
        return self.metadata.get("error_type")

    @classmethod
    def success_result(
        cls,
        data: T,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> "ServiceResult[T]":
        """Create a successful result with request ID."""
        return cls(
            success=True,
            data=data,
            warnings=warnings or [],
            metadata=metadata or {},
            request_id=request_id or get_request_id(),
        )

    @classmethod
    def error_result(
        cls,
        error: str,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> "ServiceResult[T]":
        """Create an error result with request ID."""
        return cls(
            success=False,
            error=error,
            warnings=warnings or [],
            metadata=metadata or {},
            request_id=request_id or get_request_id(),
        )


class BaseService:
    """Base service class with common patterns and error handling."""

    def __init__(self, kuma_client: KumaClient, config: AppConfig):
        self.kuma = kuma_client
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)

    @with_request_id()
    async def _execute_with_error_handling(
        self, operation: Callable[[], Awaitable[T]], operation_name: str = "operation"
    ) -> ServiceResult[T]:
        """
        Execute an operation with standardized error handling, timing, and request tracking.

        Typed failures keep their own message and are tagged with an
        ``error_type`` in the metadata; anything unexpected is logged with
        its traceback and reported as an internal error.

        Args:
            operation: Async function to execute
            operation_name: Name of operation for logging

        Returns:
            ServiceResult with success/error information and request ID
        """
        start_time = datetime.now()
        request_id = ensure_request_id()

        def elapsed_ms() -> float:
            return (datetime.now() - start_time).total_seconds() * 1000

        try:
            self.logger.debug(f"[{request_id}] Starting {operation_name}")
            result = await operation()

            execution_time = elapsed_ms()
            self.logger.debug(
                f"[{request_id}] Completed {operation_name} in {execution_time:.2f}ms"
            )

            return ServiceResult.success_result(
                data=result,
                metadata={"execution_time_ms": execution_time},
                request_id=request_id,
            )

        except (KumaAPIError, PatternError) as e:
            self.logger.error(f"[{request_id}] {operation_name} failed: {e}")
            return ServiceResult.error_result(
                error=str(e),
                metadata={
                    "execution_time_ms": elapsed_ms(),
                    "error_type": e.error_type,
                    "operation": operation_name,
                },
                request_id=request_id,
            )

        except ValidationError as e:
            self.logger.warning(f"[{request_id}] Invalid input for {operation_name}: {e}")
            return ServiceResult.error_result(
                error=str(e),
                metadata={
                    "execution_time_ms": elapsed_ms(),
                    "error_type": "validation_error",
                    "operation": operation_name,
                },
                request_id=request_id,
            )

        except Exception as e:
            error_msg = f"Internal error in {operation_name}: {e}"
            self.logger.exception(f"[{request_id}] {error_msg}")
            return ServiceResult.error_result(
                error=error_msg,
                metadata={
                    "execution_time_ms": elapsed_ms(),
                    "error_type": "internal_error",
                    "operation": operation_name,
                },
                request_id=request_id,
            )
