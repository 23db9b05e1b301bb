# ============================================================================
# BASE REPOSITORY - ERROR HANDLING PATTERNS
# ============================================================================
# STATUS: Infrastructure - Base repository patterns
# PURPOSE: Common error handling and logging for metadata repositories
# LAST_REVIEWED: 17 OCT 2026
# ============================================================================
"""
Base Repository Patterns

Abstract base class that provides common infrastructure for repositories
that read table metadata:
- Consistent error handling with context managers
- Standardized logging

Every database failure leaves a repository as a MetadataSourceError
carrying the table and operation, which the table serializer knows how
to isolate.
"""

import logging
from abc import ABC
from contextlib import contextmanager
from typing import Any, Dict, Optional

from core.errors import MetadataSourceError

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Abstract base repository with common patterns.

    Provides:
    - Error context manager for consistent error handling
    - Standardized logging

    Subclasses implement storage-specific operations.
    """

    def __init__(self):
        """Initialize base repository."""
        self.logger = logging.getLogger(self.__class__.__name__)
        self.logger.debug(f"{self.__class__.__name__} initialized")

    @contextmanager
    def _error_context(self, operation: str, table: Optional[str] = None):
        """
        Context manager for consistent error handling.

        All exceptions are logged with context and re-raised as
        MetadataSourceError.

        Args:
            operation: Human-readable description of the operation
            table: Optional table name for context

        Example:
            with self._error_context("fetch columns", table):
                rows = self.repo.fetch_all(COLUMNS_SQL, (schema, table))
        """
        try:
            yield
        except MetadataSourceError:
            raise
        except Exception as e:
            error_msg = f"{operation} failed"
            if table:
                error_msg += f" for {table}"
            error_msg += f": {e}"
            self.logger.error(error_msg)
            raise MetadataSourceError(error_msg, table=table, operation=operation) from e

    def _log_operation(
        self,
        operation: str,
        table: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log a completed operation with consistent formatting.

        Format:
            "operation: table | details"
        """
        msg = f"{operation}: {table}"
        if details:
            msg += f" | {details}"
        self.logger.debug(msg)


__all__ = [
    "BaseRepository",
]
