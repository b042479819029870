"""
Exception hierarchy for the résumé knowledge subsystem.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Hard errors (embedding provider, missing source, storage, retrieval)
propagate to callers. Soft conditions are modelled as warnings: they are
instantiated for structured logging and never raised.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ResumeKnowledgeException(Exception):
    """Base exception for all résumé knowledge errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ResumeKnowledgeException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class EmbeddingProviderError(ResumeKnowledgeException):
    """Raised when the embedding backend fails or returns unusable output."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize embedding provider error.

        Args:
            message: Error message
            model: Embedding model that was being called
            details: Additional context
        """
        details = details or {}
        if model:
            details["model"] = model
        super().__init__(message, details)


class SourceNotFoundError(ResumeKnowledgeException):
    """Raised when chunk replacement targets an entity that does not exist."""

    def __init__(
        self,
        source_type: str,
        source_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize source not found error.

        Args:
            source_type: Kind of the missing entity
            source_id: ID of the missing entity
            details: Additional context
        """
        details = details or {}
        details["source_type"] = source_type
        details["source_id"] = source_id
        self.source_type = source_type
        self.source_id = source_id
        super().__init__(f"Source not found: {source_type}/{source_id}", details)


class VectorStoreError(ResumeKnowledgeException):
    """Raised when knowledge store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (replace, delete, search)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class RetrievalError(ResumeKnowledgeException):
    """Raised when a search is cancelled, times out, or a sub-search fails."""

    def __init__(
        self,
        message: str,
        resume_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize retrieval error.

        Args:
            message: Error message
            resume_id: Résumé the failed search was scoped to
            details: Additional context
        """
        details = details or {}
        if resume_id:
            details["resume_id"] = resume_id
        super().__init__(message, details)


class ResumeKnowledgeWarning(UserWarning):
    """Base class for soft conditions that degrade results instead of failing."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


class UnsupportedDimensionError(ResumeKnowledgeWarning):
    """Query vector has a dimensionality without a vector index."""

    def __init__(self, dim: int, supported: list[int]) -> None:
        super().__init__(
            f"Unsupported embedding dimension: {dim}",
            {"dim": dim, "supported": sorted(supported)},
        )


class DanglingReferenceWarning(ResumeKnowledgeWarning):
    """A chunk's owning entity no longer exists."""

    def __init__(self, source_type: str, source_id: str) -> None:
        super().__init__(
            f"No owning entity for {source_type}/{source_id}",
            {"source_type": source_type, "source_id": source_id},
        )


class UnresolvableCitationWarning(ResumeKnowledgeWarning):
    """A citation marker's alias has no reverse mapping."""

    def __init__(self, alias: str, citation_type: str) -> None:
        super().__init__(
            f"Unresolvable citation alias: {alias}",
            {"alias": alias, "citation_type": citation_type},
        )
