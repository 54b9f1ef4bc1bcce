"""Custom exceptions for the situation report registry.

Each terminal failure a caller can see has its own type so the HTTP and CLI
layers can tell "no data for this range" apart from "could not build the
document" and "could not process this image".
"""


class SitrepError(Exception):
    """Base exception for all registry errors."""

    pass


# =============================================================================
# CONSOLIDATION WINDOW
# =============================================================================

class WindowError(SitrepError):
    """Base for conditions that stop a consolidation before synthesis."""

    pass


class EmptyWindowError(WindowError):
    """Raised when no reporting days could be identified for the window."""

    def __init__(self, message: str, requested_days: int | None = None):
        super().__init__(message)
        self.requested_days = requested_days


class NoContentError(WindowError):
    """Raised when the selected days contain no report content."""

    def __init__(self, message: str, day_labels: list[str] | None = None):
        super().__init__(message)
        self.day_labels = day_labels or []


# =============================================================================
# IMAGE ATTACHMENTS
# =============================================================================

class AttachmentError(SitrepError):
    """Base for image attachment failures."""

    pass


class AttachmentLimitError(AttachmentError):
    """Raised when an upload batch would exceed the attachment cap."""

    def __init__(self, message: str, limit: int, current: int, requested: int):
        super().__init__(message)
        self.limit = limit
        self.current = current
        self.requested = requested


class ImageProcessingError(AttachmentError):
    """Raised when an uploaded image cannot be decoded or re-encoded."""

    def __init__(self, message: str, index: int | None = None):
        super().__init__(message)
        self.index = index


class AttachmentDecodeError(AttachmentError):
    """Raised when a stored attachment cannot be decoded for export."""

    pass


# =============================================================================
# EXPORT / COLLABORATORS
# =============================================================================

class DocumentBuildError(SitrepError):
    """Raised when the office document cannot be packed."""

    pass


class SynthesisError(SitrepError):
    """Raised when the synthesis model fails or returns unusable output."""

    pass


class RecordNotFoundError(SitrepError):
    """Raised when a stored record does not exist."""

    def __init__(self, message: str, record_id: str | None = None):
        super().__init__(message)
        self.record_id = record_id


class PermissionDeniedError(SitrepError):
    """Raised when the caller's access context does not allow an operation."""

    pass
