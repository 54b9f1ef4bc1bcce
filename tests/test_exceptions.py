"""Tests for exceptions.py exception hierarchy."""

import pytest

from sitrep import (
    AttachmentDecodeError,
    AttachmentError,
    AttachmentLimitError,
    DocumentBuildError,
    EmptyWindowError,
    ImageProcessingError,
    NoContentError,
    PermissionDeniedError,
    RecordNotFoundError,
    SitrepError,
    SynthesisError,
    WindowError,
)


class TestExceptionHierarchy:
    """All registry errors share one base so callers can catch them together."""

    @pytest.mark.parametrize("exc_class", [
        WindowError,
        AttachmentError,
        DocumentBuildError,
        SynthesisError,
        PermissionDeniedError,
        AttachmentDecodeError,
    ])
    def test_inherits_from_base(self, exc_class):
        assert issubclass(exc_class, SitrepError)

    def test_window_errors(self):
        assert issubclass(EmptyWindowError, WindowError)
        assert issubclass(NoContentError, WindowError)

    def test_attachment_errors(self):
        assert issubclass(AttachmentLimitError, AttachmentError)
        assert issubclass(ImageProcessingError, AttachmentError)
        assert issubclass(AttachmentDecodeError, AttachmentError)

    def test_not_interchangeable(self):
        assert not issubclass(EmptyWindowError, DocumentBuildError)
        assert not issubclass(ImageProcessingError, WindowError)


class TestExceptionAttributes:

    def test_empty_window(self):
        exc = EmptyWindowError("no days", requested_days=3)
        assert str(exc) == "no days"
        assert exc.requested_days == 3

    def test_no_content_defaults(self):
        assert NoContentError("empty").day_labels == []

    def test_attachment_limit(self):
        exc = AttachmentLimitError("too many", limit=4, current=3, requested=2)
        assert (exc.limit, exc.current, exc.requested) == (4, 3, 2)

    def test_image_processing_index(self):
        assert ImageProcessingError("bad").index is None
        assert ImageProcessingError("bad", index=2).index == 2

    def test_record_not_found(self):
        with pytest.raises(SitrepError) as exc_info:
            raise RecordNotFoundError("missing", record_id="r9")
        assert exc_info.value.record_id == "r9"
