"""
Test that mirror_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from mirror_logging and use the logger."""
    from stream_mirror.mirror_logging import bind_account, get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")
    bind_account("11111111111111111111111111111112").warning("stream_skipped", error_code="x")


def test_package_imports():
    """Top-level package imports every layer without cycles."""
    import stream_mirror

    assert stream_mirror.refresh is not None
    assert stream_mirror.list_streams is not None
    assert stream_mirror.__version__


def test_bind_layout_context():
    """Decoder events carry the account kind, layout label and version."""
    from structlog.testing import capture_logs

    from stream_mirror.mirror_logging import bind_layout

    with capture_logs() as logs:
        bind_layout("stream", "stream_v1", 1).warning("layout_decode_failed", size=3)
    assert logs[0]["kind"] == "stream"
    assert logs[0]["layout"] == "stream_v1"
    assert logs[0]["version"] == 1
    assert logs[0]["logger"] == "stream_mirror.decoder"
