"""
Structured logging for Stream Mirror.

JSON logs with timestamp, event_type and account or layout context.
Use get_logger() in every module that logs.
"""

from stream_mirror.mirror_logging.logger import bind_account, bind_layout, get_logger

__all__ = ["bind_account", "bind_layout", "get_logger"]
