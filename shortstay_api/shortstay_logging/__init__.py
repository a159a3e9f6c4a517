"""
Structured logging: get_logger() for modules, bind_request() for the HTTP middleware.
"""

from shortstay_api.shortstay_logging.logger import bind_request, get_logger

__all__ = ["get_logger", "bind_request"]
