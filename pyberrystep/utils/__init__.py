from .log_utils import init_logger

__all__ = ["init_logger"]
