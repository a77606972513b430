from ytt.logging_core.logger import get_logger, log_event, set_log_level

__all__ = ["get_logger", "log_event", "set_log_level"]
