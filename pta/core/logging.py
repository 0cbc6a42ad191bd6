import asyncio
import logging
from logging.handlers import RotatingFileHandler
import os
import json
from datetime import datetime, timezone
from functools import wraps
from typing import Optional
import traceback

from pta.core.config import settings, get_log_dir


class CustomJsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""
    def __init__(self, **kwargs):
        super().__init__()
        self.kwargs = kwargs

    def format(self, record):
        json_record = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if hasattr(record, 'request_id'):
            json_record['request_id'] = record.request_id

        if record.exc_info:
            json_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'duration'):
            json_record['duration_ms'] = record.duration

        for field in self.kwargs.get('extra_fields', ()):
            if hasattr(record, field):
                json_record[field] = getattr(record, field)

        return json.dumps(json_record, default=str)


class LoggerFactory:
    """Factory class for creating and configuring loggers"""

    @staticmethod
    def create_logger(name: str, log_dir: Optional[str] = None, level: str = "INFO", json_console: bool = False):
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level))
        logger.propagate = False

        # Remove existing handlers if any
        if logger.handlers:
            logger.handlers.clear()

        console = logging.StreamHandler()
        console.setLevel(getattr(logging, level))
        if json_console:
            console.setFormatter(CustomJsonFormatter(extra_fields=['request_id', 'user_id', 'parent_id']))
        else:
            console.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
        logger.addHandler(console)

        if log_dir:
            handlers = {
                'app': RotatingFileHandler(
                    os.path.join(log_dir, 'app.log'),
                    maxBytes=10 * 1024 * 1024,  # 10MB
                    backupCount=5
                ),
                'error': RotatingFileHandler(
                    os.path.join(log_dir, 'error.log'),
                    maxBytes=10 * 1024 * 1024,
                    backupCount=5
                ),
            }
            for handler_name, handler in handlers.items():
                if handler_name == 'error':
                    handler.setLevel(logging.ERROR)
                else:
                    handler.setLevel(getattr(logging, level))
                handler.setFormatter(CustomJsonFormatter(extra_fields=['request_id', 'user_id', 'parent_id']))
                logger.addHandler(handler)

        return logger


def log_function_call(logger):
    """Decorator to log function entry, exit, and duration"""
    def decorator(func):
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            start_time = datetime.now()
            func_name = func.__name__

            logger.debug(f"Entering function: {func_name}")
            try:
                result = await func(*args, **kwargs)
            except Exception:
                logger.debug(f"Error in function: {func_name}", extra={'function_name': func_name})
                raise
            duration = (datetime.now() - start_time).total_seconds() * 1000
            logger.debug(
                f"Exiting function: {func_name}",
                extra={'duration': duration, 'function_name': func_name}
            )
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            start_time = datetime.now()
            func_name = func.__name__

            logger.debug(f"Entering function: {func_name}")
            try:
                result = func(*args, **kwargs)
            except Exception:
                logger.debug(f"Error in function: {func_name}", extra={'function_name': func_name})
                raise
            duration = (datetime.now() - start_time).total_seconds() * 1000
            logger.debug(
                f"Exiting function: {func_name}",
                extra={'duration': duration, 'function_name': func_name}
            )
            return result

        return async_wrapper if asyncio.iscoroutinefunction(func) else sync_wrapper
    return decorator


# Create default logger instance
logger = LoggerFactory.create_logger(
    "PTALogger",
    log_dir=get_log_dir(),
    level=settings.LOG_LEVEL,
    json_console=settings.LOG_JSON,
)
