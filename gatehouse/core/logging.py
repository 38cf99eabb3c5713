"""
Logging Configuration and Utilities

Structured logging with structlog processors, a JSON formatter for the
standard library handlers, and a context-aware logger adapter.

Every record is stamped with the request id and scrubbed of credentials
(bearer tokens, push tokens, the cron secret) before it reaches a sink.
"""

import sys
import logging
from typing import Any, Dict, Optional
from contextvars import ContextVar
from functools import wraps

import structlog
from pythonjsonlogger import jsonlogger

from gatehouse.config.settings import settings
from gatehouse.utils.datetime_utils import DateTimeHelper

# Context variables for request tracking
request_id: ContextVar[Optional[str]] = ContextVar('request_id', default=None)


class RequestContextProcessor:
    """Add request context to log records"""

    def __call__(self, logger, method_name, event_dict):
        req_id = request_id.get()
        if req_id and 'request_id' not in event_dict:
            event_dict['request_id'] = req_id

        event_dict['timestamp'] = DateTimeHelper.utcnow().isoformat()
        event_dict['service'] = 'gatehouse'
        event_dict['environment'] = settings.ENVIRONMENT

        return event_dict


class SecurityLogProcessor:
    """Mask credentials and push tokens before they reach a sink"""

    SENSITIVE_KEYS = (
        'password', 'token', 'secret', 'credentials',
        'authorization', 'cookie',
    )

    def __call__(self, logger, method_name, event_dict):
        if any(keyword in str(event_dict.get('event', '')).lower()
               for keyword in ('auth', 'secret', 'cron', 'another community')):
            event_dict['security_event'] = True

        self.sanitize(event_dict)
        return event_dict

    @classmethod
    def sanitize(cls, event_dict: Dict[str, Any]) -> None:
        for key in list(event_dict.keys()):
            if any(sensitive in key.lower() for sensitive in cls.SENSITIVE_KEYS):
                event_dict[key] = '[REDACTED]'
            elif isinstance(event_dict[key], dict):
                cls.sanitize(event_dict[key])


class PerformanceLogProcessor:
    """Tag slow calls; the reminder run must finish well inside its minute"""

    def __call__(self, logger, method_name, event_dict):
        if 'execution_time' in event_dict:
            exec_time = event_dict['execution_time']
            if exec_time > 30.0:
                event_dict['performance_category'] = 'slow'
            elif exec_time > 5.0:
                event_dict['performance_category'] = 'moderate'
            else:
                event_dict['performance_category'] = 'fast'

        return event_dict


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter sharing the structlog context and redaction rules"""

    _context = RequestContextProcessor()
    _security = SecurityLogProcessor()
    _performance = PerformanceLogProcessor()

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['function'] = record.funcName
        log_record['line'] = record.lineno

        for processor in (self._context, self._security, self._performance):
            processor(record.name, record.levelname, log_record)

        if record.exc_info:
            log_record['exception'] = self.formatException(record.exc_info)


class LoggingConfig:
    """Centralized logging configuration"""

    @staticmethod
    def configure_structured_logging():
        """Configure structured logging with structlog"""

        processors = [
            RequestContextProcessor(),
            SecurityLogProcessor(),
            PerformanceLogProcessor(),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

        if settings.LOG_FORMAT == "json":
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.processors.KeyValueRenderer())

        structlog.configure(
            processors=processors,
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
            context_class=dict,
            cache_logger_on_first_use=True,
        )

    @staticmethod
    def configure_standard_logging():
        """Configure standard Python logging"""

        level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        root_logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)

        if settings.LOG_FORMAT == "json":
            formatter = CustomJsonFormatter(
                '%(asctime)s %(name)s %(levelname)s %(message)s'
            )
        else:
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )

        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy.engine").setLevel(
            logging.INFO if settings.DEBUG else logging.WARNING
        )
        # httpx logs full request URLs at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("PIL").setLevel(logging.WARNING)


class LoggerAdapter:
    """Thin wrapper that always passes a mutable ``extra`` dict"""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def _log(self, level: int, message: str, *args, **kwargs):
        kwargs['extra'] = dict(kwargs.get('extra') or {})
        self.logger.log(level, message, *args, **kwargs)

    def debug(self, message: str, *args, **kwargs):
        self._log(logging.DEBUG, message, *args, **kwargs)

    def info(self, message: str, *args, **kwargs):
        self._log(logging.INFO, message, *args, **kwargs)

    def warning(self, message: str, *args, **kwargs):
        self._log(logging.WARNING, message, *args, **kwargs)

    def error(self, message: str, *args, **kwargs):
        self._log(logging.ERROR, message, *args, **kwargs)


def get_logger(name: Optional[str] = None) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name or 'gatehouse'))


def log_execution_time(logger_name: Optional[str] = None):
    """
    Decorator to log how long a synchronous job took.

    Args:
        logger_name: Custom logger name
    """
    def decorator(func):
        logger = get_logger(logger_name or func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = DateTimeHelper.utcnow()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error("Job failed", extra={
                    'function': func.__name__,
                    'execution_time': (DateTimeHelper.utcnow() - start_time).total_seconds(),
                    'error_type': type(e).__name__,
                })
                raise
            logger.info("Job finished", extra={
                'function': func.__name__,
                'execution_time': (DateTimeHelper.utcnow() - start_time).total_seconds(),
            })
            return result

        return wrapper

    return decorator


def setup_logging():
    """Initialize logging configuration"""
    if settings.ENABLE_STRUCTURED_LOGGING:
        LoggingConfig.configure_structured_logging()

    LoggingConfig.configure_standard_logging()

    get_logger(__name__).info("Logging system initialized", extra={
        'log_level': settings.LOG_LEVEL,
        'log_format': settings.LOG_FORMAT,
    })


__all__ = [
    'get_logger',
    'setup_logging',
    'log_execution_time',
    'LoggerAdapter',
    'LoggingConfig',
    'request_id',
]
