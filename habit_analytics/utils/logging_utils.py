"""
Structured Logging with Analysis Correlation IDs.

Utilities for production-ready logging around analytics calls:
- Analysis ID correlation across log entries
- Structured JSON logging format
- Performance timing
"""
import json
import logging
import threading
import time
import uuid
from functools import wraps

from habit_analytics.conf import get_setting

logger = logging.getLogger(__name__)

# Thread-local storage for analysis context
_analysis_context = threading.local()

_RESERVED_ATTRS = (
    'name', 'msg', 'args', 'created', 'filename',
    'funcName', 'levelname', 'levelno', 'lineno',
    'module', 'msecs', 'pathname', 'process',
    'processName', 'relativeCreated', 'stack_info',
    'thread', 'threadName', 'exc_info', 'exc_text',
    'message', 'taskName',
)


# ============================================================================
# ANALYSIS ID MANAGEMENT
# ============================================================================

def get_analysis_id() -> str:
    """Get current analysis ID or generate a new one."""
    return getattr(_analysis_context, 'analysis_id', None) or str(uuid.uuid4())[:8]


def set_analysis_id(analysis_id: str):
    """Set analysis ID in thread-local storage."""
    _analysis_context.analysis_id = analysis_id


def clear_analysis_context():
    """Clear all analysis context."""
    if hasattr(_analysis_context, 'analysis_id'):
        delattr(_analysis_context, 'analysis_id')


# ============================================================================
# STRUCTURED LOG FORMATTER
# ============================================================================

class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs in format:
    {"timestamp": "...", "level": "DEBUG", "analysis_id": "abc123", "message": "..."}
    """

    def format(self, record):
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'analysis_id': get_analysis_id(),
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Extra fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith('_'):
                log_data[key] = value

        return json.dumps(log_data, default=str)


def configure_logging(handler: logging.Handler = None) -> logging.Logger:
    """
    Attach a handler to the package logger according to conf settings.

    Calling it again replaces the handler it installed before.

    Returns:
        The 'habit_analytics' logger
    """
    package_logger = logging.getLogger('habit_analytics')
    for existing in list(package_logger.handlers):
        if getattr(existing, '_habit_analytics_handler', False):
            package_logger.removeHandler(existing)

    handler = handler or logging.StreamHandler()
    if get_setting('LOG_FORMAT') == 'plain':
        handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s: %(message)s'))
    else:
        handler.setFormatter(StructuredFormatter())
    handler._habit_analytics_handler = True

    package_logger.addHandler(handler)
    package_logger.setLevel(str(get_setting('LOG_LEVEL')).upper())
    return package_logger


# ============================================================================
# LOGGING UTILITIES
# ============================================================================

def log_with_context(level: str, message: str, **extra):
    """
    Log with current analysis context and extra fields.

    Usage:
        log_with_context('debug', 'Overview computed', habits=12, days=30)
    """
    log_func = getattr(logger, level.lower(), logger.info)
    log_func(message, extra=extra)


# ============================================================================
# DECORATOR FOR FUNCTION LOGGING
# ============================================================================

def log_function_call(log_args: bool = False, log_result: bool = False):
    """
    Decorator to log function entry/exit with timing.

    Every log entry emitted during the call carries one analysis id, which
    is cleared when the outermost decorated call returns. An id set by the
    caller beforehand is kept.

    Timing logs are skipped when the LOG_FUNCTION_CALLS setting is off.
    Exceptions are logged and re-raised unchanged.

    Usage:
        @log_function_call(log_args=True)
        def my_function(arg1, arg2):
            ...
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            # The outermost decorated call owns the analysis id; nested calls share it.
            owns_context = getattr(_analysis_context, 'analysis_id', None) is None
            if owns_context:
                set_analysis_id(str(uuid.uuid4())[:8])
            try:
                if not get_setting('LOG_FUNCTION_CALLS'):
                    return func(*args, **kwargs)
                return _timed_call(func, log_args, log_result, args, kwargs)
            finally:
                if owns_context:
                    clear_analysis_context()

        return wrapper
    return decorator


def _timed_call(func, log_args, log_result, args, kwargs):
    func_name = f"{func.__module__}.{func.__qualname__}"

    if log_args:
        log_with_context('debug', f'Entering {func_name}',
                         func_args=str(args)[:200], func_kwargs=str(kwargs)[:200])

    start = time.time()
    try:
        result = func(*args, **kwargs)
    except Exception as e:
        duration = (time.time() - start) * 1000
        log_with_context('error', f'Error in {func_name}: {e}',
                         duration_ms=round(duration, 2),
                         error_type=type(e).__name__)
        raise

    duration = (time.time() - start) * 1000
    if log_result:
        log_with_context('debug', f'Exited {func_name}',
                         duration_ms=round(duration, 2),
                         result=str(result)[:200])
    else:
        log_with_context('debug', f'Exited {func_name}',
                         duration_ms=round(duration, 2))
    return result
