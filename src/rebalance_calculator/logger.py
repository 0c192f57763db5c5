import logging
import sys
import json
from datetime import datetime
from typing import Optional
from app_config import LoggingConfig, get_config

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename', 'module',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'taskName', 'getMessage', 'exc_info', 'exc_text',
    'stack_info', 'message',
}


class StructuredFormatter(logging.Formatter):
    """Formatter for text or JSON lines, including any extra fields"""

    def __init__(self, output_format: str = 'text'):
        super().__init__()
        self.output_format = output_format

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage()
        }

        extras = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS:
                continue
            extras[key] = value.isoformat() if isinstance(value, datetime) else value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if self.output_format == 'json':
            return json.dumps({**log_data, **extras}, default=str)

        base_msg = f"{log_data['timestamp']} - {log_data['logger']} - {log_data['level']} - {log_data['message']}"
        for key, value in extras.items():
            base_msg += f" [{key}={value}]"
        if 'exception' in log_data:
            base_msg += f"\n{log_data['exception']}"
        return base_msg


def configure_root_logger(config: Optional[LoggingConfig] = None, stream=None) -> logging.Logger:
    """Configure the root logger with a structured stdout handler"""
    config = config or get_config().logging
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, config.level))

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(StructuredFormatter(config.format))
    root_logger.addHandler(console_handler)

    return root_logger
