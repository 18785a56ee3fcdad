import logging
import sys
import json
import os
import gzip
import shutil
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

from app_config import LoggingConfig

# Attributes every LogRecord carries; anything else arrived through `extra`
_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename', 'module',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'taskName', 'getMessage', 'exc_info', 'exc_text',
    'stack_info', 'message',
}

class CompressingTimedRotatingFileHandler(TimedRotatingFileHandler):
    """TimedRotatingFileHandler that compresses rotated files"""

    def doRollover(self):
        super().doRollover()

        dir_name, base_name = os.path.split(self.baseFilename)
        try:
            for file_name in os.listdir(dir_name):
                if file_name.startswith(base_name) and not file_name.endswith('.gz') and file_name != base_name:
                    full_path = os.path.join(dir_name, file_name)
                    with open(full_path, 'rb') as f_in:
                        with gzip.open(f'{full_path}.gz', 'wb') as f_out:
                            shutil.copyfileobj(f_in, f_out)
                    os.remove(full_path)
        except OSError as e:
            # Compression errors must not break the rollover
            print(f"Error during log compression: {e}", file=sys.stderr)

class StructuredFormatter(logging.Formatter):
    """Text or JSON-lines formatter that keeps `extra` fields"""

    def __init__(self, output_format: str = 'text'):
        super().__init__()
        self.output_format = output_format

    def format(self, record):
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in log_data:
                continue
            if isinstance(value, datetime):
                log_data[key] = value.strftime('%Y-%m-%d %H:%M:%S')
            else:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        if self.output_format == 'json':
            return json.dumps(log_data, default=str)

        base_msg = f"[{log_data['timestamp']}] [{log_data['level']}] [{log_data['logger']}] {log_data['message']}"
        if 'exception' in log_data:
            base_msg += f"\n{log_data['exception']}"
        return base_msg

def configure_logging(config: Optional[LoggingConfig] = None):
    """Configure the root logger for console output and an optional rotating log file"""
    config = config or LoggingConfig()
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, config.level.upper()))

    formatter = StructuredFormatter(config.format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file_path:
        log_dir = os.path.dirname(config.file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = CompressingTimedRotatingFileHandler(
            filename=config.file_path,
            when='midnight',
            interval=1,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _configure_third_party_loggers()

def _configure_third_party_loggers():
    """Quiet HTTP-level chatter from the Kite SDK and its transport"""
    logging.getLogger('kiteconnect').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
