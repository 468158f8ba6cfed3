import json
import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

# Context variables for correlation
playlist_var: ContextVar[Optional[str]] = ContextVar('playlist', default=None)
command_var: ContextVar[Optional[str]] = ContextVar('command', default=None)

LOGGER_NAME = 'mpd_playlist'


class SecretMasker:
    """Masks sensitive information in log messages."""

    def __init__(self):
        """Initialize secret masker with patterns."""
        self.patterns = [
            # key=value style secrets
            r'(?i)(password|passwd|token|secret)[\s]*[:=][\s]*["\']?([^\s"\',]{4,})["\']?',
            # the protocol's own authentication command
            r'(?i)^(password)\s+["\']?([^\s"\']+)["\']?',
        ]

        self.compiled_patterns = [re.compile(pattern) for pattern in self.patterns]

    def mask_secrets(self, text: str) -> str:
        """Mask sensitive information in text."""
        if not text:
            return text

        masked_text = text

        for pattern in self.compiled_patterns:
            def replace_match(match):
                prefix = match.group(1)
                secret = match.group(2)
                # Keep first 2 and last 2 characters of long secrets
                if len(secret) > 8:
                    masked_secret = secret[:2] + '*' * (len(secret) - 4) + secret[-2:]
                else:
                    masked_secret = '*' * len(secret)
                return f"{prefix}: {masked_secret}"

            masked_text = pattern.sub(replace_match, masked_text)

        return masked_text

    def mask_args(self, command: str, args: Iterable[Any]) -> list:
        """Mask command arguments that carry credentials."""
        args = list(args)
        if command == 'password':
            return ['*' * len(str(arg)) for arg in args]
        return args

    def mask_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Mask sensitive information in dictionary."""
        if not data:
            return data

        masked_data = {}

        for key, value in data.items():
            if isinstance(value, str):
                masked_data[key] = self.mask_secrets(value)
            elif isinstance(value, dict):
                masked_data[key] = self.mask_dict(value)
            elif isinstance(value, list):
                masked_data[key] = [self.mask_dict(item) if isinstance(item, dict)
                                    else self.mask_secrets(item) if isinstance(item, str)
                                    else item for item in value]
            else:
                masked_data[key] = value

        return masked_data


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self):
        super().__init__()
        self.masker = SecretMasker()

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            'ts': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': self.masker.mask_secrets(record.getMessage()),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        playlist = playlist_var.get()
        command = command_var.get()
        if playlist:
            log_entry['playlist'] = playlist
        if command:
            log_entry['command'] = command

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        if getattr(record, 'fields', None):
            log_entry['fields'] = self.masker.mask_dict(record.fields)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class CorrelationContext:
    """Context manager binding the playlist and command to every record logged inside it."""

    def __init__(self, playlist: Optional[str] = None, command: Optional[str] = None):
        self.playlist = playlist
        self.command = command
        self._tokens = []

    def __enter__(self):
        if self.playlist is not None:
            self._tokens.append((playlist_var, playlist_var.set(self.playlist)))
        if self.command is not None:
            self._tokens.append((command_var, command_var.set(self.command)))
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        while self._tokens:
            var, token = self._tokens.pop()
            var.reset(token)


def setup_logging(level: str = 'INFO',
                  log_file: Optional[str] = None) -> logging.Logger:
    """Setup structured logging on the package logger."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    logger.handlers.clear()

    formatter = StructuredFormatter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get logger under the package namespace."""
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + '.'):
        name = f'{LOGGER_NAME}.{name}'
    return logging.getLogger(name)


def log_with_fields(logger: logging.Logger, level: str, message: str,
                    fields: Optional[Dict[str, Any]] = None,
                    exc_info: bool = False, **kwargs):
    """Log message with additional fields."""
    levelno = getattr(logging, level.upper())
    if not logger.isEnabledFor(levelno):
        return

    record = logger.makeRecord(
        logger.name, levelno, '', 0, message, (),
        sys.exc_info() if exc_info else None
    )

    merged = dict(fields or {})
    merged.update(kwargs)
    if merged:
        record.fields = merged

    logger.handle(record)


def log_command(logger: logging.Logger, command: str, args: Iterable[Any]):
    """Log a command about to be sent to the dispatcher."""
    masker = SecretMasker()
    with CorrelationContext(command=command):
        log_with_fields(logger, 'DEBUG', 'Sending command', {
            'args': [str(arg) for arg in masker.mask_args(command, args)],
        })


def log_listing_recovered(logger: logging.Logger, playlist: str, error: Exception):
    """Report a listing failure that was turned into an empty result."""
    with CorrelationContext(playlist=playlist, command='listplaylistinfo'):
        log_with_fields(logger, 'WARNING', f"Files inside playlist '{playlist}' could not be listed", {
            'error_type': type(error).__name__,
            'error_message': str(error),
        })


def log_error(logger: logging.Logger, message: str, error: Exception, **kwargs):
    """Log error with exception details."""
    log_with_fields(logger, 'ERROR', message, {
        'error_type': type(error).__name__,
        'error_message': str(error),
        **kwargs
    }, exc_info=True)
