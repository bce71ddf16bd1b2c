"""Sanitized logging utilities for the consolidator.

Provides structured logging that strips sensitive information (user home
directories, e-mail addresses, tokens) before context reaches the log output.
"""
import json
import logging
import re
from typing import Any, Iterable, Optional

_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt=_DATE_FORMAT
)

logger = logging.getLogger('footage-consolidator')

_VALID_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
_DEFAULT_MAX_JSON_LENGTH = 1000
_max_json_length = _DEFAULT_MAX_JSON_LENGTH


def sanitize_text(text: str) -> str:
    """Remove sensitive information from text.

    Args:
        text: Input text that may contain sensitive data

    Returns:
        Sanitized text with sensitive patterns replaced
    """
    if not text:
        return text

    # Email addresses
    text = re.sub(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}', '<email>', text)

    # User names inside home directories
    text = re.sub(r'/(Users|home)/[^/\s"]+', r'/\1/<user>', text)
    text = re.sub(r'([A-Za-z]:\\\\?Users\\\\?)[^\\\s"]+', r'\1<user>', text)

    # API keys and tokens (common patterns)
    text = re.sub(r'sk-[a-zA-Z0-9]{20,}', '<api-key>', text)
    text = re.sub(r'ghp_[a-zA-Z0-9]{36}', '<github-token>', text)

    # URLs with potential credentials
    text = re.sub(r'https?://[^\s@/]+:[^\s@/]+@[^\s"]+', '<url>', text)

    return text


def safe_json(obj: Any, max_length: Optional[int] = None) -> str:
    """Safely serialize object to JSON with sensitive data sanitized.

    Args:
        obj: Object to serialize
        max_length: Maximum length of output string (defaults to the
            limit set with ``set_max_json_length``)

    Returns:
        Sanitized JSON string
    """
    if max_length is None:
        max_length = _max_json_length
    try:
        json_str = json.dumps(obj, indent=2, ensure_ascii=False, default=str)
        sanitized = sanitize_text(json_str)

        if len(sanitized) > max_length:
            sanitized = sanitized[:max_length] + "... [truncated]"

        return sanitized
    except Exception:
        return "<unable to serialize>"


def set_log_level(level: str) -> None:
    """Apply a textual log level to the consolidator logger."""
    name = (level or 'INFO').upper()
    if name not in _VALID_LEVELS:
        raise ValueError(f'Invalid log level: {level}. Valid options: {list(_VALID_LEVELS)}')
    logger.setLevel(getattr(logging, name))


def set_log_format(fmt: str) -> None:
    """Apply a log format to every handler of the root logger."""
    formatter = logging.Formatter(fmt, datefmt=_DATE_FORMAT)
    for handler in logging.getLogger().handlers:
        handler.setFormatter(formatter)


def set_max_json_length(max_length: int) -> None:
    """Set how many characters of JSON context a log line may carry."""
    global _max_json_length
    if max_length <= 0:
        raise ValueError(f"max_length must be positive, got {max_length}")
    _max_json_length = max_length


def log_info(message: str, **kwargs) -> None:
    """Log info message with optional sanitized context."""
    if kwargs:
        context = safe_json(kwargs)
        logger.info(f"{message} | Context: {context}")
    else:
        logger.info(message)


def log_warning(message: str, **kwargs) -> None:
    """Log warning message with optional sanitized context."""
    if kwargs:
        context = safe_json(kwargs)
        logger.warning(f"{message} | Context: {context}")
    else:
        logger.warning(message)


def log_error(message: str, **kwargs) -> None:
    """Log error message with optional sanitized context."""
    if kwargs:
        context = safe_json(kwargs)
        logger.error(f"{message} | Context: {context}")
    else:
        logger.error(message)


def log_debug(message: str, **kwargs) -> None:
    """Log debug message with optional sanitized context."""
    if kwargs:
        context = safe_json(kwargs)
        logger.debug(f"{message} | Context: {context}")
    else:
        logger.debug(message)


def log_duplicate_group(canonical_id: str, duplicate_ids: Iterable[str], signature: Optional[str] = None) -> None:
    """Log one equivalence class that produced substitutions.

    Args:
        canonical_id: Id of the first-seen member every duplicate redirects to
        duplicate_ids: Ids of the remaining members
        signature: Optional signature shared by the class
    """
    duplicates = list(duplicate_ids)
    log_info("Duplicate group detected",
             canonical=canonical_id,
             duplicates=duplicates,
             duplicate_count=len(duplicates),
             signature=signature)


def log_pass_progress(stage: str, **kwargs) -> None:
    """Log pass progress through its stages.

    Args:
        stage: Current stage of the consolidation pass
        **kwargs: Additional context
    """
    log_info(f"Pass progress: {stage}", **kwargs)
