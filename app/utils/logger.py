"""Logging configuration and log-safe value redaction"""

import logging
import re
import sys
from typing import Any, Optional

REDACTED = "***REDACTED***"
MAX_LOGGED_TEXT = 300

SENSITIVE_KEYS = ("token", "api_key", "apikey", "authorization", "secret", "password", "session")
PAYLOAD_KEYS = ("body", "content", "prompt", "raw_text", "response")

_INLINE_SECRET = re.compile(
    r"(?i)(bearer\s+|(?:access_token|token|api_key|key|secret)=)[^\s&\"',]+"
)


def setup_logger(
    name: str,
    level: int = logging.INFO,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger with consistent formatting

    Args:
        name: Logger name
        level: Logging level
        format_string: Custom format string

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if logger.handlers:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    if format_string is None:
        format_string = (
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(handler)

    # Third-party clients log every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logger


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEYS)


def sanitize_for_log(value: Any, key: Optional[str] = None) -> Any:
    """
    Make a value safe to attach to a log record

    Credentials under sensitive keys are masked, long payload bodies are
    replaced by a size marker and inline ``token=...`` fragments are scrubbed
    from free text.
    """
    if key is not None and _is_sensitive(key):
        return REDACTED

    if isinstance(value, dict):
        return {k: sanitize_for_log(v, key=str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [sanitize_for_log(item) for item in value]
    if isinstance(value, str):
        if key is not None and key.lower() in PAYLOAD_KEYS:
            return f"<redacted payload: {len(value)} chars>"
        scrubbed = _INLINE_SECRET.sub(lambda m: m.group(1) + REDACTED, value)
        if len(scrubbed) > MAX_LOGGED_TEXT:
            return scrubbed[:MAX_LOGGED_TEXT] + "..."
        return scrubbed
    return value


def sanitize_log_extra(**fields: Any) -> dict[str, Any]:
    """Build an ``extra=`` mapping with every field passed through redaction."""
    return {name: sanitize_for_log(value, key=name) for name, value in fields.items()}
