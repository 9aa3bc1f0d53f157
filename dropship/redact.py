"""Mask the DigitalOcean API token in log output."""

import functools
import logging
import os
import re

TOKEN_ENV_VARS = ("DIGITALOCEAN_TOKEN", "DIGITALOCEAN_ACCESS_TOKEN")
MASK = "***"

# Anything shorter would match ordinary words
_MIN_TOKEN_LENGTH = 8

# Authorization header values, e.g. echoed back in an error body
_BEARER_RE = re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+")


@functools.lru_cache(maxsize=1)
def _token_pattern() -> re.Pattern | None:
    """Alternation of the token values currently set, longest first; None if unset."""
    tokens = {os.environ.get(var, "") for var in TOKEN_ENV_VARS}
    tokens = sorted((t for t in tokens if len(t) >= _MIN_TOKEN_LENGTH), key=len, reverse=True)
    if not tokens:
        return None
    return re.compile("|".join(re.escape(t) for t in tokens))


def redact_secrets(text: str) -> str:
    """Replace bearer credentials and the configured API token with '***'."""
    text = _BEARER_RE.sub(rf"\g<1>{MASK}", text)
    pattern = _token_pattern()
    if pattern is not None:
        text = pattern.sub(MASK, text)
    return text


class SecretRedactingFilter(logging.Filter):
    """Logging filter masking the token in each record's message.

    Log calls here are f-string formatted, so record.msg holds the full text.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = redact_secrets(str(record.msg))
        return True
