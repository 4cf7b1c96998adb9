# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re
from typing import Any

_MASK = "***REDACTED***"

_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    # reset tickets ride in the URL path
    (re.compile(r"(/(?:reset-password|check-token)/)[A-Za-z0-9_\-]{16,}"), rf"\g<1>{_MASK}"),
    (re.compile(r"(bearer\s+)[A-Za-z0-9_\-.]{16,}", re.IGNORECASE), rf"\g<1>{_MASK}"),
    (
        re.compile(r"\b((?:jwt|token|secret[_-]?key)\s*[:=]\s*['\"]?)[A-Za-z0-9_\-.]{16,}", re.IGNORECASE),
        rf"\g<1>{_MASK}",
    ),
    (re.compile(r"\b(password\s*[:=]\s*['\"]?)[^\s'\",]+", re.IGNORECASE), rf"\g<1>{_MASK}"),
    (re.compile(r"(\w+://[^:/\s]+:)[^@\s]+@"), rf"\g<1>{_MASK}@"),
    (re.compile(r"[A-Za-z0-9._%+-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})"), r"***@\1"),
)


def sanitize_message(message: str) -> str:
    for pattern, replacement in _RULES:
        message = pattern.sub(replacement, message)
    return message


def sanitize_record(record: dict[str, Any]) -> bool:
    """Loguru filter; rewrites the message and always lets the record through."""
    record["message"] = sanitize_message(record["message"])
    return True
