# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .password_hashing import WerkzeugPasswordHasher
from .reset_tokens import ResetTokenGenerator
from .session_issuer import SessionIssuer
from .session_tokens import SignedSessionTokenCodec, TokenSettings

__all__ = [
    "ResetTokenGenerator",
    "SessionIssuer",
    "SignedSessionTokenCodec",
    "TokenSettings",
    "WerkzeugPasswordHasher",
]
