"""Security utilities - crypto and validators.

Re-exports all security-related functions for convenience.
"""

from src.app.core.security.crypto import (
    ACCESS_TOKEN_TYPE,
    DUMMY_PASSWORD_HASH,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from src.app.core.security.validators import (
    MAX_SUBDOMAIN_LENGTH,
    MIN_SUBDOMAIN_LENGTH,
    validate_password_strength,
    validate_subdomain_format,
)

__all__ = [
    # Crypto
    "ACCESS_TOKEN_TYPE",
    "DUMMY_PASSWORD_HASH",
    "create_access_token",
    "decode_token",
    "hash_password",
    "verify_password",
    # Validators
    "MAX_SUBDOMAIN_LENGTH",
    "MIN_SUBDOMAIN_LENGTH",
    "validate_password_strength",
    "validate_subdomain_format",
]
