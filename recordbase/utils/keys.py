"""Storage key rules shared by every backend.

Keys become file and directory names in the filesystem backend, so the
same rules apply to record, subscription and user keys everywhere to
keep backends interchangeable.
"""

import os

from recordbase.exceptions import InvalidKeyError

SUBSCRIPTION_DIR = "_subscription"
PUBLIC_DB_KEY = "_public"

_RESERVED = frozenset({SUBSCRIPTION_DIR})
_SEPARATORS = frozenset({"/", "\\", os.sep, "\x00"})


def is_valid_key(name: str) -> bool:
    """Whether name can be used as a key without escaping its directory."""
    if not name or name in (".", "..") or name.startswith("."):
        return False
    if any(sep in name for sep in _SEPARATORS):
        return False
    return name not in _RESERVED


def check_key(name: str, what: str = "key") -> str:
    """Return name, or raise InvalidKeyError if it is not a valid key."""
    if not is_valid_key(name):
        raise InvalidKeyError(f"Invalid {what}: {name!r}", name)
    return name


def check_user_key(user_key: str) -> str:
    """User keys follow the key rules and may not name the public database."""
    check_key(user_key, "user key")
    if user_key == PUBLIC_DB_KEY:
        raise InvalidKeyError(f"Invalid user key: {user_key!r} is reserved", user_key)
    return user_key
