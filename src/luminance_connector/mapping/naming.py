"""Matter name generation.

Matter names must be unique within a Luminance division, so generated names
carry a short random suffix:

Name Format:
    f"{prefix} - {suffix}" where suffix is 8 lower-case base-36 characters

Uniqueness is best effort only (36**8 possible suffixes); collisions are not
detected here, the API rejects the duplicate and the workflow step fails.

Public Functions:
    random_suffix: Generate a base-36 suffix
    matter_name: Build a matter name from a prefix, or None without one
"""
from __future__ import annotations

import secrets
import string
from typing import Optional

BASE36_ALPHABET = string.digits + string.ascii_lowercase
SUFFIX_LENGTH = 8

__all__ = ["BASE36_ALPHABET", "SUFFIX_LENGTH", "random_suffix", "matter_name"]


def random_suffix(length: int = SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(BASE36_ALPHABET) for _ in range(length))


def matter_name(prefix: Optional[str]) -> Optional[str]:
    """Return `"<prefix> - <suffix>"`, or None when `prefix` is empty."""
    if prefix is None:
        return None
    prefix = str(prefix)
    if not prefix:
        return None
    return f"{prefix} - {random_suffix()}"
