"""
Author identity canonicalization.

Email is the primary grouping key. Commits recorded with the same
address in different casing, with stray whitespace or wrapped in the
``<...>`` that blame porcelain prints, collapse to one identity. Authors
without an email are keyed by name so they are never dropped.
"""

import re
from typing import Optional

from .models import AuthorIdentity

UNKNOWN_AUTHOR = "(unknown)"

_WHITESPACE = re.compile(r"\s+")


def clean_email(email: Optional[str]) -> str:
    """Trim an email address and unwrap ``<...>``, keeping its casing."""
    value = (email or "").strip()
    if value.startswith("<") and value.endswith(">"):
        value = value[1:-1].strip()
    return value


def canonical_email(email: Optional[str]) -> str:
    """Grouping form of an email address."""
    return clean_email(email).lower()


def canonical_name(name: Optional[str]) -> str:
    """Trim, collapse internal whitespace and case-fold a name."""
    return _WHITESPACE.sub(" ", (name or "").strip()).casefold()


def normalize(name: Optional[str], email: Optional[str]) -> AuthorIdentity:
    """
    Derive the canonical identity for an author.

    Args:
        name: Author name as recorded in the commit
        email: Author email as recorded in the commit

    Returns:
        AuthorIdentity keyed by email, or by name when the email is empty.
        When both are empty every such record shares one "unknown" identity.
    """
    display_name = (name or "").strip()
    email_key = canonical_email(email)

    if email_key:
        return AuthorIdentity(key=f"email:{email_key}", email=email_key, name=display_name)

    name_key = canonical_name(name)
    if name_key:
        return AuthorIdentity(key=f"name:{name_key}", email="", name=display_name)

    return AuthorIdentity(key="unknown:", email="", name=UNKNOWN_AUTHOR)


def is_anonymous(identity: AuthorIdentity) -> bool:
    """True for the catch-all identity used when name and email are missing."""
    return identity.key == "unknown:"
