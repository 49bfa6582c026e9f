"""Identity resolution against the employee roster."""

from .normalize import first_names_equivalent, name_tokens
from .resolve import resolve_identity

__all__ = ["first_names_equivalent", "name_tokens", "resolve_identity"]
