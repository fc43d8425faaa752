from __future__ import annotations


class DeclarationError(Exception):
    """Base class for errors raised while building declaration trees."""


class StructuralError(DeclarationError):
    """Raised when a declaration tree would become invalid, for example when a
    node is attached to itself, to one of its ancestors, or while it still has
    another parent. These indicate a caller bug and abort generation."""


class MissingReferenceError(DeclarationError):
    """Raised when a node that generation depends on cannot be found, such as an
    unresolved `extends` target or a missing `Options` interface."""
