# -*- coding: utf-8 -*-
"""
errors.py  (typed failures of the AW11 engine)
----------------------------------------------
Every failure surfaces as a subclass of ABEError. Each one also derives from
the closest built-in category, so callers that only catch ValueError /
PermissionError / LookupError keep working.
"""

from __future__ import annotations


class ABEError(Exception):
    """Base class for all errors raised by dabe."""


class EmptyInput(ABEError, ValueError):
    """An attribute list or identity is empty where one is required."""


class AttributeNotFound(ABEError, LookupError):
    """No supplied authority key governs the requested attribute."""

    def __init__(self, attribute: str, where: str = "authority key"):
        self.attribute = attribute
        super().__init__(f"attribute '{attribute}' not found in {where}")


class PolicyParseError(ABEError, ValueError):
    """Malformed policy expression."""


class PolicyUnsatisfied(ABEError, PermissionError):
    """The key's attributes do not satisfy the ciphertext policy."""


class SymmetricDecryptFailure(ABEError):
    """The sealed payload failed authentication (tampered, or wrong session key)."""


class InternalInconsistency(ABEError, RuntimeError):
    """Evaluator and solver (or ciphertext and policy) disagree."""
