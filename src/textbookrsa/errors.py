"""Exceptions raised by textbookrsa.

Every failure that aborts a key generation or a cipher operation derives from `RSAError`, so that callers can
catch the whole family at once. The subclasses additionally derive from the builtin exception that best describes
them, keeping `except RuntimeError` / `except ValueError` callers working.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSAError(Exception):
    """Base class of all textbookrsa errors."""


class GenerationError(RSAError, RuntimeError):
    """The random source failed or could not supply a (distinct) prime."""


class KeyDerivationError(RSAError, RuntimeError):
    """No public exponent or private exponent could be derived from the totient."""


class MessageTooLargeError(RSAError, ValueError):
    """The integer representative does not fit in [0, mod-1]."""

    def __init__(self, message: int, mod: int) -> None:
        self.message = message
        self.mod = mod
        sign = "negative " if message < 0 else ""
        super().__init__(f"Message representative must be in range [0, mod-1] (got a {sign}{message.bit_length()}-bit "
                         f"value for a {mod.bit_length()}-bit modulus)")
