"""Exception hierarchy shared by the primitives, the key generator and the key parameters."""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class RSAError(Exception):
    """Base class for every error raised by rsacore."""


class RangeError(RSAError, ValueError):
    """An integer does not fit into the requested octet string length."""


class LengthError(RSAError, ValueError):
    """Intended encoded message length too short for the padding, DigestInfo and hash."""


class UnsupportedAlgorithmError(RSAError, ValueError):
    """Hash algorithm outside the PKCS#1 set, or one that cannot be encoded in the requested form."""


class ConfigurationError(RSAError, ValueError):
    """Conflicting padding modes, or a key size the prime policy cannot accommodate."""


class KeyGenerationCancelled(RSAError, RuntimeError):
    """Key generation was cancelled between two attempts."""
