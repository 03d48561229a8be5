"""Chooses between native (OpenSSL) and pure Python key generation.

The native backend is purely a speed-up: it only covers two-prime keys of at least 384 bits with the exponent 65537,
and whatever it hands back is parsed into the very same key model the Python generator produces.

Typical usage example:

    if prefer_native_backend(2, 3072, 65537):
        der = NATIVE_BACKEND.generate(3072, 65537)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import importlib.util
import logging

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from rsacore.config import get_config

logger = logging.getLogger(__name__)


class NativeBackend:
    """Key generation through `cryptography`, and thereby OpenSSL.

    Attributes:
        name: Engine name reported by `get_engine`.
        exponent: The only public exponent the backend is used for.
        min_bits: Smallest key size the backend accepts. `cryptography` refuses anything below 1024 bits.
    """
    name = "OpenSSL"
    exponent = 65537
    min_bits = 1024

    def installed(self) -> bool:
        return importlib.util.find_spec("cryptography") is not None

    def generate(self, bits: int, exponent: int) -> bytes:
        """Generates a two-prime key.

        Args:
            bits: Modulus size in bits.
            exponent: Public exponent.

        Returns:
            The key as DER encoded PKCS#8, unencrypted.
        """
        logger.debug("Delegating %d-bit key generation to %s", bits, self.name)
        pk = rsa.generate_private_key(public_exponent=exponent, key_size=bits)
        return pk.private_bytes(serialization.Encoding.DER, serialization.PrivateFormat.PKCS8,
                                serialization.NoEncryption())


NATIVE_BACKEND = NativeBackend()
# OpenSSL requires RSA keys of at least 384 bits.
NATIVE_MIN_BITS = 384


def prefer_native_backend(num_primes: int, bits: int, pub_exp: int, backend: NativeBackend | None = None) -> bool:
    """Decides whether key generation may go through the native backend.

    Args:
        num_primes: Number of primes the key will have.
        bits: Modulus size in bits.
        pub_exp: Requested public exponent.
        backend: The backend to consider, None if native generation is disabled.

    Returns:
        True only for two primes, at least the backend's minimum size, the backend's exponent and an installed
        backend.
    """
    if backend is None:
        return False
    return (num_primes == 2 and bits >= NATIVE_MIN_BITS and bits >= backend.min_bits and pub_exp == 65537
            and pub_exp == backend.exponent and backend.installed())


def get_engine(pub_exp: int | None = None, native: bool | None = None, backend: NativeBackend = NATIVE_BACKEND) -> str:
    """Name of the engine two-prime key generation would use under the given policy.

    Arguments left as None follow the process-wide configuration. Multi-prime keys and sizes below the backend
    minimum always use the Python engine regardless.
    """
    cfg = get_config()
    pub_exp = cfg.exponent if pub_exp is None else pub_exp
    native = cfg.native_backend if native is None else native
    if native and pub_exp == backend.exponent and backend.installed():
        return backend.name
    return "Python"
