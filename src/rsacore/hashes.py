"""The hash abstraction consumed by MGF1, the EMSA encoders and the key parameters.

PKCS#1 names nine digests. Most are served by `hashlib`; MD2 and the truncated SHA-512 variants are not guaranteed
by every OpenSSL build behind `hashlib`, so those come from PyCryptodome.

Typical usage example:

    hashf = get_hash("SHA256")
    h = digest(b"payload", hashf)
    hlen = digest_length(hashf)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import functools
import hashlib
import typing

from Cryptodome.Hash import MD2
from Cryptodome.Hash import SHA512
from pyasn1.type import univ
from pyasn1_modules import rfc8017

from rsacore.errors import UnsupportedAlgorithmError

HASH_TLL: dict[str, tuple[typing.Callable, univ.ObjectIdentifier, int]] = {
    "md2": (MD2.new, rfc8017.id_md2, 16),
    "md5": (hashlib.md5, rfc8017.id_md5, 16),
    "sha1": (hashlib.sha1, rfc8017.id_sha1, 20),
    "sha224": (hashlib.sha224, rfc8017.id_sha224, 28),
    "sha256": (hashlib.sha256, rfc8017.id_sha256, 32),
    "sha384": (hashlib.sha384, rfc8017.id_sha384, 48),
    "sha512": (hashlib.sha512, rfc8017.id_sha512, 64),
    "sha512/224": (functools.partial(SHA512.new, truncate="224"), rfc8017.id_sha512_224, 28),
    "sha512/256": (functools.partial(SHA512.new, truncate="256"), rfc8017.id_sha512_256, 32),
}

SUPPORTED_HASHES = tuple(HASH_TLL)


def get_hash(name: str) -> str:
    """Normalise a hash name and make sure PKCS#1 knows it.

    Args:
        name: Hash algorithm name, case-insensitive.

    Returns:
        The lower-case canonical name.

    Raises:
        UnsupportedAlgorithmError: If the name is not one of `SUPPORTED_HASHES`.
    """
    hashf = name.lower()
    if hashf not in HASH_TLL:
        raise UnsupportedAlgorithmError("The only supported hash algorithms are: " + ", ".join(SUPPORTED_HASHES))
    return hashf


def digest(data: bytes, name: str) -> bytes:
    """Hash `data` with the named algorithm."""
    fun = HASH_TLL[get_hash(name)][0]
    return fun(data).digest()


def digest_length(name: str) -> int:
    """Output length of the named algorithm in bytes."""
    return HASH_TLL[get_hash(name)][2]
