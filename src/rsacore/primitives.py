"""PKCS#1 v2.2 building blocks: data conversion, MGF1 and EMSA-PKCS1-v1_5 encoding.

These are the pure functions the encryption and signature schemes are assembled from. None of them touch key
material, so they are equally usable by public and private key operations.

Typical usage example:

    em = emsa_pkcs1_v15_encode(b"Hi there!", pk.k - 1, "sha256")
    mask = mgf1(seed, 64, "sha256")
    x = os2ip(i2osp(x, 32))
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from math import ceil

from rsacore import hashes
from rsacore.errors import LengthError
from rsacore.errors import RangeError
from rsacore.errors import UnsupportedAlgorithmError

# RFC 8017 Section 9.2, Note 1. DigestInfo DER prefixes carrying an explicit NULL parameter.
DIGEST_INFO_PREFIXES: dict[str, bytes] = {
    "md2": b"\x30\x20\x30\x0c\x06\x08\x2a\x86\x48\x86\xf7\x0d\x02\x02\x05\x00\x04\x10",
    "md5": b"\x30\x20\x30\x0c\x06\x08\x2a\x86\x48\x86\xf7\x0d\x02\x05\x05\x00\x04\x10",
    "sha1": b"\x30\x21\x30\x09\x06\x05\x2b\x0e\x03\x02\x1a\x05\x00\x04\x14",
    "sha224": b"\x30\x2d\x30\x0d\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x04\x05\x00\x04\x1c",
    "sha256": b"\x30\x31\x30\x0d\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x01\x05\x00\x04\x20",
    "sha384": b"\x30\x41\x30\x0d\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x02\x05\x00\x04\x30",
    "sha512": b"\x30\x51\x30\x0d\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x03\x05\x00\x04\x40",
    "sha512/224": b"\x30\x2d\x30\x0d\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x05\x05\x00\x04\x1c",
    "sha512/256": b"\x30\x31\x30\x0d\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x06\x05\x00\x04\x20",
}

# Same structures with the parameters field omitted. MD2 and MD5 have no such form.
DIGEST_INFO_PREFIXES_NO_NULL: dict[str, bytes] = {
    "sha1": b"\x30\x1f\x30\x07\x06\x05\x2b\x0e\x03\x02\x1a\x04\x14",
    "sha224": b"\x30\x2b\x30\x0b\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x04\x04\x1c",
    "sha256": b"\x30\x2f\x30\x0b\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x01\x04\x20",
    "sha384": b"\x30\x3f\x30\x0b\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x02\x04\x30",
    "sha512": b"\x30\x4f\x30\x0b\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x03\x04\x40",
    "sha512/224": b"\x30\x2b\x30\x0b\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x05\x04\x1c",
    "sha512/256": b"\x30\x2f\x30\x0b\x06\x09\x60\x86\x48\x01\x65\x03\x04\x02\x06\x04\x20",
}


def os2ip(msg: bytes) -> int:
    """Octet-String-to-Integer primitive (RFC 8017 Section 4.2).

    Args:
        msg: The bytes (AKA Octet String) to convert. May be empty.

    Returns:
        The representative non-negative integer.
    """
    return int.from_bytes(msg, byteorder="big", signed=False)


def i2osp(msg: int, fixedlen: int) -> bytes:
    """Integer-to-Octet-String primitive (RFC 8017 Section 4.1).

    Args:
        msg: The non-negative integer to unmarshal.
        fixedlen: The target length of the byte string.

    Returns:
        The big-endian representation, left-padded with zeros to exactly `fixedlen` bytes.

    Raises:
        RangeError: If `msg` is negative or its minimal encoding is longer than `fixedlen`.
    """
    if msg < 0 or msg.bit_length() > 8 * fixedlen:
        raise RangeError("Resultant string length out of range")
    return msg.to_bytes(fixedlen, byteorder="big", signed=False)


def _as_bytes(message: bytes | str) -> bytes:
    if isinstance(message, str):
        return message.encode("utf-8")
    return message


def mgf1(mgfseed: bytes, masklen: int, hashf: str = "sha256") -> bytes:
    """The PKCS#1 v2.2 Mask Generation Function 1.

    Stretches the seed by hashing it with a 4-byte big-endian counter appended, concatenating the results and
    cutting them to size. Deterministic; a shorter mask is always a prefix of a longer one.

    Args:
        mgfseed: Seed for mask generation
        masklen: Intended length of mask
        hashf: Hash function, any of `hashes.SUPPORTED_HASHES`.

    Returns:
        The mask in form of bytes of length masklen.

    Raises:
        ValueError: If mask too long for the combination of values.
        UnsupportedAlgorithmError: If the hash function is not supported.
    """
    hashf = hashes.get_hash(hashf)
    fun, _, hlen = hashes.HASH_TLL[hashf]
    if masklen > 2**32 * hlen:
        raise ValueError("Mask too long for the specified hash function")
    t = b""
    for cnt in range(ceil(masklen / hlen)):
        t += fun(mgfseed + i2osp(cnt, 4)).digest()
    return t[:masklen]


def _emsa_pkcs1_v15(message: bytes | str, em_len: int, hashf: str, prefix: bytes) -> bytes:
    t = prefix + hashes.digest(_as_bytes(message), hashf)
    if em_len < len(t) + 11:
        raise LengthError("Intended encoded message length too short")
    ps = b"\xff" * (em_len - len(t) - 3)
    return b"\x00\x01" + ps + b"\x00" + t


def emsa_pkcs1_v15_encode(message: bytes | str, em_len: int, hashf: str = "sha256") -> bytes:
    """EMSA-PKCS1-v1_5-ENCODE (RFC 8017 Section 9.2).

    Builds `0x00 || 0x01 || PS || 0x00 || T` where T is the DigestInfo of the message hash, with the
    algorithm parameters present as NULL.

    Args:
        message: The message to encode. Text is UTF-8 encoded first.
        em_len: Intended length of the encoded message, normally the modulus length minus one.
        hashf: Hash function, any of `hashes.SUPPORTED_HASHES`.

    Returns:
        The encoded message, exactly `em_len` bytes long.

    Raises:
        LengthError: If `em_len` cannot hold T plus at least 8 bytes of padding.
        UnsupportedAlgorithmError: If the hash function is not supported.
    """
    hashf = hashes.get_hash(hashf)
    return _emsa_pkcs1_v15(message, em_len, hashf, DIGEST_INFO_PREFIXES[hashf])


def emsa_pkcs1_v15_encode_without_null(message: bytes | str, em_len: int, hashf: str = "sha256") -> bytes:
    """EMSA-PKCS1-v1_5-ENCODE with the DigestInfo parameters omitted.

    RFC 8017 notes that the parameters of the SHA family "should generally be omitted, but if present, it shall
    have a value of type NULL". Verifiers that accept both forms try this encoding as the second candidate.

    Args:
        message: The message to encode. Text is UTF-8 encoded first.
        em_len: Intended length of the encoded message.
        hashf: Hash function, one of the SHA family.

    Returns:
        The encoded message, exactly `em_len` bytes long.

    Raises:
        LengthError: If `em_len` cannot hold T plus at least 8 bytes of padding.
        UnsupportedAlgorithmError: For md2 and md5, which require NULLs, or unknown hash functions.
    """
    hashf = hashes.get_hash(hashf)
    if hashf not in DIGEST_INFO_PREFIXES_NO_NULL:
        raise UnsupportedAlgorithmError("md2 and md5 require NULLs")
    return _emsa_pkcs1_v15(message, em_len, hashf, DIGEST_INFO_PREFIXES_NO_NULL[hashf])
