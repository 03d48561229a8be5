# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import hashlib

from cryptography.hazmat.primitives import hashes as cr_hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.hazmat.primitives.asymmetric import rsa
from pyasn1.codec.der import encoder
from pyasn1.type import univ
from pyasn1_modules import rfc8017
import pytest

from rsacore import hashes
from rsacore import primitives as prims
from rsacore.errors import LengthError
from rsacore.errors import RangeError
from rsacore.errors import UnsupportedAlgorithmError

standard_payload = "The quick brown fox jumps over the lazy dog1234567890!@#$%^&*()-_=+[{}];:\\|<>,./?~`'\""

CRYPTOGRAPHY_HASHES = {
    "sha224": cr_hashes.SHA224,
    "sha256": cr_hashes.SHA256,
    "sha384": cr_hashes.SHA384,
    "sha512": cr_hashes.SHA512,
    "sha512/224": cr_hashes.SHA512_224,
    "sha512/256": cr_hashes.SHA512_256,
}


@pytest.fixture(scope="module")
def template_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="module", params=hashes.SUPPORTED_HASHES)
def hashf(request) -> str:
    return request.param


def digest_info(hashf: str, null: bool) -> bytes:
    """DER DigestInfo for an all-zero digest, built with pyasn1."""
    payload = rfc8017.DigestInfo()
    payload["digestAlgorithm"]["algorithm"] = hashes.HASH_TLL[hashf][1]
    if null:
        payload["digestAlgorithm"]["parameters"] = univ.Null("")
    payload["digest"] = b"\x00" * hashes.digest_length(hashf)
    return encoder.encode(payload)


@pytest.mark.parametrize("x,xlen", [(0, 0), (0, 4), (1, 1), (255, 1), (256, 2), (2**2048 - 1, 256), (65537, 32)])
def test_i2osp_os2ip_round(x, xlen):
    encoded = prims.i2osp(x, xlen)
    assert len(encoded) == xlen
    assert prims.os2ip(encoded) == x


def test_i2osp_pads_left():
    assert prims.i2osp(1, 4) == b"\x00\x00\x00\x01"
    assert prims.i2osp(0x0102, 3) == b"\x00\x01\x02"


@pytest.mark.parametrize("x,xlen", [(256, 1), (1, 0), (2**64, 8), (-1, 4)])
def test_i2osp_validates(x, xlen):
    with pytest.raises(RangeError, match="Resultant string length out of range"):
        prims.i2osp(x, xlen)


def test_os2ip_total():
    assert prims.os2ip(b"") == 0
    assert prims.os2ip(b"\x00\x00\x01\x00") == 256
    assert prims.os2ip(b"\xff" * 4) == 2**32 - 1


def test_mgf1_matches_definition():
    seed = b"seedling"
    expected = hashlib.sha256(seed + b"\x00\x00\x00\x00").digest() + hashlib.sha256(seed + b"\x00\x00\x00\x01").digest()
    assert prims.mgf1(seed, 40, "sha256") == expected[:40]


@pytest.mark.parametrize("masklen", [0, 1, 31, 32, 33, 100, 1000])
def test_mgf1_length_determinism(hashf, masklen):
    seed = b"\x13\x37" * 10
    mask = prims.mgf1(seed, masklen, hashf)
    assert len(mask) == masklen
    assert prims.mgf1(seed, masklen, hashf) == mask


@pytest.mark.parametrize("extra", [0, 1, 7, 64, 129])
def test_mgf1_prefix(hashf, extra):
    seed = b"prefix"
    assert prims.mgf1(seed, 50 + extra, hashf).startswith(prims.mgf1(seed, 50, hashf))


def test_mgf1_validates(hashf):
    hlen = hashes.digest_length(hashf)
    with pytest.raises(ValueError, match="Mask too long for the specified hash function"):
        prims.mgf1(b"\x00" * hlen, 2**32 * hlen + 1, hashf)


def test_mgf1_unsupported():
    with pytest.raises(UnsupportedAlgorithmError):
        prims.mgf1(b"seed", 10, "sha3_256")


def test_digest_info_tables(hashf):
    hlen = hashes.digest_length(hashf)
    assert prims.DIGEST_INFO_PREFIXES[hashf] + b"\x00" * hlen == digest_info(hashf, True)
    if hashf in ("md2", "md5"):
        assert hashf not in prims.DIGEST_INFO_PREFIXES_NO_NULL
    else:
        assert prims.DIGEST_INFO_PREFIXES_NO_NULL[hashf] + b"\x00" * hlen == digest_info(hashf, False)


def test_emsa_structure_sha256():
    message = standard_payload.encode("utf-8")
    em = prims.emsa_pkcs1_v15_encode(message, 256, "sha256")
    t = prims.DIGEST_INFO_PREFIXES["sha256"] + hashlib.sha256(message).digest()
    assert len(em) == 256
    assert em[:2] == b"\x00\x01"
    assert em[2:256 - len(t) - 1] == b"\xff" * (256 - len(t) - 3)
    assert em[256 - len(t) - 1] == 0
    assert em[-len(t):] == t
    assert len(prims.DIGEST_INFO_PREFIXES["sha256"]) == 19


def test_emsa_accepts_text():
    assert prims.emsa_pkcs1_v15_encode(standard_payload, 128) == prims.emsa_pkcs1_v15_encode(
        standard_payload.encode("utf-8"), 128)


@pytest.mark.parametrize("null", [True, False])
def test_emsa_length_boundary(hashf, null):
    if not null and hashf in ("md2", "md5"):
        pytest.skip("No NULL-less form.")
    table = prims.DIGEST_INFO_PREFIXES if null else prims.DIGEST_INFO_PREFIXES_NO_NULL
    encode = prims.emsa_pkcs1_v15_encode if null else prims.emsa_pkcs1_v15_encode_without_null
    t_len = len(table[hashf]) + hashes.digest_length(hashf)
    em = encode(b"ABBA", t_len + 11, hashf)
    assert len(em) == t_len + 11
    assert em[2:10] == b"\xff" * 8
    with pytest.raises(LengthError, match="Intended encoded message length too short"):
        encode(b"ABBA", t_len + 10, hashf)


def test_emsa_too_short():
    with pytest.raises(LengthError):
        prims.emsa_pkcs1_v15_encode(b"ABBA", 30, "sha256")


def test_emsa_without_null_differs():
    em = prims.emsa_pkcs1_v15_encode(b"ABBA", 128, "sha384")
    em_nn = prims.emsa_pkcs1_v15_encode_without_null(b"ABBA", 128, "sha384")
    assert len(em_nn) == len(em) == 128
    assert em[-48:] == em_nn[-48:]
    assert em != em_nn


@pytest.mark.parametrize("hashf", ["md2", "md5", "MD5"])
def test_emsa_without_null_rejects_md(hashf):
    with pytest.raises(UnsupportedAlgorithmError, match="md2 and md5 require NULLs"):
        prims.emsa_pkcs1_v15_encode_without_null(b"ABBA", 256, hashf)


@pytest.mark.parametrize("encode", [prims.emsa_pkcs1_v15_encode, prims.emsa_pkcs1_v15_encode_without_null])
def test_emsa_rejects_unknown_hash(encode):
    with pytest.raises(UnsupportedAlgorithmError):
        encode(b"ABBA", 256, "whirlpool")


@pytest.mark.parametrize("hashf", CRYPTOGRAPHY_HASHES.keys())
def test_emsa_signature_verifies(template_key, hashf):
    privs = template_key.private_numbers()
    k = (privs.public_numbers.n.bit_length() + 7) // 8
    em = prims.emsa_pkcs1_v15_encode(standard_payload, k, hashf)
    signature = prims.i2osp(pow(prims.os2ip(em), privs.d, privs.public_numbers.n), k)
    template_key.public_key().verify(signature, standard_payload.encode("utf-8"), padding.PKCS1v15(),
                                     CRYPTOGRAPHY_HASHES[hashf]())


@pytest.mark.parametrize("hashf", CRYPTOGRAPHY_HASHES.keys())
def test_emsa_matches_cryptography_signature(template_key, hashf):
    pubs = template_key.public_key().public_numbers()
    k = (pubs.n.bit_length() + 7) // 8
    signature = template_key.sign(standard_payload.encode("utf-8"), padding.PKCS1v15(), CRYPTOGRAPHY_HASHES[hashf]())
    recovered = prims.i2osp(pow(prims.os2ip(signature), pubs.e, pubs.n), k)
    assert recovered == prims.emsa_pkcs1_v15_encode(standard_payload, k, hashf)
