"""PKCS#1 v2.2 RSA core primitives.

Provides multi-prime RSA key generation with full CRT parameters, the I2OSP/OS2IP conversions, MGF1, the
EMSA-PKCS1-v1_5 encoders (with and without the DigestInfo NULL) and the immutable hash/padding configuration that
encryption and signature schemes consult.

Typical usage example:

    pk = generate(2048)
    em = emsa_pkcs1_v15_encode("Hi there!", pk.k, "sha256")
    s = i2osp(pow(os2ip(em), pk.expo, pk.mod), pk.k)
    pss = pk.with_padding(SIGNATURE_PSS).with_salt_length(0)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from rsacore.config import blinding_enabled
from rsacore.config import disable_blinding
from rsacore.config import enable_blinding
from rsacore.config import get_config
from rsacore.config import KeyGenConfig
from rsacore.config import set_exponent
from rsacore.config import set_smallest_prime
from rsacore.config import use_native_backend
from rsacore.engine import get_engine
from rsacore.engine import prefer_native_backend
from rsacore.errors import ConfigurationError
from rsacore.errors import KeyGenerationCancelled
from rsacore.errors import LengthError
from rsacore.errors import RangeError
from rsacore.errors import RSAError
from rsacore.errors import UnsupportedAlgorithmError
from rsacore.hashes import SUPPORTED_HASHES
from rsacore.keygen import check_prime
from rsacore.keygen import generate
from rsacore.params import ENCRYPTION_NONE
from rsacore.params import ENCRYPTION_OAEP
from rsacore.params import ENCRYPTION_PKCS1
from rsacore.params import KeyParams
from rsacore.params import SIGNATURE_PKCS1
from rsacore.params import SIGNATURE_PSS
from rsacore.params import SIGNATURE_RELAXED_PKCS1
from rsacore.primitives import emsa_pkcs1_v15_encode
from rsacore.primitives import emsa_pkcs1_v15_encode_without_null
from rsacore.primitives import i2osp
from rsacore.primitives import mgf1
from rsacore.primitives import os2ip
from rsacore.rsa import RSAPrivKey
from rsacore.rsa import RSAPubKey

__version__ = "0.1.0"
__all__ = [
    "RSAPrivKey",
    "RSAPubKey",
    "KeyParams",
    "KeyGenConfig",
    "generate",
    "get_config",
    "set_exponent",
    "set_smallest_prime",
    "use_native_backend",
    "enable_blinding",
    "disable_blinding",
    "blinding_enabled",
    "get_engine",
    "prefer_native_backend",
    "check_prime",
    "i2osp",
    "os2ip",
    "mgf1",
    "emsa_pkcs1_v15_encode",
    "emsa_pkcs1_v15_encode_without_null",
    "SUPPORTED_HASHES",
    "ENCRYPTION_OAEP",
    "ENCRYPTION_PKCS1",
    "ENCRYPTION_NONE",
    "SIGNATURE_PSS",
    "SIGNATURE_RELAXED_PKCS1",
    "SIGNATURE_PKCS1",
    "RSAError",
    "RangeError",
    "LengthError",
    "UnsupportedAlgorithmError",
    "ConfigurationError",
    "KeyGenerationCancelled",
]
