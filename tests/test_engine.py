# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pytest

from rsacore import config
from rsacore import engine
from rsacore.rsa import RSAPrivKey


@pytest.mark.parametrize("num_primes,bits,pub_exp,expected", [
    (2, 2048, 65537, True),
    (2, 1024, 65537, True),
    (2, 1023, 65537, False),
    (2, 384, 65537, False),
    (3, 3072, 65537, False),
    (2, 2048, 3, False),
    (2, 2048, 65539, False),
])
def test_prefer_native_backend(num_primes, bits, pub_exp, expected):
    assert engine.prefer_native_backend(num_primes, bits, pub_exp, engine.NATIVE_BACKEND) is expected


def test_prefer_native_backend_disabled():
    assert not engine.prefer_native_backend(2, 2048, 65537)
    assert not engine.prefer_native_backend(2, 2048, 65537, None)


def test_prefer_native_backend_respects_openssl_floor(mocker):
    mocker.patch.object(engine.NATIVE_BACKEND, "min_bits", 256)
    assert not engine.prefer_native_backend(2, 383, 65537, engine.NATIVE_BACKEND)
    assert engine.prefer_native_backend(2, 384, 65537, engine.NATIVE_BACKEND)


def test_prefer_native_backend_not_installed(mocker):
    mocker.patch("rsacore.engine.importlib.util.find_spec", return_value=None)
    assert not engine.NATIVE_BACKEND.installed()
    assert not engine.prefer_native_backend(2, 2048, 65537, engine.NATIVE_BACKEND)
    assert engine.get_engine() == "Python"


def test_get_engine():
    assert engine.get_engine() == "OpenSSL"
    assert engine.get_engine(65537, native=False) == "Python"
    assert engine.get_engine(3) == "Python"


def test_get_engine_follows_process_config():
    config.set_exponent(3)
    assert engine.get_engine() == "Python"
    assert engine.get_engine(65537) == "OpenSSL"
    config.set_exponent(65537)
    config.use_native_backend(False)
    assert engine.get_engine() == "Python"
    assert engine.get_engine(native=True) == "OpenSSL"
    config.set_exponent(3)
    assert engine.get_engine() == "Python"


@pytest.mark.parametrize("bits", [1024, 2048])
def test_native_backend_output(bits):
    der = engine.NATIVE_BACKEND.generate(bits, 65537)
    pk = RSAPrivKey.from_pkcs8_der(der)
    assert pk.get_length() == bits
    assert pk.pub_exp == 65537
    assert pk.primes[1] * pk.primes[2] == pk.mod
    assert len(pk.coefficients) == 1
