# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import json
import math

import pytest

import rsacore
from rsacore import __main__ as cli


def test_emsa(capsys):
    cli.main(["-n", "emsa", "--message", "Hi there!", "--em-len", "64", "--sha", "sha256"])
    out = capsys.readouterr().out.strip()
    assert bytes.fromhex(out) == rsacore.emsa_pkcs1_v15_encode("Hi there!", 64, "sha256")


def test_emsa_without_null(capsys):
    cli.main(["-n", "emsa", "--message", "Hi there!", "--em-len", "64", "--no-null"])
    out = capsys.readouterr().out.strip()
    assert bytes.fromhex(out) == rsacore.emsa_pkcs1_v15_encode_without_null("Hi there!", 64, "sha256")


def test_mgf1(capsys):
    cli.main(["-n", "mgf1", "--seed", "00ff13", "--mask-len", "48", "--sha", "sha384"])
    out = capsys.readouterr().out.strip()
    assert bytes.fromhex(out) == rsacore.mgf1(b"\x00\xff\x13", 48, "sha384")


def test_keygen(capsys):
    cli.main(["-n", "keygen", "--bits", "1024", "--no-native"])
    data = json.loads(capsys.readouterr().out)
    assert data["bits"] == 1024
    assert math.prod(data["primes"].values()) == data["modulus"]
    assert set(data["coefficients"]) == {"2"}
    assert data["publicExponent"] == 65537


def test_non_interactive_missing():
    with pytest.raises(IOError, match="non-interactive mode is active"):
        cli.main(["-n", "emsa", "--em-len", "64"])


def test_interactive_prompts(mocker, capsys):
    mocker.patch("builtins.input", side_effect=["", "Hi there!", "x", "64"])
    cli.main(["emsa"])
    out = capsys.readouterr().out
    assert "Please provide a value." in out
    assert "We could not convert your value to int." in out
    assert rsacore.emsa_pkcs1_v15_encode("Hi there!", 64, "sha256").hex() in out
