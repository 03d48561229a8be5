"""Process-wide key generation policy.

The defaults live in a single immutable `KeyGenConfig` that the setters replace wholesale. Readers take one
snapshot with `get_config` and keep using it, so a concurrent setter never mixes two policies.

Typical usage example:

    set_smallest_prime(1024)
    use_native_backend(False)
    cfg = get_config()
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import threading
import typing


class KeyGenConfig(typing.NamedTuple):
    """Process-wide key generation policy.

    Attributes:
        exponent: Default public exponent.
        smallest_prime: Prime size in bits above which keys are split into more than two primes.
        native_backend: Whether the native backend may be used at all.
        blinding: Whether private key operations should blind their input.
    """
    exponent: int = 65537
    smallest_prime: int = 4096
    native_backend: bool = True
    blinding: bool = True


_CONFIG = KeyGenConfig()
_CONFIG_LOCK = threading.Lock()


def get_config() -> KeyGenConfig:
    """The current process-wide policy. The returned snapshot never changes."""
    return _CONFIG


def _update_config(**changes) -> KeyGenConfig:
    global _CONFIG
    with _CONFIG_LOCK:
        _CONFIG = _CONFIG._replace(**changes)
        return _CONFIG


def set_exponent(val: int) -> None:
    """Sets the default public exponent for key generation. This will be 65537 unless changed."""
    _update_config(exponent=val)


def set_smallest_prime(val: int) -> None:
    """Sets the smallest prime size in bits. This will be 4096 unless changed.

    Per the "Mining your Ps and Qs" survey this ought not result in primes smaller than 256 bits. A 1024-bit key
    with a smallest prime of 384 bits gets two primes, one of 384 bits and one of 640 bits.
    """
    _update_config(smallest_prime=val)


def use_native_backend(enabled: bool = True) -> None:
    """Allows or forbids delegating key generation to the native backend."""
    _update_config(native_backend=enabled)


def enable_blinding() -> None:
    _update_config(blinding=True)


def disable_blinding() -> None:
    _update_config(blinding=False)


def blinding_enabled() -> bool:
    return _CONFIG.blinding
