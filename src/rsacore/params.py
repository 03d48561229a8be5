"""Per-key hash and padding configuration.

A `KeyParams` is a plain value: every `with_*` call hands back a new instance and leaves the receiver alone, so
anyone still holding the previous configuration keeps seeing exactly what they had.

Typical usage example:

    params = KeyParams().with_hash("sha512").with_padding(ENCRYPTION_PKCS1 | SIGNATURE_PKCS1)
    params.get_salt_length()
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import enum
import typing

from rsacore import hashes
from rsacore.errors import ConfigurationError


class EncryptionPadding(enum.IntFlag):
    OAEP = 1
    PKCS1 = 2
    NONE = 4


class SignaturePadding(enum.IntFlag):
    PSS = 16
    RELAXED_PKCS1 = 32
    PKCS1 = 64


ENCRYPTION_OAEP = int(EncryptionPadding.OAEP)
ENCRYPTION_PKCS1 = int(EncryptionPadding.PKCS1)
ENCRYPTION_NONE = int(EncryptionPadding.NONE)
SIGNATURE_PSS = int(SignaturePadding.PSS)
SIGNATURE_RELAXED_PKCS1 = int(SignaturePadding.RELAXED_PKCS1)
SIGNATURE_PKCS1 = int(SignaturePadding.PKCS1)
KNOWN_PADDING = sum(mode.value for family in (EncryptionPadding, SignaturePadding) for mode in family)


def _select_one(padding: int, family: type[enum.IntFlag], kind: str) -> int:
    """Pick the single mode of `family` present in `padding`, 0 if none."""
    selected = [mode.value for mode in family if padding & mode.value]
    if len(selected) > 1:
        raise ConfigurationError(
            f"Multiple {kind} padding modes have been selected; at most only one should be selected")
    return selected[0] if selected else 0


class KeyParams(typing.NamedTuple):
    """Hash, mask generation and padding choices attached to a key.

    Attributes:
        hash: Digest used for signatures and the OAEP label hash.
        hash_len: Cached output length of `hash`.
        mgf_hash: Digest used inside MGF1, independent of `hash`.
        mgf_hash_len: Cached output length of `mgf_hash`.
        salt_length: Explicit PSS salt length, None to follow `hash_len`.
        label: OAEP label.
        encryption_padding: One of the ENCRYPTION_* bits, or 0.
        signature_padding: One of the SIGNATURE_* bits, or 0.
    """
    hash: str = "sha256"
    hash_len: int = 32
    mgf_hash: str = "sha256"
    mgf_hash_len: int = 32
    salt_length: int | None = None
    label: bytes = b""
    encryption_padding: int = ENCRYPTION_OAEP
    signature_padding: int = SIGNATURE_PSS

    def with_hash(self, hashf: str) -> "KeyParams":
        """Select the hash used for signatures and, under OAEP, the label hash.

        Raises:
            UnsupportedAlgorithmError: If PKCS#1 does not define the hash.
        """
        hashf = hashes.get_hash(hashf)
        return self._replace(hash=hashf, hash_len=hashes.digest_length(hashf))

    def with_mgf_hash(self, hashf: str) -> "KeyParams":
        """Select the hash used by the mask generation function.

        OAEP and PSS work best with the same hash for both purposes, but that is not a requirement.

        Raises:
            UnsupportedAlgorithmError: If PKCS#1 does not define the hash.
        """
        hashf = hashes.get_hash(hashf)
        return self._replace(mgf_hash=hashf, mgf_hash_len=hashes.digest_length(hashf))

    def with_salt_length(self, salt_length: int | None) -> "KeyParams":
        """Set the PSS salt length. Typical values are the hash length and 0; None restores the default."""
        if salt_length is not None and salt_length < 0:
            raise ValueError("Salt length must be non-negative.")
        return self._replace(salt_length=salt_length)

    def with_label(self, label: bytes | str) -> "KeyParams":
        if isinstance(label, str):
            label = label.encode("utf-8")
        return self._replace(label=bytes(label))

    def with_padding(self, padding: int) -> "KeyParams":
        """Set both padding modes from one bit set, e.g. `ENCRYPTION_PKCS1 | SIGNATURE_PKCS1`.

        A category without any bit set is cleared.

        Raises:
            ConfigurationError: If two encryption or two signature modes are selected at once, or `padding` carries
                a bit that is no padding mode.
        """
        if padding & ~KNOWN_PADDING:
            raise ConfigurationError(f"Unknown padding bits: {padding & ~KNOWN_PADDING:#x}")
        encryption = _select_one(padding, EncryptionPadding, "encryption")
        signature = _select_one(padding, SignaturePadding, "signature")
        return self._replace(encryption_padding=encryption, signature_padding=signature)

    def get_salt_length(self) -> int:
        return self.salt_length if self.salt_length is not None else self.hash_len

    def get_label(self) -> bytes:
        return self.label

    def get_mgf_hash(self) -> str:
        return self.mgf_hash

    def get_padding(self) -> int:
        return self.signature_padding | self.encryption_padding
