"""RSA key material and the per-key configuration that rides along with it.

Keys are created once, by the key generator or from already-parsed numeric components, and are never mutated
afterward. Changing the hash or padding configuration hands back a new key object sharing the same numbers, so a
reference to the previous object keeps its previous configuration.

Typical usage example:

    pk = RSAPrivKey.from_components(n, e, d, [p, q])
    pss = pk.with_hash("sha384").with_salt_length(0)
    pub = pk.pub
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from collections import abc
import copy
import math
import types
import typing

from pyasn1.codec.der import decoder
from pyasn1_modules import rfc5208
from pyasn1_modules import rfc8017

from rsacore.params import KeyParams

IndexedInts = typing.Mapping[int, int] | typing.Sequence[int]


def _indexed(values: IndexedInts, start: int) -> types.MappingProxyType:
    """Freeze `values` into a read-only mapping whose first entry is keyed `start`."""
    if isinstance(values, abc.Mapping):
        return types.MappingProxyType({int(i): int(v) for i, v in values.items()})
    return types.MappingProxyType({i: int(v) for i, v in enumerate(values, start)})


def crt_coefficients(primes: typing.Sequence[int]) -> dict[int, int]:
    """Computes the CRT coefficients for an ordered list of primes.

    The first coefficient is the odd one out: it is `q^-1 mod p` (RFC 3447 Appendix A.1.2), whereas every later
    coefficient `i` is the inverse of the product of all preceding primes modulo prime `i`.

    Args:
        primes: The prime factors, in key order.

    Returns:
        Coefficients keyed from 2 up to `len(primes)`.
    """
    coefficients = {2: pow(primes[1], -1, primes[0])}
    running = primes[0] * primes[1]
    for i, prime in enumerate(primes[2:], 3):
        coefficients[i] = pow(running, -1, prime)
        running *= prime
    return coefficients


class RSAKey:
    """The overall RSA key class implementation.

    Holds what every key has, the modulus and the active exponent, plus the hash and padding configuration the
    encryption and signature schemes consult.

    Attributes:
        mod: The modulus of the keypair.
        expo: The active exponent of the key, whether private or public.
        k: Length of the modulus in bytes.
        params: The hash and padding configuration.
    """

    def __init__(self, mod: int | None, expo: int | None, params: KeyParams | None = None) -> None:
        self.mod = mod
        self.expo = expo
        self.k = (self.mod.bit_length() + 7) // 8 if self.mod else 0
        self.params = params if params is not None else KeyParams()

    def get_length(self) -> int:
        """Size of the modulus in bits, 0 if there is none."""
        return self.mod.bit_length() if self.mod else 0

    def _with_params(self, params: KeyParams) -> typing.Self:
        new = copy.copy(self)
        new.params = params
        return new

    def with_hash(self, hashf: str) -> typing.Self:
        """Returns a copy of the key using `hashf` for signatures and OAEP."""
        return self._with_params(self.params.with_hash(hashf))

    def with_mgf_hash(self, hashf: str) -> typing.Self:
        """Returns a copy of the key using `hashf` inside MGF1."""
        return self._with_params(self.params.with_mgf_hash(hashf))

    def with_salt_length(self, salt_length: int | None) -> typing.Self:
        return self._with_params(self.params.with_salt_length(salt_length))

    def with_label(self, label: bytes | str) -> typing.Self:
        return self._with_params(self.params.with_label(label))

    def with_padding(self, padding: int) -> typing.Self:
        """Returns a copy of the key with new padding modes, see `KeyParams.with_padding`."""
        return self._with_params(self.params.with_padding(padding))

    def get_hash(self) -> str:
        return self.params.hash

    def get_mgf_hash(self) -> str:
        return self.params.get_mgf_hash()

    def get_salt_length(self) -> int:
        return self.params.get_salt_length()

    def get_label(self) -> bytes:
        return self.params.get_label()

    def get_padding(self) -> int:
        return self.params.get_padding()


class RSAPubKey(RSAKey):
    """A rather straightforward subclass of RSAKey, for Public Keys.

    A Public Key consists solely of a modulus and exponent, the active exponent is the public one.
    """

    @property
    def pub_exp(self) -> int:
        return self.expo


class RSAPrivKey(RSAKey):
    """RSA Private Key class implementation.

    Adds the public exponent and, when known, the prime factors with their CRT parameters. Primes and exponents
    are indexed from 1, coefficients from 2, following the numbering of PKCS#1.

    Attributes:
        mod: The modulus of the keypair.
        expo: The private exponent of the key.
        pub_exp: The public exponent of the key.
        primes: The prime factors, keyed 1..u.
        exponents: CRT exponents `d mod (r_i - 1)`, keyed 1..u.
        coefficients: CRT coefficients, keyed 2..u.
    """

    def __init__(self,
                 mod: int,
                 pub_exp: int,
                 priv_exp: int,
                 primes: IndexedInts | None = None,
                 exponents: IndexedInts | None = None,
                 coefficients: IndexedInts | None = None,
                 params: KeyParams | None = None) -> None:
        """Initialize the RSA Private Key.

        Args:
            mod: The modulus of the keypair.
            pub_exp: The public exponent of the key.
            priv_exp: The private exponent of the key.
            primes: The prime factors, in key order.
            exponents: The CRT exponents, one per prime.
            coefficients: The CRT coefficients, one fewer than primes, starting at index 2.
            params: Hash and padding configuration. Defaults to `KeyParams()`.

        Raises:
            ValueError: If the CRT parameters do not line up with the primes.
        """
        super().__init__(mod, priv_exp, params)
        self.pub_exp = pub_exp
        self.primes = _indexed(primes or (), 1)
        self.exponents = _indexed(exponents or (), 1)
        self.coefficients = _indexed(coefficients or (), 2)
        if self.primes:
            if len(self.primes) < 2:
                raise ValueError("A private key needs at least two primes.")
            if len(self.exponents) != len(self.primes):
                raise ValueError("Every prime needs exactly one CRT exponent.")
            if len(self.coefficients) != len(self.primes) - 1:
                raise ValueError("A key with u primes needs exactly u - 1 CRT coefficients.")

    @property
    def priv_exp(self) -> int:
        return self.expo

    @property
    def pub(self) -> RSAPubKey:
        """The matching public key, carrying the same configuration."""
        return RSAPubKey(self.mod, self.pub_exp, self.params)

    @classmethod
    def from_components(cls,
                        mod: int,
                        pub_exp: int,
                        priv_exp: int,
                        primes: typing.Sequence[int] | None = None,
                        exponents: typing.Sequence[int] | None = None,
                        coefficients: typing.Sequence[int] | None = None) -> "RSAPrivKey":
        """Builds a private key from parsed numbers, deriving whichever CRT values are missing.

        Args:
            mod: The modulus of the keypair.
            pub_exp: The public exponent of the key.
            priv_exp: The private exponent of the key.
            primes: The prime factors, in key order. Optional.
            exponents: The CRT exponents. Derived as `d mod (r_i - 1)` if omitted.
            coefficients: The CRT coefficients, starting with `q^-1 mod p`. Derived if omitted.

        Returns:
            The private key.

        Raises:
            ValueError: If the primes do not multiply up to the modulus.
        """
        if not primes:
            return cls(mod, pub_exp, priv_exp)
        if math.prod(primes) != mod:
            raise ValueError("The primes do not multiply up to the modulus.")
        if exponents is None:
            exponents = [priv_exp % (prime - 1) for prime in primes]
        if coefficients is None:
            return cls(mod, pub_exp, priv_exp, primes, exponents, crt_coefficients(primes))
        return cls(mod, pub_exp, priv_exp, primes, exponents, coefficients)

    @classmethod
    def from_pkcs1_der(cls, payload: bytes) -> "RSAPrivKey":
        """Reads a DER encoded PKCS#1 RSAPrivateKey, including multi-prime keys.

        Args:
            payload: The DER bytes.

        Returns:
            The private key.

        Raises:
            IOError: If the version does not match the presence of other prime infos.
        """
        keydata, _ = decoder.decode(payload, asn1Spec=rfc8017.RSAPrivateKey())
        others = keydata["otherPrimeInfos"]
        multi = others.isValue and len(others) > 0
        if int(keydata["version"]) != int(multi):
            raise IOError("Private key version does not match its prime count.")
        primes = [int(keydata["prime1"]), int(keydata["prime2"])]
        exponents = [int(keydata["exponent1"]), int(keydata["exponent2"])]
        coefficients = [int(keydata["coefficient"])]
        if multi:
            for idx in range(len(others)):
                info = others[idx]
                primes.append(int(info["prime"]))
                exponents.append(int(info["exponent"]))
                coefficients.append(int(info["coefficient"]))
        return cls(int(keydata["modulus"]), int(keydata["publicExponent"]), int(keydata["privateExponent"]), primes,
                   exponents, coefficients)

    @classmethod
    def from_pkcs8_der(cls, payload: bytes) -> "RSAPrivKey":
        """Reads a DER encoded PKCS#8 PrivateKeyInfo wrapping an RSA key.

        This is the interchange format produced by the native key generation backend.

        Args:
            payload: The DER bytes.

        Returns:
            The private key.

        Raises:
            IOError: If the wrapper version or the key algorithm is unsupported.
        """
        decdata, _ = decoder.decode(payload, asn1Spec=rfc5208.PrivateKeyInfo())
        if decdata["version"] != 0:
            raise IOError("Unsupported version of private key information wrapper")
        if decdata["privateKeyAlgorithm"]["algorithm"] != rfc8017.rsaEncryption:
            raise IOError("Private Key Algorithm not supported.")
        return cls.from_pkcs1_der(bytes(decdata["privateKey"]))
