"""Core Key Generation Utility, from random large primes up to complete multi-prime private keys.

Primes are probable primes: trial division by a cached table of small primes, then a FIPS 186-5 based Miller-Rabin
test. Keys follow PKCS#1: two or more primes, the public exponent coprime to the Carmichael function of the modulus,
and a full set of CRT parameters. Two-prime keys with the exponent 65537 may be handed to the native backend.

Process-wide defaults (exponent, smallest prime size, native backend use, blinding) come from `rsacore.config` and
are read once at the start of every generation.

Typical usage example:

    pk = generate(2048)
    pk3 = generate(3072, smallest_prime=1024)
    p = random_prime(512)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import secrets
import threading

from rsacore import engine
from rsacore.config import get_config
from rsacore.config import KeyGenConfig
from rsacore.errors import ConfigurationError
from rsacore.errors import KeyGenerationCancelled
from rsacore.rsa import RSAPrivKey

logger = logging.getLogger(__name__)

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
MINIMUM_BITS: int = 16
MINIMUM_PRIME_BITS: int = 8
EXACT_COUNT_BITS: int = 16


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes over odd numbers only, sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(math.isqrt(n) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    return [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    Uses the `_SMALL_PRIMES` module cache when it already covers `n`, otherwise sieves again.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order, at least up to `n` unless `change` is True.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    global _SMALL_PRIMES
    global _SMALL_PRIMES_CAP
    if n > _SMALL_PRIMES_CAP or change or not _SMALL_PRIMES:
        _SMALL_PRIMES = _sieve(n)
        _SMALL_PRIMES_CAP = n
    return _SMALL_PRIMES


def _trial_division(no: int, n: int = 10000) -> bool:
    """Check the provided `no` against the known small primes.

    Args:
         no: The number to check. Must be integer and non-negative.
         n: The number up to which to generate primes. Defaults to 10000.

    Returns:
        False if `no` cannot be prime, True otherwise.
    """
    if no < 2:
        return False
    for prime in get_pre_primes(n):
        if prime**2 > no:
            return True
        if no % prime == 0:
            return False
    return True


def _miller_rabin(w: int, iters: int) -> bool:
    """Perform Miller-Rabin primality test as specified in FIPS 186-5.

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w in (2, 3)
    if w % 2 == 0:
        return False
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for _ in range(iters):
        b = secrets.randbelow(w - 3) + 2
        z = pow(b, m, w)
        if z in (1, w - 1):
            continue
        for _ in range(1, a):
            z = pow(z, 2, w)
            if z == w - 1:
                break
            if z == 1:
                return False
        else:
            return False
    return True


def check_prime(candidate: int, iters: None | int = None, n: int = 10000) -> bool:
    """Performs a composite Primality test: trial division, then Miller-Rabin.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform.
            If not provided will use defaults as per the FIPS 186-5 Appendix C.1
        n: The number up to which small primes are used for trial division. Defaults to 10000.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    if iters is None:
        if candidate.bit_length() <= 512:
            iters = 40
        elif candidate.bit_length() <= 1024:
            iters = 56
        elif candidate.bit_length() <= 1536:
            iters = 64
        elif candidate.bit_length() <= 2048:
            iters = 70
        else:
            iters = 74
    return _miller_rabin(candidate, iters)


def random_range_prime(lo: int, hi: int) -> int:
    """Draw a uniformly random probable prime from `[lo, hi]`.

    Args:
        lo: Lower bound, inclusive.
        hi: Upper bound, inclusive.

    Returns:
        A probable prime within the bounds.

    Raises:
        ValueError: If the range is empty.
        RuntimeError: If generation loops way beyond a reasonable time and a bit.
    """
    if lo > hi:
        raise ValueError("Empty prime range.")
    if hi < 2:
        raise ValueError("Prime range holds no candidates.")
    lo = max(lo, 2)
    width = hi - lo + 1
    rep_cap = max(hi.bit_length(), MINIMUM_PRIME_BITS) * 10
    for _ in range(rep_cap):
        candidate = lo + secrets.randbelow(width)
        if candidate != 2:
            candidate |= 1
        if candidate <= hi and check_prime(candidate):
            return candidate
    raise RuntimeError(
        f"Run an improbable {rep_cap} amount of loops with no prime found. Check system random number generator.")


def random_prime(size: int) -> int:
    """Draw a uniformly random probable prime of exactly `size` bits."""
    if size < 2:
        raise ValueError("Primes have at least 2 bits.")
    return random_range_prime(1 << (size - 1), (1 << size) - 1)


def prime_policy(bits: int, smallest_prime: int) -> tuple[int, int]:
    """How many primes a key gets, and their size.

    Keys whose halves would exceed `smallest_prime` bits are split into `bits // smallest_prime` primes of
    `smallest_prime` bits, the last one absorbing the remainder. Otherwise the key gets two primes of half size.

    Returns:
        Tuple of (number of primes, size in bits of every prime but the last).
    """
    reg_size = bits >> 1
    if reg_size > smallest_prime:
        return bits // smallest_prime, smallest_prime
    return 2, reg_size


def _last_prime_range(bits: int, n: int) -> tuple[int, int]:
    """Bounds for the last prime that land `n * prime` in `[2^(bits-1), 2^bits)`."""
    return ((1 << (bits - 1)) // n) + 1, ((1 << bits) - 1) // n


def usable_prime_count(size: int, pub_exp: int) -> int:
    """How many primes of exactly `size` bits a key with exponent `pub_exp` may use.

    Exact up to `EXACT_COUNT_BITS`, sieved on the spot. Above that a lower bound from the prime number theorem,
    halved for primes `p` whose `p - 1` shares a factor with the exponent.
    """
    if size <= EXACT_COUNT_BITS:
        return sum(1 for p in _sieve((1 << size) - 1) if p >> (size - 1) and math.gcd(p - 1, pub_exp) == 1)
    return (1 << (size - 1)) // (2 * size)


def _validate(bits: int, pub_exp: int, smallest_prime: int) -> None:
    if bits < MINIMUM_BITS:
        raise ConfigurationError(f"Key size must be at least {MINIMUM_BITS} bits.")
    if smallest_prime < MINIMUM_PRIME_BITS:
        raise ConfigurationError(f"Smallest prime must be at least {MINIMUM_PRIME_BITS} bits.")
    if pub_exp < 3 or pub_exp % 2 == 0:
        raise ConfigurationError("Public exponent must be odd and at least 3.")
    num_primes, reg_size = prime_policy(bits, smallest_prime)
    # Distinct draws need room: with fewer than num_primes**2 candidates most attempts repeat a prime.
    if usable_prime_count(reg_size, pub_exp) < num_primes**2:
        raise ConfigurationError(
            f"Not enough {reg_size}-bit primes for a {num_primes}-prime key with exponent {pub_exp}; "
            "raise the smallest prime size.")


def _attempt(bits: int, pub_exp: int, num_primes: int, reg_size: int) -> tuple[list[int], dict[int, int], int] | None:
    """One pass of the generation loop.

    Returns:
        Tuple of (primes, coefficients from index 3 on, lambda), or None if the attempt has to be discarded.
    """
    n = 1
    lam = 1
    primes: list[int] = []
    coefficients: dict[int, int] = {}
    for i in range(1, num_primes + 1):
        if i != num_primes:
            prime = random_prime(reg_size)
        else:
            prime = random_range_prime(*_last_prime_range(bits, n))
        if prime in primes:
            return None
        # The coefficient of prime 2 is q^-1 mod p, computed after acceptance.
        if i > 2:
            coefficients[i] = pow(n, -1, prime)
        n *= prime
        primes.append(prime)
        lam = math.lcm(lam, prime - 1)
    if math.gcd(lam, pub_exp) != 1:
        return None
    return primes, coefficients, lam


def generate(bits: int = 2048,
             pub_exp: int | None = None,
             smallest_prime: int | None = None,
             native: bool | None = None,
             *,
             config: KeyGenConfig | None = None,
             cancel: threading.Event | None = None,
             backend: engine.NativeBackend = engine.NATIVE_BACKEND) -> RSAPrivKey:
    """Generates an RSA Private Key with full CRT parameters.

    The policy is snapshotted once: explicit arguments win, then `config`, then the process-wide configuration.

    Args:
        bits: The size of the modulus in bits.
        pub_exp: The public exponent. Must be odd.
        smallest_prime: Prime size in bits above which the key is split into more primes.
        native: Whether the native backend may be used.
        config: Policy to use instead of the process-wide one.
        cancel: Checked before every attempt, generation stops once it is set.
        backend: The native backend to delegate to.

    Returns:
        A new private key whose modulus has exactly `bits` bits.

    Raises:
        ConfigurationError: If the key size, prime size or exponent is unusable. Raised before any prime search.
        KeyGenerationCancelled: If `cancel` got set.
    """
    cfg = config if config is not None else get_config()
    pub_exp = cfg.exponent if pub_exp is None else pub_exp
    smallest_prime = cfg.smallest_prime if smallest_prime is None else smallest_prime
    native = cfg.native_backend if native is None else native
    _validate(bits, pub_exp, smallest_prime)

    num_primes, reg_size = prime_policy(bits, smallest_prime)
    logger.debug("Generating %d-bit key with %d primes of %d bits", bits, num_primes, reg_size)
    if engine.prefer_native_backend(num_primes, bits, pub_exp, backend if native else None):
        return RSAPrivKey.from_pkcs8_der(backend.generate(bits, pub_exp))

    attempts = 0
    while True:
        if cancel is not None and cancel.is_set():
            raise KeyGenerationCancelled(f"Key generation cancelled after {attempts} attempts.")
        attempts += 1
        result = _attempt(bits, pub_exp, num_primes, reg_size)
        if result is not None:
            break
        logger.debug("Discarding attempt %d, exponent not coprime or prime repeated", attempts)
    primes, coefficients, lam = result
    coefficients[2] = pow(primes[1], -1, primes[0])
    d = pow(pub_exp, -1, lam)
    exponents = [pow(pub_exp, -1, prime - 1) for prime in primes]
    logger.debug("Key generated after %d attempts", attempts)
    return RSAPrivKey(math.prod(primes), pub_exp, d, primes, exponents, dict(sorted(coefficients.items())))

