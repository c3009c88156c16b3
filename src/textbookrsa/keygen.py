"""Core Key Generation Utility, covering random large primes and the derivation of textbook RSA exponents.

Primes are probable primes: a candidate of the requested bit length is drawn from the random source, filtered by
trial division against a cached table of small primes and then confirmed with Miller-Rabin. The key is derived the
textbook way, with the totient `(p - 1) * (q - 1)`, the smallest odd public exponent coprime to it and its modular
inverse as the private exponent.

The random source is always an explicit argument. Any `random.Random` compatible object is accepted, which makes
seeded, reproducible runs possible for teaching and testing. Reproducible keys are of course not secret.

Typical usage example:

    p = generate_prime(1024)
    (n, e), (n, d) = generate_key_pair(1024)
    key = derive_key(61, 53)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import math
import random
import secrets
from typing import Literal, NamedTuple, overload
import warnings

from textbookrsa.errors import GenerationError
from textbookrsa.errors import KeyDerivationError

logger = logging.getLogger(__name__)

_SMALL_PRIMES: list[int] = []
_SMALL_PRIMES_CAP: int = 0
_SYSTEM_RANDOM = secrets.SystemRandom()
_DISTINCT_PRIME_ATTEMPTS: int = 100
DEFAULT_EXPONENT_SEARCH: int = 2**16


class KeyMaterial(NamedTuple):
    """Everything derived from a pair of primes.

    Attributes:
        n: The modulus.
        e: The public exponent.
        d: The private exponent.
        p: Prime 1.
        q: Prime 2.
    """
    n: int
    e: int
    d: int
    p: int
    q: int


def _resolve_rng(rng: random.Random | None) -> random.Random:
    """Returns the random source to use, warning if it is not the system CSPRNG."""
    if rng is None:
        return _SYSTEM_RANDOM
    if not isinstance(rng, random.SystemRandom):
        warnings.warn("Deterministic random source in use! Generated keys are reproducible and not secret.",
                      RuntimeWarning,
                      stacklevel=3)
    return rng


def _sieve(n: int = 10000) -> list[int]:
    """Implements the Sieve of Eratosthenes.

    Uses the textbook Sieve of Eratosthenes to generate a set of primes up to `n`.
    Includes memory space optimization and sieving until root.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.

    Returns:
        A list of primes up to `n`.
    """
    if n < 2:
        return []
    i_size = (n - 1) // 2
    candidate: list[bool] = [True] * i_size
    for i in range(int(n**0.5) // 2):
        if candidate[i]:
            r = 2 * i + 3
            for j in range((r * r - 3) // 2, i_size, r):
                candidate[j] = False
    result = [2] + [(no * 2 + 3) for no, ele in enumerate(candidate) if ele]
    return result


def get_pre_primes(n: int = 10000, change: bool = False) -> list[int]:
    """Get the small primes, automatically generating if necessary.

    Uses `_SMALL_PRIMES` as a cache if available. Regeneration occurs if the requested range is greater, forced by
    `change` or the cache is empty.

    Args:
        n: The number up to which to generate primes. Defaults to 10000. Must be >= 0.
        change: Whether to force a recomputation of primes. Defaults to False.

    Returns:
        List of primes in ascending order. All primes at least to `n` or more unless `change` is True.

    Raises:
        ValueError: If `n` is negative.
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


def _miller_rabin(w: int, iters: int, rng: random.Random = _SYSTEM_RANDOM) -> bool:
    """Perform Miller-Rabin primality test.

    Args:
        w: Odd integer to be tested.
        iters: Number of Miller-Rabin iterations to perform.
        rng: Source of the random witnesses.

    Returns:
        True if `w` is probably prime, False otherwise.
    """
    if w <= 3:
        return w == 2 or w == 3
    if w % 2 == 0:
        return False
    tw = w - 1
    a = (tw & -tw).bit_length() - 1
    m = tw >> a
    for _ in range(iters):
        b = rng.randrange(2, w - 1)
        z = pow(b, m, w)
        if z == 1 or z == w - 1:
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


def check_prime(candidate: int, iters: None | int = None, n: int = 10000, rng: random.Random | None = None) -> bool:
    """Performs a composite Primality test, using a limited amount of trial divisions, before a Miller-Rabin test.

    The default amount of Miller-Rabin rounds never drops below 64, bounding the chance of a composite passing by
    4**-64 = 2**-128 even for adversarial candidates.

    Args:
        candidate: The candidate prime to test.
        iters: Number of Miller-Rabin iterations to perform. If not provided it is chosen from the candidate size.
        n: The number up to which to trial divide. Defaults to 10000.
        rng: Source of the Miller-Rabin witnesses. Defaults to the system CSPRNG.

    Returns:
        True if `candidate` is probably prime, False otherwise.
    """
    if candidate < 2:
        return False
    if not _trial_division(candidate, n):
        return False
    if iters is None:
        if candidate.bit_length() <= 1536:
            iters = 64
        elif candidate.bit_length() <= 2048:
            iters = 70
        else:
            iters = 74
    return _miller_rabin(candidate, iters, rng if rng is not None else _SYSTEM_RANDOM)


def _generate_probable_prime(size: int, rng: random.Random) -> int:
    """Draws candidates of exactly `size` bits until one is probably prime.

    Raises:
        GenerationError: If the random source fails or no prime turns up within the candidate budget.
    """
    rep_cap = max(100, size * 10)
    # Top two bits keep p * q at exactly 2 * size bits, the low bit keeps the candidate odd.
    msk = (1 << size - 1) | (1 << size - 2) | 1
    for attempt in range(1, rep_cap + 1):
        try:
            byts = rng.getrandbits(size) | msk
            found = check_prime(byts, rng=rng)
        except (OSError, NotImplementedError) as exc:
            raise GenerationError(f"Random source failed while generating a {size}-bit prime: {exc}") from exc
        if found:
            logger.debug("Found %d-bit probable prime after %d candidates.", size, attempt)
            return byts
    raise GenerationError(
        f"Run an improbable {rep_cap} amount of loops with no prime found. Check system random number generator.")


def generate_prime(size: int, rng: random.Random | None = None) -> int:
    """Generate a probable prime number of the specified bit size.

    Args:
        size: The size of the prime in bits. Must be at least 2.
        rng: The random source. Defaults to the system CSPRNG.
            Anything else triggers a RuntimeWarning, as the prime becomes reproducible.

    Returns:
        A probable prime with exactly `size` bits.

    Raises:
        ValueError: If `size` is below 2.
        GenerationError: If the random source cannot supply a prime.
    """
    if size < 2:
        raise ValueError("Prime size must be at least 2 bits.")
    return _generate_probable_prime(size, _resolve_rng(rng))


def calculate_totient(p: int, q: int) -> int:
    """Euler's totient of `p * q` for distinct primes."""
    return (p - 1) * (q - 1)


def find_public_exponent(totient: int, limit: int = DEFAULT_EXPONENT_SEARCH) -> int:
    """Finds the smallest odd public exponent, starting at 3, that is coprime to the totient.

    Args:
        totient: The totient of the modulus.
        limit: Amount of candidates to try before giving up.

    Returns:
        The public exponent.

    Raises:
        KeyDerivationError: If no candidate below the totient is found within `limit` tries.
    """
    e = 3
    for _ in range(limit):
        if e >= totient:
            break
        if math.gcd(e, totient) == 1:
            logger.debug("Public exponent %d selected.", e)
            return e
        e += 2
    raise KeyDerivationError(f"No public exponent coprime to the totient found within {limit} candidates.")


def eea(a: int, b: int) -> tuple[int, int, int]:
    """Implements the Extended Euclidean Algorithm.

    Such that a*s0 + b*t0 = r0 = gcd(a, b).

    Args:
        a: The first natural number.
        b: The second natural number.

    Returns:
        Greatest common divisor of two integers.
        As well as the Bezout coefficients.
    """
    r0, r1 = a, b
    s0, s1, t0, t1 = 1, 0, 0, 1
    while r1 != 0:
        q = r0 // r1
        r0, r1 = r1, r0 - q * r1
        s0, s1 = s1, s0 - q * s1
        t0, t1 = t1, t0 - q * t1
    return r0, s0, t0


def mod_inverse(e: int, totient: int) -> int:
    """Computes the private exponent, the inverse of `e` modulo the totient.

    Raises:
        KeyDerivationError: If `e` and the totient share a factor.
    """
    gcd, s, _ = eea(e, totient)
    if gcd != 1:
        raise KeyDerivationError(f"Exponent {e} is not invertible modulo the totient (gcd is {gcd}).")
    return s % totient


def derive_key(p: int, q: int) -> KeyMaterial:
    """Derives the textbook RSA key from two distinct primes.

    Args:
        p: Prime 1.
        q: Prime 2. Must differ from `p`.

    Returns:
        The modulus, both exponents and the primes.

    Raises:
        KeyDerivationError: If no exponent pair can be derived.
    """
    totient = calculate_totient(p, q)
    e = find_public_exponent(totient)
    d = mod_inverse(e, totient)
    return KeyMaterial(p * q, e, d, p, q)


@overload
def generate_key_pair(size: int,
                      expose_primes: Literal[False] = False,
                      rng: random.Random | None = None) -> tuple[tuple[int, int], tuple[int, int]]:
    ...


@overload
def generate_key_pair(size: int,
                      expose_primes: Literal[True] = False,
                      rng: random.Random | None = None) -> tuple[tuple[int, int], tuple[int, int, int, int]]:
    ...


def generate_key_pair(
    size: int,
    expose_primes: bool = False,
    rng: random.Random | None = None
) -> tuple[tuple[int, int], tuple[int, int]] | tuple[tuple[int, int], tuple[int, int, int, int]]:
    """Generates a textbook RSA key pair.

    Draws two independent primes of `size` bits each, so the modulus has `2 * size` bits.

    Args:
        size: The bit size of each prime.
        expose_primes: Whether to export the prime numbers as well or not. Defaults to False.
        rng: The random source. Defaults to the system CSPRNG.

    Returns:
        A tuple of tuples of (public, private) sub-tuples (modulus, exponent) or if exposed for the private
        (modulus, exponent, p, q)

    Raises:
        ValueError: If `size` is below 2.
        GenerationError: If the random source cannot supply two distinct primes.
        KeyDerivationError: If no exponent pair can be derived.
    """
    p = generate_prime(size, rng)
    q = generate_prime(size, rng)
    attempts = 1
    while p == q:  # (Un)Likely story.
        if attempts >= _DISTINCT_PRIME_ATTEMPTS:
            raise GenerationError(f"Could not draw two distinct {size}-bit primes in {attempts} attempts.")
        logger.debug("Drew q equal to p, redrawing.")
        q = generate_prime(size, rng)
        attempts += 1
    key = derive_key(p, q)
    if not expose_primes:
        return (key.n, key.e), (key.n, key.d)
    return (key.n, key.e), (key.n, key.d, key.p, key.q)
