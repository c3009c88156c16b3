"""Provides core textbook RSA functionality: the encryption and decryption primitives and the message codec.

Encryption is the bare modular exponentiation `m^e mod n` and decryption is `c^d mod n`, with no padding of any
kind. Messages are byte strings read as big-endian unsigned integers, so a message has to be numerically smaller than
the modulus. Anything larger is rejected up front instead of being silently reduced.

Typical usage example:

    pk = RSAPrivKey.generate(1024)
    c = pk.pub.encrypt(b"Hi there!")
    r = pk.decrypt(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import random

from textbookrsa import keygen
from textbookrsa.errors import MessageTooLargeError


def _rsa_primitive(message: int, expo: int, mod: int) -> int:
    if not 0 <= message < mod:
        raise MessageTooLargeError(message, mod)
    return pow(message, expo, mod)


def encrypt(message: int, e: int, n: int) -> int:
    """Encrypts an int-marshalled message with the public exponent.

    Args:
        message: The message representative, in range [0, n-1].
        e: The public exponent.
        n: The modulus.

    Returns:
        The ciphertext `message^e mod n`.

    Raises:
        MessageTooLargeError: If the message is out of range for the modulus.
    """
    return _rsa_primitive(message, e, n)


def decrypt(ciphertext: int, d: int, n: int) -> int:
    """Decrypts a ciphertext with the private exponent.

    Args:
        ciphertext: The ciphertext, in range [0, n-1].
        d: The private exponent.
        n: The modulus.

    Returns:
        The message representative `ciphertext^d mod n`.

    Raises:
        MessageTooLargeError: If the ciphertext is out of range for the modulus.
    """
    return _rsa_primitive(ciphertext, d, n)


class RSAKey:
    """The overall RSA key class implementation.

    Acts mostly as a template for the "core" components of a RSA Key that are strictly mandatory in both a public
    and a private key.

    Attributes:
        mod: The modulus of the keypair.
        expo: The exponent of the key, whether private or public.
        bsize: The size of the modulus in bytes.
    """

    def __init__(self, mod: int, expo: int) -> None:
        self.mod = mod
        self.expo = expo
        self.bsize = (self.mod.bit_length() + 7) // 8

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mod=<{self.mod.bit_length()} bits>)"

    def c_rsa(self, message: int) -> int:
        """Performs core RSA operation. (Encrypt/Decrypt).

        Args:
            message: The int-marshalled message.

        Returns:
            The message raised to the key exponent, modulo the modulus.

        Raises:
            MessageTooLargeError: If the message is out of range for the current key.
        """
        return _rsa_primitive(message, self.expo, self.mod)


class RSAPubKey(RSAKey):
    """A rather straightforward subclass of RSAKey, for Public Keys."""

    def encrypt(self, message: bytes) -> int:
        """Use the public key to encrypt the message.

        Args:
            message: The message to encrypt. Its integer value must be smaller than the modulus.

        Returns:
            The ciphertext as an integer.

        Raises:
            MessageTooLargeError: If the message does not fit under the modulus.
        """
        return encrypt(bytes_to_integer(message), self.expo, self.mod)


class RSAPrivKey(RSAKey):
    """RSA Private Key class implementation.

    Holds the private exponent and exposes its connected public key. The primes are kept purely so they can be
    displayed; decryption never uses them.

    Attributes:
        mod: The modulus of the keypair.
        expo: The private exponent of the key.
        pub: The public key of the key.
        p: Private Prime 1.
        q: Private Prime 2.
    """

    def __init__(self, mod: int, pub_exp: int, priv_exp: int, p: int | None = None, q: int | None = None) -> None:
        super().__init__(mod, priv_exp)
        self.pub: RSAPubKey = RSAPubKey(mod, pub_exp)
        self.p: int | None = p
        self.q: int | None = q

    def decrypt(self, ciphertext: int, length: int | None = None) -> bytes:
        """Decrypts the ciphertext using the private key.

        Args:
            ciphertext: The ciphertext as produced by `RSAPubKey.encrypt`.
            length: Length of the original message, if known. Restores leading zero bytes that the integer
                representation cannot carry. Defaults to the minimal representation.

        Returns:
            The decrypted message.

        Raises:
            MessageTooLargeError: If the ciphertext is out of range for the current key.
        """
        return integer_to_bytes(decrypt(ciphertext, self.expo, self.mod), length)

    @classmethod
    def from_primes(cls, p: int, q: int) -> "RSAPrivKey":
        """Derives the RSA Private Key belonging to two known primes."""
        key = keygen.derive_key(p, q)
        return cls(key.n, key.e, key.d, key.p, key.q)

    @classmethod
    def generate(cls, size: int, rng: random.Random | None = None) -> "RSAPrivKey":
        """Generates an RSA Private Key, and its respective Public Key.

        Args:
            size: The bit size of each of the two primes.
            rng: The random source. Defaults to the system CSPRNG.

        Returns:
            A new generated RSA Private Key.
        """
        (n, e), (_, d, p, q) = keygen.generate_key_pair(size, True, rng)
        return cls(n, e, d, p, q)


def bytes_to_integer(msg: bytes) -> int:
    """Converts a byte string to its big-endian unsigned integer value.

    Leading zero bytes do not change the value, so they are lost. An empty string yields 0.

    Args:
        msg: The bytes (AKA Octet String) to convert.

    Returns:
        The representative integer.
    """
    return int.from_bytes(msg, byteorder="big", signed=False)


def integer_to_bytes(msg: int, fixedlen: int | None = None) -> bytes:
    """Converts an integer to a big-endian byte string.

    Args:
        msg: The integer to unmarshal. Must be non-negative.
        fixedlen: The target length of the byte string. Defaults to the minimal length, which is 0 for 0.

    Returns:
        The representative bytes. (AKA Octet String)

    Raises:
        ValueError: If `msg` is negative.
        OverflowError: If `msg` does not fit in `fixedlen` bytes.
    """
    if msg < 0:
        raise ValueError("Cannot convert negative integers")
    if fixedlen is None:
        fixedlen = (msg.bit_length() + 7) // 8
    return msg.to_bytes(fixedlen, byteorder="big", signed=False)
