"""Textbook RSA in an Academic Sense.

Provides textbook RSA key generation, encryption and decryption over Python's arbitrary-precision integers, with
no padding whatsoever. Intended for illustrating the algorithm, not for protecting anything.

Typical usage example:

    p = generate_prime(1024)
    pk = RSAPrivKey.generate(1024)
    c = pk.pub.encrypt(b"Hi there!")
    r = pk.decrypt(c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from textbookrsa.errors import GenerationError
from textbookrsa.errors import KeyDerivationError
from textbookrsa.errors import MessageTooLargeError
from textbookrsa.errors import RSAError
from textbookrsa.keygen import check_prime
from textbookrsa.keygen import derive_key
from textbookrsa.keygen import generate_key_pair
from textbookrsa.keygen import generate_prime
from textbookrsa.keygen import get_pre_primes
from textbookrsa.keygen import KeyMaterial
from textbookrsa.rsa import bytes_to_integer
from textbookrsa.rsa import decrypt
from textbookrsa.rsa import encrypt
from textbookrsa.rsa import integer_to_bytes
from textbookrsa.rsa import RSAPrivKey
from textbookrsa.rsa import RSAPubKey

__version__ = "0.1.0"
__all__ = [
    "RSAPrivKey",
    "RSAPubKey",
    "KeyMaterial",
    "encrypt",
    "decrypt",
    "bytes_to_integer",
    "integer_to_bytes",
    "get_pre_primes",
    "check_prime",
    "generate_prime",
    "derive_key",
    "generate_key_pair",
    "RSAError",
    "GenerationError",
    "KeyDerivationError",
    "MessageTooLargeError",
]
