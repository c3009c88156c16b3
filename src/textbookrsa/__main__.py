"""The Command Line Interface for the utility.

Performs a single demonstration run: generates a key pair, encrypts a sample message, decrypts it again and prints
the primes, the ciphertext and the recovered message. Every flag is optional, the defaults reproduce the classic
1024-bit run.

Typical usage example:

    textbookrsa
    OR
    python -m textbookrsa --bits 512 --message "Hi there!"
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import argparse
import logging
import random
import sys
import typing

import textbookrsa

logger = logging.getLogger("textbookrsa.cli")


class HelpData(typing.NamedTuple):
    description: str
    format: typing.Type = str
    choices: list[str] | None = None
    default: typing.Any = None


help_dict: dict[str, HelpData] = {
    "bits":
        HelpData(
            description="Size of each prime (in bits).",
            format=int,
            default=1024,
        ),
    "message":
        HelpData(
            description="Sample message to encrypt and decrypt.",
            default="O VALTER O BYTHQIM",
        ),
    "encoding":
        HelpData(description="Message encoding.", choices=["utf-8", "utf-16", "ascii"], default="utf-8"),
    "seed":
        HelpData(
            description="Seed for a deterministic random source. Warning! Keys become reproducible.",
            format=int,
        ),
}

corep = argparse.ArgumentParser(prog="textbookrsa", description="Textbook RSA key generation and round trip.")
corep.add_argument("--version", "-v", action="version", version=f"%(prog)s {textbookrsa.__version__}")
corep.add_argument("--verbose", "-V", action="store_true", help="Enable debug logging")
corep.add_argument("--bits",
                   "-b",
                   type=help_dict["bits"].format,
                   default=help_dict["bits"].default,
                   help=help_dict["bits"].description)
corep.add_argument("--message",
                   "-m",
                   type=help_dict["message"].format,
                   default=help_dict["message"].default,
                   help=help_dict["message"].description)
corep.add_argument("--encoding",
                   "-e",
                   choices=help_dict["encoding"].choices,
                   default=help_dict["encoding"].default,
                   help=help_dict["encoding"].description)
corep.add_argument("--seed", "-s", type=help_dict["seed"].format, help=help_dict["seed"].description)


def run(bits: int, message: str, encoding: str = "utf-8", rng: random.Random | None = None) -> None:
    """Generates a key, runs the message through it and prints the results.

    Raises:
        textbookrsa.RSAError: If any step fails, including a message that does not survive the round trip.
    """
    payload = message.encode(encoding)
    pk = textbookrsa.RSAPrivKey.generate(bits, rng)
    print("Prime p:", pk.p)
    print("Prime q:", pk.q)
    ciphertext = pk.pub.encrypt(payload)
    print("Encrypted Message:", ciphertext)
    clear = pk.decrypt(ciphertext)
    if clear != payload:
        # Only leading zero bytes can go missing once the value fits under the modulus.
        raise textbookrsa.RSAError("Decrypted message does not match the original, leading zero bytes were lost.")
    print("Decrypted Message:", clear.decode(encoding))


def main(argv: list[str] | None = None) -> int:
    """Core Command Line Interface."""
    args = corep.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.bits < 2:
        corep.error("argument --bits/-b: must be at least 2")
    try:
        args.message.encode(args.encoding)
    except UnicodeEncodeError:
        corep.error(f"argument --message/-m: cannot be encoded as {args.encoding}")
    rng = random.Random(args.seed) if args.seed is not None else None
    logger.debug("Generating two %d-bit primes.", args.bits)
    try:
        run(args.bits, args.message, args.encoding, rng)
    except textbookrsa.RSAError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
