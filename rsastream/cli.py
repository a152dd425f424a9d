"""Command-line entry points: rsa-keygen, rsa-encrypt, rsa-decrypt."""
from __future__ import annotations

import argparse
import logging
import sys
from contextlib import ExitStack
from typing import BinaryIO, Callable, List, Optional

from rsastream.config import RSA_BITS, RSA_LOG_LEVEL, RSA_PRIVKEY_FILE, RSA_PUBKEY_FILE
from rsastream.errors import RSAStreamError
from rsastream.keys import PrivateKey, PublicKey, fingerprint, generate_keypair
from rsastream.stream import decrypt_stream, encrypt_stream

logger = logging.getLogger("rsastream")


def _setup_logging() -> None:
    # stdout may carry ciphertext or plaintext, so log to stderr
    logging.basicConfig(
        level=RSA_LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _open_input(stack: ExitStack, path: Optional[str]) -> BinaryIO:
    if path is None:
        return sys.stdin.buffer
    return stack.enter_context(open(path, "rb"))


def _open_output(stack: ExitStack, path: Optional[str]) -> BinaryIO:
    if path is None:
        return sys.stdout.buffer
    return stack.enter_context(open(path, "wb"))


def _run(action: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    try:
        action(args)
    except (RSAStreamError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1
    return 0


# ===== keygen =====

def _keygen(args: argparse.Namespace) -> None:
    pub, priv = generate_keypair(args.bits)
    with open(args.pbfile, "wb") as f:
        pub.write(f)
    with open(args.pvfile, "wb") as f:
        priv.write(f)
    logger.info("wrote %d-bit key pair %s to %s, %s", args.bits, fingerprint(pub), args.pbfile, args.pvfile)


def keygen_main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="rsa-keygen", description="Generate an RSA key pair")
    parser.add_argument("--bits", type=int, default=RSA_BITS, help="modulus size in bits")
    parser.add_argument("--pbfile", default=RSA_PUBKEY_FILE, help="public key output path")
    parser.add_argument("--pvfile", default=RSA_PRIVKEY_FILE, help="private key output path")
    args = parser.parse_args(argv)

    _setup_logging()
    return _run(_keygen, args)


# ===== encrypt / decrypt =====

def _encrypt(args: argparse.Namespace) -> None:
    with open(args.pbfile, "rb") as f:
        pub = PublicKey.read(f)
    with ExitStack() as stack:
        infile = _open_input(stack, args.infile)
        outfile = _open_output(stack, args.outfile)
        blocks = encrypt_stream(pub, infile, outfile)
        outfile.flush()
    logger.info("encrypted %d blocks with key %s", blocks, fingerprint(pub))


def _decrypt(args: argparse.Namespace) -> None:
    with open(args.pvfile, "rb") as f:
        priv = PrivateKey.read(f)
    with ExitStack() as stack:
        infile = _open_input(stack, args.infile)
        outfile = _open_output(stack, args.outfile)
        blocks = decrypt_stream(priv, infile, outfile, strict=args.strict)
        outfile.flush()
    logger.info("decrypted %d blocks with key %s", blocks, fingerprint(priv))


def encrypt_main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="rsa-encrypt", description="Encrypt a byte stream with an RSA public key")
    parser.add_argument("infile", nargs="?", help="plaintext input (default: stdin)")
    parser.add_argument("outfile", nargs="?", help="ciphertext output (default: stdout)")
    parser.add_argument("--pbfile", default=RSA_PUBKEY_FILE, help="public key path")
    args = parser.parse_args(argv)

    _setup_logging()
    return _run(_encrypt, args)


def decrypt_main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="rsa-decrypt", description="Decrypt a ciphertext stream with an RSA private key")
    parser.add_argument("infile", nargs="?", help="ciphertext input (default: stdin)")
    parser.add_argument("outfile", nargs="?", help="plaintext output (default: stdout)")
    parser.add_argument("--pvfile", default=RSA_PRIVKEY_FILE, help="private key path")
    parser.add_argument("--strict", action="store_true", help="fail on malformed ciphertext instead of stopping")
    args = parser.parse_args(argv)

    _setup_logging()
    return _run(_decrypt, args)
