#!/usr/bin/env python3
"""SHA-3 hashes and SHAKE extendable-output functions (FIPS 202) and CLI helpers."""
from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from keccak_permutation import (
    RHO_OFFSETS,
    ROUND_CONSTANTS,
    derive_rho_offsets,
    derive_round_constants,
)
from keccak_sponge import SHA3_SUFFIX, SHAKE_SUFFIX, SpongePhase, SpongeSession, keccak
from sha3_errors import InvalidSequenceError, Sha3Error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Sha3Params:
    name: str
    rate_bytes: int
    suffix: int
    digest_size: Optional[int]

    @property
    def is_xof(self) -> bool:
        return self.digest_size is None


ALGORITHMS: Dict[str, Sha3Params] = {
    "sha3_224": Sha3Params("sha3_224", 144, SHA3_SUFFIX, 28),
    "sha3_256": Sha3Params("sha3_256", 136, SHA3_SUFFIX, 32),
    "sha3_384": Sha3Params("sha3_384", 104, SHA3_SUFFIX, 48),
    "sha3_512": Sha3Params("sha3_512", 72, SHA3_SUFFIX, 64),
    "shake_128": Sha3Params("shake_128", 168, SHAKE_SUFFIX, None),
    "shake_256": Sha3Params("shake_256", 136, SHAKE_SUFFIX, None),
}
DEFAULT_XOF_LENGTHS = {"shake_128": 32, "shake_256": 64}

_CANONICAL_VECTORS = (
    {
        "algorithm": "sha3_224",
        "input_hex": "",
        "digest_hex": "6b4e03423667dbb73b6e15454f0eb1abd4597f9a1b078e3f5b5a6bc7",
    },
    {
        "algorithm": "sha3_256",
        "input_hex": "",
        "digest_hex": "a7ffc6f8bf1ed76651c14756a061d662f580ff4de43b49fa82d80a4b80f8434a",
    },
    {
        "algorithm": "sha3_384",
        "input_hex": "",
        "digest_hex": "0c63a75b845e4f7d01107d852e4c2485c51a50aaaa94fc61995e71bbee983a2a"
        "c3713831264adb47fb6bd1e058d5f004",
    },
    {
        "algorithm": "sha3_512",
        "input_hex": "",
        "digest_hex": "a69f73cca23a9ac5c8b567dc185a756e97c982164fe25859e0d1dcc1475c80a6"
        "15b2123af1f5f94c11e3e9402c3ac558f500199d95b6d3e301758586281dcd26",
    },
    {
        "algorithm": "sha3_256",
        "input_hex": "616263",
        "digest_hex": "3a985da74fe225b2045c172d6bd390bd855f086e3e9d525b46bfe24511431532",
    },
    {
        "algorithm": "sha3_512",
        "input_hex": "616263",
        "digest_hex": "b751850b1a57168a5693cd924b6b096e08f621827444f70d884f5d0240d2712e"
        "10e116e9192af3c91a7ec57647e3934057340b4cf408d5a56592f8274eec53f0",
    },
    {
        "algorithm": "shake_128",
        "input_hex": "",
        "digest_hex": "7f9c2ba4e88f827d616045507605853ed73b8093f6efbc88eb1a6eacfa66ef26",
    },
    {
        "algorithm": "shake_256",
        "input_hex": "",
        "digest_hex": "46b9dd2b0ba88d13233b3feb743eeb243fcd52ea62b81b82b50c27646ed5762f"
        "d75dc4ddd8c0f200cb05019d67b592f6fc821c49479ab48640292eacb3b7c4be",
    },
)


def _normalise_name(name: str) -> str:
    key = name.strip().lower().replace("-", "_")
    if key.startswith("shake") and not key.startswith("shake_"):
        key = "shake_" + key[len("shake"):]
    if key not in ALGORITHMS:
        raise ValueError(f"unknown algorithm {name!r}")
    return key


def _run(name: str, data: bytes, output_len: int) -> bytes:
    params = ALGORITHMS[name]
    return keccak(params.rate_bytes, params.suffix, data, output_len)


def sha3_224(message: bytes) -> bytes:
    """Compute the 28 byte SHA3-224 digest of *message*."""
    return _run("sha3_224", message, 28)


def sha3_256(message: bytes) -> bytes:
    """Compute the 32 byte SHA3-256 digest of *message*."""
    return _run("sha3_256", message, 32)


def sha3_384(message: bytes) -> bytes:
    """Compute the 48 byte SHA3-384 digest of *message*."""
    return _run("sha3_384", message, 48)


def sha3_512(message: bytes) -> bytes:
    """Compute the 64 byte SHA3-512 digest of *message*."""
    return _run("sha3_512", message, 64)


def shake128(message: bytes, output_len: int) -> bytes:
    """Compute *output_len* bytes of SHAKE128 output for *message*."""
    return _run("shake_128", message, output_len)


def shake256(message: bytes, output_len: int) -> bytes:
    """Compute *output_len* bytes of SHAKE256 output for *message*."""
    return _run("shake_256", message, output_len)


def sha3_256_hex(message: bytes) -> str:
    return sha3_256(message).hex()


def sha3_512_hex(message: bytes) -> str:
    return sha3_512(message).hex()


class _Sha3Hash:
    """Streaming fixed-output hash; ``digest`` finalizes the sponge."""

    _params: Sha3Params

    def __init__(self, data: bytes = b"") -> None:
        self._sponge = SpongeSession(self._params.rate_bytes, self._params.suffix)
        self._digest: Optional[bytes] = None
        if data:
            self.update(data)

    @property
    def name(self) -> str:
        return self._params.name

    @property
    def digest_size(self) -> int:
        size = self._params.digest_size
        assert size is not None
        return size

    @property
    def block_size(self) -> int:
        return self._params.rate_bytes

    def update(self, data: bytes) -> None:
        if self._digest is not None:
            raise InvalidSequenceError(f"{self.name}: update after digest")
        self._sponge.absorb(data)

    def digest(self) -> bytes:
        if self._digest is None:
            self._sponge.finalize()
            self._digest = self._sponge.squeeze(self.digest_size)
            self._sponge.close()
        return self._digest

    def hexdigest(self) -> str:
        return self.digest().hex()

    def copy(self):
        clone = self.__class__.__new__(self.__class__)
        clone._digest = self._digest
        clone._sponge = self._sponge if self._digest is not None else self._sponge.copy()
        return clone


class Sha3_224(_Sha3Hash):
    _params = ALGORITHMS["sha3_224"]


class Sha3_256(_Sha3Hash):
    _params = ALGORITHMS["sha3_256"]


class Sha3_384(_Sha3Hash):
    _params = ALGORITHMS["sha3_384"]


class Sha3_512(_Sha3Hash):
    _params = ALGORITHMS["sha3_512"]


class _Shake:
    """Streaming XOF; the first ``squeeze`` pads the input, later calls continue the stream."""

    _params: Sha3Params

    def __init__(self, data: bytes = b"") -> None:
        self._sponge = SpongeSession(self._params.rate_bytes, self._params.suffix)
        if data:
            self.update(data)

    @property
    def name(self) -> str:
        return self._params.name

    @property
    def block_size(self) -> int:
        return self._params.rate_bytes

    def update(self, data: bytes) -> None:
        self._sponge.absorb(data)

    def squeeze(self, length: int) -> bytes:
        if length < 0:
            raise ValueError("output length must be non-negative")
        if self._sponge.phase in (SpongePhase.CREATED, SpongePhase.ABSORBING):
            self._sponge.finalize()
        return self._sponge.squeeze(length)

    def hexsqueeze(self, length: int) -> str:
        return self.squeeze(length).hex()

    def close(self) -> None:
        self._sponge.close()

    def copy(self):
        clone = self.__class__.__new__(self.__class__)
        clone._sponge = self._sponge.copy()
        return clone


class Shake128(_Shake):
    _params = ALGORITHMS["shake_128"]


class Shake256(_Shake):
    _params = ALGORITHMS["shake_256"]


_CONSTRUCTORS = {
    "sha3_224": Sha3_224,
    "sha3_256": Sha3_256,
    "sha3_384": Sha3_384,
    "sha3_512": Sha3_512,
    "shake_128": Shake128,
    "shake_256": Shake256,
}


def new(name: str, data: bytes = b""):
    """Return a streaming object for *name* (``sha3-256``, ``shake_128``, ...)."""
    return _CONSTRUCTORS[_normalise_name(name)](data)


def compute(name: str, data: bytes, length: Optional[int] = None) -> bytes:
    """One-shot digest by algorithm name; *length* only applies to SHAKE."""
    key = _normalise_name(name)
    params = ALGORITHMS[key]
    if params.is_xof:
        return _run(key, data, DEFAULT_XOF_LENGTHS[key] if length is None else length)
    if length is not None and length != params.digest_size:
        raise ValueError(f"{key} has a fixed {params.digest_size} byte digest")
    return _run(key, data, params.digest_size)


def run_self_test() -> None:
    if list(ROUND_CONSTANTS) != derive_round_constants():
        raise RuntimeError("SHA-3 self-test failed: round constant table")
    if list(RHO_OFFSETS) != derive_rho_offsets():
        raise RuntimeError("SHA-3 self-test failed: rho offset table")
    for vector in _CANONICAL_VECTORS:
        msg = bytes.fromhex(vector["input_hex"])
        expected = vector["digest_hex"]
        digest = compute(vector["algorithm"], msg, len(expected) // 2).hex()
        if digest != expected:
            raise RuntimeError(
                f"SHA-3 self-test failed for {vector['algorithm']}({vector['input_hex']!r}):"
                f" {digest} != {expected}"
            )
        logger.debug("self-test %s(%r) ok", vector["algorithm"], vector["input_hex"])


def _dump_vectors() -> str:
    return json.dumps(_CANONICAL_VECTORS, separators=(",", ":"), sort_keys=True)


def _build_cli() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SHA-3 / SHAKE helper utilities")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    digest = sub.add_parser("digest", help="Read stdin and emit a hex digest")
    digest.add_argument(
        "-a", "--algorithm", default="sha3_256", help="sha3_224 … sha3_512, shake_128, shake_256"
    )
    digest.add_argument("-l", "--length", type=int, help="Output bytes (SHAKE only)")
    sub.add_parser("self-test", help="Run internal test vectors")
    sub.add_parser("vectors", help="Emit canonical SHA-3 vector JSON")
    bench = sub.add_parser("bench", help="Time sha3_256 on zero-filled inputs")
    bench.add_argument("-n", "--iterations", type=int, default=5)
    return parser


def _cmd_digest(algorithm: str, length: Optional[int]) -> int:
    if length is not None and length < 0:
        raise ValueError("--length must be non-negative")
    data = sys.stdin.buffer.read()
    logger.debug("hashing %d bytes with %s", len(data), algorithm)
    sys.stdout.write(compute(algorithm, data, length).hex() + "\n")
    return 0


def _cmd_self_test() -> int:
    run_self_test()
    sys.stdout.write("ok\n")
    return 0


def _cmd_vectors() -> int:
    sys.stdout.write(_dump_vectors())
    return 0


def _cmd_bench(iterations: int) -> int:
    for size in (1024, 64 * 1024):
        data = bytes(size)
        start = time.perf_counter()
        for _ in range(iterations):
            sha3_256(data)
        elapsed = (time.perf_counter() - start) / max(iterations, 1)
        rate = size / elapsed / 1024 if elapsed else float("inf")
        sys.stdout.write(f"sha3_256 {size:>6} B: {elapsed * 1000:.2f} ms ({rate:.1f} KiB/s)\n")
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_cli()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        if args.command == "digest":
            return _cmd_digest(args.algorithm, args.length)
        if args.command == "self-test":
            return _cmd_self_test()
        if args.command == "vectors":
            return _cmd_vectors()
        if args.command == "bench":
            return _cmd_bench(args.iterations)
    except (Sha3Error, ValueError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    parser.error("unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
