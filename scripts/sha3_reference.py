#!/usr/bin/env python3
"""Independent SHA-3 / SHAKE reference backed by pycryptodome."""
from __future__ import annotations

import argparse
import sys
from typing import Iterable, Optional

ALGORITHMS = ("sha3_224", "sha3_256", "sha3_384", "sha3_512", "shake_128", "shake_256")


def reference_digest(name: str, data: bytes, length: Optional[int] = None) -> bytes:
    """Hash *data* with pycryptodome's implementation of *name*."""
    from Crypto.Hash import SHA3_224, SHA3_256, SHA3_384, SHA3_512, SHAKE128, SHAKE256

    fixed = {"sha3_224": SHA3_224, "sha3_256": SHA3_256, "sha3_384": SHA3_384, "sha3_512": SHA3_512}
    xof = {"shake_128": SHAKE128, "shake_256": SHAKE256}
    if name in fixed:
        return fixed[name].new(data=data).digest()
    if name in xof:
        if length is None:
            raise ValueError(f"{name} needs an output length")
        return xof[name].new(data=data).read(length)
    raise ValueError(f"unknown algorithm {name!r}")


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="pycryptodome SHA-3 reference digest of stdin")
    parser.add_argument("-a", "--algorithm", default="sha3_256", choices=ALGORITHMS)
    parser.add_argument("-l", "--length", type=int, help="Output bytes (SHAKE only)")
    args = parser.parse_args(list(argv) if argv is not None else None)
    data = sys.stdin.buffer.read()
    try:
        digest = reference_digest(args.algorithm, data, args.length)
    except ImportError as e:
        sys.stderr.write("missing pycryptodome: {}\n".format(e))
        return 2
    except ValueError as e:
        sys.stderr.write("error: {}\n".format(e))
        return 1
    sys.stdout.write(digest.hex() + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
