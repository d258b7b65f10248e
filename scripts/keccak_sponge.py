#!/usr/bin/env python3
"""Sponge construction over Keccak-p[1600, 24].

:class:`SpongeSession` is the incremental form used by the streaming hash
objects; :func:`absorb`, :func:`squeeze` and :func:`keccak` are the one-shot
forms. All of them accept only the five FIPS 202 rates.
"""
from __future__ import annotations

import enum
import logging
from typing import List, Sequence

from keccak_permutation import LANES, bytes_to_lanes, keccak_p1600, lanes_to_bytes
from sha3_errors import ConfigurationError, InvalidSequenceError

logger = logging.getLogger(__name__)

# SHA3-224, SHA3-256 / SHAKE256, SHA3-384, SHA3-512, SHAKE128.
SUPPORTED_RATES: Sequence[int] = (144, 136, 104, 72, 168)

# Domain bits followed by the first bit of pad10*1, least significant first.
SHA3_SUFFIX = 0x06
SHAKE_SUFFIX = 0x1F
_FINAL_BIT = 0x80


class SpongePhase(enum.Enum):
    CREATED = "created"
    ABSORBING = "absorbing"
    SQUEEZING = "squeezing"
    FINISHED = "finished"


def _check_params(rate_bytes: int, suffix: int) -> None:
    if rate_bytes not in SUPPORTED_RATES:
        raise ConfigurationError(
            f"unsupported rate {rate_bytes!r}; expected one of {sorted(SUPPORTED_RATES)}"
        )
    if not 0 < suffix < _FINAL_BIT:
        raise ConfigurationError(f"domain suffix must be in 0x01..0x7f, got {suffix:#x}")


def pad(tail_len: int, rate_bytes: int, suffix: int = SHA3_SUFFIX) -> bytes:
    """Return the suffix and pad10*1 bytes completing a *tail_len* byte block."""
    padlen = rate_bytes - tail_len
    if padlen < 1:
        raise ValueError(f"tail of {tail_len} bytes does not fit a {rate_bytes} byte block")
    if padlen == 1:
        return bytes([suffix | _FINAL_BIT])
    return bytes([suffix]) + bytes(padlen - 2) + bytes([_FINAL_BIT])


def _xor_block(state: List[int], block: bytes) -> None:
    for i, lane in enumerate(bytes_to_lanes(block)):
        state[i] ^= lane


class SpongeSession:
    """One absorb-then-squeeze computation owning its own 1600-bit state."""

    def __init__(self, rate_bytes: int, suffix: int = SHA3_SUFFIX) -> None:
        _check_params(rate_bytes, suffix)
        self.rate_bytes = rate_bytes
        self.suffix = suffix
        self.phase = SpongePhase.CREATED
        self._state: List[int] = [0] * LANES
        self._pending = bytearray()
        self._block = b""
        self._offset = 0

    def __repr__(self) -> str:
        return f"<SpongeSession rate={self.rate_bytes} suffix={self.suffix:#04x} {self.phase.value}>"

    def _require(self, *allowed: SpongePhase) -> None:
        if self.phase not in allowed:
            raise InvalidSequenceError(
                f"operation not allowed while sponge is {self.phase.value}"
            )

    def _enter(self, phase: SpongePhase) -> None:
        if phase is not self.phase:
            logger.debug("sponge rate=%d: %s -> %s", self.rate_bytes, self.phase.value, phase.value)
            self.phase = phase

    def absorb(self, data: bytes) -> None:
        """XOR *data* into the state, permuting after every full block."""
        self._require(SpongePhase.CREATED, SpongePhase.ABSORBING)
        self._enter(SpongePhase.ABSORBING)
        rate = self.rate_bytes
        view = memoryview(data).cast("B")
        position = 0
        if self._pending:
            take = min(rate - len(self._pending), len(view))
            self._pending += view[:take]
            position = take
            if len(self._pending) < rate:
                return
            _xor_block(self._state, bytes(self._pending))
            keccak_p1600(self._state)
            self._pending.clear()
        while position + rate <= len(view):
            _xor_block(self._state, bytes(view[position : position + rate]))
            keccak_p1600(self._state)
            position += rate
        self._pending += view[position:]

    def finalize(self) -> None:
        """Append the domain suffix and pad10*1, absorb the last block."""
        self._require(SpongePhase.CREATED, SpongePhase.ABSORBING)
        block = bytes(self._pending) + pad(len(self._pending), self.rate_bytes, self.suffix)
        _xor_block(self._state, block)
        keccak_p1600(self._state)
        self._pending.clear()
        self._block = lanes_to_bytes(self._state[: self.rate_bytes // 8])
        self._offset = 0
        self._enter(SpongePhase.SQUEEZING)

    def squeeze(self, length: int) -> bytes:
        """Return the next *length* bytes of output."""
        self._require(SpongePhase.SQUEEZING)
        if length < 0:
            raise ValueError("output length must be non-negative")
        out = bytearray()
        while len(out) < length:
            if self._offset == self.rate_bytes:
                keccak_p1600(self._state)
                self._block = lanes_to_bytes(self._state[: self.rate_bytes // 8])
                self._offset = 0
            take = min(self.rate_bytes - self._offset, length - len(out))
            out += self._block[self._offset : self._offset + take]
            self._offset += take
        return bytes(out)

    def close(self) -> None:
        self._state = [0] * LANES
        self._pending.clear()
        self._block = b""
        self._offset = 0
        self._enter(SpongePhase.FINISHED)

    def copy(self) -> "SpongeSession":
        self._require(SpongePhase.CREATED, SpongePhase.ABSORBING, SpongePhase.SQUEEZING)
        clone = SpongeSession(self.rate_bytes, self.suffix)
        clone.phase = self.phase
        clone._state = list(self._state)
        clone._pending = bytearray(self._pending)
        clone._block = self._block
        clone._offset = self._offset
        return clone


def absorb(message: bytes, rate_bytes: int, suffix: int = SHA3_SUFFIX) -> List[int]:
    """Pad *message* and absorb it into a fresh state; return the lanes."""
    _check_params(rate_bytes, suffix)
    state = [0] * LANES
    tail = len(message) % rate_bytes
    padded = bytes(message) + pad(tail, rate_bytes, suffix)
    for position in range(0, len(padded), rate_bytes):
        _xor_block(state, padded[position : position + rate_bytes])
        keccak_p1600(state)
    return state


def squeeze(state: List[int], rate_bytes: int, output_len: int) -> bytes:
    """Read *output_len* bytes from an absorbed *state*, permuting between blocks."""
    if rate_bytes not in SUPPORTED_RATES:
        raise ConfigurationError(f"unsupported rate {rate_bytes!r}")
    if output_len < 0:
        raise ValueError("output length must be non-negative")
    output = bytearray()
    while len(output) < output_len:
        output += lanes_to_bytes(state[: rate_bytes // 8])
        if len(output) >= output_len:
            break
        keccak_p1600(state)
    return bytes(output[:output_len])


def keccak(rate_bytes: int, suffix: int, message: bytes, output_len: int) -> bytes:
    """Low-level generic sponge: any supported rate, any suffix.

    Internal primitive behind the named functions in ``sha3_primitives``;
    callers outside this library should use those instead.
    """
    return squeeze(absorb(message, rate_bytes, suffix), rate_bytes, output_len)
