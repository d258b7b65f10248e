#!/usr/bin/env python3
"""Keccak-p[1600, 24] permutation on a list of 25 little-endian 64-bit lanes.

Lanes are indexed ``x + 5 * y``. The round logic only ever touches lane
values; byte order is handled once, in :func:`bytes_to_lanes` and
:func:`lanes_to_bytes`.
"""
from __future__ import annotations

from typing import List, Sequence

ROUNDS = 24
LANES = 25
STATE_BYTES = 200
MASK_64 = (1 << 64) - 1

ROUND_CONSTANTS: Sequence[int] = (
    0x0000000000000001,
    0x0000000000008082,
    0x800000000000808A,
    0x8000000080008000,
    0x000000000000808B,
    0x0000000080000001,
    0x8000000080008081,
    0x8000000000008009,
    0x000000000000008A,
    0x0000000000000088,
    0x0000000080008009,
    0x000000008000000A,
    0x000000008000808B,
    0x800000000000008B,
    0x8000000000008089,
    0x8000000000008003,
    0x8000000000008002,
    0x8000000000000080,
    0x000000000000800A,
    0x800000008000000A,
    0x8000000080008081,
    0x8000000000008080,
    0x0000000080000001,
    0x8000000080008008,
)
# Indexed x + 5 * y.
RHO_OFFSETS: Sequence[int] = (
    0, 1, 62, 28, 27,
    36, 44, 6, 55, 20,
    3, 10, 43, 25, 39,
    41, 45, 15, 21, 8,
    18, 2, 61, 56, 14,
)
# PI_LANES[i] is where lane i lands: (x, y) -> (y, 2x + 3y).
PI_LANES: Sequence[int] = tuple(
    y + 5 * ((2 * x + 3 * y) % 5) for y in range(5) for x in range(5)
)


def rotl64(value: int, offset: int) -> int:
    offset &= 63
    if offset == 0:
        return value
    return ((value << offset) & MASK_64) | (value >> (64 - offset))


def theta(state: List[int]) -> None:
    c = [
        state[x] ^ state[x + 5] ^ state[x + 10] ^ state[x + 15] ^ state[x + 20]
        for x in range(5)
    ]
    d = [c[(x - 1) % 5] ^ rotl64(c[(x + 1) % 5], 1) for x in range(5)]
    for idx in range(LANES):
        state[idx] ^= d[idx % 5]


def rho(state: List[int]) -> None:
    for idx in range(LANES):
        state[idx] = rotl64(state[idx], RHO_OFFSETS[idx])


def pi(state: List[int]) -> None:
    moved = [0] * LANES
    for idx in range(LANES):
        moved[PI_LANES[idx]] = state[idx]
    state[:] = moved


def chi(state: List[int]) -> None:
    for y in range(0, LANES, 5):
        row = state[y : y + 5]
        for x in range(5):
            state[y + x] = row[x] ^ ((~row[(x + 1) % 5] & MASK_64) & row[(x + 2) % 5])


def iota(state: List[int], round_index: int) -> None:
    state[0] ^= ROUND_CONSTANTS[round_index]


def keccak_round(state: List[int], round_index: int) -> List[int]:
    """Apply round *round_index* (0..23) to *state* in place."""
    theta(state)
    rho(state)
    pi(state)
    chi(state)
    iota(state, round_index)
    return state


def keccak_p1600(state: List[int]) -> List[int]:
    """Apply all 24 rounds of Keccak-p[1600] to *state* in place and return it."""
    if len(state) != LANES:
        raise ValueError(f"Keccak state must hold {LANES} lanes, got {len(state)}")
    for round_index in range(ROUNDS):
        keccak_round(state, round_index)
    return state


def bytes_to_lanes(data: bytes) -> List[int]:
    """Decode *data* as consecutive little-endian 64-bit lanes."""
    if len(data) % 8 or len(data) > STATE_BYTES:
        raise ValueError(f"cannot split {len(data)} bytes into whole lanes")
    return [int.from_bytes(data[i : i + 8], "little") for i in range(0, len(data), 8)]


def lanes_to_bytes(lanes: Sequence[int]) -> bytes:
    """Encode *lanes* as little-endian 64-bit words."""
    return b"".join((lane & MASK_64).to_bytes(8, "little") for lane in lanes)


def _rc_bit(t: int) -> int:
    # FIPS 202 Algorithm 5: LFSR over x^8 + x^6 + x^5 + x^4 + 1.
    if t % 255 == 0:
        return 1
    r = 0x01
    for _ in range(t % 255):
        r <<= 1
        if r & 0x100:
            r ^= 0x171
    return r & 1


def derive_round_constants() -> List[int]:
    """Recompute the iota constants from the rc(t) recurrence."""
    constants = []
    for round_index in range(ROUNDS):
        rc = 0
        for j in range(7):
            if _rc_bit(j + 7 * round_index):
                rc |= 1 << ((1 << j) - 1)
        constants.append(rc)
    return constants


def derive_rho_offsets() -> List[int]:
    """Recompute the rho offsets from the triangular numbers walk."""
    offsets = [0] * LANES
    x, y = 1, 0
    for t in range(24):
        offsets[x + 5 * y] = ((t + 1) * (t + 2) // 2) % 64
        x, y = y, (2 * x + 3 * y) % 5
    return offsets
