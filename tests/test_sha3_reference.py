import hashlib
import io
import random
import sys

import pytest

from sha3_primitives import sha3_224, sha3_256, sha3_384, sha3_512, shake128, shake256
from sha3_reference import main, reference_digest

_rng = random.Random(202)
CORPUS = {
    "empty": b"",
    "one-byte": b"\x00",
    "block-minus-one": bytes(135),
    "block": bytes(136),
    "block-plus-one": bytes(137),
    "shake128-block": b"\xff" * 168,
    "multi-block": b"\xa3" * 200,
    "random": bytes(_rng.getrandbits(8) for _ in range(5000)),
}

FIXED = [
    ("sha3_224", sha3_224, hashlib.sha3_224),
    ("sha3_256", sha3_256, hashlib.sha3_256),
    ("sha3_384", sha3_384, hashlib.sha3_384),
    ("sha3_512", sha3_512, hashlib.sha3_512),
]


@pytest.mark.parametrize("label", sorted(CORPUS))
@pytest.mark.parametrize("name, func, stdlib", FIXED)
def test_fixed_hashes_agree_with_references(label, name, func, stdlib):
    message = CORPUS[label]
    digest = func(message)
    assert digest == reference_digest(name, message)
    assert digest == stdlib(message).digest()


@pytest.mark.parametrize("label", sorted(CORPUS))
@pytest.mark.parametrize("length", [0, 16, 168, 1000])
def test_shake_agrees_with_references(label, length):
    message = CORPUS[label]
    assert shake128(message, length) == reference_digest("shake_128", message, length)
    assert shake256(message, length) == reference_digest("shake_256", message, length)
    assert shake128(message, length) == hashlib.shake_128(message).digest(length)
    assert shake256(message, length) == hashlib.shake_256(message).digest(length)


def test_reference_rejects_missing_length():
    with pytest.raises(ValueError):
        reference_digest("shake_128", b"")


def test_reference_cli(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"abc")))
    assert main(["-a", "sha3_512"]) == 0
    assert capsys.readouterr().out.strip() == sha3_512(b"abc").hex()
