"""Shared fixtures for wordmath tests.

Randomized tests draw from a random.Random re-seeded before every test, and
run their body WORDMATH_ITERATIONS times through the run_iterations fixture.
"""

import os
import random
import pytest
from wordmath.words import U8, U16, U32, U64, U128

SEED = int(os.environ.get('WORDMATH_SEED', '42'))
ITERATIONS = int(os.environ.get('WORDMATH_ITERATIONS', '50'))

WIDTHS = [U8, U16, U32, U64, U128]

# Primes per width. Together they cover each square-root branch:
# p = 3 mod 4, p = 5 mod 8 and p = 1 mod 8 (Tonelli-Shanks).
PRIMES = {
    U8: [251, 229, 241],
    U16: [65521, 58889, 251],
    U32: [4294967291, 7022531],
    U64: [(1 << 61) - 1, (1 << 64) - 59],
    U128: [(1 << 127) - 1, (1 << 128) - 159],
}

WORD_PRIMES = [(word, p) for word in WIDTHS for p in PRIMES[word]]


def iterations_for(word):
    """128-bit words run double-and-add on every product; keep those runs short."""
    return ITERATIONS if word.bits <= 64 else max(1, ITERATIONS // 10)


def word_prime_id(param):
    if isinstance(param, int):
        return str(param) if param < 1 << 16 else hex(param)
    return str(param)


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (128-bit curve arithmetic)")


@pytest.fixture
def rng():
    """Deterministic RNG for reproducible tests."""
    return random.Random(SEED)


@pytest.fixture
def run_iterations():
    """Call a no-argument test body ITERATIONS times."""
    def run(body, iterations=ITERATIONS):
        for _ in range(iterations):
            body()
    return run
