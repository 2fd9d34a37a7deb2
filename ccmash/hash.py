from Crypto.Hash import keccak
import numpy as np

from .params import FNV_PRIME, WORD_DTYPE, NODE_WORDS


def keccak_256(b):
    # N.B. Keccak as submitted to the SHA-3 competition, not the later NIST SHA3-256 (different padding). hashlib's
    # sha3_256 would give different (and therefore wrong) answers here.
    return keccak.new(digest_bits=256, data=b).digest()


def keccak_512(b):
    return keccak.new(digest_bits=512, data=b).digest()


def fnv(v1, v2):
    # Fowler-Noll-Vo inspired mixing; non-cryptographic, used for data aggregation only.
    return ((v1 * FNV_PRIME) ^ v2) % 2 ** 32


_FNV_PRIME_WORD = np.uint32(FNV_PRIME)


def fnv_words(v1, v2):
    # Element-wise fnv over uint32 arrays; numpy wraps array multiplication modulo 2 ** 32, which is exactly what we
    # want. Both arguments must be arrays (numpy scalars warn on overflow).
    return (v1 * _FNV_PRIME_WORD) ^ v2


def keccak_512_rows(rows):
    """Keccak-512 of each 64-byte row of a (k, 16) word array; returns a new (k, 16) word array."""
    rows = np.ascontiguousarray(rows, dtype=WORD_DTYPE)
    digests = b"".join(keccak_512(row.tobytes()) for row in rows)
    return np.frombuffer(digests, dtype=WORD_DTYPE).reshape(-1, NODE_WORDS).copy()


def words(b):
    return np.frombuffer(b, dtype=WORD_DTYPE)


def words_to_bytes(a):
    return np.ascontiguousarray(a, dtype=WORD_DTYPE).tobytes()
