import numpy as np

from .hash import keccak_512
from .params import CACHE_ROUNDS, HASH_BYTES, NODE_WORDS, WORD_DTYPE


def _xor(a, b):
    return (int.from_bytes(a, 'little') ^ int.from_bytes(b, 'little')).to_bytes(HASH_BYTES, 'little')


def build_cache(seed, cache_size):
    """
    Build the light cache for the epoch identified by `seed`.

    This is sequential: every node of the initial chain depends on its predecessor, and every node
    rewritten in the rounds below depends on its (already rewritten) predecessor plus a node at a data-dependent
    offset. Verifiers and miners must arrive at bit-identical caches, so round count, direction and index derivation
    are fixed.

    Returns a read-only (cache_size // 64, 16) array of little-endian words.
    """
    if cache_size <= 0 or cache_size % HASH_BYTES != 0:
        raise ValueError("Cache size %d is not a positive multiple of %d." % (cache_size, HASH_BYTES))

    n = cache_size // HASH_BYTES

    # Sequentially produce the initial dataset
    o = [keccak_512(seed)]
    for i in range(1, n):
        o.append(keccak_512(o[-1]))

    # Use a low-round version of randmemohash
    for _ in range(CACHE_ROUNDS):
        for i in range(n):
            v = int.from_bytes(o[i][:4], 'little') % n
            o[i] = keccak_512(_xor(o[(i - 1 + n) % n], o[v]))

    cache = np.frombuffer(b"".join(o), dtype=WORD_DTYPE).reshape(n, NODE_WORDS)
    return cache
