"""
The hashimoto loop: the part of the proof of work that is actually "work".

Its cost is dominated by ACCESSES pseudo-random page reads from a multi-gigabyte dataset. A miner keeps the dataset in
memory and reads pages directly; a verifier reconstructs the very same pages from the cache on demand, which is slow
per page but needs only a handful of them. Both paths run the code below with a different `lookup`, which is what
makes the results of the light and the full path byte-identical.
"""
import struct
from typing import Callable, NamedTuple, Tuple

import numpy as np

from .dataset import calc_dataset_item
from .hash import fnv, fnv_words, keccak_256, keccak_512, words, words_to_bytes
from .params import ACCESSES, MIX_BYTES, MIX_NODES, MIX_WORDS

NodeLookup = Callable[[int], np.ndarray]


class ReturnValue(NamedTuple):
    """
    Outcome of a light or full computation.

    success=False means the computation itself could not be done (e.g. the handle was deleted). It says nothing about
    whether `result` meets any target; comparing against the difficulty is up to the caller.
    """
    result: bytes
    mix_hash: bytes
    success: bool


FAILED = ReturnValue(b'\x00' * 32, b'\x00' * 32, False)


def hashimoto(header_hash: bytes, nonce: int, full_size: int, lookup: NodeLookup) -> Tuple[bytes, bytes]:
    if len(header_hash) != 32:
        raise ValueError("Header hash must be 32 bytes, got %d." % len(header_hash))

    if not (0 <= nonce < 2 ** 64):
        raise ValueError("Nonce %d is out of range." % nonce)

    if full_size <= 0 or full_size % MIX_BYTES != 0:
        raise ValueError("Dataset size %d is not a positive multiple of %d." % (full_size, MIX_BYTES))

    pages = full_size // MIX_BYTES

    # combine header+nonce into a 64 byte seed
    s = keccak_512(header_hash + struct.pack("<Q", nonce))
    s_head = int(words(s)[0])

    # start the mix with replicated s
    mix = np.tile(words(s), MIX_NODES)

    # mix in random dataset nodes
    for i in range(ACCESSES):
        p = fnv(i ^ s_head, int(mix[i % MIX_WORDS])) % pages
        page = np.concatenate([lookup(MIX_NODES * p + j) for j in range(MIX_NODES)])
        mix = fnv_words(mix, page)

    # compress mix
    m = mix.reshape(-1, 4)
    cmix = fnv_words(fnv_words(fnv_words(m[:, 0], m[:, 1]), m[:, 2]), m[:, 3])
    mix_hash = words_to_bytes(cmix)

    return keccak_256(s + mix_hash), mix_hash


def hashimoto_light(full_size, cache, header_hash, nonce):
    return hashimoto(header_hash, nonce, full_size, lambda x: calc_dataset_item(cache, x))


def hashimoto_full(full_size, dataset, header_hash, nonce):
    return hashimoto(header_hash, nonce, full_size, lambda x: dataset[x])
