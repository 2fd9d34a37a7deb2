"""
Everything that is a function of the epoch alone: seed hashes and the sizes of caches and datasets.

Sizes grow linearly with the epoch and are then rounded down to a *prime* number of nodes (cache) or pages (dataset).
A prime count means the pseudo-random `x % n` index selection used by the cache rounds, the dataset builder and the
hashimoto loop has no small-factor structure to exploit.
"""
from .hash import keccak_256
from .params import (
    EPOCH_LENGTH, HASH_BYTES, MIX_BYTES, MAX_EPOCH,
    CACHE_BYTES_INIT, CACHE_BYTES_GROWTH, DATASET_BYTES_INIT, DATASET_BYTES_GROWTH,
    TEST_CACHE_BYTES_INIT, TEST_CACHE_BYTES_GROWTH, TEST_DATASET_BYTES_INIT, TEST_DATASET_BYTES_GROWTH,
)


def get_epoch(block_number):
    if block_number < 0:
        raise ValueError("Block number %d is negative." % block_number)

    return block_number // EPOCH_LENGTH


def seed_hash_for_epoch(epoch):
    s = b'\x00' * 32
    for _ in range(epoch):
        s = keccak_256(s)
    return s


def get_seedhash(block_number):
    return seed_hash_for_epoch(get_epoch(block_number))


def get_epoch_from_seedhash(seed_hash, max_epoch=MAX_EPOCH):
    s = b'\x00' * 32
    for epoch in range(max_epoch + 1):
        if s == seed_hash:
            return epoch
        s = keccak_256(s)
    return None


def isprime(x):
    if x < 2:
        return False

    i = 2
    while i * i <= x:
        if x % i == 0:
            return False
        i += 1

    return True


def _prime_adjusted_size(init, growth, width, epoch):
    # start one width below the linear size, then walk down in steps of two widths: the item count stays odd, so we
    # never waste a primality test on an even number.
    sz = init + growth * epoch - width
    while not isprime(sz // width):
        sz -= 2 * width
    return sz


def get_cache_size(epoch, test=False):
    if test:
        return _prime_adjusted_size(TEST_CACHE_BYTES_INIT, TEST_CACHE_BYTES_GROWTH, HASH_BYTES, epoch)
    return _prime_adjusted_size(CACHE_BYTES_INIT, CACHE_BYTES_GROWTH, HASH_BYTES, epoch)


def get_full_size(epoch, test=False):
    if test:
        return _prime_adjusted_size(TEST_DATASET_BYTES_INIT, TEST_DATASET_BYTES_GROWTH, MIX_BYTES, epoch)
    return _prime_adjusted_size(DATASET_BYTES_INIT, DATASET_BYTES_GROWTH, MIX_BYTES, epoch)
