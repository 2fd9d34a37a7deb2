import pytest

from ccmash.cache import build_cache
from ccmash.epochs import get_cache_size, seed_hash_for_epoch
from ccmash.hash import keccak_512, words_to_bytes


def test_build_cache_shape():
    cache = build_cache(seed_hash_for_epoch(0), get_cache_size(0, test=True))

    assert cache.shape == (61, 16)
    assert cache.dtype.str == "<u4"
    assert cache.nbytes == 3904
    assert not cache.flags.writeable


def test_build_cache_is_deterministic():
    seed = seed_hash_for_epoch(1)
    assert words_to_bytes(build_cache(seed, 3904)) == words_to_bytes(build_cache(seed, 3904))


def test_build_cache_depends_on_seed():
    a = build_cache(seed_hash_for_epoch(0), 3904)
    b = build_cache(seed_hash_for_epoch(1), 3904)
    assert words_to_bytes(a) != words_to_bytes(b)


def test_build_cache_mixes_all_nodes():
    # after the rounds no node is left equal to its value in the initial keccak chain
    seed = seed_hash_for_epoch(0)
    cache = build_cache(seed, 3904)

    chain = [keccak_512(seed)]
    for _ in range(1, len(cache)):
        chain.append(keccak_512(chain[-1]))

    assert all(words_to_bytes(node) != initial for node, initial in zip(cache, chain))


def test_build_cache_bad_size():
    with pytest.raises(ValueError):
        build_cache(b'\x00' * 32, 100)

    with pytest.raises(ValueError):
        build_cache(b'\x00' * 32, 0)
