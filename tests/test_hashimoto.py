import pytest

from ccmash.cache import build_cache
from ccmash.dataset import build_dataset
from ccmash.epochs import get_cache_size, get_full_size, seed_hash_for_epoch
from ccmash.hashimoto import FAILED, ReturnValue, hashimoto_full, hashimoto_light
from ccmash.hash import keccak_256

FULL_SIZE = get_full_size(0, test=True)

HEADER_HASH = keccak_256(b'ccmash test header')


def get_test_cache_and_dataset():
    cache = build_cache(seed_hash_for_epoch(0), get_cache_size(0, test=True))
    return cache, build_dataset(cache, FULL_SIZE)


def test_light_and_full_agree():
    cache, dataset = get_test_cache_and_dataset()

    for nonce in [0, 1, 0x495732e0ed7a801c, 2 ** 64 - 1]:
        light_result, light_mix_hash = hashimoto_light(FULL_SIZE, cache, HEADER_HASH, nonce)
        full_result, full_mix_hash = hashimoto_full(FULL_SIZE, dataset, HEADER_HASH, nonce)

        assert len(light_result) == 32
        assert len(light_mix_hash) == 32
        assert light_result == full_result
        assert light_mix_hash == full_mix_hash


def test_result_depends_on_inputs():
    cache, dataset = get_test_cache_and_dataset()

    a = hashimoto_full(FULL_SIZE, dataset, HEADER_HASH, 0)
    b = hashimoto_full(FULL_SIZE, dataset, HEADER_HASH, 1)
    c = hashimoto_full(FULL_SIZE, dataset, keccak_256(b'another header'), 0)

    assert a == hashimoto_full(FULL_SIZE, dataset, HEADER_HASH, 0)
    assert len({a, b, c}) == 3


def test_bad_arguments():
    cache, _ = get_test_cache_and_dataset()

    with pytest.raises(ValueError, match=".*32 bytes.*"):
        hashimoto_light(FULL_SIZE, cache, HEADER_HASH[:31], 0)

    with pytest.raises(ValueError, match=".*out of range.*"):
        hashimoto_light(FULL_SIZE, cache, HEADER_HASH, 2 ** 64)

    with pytest.raises(ValueError, match=".*out of range.*"):
        hashimoto_light(FULL_SIZE, cache, HEADER_HASH, -1)

    with pytest.raises(ValueError, match=".*multiple of 128.*"):
        hashimoto_light(FULL_SIZE + 64, cache, HEADER_HASH, 0)


def test_failed_return_value():
    assert FAILED == ReturnValue(b'\x00' * 32, b'\x00' * 32, False)
    assert not FAILED.success
