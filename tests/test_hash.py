import numpy as np

from ccmash.hash import fnv, fnv_words, keccak_256, keccak_512, keccak_512_rows, words, words_to_bytes
from ccmash.humans import human, human_size, computer


def test_keccak_is_not_sha3():
    # the empty-input digests of the original Keccak submission; NIST SHA3 gives a7ffc6f8... and a69f73cc...
    assert human(keccak_256(b'')) == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    assert human(keccak_512(b'')) == (
        "0eab42de4c3ceb9235fc91acffe746b29c29a8c366b7c60e4e67c466f36a4304"
        "c00fa9caf9d87976ba469bcbe06713b435f091ef2769fb160cdab33d3670680e")


def test_fnv():
    assert fnv(0, 0) == 0
    assert fnv(1, 0) == 0x01000193
    assert fnv(0, 7) == 7
    assert fnv(2 ** 32 - 1, 0) == 0xFEFFFE6D


def test_fnv_words_matches_fnv():
    rng = np.random.RandomState(1)
    a = rng.randint(0, 2 ** 32, size=64, dtype=np.uint64).astype(np.uint32)
    b = rng.randint(0, 2 ** 32, size=64, dtype=np.uint64).astype(np.uint32)

    expected = [fnv(int(x), int(y)) for x, y in zip(a, b)]
    assert [int(v) for v in fnv_words(a, b)] == expected


def test_keccak_512_rows():
    rows = np.arange(48, dtype=np.uint32).reshape(3, 16)
    digests = keccak_512_rows(rows)

    assert digests.shape == (3, 16)
    for row, digest in zip(rows, digests):
        assert words_to_bytes(digest) == keccak_512(words_to_bytes(row))


def test_words_are_little_endian():
    assert list(words(b'\x01\x00\x00\x00\x00\x00\x00\x02')) == [1, 2 ** 25]
    assert words_to_bytes(np.array([1, 2 ** 25], dtype=np.uint32)) == b'\x01\x00\x00\x00\x00\x00\x00\x02'


def test_humans():
    assert human(b'\x01\xab') == "01ab"
    assert computer("01ab") == b'\x01\xab'
    assert computer("0x01ab") == b'\x01\xab'

    assert human_size(1023) == "1023 B"
    assert human_size(3904) == "3.8 KiB"
    assert human_size(16776896) == "16.0 MiB"
