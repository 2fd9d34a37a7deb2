import os
import threading

import pytest

from ccmash import Ccmash, Config, Light
from ccmash.dagfile import dag_path
from ccmash.epochs import seed_hash_for_epoch
from ccmash.hash import keccak_256

HEADER_HASH = keccak_256(b'ccmash test header')


def get_engine(tmp_path, **kwargs):
    return Ccmash(Config(dag_dir=str(tmp_path), threads=2, test=True, **kwargs))


def test_config():
    config = Config(threads=None)
    assert config.threads == (os.cpu_count() or 1)
    assert not config.test

    with pytest.raises(ValueError):
        Config(caches_in_mem=0)

    with pytest.raises(ValueError):
        Config(datasets_on_disk=-1)


def test_light_is_cached_per_epoch(tmp_path):
    engine = get_engine(tmp_path)

    assert engine.light(0) is engine.light(29999)
    assert engine.light(0) is not engine.light(30000)


def test_light_cache_is_lru(tmp_path):
    engine = get_engine(tmp_path, caches_in_mem=2)

    epoch_0 = engine.light(0)
    engine.light(30000)
    engine.light(0)  # now the most recently used
    engine.light(60000)

    assert list(engine.lights) == [0, 2]
    assert epoch_0.cache is not None
    assert engine.light(0) is epoch_0


def test_evicted_handles_are_deleted(tmp_path):
    engine = get_engine(tmp_path, caches_in_mem=1)

    epoch_0 = engine.light(0)
    engine.light(30000)

    assert list(engine.lights) == [1]
    assert epoch_0.cache is None


def test_compute(tmp_path):
    engine = get_engine(tmp_path)
    expected = Light.new(0, test=True).compute(HEADER_HASH, 7)

    assert engine.compute(0, HEADER_HASH, 7) == expected

    full = engine.full(0)
    assert full is not None
    assert engine.full(100) is full

    assert engine.compute(0, HEADER_HASH, 7) == expected


def test_full_in_memory_only():
    engine = Ccmash(Config(dag_dir=None, threads=1, test=True))

    full = engine.full(0)
    assert full.path is None
    assert engine.compute(0, HEADER_HASH, 7) == full.compute(HEADER_HASH, 7)


def test_stale_dags_are_removed(tmp_path):
    engine = get_engine(tmp_path, datasets_in_mem=1, datasets_on_disk=1)

    epoch_0 = engine.full(0)
    engine.full(30000)

    assert list(engine.fulls) == [1]
    assert epoch_0.dataset is None
    assert not os.path.exists(dag_path(str(tmp_path), seed_hash_for_epoch(0)))
    assert os.path.exists(dag_path(str(tmp_path), seed_hash_for_epoch(1)))


def test_stale_dag_removal_disabled(tmp_path):
    engine = get_engine(tmp_path, datasets_on_disk=0)

    engine.full(0)
    engine.full(30000)

    assert os.path.exists(dag_path(str(tmp_path), seed_hash_for_epoch(0)))
    assert os.path.exists(dag_path(str(tmp_path), seed_hash_for_epoch(1)))


def test_concurrent_full_builds_once(tmp_path):
    engine = get_engine(tmp_path)
    reported = []

    def callback(percent):
        reported.append(percent)
        return False

    fulls = []

    def worker():
        fulls.append(engine.full(0, callback))

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert reported.count(100) == 1
    assert len(fulls) == 2
    assert fulls[0] is not None
    assert fulls[0] is fulls[1]


def test_concurrent_compute(tmp_path):
    engine = get_engine(tmp_path)
    expected = [Light.new(0, test=True).compute(HEADER_HASH, nonce) for nonce in range(4)]

    results = []

    def worker(i):
        if i == 0:
            engine.full(0)
        results.append([engine.compute(0, HEADER_HASH, nonce) for nonce in range(4)])

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results == [expected] * 4
    assert list(engine.lights) == [0]


def test_stale_dag_removal_failure(tmp_path, monkeypatch):
    engine = get_engine(tmp_path, datasets_on_disk=1)
    engine.full(0)

    def failing_remove(path):
        raise PermissionError("file is in use")

    monkeypatch.setattr("ccmash.dagfile.os.remove", failing_remove)

    assert engine.full(30000) is not None
    assert os.path.exists(dag_path(str(tmp_path), seed_hash_for_epoch(0)))
