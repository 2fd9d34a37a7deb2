import cProfile
from time import time

from ccmash.cache import build_cache
from ccmash.dataset import build_dataset
from ccmash.epochs import get_cache_size, get_full_size, seed_hash_for_epoch

# Profile building the first 1/64th of the epoch 0 dataset (16 MiB) from the real cache.
#
#    python -m pytest performance/profile_dataset.py -s
#
# The cache build alone is single threaded and dominated by keccak calls; the dataset build should scale with
# the number of threads until the cores are saturated.

THREADS = 4


def steps():
    start = time()
    cache = build_cache(seed_hash_for_epoch(0), get_cache_size(0))
    print("Cache built in %.1f seconds" % (time() - start))

    size = get_full_size(0) // 64 // 128 * 128

    for threads in [1, THREADS]:
        start = time()
        build_dataset(cache, size, threads=threads)
        print("%d bytes of dataset built with %d threads in %.1f seconds" % (size, threads, time() - start))


def test_dataset():

    with cProfile.Profile() as pr:
        pr.runcall(steps)
        pr.print_stats(sort='cumulative')


if __name__ == '__main__':
    steps()
