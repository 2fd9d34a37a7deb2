import threading
from queue import Empty, Queue
from threading import Thread
from typing import Callable, List, Optional

import numpy as np

from .hash import fnv_words, keccak_512_rows
from .params import DATASET_PARENTS, HASH_BYTES, MIX_BYTES, NODE_WORDS, WORD_DTYPE

# The dataset is computed in chunks of at most this many nodes; each chunk is one vectorised pass over the parents.
CHUNK_LEN_MAX = 4096

ProgressCallback = Callable[[int], bool]


def calc_dataset_items(cache, indices):
    """Compute the dataset nodes at `indices`; each node depends on its own index and on the cache only."""
    n = len(cache)
    indices = np.asarray(indices, dtype=np.uint32)

    # initialize the mix
    mix = cache[indices % n]
    mix[:, 0] ^= indices
    mix = keccak_512_rows(mix)

    # fnv it with a lot of random cache nodes based on i
    for j in range(DATASET_PARENTS):
        parents = fnv_words(indices ^ j, mix[:, j % NODE_WORDS]) % n
        mix = fnv_words(mix, cache[parents])

    return keccak_512_rows(mix)


def calc_dataset_item(cache, index):
    return calc_dataset_items(cache, [index])[0]


class DatasetBuilder:
    """
    Fills a pre-sized (count, 16) buffer with dataset nodes, using a pool of worker threads.

    Chunks of the index range are handed out through a queue; every worker writes only into the slice of the chunk it
    took, so no two workers ever touch the same node. The progress callback is the only way to stop a build: it is
    called (under a lock, from whichever thread finished the work) for every new whole percentage point, and a truthy
    return value makes all workers stop after their current chunk.
    """

    def __init__(
        self,
        cache: np.ndarray,
        out: np.ndarray,
        callback: Optional[ProgressCallback] = None,
        threads: int = 1,
        chunk_len: Optional[int] = None,
    ) -> None:
        self.cache = cache
        self.out = out
        self.callback = callback
        self.threads = max(1, threads)
        self.count = len(out)
        self.chunk_len = chunk_len or max(1, min(CHUNK_LEN_MAX, self.count // 100))

        self.chunks: Queue[int] = Queue()
        self.lock = threading.Lock()
        self.aborted = threading.Event()
        self.done = 0
        self.last_percent = 0
        self.errors: List[BaseException] = []

    def report(self, percent: int) -> None:
        if self.callback is not None and self.callback(percent):
            self.aborted.set()

    def run(self) -> bool:
        """Returns True iff every node was computed; False if the callback asked us to stop."""
        self.report(0)
        if self.aborted.is_set():
            return False

        for start in range(0, self.count, self.chunk_len):
            self.chunks.put(start)

        if self.threads == 1:
            self.work()

        else:
            workers = [Thread(target=self.work, name="DatasetBuilder-%d" % i, daemon=True)
                       for i in range(self.threads)]

            for worker in workers:
                worker.start()

            try:
                for worker in workers:
                    worker.join()

            except KeyboardInterrupt:
                self.aborted.set()
                for worker in workers:
                    worker.join()
                raise

        if self.errors:
            raise self.errors[0]

        return not self.aborted.is_set()

    def work(self) -> None:
        while not self.aborted.is_set():
            try:
                start = self.chunks.get_nowait()
            except Empty:
                return

            stop = min(start + self.chunk_len, self.count)

            try:
                self.out[start:stop] = calc_dataset_items(self.cache, np.arange(start, stop, dtype=np.uint32))

            except BaseException as e:
                # handed to the thread that called run(), which re-raises it
                with self.lock:
                    self.errors.append(e)
                self.aborted.set()
                return

            self.chunk_done(stop - start)

    def chunk_done(self, nodes: int) -> None:
        with self.lock:
            self.done += nodes
            percent = self.done * 100 // self.count

            if percent > self.last_percent:
                self.last_percent = percent
                self.report(percent)


def build_dataset(
    cache: np.ndarray,
    dataset_size: int,
    callback: Optional[ProgressCallback] = None,
    threads: int = 1,
    out: Optional[np.ndarray] = None,
) -> Optional[np.ndarray]:
    """
    Expand `cache` into the full dataset of `dataset_size` bytes.

    `out` may be given to build directly into existing storage (e.g. a writable memmap of the DAG file). Returns the
    filled array, or None if the build was aborted through `callback`. The content does not depend on `threads`.
    """
    if dataset_size <= 0 or dataset_size % MIX_BYTES != 0:
        raise ValueError("Dataset size %d is not a positive multiple of %d." % (dataset_size, MIX_BYTES))

    count = dataset_size // HASH_BYTES

    if out is None:
        out = np.empty((count, NODE_WORDS), dtype=WORD_DTYPE)

    elif out.shape != (count, NODE_WORDS):
        raise ValueError("Output buffer has shape %s, expected %s." % (out.shape, (count, NODE_WORDS)))

    if not DatasetBuilder(cache, out, callback, threads).run():
        return None

    return out
