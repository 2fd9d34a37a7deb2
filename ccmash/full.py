from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .dagfile import (
    IO_FAIL, IO_MEMO_MATCH, IO_MEMO_MISMATCH, IO_MEMO_SIZE_MISMATCH,
    discard, map_dataset, prepare, write_magic,
)
from .dataset import ProgressCallback, build_dataset
from .epochs import seed_hash_for_epoch
from .hashimoto import FAILED, ReturnValue, hashimoto_full
from .humans import human_size
from .light import Light
from .params import DEFAULT_DAG_DIR, MIX_BYTES

logger = logging.getLogger(__name__)


class Full:
    """
    A miner's handle: the full dataset of one epoch, either in memory or mapped from its DAG file.

    A Full only reads the Light it was built from during construction; afterwards the two are independent and either
    may be deleted first.
    """

    def __init__(self, epoch: int, dataset: np.ndarray, path: Optional[str] = None) -> None:
        dataset.flags.writeable = False
        self.epoch = epoch
        self.dataset: Optional[np.ndarray] = dataset
        self.path = path

    def __repr__(self) -> str:
        return "Full(epoch=%d, dataset=%s, path=%s)" % (
            self.epoch, "deleted" if self.dataset is None else human_size(self.dataset.nbytes), self.path)

    @classmethod
    def new(
        cls,
        light: Light,
        callback: Optional[ProgressCallback] = None,
        dirname: Optional[str] = DEFAULT_DAG_DIR,
        threads: int = 1,
        force_create: bool = False,
    ) -> Optional[Full]:
        """
        Acquire the dataset for `light`'s epoch: reuse a valid DAG file from `dirname` if there is one, otherwise build
        it (and persist it there). With dirname=None the dataset is built in memory and never persisted.

        Returns None if building failed or was aborted through `callback`, or if the DAG file could not be used.
        """
        if light.cache is None:
            logger.error("Cannot build a dataset from a deleted Light handle")
            return None

        full_size = light.full_size

        if dirname is None:
            try:
                dataset = build_dataset(light.cache, full_size, callback, threads)
            except MemoryError:
                logger.error("Out of memory while building the %s dataset for epoch %d" % (
                    human_size(full_size), light.epoch))
                return None

            if dataset is None:
                logger.info("Building the dataset for epoch %d was aborted" % light.epoch)
                return None

            return cls(light.epoch, dataset)

        seed = seed_hash_for_epoch(light.epoch)

        rc, f = prepare(dirname, seed, full_size, force_create)

        if rc == IO_MEMO_SIZE_MISMATCH:
            # a DAG file of the right name but the wrong size or magic: silently start over
            logger.info("Existing DAG file for epoch %d is unusable; recreating it" % light.epoch)
            rc, f = prepare(dirname, seed, full_size, True)

            if rc != IO_MEMO_MISMATCH:
                return None

        if rc == IO_FAIL or f is None:
            return None

        path = f.name

        with f:
            if rc == IO_MEMO_MATCH:
                try:
                    dataset = map_dataset(f, full_size)
                except (OSError, ValueError) as e:
                    logger.critical("Could not map DAG file: \"%s\": %s" % (path, e))
                    return None

                logger.info("Reusing DAG file for epoch %d: \"%s\"" % (light.epoch, path))
                return cls(light.epoch, dataset, path)

            logger.info("Building the %s dataset for epoch %d into \"%s\"" % (
                human_size(full_size), light.epoch, path))

            dataset = None

            # release the mapping before discarding the file; Windows cannot remove a mapped file
            try:
                dataset = map_dataset(f, full_size, writable=True)

                if build_dataset(light.cache, full_size, callback, threads, out=dataset) is None:
                    logger.info("Building the dataset for epoch %d was aborted" % light.epoch)
                    dataset = None
                    f.close()
                    discard(path)
                    return None

                dataset.flush()

                # after the DAG is computed, we can write the magic number at the front
                write_magic(f)

            except (OSError, ValueError) as e:
                logger.critical("Could not write DAG file: \"%s\": %s" % (path, e))
                dataset = None
                f.close()
                discard(path)
                return None

            except MemoryError:
                logger.error("Out of memory while building the dataset for epoch %d" % light.epoch)
                dataset = None
                f.close()
                discard(path)
                return None

            except KeyboardInterrupt:
                dataset = None
                f.close()
                discard(path)
                raise

        return cls(light.epoch, dataset, path)

    def compute(self, header_hash: bytes, nonce: int) -> ReturnValue:
        # a single read of self.dataset: delete() may be called from another thread at any point
        dataset = self.dataset
        if dataset is None:
            return FAILED

        full_size = dataset.nbytes
        if full_size % MIX_BYTES != 0:
            return FAILED

        result, mix_hash = hashimoto_full(full_size, dataset, header_hash, nonce)
        return ReturnValue(result, mix_hash, True)

    def dag(self) -> memoryview:
        """Read-only view of the raw dataset content (the DAG file minus its magic number)."""
        dataset = self.dataset
        if dataset is None:
            raise ValueError("Full handle has been deleted")

        return memoryview(dataset.reshape(-1).view(np.uint8))

    def dag_size(self) -> int:
        dataset = self.dataset
        if dataset is None:
            return 0

        return dataset.nbytes

    def delete(self) -> None:
        # dropping the last reference to a memmap unmaps it
        self.dataset = None


def full_new(
    light: Light,
    callback: Optional[ProgressCallback] = None,
    dirname: Optional[str] = DEFAULT_DAG_DIR,
    threads: int = 1,
    force_create: bool = False,
) -> Optional[Full]:
    return Full.new(light, callback, dirname, threads, force_create)


def full_compute(full: Full, header_hash: bytes, nonce: int) -> ReturnValue:
    return full.compute(header_hash, nonce)


def full_dag(full: Full) -> memoryview:
    return full.dag()


def full_dag_size(full: Full) -> int:
    return full.dag_size()


def full_delete(full: Full) -> None:
    full.delete()
