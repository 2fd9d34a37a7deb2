from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from .cache import build_cache
from .epochs import get_cache_size, get_epoch, get_full_size, get_seedhash
from .hashimoto import FAILED, ReturnValue, hashimoto_light
from .humans import human, human_size
from .params import MIX_BYTES

logger = logging.getLogger(__name__)


class Light:
    """
    A verifier's handle: the cache of one epoch, enough to compute (slowly) the proof of work of any block in it.

    The cache is never written after construction, so a Light may be shared between threads freely.
    """

    def __init__(self, block_number: int, cache: np.ndarray, full_size: int, test: bool = False) -> None:
        self.block_number = block_number
        self.epoch = get_epoch(block_number)
        self.cache: Optional[np.ndarray] = cache
        self.full_size = full_size
        self.test = test

    def __repr__(self) -> str:
        return "Light(epoch=%d, cache=%s, full_size=%s)" % (
            self.epoch, "deleted" if self.cache is None else human_size(self.cache.nbytes), human_size(self.full_size))

    @classmethod
    def new(cls, block_number: int, test: bool = False) -> Optional[Light]:
        """Build the cache for the epoch of `block_number`; None if it does not fit in memory."""
        epoch = get_epoch(block_number)
        seed = get_seedhash(block_number)
        cache_size = get_cache_size(epoch, test)

        logger.info("Building cache for epoch %d (seed %s, %s)" % (epoch, human(seed), human_size(cache_size)))

        try:
            cache = build_cache(seed, cache_size)
        except MemoryError:
            logger.error("Out of memory while building the %s cache for epoch %d" % (human_size(cache_size), epoch))
            return None

        return cls(block_number, cache, get_full_size(epoch, test), test)

    def compute(self, header_hash: bytes, nonce: int) -> ReturnValue:
        cache = self.cache

        if cache is None or self.full_size % MIX_BYTES != 0:
            return FAILED

        try:
            result, mix_hash = hashimoto_light(self.full_size, cache, header_hash, nonce)
        except MemoryError:
            logger.error("Out of memory in light compute for epoch %d" % self.epoch)
            return FAILED

        return ReturnValue(result, mix_hash, True)

    def delete(self) -> None:
        self.cache = None


def light_new(block_number: int, test: bool = False) -> Optional[Light]:
    return Light.new(block_number, test)


def light_compute(light: Light, header_hash: bytes, nonce: int) -> ReturnValue:
    return light.compute(header_hash, nonce)


def light_delete(light: Light) -> None:
    light.delete()
