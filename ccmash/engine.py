import logging
import threading
from collections import OrderedDict
from typing import Optional

from .config import Config
from .dagfile import remove_stale_dags
from .dataset import ProgressCallback
from .epochs import get_epoch
from .full import Full
from .hashimoto import FAILED, ReturnValue
from .light import Light

logger = logging.getLogger(__name__)


class Ccmash:
    """
    Keeps the Light and Full handles of the most recently used epochs around, so that callers can simply ask for "the
    proof of work of block N" without managing handles themselves.

    Safe to use from several threads. Builds of the same kind are serialized (two threads asking for the same new epoch
    result in one build); lookups of already available handles never wait for a build.
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        self.config = config if config is not None else Config()

        self.lights: OrderedDict[int, Light] = OrderedDict()
        self.fulls: OrderedDict[int, Full] = OrderedDict()

        self.lock = threading.Lock()  # guards self.lights and self.fulls
        self.light_build_lock = threading.Lock()
        self.full_build_lock = threading.Lock()

    def _get(self, handles: OrderedDict, epoch: int):
        with self.lock:
            handle = handles.get(epoch)
            if handle is not None:
                handles.move_to_end(epoch)
            return handle

    def _put(self, handles: OrderedDict, epoch: int, handle, limit: int) -> None:
        with self.lock:
            handles[epoch] = handle
            handles.move_to_end(epoch)

            while len(handles) > limit:
                evicted_epoch, evicted = handles.popitem(last=False)
                logger.info("Evicting %r (epoch %d)" % (evicted, evicted_epoch))
                evicted.delete()

    def light(self, block_number: int) -> Optional[Light]:
        epoch = get_epoch(block_number)

        light = self._get(self.lights, epoch)
        if light is not None:
            return light

        with self.light_build_lock:
            light = self._get(self.lights, epoch)
            if light is not None:
                return light

            light = Light.new(block_number, self.config.test)
            if light is None:
                return None

            self._put(self.lights, epoch, light, self.config.caches_in_mem)

        return light

    def full(self, block_number: int, callback: Optional[ProgressCallback] = None) -> Optional[Full]:
        epoch = get_epoch(block_number)

        full = self._get(self.fulls, epoch)
        if full is not None:
            return full

        with self.full_build_lock:
            full = self._get(self.fulls, epoch)
            if full is not None:
                return full

            light = self.light(block_number)
            if light is None:
                return None

            full = Full.new(light, callback, self.config.dag_dir, self.config.threads)
            if full is None:
                return None

            self._put(self.fulls, epoch, full, self.config.datasets_in_mem)

            if self.config.dag_dir is not None and self.config.datasets_on_disk > 0:
                remove_stale_dags(self.config.dag_dir, epoch, self.config.datasets_on_disk)

        return full

    def compute(self, block_number: int, header_hash: bytes, nonce: int) -> ReturnValue:
        """Proof of work of a block: from the dataset if it is in memory already, from the cache otherwise."""
        epoch = get_epoch(block_number)

        full = self._get(self.fulls, epoch)
        if full is not None:
            return full.compute(header_hash, nonce)

        light = self.light(block_number)
        if light is None:
            return FAILED

        return light.compute(header_hash, nonce)
