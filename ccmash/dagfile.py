"""
On-disk persistence of full datasets ("DAG files").

Building a dataset costs minutes and gigabytes, so it is done once per epoch per machine and the result is kept in a
file named after the seed hash. A DAG file is an 8-byte magic number followed by exactly `file_size` bytes of dataset
content. The magic number is written last, after the content has been flushed; a file without it (e.g. from an
interrupted build) can never be mistaken for a usable one.

The magic is written in native byte order and compared as such: DAG files are local caches, not an exchange format.
"""
import logging
import os
import struct
from typing import BinaryIO, List, Optional, Tuple

import numpy as np

from .epochs import seed_hash_for_epoch
from .hash import keccak_256
from .params import DAG_MAGIC_NUM, DAG_MAGIC_NUM_SIZE, HASH_BYTES, NODE_WORDS, REVISION, WORD_DTYPE

logger = logging.getLogger(__name__)

# Outcomes of prepare()
IO_FAIL = 0  # directory or file could not be created; no file handle
IO_MEMO_SIZE_MISMATCH = 1  # a file exists but is unusable (wrong size *or* wrong magic); discard and recreate
IO_MEMO_MISMATCH = 2  # a fresh file was created at the right size; compute the dataset, then write the magic
IO_MEMO_MATCH = 3  # a valid file exists; map it, do not rebuild

_MAGIC = struct.Struct("=Q")


def mutable_name(revision: int, seed_hash: bytes) -> str:
    return "full-R%d-%s" % (revision, seed_hash[:8].hex())


def dag_path(dirname: str, seed_hash: bytes) -> str:
    return os.path.join(dirname, mutable_name(REVISION, seed_hash))


def prepare(
    dirname: str, seed_hash: bytes, file_size: int, force_create: bool = False
) -> Tuple[int, Optional[BinaryIO]]:
    """
    Find, validate, or initialize the DAG file for `seed_hash` holding `file_size` bytes of content.

    Returns one of the IO_* outcomes and, for IO_MEMO_MATCH and IO_MEMO_MISMATCH, the open (read/write) file. On a
    match the file is positioned at the start of the content; on a mismatch it is positioned at the start of the file,
    where the magic number goes once the content is in place.
    """
    try:
        os.makedirs(dirname, exist_ok=True)
    except OSError as e:
        logger.critical("Could not create the ccmash directory \"%s\": %s" % (dirname, e))
        return IO_FAIL, None

    path = dag_path(dirname, seed_hash)

    if not force_create:
        try:
            f: BinaryIO = open(path, "rb+")
        except OSError:
            pass  # no usable file; create one below

        else:
            try:
                found_size = os.fstat(f.fileno()).st_size
            except OSError as e:
                f.close()
                logger.critical("Could not query size of DAG file: \"%s\": %s" % (path, e))
                return IO_FAIL, None

            if file_size != found_size - DAG_MAGIC_NUM_SIZE:
                f.close()
                return IO_MEMO_SIZE_MISMATCH, None

            try:
                magic = f.read(DAG_MAGIC_NUM_SIZE)
            except OSError as e:
                magic = b''
                logger.critical("Could not read from DAG file: \"%s\": %s" % (path, e))

            # a wrong magic number is reported as a size mismatch too: callers treat both the same (recreate)
            if len(magic) != DAG_MAGIC_NUM_SIZE or _MAGIC.unpack(magic)[0] != DAG_MAGIC_NUM:
                f.close()
                return IO_MEMO_SIZE_MISMATCH, None

            return IO_MEMO_MATCH, f

    try:
        f = open(path, "wb+")
    except OSError as e:
        logger.critical("Could not create DAG file: \"%s\": %s" % (path, e))
        return IO_FAIL, None

    try:
        # make sure it's of the proper size
        f.truncate(file_size + DAG_MAGIC_NUM_SIZE)
        f.flush()
        f.seek(0)
    except OSError as e:
        f.close()
        logger.critical("Could not extend DAG file: \"%s\" to %d bytes. Insufficient space? %s" % (
            path, file_size + DAG_MAGIC_NUM_SIZE, e))
        return IO_FAIL, None

    return IO_MEMO_MISMATCH, f


def map_dataset(f: BinaryIO, file_size: int, writable: bool = False) -> np.ndarray:
    """Memory-map the content region of an open DAG file as a (nodes, 16) word array."""
    return np.memmap(f, dtype=WORD_DTYPE, mode="r+" if writable else "r", offset=DAG_MAGIC_NUM_SIZE,
                     shape=(file_size // HASH_BYTES, NODE_WORDS))


def write_magic(f: BinaryIO) -> None:
    f.seek(0)
    f.write(_MAGIC.pack(DAG_MAGIC_NUM))
    f.flush()


def discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        # left without its magic number, the file is rejected and recreated on next use
        logger.warning("Could not remove DAG file: \"%s\": %s" % (path, e))


def remove_stale_dags(dirname: str, epoch: int, keep: int) -> List[str]:
    """
    Delete the DAG files of all epochs up to and including `epoch - keep`, keeping the `keep` most recent ones.

    Returns the paths that were actually removed; files that could not be removed are logged and skipped.
    """
    removed = []
    seed = seed_hash_for_epoch(0)

    for ep in range(0, epoch - keep + 1):
        path = dag_path(dirname, seed)
        if os.path.isfile(path):
            logger.info("Removing stale DAG file of epoch %d: \"%s\"" % (ep, path))
            try:
                os.remove(path)
            except OSError as e:
                logger.warning("Could not remove stale DAG file: \"%s\": %s" % (path, e))
            else:
                removed.append(path)

        seed = keccak_256(seed)

    return removed
