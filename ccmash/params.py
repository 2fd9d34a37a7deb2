import os

import numpy as np

# The on-disk DAG format revision; part of every DAG filename, so bumping it orphans all existing files.
REVISION = 23

WORD_BYTES = 4  # bytes in word
DATASET_BYTES_INIT = 2 ** 30  # bytes in dataset at genesis
DATASET_BYTES_GROWTH = 2 ** 23  # dataset growth per epoch
CACHE_BYTES_INIT = 2 ** 24  # bytes in cache at genesis
CACHE_BYTES_GROWTH = 2 ** 17  # cache growth per epoch
EPOCH_LENGTH = 30000  # blocks per epoch
MIX_BYTES = 128  # width of mix
HASH_BYTES = 64  # hash length in bytes
DATASET_PARENTS = 256  # number of parents of each dataset element
CACHE_ROUNDS = 3  # number of rounds in cache production
ACCESSES = 64  # number of accesses in hashimoto loop
FNV_PRIME = 0x01000193

NODE_WORDS = HASH_BYTES // WORD_BYTES
MIX_WORDS = MIX_BYTES // WORD_BYTES
MIX_NODES = MIX_BYTES // HASH_BYTES

# All words are little-endian regardless of the host, so caches and datasets are the same bytes everywhere. The DAG
# magic number on the other hand is written in native order: a DAG file is only ever read by the machine that wrote it.
WORD_DTYPE = np.dtype("<u4")

DAG_MAGIC_NUM_SIZE = 8
DAG_MAGIC_NUM = 0xFEE1DEADBADDCAFE

# Tiny sizes for test mode. They go through the same prime adjustment as the real ones, which makes every code path
# reachable in a fraction of a second: 61 cache nodes, 502 dataset nodes at epoch 0.
TEST_CACHE_BYTES_INIT = 2 ** 12
TEST_CACHE_BYTES_GROWTH = 2 ** 7
TEST_DATASET_BYTES_INIT = 2 ** 15
TEST_DATASET_BYTES_GROWTH = 2 ** 10

# 2048 epochs is ~170 years of 3s blocks; lookups by seed hash don't search further than that.
MAX_EPOCH = 2048

DEFAULT_DAG_DIR = os.path.join(os.path.expanduser("~"), ".ccmash")
