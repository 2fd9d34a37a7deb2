import os
from typing import Optional

from .params import DEFAULT_DAG_DIR


class Config:
    """
    Settings of a Ccmash engine.

    dag_dir=None keeps full datasets in memory only. datasets_on_disk is how many of the most recent epochs' DAG files
    are left alone in dag_dir when a new one is generated; 0 disables the cleanup.
    """

    def __init__(
        self,
        dag_dir: Optional[str] = DEFAULT_DAG_DIR,
        threads: Optional[int] = None,
        test: bool = False,
        caches_in_mem: int = 2,
        datasets_in_mem: int = 1,
        datasets_on_disk: int = 2,
    ):
        if caches_in_mem < 1 or datasets_in_mem < 1:
            raise ValueError("At least one cache and one dataset must be kept in memory.")

        if datasets_on_disk < 0:
            raise ValueError("datasets_on_disk must not be negative.")

        self.dag_dir = dag_dir
        self.threads = threads if threads is not None else (os.cpu_count() or 1)
        self.test = test
        self.caches_in_mem = caches_in_mem
        self.datasets_in_mem = datasets_in_mem
        self.datasets_on_disk = datasets_on_disk

    def __repr__(self) -> str:
        return "Config(dag_dir=%r, threads=%d, test=%s, caches_in_mem=%d, datasets_in_mem=%d, datasets_on_disk=%d)" % (
            self.dag_dir, self.threads, self.test, self.caches_in_mem, self.datasets_in_mem, self.datasets_on_disk)
