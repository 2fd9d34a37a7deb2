import argparse
import logging
import signal
import sys
import tempfile
import threading
from pathlib import Path
from time import time
from typing import Any, Callable

from ccmash.config import Config
from ccmash.humans import computer
from ccmash.params import DEFAULT_DAG_DIR


class DefaultArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.add_argument("--dag-dir", help="Directory for DAG files (default: %(default)s)", default=DEFAULT_DAG_DIR)
        self.add_argument("--threads", help="Number of threads used to build datasets (default: all cores)", type=int)
        self.add_argument("--test-mode", help="Use the tiny test-mode cache and dataset sizes", action="store_true")
        self.add_argument("--log-to-file", help="Log to file", action="store_true")
        self.add_argument("--log-to-stdout", help="Log to stdout", action="store_true")


def add_block_number_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("block_number", help="Block number", type=int)


def config_from_args(args: Any) -> Config:
    return Config(dag_dir=args.dag_dir, threads=args.threads, test=args.test_mode)


def parse_header_hash(s: str) -> bytes:
    try:
        header_hash = computer(s)
    except ValueError:
        raise argparse.ArgumentTypeError("not a hex string: %s" % s)

    if len(header_hash) != 32:
        raise argparse.ArgumentTypeError("header hash must be 32 bytes, got %d" % len(header_hash))

    return header_hash


def parse_nonce(s: str) -> int:
    try:
        nonce = int(s, 0)
    except ValueError:
        raise argparse.ArgumentTypeError("not a number: %s" % s)

    if not (0 <= nonce < 2 ** 64):
        raise argparse.ArgumentTypeError("nonce out of range: %s" % s)

    return nonce


class ProgressPrinter:
    """
    Dataset build callback that prints progress, and aborts the build once Ctrl-C has been pressed.
    """

    def __init__(self) -> None:
        self.interrupted = threading.Event()
        self.start = time()

    def install_sigint_handler(self) -> Callable:
        return signal.signal(signal.SIGINT, lambda signum, frame: self.interrupted.set())

    def __call__(self, percent: int) -> bool:
        if self.interrupted.is_set():
            print("Interrupted; aborting")
            return True

        print(f"{percent:3d}% ({int(time() - self.start):,} seconds)")
        return False


def configure_logging_for_file() -> None:
    log_filename = Path(tempfile.gettempdir()) / ("ccmash-%s.log" % int(time()))
    print('Logging to file: %s' % log_filename)
    FORMAT = '%(asctime)s %(message)s'
    logging.basicConfig(format=FORMAT, stream=open(log_filename, "w"), level=logging.INFO)


def configure_logging_for_stdout() -> None:
    FORMAT = "%(asctime)s %(message)s"
    logging.basicConfig(format=FORMAT, stream=sys.stdout, level=logging.INFO)


def configure_logging_from_args(args: Any) -> None:
    if args.log_to_file:
        configure_logging_for_file()

    if args.log_to_stdout:
        configure_logging_for_stdout()
