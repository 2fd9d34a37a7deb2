import sys
from time import time

from ccmash.full import Full
from ccmash.humans import human_size
from ccmash.light import Light

from .utils import (
    DefaultArgumentParser,
    ProgressPrinter,
    add_block_number_argument,
    config_from_args,
    configure_logging_from_args,
)


def main() -> None:
    parser = DefaultArgumentParser(description="Generate the DAG file of a block's epoch")
    add_block_number_argument(parser)
    parser.add_argument("--force", help="Regenerate the DAG file even if a valid one exists", action="store_true")
    args = parser.parse_args()
    configure_logging_from_args(args)

    config = config_from_args(args)
    start = time()

    print("Building cache")
    light = Light.new(args.block_number, config.test)
    if light is None:
        print("Could not build the cache (out of memory?)")
        sys.exit(1)

    print(f"Building {human_size(light.full_size)} DAG for epoch {light.epoch} in {config.dag_dir}"
          f" using {config.threads} threads; press Ctrl-C to abort")

    progress = ProgressPrinter()
    progress.install_sigint_handler()

    full = Full.new(light, progress, config.dag_dir, config.threads, args.force)
    if full is None:
        print("No DAG was generated")
        sys.exit(1)

    print(f"DAG ready: {full.path} ({int(time() - start):,} seconds)")
