from ccmash.epochs import get_cache_size, get_epoch, get_full_size, get_seedhash
from ccmash.humans import human, human_size

from .utils import DefaultArgumentParser, add_block_number_argument, configure_logging_from_args


def main() -> None:
    parser = DefaultArgumentParser(description="Show the epoch parameters of a block")
    add_block_number_argument(parser)
    args = parser.parse_args()
    configure_logging_from_args(args)

    epoch = get_epoch(args.block_number)
    cache_size = get_cache_size(epoch, args.test_mode)
    full_size = get_full_size(epoch, args.test_mode)

    print(f"Epoch:        {epoch}")
    print(f"Seed hash:    {human(get_seedhash(args.block_number))}")
    print(f"Cache size:   {cache_size:,} bytes ({human_size(cache_size)})")
    print(f"Dataset size: {full_size:,} bytes ({human_size(full_size)})")
