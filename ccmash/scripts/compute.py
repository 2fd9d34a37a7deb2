import sys

from ccmash.engine import Ccmash
from ccmash.humans import human

from .utils import (
    DefaultArgumentParser,
    add_block_number_argument,
    config_from_args,
    configure_logging_from_args,
    parse_header_hash,
    parse_nonce,
)


def main() -> None:
    parser = DefaultArgumentParser(description="Compute the proof of work of a block")
    add_block_number_argument(parser)
    parser.add_argument("header_hash", help="Header hash (hex, 32 bytes)", type=parse_header_hash)
    parser.add_argument("nonce", help="Nonce (decimal, or hex with 0x prefix)", type=parse_nonce)
    parser.add_argument("--full", help="Use (and if needed, generate) the full dataset", action="store_true")
    args = parser.parse_args()
    configure_logging_from_args(args)

    engine = Ccmash(config_from_args(args))

    if args.full and engine.full(args.block_number) is None:
        print("Could not get the full dataset")
        sys.exit(1)

    ret = engine.compute(args.block_number, args.header_hash, args.nonce)
    if not ret.success:
        print("Computation failed")
        sys.exit(1)

    print(f"Result:   {human(ret.result)}")
    print(f"Mix hash: {human(ret.mix_hash)}")
