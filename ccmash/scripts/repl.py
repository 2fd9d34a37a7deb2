import os

from ptpython.entry_points.run_ptpython import get_config_and_history_file
from ptpython.repl import PythonRepl, embed, run_config

import ccmash
import ccmash.epochs
import ccmash.humans
from ccmash.engine import Ccmash
from ccmash.__version__ import __version__

from .utils import DefaultArgumentParser, config_from_args, configure_logging_from_args


class EverythingIsNone:
    def __getattr__(self, attr: str) -> None:
        return None


def main() -> None:
    config_file, history_file = get_config_and_history_file(EverythingIsNone())

    parser = DefaultArgumentParser()
    parser.add_argument("--vi-mode", help="Vi mode", action="store_true")
    args = parser.parse_args()
    configure_logging_from_args(args)

    config = config_from_args(args)
    engine = Ccmash(config)

    print("Starting REPL, exit with exit()")
    globals = {
        'config': config,
        'engine': engine,
        'human': ccmash.humans.human,
        'computer': ccmash.humans.computer,
        'get_epoch': ccmash.epochs.get_epoch,
        'get_cache_size': ccmash.epochs.get_cache_size,
        'get_full_size': ccmash.epochs.get_full_size,
        'get_epoch_from_seedhash': ccmash.epochs.get_epoch_from_seedhash,
    }

    for attr in ccmash.__all__:
        globals[attr] = getattr(ccmash, attr)

    def configure(repl: PythonRepl) -> None:
        if os.path.exists(config_file):
            run_config(repl, config_file)
        else:
            repl.confirm_exit = False

        repl.title = "ccmash %s " % __version__

    embed(
        vi_mode=args.vi_mode,
        globals=globals,
        configure=configure,
        history_filename=history_file,
        patch_stdout=True,
    )
