import argparse
import logging
import sys

import config
from controllers.grid_controller import GridController
from models.grid_errors import GridError
from services.grid_file_service import GridFileService
from ui.console_menu import ConsoleMenu


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grid-editor", description="Console editor for (key,value) grid files.")
    parser.add_argument("file", nargs="?", default=None,
                        help=f"grid file to edit (default: {config.GRID_DEFAULT_FILE})")
    parser.add_argument("--log-level", default=config.GRID_LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], type=str.upper)
    return parser


def main(argv=None, input_func=input, output_func=print) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level, logging.WARNING),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    controller = GridController()
    try:
        file_name = GridFileService.resolve_file_name(args.file)
        controller.load_file(file_name)
    except GridError as e:
        output_func(f"Error loading file: {e}")
        return 1

    if controller.last_warning:
        output_func(controller.last_warning)
    output_func(controller.print_table())

    ConsoleMenu(controller, input_func=input_func, output_func=output_func).display_menu()
    return 0


if __name__ == "__main__":
    sys.exit(main())
