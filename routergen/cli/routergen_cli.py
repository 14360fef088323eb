#!/usr/bin/env python3
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import routergen
from routergen.abi import exclude_coverage_functions
from routergen.input_bundle import load_modules
from routergen.settings import ROUTERGEN_TRACEBACK_LIMIT, Settings, _set_debug_mode
from routergen.warnings import warnings_filter

description = """Generate a router contract which dispatches every call to the
module implementing its function selector.

Each MODULE_JSON is a deployment artifact with an `abi` and either
`contractName` + `deployedAddress`, or `address` (the module is then
named after the file).
"""


def _parse_cli_args():
    return _parse_args(sys.argv[1:])


def _parse_args(argv):
    parser = argparse.ArgumentParser(
        description=description, formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument("input_files", help="Module deployment artifacts", nargs="+")
    parser.add_argument("--version", action="version", version=routergen.__version__)
    parser.add_argument("--name", help="Name of the router contract (default Router)")
    parser.add_argument("--template", help="Use a custom router template", dest="template_path")
    parser.add_argument(
        "--receive",
        help="Let the router accept plain ETH transfers",
        action="store_true",
        dest="can_receive_plain_eth",
    )
    parser.add_argument(
        "--diamond-compat",
        help="Add the read-only EIP-2535 (diamond) compatibility layer",
        action="store_true",
        dest="has_diamond_compat",
    )
    parser.add_argument(
        "--exclude-coverage-functions",
        help="Do not route the c_0x... functions injected by solidity-coverage",
        action="store_true",
    )
    parser.add_argument("--config", help="JSON file with router settings", dest="config_path")
    parser.add_argument("-o", help="Set the output path", dest="output_path")
    parser.add_argument(
        "-W", help="Control warnings", choices=["error", "none"], dest="warnings_control"
    )
    parser.add_argument(
        "--traceback-limit",
        help="Set the traceback limit for error messages reported by the generator",
        type=int,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        help="Turn on verbose output (debug logging and full tracebacks)",
        action="store_true",
    )
    parser.add_argument(
        "--debug", help="Check dispatch tree invariants while generating", action="store_true"
    )

    args = parser.parse_args(argv)

    if args.traceback_limit is not None:
        sys.tracebacklimit = args.traceback_limit
    elif ROUTERGEN_TRACEBACK_LIMIT is not None:
        sys.tracebacklimit = ROUTERGEN_TRACEBACK_LIMIT
    elif args.verbose:
        sys.tracebacklimit = 1000
    else:
        # Python usually defaults sys.tracebacklimit to 1000. We use a default
        # setting of zero so error printouts only include the error message.
        sys.tracebacklimit = 0

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.debug:
        _set_debug_mode(True)

    settings = get_settings(args)

    if args.verbose:
        print(f"cli specified: `{settings.as_cli().strip()}`", file=sys.stderr)

    template = None
    if args.template_path:
        template = Path(args.template_path).read_text()

    with warnings_filter(args.warnings_control):
        source_code = generate_files(args.input_files, settings, template)

    if args.output_path:
        with open(args.output_path, "w") as f:
            f.write(source_code)
    else:
        sys.stdout.write(source_code)


def get_settings(args) -> Settings:
    # explicit flags win over the config file
    settings = Settings()
    if args.config_path:
        with open(args.config_path) as fh:
            settings = Settings.from_dict(json.load(fh))

    if args.name is not None:
        settings.router_name = args.name
    if args.can_receive_plain_eth:
        settings.can_receive_plain_eth = True
    if args.has_diamond_compat:
        settings.has_diamond_compat = True
    if args.exclude_coverage_functions:
        settings.exclude_coverage_functions = True

    return settings


def generate_files(
    input_files: list[str], settings: Optional[Settings] = None, template: Optional[str] = None
) -> str:
    settings = settings or Settings()
    modules = load_modules(input_files)

    function_filter = None
    if settings.exclude_coverage_functions:
        function_filter = exclude_coverage_functions

    return routergen.generate_router(
        modules,
        router_name=settings.router_name,
        template=template,
        can_receive_plain_eth=settings.can_receive_plain_eth,
        has_diamond_compat=settings.has_diamond_compat,
        function_filter=function_filter,
    )


if __name__ == "__main__":
    _parse_args(sys.argv[1:])
