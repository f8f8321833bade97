"""Command line entry point: clone a verified contract into a Foundry project."""
import argparse
import logging
from typing import List, Optional

from cloner.config import CHAINS, build_config, load_env
from cloner.errors import CloneError
from cloner.pipeline import clone_contract

logger = logging.getLogger(__name__)


def _epilog() -> str:
    lines = [
        "You can specify the chain by alias or by chain id. Supported chains:",
    ]
    for chain in CHAINS.values():
        lines.append(f"  {chain.alias:<6} id {chain.chain_id:<6} API key: {chain.api_key_env_var}")
    lines += [
        "",
        "ETHERSCAN_API_KEY is used for any chain whose own variable is unset.",
        "Keys may also be set in a .env file in the current directory.",
        "Get a key from https://etherscan.io/apis",
    ]
    return "\n".join(lines)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="contract-clone",
        description="Clone a verified contract's source code into a new Foundry project.",
        epilog=_epilog(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("chain", help="Chain alias or id, see below.")
    p.add_argument("address", help="Address of the contract to clone.")
    p.add_argument("path", help="Path to clone the contract to (must not exist).")
    p.add_argument("--env-file", default="", help="Env file to load instead of ./.env.")
    p.add_argument(
        "--purge-examples",
        action="store_true",
        help="Also remove the generated Counter files from test/ and script/.",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    load_env(args.env_file)
    try:
        config = build_config(
            args.chain,
            args.address,
            args.path,
            purge_examples=args.purge_examples,
        )
        clone_contract(config)
    except CloneError as e:
        logger.error(str(e))
        return 1

    logger.info("Contract cloning completed successfully!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
