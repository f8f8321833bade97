"""Configuration constants and chain resolution for the cloner."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import find_dotenv, load_dotenv
from web3 import Web3

from cloner.errors import MissingApiKeyError, UsageError

logger = logging.getLogger(__name__)

# Scaffolding (FORGE_BIN / FORGE_INIT_FLAGS env vars override the defaults)
DEFAULT_FORGE_BIN: str = "forge"
DEFAULT_FORGE_INIT_FLAGS: str = "--no-commit"
PLACEHOLDER_TOKEN: str = "Counter"
EXAMPLE_DIRS: List[str] = ["test", "script"]

# Etherscan V2 serves every chain from one host, selected by `chainid`
ETHERSCAN_V2_API: str = "https://api.etherscan.io/v2/api"
FALLBACK_API_KEY_ENV: str = "ETHERSCAN_API_KEY"

# Materializing
SOURCE_DIR: str = "src"
SINGLE_FILE_NAME: str = "Single.sol"


@dataclass(frozen=True)
class ChainConfig:
    alias: str
    api_base_url: str
    api_key_env_var: str
    chain_id: int


CHAINS: Dict[str, ChainConfig] = {
    "eth": ChainConfig(
        alias="eth",
        api_base_url=ETHERSCAN_V2_API,
        api_key_env_var="ETHERSCAN_API_KEY",
        chain_id=1,
    ),
    "base": ChainConfig(
        alias="base",
        api_base_url=ETHERSCAN_V2_API,
        api_key_env_var="BASESCAN_API_KEY",
        chain_id=8453,
    ),
}

_CHAINS_BY_ID: Dict[int, ChainConfig] = {c.chain_id: c for c in CHAINS.values()}


@dataclass(frozen=True)
class CloneConfig:
    chain: ChainConfig
    address: str
    path: Path
    api_key: str
    api_url: str
    timeout: Optional[float] = None
    purge_examples: bool = False

    @property
    def src_dir(self) -> Path:
        return self.path / SOURCE_DIR


def resolve_chain(key: str) -> ChainConfig:
    """
    Map a chain alias or chain id to its explorer configuration.

    Args:
        key: Alias ("eth", "base"; case-insensitive) or the numeric id of
            one of the configured chains ("1", "8453")

    Returns:
        The matching ChainConfig
    """
    raw = key
    key = (key or "").strip().lower()
    chain = CHAINS.get(key)
    if chain is None and key.isdigit():
        chain = _CHAINS_BY_ID.get(int(key))
    if chain is None:
        supported = ", ".join(f"{c.alias} ({c.chain_id})" for c in CHAINS.values())
        raise UsageError(f"Invalid chain '{raw}'. Supported: {supported}")
    return chain


def api_url_for(chain: ChainConfig) -> str:
    """Explorer base URL, honouring EXPLORER_API_URL_<ALIAS> overrides."""
    override = os.getenv(f"EXPLORER_API_URL_{chain.alias.upper()}", "").strip()
    return override or chain.api_base_url


def forge_init_command(path: Path) -> List[str]:
    """Command line that initializes a Foundry project at `path`."""
    forge_bin = os.getenv("FORGE_BIN", "").strip() or DEFAULT_FORGE_BIN
    flags = os.getenv("FORGE_INIT_FLAGS", DEFAULT_FORGE_INIT_FLAGS).split()
    return [forge_bin, "init", str(path), *flags]


def load_env(env_file: Optional[str] = None) -> None:
    """Load variables from a dotfile without overriding the environment."""
    if env_file:
        env_path = Path(env_file).expanduser()
        if not env_path.is_file():
            logger.warning(f"Env file not found: {env_path}")
            return
        load_dotenv(env_path, override=False)
        return

    # search from the working directory, not from this module
    found = find_dotenv(usecwd=True)
    if found:
        load_dotenv(found, override=False)


def _read_timeout() -> Optional[float]:
    raw = os.getenv("EXPLORER_TIMEOUT", "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise UsageError(f"EXPLORER_TIMEOUT must be a number of seconds, got '{raw}'")


def build_config(
    chain: str,
    address: str,
    path: str,
    purge_examples: bool = False
) -> CloneConfig:
    """
    Resolve everything the pipeline needs before touching disk or network.

    Args:
        chain: Chain alias or id from the command line
        address: Contract address
        path: Target project directory
        purge_examples: Also clean generated test/script placeholders

    Returns:
        Frozen CloneConfig
    """
    chain_cfg = resolve_chain(chain)

    # one Etherscan V2 key is valid for every chain
    api_key = (
        os.getenv(chain_cfg.api_key_env_var, "").strip()
        or os.getenv(FALLBACK_API_KEY_ENV, "").strip()
    )
    if not api_key:
        raise MissingApiKeyError(
            f"{chain_cfg.api_key_env_var} environment variable not set"
        )

    if not Web3.is_address(address):
        raise UsageError(f"Invalid contract address: {address}")

    return CloneConfig(
        chain=chain_cfg,
        address=Web3.to_checksum_address(address),
        path=Path(path),
        api_key=api_key,
        api_url=api_url_for(chain_cfg),
        timeout=_read_timeout(),
        purge_examples=purge_examples,
    )
