"""Verified source fetching from Etherscan-compatible explorers."""
import logging
from typing import Any, Dict
from urllib.parse import parse_qs, urlencode, urlsplit

import requests

from cloner.config import ChainConfig, CloneConfig
from cloner.errors import NetworkError, ProtocolError

logger = logging.getLogger(__name__)

STATUS_OK = "1"


def build_params(
    chain: ChainConfig,
    address: str,
    api_key: str,
    api_url: str = ""
) -> Dict[str, str]:
    """
    Query parameters for a getsourcecode call.

    Etherscan V2 endpoints serve every chain from one host, so they need
    an explicit `chainid`, unless the base URL already pins one.
    """
    params = {
        "module": "contract",
        "action": "getsourcecode",
        "address": address,
        "apikey": api_key,
    }
    base = api_url or chain.api_base_url
    if "/v2/" in base and "chainid" not in parse_qs(urlsplit(base).query):
        params = {"chainid": str(chain.chain_id), **params}
    return params


def build_url(chain: ChainConfig, address: str, api_key: str, api_url: str = "") -> str:
    base = api_url or chain.api_base_url
    query = urlencode(build_params(chain, address, api_key, base))
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{query}"


def redact_url(url: str) -> str:
    """Mask the apikey query value so the URL can be logged."""
    key = "apikey="
    idx = url.find(key)
    if idx == -1:
        return url
    start = idx + len(key)
    end = url.find("&", start)
    if end == -1:
        end = len(url)
    return url[:start] + "<redacted>" + url[end:]


def fetch_contract_source(config: CloneConfig) -> Dict[str, Any]:
    """
    Fetch the getsourcecode envelope for the configured contract.

    One GET, no retry.

    Args:
        config: Resolved clone configuration

    Returns:
        The parsed JSON envelope, unchanged
    """
    params = build_params(config.chain, config.address, config.api_key, config.api_url)
    logger.info("Fetching contract from explorer...")
    url = build_url(config.chain, config.address, config.api_key, config.api_url)
    logger.debug(f"Explorer request URL: {redact_url(url)}")

    try:
        resp = requests.get(config.api_url, params=params, timeout=config.timeout)
    except requests.RequestException as e:
        raise NetworkError(f"Request to {config.api_url} failed: {e}") from e

    body = resp.text
    try:
        data = resp.json()
    except ValueError as e:
        raise ProtocolError(f"Explorer returned invalid JSON: {body}") from e

    if not isinstance(data, dict):
        raise ProtocolError(f"Unexpected explorer payload: {body}")

    status = data.get("status")
    if status is not None and str(status) != STATUS_OK:
        message = data.get("message") or "Unknown error"
        result = data.get("result") or "No additional info"
        raise ProtocolError(f"Explorer API error: {message} - {result}")

    return data
