"""End-to-end clone of a verified contract into a Foundry project."""
import logging
from pathlib import Path
from typing import List

from cloner.config import CloneConfig
from cloner.fetcher import fetch_contract_source
from cloner.materializer import decode_sources, extract_source_code, write_sources
from cloner.scaffolder import scaffold_project

logger = logging.getLogger(__name__)


def clone_contract(config: CloneConfig) -> List[Path]:
    """
    Scaffold the project, fetch the verified source and write it out.

    Nothing is cleaned up if a step fails after scaffolding.

    Returns:
        Paths of the written source files
    """
    logger.info(f"Chain: {config.chain.alias} (id {config.chain.chain_id})")
    logger.info(f"Cloning contract at address {config.address} to path {config.path}")

    scaffold_project(config)

    envelope = fetch_contract_source(config)
    source_code = extract_source_code(envelope)
    sources = decode_sources(source_code)
    written = write_sources(sources, config.src_dir)

    logger.info(f"Wrote {len(written)} source file(s) to {config.src_dir}")
    return written
