"""Decode explorer SourceCode payloads and write them to disk."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from cloner.config import SINGLE_FILE_NAME
from cloner.errors import FilesystemError, ProtocolError

logger = logging.getLogger(__name__)


def extract_source_code(envelope: Dict[str, Any]) -> str:
    """
    Pull result[0].SourceCode out of a getsourcecode envelope.

    Args:
        envelope: Parsed explorer response

    Returns:
        The SourceCode string (never empty)
    """
    result = envelope.get("result")
    if not isinstance(result, list) or not result:
        raise ProtocolError("No result array in response")

    entry = result[0]
    if not isinstance(entry, dict) or not isinstance(entry.get("SourceCode"), str):
        raise ProtocolError("No source code in response")

    if entry.get("ContractName"):
        logger.info(
            f"Contract: {entry['ContractName']} "
            f"(compiler {entry.get('CompilerVersion') or 'unknown'})"
        )

    source_code = entry["SourceCode"]
    if not source_code:
        raise ProtocolError(
            "Contract source code is empty. The contract might not be verified on the explorer."
        )
    return source_code


def _unwrap_outer_braces(source_code: str) -> Optional[Any]:
    if not (source_code.startswith("{{") and source_code.endswith("}}")):
        return None
    try:
        return json.loads(source_code[1:-1])
    except json.JSONDecodeError:
        return None


def _parse_standard_json(source_code: str) -> Dict[str, Any]:
    # Explorers double-wrap standard-json input as {{ ... }}: either only the
    # outermost pair, or every brace in the document. Stripping the outer
    # pair wins whenever the remainder parses; replacing every doubled brace
    # is only the fallback.
    contract = None
    if "{{" in source_code:
        contract = _unwrap_outer_braces(source_code)
        if contract is None:
            source_code = source_code.replace("{{", "{").replace("}}", "}")
    if contract is None:
        try:
            contract = json.loads(source_code)
        except json.JSONDecodeError as e:
            raise ProtocolError(f"Malformed multi-file source payload: {e}") from e
    if not isinstance(contract, dict):
        raise ProtocolError("Multi-file source payload is not an object")
    return contract


def decode_sources(source_code: str) -> Dict[str, str]:
    """
    Turn a SourceCode field into a mapping of relative path -> content.

    A payload starting with '{' is standard-json input; anything else is a
    single flattened file.
    """
    if not source_code:
        raise ProtocolError(
            "Contract source code is empty. The contract might not be verified on the explorer."
        )

    if not source_code.startswith("{"):
        return {SINGLE_FILE_NAME: source_code}

    contract = _parse_standard_json(source_code)
    sources = contract.get("sources")
    if not isinstance(sources, dict):
        raise ProtocolError("No sources object in contract")

    files: Dict[str, str] = {}
    for key, value in sources.items():
        content = value.get("content") if isinstance(value, dict) else None
        if not isinstance(content, str):
            logger.warning(f"Skipping {key}: no content")
            continue
        files[key] = content
    return files


def _split_source_path(key: str) -> List[str]:
    parts = [p for p in key.split("/") if p and p != "."]
    if not parts:
        raise ProtocolError(f"Empty source path: '{key}'")
    if ".." in parts:
        raise ProtocolError(f"Source path escapes the project: '{key}'")
    return parts


def write_sources(sources: Dict[str, str], src_dir: Path) -> List[Path]:
    """
    Write each source file under `src_dir`, creating nested directories.

    Args:
        sources: Relative path -> content
        src_dir: Project source directory

    Returns:
        Paths of written files
    """
    written: List[Path] = []
    for key, content in sources.items():
        parts = _split_source_path(key)
        file_path = src_dir

        try:
            for part in parts[:-1]:
                file_path = file_path / part
                file_path.mkdir(parents=True, exist_ok=True)
                logger.debug(f"Created directory: {file_path}")

            file_path = file_path / parts[-1]
            logger.info(f"Creating file: {file_path}")
            file_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise FilesystemError(f"Failed to write {file_path}: {e}") from e
        written.append(file_path)
    return written
