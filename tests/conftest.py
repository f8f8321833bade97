import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cloner.config import CHAINS, CloneConfig

ADDRESS = "0xdAC17F958D2ee523a2206206994597C13D831ec7"

_ENV_VARS = [
    "ETHERSCAN_API_KEY",
    "BASESCAN_API_KEY",
    "EXPLORER_API_URL_ETH",
    "EXPLORER_API_URL_BASE",
    "EXPLORER_TIMEOUT",
    "FORGE_BIN",
    "FORGE_INIT_FLAGS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project_path(tmp_path):
    return tmp_path / "cloned"


@pytest.fixture
def clone_config(project_path):
    chain = CHAINS["eth"]
    return CloneConfig(
        chain=chain,
        address=ADDRESS,
        path=project_path,
        api_key="TESTKEY",
        api_url=chain.api_base_url,
    )


def _fake_forge_init(cmd, capture_output=True, text=True):
    root = Path(cmd[2])
    for rel in ("src/Counter.sol", "test/Counter.t.sol", "script/Counter.s.sol"):
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("// placeholder\n", encoding="utf-8")
    (root / "foundry.toml").write_text("[profile.default]\n", encoding="utf-8")
    return subprocess.CompletedProcess(cmd, 0, stdout="Initialized forge project", stderr="")


@pytest.fixture
def fake_forge(monkeypatch):
    """Replace `forge init` with a function that lays out the usual skeleton."""
    run = MagicMock(side_effect=_fake_forge_init)
    monkeypatch.setattr("cloner.scaffolder.subprocess.run", run)
    return run


def make_response(payload=None, text=None):
    """Build a stand-in for requests.Response."""
    resp = MagicMock()
    if text is None:
        text = json.dumps(payload)
        resp.json.return_value = payload
    else:
        resp.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    resp.text = text
    return resp


def envelope(source_code, **extra):
    entry = {"SourceCode": source_code, "ContractName": "TetherToken", "CompilerVersion": "v0.4.18"}
    entry.update(extra)
    return {"status": "1", "message": "OK", "result": [entry]}
