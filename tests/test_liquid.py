import json
from pathlib import Path
from typing import Any

import pytest

from src.cli.verbs import get_liquid_args
from src.config.settings import ConfigError, Settings
from src.setup import liquid
from src.setup.deployments import DeploymentResult

# well-known local devnet keys (hardhat/anvil accounts 0 and 1)
ADMIN_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
ADMIN_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class DummyEth:
    def __init__(self, nonce: int = 0, reachable: bool = True) -> None:
        self.nonce = nonce
        self.reachable = reachable
        self.nonce_requests: list[str] = []

    @property
    def block_number(self) -> int:
        if not self.reachable:
            raise ConnectionError("connection refused")
        return 1

    def get_transaction_count(self, address: str) -> int:
        self.nonce_requests.append(address)
        return self.nonce


class DummyWeb3:
    def __init__(self, **kw: Any) -> None:
        self.eth = DummyEth(**kw)


class RecordingRoutine:
    def __init__(self, signed_txs: list[str] | None = None) -> None:
        self.signed_txs = ["0xf86b01"] if signed_txs is None else signed_txs
        self.calls: list[tuple[Any, ...]] = []

    def __call__(self, params, w3, admin, user, deployment_file):
        self.calls.append((params, w3, admin, user, deployment_file))
        return DeploymentResult(deployment={"num_pairs": params.num_pairs}, signed_txs=self.signed_txs)


def _settings(tmp_path: Path) -> Settings:
    return Settings(
        rpc_url="http://127.0.0.1:9",
        deploy_env="test",
        output_dir=tmp_path / "output",
        admin_private_key=ADMIN_KEY,
        test_private_key=TEST_KEY,
    )


def _no_prompt(message: str) -> str:
    raise AssertionError(f"unexpected prompt: {message}")


def test_full_deploy_writes_first_artifact(tmp_path: Path) -> None:
    routine = RecordingRoutine()
    w3 = DummyWeb3()
    path = liquid.run_liquid(get_liquid_args(["-p", "3"]), _settings(tmp_path), routine, w3=w3, prompt=_no_prompt)

    assert path == tmp_path / "output" / "test" / "uniBootstrap0.json"
    data = json.loads(path.read_text())
    assert data["deployment"] == {"num_pairs": 3}
    assert data["signedTxs"] == ["0xf86b01"]

    params, got_w3, admin, user, deployment_file = routine.calls[0]
    assert got_w3 is w3
    assert admin.address == ADMIN_ADDRESS
    assert user.address != admin.address
    assert deployment_file is None
    assert w3.eth.nonce_requests == [ADMIN_ADDRESS]


def test_full_deploy_takes_next_index(tmp_path: Path) -> None:
    scope = tmp_path / "output" / "test"
    scope.mkdir(parents=True)
    (scope / "uniBootstrap0.json").write_text("{}")
    (scope / "uniBootstrap2.json").write_text("{}")
    routine = RecordingRoutine()

    path = liquid.run_liquid(get_liquid_args([]), _settings(tmp_path), routine, w3=DummyWeb3(), prompt=_no_prompt)

    assert path == scope / "uniBootstrap3.json"
    assert routine.calls[0][4] == scope / "uniBootstrap2.json"


def test_liquidity_only_reuses_existing(tmp_path: Path) -> None:
    scope = tmp_path / "output" / "test"
    scope.mkdir(parents=True)
    (scope / "uniBootstrap1.json").write_text("{}")

    path = liquid.run_liquid(
        get_liquid_args(["--bootstrap-only"]), _settings(tmp_path), RecordingRoutine(), w3=DummyWeb3(), prompt=_no_prompt
    )

    assert path == scope / "uniBootstrap1.json"
    assert json.loads(path.read_text())["signedTxs"] == ["0xf86b01"]
    assert sorted(p.name for p in scope.iterdir()) == ["uniBootstrap1.json"]


def test_no_signed_txs_writes_nothing(tmp_path: Path) -> None:
    path = liquid.run_liquid(
        get_liquid_args([]), _settings(tmp_path), RecordingRoutine(signed_txs=[]), w3=DummyWeb3(), prompt=_no_prompt
    )
    assert path is None
    assert not (tmp_path / "output").exists()


def test_nonzero_nonce_prompts(tmp_path: Path) -> None:
    prompts: list[str] = []
    liquid.run_liquid(
        get_liquid_args([]), _settings(tmp_path), RecordingRoutine(), w3=DummyWeb3(nonce=7), prompt=prompts.append
    )
    assert prompts == ["press Enter to continue..."]


def test_auto_accept_skips_prompt(tmp_path: Path) -> None:
    path = liquid.run_liquid(
        get_liquid_args(["-y"]), _settings(tmp_path), RecordingRoutine(), w3=DummyWeb3(nonce=7), prompt=_no_prompt
    )
    assert path is not None


def test_unreachable_rpc_exits(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    routine = RecordingRoutine()
    with pytest.raises(SystemExit) as exc:
        liquid.run_liquid(get_liquid_args([]), _settings(tmp_path), routine, w3=DummyWeb3(reachable=False))
    assert exc.value.code == 1
    assert "failed to connect to http://127.0.0.1:9." in capsys.readouterr().err
    assert routine.calls == []


def test_missing_admin_key(tmp_path: Path) -> None:
    settings = Settings(output_dir=tmp_path, test_private_key=TEST_KEY)
    with pytest.raises(ConfigError, match="ADMIN_PRIVATE_KEY"):
        liquid.run_liquid(get_liquid_args([]), settings, RecordingRoutine(), w3=DummyWeb3())


@pytest.mark.parametrize("ref", [None, "", "json", ":dumps", "json:", "json:not_there", "no_such_module_xyz:run"])
def test_load_routine_rejects_bad_refs(ref: str | None) -> None:
    with pytest.raises(ConfigError):
        liquid.load_routine(ref)


def test_load_routine_imports_callable() -> None:
    assert liquid.load_routine("json:dumps") is json.dumps


def test_main_help_without_routine(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    configured: list[str] = []
    monkeypatch.setattr(liquid, "get_script_logger", configured.append)
    monkeypatch.delenv("LIQUID_ROUTINE", raising=False)
    monkeypatch.setenv("DEPLOY_ENV", "staging")
    with pytest.raises(SystemExit) as exc:
        liquid.main(["--help"])
    assert exc.value.code == 0
    assert "staging/uniBootstrap$N.json" in capsys.readouterr().out
    # help exits before any log handlers or log files are set up
    assert configured == []
    assert not (tmp_path / "logs").exists()


def test_main_reports_missing_routine(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(liquid, "get_script_logger", lambda name: None)
    monkeypatch.delenv("LIQUID_ROUTINE", raising=False)
    assert liquid.main([]) == 1
    assert "LIQUID_ROUTINE" in capsys.readouterr().err
