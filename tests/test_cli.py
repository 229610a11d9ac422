import pytest

from psbdmp_downloader import cli
from psbdmp_downloader.client import DumpClient
from psbdmp_downloader.config import ClientConfig, DEFAULT_USER_AGENT

BASE = "https://psbdmp.ws"


def test_no_flags_prints_usage_without_network(requests_mock, capsys):
    code = cli.main([])
    out = capsys.readouterr().out
    assert code == 1
    assert "usage: psbdmp" in out
    assert requests_mock.call_count == 0


def test_only_fetch_flag_is_not_enough(requests_mock, capsys):
    assert cli.main(["--fetch"]) == 1
    assert requests_mock.call_count == 0


def test_conflicting_modes_is_usage_error(requests_mock, capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--domain", "example.com", "--email", "a@b.c"])
    assert excinfo.value.code == 2
    assert "--domain, --email" in capsys.readouterr().err
    assert requests_mock.call_count == 0


def test_search_lists_ids(requests_mock, capsys):
    requests_mock.get(f"{BASE}/api/search/pw", json={"error": 0, "data": [{"id": "abc"}]})
    client = DumpClient(ClientConfig(base_url=BASE))
    assert cli.main(["--search", "pw"], client=client) == 0
    assert capsys.readouterr().out.splitlines()[-1] == "abc"


def test_fetch_writes_to_out_dir(requests_mock, tmp_path, capsys):
    requests_mock.get(f"{BASE}/api/search/domain/example.com", json={"error": 0, "data": [{"id": "abc"}]})
    requests_mock.get(f"{BASE}/api/dump/get/abc", json={"data": "payload", "error": 0})
    client = DumpClient(ClientConfig(base_url=BASE))

    code = cli.main(["--domain", "example.com", "--fetch", "--out", str(tmp_path)], client=client)

    assert code == 0
    assert (tmp_path / "abc").read_text() == "payload"


def test_build_config_applies_overrides(monkeypatch):
    monkeypatch.delenv("PSBDMP_BASE_URL", raising=False)
    monkeypatch.delenv("PSBDMP_USER_AGENT", raising=False)
    args = cli.build_parser().parse_args(
        ["--search", "x", "--timeout", "2.5", "--user-agent", "ua/1", "--proxy", "http://127.0.0.1:7890"]
    )
    config = cli.build_config(args)
    assert config.base_url == "https://psbdmp.ws"
    assert config.timeout == 2.5
    assert config.user_agent == "ua/1"
    assert config.proxy == "http://127.0.0.1:7890"


def test_build_config_defaults(monkeypatch):
    for name in ("PSBDMP_BASE_URL", "PSBDMP_TIMEOUT", "PSBDMP_USER_AGENT", "PSBDMP_PROXY"):
        monkeypatch.delenv(name, raising=False)
    config = cli.build_config(cli.build_parser().parse_args(["--dl", "x"]))
    assert config == ClientConfig(base_url="https://psbdmp.ws", timeout=9.0, user_agent=DEFAULT_USER_AGENT)


def test_huge_since_is_reported_as_usage_error(requests_mock, capsys):
    requests_mock.post(f"{BASE}/api/dump/getbydate", json={"error": 0, "data": []})
    client = DumpClient(ClientConfig(base_url=BASE))
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--since", "1000000"], client=client)
    assert excinfo.value.code == 2
    assert "--since 1000000" in capsys.readouterr().err
    assert requests_mock.call_count == 0


@pytest.mark.parametrize("timeout", ["0", "-1"])
def test_non_positive_timeout_is_rejected(requests_mock, capsys, timeout):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--search", "x", "--timeout", timeout])
    assert excinfo.value.code == 2
    assert "--timeout" in capsys.readouterr().err
    assert requests_mock.call_count == 0


def test_build_config_keeps_explicit_small_timeout(monkeypatch):
    monkeypatch.delenv("PSBDMP_TIMEOUT", raising=False)
    args = cli.build_parser().parse_args(["--search", "x", "--timeout", "0.25"])
    assert cli.build_config(args).timeout == 0.25
