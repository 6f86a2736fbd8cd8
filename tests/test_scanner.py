"""End-to-end pipeline tests with a stand-in resolver binary."""

from __future__ import annotations

import sys

import pytest

from depscan.config import Config
from depscan.exceptions import ConfigError, ParseError, ResolutionError
from depscan.formatters import render
from depscan.resolver import ModuleResolver
from depscan.scanner import collect_dependencies, collect_dependencies_with_config


def _resolver(oracle) -> ModuleResolver:
    return ModuleResolver([sys.executable, str(oracle)], timeout=30)


class TestCollectDependencies:
    def test_scenario(self, scenario):
        cfg = Config(go_mod_path=str(scenario["go_mod"]))
        deps = collect_dependencies_with_config(cfg, resolver=_resolver(scenario["oracle"]))
        assert [(d.path, d.version, d.indirect, d.license, d.license_file) for d in deps] == [
            ("example.com/a", "v1.0.0", False, "MIT", "LICENSE"),
            ("example.com/b", "v2.0.0", True, "UNKNOWN", ""),
        ]
        assert deps[0].dir == str(scenario["mod_a"])

    def test_repeat_runs_identical(self, scenario):
        cfg = Config(go_mod_path=str(scenario["go_mod"]))
        first = collect_dependencies_with_config(cfg, resolver=_resolver(scenario["oracle"]))
        second = collect_dependencies_with_config(cfg, resolver=_resolver(scenario["oracle"]))
        assert render(first, "json") == render(second, "json")
        assert render(first, "text") == render(second, "text")

    def test_workers(self, scenario):
        cfg = Config(go_mod_path=str(scenario["go_mod"]), workers=4)
        deps = collect_dependencies_with_config(cfg, resolver=_resolver(scenario["oracle"]))
        assert [d.license for d in deps] == ["MIT", "UNKNOWN"]

    def test_license_names_from_config(self, scenario):
        (scenario["mod_b"] / "NOTICE").write_text("Apache License\nVersion 2.0, January 2004\n")
        cfg = Config(go_mod_path=str(scenario["go_mod"]), license_names=("NOTICE", "LICENSE"))
        deps = collect_dependencies_with_config(cfg, resolver=_resolver(scenario["oracle"]))
        assert [(d.license, d.license_file) for d in deps] == [
            ("MIT", "LICENSE"),
            ("Apache-2.0", "NOTICE"),
        ]

    def test_env_binary(self, scenario, monkeypatch):
        monkeypatch.setenv("DEPSCAN_GO_BINARY", str(scenario["oracle"]))
        deps = collect_dependencies(scenario["go_mod"])
        assert [d.path for d in deps] == ["example.com/a", "example.com/b"]

    def test_parse_error_stops_before_resolver(self, tmp_path):
        go_mod = tmp_path / "go.mod"
        go_mod.write_text("go 1.22\n")
        marker = tmp_path / "ran"
        script = tmp_path / "oracle.py"
        script.write_text(f"open({str(marker)!r}, 'w').close()\n")
        cfg = Config(go_mod_path=str(go_mod))
        with pytest.raises(ParseError):
            collect_dependencies_with_config(
                cfg, resolver=ModuleResolver([sys.executable, str(script)])
            )
        assert not marker.exists()

    def test_missing_go_mod(self, tmp_path):
        with pytest.raises(ParseError, match="failed to read"):
            collect_dependencies_with_config(Config(go_mod_path=str(tmp_path / "go.mod")))

    def test_resolver_failure(self, scenario, make_oracle):
        failing = make_oracle([], exit_code=1, stderr="go: missing go.sum entry")
        cfg = Config(go_mod_path=str(scenario["go_mod"]))
        with pytest.raises(ResolutionError, match="missing go.sum entry"):
            collect_dependencies_with_config(cfg, resolver=_resolver(failing))


class TestConfigFromEnv:
    def test_defaults(self, monkeypatch):
        for name in ("DEPSCAN_GO_BINARY", "DEPSCAN_RESOLVE_TIMEOUT", "DEPSCAN_WORKERS"):
            monkeypatch.delenv(name, raising=False)
        cfg = Config.from_env("x/go.mod")
        assert (cfg.go_mod_path, cfg.go_binary, cfg.resolve_timeout, cfg.workers) == (
            "x/go.mod", "go", 300.0, 1,
        )

    def test_numeric_values(self, monkeypatch):
        monkeypatch.setenv("DEPSCAN_RESOLVE_TIMEOUT", "12.5")
        monkeypatch.setenv("DEPSCAN_WORKERS", " 8 ")
        cfg = Config.from_env()
        assert cfg.resolve_timeout == 12.5
        assert cfg.workers == 8

    def test_workers_floor(self, monkeypatch):
        monkeypatch.setenv("DEPSCAN_WORKERS", "0")
        assert Config.from_env().workers == 1

    def test_bad_workers(self, monkeypatch):
        monkeypatch.setenv("DEPSCAN_WORKERS", "four")
        with pytest.raises(ConfigError, match="invalid DEPSCAN_WORKERS: 'four'"):
            Config.from_env()

    def test_bad_timeout(self, monkeypatch):
        monkeypatch.setenv("DEPSCAN_RESOLVE_TIMEOUT", "5m")
        with pytest.raises(ConfigError, match="DEPSCAN_RESOLVE_TIMEOUT"):
            Config.from_env()
