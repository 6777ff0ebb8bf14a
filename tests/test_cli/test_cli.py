"""
Tests for guild_professions.cli — end-to-end command runs via CliRunner.

Each test writes a small config (WARNING log level, so stdout carries only
command output), the forge catalog and a roster into ``tmp_path``.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from guild_professions.cli import app

runner = CliRunner()

FORGE_CATALOG_TOML = """\
[[gathering]]
id = "mining"
name = "Mining"

[[processing]]
id = "smelting"
name = "Smelting"
dependencies = ["mining"]

[[crafting]]
id = "weaponsmithing"
name = "Weaponsmithing"
dependencies = ["smelting"]
"""

FORGE_ROSTER = [
    {"name": "Alice", "professions": [{"profession_id": "mining", "rank": 4}]},
    {"name": "Bob", "professions": [{"profession_id": "weaponsmithing", "rank": "master"}]},
]


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # Commands reconfigure the root logger against the runner's streams.
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def workspace(tmp_path: Path) -> dict[str, Path]:
    catalog = tmp_path / "professions.toml"
    catalog.write_text(FORGE_CATALOG_TOML, encoding="utf-8")

    config = tmp_path / "config.toml"
    config.write_text(
        f'[catalog]\npath = "{catalog.as_posix()}"\n\n[logging]\nlevel = "WARNING"\n',
        encoding="utf-8",
    )

    roster = tmp_path / "roster.json"
    roster.write_text(json.dumps(FORGE_ROSTER), encoding="utf-8")
    return {"config": config, "catalog": catalog, "roster": roster, "dir": tmp_path}


def _run(workspace: dict[str, Path], *args: str):
    return runner.invoke(app, [*args, "--config", str(workspace["config"])])


def _run_with_roster(workspace: dict[str, Path], command: str, *args: str):
    return _run(workspace, command, "--roster", str(workspace["roster"]), *args)


# ── validate-config / validate-catalog ────────────────────────────────────────


class TestValidateCommands:
    def test_validate_config(self, workspace):
        result = _run(workspace, "validate-config")
        assert result.exit_code == 0
        assert "[OK] Config valid." in result.stdout
        assert "GM <= 2, Master+ <= 3" in result.stdout

    def test_validate_config_missing_file(self, tmp_path):
        result = runner.invoke(app, ["validate-config", "--config", str(tmp_path / "no.toml")])
        assert result.exit_code == 1

    def test_validate_config_bad_weights(self, tmp_path):
        config = tmp_path / "bad.toml"
        config.write_text("[health]\ncoverage_weight = 0.9\n", encoding="utf-8")
        result = runner.invoke(app, ["validate-config", "--config", str(config)])
        assert result.exit_code == 1

    def test_validate_catalog(self, workspace):
        result = _run(workspace, "validate-catalog")
        assert result.exit_code == 0
        assert "[OK] Catalog valid: 3 profession(s)." in result.stdout

    def test_validate_catalog_integrity_failure(self, workspace):
        broken = workspace["dir"] / "broken.toml"
        broken.write_text(
            '[[crafting]]\nid = "carpentry"\nname = "Carpentry"\ndependencies = ["lumber"]\n',
            encoding="utf-8",
        )
        result = _run(workspace, "validate-catalog", "--catalog", str(broken))
        assert result.exit_code == 1


# ── health ────────────────────────────────────────────────────────────────────


class TestHealthCommand:
    def test_text_report(self, workspace):
        result = _run_with_roster(workspace, "health")
        assert result.exit_code == 0
        assert "Overall score:   53/100" in result.stdout

    def test_json(self, workspace):
        result = _run_with_roster(workspace, "health", "--json")
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["overall_score"] == 53
        assert data["recommendations"][0] == "Weaponsmithing crafters need Smelting suppliers"

    def test_output_file(self, workspace):
        out = workspace["dir"] / "reports" / "health.json"
        result = _run_with_roster(workspace, "health", "-o", str(out))
        assert result.exit_code == 0
        assert json.loads(out.read_text(encoding="utf-8"))["mastery_score"] == 67

    def test_json_with_output_file_keeps_stdout_parseable(self, workspace):
        out = workspace["dir"] / "health.json"
        result = _run_with_roster(workspace, "health", "--json", "--output", str(out))
        assert result.exit_code == 0
        assert json.loads(result.stdout)["overall_score"] == 53
        assert json.loads(out.read_text(encoding="utf-8"))["overall_score"] == 53

    def test_missing_roster_file(self, workspace):
        result = _run(workspace, "health", "--roster", str(workspace["dir"] / "nope.json"))
        assert result.exit_code == 1

    def test_roster_with_unknown_profession(self, workspace):
        roster = workspace["dir"] / "odd.json"
        roster.write_text(
            json.dumps([{"name": "Zed", "professions": [{"profession_id": "alchemy", "rank": 1}]}]),
            encoding="utf-8",
        )
        result = _run(workspace, "health", "--roster", str(roster))
        assert result.exit_code == 1


# ── coverage ──────────────────────────────────────────────────────────────────


class TestCoverageCommand:
    def test_tier_filter_json(self, workspace):
        result = _run_with_roster(workspace, "coverage", "--tier", "crafting", "--json")
        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [r["profession_id"] for r in rows] == ["weaponsmithing"]
        assert rows[0]["master"] == "Bob"

    def test_invalid_tier(self, workspace):
        result = _run_with_roster(workspace, "coverage", "--tier", "refining")
        assert result.exit_code == 1

    def test_csv_output(self, workspace):
        out = workspace["dir"] / "coverage.csv"
        result = _run_with_roster(workspace, "coverage", "-o", str(out))
        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8").startswith("profession_id,name,tier")


# ── supply-chain ──────────────────────────────────────────────────────────────


class TestSupplyChainCommand:
    def test_report(self, workspace):
        result = _run_with_roster(workspace, "supply-chain")
        assert result.exit_code == 0
        assert "[SHORTAGE]" in result.stdout

    def test_single_profession_json(self, workspace):
        result = _run_with_roster(workspace, "supply-chain", "-p", "weaponsmithing", "--json")
        assert result.exit_code == 0
        (chain,) = json.loads(result.stdout)
        assert chain["status"] == "supply_break"

    def test_non_crafting_profession(self, workspace):
        result = _run_with_roster(workspace, "supply-chain", "-p", "mining")
        assert result.exit_code == 1


# ── members ───────────────────────────────────────────────────────────────────


class TestMembersCommand:
    def test_report(self, workspace):
        result = _run_with_roster(workspace, "members")
        assert result.exit_code == 0
        assert "2 member(s), 0 over rank limits." in result.stdout

    def test_warnings_only_json(self, workspace):
        roster = workspace["dir"] / "roster.csv"
        roster.write_text(
            "member,profession_id,rank\n"
            "Greedy,mining,4\nGreedy,smelting,4\nGreedy,weaponsmithing,4\n"
            "Modest,mining,1\n",
            encoding="utf-8",
        )
        result = _run(workspace, "members", "--roster", str(roster), "--warnings-only", "--json")
        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [r["name"] for r in rows] == ["Greedy"]
        assert rows[0]["warnings"] == "Exceeds Grandmaster limit: 3/2"


class TestCsvExport:
    def test_empty_member_export_keeps_header(self, workspace):
        out = workspace["dir"] / "members.csv"
        result = _run_with_roster(workspace, "members", "--warnings-only", "-o", str(out))
        assert result.exit_code == 0
        assert out.read_text(encoding="utf-8").splitlines() == [
            "name,summary,grandmaster_or_above,master_or_above,"
            "journeyman_or_above,apprentice_or_above,warnings",
        ]
