"""
guild-professions — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Load the profession catalog and (where needed) a roster snapshot.
  4. Run the analysis.
  5. Report the result to stdout (ASCII table or ``--json``).

Install and run::

    pip install -e .
    guild-professions --help
    guild-professions validate-config
    guild-professions validate-catalog
    guild-professions health --roster roster.json
    guild-professions coverage --roster roster.json --tier crafting
    guild-professions supply-chain --roster roster.csv --profession weapon_smithing
    guild-professions members --roster roster.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="guild-professions",
    help="Guild profession coverage, rank and supply-chain analytics.",
    add_completion=False,
)

_CONFIG_OPTION_HELP = "Path to TOML config file (default: config/default.toml)."
_CATALOG_OPTION_HELP = "Override the profession catalog path from config."
_ROSTER_OPTION_HELP = "Roster snapshot file (.json or .csv)."


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from guild_professions.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from guild_professions.utils.logging import configure_logging
    configure_logging(config.logging, debug=config.debug)


def _load_catalog_or_exit(config, catalog_path: Optional[str] = None):
    """Load the profession catalog named by ``--catalog`` or the config."""
    import tomllib

    from guild_professions.catalog.loader import CatalogIntegrityError, load_catalog
    from guild_professions.config import resolve_path

    path = Path(catalog_path) if catalog_path else resolve_path(config.catalog.path)
    try:
        return load_catalog(path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except tomllib.TOMLDecodeError as exc:
        typer.echo(f"[ERROR] Catalog TOML parse error in {path}: {exc}", err=True)
        raise typer.Exit(code=1)
    except CatalogIntegrityError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)


def _load_roster_or_exit(roster_path: str):
    """Load and validate a roster snapshot file."""
    from guild_professions.ingestion.roster_import import load_roster

    try:
        return load_roster(Path(roster_path))
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"[ERROR] Roster load failed:\n{exc}", err=True)
        raise typer.Exit(code=1)


def _require_roster_or_exit(catalog, roster) -> None:
    """Fail if the roster names professions the catalog does not define."""
    from guild_professions.catalog.catalog import UnknownProfessionError

    try:
        catalog.require_roster(roster)
    except UnknownProfessionError as exc:
        typer.echo(f"[ERROR] Roster does not match catalog: {exc}", err=True)
        raise typer.Exit(code=1)


def _write_output(
    data,
    output: Optional[str],
    records: Optional[list[dict]] = None,
    fieldnames: Optional[tuple[str, ...]] = None,
) -> None:
    """Write ``data`` to ``output`` (.json) or ``records`` (.csv) when requested."""
    if not output:
        return
    from guild_professions.reporting.export import export_to_csv, export_to_json

    out_path = Path(output)
    if out_path.suffix.lower() == ".csv":
        if records is None:
            typer.echo("[ERROR] CSV export is not available for this command.", err=True)
            raise typer.Exit(code=1)
        export_to_csv(records, out_path, fieldnames=fieldnames)
    else:
        export_to_json(data, out_path)
    # stdout carries the report itself (possibly --json).
    typer.echo(f"  Written: {out_path}", err=True)


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_OPTION_HELP),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print parsed values.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Catalog path:      {config.catalog.path}")
    typer.echo(
        f"  Rank limits:       GM <= {config.ranks.grandmaster_limit}, "
        f"Master+ <= {config.ranks.master_limit}"
    )
    typer.echo(
        f"  Health weights:    coverage={config.health.coverage_weight}, "
        f"mastery={config.health.mastery_weight}, "
        f"grandmaster={config.health.grandmaster_weight}"
    )
    typer.echo(f"  Log level:         {config.logging.level}")
    typer.echo(f"  Debug mode:        {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("validate-catalog")
def validate_catalog(
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_OPTION_HELP),
    catalog_path: Optional[str] = typer.Option(None, "--catalog", help=_CATALOG_OPTION_HELP),
) -> None:
    """Load the profession catalog, run integrity checks and list it.

    Exits with code 1 on duplicate ids, unknown dependencies or malformed
    entries.
    """
    from guild_professions.reporting.formatters import format_catalog_summary

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_path)

    typer.echo(format_catalog_summary(catalog))
    typer.echo("")
    typer.echo(f"[OK] Catalog valid: {len(catalog)} profession(s).")


@app.command("health")
def health(
    roster_path: str = typer.Option(..., "--roster", "-r", help=_ROSTER_OPTION_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_OPTION_HELP),
    catalog_path: Optional[str] = typer.Option(None, "--catalog", help=_CATALOG_OPTION_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print metrics as JSON."),
    show_all: bool = typer.Option(
        False,
        "--all-recommendations",
        help="Show every recommendation instead of the display limit.",
    ),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Also write metrics to a .json file."
    ),
) -> None:
    """Score guild profession health: coverage, mastery, gaps, recommendations."""
    from guild_professions.analytics.health import compute_health_metrics
    from guild_professions.reporting.export import health_to_dict
    from guild_professions.reporting.formatters import format_health_report

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_path)
    roster = _load_roster_or_exit(roster_path)
    _require_roster_or_exit(catalog, roster)

    metrics = compute_health_metrics(catalog, roster, config.health)

    if as_json:
        typer.echo(json.dumps(health_to_dict(metrics), indent=2))
    else:
        typer.echo(format_health_report(metrics, show_all=show_all))
    _write_output(health_to_dict(metrics), output)


@app.command("coverage")
def coverage(
    roster_path: str = typer.Option(..., "--roster", "-r", help=_ROSTER_OPTION_HELP),
    tier: Optional[str] = typer.Option(
        None, "--tier", help="Only show one tier: gathering, processing or crafting."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_OPTION_HELP),
    catalog_path: Optional[str] = typer.Option(None, "--catalog", help=_CATALOG_OPTION_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print coverage rows as JSON."),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Also write coverage rows to a .json or .csv file."
    ),
) -> None:
    """Show who holds each profession and at which rank."""
    from guild_professions.analytics.coverage import compute_coverage, summarize_coverage
    from guild_professions.reporting.export import COVERAGE_FIELDS, coverage_to_records
    from guild_professions.reporting.formatters import format_coverage_table
    from guild_professions.taxonomy.profession_taxonomy import ProfessionTier

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    tier_filter: Optional[ProfessionTier] = None
    if tier:
        try:
            tier_filter = ProfessionTier(tier.lower())
        except ValueError:
            valid = [t.value for t in ProfessionTier]
            typer.echo(f"[ERROR] Invalid tier '{tier}'. Valid: {valid}", err=True)
            raise typer.Exit(code=1)

    catalog = _load_catalog_or_exit(config, catalog_path)
    roster = _load_roster_or_exit(roster_path)
    _require_roster_or_exit(catalog, roster)

    records = compute_coverage(catalog, roster)
    summary = summarize_coverage(records)
    if tier_filter is not None:
        records = [r for r in records if r.tier == tier_filter]

    rows = coverage_to_records(records)
    if as_json:
        typer.echo(json.dumps(rows, indent=2))
    else:
        typer.echo(format_coverage_table(records, summary))
    _write_output(rows, output, records=rows, fieldnames=COVERAGE_FIELDS)


@app.command("supply-chain")
def supply_chain(
    roster_path: str = typer.Option(..., "--roster", "-r", help=_ROSTER_OPTION_HELP),
    profession: Optional[str] = typer.Option(
        None, "--profession", "-p", help="Only show one crafting profession id."
    ),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_OPTION_HELP),
    catalog_path: Optional[str] = typer.Option(None, "--catalog", help=_CATALOG_OPTION_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print audit results as JSON."),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Also write audit results to a .json file."
    ),
) -> None:
    """Audit crafting supply chains for missing Master+ suppliers."""
    from guild_professions.analytics.supply_chain import audit_supply_chains
    from guild_professions.reporting.export import supply_chains_to_dict
    from guild_professions.reporting.formatters import format_supply_chain_report

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_path)
    roster = _load_roster_or_exit(roster_path)
    _require_roster_or_exit(catalog, roster)

    chains = audit_supply_chains(catalog, roster)
    if profession:
        chains = [c for c in chains if c.profession_id == profession]
        if not chains:
            crafting = [p.id for p in catalog.crafting]
            typer.echo(
                f"[ERROR] '{profession}' is not a crafting profession. "
                f"Crafting professions: {crafting}",
                err=True,
            )
            raise typer.Exit(code=1)

    data = supply_chains_to_dict(chains)
    if as_json:
        typer.echo(json.dumps(data, indent=2))
    else:
        typer.echo(format_supply_chain_report(chains))
    _write_output(data, output)


@app.command("members")
def members(
    roster_path: str = typer.Option(..., "--roster", "-r", help=_ROSTER_OPTION_HELP),
    config_path: Optional[str] = typer.Option(None, "--config", help=_CONFIG_OPTION_HELP),
    catalog_path: Optional[str] = typer.Option(None, "--catalog", help=_CATALOG_OPTION_HELP),
    warnings_only: bool = typer.Option(
        False, "--warnings-only", help="Only list members above a rank limit."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print member reports as JSON."),
    output: Optional[str] = typer.Option(
        None, "--output", "-o", help="Also write member reports to a .json or .csv file."
    ),
) -> None:
    """Per-member rank summaries and advisory rank-limit warnings."""
    from guild_professions.analytics.ranks import build_member_rank_report
    from guild_professions.reporting.export import MEMBER_REPORT_FIELDS, member_reports_to_records
    from guild_professions.reporting.formatters import format_member_reports

    config = _load_config_or_exit(config_path)
    _configure_logging(config)
    catalog = _load_catalog_or_exit(config, catalog_path)
    roster = _load_roster_or_exit(roster_path)
    _require_roster_or_exit(catalog, roster)

    reports = [build_member_rank_report(m, config.ranks) for m in roster]
    if warnings_only:
        reports = [r for r in reports if not r.within_limits]

    rows = member_reports_to_records(reports)
    if as_json:
        typer.echo(json.dumps(rows, indent=2))
    else:
        typer.echo(format_member_reports(reports))
    _write_output(rows, output, records=rows, fieldnames=MEMBER_REPORT_FIELDS)


if __name__ == "__main__":
    app()
