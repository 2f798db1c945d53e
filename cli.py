#!/usr/bin/env python3
"""Indexing agent — push Shopify content changes to search engines."""

import json
import os
import sys
import click
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich import box

from indexing.config import ConfigError, Settings, load_config as _load_settings

CONFIG_PATH = Path(__file__).parent / "config.yaml"
console = Console()


def load_config(path: str | None = None) -> Settings:
    path = path or os.environ.get("INDEXING_AGENT_CONFIG") or CONFIG_PATH
    try:
        return _load_settings(path)
    except ConfigError as e:
        console.print(f"[red]ERROR:[/] {e}")
        console.print("Copy config.example.yaml to config.yaml or set the environment variables.")
        sys.exit(1)


def _mark(result: dict | None) -> str:
    if result is None:
        return "[red]x[/] raised (see log)"
    if result.get("skipped"):
        return "[yellow]-[/] skipped (no credentials)"
    if result["ok"]:
        return f"[green]+[/] HTTP {result['status']}"
    return f"[red]x[/] {result['error']}"


# ─── CLI ─────────────────────────────────────────────────────────────────


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config.yaml")
@click.pass_context
def cli(ctx, config_path):
    """Indexing agent — push Shopify content changes to search engines."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.option("--no-heartbeat", is_flag=True, help="Do not schedule the daily heartbeat")
@click.pass_context
def serve(ctx, no_heartbeat):
    """Run the webhook server (and the daily heartbeat)."""
    import uvicorn
    from indexing.log import setup_logging
    from indexing.server import create_app

    settings = load_config(ctx.obj["config_path"])
    setup_logging(settings.log_level)
    app = create_app(settings, start_scheduler=settings.heartbeat_enabled and not no_heartbeat)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


@cli.command()
@click.pass_context
def heartbeat(ctx):
    """Run the daily heartbeat once, now."""
    from indexing.heartbeat import heartbeat_urls, run_heartbeat
    from indexing.log import setup_logging
    from indexing.providers import build_primary, build_secondary

    settings = load_config(ctx.obj["config_path"])
    setup_logging(settings.log_level)
    console.print("\n[bold]Heartbeat[/]")
    for url in heartbeat_urls(settings):
        console.print(f"  [dim]{url}[/]")
    results = run_heartbeat(settings, build_primary(settings), build_secondary(settings))
    for name, result in results.items():
        console.print(f"  {_mark(result)}  {name}")


@cli.command()
@click.pass_context
def status(ctx):
    """Show configured providers and the heartbeat schedule."""
    settings = load_config(ctx.obj["config_path"])

    table = Table(title=f"Indexing agent — {settings.site_url}", box=box.ROUNDED)
    table.add_column("Component", style="bold", min_width=14)
    table.add_column("Role")
    table.add_column("Configured", justify="center")

    ok, missing = "[green]OK[/]", "[red]missing[/]"
    table.add_row("Shopify HMAC", "webhook verification", ok if settings.webhook_secret else missing)
    table.add_row(
        "IndexNow",
        "primary" if settings.provider == "indexnow" else "[dim]unused[/]",
        ok if settings.indexnow_key else "[dim]-[/]",
    )
    table.add_row(
        "Bing",
        "primary" if settings.provider == "bing" else "[dim]unused[/]",
        ok if settings.bing_api_key else "[dim]-[/]",
    )
    table.add_row("Google SC", "sitemap resubmit", ok if settings.has_google else "[dim]-[/]")
    table.add_row(
        "Heartbeat",
        f"{settings.heartbeat_cron} {settings.heartbeat_timezone}",
        ok if settings.heartbeat_enabled else "[dim]off[/]",
    )
    console.print(table)

    if not settings.has_primary_key:
        mode = "fail" if settings.strict else "be skipped"
        console.print(f"  [yellow]Primary provider has no key; submissions will {mode}.[/]")
    console.print(f"  [dim]Sitemap: {settings.sitemap_url} | port {settings.port}[/]\n")


@cli.command()
@click.argument("topic")
@click.argument("payload_file", type=click.File("rb"), required=False)
@click.pass_context
def resolve(ctx, topic, payload_file):
    """Dry run: show which URLs a webhook TOPIC + PAYLOAD_FILE would submit."""
    from indexing.urls import build_batch, resolve as resolve_url, wants_sitemap_resubmit

    settings = load_config(ctx.obj["config_path"])
    payload = {}
    if payload_file is not None:
        try:
            payload = json.loads(payload_file.read())
        except ValueError as e:
            console.print(f"[red]ERROR:[/] payload is not JSON: {e}")
            sys.exit(1)

    url = resolve_url(settings.site_url, topic, payload)
    console.print(f"\n[bold]{topic}[/] -> {url or '[dim]no URL[/]'}")
    for u in build_batch(settings.site_url, url):
        console.print(f"  [green]+[/] {u}")
    resubmit = "[green]yes[/]" if wants_sitemap_resubmit(topic) else "[dim]no[/]"
    console.print(f"  Sitemap resubmit: {resubmit}\n")


@cli.command()
@click.argument("body_file", type=click.File("rb"))
@click.pass_context
def sign(ctx, body_file):
    """Print the X-Shopify-Hmac-Sha256 value for BODY_FILE."""
    from indexing.signature import sign as sign_body

    settings = load_config(ctx.obj["config_path"])
    if not settings.webhook_secret:
        console.print("[red]Webhook secret not configured.[/] Set 'shopify.webhook_secret' in config.yaml")
        sys.exit(1)
    click.echo(sign_body(settings.webhook_secret, body_file.read()))


def main():
    cli()


if __name__ == "__main__":
    main()
