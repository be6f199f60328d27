"""Command line entry point.

    stencila-plugin stdio
    stencila-plugin http 8000 <token>

Arguments mirror the contract a host uses when it launches a plugin; any
that are omitted fall back to STENCILA_* environment variables.
"""

import re
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.markup import escape

from stencila_plugin.config import ConfigError, load_config
from stencila_plugin.logging import configure_logging, configure_redaction

if TYPE_CHECKING:
    from stencila_plugin.plugin import Plugin


def create_cli(plugin: "Plugin | None" = None) -> typer.Typer:
    """Create the CLI for a plugin.

    Args:
        plugin: Plugin to serve. Defaults to the echo plugin.
    """
    app = typer.Typer(
        name="stencila-plugin",
        help="Serve a Stencila plugin over stdio or HTTP",
        add_completion=False,
    )

    @app.command()
    def run(
        protocol: Annotated[
            str | None,
            typer.Argument(help="Transport: stdio or http"),
        ] = None,
        port: Annotated[
            int | None,
            typer.Argument(help="Port for the http transport"),
        ] = None,
        token: Annotated[
            str | None,
            typer.Argument(help="Bearer token for the http transport"),
        ] = None,
        config: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="Path to configuration file",
            ),
        ] = None,
        host: Annotated[
            str | None,
            typer.Option(
                "--host",
                "-h",
                help="Host to bind to (http only)",
            ),
        ] = None,
        origin_policy: Annotated[
            str | None,
            typer.Option(
                "--origin-policy",
                help="reject-loopback or loopback-only (http only)",
            ),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option(
                "--log-level",
                help="DEBUG, INFO, WARNING or ERROR",
            ),
        ] = None,
    ) -> None:
        """Serve the plugin."""
        # stdout carries responses, so everything for humans goes to stderr
        console = Console(stderr=True)

        try:
            plugin_config = load_config(
                config,
                transport=protocol,
                port=port,
                token=token,
                host=host,
                origin_policy=origin_policy,
                log_level=log_level,
            )
        except (FileNotFoundError, ConfigError) as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            raise typer.Exit(1) from None

        configure_logging(plugin_config.log_level, use_rich=True)
        token_value = (
            plugin_config.http.token.get_secret_value()
            if plugin_config.http.token
            else ""
        )
        if token_value:
            configure_redaction(extra_patterns=[re.escape(token_value)])

        target = plugin
        if target is None:
            from stencila_plugin.echo import EchoPlugin

            target = EchoPlugin()

        try:
            target.run(plugin_config)
        except ConfigError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            raise typer.Exit(1) from None
        except KeyboardInterrupt:
            console.print("\n[bold yellow]Plugin stopped[/bold yellow]")

    return app


app = create_cli()


def main() -> None:
    """Console script entry point."""
    app()
