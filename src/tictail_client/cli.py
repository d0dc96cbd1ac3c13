"""Main CLI entry point for the Tictail client."""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Dict, Any, Tuple

import click
from rich.console import Console

from . import __version__
from .core.client import TicTailClient
from .core.config import Config, EXPIRY_POLICIES
from .core.exceptions import (
    TicTailError,
    ConfigurationError,
    OutdatedCredentialsError,
)
from .core.logging import setup_logging
from .formatters import format_output, registry

# Console for error output
console = Console(stderr=True)

DEFAULT_CONFIG_FILE = Path.home() / '.tictail-client.yml'


class Context:
    """Click context object for sharing state between commands."""

    def __init__(self):
        self.config: Optional[Config] = None
        self.client: Optional[TicTailClient] = None
        self.output_format: str = 'auto'
        self.debug: bool = False

    def ensure_client(self) -> TicTailClient:
        """Ensure client is initialized.

        Raises:
            ConfigurationError: If configuration was not loaded
        """
        if not self.client:
            if not self.config:
                raise ConfigurationError("Configuration not initialized")
            self.client = TicTailClient.from_config(self.config)
        return self.client

    def output(self, data, **kwargs):
        """Output data in configured format."""
        click.echo(format_output(data, self.output_format, **kwargs))

    def handle_error(self, error: Exception):
        """Display an error and exit with a code matching its kind.

        Exit codes: 2 configuration error, 3 outdated credentials, 1 otherwise.
        """
        if self.debug:
            console.print_exception()
        elif isinstance(error, OutdatedCredentialsError):
            console.print(f"[red]{error.message}[/red]")
            console.print("[yellow]Get a new code with: tictail authorize-url REDIRECT_URL[/yellow]")
        elif isinstance(error, ConfigurationError):
            console.print(f"[red]Configuration error: {error.message}[/red]")
        elif isinstance(error, TicTailError):
            console.print(f"[red]Error: {error.message}[/red]")
            for key, value in error.details.items():
                console.print(f"  [dim]{key}:[/dim] {value}")
        else:
            console.print(f"[red]Unexpected error: {error}[/red]")

        if isinstance(error, OutdatedCredentialsError):
            sys.exit(3)
        elif isinstance(error, ConfigurationError):
            sys.exit(2)
        else:
            sys.exit(1)


def load_config(config_file: Optional[Path], profile: str) -> Config:
    """Load configuration from an explicit file, the default file, or the environment."""
    if config_file:
        return Config.from_file(config_file, profile)
    if DEFAULT_CONFIG_FILE.exists():
        return Config.from_file(DEFAULT_CONFIG_FILE, profile)
    return Config.from_env()


def parse_params(pairs: Tuple[str, ...]) -> Dict[str, Any]:
    """Turn repeated ``key=value`` options into a parameter dict."""
    params = {}
    for pair in pairs:
        key, sep, value = pair.partition('=')
        if not sep or not key:
            raise click.BadParameter(f"Expected key=value, got {pair!r}", param_hint='--param')
        params[key] = value
    return params


@click.group()
@click.option('--config', 'config_file', type=click.Path(exists=False, path_type=Path),
              help='Configuration file path')
@click.option('--profile', default='default', help='Configuration profile to use')
@click.option('--client-id', help='OAuth client id (overrides TICTAIL_CLIENT_ID)')
@click.option('--client-secret', help='OAuth client secret (overrides TICTAIL_CLIENT_SECRET)')
@click.option('--token', help='Access token (overrides TICTAIL_ACCESS_TOKEN)')
@click.option('--missing-expiry', type=click.Choice(EXPIRY_POLICIES),
              help='Treat tokens without expiry as expired or never expiring')
@click.option('--insecure', is_flag=True, help='Disable TLS certificate verification (not recommended)')
@click.option('--format', 'output_format', type=click.Choice(registry.list_formats() + ['auto']),
              default='auto', help='Output format')
@click.option('--debug/--no-debug', envvar='DEBUG', default=False, help='Enable debug output')
@click.version_option(version=__version__, prog_name='tictail-client')
@click.pass_context
def cli(ctx, config_file, profile, client_id, client_secret, token, missing_expiry,
        insecure, output_format, debug):
    """Tictail Client - call the Tictail API from the command line.

    Environment variables:
        TICTAIL_CLIENT_ID, TICTAIL_CLIENT_SECRET: OAuth credentials
        TICTAIL_ACCESS_TOKEN: Access token for API calls
        LOG_LEVEL: Logging level (TRACE, DEBUG, INFO, WARNING, ERROR)

    Examples:
        tictail authorize-url https://app.example/cb
        tictail authenticate CODE
        tictail --token TOKEN call GET /v1/me
    """
    context = Context()
    context.output_format = output_format
    context.debug = debug
    ctx.obj = context

    try:
        context.config = load_config(config_file, profile)
    except ConfigurationError as e:
        context.handle_error(e)

    config = context.config
    if client_id:
        config.client_id = client_id
    if client_secret:
        config.client_secret = client_secret
    if token:
        config.access_token = token
    if missing_expiry:
        config.missing_expiry = missing_expiry
    if insecure:
        config.verify_ssl = False

    setup_logging(config.log_level, debug=debug)

    if debug:
        for warning in config.validate():
            console.print(f"[yellow]Warning: {warning}[/yellow]")

    ctx.call_on_close(lambda: context.client and context.client.close())


@cli.command('authorize-url')
@click.argument('redirect_url')
@click.option('--response-type', default='code', show_default=True, help='OAuth response type')
@click.pass_obj
def authorize_url(obj: Context, redirect_url, response_type):
    """Print the URL that starts the OAuth flow."""
    try:
        client = obj.ensure_client()
        if not client.client_id:
            raise ConfigurationError("Missing client_id", {'field': 'client_id'})
        click.echo(client.get_authorize_url(response_type, redirect_url))
    except TicTailError as e:
        obj.handle_error(e)


@cli.command('authenticate')
@click.argument('code')
@click.pass_obj
def authenticate(obj: Context, code):
    """Exchange an authorization CODE for an access token."""
    try:
        client = obj.ensure_client()
        token = client.authenticate(code)
        expires_at = client.token_state.expires_at
        seconds_left = client.token_state.seconds_left()
        obj.output({
            'access_token': token,
            'expires_at': (
                datetime.fromtimestamp(expires_at, tz=timezone.utc).isoformat()
                if expires_at is not None else None
            ),
            'expires_in': int(seconds_left) if seconds_left is not None else None,
            'store_id': client.get_store_id(),
            'store': client.get_store_data(),
        })
    except TicTailError as e:
        obj.handle_error(e)


@cli.command('call')
@click.argument('method')
@click.argument('path')
@click.option('--param', '-p', 'params', multiple=True, help='Parameter as key=value (repeatable)')
@click.pass_obj
def call(obj: Context, method, path, params):
    """Call an API resource, e.g. `call GET /v1/me`."""
    params = parse_params(params)
    try:
        obj.output(obj.ensure_client().call(method, path, params))
    except TicTailError as e:
        obj.handle_error(e)


@cli.command('me')
@click.pass_obj
def me(obj: Context):
    """Show the store the access token belongs to."""
    try:
        obj.output(obj.ensure_client().me())
    except TicTailError as e:
        obj.handle_error(e)


@cli.command('config')
@click.pass_obj
def show_config(obj: Context):
    """Show the effective configuration with secrets masked."""
    obj.output(obj.config.to_dict())


def main():
    """Main entry point for the CLI."""
    try:
        cli(obj=None)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == '__main__':
    main()
