"""Settings CLI commands for paytax.

Manages settings.json - rule sources, fetch timeout, jurisdiction.
"""

import os

import click

from paytax.sdk import (
    ConfigurationError,
    SETTING_KEYS,
    get_setting,
    get_settings_path,
    load_settings,
    set_setting,
    unset_setting,
)


@click.group()
def settings():
    """Manage settings (settings.json).

    Available settings:
    - rules_url: remote rule service base URL
    - rules_api_key: bearer token for the rule service
    - rules_dir: directory of {year}.yaml rule files
    - fetch_timeout: seconds before falling back to embedded rules
    - jurisdiction: state code (e.g. CA)
    """
    pass


@settings.command("show")
def settings_show():
    """Show current settings and effective values."""
    settings_path = get_settings_path()
    try:
        current = load_settings()
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    click.echo(f"Settings file: {settings_path}")
    click.echo(f"File exists: {settings_path.exists()}")
    click.echo()

    if not current:
        click.echo("No settings configured (using defaults).")
        click.echo()

    click.echo("Effective settings:")
    for key in sorted(SETTING_KEYS):
        value = get_setting(key)
        if value and key == "rules_api_key":
            value = "****"
        source = " (env)" if os.environ.get(SETTING_KEYS[key]) else ""
        click.echo(f"  {key}: {value if value is not None else '(not set)'}{source}")


@settings.command("set")
@click.argument("key", type=click.Choice(sorted(SETTING_KEYS)))
@click.argument("value")
def settings_set(key, value):
    """Set KEY to VALUE in settings.json.

    Examples:
        paytax settings set rules_url https://rules.example.com/api/v1
        paytax settings set fetch_timeout 2.5
    """
    try:
        path = set_setting(key, value)
    except ConfigurationError as e:
        raise click.ClickException(str(e))
    click.echo(f"Set {key}")
    click.echo(f"Saved to: {path}")


@settings.command("unset")
@click.argument("key", type=click.Choice(sorted(SETTING_KEYS)))
def settings_unset(key):
    """Remove KEY from settings.json."""
    if unset_setting(key):
        click.echo(f"Cleared {key}.")
    else:
        click.echo(f"{key} was not set.")
