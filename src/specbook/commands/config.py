"""Config commands -- view and modify global configuration.

Provides the ``specbook config`` sub-command group for reading, updating,
and resetting the user's global configuration file
(:class:`~specbook.models.GlobalConfig`).
"""

from __future__ import annotations

import typer

from specbook.exceptions import ConfigError
from specbook.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration.

    Prints the config directory path followed by the configuration after
    project config and environment variables have been applied.

    Example::

        specbook config show
        specbook config show --json
    """
    from specbook.config import get_config_dir, resolve_config

    try:
        config = resolve_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g., 'bundle.unknown_tags')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a global configuration value.

    Uses dot notation for nested keys. The updated config is validated
    against :class:`~specbook.models.GlobalConfig` before saving.

    Raises:
        typer.Exit: With code 2 if the key path is unknown or the value
            fails validation.

    Example::

        specbook config set bundle.unknown_tags placeholder
        specbook config set bundle.output docs.zip
        specbook config set output.format json
    """
    from specbook.config import load_global_config, save_global_config
    from specbook.models import GlobalConfig

    try:
        config = load_global_config()
    except ConfigError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None
    data = config.model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    target[final_key] = value

    try:
        new_config = GlobalConfig.model_validate(data)
    except ValueError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_global_config(new_config)
    success(f"Set {key} = {value}")


@config_app.command("reset")
def config_reset(
    ctx: typer.Context,
) -> None:
    """Reset configuration to defaults.

    Asks for confirmation unless ``--force`` is active.

    Example::

        specbook config reset
        specbook --force config reset
    """
    from specbook.config import save_global_config
    from specbook.models import GlobalConfig

    force = ctx.obj.get("force", False) if ctx.obj else False
    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_global_config(GlobalConfig())
    success("Configuration reset to defaults.")
