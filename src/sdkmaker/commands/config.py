"""Config commands -- view the effective generator configuration.

Settings come from ``$XDG_CONFIG_HOME/sdkmaker/config.json``, a project
``./sdkmaker.json`` and ``SDKMAKER_*`` environment variables, merged by
:func:`~sdkmaker.config.resolve_config`.
"""

from __future__ import annotations

import typer

from sdkmaker.exceptions import SdkmakerError
from sdkmaker.output import error, format_response, info


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration after all layers are merged.

    Example::

        sdkmaker config show
        sdkmaker --json config show
    """
    from sdkmaker.config import get_config_dir, resolve_config

    try:
        config = resolve_config()
    except SdkmakerError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config directory: {get_config_dir()}")
    format_response(config.model_dump(mode="json"))


@config_app.command("path")
def config_path() -> None:
    """Print the user configuration file path."""
    from sdkmaker.config import get_config_dir
    from sdkmaker.output import print_data

    print_data(str(get_config_dir() / "config.json"))
