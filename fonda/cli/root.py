import yaml
import typer
from typing import Optional
from typing_extensions import Annotated
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table
import rich

from fonda._src.config import FondaConfig
from fonda._src.constants import (
    DEFAULT_ENVIRONMENT_FILE,
    DEFAULT_FAST_TOOL,
    DEFAULT_REQUIREMENTS_FILE,
)
from fonda._src.exceptions import FondaError
from fonda._src.log import configure_logging
from fonda._src.pipeline import (
    create_environment,
    install_requirements,
    resolve_environment,
    target_platform,
    write_requirements,
)
from fonda._src.platform import current_platform, parse_platform
from fonda._src.resolve import classify_environment
from fonda._src.utils import activation_command


err_console = Console(stderr=True)

app = typer.Typer(
    add_completion=False,
    invoke_without_command=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _fail(err: FondaError):
    err_console.print(f"[bold red]error:[/bold red] {escape(err.msg)}", highlight=False)
    raise typer.Exit(code=1)


@app.callback()
def main(
    ctx: typer.Context,
    file: Annotated[Path, typer.Option(
        "--file", "-f",
        envvar="FONDA_ENV_FILE",
        help="path to environment file"
    )] = Path(DEFAULT_ENVIRONMENT_FILE),
    output: Annotated[Path, typer.Option(
        "--output", "-o",
        envvar="FONDA_REQUIREMENTS",
        help="path to requirements file"
    )] = Path(DEFAULT_REQUIREMENTS_FILE),
    fast_tool: Annotated[str, typer.Option(
        envvar="FONDA_FAST_TOOL",
        help="fast tool tried first to create the environment"
    )] = DEFAULT_FAST_TOOL,
    python: Annotated[Optional[str], typer.Option(
        envvar="FONDA_PYTHON",
        help="interpreter used by the venv fallback and `install`"
    )] = None,
    platform: Annotated[Optional[str], typer.Option(
        envvar="FONDA_PLATFORM",
        help="resolve for this platform (win, linux, macos) instead of the host"
    )] = None,
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="show debug output"
    )] = False,
):
    """Turn a conda-style environment.yaml into a virtual environment.

    Without a command, creates the environment and installs its requirements.
    """
    settings = {
        "environment_file": file,
        "requirements_file": output,
        "fast_tool": fast_tool,
        "verbose": verbose,
    }
    if python is not None:
        settings["python"] = python
    try:
        if platform is not None:
            settings["platform"] = parse_platform(platform)
    except FondaError as err:
        _fail(err)

    config = FondaConfig(**settings)
    configure_logging(config)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        _create(config)


@app.command()
def create(ctx: typer.Context):
    """Create the environment and install its requirements"""
    _create(ctx.obj)


def _create(config: FondaConfig):
    try:
        result = create_environment(config)
    except FondaError as err:
        _fail(err)

    if not result.ok:
        _fail(result.error)

    env_name = result.name
    rich.print(
        f"Environment '{env_name}' created and requirements installed successfully "
        f"using {result.backend.name}."
    )
    rich.print("\nTo activate your environment, run:")
    print(activation_command(env_name, current_platform()))
    rich.print("\nTo deactivate your environment, run:")
    print("deactivate")


@app.command()
def write(ctx: typer.Context):
    """Write the requirements file without creating an environment"""
    config: FondaConfig = ctx.obj
    try:
        manifest = write_requirements(config)
    except FondaError as err:
        _fail(err)

    rich.print(
        f"{config.requirements_file} created successfully "
        f"({len(manifest.entries)} requirements for {manifest.platform.value})."
    )


@app.command()
def install(ctx: typer.Context):
    """Install an existing requirements file with pip"""
    config: FondaConfig = ctx.obj
    try:
        install_requirements(config)
    except FondaError as err:
        _fail(err)

    rich.print("Requirements installed successfully.")


@app.command()
def show(
    ctx: typer.Context,
    as_yaml: Annotated[bool, typer.Option(
        "--yaml",
        help="dump the resolved manifest as yaml"
    )] = False,
):
    """Show how every entry of the environment file is classified"""
    config: FondaConfig = ctx.obj
    try:
        env, manifest = resolve_environment(config)
        specs = classify_environment(env)
        platform = target_platform(config)
    except FondaError as err:
        _fail(err)

    # If yaml is requested dump the manifest to stdout
    if as_yaml:
        print(yaml.safe_dump(manifest.model_dump(mode="json"), sort_keys=False), end="")
        return

    table = Table(title=f"{env.name} ({platform.value})")
    table.add_column("requirement", justify="left", no_wrap=True)
    table.add_column("kind", justify="left", no_wrap=True)
    table.add_column("section", justify="left", no_wrap=True)
    table.add_column("platform", justify="left", no_wrap=True)
    table.add_column("included", justify="left", no_wrap=True)

    seen = set()
    for spec in specs:
        requirement = spec.to_requirement()
        if not spec.applies_to(platform):
            included = "no"
        elif requirement in seen:
            included = "no (duplicate)"
        else:
            included = "yes"
            seen.add(requirement)
        table.add_row(
            requirement,
            spec.kind.type,
            spec.section.value,
            spec.platform.value,
            included,
        )

    rich.print(table)
