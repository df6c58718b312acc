"""
Main CLI entry point for enhancerepo.

This module provides the Click-based command-line interface for enhancerepo.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from enhancerepo import __version__
from enhancerepo.cli.pattern_commands import create_patterns_group
from enhancerepo.cli.susedata_commands import create_susedata_command
from enhancerepo.core.config import EnhanceConfig, load_config
from enhancerepo.core.output import OutputLevel, Outputter

# Click context settings to enable -h as alias for --help
CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: /etc/enhancerepo/config.yaml, or $ENHANCEREPO_CONFIG)",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Only show errors")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool, quiet: bool) -> None:
    """enhancerepo - rpm-md repository metadata enhancer.

    Adds SUSE patterns and susedata (eulas, keywords, disk usage) to
    RPM repositories.
    """
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if quiet:
        ctx.obj["output"] = Outputter(OutputLevel.QUIET)
    elif verbose:
        ctx.obj["output"] = Outputter(OutputLevel.VERBOSE)
    else:
        ctx.obj["output"] = Outputter(OutputLevel.NORMAL)

    # Load configuration
    try:
        ctx.obj["config"] = load_config(config)
    except FileNotFoundError:
        if config:
            click.echo(f"Error: Configuration file not found: {config}", err=True)
            ctx.exit(1)
        else:
            ctx.obj["config"] = EnhanceConfig()
    except ValueError as e:
        # YAML syntax error or validation error
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


create_patterns_group(cli)
create_susedata_command(cli)


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
