from __future__ import annotations

"""susedata command."""

import subprocess
import xml.etree.ElementTree as ET
from pathlib import Path

import click

from enhancerepo.cli.pattern_commands import resolve_config
from enhancerepo.core.output import Outputter
from enhancerepo.rpmmd.compression import COMPRESSION_FORMATS
from enhancerepo.rpmmd.repomd import register_metadata
from enhancerepo.rpmmd.susedata import SuseData

# Click context settings to enable -h as alias for --help
CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def create_susedata_command(cli: click.Group) -> click.Command:
    """Create and return the susedata command.

    Args:
        cli: Parent CLI group to attach to

    Returns:
        The susedata command
    """

    @cli.command("susedata", context_settings=CONTEXT_SETTINGS)
    @click.option("--dir", "repo_dir", type=click.Path(path_type=Path), help="Repository root")
    @click.option("--eulas", is_flag=True, help="Attach *.eula files to their packages")
    @click.option("--keywords", is_flag=True, help="Attach *.keywords files to their packages")
    @click.option("--diskusage", is_flag=True, help="Attach per-directory disk usage (needs rpm)")
    @click.option(
        "--compression",
        type=click.Choice(list(COMPRESSION_FORMATS)),
        default=None,
        help="Compression of susedata.xml (default: from config, gzip)",
    )
    @click.option("--no-repomd", is_flag=True, help="Do not register susedata.xml in repomd.xml")
    @click.pass_context
    def susedata(
        ctx: click.Context,
        repo_dir: Path | None,
        eulas: bool,
        keywords: bool,
        diskusage: bool,
        compression: str | None,
        no_repomd: bool,
    ) -> None:
        """Write repodata/susedata.xml for the packages of a repository.

        Without flags, the susedata section of the configuration decides
        which properties are collected.

        Examples:
          enhancerepo susedata --dir /srv/repo --eulas --keywords
          enhancerepo susedata --diskusage --compression zstandard
        """
        config = resolve_config(ctx, repo_dir)
        output: Outputter = ctx.obj["output"]

        if not (eulas or keywords or diskusage):
            if not config.susedata.enabled:
                output.warning("No properties selected (use --eulas, --keywords or --diskusage)")
                return
            eulas = config.susedata.eulas
            keywords = config.susedata.keywords
            diskusage = config.susedata.diskusage

        data = SuseData(config.get_dir())
        if eulas:
            output.phase("Eulas")
            data.add_eulas()
        if keywords:
            output.phase("Keywords")
            data.add_keywords()
        if diskusage:
            output.phase("Disk usage")
            data.add_disk_usage()

        if data.empty:
            output.warning("No package properties collected, susedata.xml not written")
            return

        try:
            target = data.write_file(compression or config.compression)  # type: ignore[arg-type]
        except (ValueError, OSError, subprocess.CalledProcessError) as e:
            output.error(str(e))
            ctx.exit(1)

        output.success(f"Wrote {target}")
        output.summary(packages=len(data.packages))

        if config.update_repomd and not no_repomd:
            try:
                repomd = register_metadata(config.get_repodata_path(), "susedata", target)
            except (OSError, ValueError, ET.ParseError) as e:
                output.error(f"Cannot update repomd.xml: {e}")
                ctx.exit(1)
            output.verbose(f"  → Updated {repomd}")

    return susedata
