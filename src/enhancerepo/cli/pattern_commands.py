from __future__ import annotations

"""Pattern commands: generate, split and merge."""

import xml.etree.ElementTree as ET
from pathlib import Path

import click

from enhancerepo.core.config import EnhanceConfig
from enhancerepo.core.output import Outputter
from enhancerepo.rpmmd.compression import COMPRESSION_FORMATS
from enhancerepo.rpmmd.patterns import Patterns
from enhancerepo.rpmmd.repomd import register_metadata

# Click context settings to enable -h as alias for --help
CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def resolve_config(ctx: click.Context, repo_dir: Path | None) -> EnhanceConfig:
    """Get the configuration with the --dir override applied."""
    config: EnhanceConfig = ctx.obj["config"]
    if repo_dir is not None:
        config = config.model_copy(update={"dir": str(repo_dir)})
    return config


def create_patterns_group(cli: click.Group) -> click.Group:
    """Create and return the patterns command group.

    Args:
        cli: Parent CLI group to attach to

    Returns:
        The patterns command group
    """

    @cli.group(context_settings=CONTEXT_SETTINGS)
    def patterns() -> None:
        """Pattern metadata commands."""
        pass

    @patterns.command("generate")
    @click.argument("files", nargs=-1, type=click.Path(path_type=Path))
    @click.option("--dir", "repo_dir", type=click.Path(path_type=Path), help="Repository root")
    @click.option(
        "--outputdir",
        type=click.Path(path_type=Path),
        help="Directory for pattern parts (default: <dir>/repoparts)",
    )
    @click.pass_context
    def patterns_generate(
        ctx: click.Context, files: tuple[Path, ...], repo_dir: Path | None, outputdir: Path | None
    ) -> None:
        """Generate pattern parts from tagged-text pattern files.

        FILES default to patterns.files from the configuration.

        Examples:
          enhancerepo patterns generate patterns/base.pat.gz
          enhancerepo patterns generate --outputdir repoparts *.pat.gz
        """
        config = resolve_config(ctx, repo_dir)
        output: Outputter = ctx.obj["output"]

        sources = list(files) or [Path(f) for f in config.patterns.files]
        if not sources:
            output.error("No pattern files given")
            ctx.exit(1)

        target = outputdir or config.get_outputdir()
        try:
            written = Patterns(config.get_dir()).generate_patterns(sources, target)
        except (FileNotFoundError, ValueError) as e:
            output.error(str(e))
            ctx.exit(1)

        for part_file in written:
            output.verbose(f"  → {part_file}")
        output.success(f"Generated {len(written)} pattern(s) in {target}")

    @patterns.command("split")
    @click.option("--dir", "repo_dir", type=click.Path(path_type=Path), help="Repository root")
    @click.option(
        "--outputdir",
        type=click.Path(path_type=Path),
        help="Directory for pattern parts (default: <dir>/repoparts)",
    )
    @click.pass_context
    def patterns_split(ctx: click.Context, repo_dir: Path | None, outputdir: Path | None) -> None:
        """Split repodata/patterns.xml into one file per pattern."""
        config = resolve_config(ctx, repo_dir)
        output: Outputter = ctx.obj["output"]

        target = outputdir or config.get_outputdir()
        try:
            written = Patterns(config.get_dir()).split_patterns(target)
        except (FileNotFoundError, ET.ParseError) as e:
            output.error(str(e))
            ctx.exit(1)

        output.success(f"Split {len(written)} pattern(s) into {target}")

    @patterns.command("merge")
    @click.option("--dir", "repo_dir", type=click.Path(path_type=Path), help="Repository root")
    @click.option(
        "--repoparts-path",
        type=click.Path(path_type=Path),
        help="Directory with pattern-*.xml parts (default: <dir>/repoparts)",
    )
    @click.option(
        "--compression",
        type=click.Choice(list(COMPRESSION_FORMATS)),
        default=None,
        help="Compression of patterns.xml (default: from config, gzip)",
    )
    @click.option("--no-repomd", is_flag=True, help="Do not register patterns.xml in repomd.xml")
    @click.pass_context
    def patterns_merge(
        ctx: click.Context,
        repo_dir: Path | None,
        repoparts_path: Path | None,
        compression: str | None,
        no_repomd: bool,
    ) -> None:
        """Merge pattern parts into repodata/patterns.xml."""
        config = resolve_config(ctx, repo_dir)
        output: Outputter = ctx.obj["output"]

        parts_dir = repoparts_path or config.get_repoparts_path()
        output.info(f"Reading pattern parts from {parts_dir}")

        patterns = Patterns(config.get_dir())
        patterns.read_repoparts(parts_dir)
        if patterns.empty:
            output.warning("No pattern parts found, nothing to merge")
            return

        try:
            target = patterns.write_file(compression or config.compression)  # type: ignore[arg-type]
        except (OSError, ValueError) as e:
            output.error(str(e))
            ctx.exit(1)

        output.success(f"Merged {patterns.size} pattern(s) into {target}")

        if config.update_repomd and not no_repomd:
            try:
                repomd = register_metadata(config.get_repodata_path(), "patterns", target)
            except (OSError, ValueError, ET.ParseError) as e:
                output.error(f"Cannot update repomd.xml: {e}")
                ctx.exit(1)
            output.verbose(f"  → Updated {repomd}")

    return patterns
