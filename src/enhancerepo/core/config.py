"""
Configuration management for enhancerepo.

This module provides Pydantic models for configuration validation and
YAML-based configuration loading.
"""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from enhancerepo.rpmmd.compression import COMPRESSION_FORMATS


class PatternsConfig(BaseModel):
    """Pattern generation configuration."""

    # Tagged-text pattern files (e.g. patterns/*.pat.gz) to convert
    files: List[str] = Field(default_factory=list)


class SuseDataConfig(BaseModel):
    """susedata.xml configuration."""

    eulas: bool = False
    keywords: bool = False
    diskusage: bool = False

    @property
    def enabled(self) -> bool:
        return self.eulas or self.keywords or self.diskusage


class EnhanceConfig(BaseModel):
    """Global enhancerepo configuration."""

    # Repository root (contains repodata/)
    dir: str = "."

    # Where generated/split pattern parts go (defaults to {dir}/repoparts)
    outputdir: Optional[str] = None

    # Where pattern parts are read from for merging (defaults to {dir}/repoparts)
    repoparts_path: Optional[str] = None

    # Compression of written combined metadata files
    compression: str = "gzip"

    # Register written metadata files in repodata/repomd.xml
    update_repomd: bool = True

    patterns: PatternsConfig = Field(default_factory=PatternsConfig)
    susedata: SuseDataConfig = Field(default_factory=SuseDataConfig)

    @field_validator("compression")
    @classmethod
    def validate_compression(cls, v: str) -> str:
        """Validate compression format."""
        if v not in COMPRESSION_FORMATS:
            raise ValueError(
                f"Invalid compression format: {v}. Must be one of {list(COMPRESSION_FORMATS)}"
            )
        return v

    def get_dir(self) -> Path:
        return Path(self.dir)

    def get_outputdir(self) -> Path:
        """Get output directory (with default)."""
        if self.outputdir:
            return Path(self.outputdir)
        return self.get_dir() / "repoparts"

    def get_repoparts_path(self) -> Path:
        """Get repoparts directory (with default)."""
        if self.repoparts_path:
            return Path(self.repoparts_path)
        return self.get_dir() / "repoparts"

    def get_repodata_path(self) -> Path:
        return self.get_dir() / "repodata"


class ConfigLoader:
    """Configuration file loader."""

    def __init__(self, config_path: Path):
        """Initialize config loader.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = config_path

    def load(self) -> EnhanceConfig:
        """Load configuration from YAML file.

        Returns:
            EnhanceConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path) as f:
                config_data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"YAML syntax error in {self.config_path}:\n{e}")

        try:
            return EnhanceConfig(**config_data)
        except Exception as e:
            raise ValueError(f"Configuration validation error in {self.config_path}:\n{e}")


def load_config(config_path: Optional[Path] = None) -> EnhanceConfig:
    """Load configuration from file.

    Priority:
    1. Explicit config_path parameter (--config CLI flag)
    2. ENHANCEREPO_CONFIG environment variable
    3. Default locations (/etc/enhancerepo/config.yaml,
       ~/.config/enhancerepo/config.yaml, ./enhancerepo.yaml)

    Args:
        config_path: Path to config file. If None, tries ENHANCEREPO_CONFIG env or default locations.

    Returns:
        EnhanceConfig instance

    Raises:
        FileNotFoundError: If an explicitly requested config file is missing
    """
    default_paths = [
        Path("/etc/enhancerepo/config.yaml"),
        Path.home() / ".config" / "enhancerepo" / "config.yaml",
        Path("enhancerepo.yaml"),
    ]

    if config_path:
        paths_to_try = [config_path]
    elif os.environ.get("ENHANCEREPO_CONFIG"):
        paths_to_try = [Path(os.environ["ENHANCEREPO_CONFIG"])]
    else:
        paths_to_try = default_paths

    for path in paths_to_try:
        if path.exists():
            loader = ConfigLoader(path)
            return loader.load()

    if config_path:
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    elif os.environ.get("ENHANCEREPO_CONFIG"):
        raise FileNotFoundError(
            f"Configuration file not found: {os.environ['ENHANCEREPO_CONFIG']} (from ENHANCEREPO_CONFIG)"
        )
    else:
        # Return default config if no file found
        return EnhanceConfig()
