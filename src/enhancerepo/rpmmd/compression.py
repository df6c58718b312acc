"""Compression utilities for repository metadata files."""

from __future__ import annotations

import bz2
import gzip
import io
from pathlib import Path
from typing import IO, Literal

import zstandard as zstd

CompressionFormat = Literal["gzip", "zstandard", "bzip2", "none"]

COMPRESSION_FORMATS: tuple[CompressionFormat, ...] = ("gzip", "zstandard", "bzip2", "none")


def detect_compression(filename: str) -> CompressionFormat:
    """Detect compression format from filename extension.

    Args:
        filename: Filename to check (e.g., "patterns.xml.gz", "pattern.gz")

    Returns:
        Compression format ("none" if no compression detected)
    """
    if filename.endswith(".gz"):
        return "gzip"
    elif filename.endswith(".zst"):
        return "zstandard"
    elif filename.endswith(".bz2"):
        return "bzip2"
    else:
        return "none"


def sniff_compression(file_path: Path) -> CompressionFormat:
    """Detect compression format from the magic bytes of a file."""
    with open(file_path, "rb") as f:
        magic = f.read(4)

    if magic[:2] == b"\x1f\x8b":  # gzip magic
        return "gzip"
    elif magic == b"\x28\xb5\x2f\xfd":  # zstandard magic
        return "zstandard"
    elif magic[:3] == b"BZh":  # bzip2 magic
        return "bzip2"
    return "none"


def open_metadata(file_path: Path) -> IO[str]:
    """Open a metadata file for reading as text, decompressing on the fly.

    Line terminators are passed through unchanged.

    Args:
        file_path: Path to (possibly compressed) file

    Returns:
        Text stream, to be used as a context manager
    """
    compression = detect_compression(file_path.name)
    if compression == "none":
        compression = sniff_compression(file_path)

    if compression == "gzip":
        return gzip.open(file_path, "rt", encoding="utf-8", newline="")
    elif compression == "bzip2":
        return bz2.open(file_path, "rt", encoding="utf-8", newline="")
    elif compression == "zstandard":
        reader = zstd.ZstdDecompressor().stream_reader(open(file_path, "rb"), closefd=True)
        return io.TextIOWrapper(reader, encoding="utf-8", newline="")
    return open(file_path, encoding="utf-8", newline="")


def compress_file(
    data: bytes, compression: CompressionFormat, compression_level: int | None = None
) -> bytes:
    """Compress data based on compression format.

    Args:
        data: Uncompressed bytes
        compression: Compression format
        compression_level: Compression level (format-dependent, None = default)

    Returns:
        Compressed bytes

    Raises:
        ValueError: If compression format is unknown
    """
    if compression == "gzip":
        level = compression_level if compression_level is not None else 6
        return gzip.compress(data, compresslevel=level)
    elif compression == "zstandard":
        level = compression_level if compression_level is not None else 3
        cctx = zstd.ZstdCompressor(level=level)
        return cctx.compress(data)
    elif compression == "bzip2":
        level = compression_level if compression_level is not None else 9
        return bz2.compress(data, compresslevel=level)
    elif compression == "none":
        return data
    else:
        raise ValueError(f"Unknown compression format: {compression}")


def decompress_file(compressed_data: bytes, compression: CompressionFormat) -> bytes:
    """Decompress data based on compression format.

    Raises:
        ValueError: If compression format is unknown
    """
    if compression == "gzip":
        return gzip.decompress(compressed_data)
    elif compression == "zstandard":
        dctx = zstd.ZstdDecompressor()
        return dctx.decompressobj().decompress(compressed_data)
    elif compression == "bzip2":
        return bz2.decompress(compressed_data)
    elif compression == "none":
        return compressed_data
    else:
        raise ValueError(f"Unknown compression format: {compression}")


def get_extension(compression: CompressionFormat) -> str:
    """Get file extension for compression format (e.g., ".gz", ".zst", "")."""
    if compression == "gzip":
        return ".gz"
    elif compression == "zstandard":
        return ".zst"
    elif compression == "bzip2":
        return ".bz2"
    elif compression == "none":
        return ""
    else:
        raise ValueError(f"Unknown compression format: {compression}")


def add_compression_extension(filename: str, compression: CompressionFormat) -> str:
    """Add compression extension to filename if needed.

    Args:
        filename: Base filename (e.g., "patterns.xml")
        compression: Compression format

    Returns:
        Filename with compression extension (e.g., "patterns.xml.gz")
    """
    ext = get_extension(compression)
    if ext:
        return f"{filename}{ext}"
    return filename


def write_metadata(
    file_path: Path, data: bytes, compression: CompressionFormat
) -> Path:
    """Compress data and write it to file_path, creating parent directories.

    Returns:
        file_path
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(compress_file(data, compression))
    return file_path
