"""
Converter: turns a listing file, or every listing in a directory, into
annotated output files.

Structural problems (missing path, wrong extension, nothing to convert)
raise a ConversionError naming the offending path. Per-line problems never
raise; they show up as sentinels in the output.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .output_manager import OutputManager
from .profiles import (ListingProfile, UnknownFamilyError, eligible_extensions,
                       get_profile, profile_for_path)
from .records import decode_file

__all__ = [
    'ConversionError', 'InputNotFoundError', 'WrongExtensionError',
    'EmptyDirectoryError', 'UnknownFamilyError', 'find_listings', 'convert',
]

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class ConversionError(Exception):
    """Raised when an input cannot be converted at all."""
    def __init__(self, message: str, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"{message}: {path}")


class InputNotFoundError(ConversionError):
    def __init__(self, path: Union[str, Path]):
        super().__init__("Path not found", path)


class WrongExtensionError(ConversionError):
    def __init__(self, path: Union[str, Path], extensions: Tuple[str, ...]):
        self.extensions = extensions
        super().__init__(f"Not a {'/'.join(extensions)} file", path)


class EmptyDirectoryError(ConversionError):
    def __init__(self, path: Union[str, Path], extensions: Tuple[str, ...]):
        self.extensions = extensions
        super().__init__(f"No {'/'.join(extensions)} files found in directory", path)


def _resolve_profile(family: Optional[Union[str, ListingProfile]]) -> Optional[ListingProfile]:
    if family is None or isinstance(family, ListingProfile):
        return family
    if family.lower() == 'auto':
        return None
    return get_profile(family)


def find_listings(input_path: Union[str, Path],
                  family: Optional[Union[str, ListingProfile]] = None
                  ) -> List[Tuple[Path, ListingProfile]]:
    """
    Resolve an input path to (listing, profile) pairs.

    A file must carry an eligible extension. A directory is scanned at the
    top level only; files are returned sorted by name.
    """
    profile = _resolve_profile(family)
    extensions = eligible_extensions(profile)
    path = Path(input_path)

    if path.is_file():
        if path.suffix.lower() not in extensions:
            raise WrongExtensionError(path, extensions)
        return [(path, profile or profile_for_path(path))]

    if path.is_dir():
        found = []
        for child in sorted(path.iterdir()):
            if child.is_file() and child.suffix.lower() in extensions:
                found.append((child, profile or profile_for_path(child)))
        if not found:
            raise EmptyDirectoryError(path, extensions)
        return found

    raise InputNotFoundError(path)


def convert(input_path: Union[str, Path],
            output_dir: Optional[Union[str, Path]] = None,
            fmt: str = 'csv',
            family: Optional[Union[str, ListingProfile]] = None,
            progress: Optional[ProgressCallback] = None) -> List[Path]:
    """
    Convert one listing or a directory of listings.

    Args:
        input_path: Listing file or directory of listings.
        output_dir: Where to write outputs (created if missing). Defaults
                    to the directory of each input.
        fmt: 'txt', 'csv', 'json' or 'md'.
        family: Profile name, 'auto'/None to pick by extension.
        progress: Called with a status message before each file.

    Returns:
        Paths of the written output files, in processing order.
    """
    listings = find_listings(input_path, family)
    manager = OutputManager(output_dir)
    written = []

    for listing, profile in listings:
        message = f"Converting file: {listing.name}"
        log.info(message)
        if progress is not None:
            progress(message)
        records = decode_file(listing, profile)
        written.append(manager.write_records(records, listing, profile, fmt))

    stats = manager.get_statistics()
    log.debug("%d file(s), %d bytes written", stats['files_written'], stats['bytes_written'])
    return written
