# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Folder scanning and batch extraction.

This module provides the batch side of persontags: finding image files in a
folder, extracting person tags from many files in parallel, and summarizing
the distinct persons found across a batch.

Copyright 2025 DNAi inc.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Union

from persontags.core import PersonTagExtractor
from persontags.exceptions import MetadataReadError, PersonTagsError
from persontags.segment_locator import PHOTOSHOP_MARKER, XMP_MARKER_PAIRS

logger = logging.getLogger(__name__)


# Supported image extensions (lower case, without the dot)
IMAGE_EXTENSIONS = frozenset({
    'jpg', 'jpeg', 'png', 'webp', 'tiff', 'tif', 'bmp', 'gif', 'heic', 'heif', 'avif',
})

# Bytes read from the start of a file by the quick metadata check
HEADER_SCAN_SIZE = 65536

EXIF_HEADER = b'Exif\x00\x00'
TIFF_HEADERS = (b'II*\x00', b'MM\x00*')


class ScanConfig:
    """
    Configuration for folder scans and batch extraction.
    """

    def __init__(
        self,
        extensions: Optional[Iterable[str]] = None,
        include_subdirs: bool = True,
        max_workers: Optional[int] = None,
        skip_no_metadata: bool = False,
    ):
        """
        Initialize with defaults.

        Args:
            extensions: Image extensions to accept (with or without the dot)
            include_subdirs: Whether to descend into subdirectories
            max_workers: Thread pool size for batch extraction
            skip_no_metadata: Skip files that fail the quick metadata check
        """
        if extensions is None:
            self.extensions = set(IMAGE_EXTENSIONS)
        else:
            self.extensions = {ext.lower().lstrip('.') for ext in extensions if ext.strip()}
        self.include_subdirs = include_subdirs
        self.max_workers = max_workers or max(1, os.cpu_count() or 4)
        self.skip_no_metadata = skip_no_metadata


@dataclass
class ImageRecord:
    """Extraction outcome for one image file."""
    path: Path
    filename: str
    persons: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    selected_person: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'path': str(self.path),
            'filename': self.filename,
            'persons': list(self.persons),
            'keywords': list(self.keywords),
            'selected_person': self.selected_person,
            'error': self.error,
        }


def scan_image_files(
    source_dir: Union[str, Path],
    include_subdirs: bool = True,
    extensions: Optional[Iterable[str]] = None,
) -> List[Path]:
    """
    Find image files in a folder.

    Args:
        source_dir: Folder to scan
        include_subdirs: If True, scan subfolders as well
        extensions: Accepted extensions (defaults to IMAGE_EXTENSIONS)

    Returns:
        Sorted list of image file paths

    Raises:
        MetadataReadError: If source_dir is not a directory
    """
    root = Path(source_dir)
    if not root.is_dir():
        raise MetadataReadError(f"Not a directory: {root}")

    config = ScanConfig(extensions=extensions, include_subdirs=include_subdirs)
    candidates = root.rglob('*') if include_subdirs else root.iterdir()

    files = []
    for path in candidates:
        if not path.is_file():
            continue
        ext = path.suffix.lower().lstrip('.')
        if ext in config.extensions:
            files.append(path)

    files.sort(key=lambda p: str(p))
    return files


def has_metadata(source: Union[str, Path, bytes]) -> bool:
    """
    Quickly check whether data looks like it carries embedded metadata.

    Only marker signatures are checked, nothing is decoded. For a path,
    the first HEADER_SCAN_SIZE bytes are examined.

    Args:
        source: File path or raw bytes

    Returns:
        True if an XMP, Photoshop/IPTC or EXIF marker is present
    """
    if isinstance(source, (bytes, bytearray)):
        header = bytes(source)
    else:
        try:
            with open(source, 'rb') as f:
                header = f.read(HEADER_SCAN_SIZE)
        except OSError:
            return False

    if header[:4] in TIFF_HEADERS:
        return True
    if EXIF_HEADER in header or PHOTOSHOP_MARKER in header:
        return True
    return any(start.encode('ascii') in header for start, _ in XMP_MARKER_PAIRS)


def process_single_image(path: Union[str, Path]) -> ImageRecord:
    """
    Extract person tags from one image.

    The first person, if any, becomes the record's selected person.

    Raises:
        MetadataReadError: If the file cannot be read
    """
    path = Path(path)
    result = PersonTagExtractor(file_path=path).extract()
    persons = list(result.persons)
    return ImageRecord(
        path=path,
        filename=path.name,
        persons=persons,
        keywords=list(result.keywords),
        selected_person=persons[0] if persons else None,
    )


def batch_extract(
    file_paths: Iterable[Union[str, Path]],
    config: Optional[ScanConfig] = None,
    error_handler: Optional[Callable[[Path, Exception], None]] = None,
) -> List[ImageRecord]:
    """
    Extract person tags from multiple files in parallel.

    Args:
        file_paths: Files to process
        config: Scan configuration (defaults to ScanConfig())
        error_handler: Optional callback for failures (path, exception).
                      Without one, a failed file yields a record with
                      ``error`` set.

    Returns:
        One record per processed file, in input order

    Example:
        >>> records = batch_extract(scan_image_files('photos'))
        >>> summarize_persons(records)['person_names']
        ['Alice', 'Bob']
    """
    config = config or ScanConfig()
    paths = [Path(p) for p in file_paths]

    if config.skip_no_metadata:
        paths = [p for p in paths if has_metadata(p)]

    if not paths:
        return []

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        futures = [executor.submit(process_single_image, p) for p in paths]

    records = []
    for path, future in zip(paths, futures):
        try:
            records.append(future.result())
        except PersonTagsError as e:
            logger.warning("Skipping %s: %s", path, e)
            if error_handler:
                error_handler(path, e)
            else:
                records.append(ImageRecord(path=path, filename=path.name, error=str(e)))

    return records


def summarize_persons(records: Iterable[ImageRecord]) -> Dict[str, Any]:
    """
    Count distinct persons across a batch.

    Returns:
        Dictionary with 'person_count', sorted 'person_names' and
        'image_count' (records without an error)
    """
    names: Set[str] = set()
    image_count = 0
    for record in records:
        if record.error:
            continue
        image_count += 1
        names.update(record.persons)

    person_names = sorted(names)
    return {
        'person_count': len(person_names),
        'person_names': person_names,
        'image_count': image_count,
    }
