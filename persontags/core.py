# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Core extraction API

This module provides the main API for pulling person names and keywords out
of an image file. It runs the EXIF, XMP and IPTC decoders over the same
bytes and merges their candidates into a single result.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from persontags.exceptions import MetadataReadError
from persontags.exif_parser import ExifXPKeywordsDecoder
from persontags.iptc_parser import IPTCBlockDecoder
from persontags.segment_locator import IPTCBlockStream, XMPChunk, locate_segments
from persontags.xmp_parser import XMPHeuristicDecoder

logger = logging.getLogger(__name__)


class CandidateKind(Enum):
    """What a decoded value is believed to name."""
    PERSON = "person"
    KEYWORD = "keyword"


@dataclass(frozen=True)
class Candidate:
    """A single value produced by one of the decoders."""
    value: str
    kind: CandidateKind


@dataclass(frozen=True)
class ExtractionResult:
    """Deduplicated, sorted persons and keywords for one file."""
    persons: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, List[str]]:
        return {'persons': list(self.persons), 'keywords': list(self.keywords)}

    def is_empty(self) -> bool:
        return not self.persons and not self.keywords


def merge_candidates(candidates: Iterable[Candidate]) -> ExtractionResult:
    """
    Merge decoder candidates into an ExtractionResult.

    Both lists are deduplicated and sorted by code point. If no person was
    found but there are keywords, every keyword is also reported as a
    person.

    Args:
        candidates: Candidates from any number of decoders

    Returns:
        ExtractionResult
    """
    persons = set()
    keywords = set()
    for candidate in candidates:
        if candidate.kind is CandidateKind.PERSON:
            persons.add(candidate.value)
        else:
            keywords.add(candidate.value)

    sorted_keywords = tuple(sorted(keywords))
    sorted_persons = tuple(sorted(persons))

    if not sorted_persons and sorted_keywords:
        sorted_persons = sorted_keywords

    return ExtractionResult(persons=sorted_persons, keywords=sorted_keywords)


class PersonTagExtractor:
    """
    Extracts person tags and keywords from an image file.

    Sources, all read from the same bytes:
    - EXIF XPKeywords (Windows)
    - XMP dc:subject, MWG / Microsoft regions, Lightroom hierarchical
      subjects and digiKam tag lists
    - IPTC Keywords inside Photoshop 8BIM resource blocks

    Example:
        >>> result = PersonTagExtractor('photo.jpg').extract()
        >>> result.persons
        ('Alice', 'Bob')
    """

    def __init__(self, file_path: Optional[Union[str, Path]] = None, file_data: Optional[bytes] = None):
        """
        Initialize the extractor.

        Args:
            file_path: Path to the image file
            file_data: Raw file data (alternative to file_path)
        """
        if file_path is not None:
            self.file_path = Path(file_path)
            self.file_data = None
        elif file_data is not None:
            self.file_path = None
            self.file_data = bytes(file_data)
        else:
            raise ValueError("Either file_path or file_data must be provided")

    def _read_data(self) -> bytes:
        if self.file_data is not None:
            return self.file_data
        try:
            return self.file_path.read_bytes()
        except OSError as e:
            raise MetadataReadError(f"Failed to read {self.file_path}: {e}") from e

    def extract(self) -> ExtractionResult:
        """
        Run all decoders and merge their output.

        Returns:
            ExtractionResult, possibly with both lists empty

        Raises:
            MetadataReadError: If the file cannot be read
        """
        data = self._read_data()
        return merge_candidates(self.collect_candidates(data))

    @staticmethod
    def collect_candidates(data: bytes) -> List[Candidate]:
        """Run every decoder over the data and return their raw candidates."""
        candidates: List[Candidate] = []

        for keyword in ExifXPKeywordsDecoder(data).decode_keywords():
            candidates.append(Candidate(keyword, CandidateKind.KEYWORD))

        for segment in locate_segments(data):
            if isinstance(segment, XMPChunk):
                persons, keywords = XMPHeuristicDecoder(segment.text).decode()
                candidates.extend(Candidate(p, CandidateKind.PERSON) for p in persons)
                candidates.extend(Candidate(k, CandidateKind.KEYWORD) for k in keywords)
            elif isinstance(segment, IPTCBlockStream):
                for keyword in IPTCBlockDecoder(segment.data).decode_keywords():
                    candidates.append(Candidate(keyword, CandidateKind.KEYWORD))

        logger.debug("Collected %d candidates", len(candidates))
        return candidates


def extract_person_tags(source: Union[str, Path, bytes, bytearray]) -> ExtractionResult:
    """
    Extract person tags from a file path or from raw file bytes.

    Args:
        source: Path to an image, or the image's bytes

    Returns:
        ExtractionResult

    Raises:
        MetadataReadError: If a path was given and cannot be read
    """
    if isinstance(source, (bytes, bytearray)):
        return PersonTagExtractor(file_data=source).extract()
    return PersonTagExtractor(file_path=source).extract()
