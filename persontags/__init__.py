# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
persontags - Person tag and keyword extraction for image files

Reads the people and keywords that photo tools embed in image files:
EXIF XPKeywords (Windows), XMP packets (Dublin Core, MWG regions,
Lightroom/Bridge, digiKam) and IPTC-IIM keywords inside Photoshop
resource blocks.

Copyright 2025 DNAi inc.
"""

__version__ = "0.1.0"
__author__ = "DNAi inc."

from persontags.core import (
    Candidate,
    CandidateKind,
    ExtractionResult,
    PersonTagExtractor,
    extract_person_tags,
    merge_candidates,
)
from persontags.exceptions import PersonTagsError, MetadataReadError
from persontags.scanner import (
    IMAGE_EXTENSIONS,
    ImageRecord,
    ScanConfig,
    batch_extract,
    has_metadata,
    process_single_image,
    scan_image_files,
    summarize_persons,
)

__all__ = [
    "Candidate",
    "CandidateKind",
    "ExtractionResult",
    "PersonTagExtractor",
    "extract_person_tags",
    "merge_candidates",
    "PersonTagsError",
    "MetadataReadError",
    "IMAGE_EXTENSIONS",
    "ImageRecord",
    "ScanConfig",
    "batch_extract",
    "has_metadata",
    "process_single_image",
    "scan_image_files",
    "summarize_persons",
]
