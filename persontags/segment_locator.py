# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Metadata segment locator

This module finds the raw ranges inside an image file that carry embedded
metadata: the XMP packet (XML text) and the Photoshop Image Resource Block
stream that wraps IPTC-IIM records. The search is container-agnostic, so the
same code works for JPEG, TIFF, PNG and WebP files alike.

Copyright 2025 DNAi inc.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)


# XMP packet markers, tried in this order
XMP_MARKER_PAIRS: Tuple[Tuple[str, str], ...] = (
    ('<x:xmpmeta', '</x:xmpmeta>'),
    ('<?xpacket begin', '<?xpacket end'),
)

XMPMETA_START = '<x:xmpmeta'
XMPMETA_END = '</x:xmpmeta>'

# Photoshop 3.0 header that precedes the 8BIM resource blocks (JPEG APP13)
PHOTOSHOP_MARKER = b'Photoshop 3.0\x00'


@dataclass(frozen=True)
class MetadataSegment:
    """Base class for a located metadata segment."""
    pass


@dataclass(frozen=True)
class XMPChunk(MetadataSegment):
    """XMP packet text, ready for the XML parser."""
    text: str


@dataclass(frozen=True)
class IPTCBlockStream(MetadataSegment):
    """Bytes following the Photoshop marker (a stream of 8BIM blocks)."""
    data: bytes


def find_xmp_chunk(data: bytes) -> Optional[XMPChunk]:
    """
    Locate the XMP packet in the file data.

    The file is viewed as lossy UTF-8 text. Marker pairs are tried in
    priority order and the first pair that matches wins. When the matched
    range wraps an ``<x:xmpmeta>`` element (e.g. an xpacket envelope whose
    processing instructions are not valid XML), the range is narrowed to
    that element.

    Args:
        data: Raw file bytes

    Returns:
        XMPChunk, or None if no packet was found
    """
    text = data.decode('utf-8', errors='replace')

    for start_marker, end_marker in XMP_MARKER_PAIRS:
        start = text.find(start_marker)
        if start == -1:
            continue
        end_pos = text.find(end_marker, start)
        if end_pos == -1:
            continue

        chunk = text[start:end_pos + len(end_marker)]

        meta_start = chunk.find(XMPMETA_START)
        if meta_start != -1:
            meta_end = chunk.find(XMPMETA_END, meta_start)
            if meta_end != -1:
                chunk = chunk[meta_start:meta_end + len(XMPMETA_END)]

        logger.debug("XMP packet found at offset %d (%d chars)", start, len(chunk))
        return XMPChunk(chunk)

    return None


def find_photoshop_stream(data: bytes) -> Optional[IPTCBlockStream]:
    """
    Locate the Photoshop Image Resource Block stream.

    Args:
        data: Raw file bytes

    Returns:
        IPTCBlockStream holding everything after the first Photoshop marker,
        or None if the marker is absent
    """
    start = data.find(PHOTOSHOP_MARKER)
    if start == -1:
        return None
    logger.debug("Photoshop resource stream found at offset %d", start)
    return IPTCBlockStream(data[start + len(PHOTOSHOP_MARKER):])


def locate_segments(data: bytes) -> List[MetadataSegment]:
    """Return every metadata segment found in the file data."""
    segments: List[MetadataSegment] = []

    xmp_chunk = find_xmp_chunk(data)
    if xmp_chunk is not None:
        segments.append(xmp_chunk)

    irb_stream = find_photoshop_stream(data)
    if irb_stream is not None:
        segments.append(irb_stream)

    return segments
