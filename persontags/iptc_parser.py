# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
IPTC keyword decoder

This module decodes the Photoshop Image Resource Block (IRB) stream that
JPEG files carry in their APP13 segment and extracts IPTC-IIM Keywords
(dataset 2:25) from the IPTC-NAA resource.

Every offset is checked against the buffer before it is read. A size field
that points past the end of the buffer stops the scan, and whatever was
decoded before it is returned.

Copyright 2025 DNAi inc.
"""

import logging
import struct
from typing import List

from persontags.text_utils import trim

logger = logging.getLogger(__name__)


IRB_SIGNATURE = b'8BIM'

# Resource ID of the IPTC-NAA record inside a Photoshop IRB stream
IPTC_NAA_RESOURCE_ID = 0x0404

# Smallest 8BIM block: signature, ID, name length + pad, 4-byte size
IRB_MIN_BLOCK = 12

# IPTC-IIM dataset header: marker, record, dataset, 2-byte length
IIM_MARKER = 0x1C
IIM_HEADER_SIZE = 5

# Application Record (2), Keywords dataset (25)
IPTC_KEYWORDS = (2, 25)


def decode_keyword_payload(payload: bytes) -> str:
    """
    Decode an IPTC Keywords payload.

    UTF-8 is tried first. Anything that is not valid UTF-8 is mapped byte
    for byte to code points 0-255 (Latin-1), which never fails.
    """
    try:
        return payload.decode('utf-8')
    except UnicodeDecodeError:
        return payload.decode('latin-1')


def decode_iptc_records(payload: bytes) -> List[str]:
    """
    Parse raw IPTC-IIM records and collect Keywords.

    IPTC data is stored as a series of datasets, each containing:
    - 1 byte: Tag marker (0x1C)
    - 1 byte: Record number
    - 1 byte: Dataset number
    - 2 bytes: Data length (big-endian)
    - N bytes: Data

    Args:
        payload: Body of an IPTC-NAA (0x0404) resource block

    Returns:
        Keywords in the order they appear
    """
    keywords: List[str] = []
    offset = 0

    while offset + IIM_HEADER_SIZE <= len(payload):
        if payload[offset] != IIM_MARKER:
            offset += 1
            continue

        record = payload[offset + 1]
        dataset = payload[offset + 2]
        field_len = struct.unpack('>H', payload[offset + 3:offset + 5])[0]

        offset += IIM_HEADER_SIZE
        if offset + field_len > len(payload):
            logger.debug(
                "IPTC dataset %d:%d claims %d bytes, only %d left; stopping",
                record, dataset, field_len, len(payload) - offset,
            )
            break

        if (record, dataset) == IPTC_KEYWORDS:
            keyword = trim(decode_keyword_payload(payload[offset:offset + field_len]))
            if keyword:
                keywords.append(keyword)

        offset += field_len

    return keywords


class IPTCBlockDecoder:
    """
    Decoder for IPTC keywords held in a Photoshop IRB stream.

    The stream is a sequence of 8BIM resource blocks:
    - 4 bytes: Signature ("8BIM")
    - 2 bytes: Resource ID (big-endian)
    - Pascal string name, padded so length byte + name is even
    - 4 bytes: Data size (big-endian)
    - N bytes: Data, padded to an even size
    """

    def __init__(self, stream: bytes):
        """
        Initialize the decoder.

        Args:
            stream: Bytes following the "Photoshop 3.0" marker
        """
        self.stream = stream

    def decode_keywords(self) -> List[str]:
        """
        Walk the resource blocks and decode every IPTC-NAA block.

        Returns:
            Keywords from all IPTC blocks, in stream order
        """
        data = self.stream
        keywords: List[str] = []
        offset = 0

        while offset + IRB_MIN_BLOCK <= len(data):
            if data[offset:offset + 4] != IRB_SIGNATURE:
                offset += 1
                continue

            resource_id = struct.unpack('>H', data[offset + 4:offset + 6])[0]

            # Name is a pascal string; length byte + name is padded to even
            name_len = data[offset + 6]
            if (name_len + 1) % 2 != 0:
                padded_name_len = name_len + 2
            else:
                padded_name_len = name_len + 1

            size_offset = offset + 6 + padded_name_len
            if size_offset + 4 > len(data):
                logger.debug("8BIM block at %d: size field past end of stream", offset)
                break

            block_size = struct.unpack('>I', data[size_offset:size_offset + 4])[0]
            block_start = size_offset + 4
            block_end = block_start + block_size

            if block_end > len(data):
                logger.debug(
                    "8BIM block 0x%04X at %d claims %d bytes, only %d left; stopping",
                    resource_id, offset, block_size, len(data) - block_start,
                )
                break

            if resource_id == IPTC_NAA_RESOURCE_ID:
                keywords.extend(decode_iptc_records(data[block_start:block_end]))

            # Blocks are aligned to even offsets
            offset = block_end
            if offset % 2 != 0:
                offset += 1

        return keywords
