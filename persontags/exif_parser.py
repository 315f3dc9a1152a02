# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF XPKeywords decoder

Windows Explorer stores keywords in the private TIFF tag 0x9C9E
(XPKeywords) as a BYTE array of UTF-16LE text, entries separated by ';'.
The IFD itself is read with Pillow's EXIF reader; this module only decodes
the tag value.

Copyright 2025 DNAi inc.
"""

import io
import logging
from typing import Any, List, Optional

from PIL import Image

from persontags.text_utils import trim

logger = logging.getLogger(__name__)


XP_KEYWORDS_TAG = 0x9C9E
IMAGE_DESCRIPTION_TAG = 0x010E


def decode_xp_keywords(value: Any) -> List[str]:
    """
    Decode an XPKeywords value into keyword strings.

    Args:
        value: Raw tag value, as bytes or a sequence of byte values

    Returns:
        Trimmed, non-empty keywords in stored order
    """
    if isinstance(value, (list, tuple)):
        value = bytes(value)
    if not isinstance(value, (bytes, bytearray)):
        return []

    # Whole 16-bit units only; a dangling odd byte is dropped
    raw = bytes(value[:len(value) - len(value) % 2])
    text = raw.decode('utf-16-le', errors='replace').rstrip('\x00')

    keywords = []
    for part in text.split(';'):
        part = trim(part)
        if part:
            keywords.append(part)
    return keywords


class ExifXPKeywordsDecoder:
    """
    Decoder for the XPKeywords tag in a file's primary IFD.
    """

    def __init__(self, file_data: bytes):
        """
        Initialize the decoder.

        Args:
            file_data: Raw file bytes (any container Pillow can open)
        """
        self.file_data = file_data
        self.image_description: Optional[str] = None

    def decode_keywords(self) -> List[str]:
        """
        Read XPKeywords from IFD0.

        Returns:
            Keywords, or an empty list when the file has no EXIF data or
            the tag cannot be decoded
        """
        try:
            with Image.open(io.BytesIO(self.file_data)) as image:
                exif = image.getexif()
                xp_value = exif.get(XP_KEYWORDS_TAG)
                description = exif.get(IMAGE_DESCRIPTION_TAG)
        except Image.DecompressionBombError as e:
            # Pillow refuses the open before EXIF is read
            logger.warning("Image too large to read EXIF keywords: %s", e)
            return []
        except Exception as e:
            logger.debug("No readable EXIF container: %s", e)
            return []

        # Read but never emitted as a candidate
        if isinstance(description, bytes):
            description = description.decode('utf-8', errors='replace')
        if isinstance(description, str):
            self.image_description = trim(trim(description).strip('"')) or None

        if xp_value is None:
            return []

        try:
            return decode_xp_keywords(xp_value)
        except (TypeError, ValueError) as e:
            logger.debug("Unreadable XPKeywords value: %s", e)
            return []
