# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
XMP (Extensible Metadata Platform) person and keyword decoder

This module parses an XMP packet and applies vendor-specific heuristics to
separate person names from generic keywords. Elements are matched on their
local name only, so the same rules cover Dublin Core, MWG regions,
Microsoft Photo regions, Lightroom/Bridge hierarchical subjects and digiKam
tag lists regardless of the prefix a tool declared.

Copyright 2025 DNAi inc.
"""

import logging
import xml.etree.ElementTree as ET
from typing import List, Tuple

from persontags.text_utils import trim

logger = logging.getLogger(__name__)


def local_name(name: str) -> str:
    """Strip a '{namespace}' or 'prefix:' qualifier from a tag or attribute name."""
    if name.startswith('{'):
        return name.split('}', 1)[1]
    if ':' in name:
        return name.split(':', 1)[1]
    return name


def element_text(element: ET.Element) -> str:
    """Return the element's own text, trimmed ('' when absent)."""
    return trim(element.text or '')


class XMPHeuristicDecoder:
    """
    Decoder for person and keyword candidates in an XMP packet.

    Rules, keyed by local element name:
    - subject: each rdf:li is a keyword (dc:subject)
    - RegionList / Regions / RegionInfo: Name and PersonDisplayName text,
      plus name-like attributes, are persons (MWG, Microsoft Photo)
    - hierarchicalSubject: "People|Alice" style entries are persons
      (Lightroom, Bridge)
    - TagsList: "People/Alice" style entries are persons (digiKam)
    """

    REGION_TAGS = frozenset({'RegionList', 'Regions', 'RegionInfo'})
    REGION_NAME_TAGS = frozenset({'Name', 'PersonDisplayName'})

    # Category markers for hierarchical keyword paths
    HIERARCHY_PERSON_CATEGORIES = ('people', 'person', '人物', '人')
    TAGS_LIST_PERSON_CATEGORIES = ('people', 'person', '人物')

    # Boolean flags that show up in name-like region attributes
    BOOLEAN_VALUES = frozenset({'true', 'false'})

    def __init__(self, chunk: str):
        """
        Initialize the decoder.

        Args:
            chunk: XMP packet text (an x:xmpmeta element)
        """
        self.chunk = chunk

    def decode(self) -> Tuple[List[str], List[str]]:
        """
        Parse the packet and apply all rules.

        Returns:
            Tuple of (persons, keywords) in document order. Both are empty
            when the packet is not well-formed XML.
        """
        persons: List[str] = []
        keywords: List[str] = []

        try:
            root = ET.fromstring(self.chunk)
        except (ET.ParseError, ValueError) as e:
            logger.debug("Skipping malformed XMP packet: %s", e)
            return persons, keywords

        for element in root.iter():
            tag = local_name(element.tag) if isinstance(element.tag, str) else ''

            if tag == 'subject':
                keywords.extend(self._subject_keywords(element))

            if tag in self.REGION_TAGS:
                persons.extend(self._region_persons(element))

            if tag == 'hierarchicalSubject':
                persons.extend(self._path_persons(element, '|', self.HIERARCHY_PERSON_CATEGORIES))

            if tag == 'TagsList':
                persons.extend(self._path_persons(element, '/', self.TAGS_LIST_PERSON_CATEGORIES))

        return persons, keywords

    @staticmethod
    def _list_items(element: ET.Element) -> List[ET.Element]:
        return [child for child in element.iter()
                if isinstance(child.tag, str) and local_name(child.tag) == 'li']

    def _subject_keywords(self, element: ET.Element) -> List[str]:
        keywords = []
        for item in self._list_items(element):
            text = element_text(item)
            if text:
                keywords.append(text)
        return keywords

    def _region_persons(self, element: ET.Element) -> List[str]:
        """
        Collect person names below a region container.

        MWG regions use <mwg-rs:Name>, Microsoft Photo uses
        <MPReg:PersonDisplayName>; both may also appear as attributes on
        rdf:Description when the packet is written in compact form.
        """
        persons = []
        for descendant in element.iter():
            if not isinstance(descendant.tag, str):
                continue

            if local_name(descendant.tag) in self.REGION_NAME_TAGS:
                text = element_text(descendant)
                if text:
                    persons.append(text)

            for attr_name, attr_value in descendant.attrib.items():
                attr_local = local_name(attr_name).lower()
                if 'name' not in attr_local and 'person' not in attr_local:
                    continue
                value = trim(attr_value)
                if value and value not in self.BOOLEAN_VALUES:
                    persons.append(value)

        return persons

    def _path_persons(self, element: ET.Element, separator: str, categories: Tuple[str, ...]) -> List[str]:
        """Collect the leaf of every keyword path whose root names a person category."""
        persons = []
        for item in self._list_items(element):
            text = element_text(item)
            if separator not in text:
                continue

            parts = text.split(separator)
            if len(parts) < 2:
                continue

            category = parts[0].lower()
            # An empty leaf ("People|") is still reported, as ''
            if any(marker in category for marker in categories):
                persons.append(trim(parts[-1]))

        return persons
