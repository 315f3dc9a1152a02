# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Text helpers shared by the decoders.

Copyright 2025 DNAi inc.
"""

# Code points with the Unicode White_Space property. A bare str.strip()
# also removes the information separators U+001C-U+001F, which are kept.
UNICODE_WHITESPACE = ''.join(chr(code_point) for code_point in (
    0x0009, 0x000A, 0x000B, 0x000C, 0x000D, 0x0020, 0x0085, 0x00A0,
    0x1680, 0x2000, 0x2001, 0x2002, 0x2003, 0x2004, 0x2005, 0x2006,
    0x2007, 0x2008, 0x2009, 0x200A, 0x2028, 0x2029, 0x202F, 0x205F,
    0x3000,
))


def trim(text: str) -> str:
    """Strip leading and trailing Unicode whitespace."""
    return text.strip(UNICODE_WHITESPACE)
