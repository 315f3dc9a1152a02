# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Exception classes for persontags

Malformed or missing metadata is never an error for an extraction: each
decoder returns an empty result instead. Only failures to read the file
itself surface through these exceptions.

Copyright 2025 DNAi inc.
"""


class PersonTagsError(Exception):
    """
    Root of the persontags error hierarchy.

    Catch this to handle any failure the extractor, the folder scanner or
    the batch layer reports. The text is kept on ``message`` so batch
    records and the CLI can show it without formatting the exception.
    """
    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class MetadataReadError(PersonTagsError):
    """
    The bytes to scan could not be obtained.

    Raised by PersonTagExtractor.extract when the image path is missing,
    is not a regular file or cannot be opened, and by scan_image_files
    when the folder to scan does not exist.
    """
