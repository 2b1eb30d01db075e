"""Local configuration for roundtrip_ini."""

from __future__ import annotations

import os


DEFAULT_SOURCE_LABEL = "<string>"
DEFAULT_MAX_COMMENT_RUN = 0
PATH_SEPARATOR = "/"

# Label reported in error messages when the caller does not name the source.
ROUNDTRIP_INI_SOURCE_LABEL = os.getenv("ROUNDTRIP_INI_SOURCE_LABEL", DEFAULT_SOURCE_LABEL)
# Longest run of comment lines scanned to tell a property from a section (0 = unbounded).
ROUNDTRIP_INI_MAX_COMMENT_RUN = int(os.getenv("ROUNDTRIP_INI_MAX_COMMENT_RUN", str(DEFAULT_MAX_COMMENT_RUN)))
