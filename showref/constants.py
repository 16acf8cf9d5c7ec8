"""Constants for showref: ref namespaces, object types, hash and abbreviation sizes."""

from __future__ import annotations

# Ref namespaces under .git
REF_PREFIX = "refs/"
REF_HEADS_PREFIX = "refs/heads/"
REF_TAGS_PREFIX = "refs/tags/"
HEAD_FILE = "HEAD"
PACKED_REFS_FILE = "packed-refs"

# Suffix marking a peeled tag line ("<oid> <name>^{}")
PEELED_SUFFIX = "^{}"

# Symbolic refs are followed at most this many levels
MAX_SYMREF_DEPTH = 5

# Object types
OBJ_BLOB = "blob"
OBJ_TAG = "tag"

# SHA-1 hex length
SHA1_HEX_LEN = 40

# Abbreviation: git never abbreviates below 4, "auto" starts at 7
MIN_ABBREV = 4
DEFAULT_ABBREV_LEN = 7
ABBREV_AUTO = -1
ABBREV_FULL = 0

# Exit status used for fatal errors (git's die())
EXIT_FATAL = 128
