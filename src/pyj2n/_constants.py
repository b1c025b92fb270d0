"""Default limits and options for overflow-preserving decode/encode."""

DEFAULT_MAX_INPUT_LENGTH = 16 * 1024 * 1024
"""Maximum decode input size in bytes (CWE-400 prevention)."""

DEFAULT_BY_ALIAS = True
"""Emit and discover declared keys by alias, as they appear on the wire."""

DEFAULT_EXCLUDE_NONE = False
"""Keep declared fields whose value is None in the encoded output."""

IGNORE_UNKNOWN_FIELDS = "pyj2n.ignore_unknown_fields"
"""Validation context flag under which UnknownFields fields ignore their input."""
