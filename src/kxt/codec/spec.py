"""
KXT Format Specification v1.0
=============================

Layout:
    #!KXT/1.0                      <- Magic line (file identification, instant)
    {"kind":"snapshot",...}        <- One frame per line, JSON object
    {"kind":"cursor",...}
    {"kind":"content",...}
    ...
    #!END                          <- EOF marker (optional when streaming)

Frame lines:
    snapshot: {"content": str, "kind": "snapshot", "timestamp_ms": int}
    cursor:   {"content": "", "kind": "cursor", "timestamp_ms": int,
               "editor": {"position": int, "length": int, "mode": "insert"|"overwrite"}}
    content:  {"content": str, "kind": "content", "delta_ms": int}

Design Decisions:
    - #! prefix for file boundaries (like shebang - instant identification)
    - JSON escapes newlines, so every frame is exactly one line
    - The `kind` tag selects the frame variant on read
    - Content frames keep their relative delta; absolute times are
      re-resolved by the log on load
    - All UTF-8, human readable
"""

# Magic bytes - first line of every .kxt file
MAGIC = "#!KXT"
EOF_MARKER = "#!END"

# Format version
FORMAT_VERSION = "1.0"
SUPPORTED_VERSIONS = ("1.0",)

# File extension
EXTENSION = ".kxt"

# Max magic line scan (for fast identification - don't read more than this)
MAX_MAGIC_SCAN_BYTES = 64
