"""Core constants: table names and shared literal values."""

# Table names
FLOWS_TABLE = "flows"
POINTS_TABLE = "points"
ASSERTIONS_TABLE = "assertions"

# Dashboard pagination defaults
DEFAULT_FLOWS_PAGE_SIZE = 20
DEFAULT_TIMELINE_PAGE_SIZE = 50
MAX_PAGE_SIZE = 1000
