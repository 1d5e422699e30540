"""
Domain Constants: member names, limits and placeholders shared by the engine.
"""

# =============================================================================
# Table Document Members
# =============================================================================
# The table step only ever consults these names. A selected member outside
# these two tuples is inert for table documents.
# Keep in sync with TABLE_MEMBERS in equivalency/members.py.

TABLE_SCALAR_MEMBER_NAMES = (
    "table_name",
    "case_sensitive",
    "display_expression",
    "has_errors",
    "locale",
    "namespace",
    "prefix",
    "remoting_format",
)

TABLE_COLLECTION_MEMBER_NAMES = (
    "child_relations",
    "columns",
    "constraints",
    "extended_properties",
    "parent_relations",
    "primary_key",
    "rows",
)

# Collections whose items are DataColumn instances (column exclusion applies)
COLUMN_COLLECTION_MEMBER_NAMES = ("columns", "primary_key")

# Collections whose items are DataRelation instances (table exclusion applies)
RELATION_COLLECTION_MEMBER_NAMES = ("child_relations", "parent_relations")

DATASET_SCALAR_MEMBER_NAMES = (
    "dataset_name",
    "case_sensitive",
    "enforce_constraints",
    "has_errors",
    "locale",
    "namespace",
    "prefix",
    "remoting_format",
)

DATASET_COLLECTION_MEMBER_NAMES = (
    "extended_properties",
    "relations",
    "tables",
)

# =============================================================================
# Limits
# =============================================================================

# dataset → tables → table → rows → row → values → value stays well below this
DEFAULT_MAX_DEPTH = 32

# Items rendered before a collection value is truncated in messages
MAX_FORMATTED_ITEMS = 10

# Failures listed in a report before "... and N more"
DEFAULT_MAX_REPORTED_FAILURES = 10

# =============================================================================
# Message Placeholders
# =============================================================================

ROOT_PATH_DESCRIPTION = "<root>"
NULL_DESCRIPTION = "<null>"
CYCLE_DESCRIPTION = "<cycle>"
