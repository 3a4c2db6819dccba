"""
Centralized constants for pivotgrid.

Eliminates magic strings scattered across the codebase.
Import from here instead of hardcoding values.
"""

# ===========================================================================
# View engine column names
# ===========================================================================
ROW_PATH_COLUMN = "__ROW_PATH__"    # Row pivot path per returned row
ID_COLUMN = "__ID__"                # Row identity per returned row
COLUMN_PATH_SEPARATOR = "|"         # Joins column pivot values + column name

# ===========================================================================
# Display
# ===========================================================================
TOTAL_LABEL = "TOTAL"               # Synthetic root of every row header path
NULL_PLACEHOLDER = "-"              # Displayed for null cells
DEFAULT_LOCALE = "en-us"
EXPORT_PATH_SEPARATOR = " / "       # Joins tree label segments in CSV export

# ===========================================================================
# Types
# ===========================================================================
NUMERIC_TYPES = ("integer", "float")
DEFAULT_TYPE = "string"

# ===========================================================================
# Sort directions
# ===========================================================================
SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_COL_ASC = "col asc"
SORT_COL_DESC = "col desc"

# ===========================================================================
# Interaction (pixels)
# ===========================================================================
TREE_ICON_HIT_WIDTH = 26            # Presses left of this toggle the tree node

# ===========================================================================
# Style flag names (applied by the widget as CSS classes or roles)
# ===========================================================================
CLASS_HEADER_BORDER = "psp-header-border"
CLASS_HEADER_GROUP = "psp-header-group"
CLASS_HEADER_LEAF = "psp-header-leaf"
CLASS_HEADER_CORNER = "psp-header-corner"
CLASS_SORT_ASC = "psp-header-sort-asc"
CLASS_SORT_DESC = "psp-header-sort-desc"
CLASS_SORT_COL_ASC = "psp-header-sort-col-asc"
CLASS_SORT_COL_DESC = "psp-header-sort-col-desc"
CLASS_ALIGN_RIGHT = "psp-align-right"
CLASS_ALIGN_LEFT = "psp-align-left"
CLASS_POSITIVE = "psp-positive"
CLASS_NEGATIVE = "psp-negative"
CLASS_TREE_LABEL = "psp-tree-label"
CLASS_TREE_EXPAND = "psp-tree-label-expand"
CLASS_TREE_COLLAPSE = "psp-tree-label-collapse"
CLASS_TREE_LEAF = "psp-tree-leaf"
