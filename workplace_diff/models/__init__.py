"""Domain models for the workplace snapshot comparison tool.

Records and diff entries (reconciliation), display rows (projection), the
field catalogue and transition rules (configuration), and filter state.
"""

from .catalogue import FieldCatalogue, FieldSpec, TransitionRule
from .comparison_result import ComparisonSummary
from .display_row import DisplayRow, Lineage
from .filter_state import FilterState, StatusLabel
from .record import Classification, DiffEntry, Record

__all__ = [
    # Configuration models
    "FieldCatalogue",
    "FieldSpec",
    "TransitionRule",
    # Reconciliation models
    "Classification",
    "DiffEntry",
    "Record",
    "DisplayRow",
    "Lineage",
    # Filtering / reporting
    "FilterState",
    "StatusLabel",
    "ComparisonSummary",
]
