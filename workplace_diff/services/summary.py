from __future__ import annotations

from ..models.comparison_result import ComparisonSummary

"""SUMMARY line rendering for a comparison run."""


def render_summary_line(summary: ComparisonSummary) -> str:
    """Render the key=value body of the SUMMARY line.

    The ``SUMMARY`` label itself comes from the log formatter (log_summary),
    so the full output line reads:
    SUMMARY before={n} after={n} new={n} changed={n} deleted={n} rows={n} visible={n}

    Examples:
        >>> s = ComparisonSummary(before_rows=1, after_rows=2, new=1, changed=1,
        ...                       deleted=0, projected_rows=3, visible_rows=1)
        >>> render_summary_line(s)
        'before=1 after=2 new=1 changed=1 deleted=0 rows=3 visible=1'
    """
    return (
        f"before={summary.before_rows} "
        f"after={summary.after_rows} "
        f"new={summary.new} "
        f"changed={summary.changed} "
        f"deleted={summary.deleted} "
        f"rows={summary.projected_rows} "
        f"visible={summary.visible_rows}"
    )
