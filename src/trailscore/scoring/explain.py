"""
Small explainability formatting helpers.

Used by the CLI to print compact summaries of recommendation results.
"""

from __future__ import annotations

from trailscore.domain.models import RecommendationItem, Trail


def trail_label(trail: Trail) -> str:
    """`name (district, 8.5 km, 240 min, moderate)`."""
    parts = [p for p in [trail.district] if p]
    parts += [f"{trail.length_km:g} km", f"{trail.estimated_duration_minutes} min", trail.difficulty.value]
    return f"{trail.name} ({', '.join(parts)})"


def one_line_summary(item: RecommendationItem) -> str:
    """Render a compact single-line summary for a ranked item."""
    rec = item.recommendation
    parts = [f"score={rec.score:.3f}", f"match={rec.match_percentage}%"]
    if rec.reasons:
        parts.append("reasons=" + ",".join(rec.reasons))
    return " | ".join(parts)
