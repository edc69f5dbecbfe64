from __future__ import annotations

from typing import Optional, Sequence

from models import ClubPerformanceStat, HeatMapPoint
from models.round import Round

from .stats import gir_per_round, putts_per_round, score_trend

RESULT_COLORS = {
    "Good": "tab:green",
    "Acceptable": "tab:olive",
    "Poor": "tab:orange",
    "OB": "tab:red",
    "Hazard": "tab:blue",
    "Lost Ball": "tab:purple",
}


def _load_plt():
    try:
        import matplotlib.pyplot as plt  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "matplotlib is required for visualizations. Install it with: pip install matplotlib"
        ) from exc
    return plt


def _default_labels(rounds: Sequence[Round]) -> list[str]:
    labels: list[str] = []
    for index, round_obj in enumerate(rounds, start=1):
        if round_obj.started_at:
            labels.append(round_obj.started_at.strftime("%Y-%m-%d"))
        else:
            labels.append(f"R{index}")
    return labels


def _apply_sparse_xticks(ax, labels: Sequence[str], max_labels: int = 12) -> None:
    """Show at most `max_labels` ticks while preserving order."""
    count = len(labels)
    if count <= max_labels:
        ax.set_xticks(range(count))
        ax.set_xticklabels(labels, rotation=45, ha="right")
        return

    step = max(1, count // max_labels)
    tick_positions = list(range(0, count, step))
    if tick_positions[-1] != count - 1:
        tick_positions.append(count - 1)

    ax.set_xticks(tick_positions)
    ax.set_xticklabels([labels[i] for i in tick_positions], rotation=45, ha="right")


def plot_putts_per_round(rounds: Sequence[Round], labels: Optional[Sequence[str]] = None):
    """Bar chart: total putts per round."""
    plt = _load_plt()
    rows = putts_per_round(rounds)
    x_labels = list(labels) if labels is not None else _default_labels(rounds)
    values = [row["total_putts"] or 0 for row in rows]

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.bar(list(range(len(x_labels))), values)
    ax.set_title("Putts Per Round")
    ax.set_xlabel("Round")
    ax.set_ylabel("Total Putts")
    _apply_sparse_xticks(ax, x_labels)
    ax.grid(axis="y", alpha=0.2)
    fig.tight_layout()
    return fig, ax


def plot_gir_per_round(rounds: Sequence[Round], labels: Optional[Sequence[str]] = None):
    """
    Combined chart:
    - bars: GIR count per round
    - line: GIR percentage per round
    """
    plt = _load_plt()
    rows = gir_per_round(rounds)
    x_labels = list(labels) if labels is not None else _default_labels(rounds)
    x = list(range(len(x_labels)))

    fig, ax1 = plt.subplots(figsize=(11, 5))
    ax1.bar(x, [row["total_gir"] or 0 for row in rows], alpha=0.8, label="GIR Count")
    ax1.set_title("GIR Per Round")
    ax1.set_xlabel("Round")
    ax1.set_ylabel("GIR Count")
    _apply_sparse_xticks(ax1, x_labels)
    ax1.grid(axis="y", alpha=0.2)

    ax2 = ax1.twinx()
    ax2.plot(x, [row["gir_percentage"] or 0 for row in rows],
             color="black", marker="o", linewidth=1.5, label="GIR %")
    ax2.set_ylabel("GIR %")
    ax2.set_ylim(0, 100)

    lines1, labels1 = ax1.get_legend_handles_labels()
    lines2, labels2 = ax2.get_legend_handles_labels()
    ax1.legend(lines1 + lines2, labels1 + labels2, loc="upper left")

    fig.tight_layout()
    return fig, ax1, ax2


def plot_score_trend(rounds: Sequence[Round], labels: Optional[Sequence[str]] = None):
    """Line chart: score relative to par by round."""
    plt = _load_plt()
    rows = score_trend(rounds)
    x_labels = list(labels) if labels is not None else _default_labels(rounds)

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(list(range(len(x_labels))), [row["to_par"] or 0 for row in rows], marker="o")
    ax.axhline(0, color="black", linewidth=0.8, linestyle="--")
    ax.set_title("Score To Par")
    ax.set_xlabel("Round")
    ax.set_ylabel("Strokes Over Par")
    _apply_sparse_xticks(ax, x_labels)
    ax.grid(alpha=0.2)
    fig.tight_layout()
    return fig, ax


def plot_heat_map(points: Sequence[HeatMapPoint], title: str = "Shot Dispersion"):
    """Scatter of heat-map points; the pin sits at (0, 100)."""
    plt = _load_plt()

    fig, ax = plt.subplots(figsize=(6, 8))
    for result, color in RESULT_COLORS.items():
        subset = [p for p in points if p.result == result]
        if subset:
            ax.scatter([p.x for p in subset], [p.y for p in subset],
                       c=color, alpha=0.7, label=result)
    unknown = [p for p in points if p.result not in RESULT_COLORS]
    if unknown:
        ax.scatter([p.x for p in unknown], [p.y for p in unknown],
                   c="tab:gray", alpha=0.5, label="Unknown")

    ax.scatter([0], [100], marker="*", s=200, c="black", label="Pin")
    ax.axvline(0, color="black", linewidth=0.5, alpha=0.3)
    ax.set_xlim(-100, 100)
    ax.set_ylim(0, 105)
    ax.set_title(title)
    ax.set_xlabel("Left / Right")
    ax.set_ylabel("Progress To Pin (%)")
    ax.legend(loc="lower right")
    fig.tight_layout()
    return fig, ax


def plot_club_distances(stats: Sequence[ClubPerformanceStat]):
    """Horizontal bars of average distance with dispersion as error bars."""
    plt = _load_plt()
    ordered = sorted(stats, key=lambda s: s.average_distance)
    labels = [f"{s.club} ({s.category})" for s in ordered]

    fig, ax = plt.subplots(figsize=(9, max(3, 0.5 * len(ordered) + 1)))
    y = list(range(len(ordered)))
    ax.barh(y, [s.average_distance for s in ordered],
            xerr=[s.dispersion for s in ordered], alpha=0.8, capsize=3)
    ax.set_yticks(y)
    ax.set_yticklabels(labels)
    ax.set_title("Club Distances")
    ax.set_xlabel("Average Distance (yards)")
    ax.grid(axis="x", alpha=0.2)
    fig.tight_layout()
    return fig, ax
