"""Heat map figure of a pairing threshold sweep."""

import numpy as np
import pandas as pd
import plotly.graph_objects as go


def create_sweep_heatmap(table: pd.DataFrame, metric_name: str = "Pairs") -> go.Figure:
    """
    Heat map of a threshold sweep.

    Parameters:
    - table: DataFrame from sweep_thresholds (rows: time threshold, columns: distance threshold)
    - metric_name: Label of the swept value, used for the colorbar and hover text

    Returns:
    - Plotly figure object
    """
    if table.empty:
        raise ValueError("Sweep table is empty - nothing to plot")

    z = table.to_numpy(dtype=float)

    fig = go.Figure()
    fig.add_trace(go.Heatmap(
        z=z,
        x=[f"{d:g}" for d in table.columns],
        y=[str(t) for t in table.index],
        colorscale="Turbo",
        zmin=0,
        zmax=np.nanmax(z) if np.isfinite(z).any() else 1,
        colorbar=dict(title=metric_name, thickness=15, len=0.6),
        hovertemplate=(
            "<b>Distance %{x}</b><br>"
            "Time: %{y}<br>"
            f"{metric_name}: " + "%{z}<extra></extra>"
        ),
    ))

    fig.update_layout(
        title=f"{metric_name} by Pairing Threshold",
        xaxis_title="Distance Threshold",
        yaxis_title="Time Threshold (frames)",
        height=450,
    )
    return fig
