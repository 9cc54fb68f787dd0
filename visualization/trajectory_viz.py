"""Figures of birth and death locations with their twin and spouse links."""

import plotly.graph_objects as go

from core.records import Charge
from core.trajectory_store import Relationship, TrajectoryStore

_CHARGE_STYLE = {
    Charge.POSITIVE: dict(color="crimson", name="+"),
    Charge.NEGATIVE: dict(color="royalblue", name="-"),
}


def create_pairing_plot(store: TrajectoryStore, relationship: Relationship = Relationship.TWIN,
                        seeker_charge: Charge = Charge.POSITIVE) -> go.Figure:
    """
    Scatter of birth (twins) or last-seen (spouses) points, with a line joining each pair.

    Parameters:
    - store: Loaded and paired TrajectoryStore
    - relationship: Relationship.TWIN plots births, Relationship.SPOUSE plots deaths
    - seeker_charge: Partition whose links are drawn (each link is drawn once)

    Returns:
    - Plotly figure object
    """
    event = "Birth" if relationship is Relationship.TWIN else "Death"
    fig = go.Figure()

    for charge, style in _CHARGE_STYLE.items():
        trajectories = list(store.iterate(charge))
        points = [t.snapshot(relationship) for t in trajectories]
        fig.add_trace(go.Scattergl(
            x=[p.x for p in points],
            y=[p.y for p in points],
            mode="markers",
            marker=dict(size=6, color=style["color"], opacity=0.7),
            customdata=[[t.identity, p.t] for t, p in zip(trajectories, points)],
            hovertemplate=f"<b>{style['name']} defect " + "%{customdata[0]}</b><br>"
                          "Frame: %{customdata[1]}<br>x: %{x:.1f}<br>y: %{y:.1f}<extra></extra>",
            name=f"{style['name']} {event.lower()}s",
        ))

    # Line segments separated by None gaps render as one trace
    link_x, link_y = [], []
    for seeker in store.iterate(seeker_charge):
        partner = store.partner_of(seeker, relationship)
        if partner is None:
            continue
        a, b = seeker.snapshot(relationship), partner.snapshot(relationship)
        link_x.extend([a.x, b.x, None])
        link_y.extend([a.y, b.y, None])

    fig.add_trace(go.Scatter(
        x=link_x,
        y=link_y,
        mode="lines",
        line=dict(color="rgba(80, 80, 80, 0.6)", width=2),
        hoverinfo="skip",
        name=f"{relationship.value.capitalize()} links",
    ))

    fig.update_layout(
        title=f"{event} Locations and {relationship.value.capitalize()} Pairs",
        xaxis_title="x",
        yaxis_title="y",
        yaxis=dict(scaleanchor="x", scaleratio=1),
        height=550,
        showlegend=True,
    )
    return fig
