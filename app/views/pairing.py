"""
Pairing view for the Defect Pairing application.
"""

import streamlit as st

from analysis.parameter_sweep import sweep_thresholds
from analysis.queries import PairCategory, percent_tracked
from analysis.reporting import summarize, trajectories_to_frame
from core.config import DEFAULT_DISTANCE_THRESHOLD, DEFAULT_TIME_THRESHOLD, EligibilityPolicy, PairingParams, SweepGrid
from core.errors import DefectPairingError
from core.pairing import PairingEngine
from core.records import FileFormat, decode_lines, parse_detections
from core.trajectory_store import Relationship, TrajectoryStore
from visualization.sweep_viz import create_sweep_heatmap
from visualization.trajectory_viz import create_pairing_plot


def render_sidebar():
    """File upload and pairing parameters. Returns (uploaded_file, PairingParams)."""
    with st.sidebar:
        st.header("Data")
        uploaded_file = st.file_uploader("Detection file (CSV export)", type=["csv", "txt"])
        delimiter = st.text_input("Delimiter", value=",", max_chars=1)

        st.header("Pairing")
        distance = st.number_input("Distance threshold", min_value=0.0, value=float(DEFAULT_DISTANCE_THRESHOLD), step=1.0)
        time = st.number_input("Time threshold (frames)", min_value=0, value=DEFAULT_TIME_THRESHOLD, step=1)
        seeker = st.selectbox("Seeker charge", options=["positive", "negative"])
        eligibility = st.selectbox(
            "Eligible candidates",
            options=[policy.value for policy in EligibilityPolicy],
            help="'away-from-edges' ignores births near the start and deaths near the end of the recording",
        )

    st.session_state["file_format"] = FileFormat(delimiter=delimiter or ",")
    params = PairingParams(distance, int(time), seeker, eligibility)
    return uploaded_file, params


def _load_store(uploaded_file):
    """Parse the upload once per file; keep the store in session state."""
    file_format = st.session_state["file_format"]
    source = (uploaded_file.file_id, file_format.delimiter)
    if st.session_state.records_loaded_from == source:
        return st.session_state.store

    lines = decode_lines(uploaded_file.getvalue())

    store = TrajectoryStore().load(parse_detections(lines, file_format))
    st.session_state.store = store
    st.session_state.tracked_fraction = percent_tracked(parse_detections(lines, file_format)) if store.frame_count else None
    st.session_state.records_loaded_from = source
    st.session_state.sweep_table = None
    return store


def render_pairing_view(uploaded_file, params: PairingParams):
    """Pair the uploaded recording and display counts, pairs and charts."""
    if uploaded_file is None:
        st.info("Upload a detection file to begin.")
        return

    try:
        store = _load_store(uploaded_file)
    except (DefectPairingError, ValueError) as e:
        st.error(f"Could not read the file: {e}")
        return

    engine = PairingEngine(store, params)
    result = engine.pair()
    summary = summarize(store, params.seeker_charge, st.session_state.tracked_fraction)

    # --- Summary Metrics ---
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Frames", summary["frames"])
    with col2:
        st.metric("Twins", result.twins)
    with col3:
        st.metric("Spouses", result.spouses)
    with col4:
        mean_age = summary["lifespan_mean"]
        st.metric("Mean lifespan", "n/a" if mean_age is None else f"{mean_age:.1f}")

    st.subheader("Counts by relationship")
    st.dataframe(
        [{"category": name, "count": count} for name, count in summary["counts"].items()],
        use_container_width=True,
        hide_index=True,
    )

    tab_pairs, tab_births, tab_deaths, tab_sweep = st.tabs(["Trajectories", "Twins", "Spouses", "Threshold sweep"])

    with tab_pairs:
        st.dataframe(trajectories_to_frame(store), use_container_width=True, hide_index=True)

    with tab_births:
        st.plotly_chart(create_pairing_plot(store, Relationship.TWIN, params.seeker_charge),
                        use_container_width=True, key="twin_plot")

    with tab_deaths:
        st.plotly_chart(create_pairing_plot(store, Relationship.SPOUSE, params.seeker_charge),
                        use_container_width=True, key="spouse_plot")

    with tab_sweep:
        _render_sweep(engine, params)


def _render_sweep(engine: PairingEngine, params: PairingParams):
    c1, c2, c3 = st.columns(3)
    with c1:
        t_start, t_stop = st.slider("Time range", 0, 50, (1, 10))
        t_step = st.number_input("Time step", min_value=1, value=1)
    with c2:
        d_start, d_stop = st.slider("Distance range", 0.0, 200.0, (5.0, 50.0))
        d_step = st.number_input("Distance step", min_value=0.1, value=5.0)
    with c3:
        metric = st.selectbox("Metric", options=[c.value for c in PairCategory], index=2)

    if st.button("Run sweep"):
        with st.spinner("Pairing across thresholds..."):
            try:
                grid = SweepGrid(t_start, t_stop, int(t_step), d_start, d_stop, d_step)
            except ValueError as e:
                st.error(str(e))
                return
            st.session_state.sweep_table = (metric, sweep_thresholds(engine, grid, metric))
            # Leave the links in the state the sidebar parameters describe
            engine.pair(params.distance_threshold, params.time_threshold)

    if st.session_state.sweep_table is not None:
        metric_name, table = st.session_state.sweep_table
        st.plotly_chart(create_sweep_heatmap(table, metric_name), use_container_width=True, key="sweep_heatmap")
        st.dataframe(table, use_container_width=True)
