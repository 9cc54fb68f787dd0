"""
Streamlit dashboard for the Defect Pairing toolkit.

Run with ``streamlit run app/main.py``.
"""
import streamlit as st

from app.views.pairing import render_pairing_view, render_sidebar


def initialize_session_state():
    """Create the session keys the views rely on."""
    defaults = {
        "store": None,
        "records_loaded_from": None,
        "tracked_fraction": None,
        "sweep_table": None,
    }
    for key, value in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = value


def run_app():
    """Main function to run the Defect Pairing Streamlit application."""
    st.set_page_config(
        page_title="Defect Pairing - Creation and Annihilation Analysis",
        layout="wide",
        initial_sidebar_state="expanded",
        menu_items={
            'Get Help': None,
            'Report a bug': None,
            'About': "Pairs oppositely charged defects born or annihilated together"
        }
    )

    initialize_session_state()

    st.title("Defect Creation and Annihilation Pairing")
    uploaded_file, params = render_sidebar()
    render_pairing_view(uploaded_file, params)


if __name__ == "__main__":
    run_app()
