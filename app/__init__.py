"""
Command line and Streamlit front ends for the Defect Pairing toolkit.
"""
