"""
Visualization modules for the Defect Pairing toolkit.
"""
from .sweep_viz import create_sweep_heatmap
from .trajectory_viz import create_pairing_plot
