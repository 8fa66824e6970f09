"""
WingFlow: real-time airflow visualization around a 2D wing section.

This package animates a large population of flow markers whose motion
approximates streamline deflection, wake formation, vortex shedding and
stall around an editable airfoil cross-section.
"""

__version__ = "0.1.0"

__all__ = ['config', 'core', 'physics', 'visualization', 'ui', 'simulation', 'cli']
