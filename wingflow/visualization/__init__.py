"""
Visualization components for WingFlow.

This module contains the presentation mapping, color system and the
matplotlib reference renderer.
"""

__all__ = ['presentation', 'color_system', 'viewer']
