"""
Core data structures for WingFlow.

This module contains the simulation parameters and the airfoil geometry
that produces the aerodynamic input.
"""

__all__ = ['parameters', 'airfoil']
