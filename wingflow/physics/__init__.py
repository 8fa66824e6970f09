"""
Physics simulation components for WingFlow.

This module contains the particle field and the deflection, wake and
boundary models that move it.
"""

__all__ = ['particle_field', 'deflection', 'wake', 'boundary']
