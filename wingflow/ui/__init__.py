"""Interactive controls for WingFlow."""

__all__ = ['controls']
