"""
Color system module for WingFlow visualization.

Hex/RGB/HLS helpers and the heatmap ramp that maps local flow intensity
from a cool hue to a hot hue, with saturation and lightness rising with
intensity.
"""

import numpy as np

from .. import config
from ..core.parameters import RenderMode


def hex_to_rgb(hex_color):
    """Convert hex color to RGB tuple (0-1 range)."""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) / 255.0 for i in (0, 2, 4))


def hls_to_rgb_array(h, l, s):
    """
    Vectorized HLS to RGB conversion (same convention as colorsys).

    Args:
        h, l, s (np.ndarray): Hue in turns, lightness and saturation, shape (N,)

    Returns:
        np.ndarray: RGB values in [0, 1], shape (N, 3)
    """
    h = np.mod(np.asarray(h, dtype=float), 1.0)
    l = np.asarray(l, dtype=float)
    s = np.asarray(s, dtype=float)

    m2 = np.where(l <= 0.5, l * (1.0 + s), l + s - l * s)
    m1 = 2.0 * l - m2

    def channel(hue):
        hue = np.mod(hue, 1.0)
        return np.select(
            [hue < 1.0 / 6.0, hue < 0.5, hue < 2.0 / 3.0],
            [m1 + (m2 - m1) * hue * 6.0, m2, m1 + (m2 - m1) * (2.0 / 3.0 - hue) * 6.0],
            default=m1,
        )

    rgb = np.column_stack((channel(h + 1.0 / 3.0), channel(h), channel(h - 1.0 / 3.0)))
    # Achromatic where saturation is zero
    gray = s == 0
    if np.any(gray):
        rgb[gray] = l[gray, None]
    return rgb


def heatmap_hls(intensity):
    """
    Map intensity to (hue, lightness, saturation) on the heatmap ramp.

    Intensity is clamped to [0, HEATMAP_MAX_INTENSITY]; the hue moves
    linearly from HEATMAP_COOL_HUE to HEATMAP_HOT_HUE over that range.
    """
    t = np.clip(np.asarray(intensity, dtype=float), 0.0, config.HEATMAP_MAX_INTENSITY)
    frac = t / config.HEATMAP_MAX_INTENSITY
    hue = config.HEATMAP_COOL_HUE + (config.HEATMAP_HOT_HUE - config.HEATMAP_COOL_HUE) * frac
    sat = np.minimum(1.0, config.HEATMAP_SAT_BASE + config.HEATMAP_SAT_GAIN * t)
    light = np.minimum(config.HEATMAP_LIGHT_MAX, config.HEATMAP_LIGHT_BASE + config.HEATMAP_LIGHT_GAIN * t)
    return hue, light, sat


def heatmap_colors(intensity):
    """RGB heatmap colors for an intensity array, shape (N, 3)."""
    hue, light, sat = heatmap_hls(intensity)
    return hls_to_rgb_array(np.atleast_1d(hue), np.atleast_1d(light), np.atleast_1d(sat))


def base_rgba(render_mode):
    """Flat particle color for a render mode when the heatmap is off."""
    if render_mode is RenderMode.STREAMLINES:
        return hex_to_rgb(config.STREAMLINE_COLOR) + (config.STREAMLINE_ALPHA,)
    return hex_to_rgb(config.SWARM_COLOR) + (config.SWARM_ALPHA,)


def mode_alpha(render_mode):
    return base_rgba(render_mode)[3]
