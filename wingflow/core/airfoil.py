"""
Airfoil geometry for WingFlow.

Generates cross-section outlines from NACA 4-digit parameters or from
freeform control points, and derives the aerodynamic input the flow
simulation consumes (maximum thickness and angle of attack).
"""

import json
import logging
from dataclasses import dataclass

import numpy as np
from scipy.interpolate import make_interp_spline

from .. import config
from .parameters import AerodynamicInput, ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NacaParameters:
    """NACA 4-digit section parameters."""

    camber: float  # Max camber, % of chord (0-9.5)
    position: float  # Max camber position, tenths of chord (0-9)
    thickness: float  # Max thickness, % of chord (1-40)

    @classmethod
    def from_code(cls, code):
        """Parse a 4-digit code such as '4412' or 'NACA 2412'."""
        digits = str(code).upper().replace("NACA", "").strip()
        if len(digits) != 4 or not digits.isdigit():
            raise ConfigurationError(f"Expected a NACA 4-digit code, got {code!r}")
        return cls(camber=float(digits[0]), position=float(digits[1]), thickness=float(digits[2:]))

    @property
    def code(self):
        return f"{round(self.camber)}{round(self.position)}{round(self.thickness):02d}"


def naca4_outline(params, chord=config.CHORD, points=config.AIRFOIL_POINTS):
    """
    Generate a closed NACA 4-digit outline.

    Stations are cosine-spaced. The outline runs from the trailing edge
    along the upper surface to the leading edge and back along the lower
    surface to the trailing edge.

    Args:
        params (NacaParameters): Section parameters
        chord (float): Chord length
        points (int): Number of intervals per surface

    Returns:
        np.ndarray: Outline vertices, shape (2 * points + 1, 2)
    """
    m = params.camber / 100.0
    p = params.position / 10.0
    t = params.thickness / 100.0

    beta = np.linspace(0.0, np.pi, points + 1)
    xc = (1.0 - np.cos(beta)) / 2.0

    yt = 5.0 * t * chord * (
        0.2969 * np.sqrt(xc)
        - 0.1260 * xc
        - 0.3516 * xc ** 2
        + 0.2843 * xc ** 3
        - 0.1015 * xc ** 4
    )

    if m == 0 or p == 0:
        yc = np.zeros_like(xc)
        dyc_dx = np.zeros_like(xc)
    else:
        front = xc <= p
        yc = np.where(
            front,
            m / p ** 2 * (2 * p * xc - xc ** 2),
            m / (1 - p) ** 2 * ((1 - 2 * p) + 2 * p * xc - xc ** 2),
        )
        dyc_dx = np.where(front, 2 * m / p ** 2 * (p - xc), 2 * m / (1 - p) ** 2 * (p - xc))
        yc = yc * chord

    theta = np.arctan(dyc_dx)
    x = xc * chord
    upper = np.column_stack((x - yt * np.sin(theta), yc + yt * np.cos(theta)))
    lower = np.column_stack((x + yt * np.sin(theta), yc - yt * np.cos(theta)))

    return np.vstack((upper[::-1], lower[1:]))


def _spline_through(points, divisions):
    """Sample an interpolating spline through `points` at `divisions` + 1 stations."""
    points = np.asarray(points, dtype=float)
    # Chord-length parameterization
    seg = np.linalg.norm(np.diff(points, axis=0), axis=1)
    u = np.concatenate(([0.0], np.cumsum(seg)))
    if u[-1] <= 0:
        return np.repeat(points[:1], divisions + 1, axis=0)
    u /= u[-1]
    k = min(3, len(points) - 1)
    spline = make_interp_spline(u, points, k=k)
    return spline(np.linspace(0.0, 1.0, divisions + 1))


def trailing_edge_index(control_points):
    """Index of the trailing-edge control point (middle of the array)."""
    return len(control_points) // 2


def freeform_outline(control_points, divisions=config.FREEFORM_DIVISIONS):
    """
    Generate an outline from freeform control points.

    The control points are ordered leading edge, upper surface points,
    trailing edge, then lower surface points from front to back.

    Args:
        control_points (array-like): Control points, shape (M, 2), M >= 3
        divisions (int): Samples per surface

    Returns:
        np.ndarray: Outline vertices from trailing edge over the upper
        surface to the leading edge and along the lower surface back to the
        trailing edge
    """
    cp = np.asarray(control_points, dtype=float)
    if cp.ndim != 2 or cp.shape[1] != 2 or len(cp) < 3:
        raise ConfigurationError("Freeform outline needs at least 3 control points of shape (x, y)")

    te = trailing_edge_index(cp)
    upper_cp = cp[: te + 1]
    lower_cp = np.vstack((cp[:1], cp[te + 1:], cp[te: te + 1]))

    upper = _spline_through(upper_cp, divisions)
    lower = _spline_through(lower_cp, divisions)

    return np.vstack((upper[::-1], lower[1:]))


def split_surfaces(outline):
    """
    Split a closed outline into upper and lower surfaces at the leading edge.

    Returns:
        tuple: (upper, lower), each ordered from leading to trailing edge
    """
    le = int(np.argmin(outline[:, 0]))
    upper = outline[: le + 1][::-1]
    lower = outline[le:]
    return upper, lower


def max_thickness_percent(outline, samples=200):
    """
    Maximum thickness of an outline as a percentage of its chord.

    Args:
        outline (np.ndarray): Closed outline, shape (N, 2)
        samples (int): Chordwise stations used for the estimate

    Returns:
        float: Thickness percent, 0 for a degenerate outline
    """
    upper, lower = split_surfaces(np.asarray(outline, dtype=float))
    x_min = float(outline[:, 0].min())
    x_max = float(outline[:, 0].max())
    chord = x_max - x_min
    if chord <= 0:
        return 0.0

    stations = np.linspace(x_min, x_max, samples)
    # np.interp needs increasing abscissae
    up_order = np.argsort(upper[:, 0], kind="stable")
    lo_order = np.argsort(lower[:, 0], kind="stable")
    y_up = np.interp(stations, upper[up_order, 0], upper[up_order, 1])
    y_lo = np.interp(stations, lower[lo_order, 0], lower[lo_order, 1])

    thickness = np.abs(y_up - y_lo).max()
    return float(thickness / chord * 100.0)


def rotate_outline(outline, angle_deg, pivot=None):
    """Rotate an outline by the angle of attack (nose up for positive angles)."""
    outline = np.asarray(outline, dtype=float)
    if pivot is None:
        pivot = outline.mean(axis=0)
    a = np.radians(-angle_deg)
    rot = np.array([[np.cos(a), -np.sin(a)], [np.sin(a), np.cos(a)]])
    return (outline - pivot) @ rot.T + pivot


def load_control_points(path):
    """
    Load freeform control points from a JSON file.

    Accepts either a list of [x, y] pairs or a list of {"x": .., "y": ..}
    objects.
    """
    with open(path, "r") as f:
        data = json.load(f)
    try:
        if data and isinstance(data[0], dict):
            points = [[p["x"], p["y"]] for p in data]
        else:
            points = data
        cp = np.array(points, dtype=float)
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigurationError(f"{path}: malformed control points ({e})") from e
    if cp.ndim != 2 or cp.shape[1] != 2 or len(cp) < 3:
        raise ConfigurationError(f"{path}: need at least 3 control points")
    return cp


class Airfoil:
    """Cross-section geometry feeding the flow simulation."""

    def __init__(self, naca=None, control_points=None, angle_deg=config.DEFAULT_ANGLE_DEG):
        if naca is not None and control_points is not None:
            raise ConfigurationError("Specify either NACA parameters or control points, not both")
        if naca is None and control_points is None:
            naca = NacaParameters.from_code(config.DEFAULT_NACA_CODE)
        self.naca = naca
        self.control_points = None if control_points is None else np.asarray(control_points, dtype=float)
        self.angle_deg = float(angle_deg)
        self._outline = None

    @property
    def mode(self):
        return "naca" if self.naca is not None else "freeform"

    @property
    def outline(self):
        if self._outline is None:
            if self.naca is not None:
                self._outline = naca4_outline(self.naca)
            else:
                self._outline = freeform_outline(self.control_points)
        return self._outline

    @property
    def thickness_percent(self):
        if self.naca is not None:
            return self.naca.thickness
        return max_thickness_percent(self.outline)

    def set_angle(self, angle_deg):
        self.angle_deg = float(angle_deg)

    def set_thickness(self, thickness_percent):
        """Change the thickness of a NACA section."""
        if self.naca is None:
            raise ConfigurationError("Thickness is derived from the control points in freeform mode")
        self.naca = NacaParameters(self.naca.camber, self.naca.position, float(thickness_percent))
        self._outline = None

    def aerodynamic_input(self):
        """Derive the simulation input from the current geometry."""
        return AerodynamicInput.clamped(self.angle_deg, self.thickness_percent)
