"""
Configuration module for WingFlow.

This module contains global constants, default parameters, and tuned model
coefficients used throughout the WingFlow flow simulation and visualization.
"""

import numpy as np

# Default simulation parameters
DEFAULT_NUM_PARTICLES = 5000  # Default particle population
DEFAULT_BASE_SPEED = 0.15  # Downstream drift per tick
DEFAULT_TURBULENCE = 1.0  # Wake chaos multiplier (UI range 0-3)
DEFAULT_ANGLE_DEG = -10.0  # Negative angle for downforce
DEFAULT_NACA_CODE = "4414"

# Aerodynamic input domain (values outside are clamped)
ANGLE_MIN_DEG = -50.0
ANGLE_MAX_DEG = 20.0
THICKNESS_MIN_PERCENT = 0.0
THICKNESS_MAX_PERCENT = 40.0

# Simulated volume
X_MIN = -10.0  # Upstream re-entry plane
X_MAX = 12.0  # Downstream exit plane
REENTRY_JITTER_MAX = 2.0  # Recycled particles land in (X_MIN - jitter, X_MIN]
FADE_DISTANCE = 3.0  # Smoothstep fade length at both ends

# Swarm seeding
SWARM_Y_SPREAD = 12.0
SWARM_Z_SPREAD = 4.0
SPEED_BIAS_MAX = 0.02

# Streamlines seeding
STREAMLINE_LANES = 25  # Number of smoke tracer lanes
STREAMLINE_Y_SPAN = 10.0
STREAMLINE_LANE_JITTER = 0.15
STREAMLINE_Z_SPREAD = 0.1

# Deflection model
BODY_X = 0.3  # Reference point of the body's influence
INFLUENCE_FALLOFF = 1.5  # k in exp(-k * d^2)
INTERACTION_RADIUS_BASE = 1.2
INTERACTION_RADIUS_PER_THICKNESS = 1.0 / 25.0
INFLUENCE_CUTOFF_FACTOR = 2.5  # Cutoff radius in interaction radii
THICKNESS_PUSH_GAIN = 0.6
LIFT_GAIN = 3.5
LIFT_PUSH_GAIN = 0.15
DEFLECTION_INTENSITY_WEIGHT = 0.8

# Wake model
STALL_THRESHOLD_DEG = 15.0
SEPARATION_ATTACHED = 0.95
SEPARATION_STALLED = 0.2
WAKE_ANGLE_NORM_DEG = 30.0  # |angle| normalization for the half-width
WAKE_GROWTH_RATE = 0.25  # Half-width growth per unit distance behind separation
WAKE_INTENSITY_ANGLE_NORM_DEG = 10.0
WAKE_INTENSITY_FLOOR = 0.2
WAKE_DECAY_RATE = 0.1
WAKE_FULL_OBSTRUCTION = 0.01  # Base half-width at which the wake reaches full strength
VORTEX_FREQUENCY = 12.0
VORTEX_SPEED = 15.0
VORTEX_AMP_ANGLE_NORM_DEG = 40.0
VORTEX_AMP_GAIN = 0.5
WAKE_JITTER = 0.05
STALL_GAIN = 2.0
ATTACHED_DAMPING = 2.0  # exp(-damping * |y|)
ATTACHED_JITTER_GAIN = 0.5
WAKE_INTENSITY_MIN = 0.1  # Heatmap contribution threshold
WAKE_INTENSITY_WEIGHT = 1.2

# Streamlines wake diffusion
SPREAD_RATE = 0.01
SPREAD_MAX = 2.0
SPREAD_JITTER_X = 0.05
SPREAD_JITTER_Y = 0.2
SPREAD_INTENSITY_WEIGHT = 0.5

# Presentation
SWARM_LENGTH_BASE = 0.15
SWARM_LENGTH_MAX = 0.4
SWARM_THICKNESS = 0.02
STREAMLINE_SIZE_BASE = 0.1
STREAMLINE_SIZE_PER_SPREAD = 0.15

# Colors
SWARM_COLOR = "#93c5fd"
STREAMLINE_COLOR = "#ffffff"
SWARM_ALPHA = 0.5
STREAMLINE_ALPHA = 0.08

# Heatmap hue ramp (HLS, hue in turns)
HEATMAP_MAX_INTENSITY = 1.2  # Intensity at which the ramp reaches the hot end
HEATMAP_COOL_HUE = 0.6
HEATMAP_HOT_HUE = 0.0
HEATMAP_SAT_BASE = 0.5
HEATMAP_SAT_GAIN = 0.5
HEATMAP_LIGHT_BASE = 0.5
HEATMAP_LIGHT_GAIN = 0.1
HEATMAP_LIGHT_MAX = 0.9

# Airfoil geometry
AIRFOIL_POINTS = 100  # Cosine-spaced stations per surface
FREEFORM_DIVISIONS = 50
CHORD = 1.0

# Animation parameters
ANIMATION_FRAMES = 2000
ANIMATION_INTERVAL = 30  # milliseconds between frames
WINDOW_TITLE = "WingFlow"
VIEW_Y_LIMITS = (-6.0, 6.0)
BACKGROUND_COLOR = "#0f172a"
AIRFOIL_FACE_COLOR = "#cbd5e1"
MARKER_SIZE_SCALE = 20.0  # marker diameter in points per unit of particle scale
STREAK_LINEWIDTH = 1.5  # swarm streak width in points

# Default freeform control points approximating a symmetric foil
# 0: LE, 1-3: upper, 4: TE, 5-7: lower
DEFAULT_CONTROL_POINTS = np.array([
    [0.0, 0.0],
    [0.25, 0.08],
    [0.5, 0.09],
    [0.75, 0.06],
    [1.0, 0.0],
    [0.25, -0.08],
    [0.5, -0.09],
    [0.75, -0.06],
])
