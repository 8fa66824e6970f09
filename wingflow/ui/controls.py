"""
UI controls module for WingFlow.

Sliders and toggles laid out under the flow view. Every change replaces
the simulation configuration wholesale or updates the airfoil geometry;
the simulation picks it up on the next tick.
"""

import logging

from matplotlib.widgets import CheckButtons, RadioButtons, Slider

from .. import config
from ..core.parameters import ConfigurationError, RenderMode

logger = logging.getLogger(__name__)


class UIController:
    """Main UI controller for managing interactive controls."""

    def __init__(self, viewer):
        """
        Initialize UI controller.

        Args:
            viewer (FlowViewer): View whose simulation and airfoil are controlled
        """
        self.viewer = viewer
        self.fig = viewer.fig
        self.simulation = viewer.simulation
        self.airfoil = viewer.airfoil
        self.fig.subplots_adjust(bottom=0.3)
        self.setup_ui_controls()

    def setup_ui_controls(self):
        """Create sliders, mode radio buttons and toggles."""
        sim_config = self.simulation.config

        ax_angle = self.fig.add_axes([0.12, 0.20, 0.35, 0.03])
        self.angle_slider = Slider(ax_angle, 'Angle (°)', config.ANGLE_MIN_DEG, config.ANGLE_MAX_DEG,
                                   valinit=self.airfoil.angle_deg, valstep=1, valfmt='%.0f°')
        self.angle_slider.on_changed(self._on_angle)

        ax_thickness = self.fig.add_axes([0.12, 0.15, 0.35, 0.03])
        self.thickness_slider = Slider(ax_thickness, 'Thickness (%)', 1, config.THICKNESS_MAX_PERCENT,
                                       valinit=self.airfoil.thickness_percent, valstep=1, valfmt='%.0f%%')
        self.thickness_slider.on_changed(self._on_thickness)
        if self.airfoil.naca is None:
            # Thickness comes from the control points in freeform mode
            self.thickness_slider.set_active(False)

        ax_speed = self.fig.add_axes([0.12, 0.10, 0.35, 0.03])
        self.speed_slider = Slider(ax_speed, 'Flow speed', 0.05, 0.5, valinit=sim_config.base_speed, valfmt='%.2f')
        self.speed_slider.on_changed(lambda v: self._reconfigure(base_speed=float(v)))

        ax_turbulence = self.fig.add_axes([0.12, 0.05, 0.35, 0.03])
        self.turbulence_slider = Slider(ax_turbulence, 'Turbulence', 0.0, 3.0,
                                        valinit=sim_config.turbulence_intensity, valfmt='%.1f')
        self.turbulence_slider.on_changed(lambda v: self._reconfigure(turbulence_intensity=float(v)))

        ax_mode = self.fig.add_axes([0.58, 0.05, 0.15, 0.18])
        labels = [m.value.capitalize() for m in RenderMode]
        self.mode_radio = RadioButtons(ax_mode, labels,
                                       active=list(RenderMode).index(sim_config.render_mode))
        self.mode_radio.on_clicked(lambda label: self._reconfigure(render_mode=RenderMode.parse(label)))

        ax_toggles = self.fig.add_axes([0.76, 0.05, 0.15, 0.18])
        self.toggles = CheckButtons(ax_toggles, ['Wake', 'Heatmap', 'Pause'],
                                    [sim_config.wake_enabled, sim_config.heatmap_enabled, sim_config.paused])
        self.toggles.on_clicked(self._on_toggle)

    def _on_angle(self, value):
        self.airfoil.set_angle(value)
        self.viewer.refresh_airfoil()

    def _on_thickness(self, value):
        self.airfoil.set_thickness(value)
        self.viewer.refresh_airfoil()

    def _on_toggle(self, label):
        wake, heatmap, paused = self.toggles.get_status()
        self._reconfigure(wake_enabled=wake, heatmap_enabled=heatmap, paused=paused)

    def _reconfigure(self, **changes):
        try:
            rebuilt = self.simulation.update(**changes)
        except ConfigurationError as e:
            logger.warning("Ignoring invalid setting %s: %s", changes, e)
            return
        if rebuilt:
            logger.info("Particle field rebuilt (%s)", ", ".join(changes))
