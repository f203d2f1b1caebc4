"""
Scenario API: Fluent interface for defining and running rod simulations.
"""
from __future__ import annotations

from pathlib import Path

from flexrod.core.simulation import RodSimulation
from flexrod.dynamics.drivers import HandleDriver, StaticHandle, SwingHandle
from flexrod.dynamics.properties import ElasticProperties, get_preset
from flexrod.dynamics.rod import Rod

FRAME_RATE = 60.0


class Scenario:
    def __init__(
        self,
        name: str,
        length: float = 100.0,
        output_dir: str = "output",
        logging: bool = True,
    ):
        self.name = name
        self.rod = Rod(length)
        if logging:
            self.sim = RodSimulation.with_logging(
                name=name,
                rod=self.rod,
                output_dir=Path(output_dir),
                auto_save_plots=False  # We handle this explicitly
            )
        else:
            self.sim = RodSimulation(self.rod)
        self._show_plots: bool | None = None

    def with_material(
        self,
        material: str | ElasticProperties = "default",
        **overrides: float,
    ) -> 'Scenario':
        """
        Apply a material preset (by name) or record, plus field overrides.

        The rod is re-seated at its rest pose afterwards, the same as picking
        a preset in the interactive tool.
        """
        props = get_preset(material) if isinstance(material, str) else material
        if overrides:
            props = props.with_overrides(**overrides)
        props.validate(strict=False)
        self.rod.reconfigure(self.rod.length, props)
        self.rod.reset()
        return self

    def with_length(self, length: float) -> 'Scenario':
        self.rod.reconfigure(length, self.rod.properties)
        self.rod.reset()
        return self

    def with_driver(self, driver: HandleDriver) -> 'Scenario':
        self.sim.set_driver(driver)
        return self

    def hold(self, position=(0.0, 0.0, 0.0), direction=(0.0, 1.0, 0.0)) -> 'Scenario':
        """Drive the handle with a fixed pose."""
        return self.with_driver(StaticHandle(position, direction))

    def swing(
        self,
        axis=(0.0, 0.0, 1.0),
        amplitude_deg: float = 60.0,
        frequency_hz: float = 1.0,
        pivot=(0.0, 0.0, 0.0),
        rest_direction=(0.0, 1.0, 0.0),
    ) -> 'Scenario':
        """Drive the handle with a sinusoidal swing about ``axis``."""
        return self.with_driver(SwingHandle(
            pivot=pivot,
            rest_direction=rest_direction,
            axis=axis,
            amplitude_deg=amplitude_deg,
            frequency_hz=frequency_hz,
        ))

    def set_time_scale(self, time_scale: float) -> 'Scenario':
        self.sim.time_scale = float(time_scale)
        return self

    def enable_plotting(self, show: bool = False) -> 'Scenario':
        """
        Enable plot generation at the end of the run.

        Parameters
        ----------
        show : bool
            If True, display plots interactively (e.g. in Jupyter notebooks).
        """
        self._show_plots = show
        return self

    def run(self, duration: float = 5.0, dt: float = 1.0 / FRAME_RATE, log_interval: float = 1.0):
        print(f"Running Scenario: {self.name}")
        p = self.rod.properties
        print(f"[Scenario] Rod: length={self.rod.length:g}, stiffness={p.stiffness:g}, "
              f"damping={p.damping:g}, mass={p.mass:g}, time_scale={self.sim.time_scale:g}")

        self.sim.run(duration, dt=dt, log_interval=log_interval, reset_on_start=True)

        if self._show_plots is not None and self.sim.logger is not None:
            print("[Scenario] Generating plots...")
            self.sim.save_plots(show=self._show_plots)

        return self
