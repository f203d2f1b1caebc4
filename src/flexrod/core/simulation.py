"""
Simulation orchestrator for a driven elastic rod.

Samples a kinematic handle driver every frame, advances the rod, and
optionally logs state with automatic output organization.
"""
from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from flexrod.dynamics.drivers import HandleDriver, StaticHandle
from flexrod.dynamics.rod import SUB_STEPS, Rod
from flexrod.logger import CSVLogger
from flexrod.utils.validation import validate_timestep
from flexrod.utils.vector import Vector3, dot, scale

# Default output directory
DEFAULT_OUTPUT_DIR = Path("output")
MAX_FRAME_DT = 0.1  # [s] larger frames trigger a warning


class RodSimulation:
    """
    Container and time loop for one rod and its handle driver.

    Parameters
    ----------
    rod : Rod
        The rod to simulate
    driver : HandleDriver | None
        Handle pose source. Defaults to a ``StaticHandle`` at the rod's
        current handle pose.
    time_scale : float
        Multiplier applied to every frame dt before it reaches the rod
        (slow motion < 1 < fast forward).
    simulation_name : str | None
        Name for output files. If None, logging is disabled until
        ``enable_logging()`` is called.
    output_dir : Path | str | None
        Base directory for outputs. Defaults to "./output".
    auto_timestamp : bool
        Append a timestamp to the output folder name.
    auto_save_plots : bool
        Generate plots when ``run`` completes (requires logging).

    Attributes
    ----------
    t : float
        Simulation time [s] (scaled time, i.e. what the rod experiences)
    frame : int
        Number of completed frames
    logger : CSVLogger | None
        Data logger, or None if logging is disabled
    output_path : Path | None
        Output directory of this run

    Notes
    -----
    **Output Organization:**
    When logging is enabled, creates:
        output_dir/
            simulation_name_20260109_101530/
                logs/
                    simulation.csv
                plots/
                    tip_trajectory.png
                    constraint_metrics.png

    Examples
    --------
    >>> rod = Rod(100.0, get_preset("fishing_rod"))
    >>> sim = RodSimulation(rod, SwingHandle(amplitude_deg=80, frequency_hz=1.5))
    >>> sim.run(duration=2.0, dt=1 / 60)
    >>> sim.get_diagnostics()["stretch_ratio"]
    """

    def __init__(
        self,
        rod: Rod,
        driver: HandleDriver | None = None,
        time_scale: float = 1.0,
        simulation_name: str | None = None,
        output_dir: Path | str | None = None,
        auto_timestamp: bool = True,
        auto_save_plots: bool = False,
    ) -> None:
        self.rod = rod
        self.driver: HandleDriver = (
            driver if driver is not None
            else StaticHandle(rod.handle_position, rod.handle_direction)
        )
        self.time_scale = float(time_scale)
        self.t = 0.0
        self.frame = 0
        self.last_dt = 0.0
        self.termination_callback: Callable[[RodSimulation], bool] | None = None

        self._simulation_name = simulation_name
        self._output_dir = Path(output_dir) if output_dir else DEFAULT_OUTPUT_DIR
        self._auto_timestamp = auto_timestamp
        self._auto_save_plots = auto_save_plots
        self.output_path: Path | None = None
        self.logger: CSVLogger | None = None

        if simulation_name is not None:
            self.enable_logging(simulation_name)

    @classmethod
    def with_logging(
        cls,
        name: str,
        rod: Rod,
        driver: HandleDriver | None = None,
        time_scale: float = 1.0,
        output_dir: Path | str | None = None,
        auto_save_plots: bool = True,
    ) -> RodSimulation:
        """
        Convenience factory to create a simulation with logging pre-enabled.

        Examples
        --------
        >>> sim = RodSimulation.with_logging("whip_test", rod, driver)
        """
        return cls(
            rod,
            driver=driver,
            time_scale=time_scale,
            simulation_name=name,
            output_dir=output_dir,
            auto_timestamp=True,
            auto_save_plots=auto_save_plots,
        )

    def enable_logging(self, name: str | None = None) -> Path:
        """
        Enable CSV logging and create the output directory structure.

        Raises
        ------
        ValueError
            If no simulation name is available
        """
        if name is not None:
            self._simulation_name = name

        if self._simulation_name is None:
            raise ValueError(
                "Simulation name required for logging. "
                "Either pass name to __init__ or to enable_logging()."
            )

        if self._auto_timestamp:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            folder_name = f"{self._simulation_name}_{timestamp}"
        else:
            folder_name = self._simulation_name

        self.output_path = self._output_dir / folder_name

        logs_dir = self.output_path / "logs"
        plots_dir = self.output_path / "plots"
        logs_dir.mkdir(parents=True, exist_ok=True)
        plots_dir.mkdir(parents=True, exist_ok=True)

        self.logger = CSVLogger(logs_dir / "simulation.csv")

        print(f"[RodSimulation] Logging enabled: {self.output_path}")
        return self.output_path

    def disable_logging(self) -> None:
        """Close the log file and stop logging."""
        if self.logger is not None:
            self.logger.close()
            self.logger = None
            print("[RodSimulation] Logging disabled")

    def set_driver(self, driver: HandleDriver) -> None:
        self.driver = driver

    def set_termination_callback(self, fn: Callable[[RodSimulation], bool]) -> None:
        """
        Set a stop condition, checked after every frame.

        Examples
        --------
        >>> sim.set_termination_callback(lambda s: s.rod.bend_angle() > 90.0)
        """
        self.termination_callback = fn

    def stop_motion(self) -> None:
        """Kill all tip momentum by re-seating the rod at its rest pose."""
        self.rod.reset()

    # --- Time stepping ---

    @property
    def tip_velocity(self) -> Vector3:
        """Tip velocity over the last sub-step [units/s]; zero before any motion."""
        sub_dt = self.last_dt / SUB_STEPS
        if sub_dt <= 0.0:
            return Vector3.zero()
        return scale(self.rod.state.velocity, 1.0 / sub_dt)

    def step(self, dt: float) -> bool:
        """
        Advance by one frame.

        Parameters
        ----------
        dt : float
            Real (unscaled) frame duration [s]

        Returns
        -------
        bool
            True if the termination callback requested a stop

        Raises
        ------
        ValueError
            If dt is negative or not finite
        """
        validate_timestep(dt, max_dt=MAX_FRAME_DT)
        scaled = dt * self.time_scale

        position, direction = self.driver.pose(self.t)
        self.rod.advance(position, direction, scaled)
        self.t += scaled
        self.last_dt = scaled
        self.frame += 1

        if self.logger is not None:
            self.logger.log(self)

        if self.termination_callback:
            return bool(self.termination_callback(self))
        return False

    def run(
        self,
        duration: float,
        dt: float = 1.0 / 60.0,
        log_interval: float = 1.0,
        reset_on_start: bool = False,
    ) -> None:
        """
        Run fixed-step frames for ``duration`` seconds of real time.

        Parameters
        ----------
        duration : float
            Real time to simulate [s]; scaled time advances by
            ``duration * time_scale``.
        dt : float
            Frame duration [s]
        log_interval : float
            Interval [s] between progress prints. <= 0 disables them.
        reset_on_start : bool
            Seat the rod at the driver's initial pose with zero velocity.

        Raises
        ------
        ValueError
            If duration or dt is not positive
        """
        if duration <= 0:
            raise ValueError(f"Duration must be positive, got {duration}")
        if dt <= 0:
            raise ValueError(f"Frame dt must be positive, got {dt}")

        if reset_on_start:
            position, direction = self.driver.pose(self.t)
            self.rod.advance(position, direction, 0.0)
            self.rod.reset()

        n_frames = int(round(duration / dt))
        last_log_time = self.t

        if self.logger is not None:
            self.logger.log(self)

        print(f"[RodSimulation] Starting: {duration}s duration, dt={dt:.5f}s, "
              f"time_scale={self.time_scale}")

        try:
            for _ in range(n_frames):
                if self.step(dt):
                    print(f"[RodSimulation] Terminated at t={self.t:.6f}s")
                    break

                if log_interval > 0 and (self.t - last_log_time) >= log_interval:
                    d = self.get_diagnostics()
                    print(f"[RodSimulation] t={self.t:6.2f}s | stretch={d['stretch_ratio']:5.3f}, "
                          f"bend={d['bend_angle']:6.2f}deg, |v|={d['tip_speed']:8.2f}")
                    last_log_time = self.t
        finally:
            if self.logger:
                self.logger.flush()

            if self._auto_save_plots and self.logger is not None:
                print("[RodSimulation] Auto-generating plots...")
                self.save_plots()

    # --- Analysis ---

    def get_diagnostics(self) -> dict[str, float]:
        """
        Snapshot of constraint and motion metrics.

        Returns
        -------
        dict[str, float]
            - 'stretch_ratio': tip distance / active length
            - 'bend_angle': handle-to-tip angle [deg]
            - 'tip_speed': |tip velocity| [units/s]
            - 'kinetic_energy': 0.5 * m * |v|^2 of the tip (mass floor applied)
        """
        v = self.tip_velocity
        speed_sq = dot(v, v)
        return {
            "stretch_ratio": self.rod.stretch_ratio(),
            "bend_angle": self.rod.bend_angle(),
            "tip_speed": speed_sq ** 0.5,
            "kinetic_energy": 0.5 * self.rod.properties.effective_mass * speed_sq,
        }

    def save_plots(self, show: bool = False) -> None:
        """
        Generate standard plots from the logged CSV into ``plots/``.

        Raises
        ------
        RuntimeError
            If logging is not enabled or nothing has been logged
        """
        if self.logger is None or self.output_path is None:
            raise RuntimeError(
                "Logging must be enabled to save plots. "
                "Call enable_logging() or use RodSimulation.with_logging()."
            )

        from flexrod.visualization.plotting import (
            plot_constraint_metrics,
            plot_tip_trajectory,
        )

        self.logger.flush()
        csv_path = self.output_path / "logs" / "simulation.csv"
        plots_dir = self.output_path / "plots"

        if not csv_path.exists():
            raise RuntimeError(
                f"No log file found at {csv_path}. "
                "Has the simulation been run yet?"
            )

        props = self.rod.properties
        plot_tip_trajectory(
            str(csv_path),
            save_path=str(plots_dir / "tip_trajectory.png"),
            show=show,
        )
        plot_constraint_metrics(
            str(csv_path),
            max_stretch_ratio=props.max_stretch_ratio,
            max_bend_angle=props.max_bend_angle,
            save_path=str(plots_dir / "constraint_metrics.png"),
            show=show,
        )
        print(f"[RodSimulation] Plots saved to: {plots_dir}")
