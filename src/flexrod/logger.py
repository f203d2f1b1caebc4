"""
CSV logging for rod simulation state.

Buffers rows in memory and writes in batches to minimize I/O overhead.
Implements context manager protocol for safe resource handling.
"""
from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, TextIO

# Column suffixes per logged field; scalar fields have no suffix
FIELD_COMPONENTS: dict[str, list[str]] = {
    "handle": ["x", "y", "z"],
    "direction": ["x", "y", "z"],
    "tip": ["x", "y", "z"],
    "velocity": ["x", "y", "z"],
    "stretch": [],
    "bend": [],
}
DEFAULT_FIELDS = ["handle", "direction", "tip", "velocity", "stretch", "bend"]


class CSVLogger:
    """
    Buffered CSV logger for rod simulations.

    Parameters
    ----------
    filepath : str | Path
        Output CSV file path
    buffer_size : int
        Number of rows to buffer before writing.
    fields : list[str] | None
        State fields to log. Default: all of
        "handle", "direction", "tip", "velocity" (3 columns each),
        "stretch" (tip distance / active length), "bend" (deg).

    Notes
    -----
    ``log`` accepts any object exposing ``t`` (float), ``rod``
    (``flexrod.dynamics.rod.Rod``) and ``tip_velocity`` (Vector3), which
    is what ``RodSimulation`` provides.

    Examples
    --------
    >>> with CSVLogger("output.csv") as logger:
    ...     for _ in range(n_steps):
    ...         sim.step(dt)
    ...         logger.log(sim)
    """

    def __init__(
        self,
        filepath: str | Path,
        buffer_size: int = 1000,
        fields: list[str] | None = None
    ) -> None:
        self.filepath = Path(filepath)
        self.buffer_size = buffer_size
        self.fields = list(fields) if fields is not None else list(DEFAULT_FIELDS)

        invalid = set(self.fields) - set(FIELD_COMPONENTS)
        if invalid:
            raise ValueError(
                f"Invalid fields: {invalid}. Valid options: {set(FIELD_COMPONENTS)}"
            )

        self._buffer: list[list[str]] = []
        self._file: TextIO | None = None
        self._writer: Any = None  # csv.writer is a function, not a type
        self._header_written = False

        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    def __enter__(self) -> CSVLogger:
        """Open file for writing."""
        self._file = open(self.filepath, "w", newline="", encoding="utf-8")
        self._writer = csv.writer(self._file)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close file, flushing any remaining data."""
        self.close()

    @staticmethod
    def _get_val(sim: Any, field: str) -> Any:
        rod = sim.rod
        if field == "handle":
            return tuple(rod.handle_position)
        if field == "direction":
            return tuple(rod.handle_direction)
        if field == "tip":
            return tuple(rod.tip_position)
        if field == "velocity":
            return tuple(sim.tip_velocity)
        if field == "stretch":
            return rod.stretch_ratio()
        if field == "bend":
            return rod.bend_angle()
        return None

    def header(self) -> list[str]:
        hdr = ["t"]
        for field in self.fields:
            comps = FIELD_COMPONENTS[field]
            if comps:
                hdr.extend(f"{field}_{c}" for c in comps)
            else:
                hdr.append(field)
        return hdr

    def _write_header(self) -> None:
        if self._writer:
            self._writer.writerow(self.header())
            if self._file:
                self._file.flush()
        self._header_written = True

    def log(self, sim: Any) -> None:
        """
        Append the current simulation state to the buffer.

        Opens the file on first call if not used as a context manager.
        Writes to disk when the buffer is full.
        """
        if self._file is None:
            self.__enter__()

        if not self._header_written:
            self._write_header()

        row = [f"{sim.t:.10f}"]
        for field in self.fields:
            val = self._get_val(sim, field)
            if isinstance(val, tuple):
                row.extend(f"{v:.10e}" for v in val)
            else:
                row.append(f"{val:.10e}")

        self._buffer.append(row)

        if len(self._buffer) >= self.buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write buffered data to disk and clear buffer."""
        if self._writer and self._buffer:
            self._writer.writerows(self._buffer)
            if self._file:
                self._file.flush()
            self._buffer.clear()

    def close(self) -> None:
        """Flush remaining data and close file."""
        self.flush()
        if self._file:
            self._file.close()
            self._file = None
            self._writer = None
