# src/flexrod/utils/io.py
import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pandas as pd

from flexrod.dynamics.properties import ElasticProperties, get_preset

DEFAULT_LENGTH = 100.0


def save_simulation_history(history: List[Dict[str, Any]], filepath: str) -> Path:
    """
    Saves a list of state dictionaries to a CSV file.

    Args:
        history: List of dicts, e.g., [{'t': 0.1, 'tip_x': 1.0}, ...]
        filepath: Destination path (e.g., 'results/run1.csv')

    Returns:
        The written path.
    """
    if not history:
        raise ValueError("Simulation history is empty. Nothing to save.")

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(history)
    df.to_csv(path, index=False)
    print(f"Simulation results saved to {path.absolute()}")
    return path


def _read_json(filepath) -> Dict[str, Any]:
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object in {path}, got {type(data).__name__}")
    return data


def load_properties(filepath) -> ElasticProperties:
    """Load a bare ElasticProperties record from a JSON object."""
    return ElasticProperties.from_dict(_read_json(filepath))


def save_properties(props: ElasticProperties, filepath) -> Path:
    """Write an ElasticProperties record as a JSON object."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(props.to_dict(), f, indent=2)
    return path


def load_rod_config(filepath) -> Tuple[float, ElasticProperties]:
    """
    Load rod length and material from a JSON config.

    Format::

        {
            "length": 100,
            "preset": "fishing_rod",
            "properties": {"damping": 2.0}
        }

    All keys are optional. "properties" overrides the preset (or the
    defaults when no preset is given).
    """
    data = _read_json(filepath)
    length = float(data.get("length", DEFAULT_LENGTH))

    base = get_preset(data["preset"]) if "preset" in data else ElasticProperties()
    overrides = data.get("properties", {})
    if not isinstance(overrides, dict):
        raise ValueError(f"'properties' must be a JSON object in {filepath}")
    props = ElasticProperties.from_dict({**base.to_dict(), **overrides})
    return length, props
