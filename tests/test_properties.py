"""
Tests for ElasticProperties, validation and material presets.
"""
import dataclasses

import pytest

from flexrod.dynamics.properties import (
    MATERIAL_PRESETS,
    MIN_MASS,
    ElasticProperties,
    get_preset,
)


def test_defaults_match_reference_material():
    p = ElasticProperties()
    assert p.stiffness == 8.0
    assert p.damping == 2.5
    assert p.mass == 2.0
    assert p.stretch_factor == 20.0
    assert p.grip_ratio == 0.0
    assert p.max_stretch_ratio == 1.5
    assert p.max_bend_angle == 180.0
    assert p.taper == 0.0


def test_fields_are_coerced_to_float():
    p = ElasticProperties(stiffness=300, mass=1)
    assert isinstance(p.stiffness, float)
    assert isinstance(p.mass, float)


def test_record_is_frozen():
    p = ElasticProperties()
    with pytest.raises(dataclasses.FrozenInstanceError):
        p.stiffness = 1.0  # type: ignore[misc]


def test_derived_values():
    p = ElasticProperties(grip_ratio=0.25, mass=0.01, max_bend_angle=45.0)
    assert p.active_length(100.0) == pytest.approx(75.0)
    assert p.effective_mass == MIN_MASS
    assert p.bend_limited
    assert not ElasticProperties().bend_limited


def test_with_overrides():
    p = ElasticProperties().with_overrides(damping=0.0, taper=1.0)
    assert p.damping == 0.0
    assert p.taper == 1.0
    assert p.stiffness == 8.0
    with pytest.raises(TypeError):
        ElasticProperties().with_overrides(bogus=1.0)


@pytest.mark.parametrize("name", sorted(MATERIAL_PRESETS))
def test_presets_are_valid(name):
    """Every shipped preset passes strict validation."""
    get_preset(name).validate(strict=True)


def test_preset_values():
    rod = get_preset("fishing_rod")
    assert rod.taper == 0.8
    assert rod.max_bend_angle == 160.0
    assert get_preset("carbon_fiber").max_bend_angle == 35.0


def test_unknown_preset():
    with pytest.raises(KeyError, match="Available"):
        get_preset("spaghetti")


@pytest.mark.parametrize("changes, field", [
    ({"grip_ratio": 1.0}, "grip_ratio"),
    ({"max_stretch_ratio": 0.9}, "max_stretch_ratio"),
    ({"max_bend_angle": 0.0}, "max_bend_angle"),
    ({"mass": -1.0}, "mass"),
    ({"damping": -0.5}, "damping"),
    ({"taper": 1.5}, "taper"),
])
def test_validate_strict_raises(changes, field):
    p = ElasticProperties(**changes)
    with pytest.raises(ValueError, match=field):
        p.validate(strict=True)


def test_validate_non_strict_warns():
    p = ElasticProperties(max_bend_angle=-10.0, stiffness=0.0)
    with pytest.warns(RuntimeWarning) as record:
        p.validate()
    messages = " ".join(str(w.message) for w in record)
    assert "max_bend_angle" in messages
    assert "stiffness" in messages


def test_validate_rejects_nan():
    with pytest.raises(ValueError, match="finite"):
        ElasticProperties(stiffness=float("nan")).validate(strict=True)


def test_dict_round_trip():
    p = get_preset("wax_wood")
    assert ElasticProperties.from_dict(p.to_dict()) == p


def test_from_dict_accepts_camel_case_and_fills_defaults():
    p = ElasticProperties.from_dict({"gripRatio": 0.2, "maxBendAngle": 90, "stiffness": 50})
    assert p.grip_ratio == 0.2
    assert p.max_bend_angle == 90.0
    assert p.stiffness == 50.0
    assert p.damping == 2.5


def test_from_dict_warns_on_unknown_keys():
    with pytest.warns(RuntimeWarning, match="colour"):
        p = ElasticProperties.from_dict({"colour": "blue", "mass": 3.0})
    assert p.mass == 3.0
