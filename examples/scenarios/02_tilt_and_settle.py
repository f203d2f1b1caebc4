"""
Example 02: Tilt and Settle
Snap the handle from +Y to +X and watch each material settle onto the
rigid pose. Uses RodSimulation directly with a termination callback.
"""
from flexrod import Rod, RodSimulation, StaticHandle, get_preset
from flexrod.utils.vector import Vector3, distance

IDEAL = Vector3(100.0, 0.0, 0.0)
SETTLE_TOLERANCE = 0.5


def settle_time(material: str) -> float:
    rod = Rod(100.0, get_preset(material))
    sim = RodSimulation(rod, StaticHandle((0, 0, 0), (1, 0, 0)))
    sim.set_termination_callback(
        lambda s: s.frame > 10 and distance(s.rod.tip_position, IDEAL) < SETTLE_TOLERANCE
    )
    sim.run(duration=30.0, dt=1.0 / 60.0, log_interval=0)
    return sim.t


def main():
    print("=" * 60)
    print("Tilt and Settle")
    print("=" * 60)
    for material in ("default", "rubber_hose", "fishing_rod", "steel_bar"):
        print(f"{material:>12s}: settled after {settle_time(material):6.2f} s")


if __name__ == "__main__":
    main()
