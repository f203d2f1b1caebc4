"""
Example 01: Whip Swing
A fishing rod swung back and forth about the Z axis, logged and plotted.
"""

from flexrod import Scenario


def run_demo():
    print("\n--- Running Fishing Rod Swing ---")

    scenario = (
        Scenario(name="01_whip_swing", length=120.0)
        .with_material("fishing_rod", damping=1.5)
        .swing(axis=(0.0, 0.0, 1.0), amplitude_deg=70.0, frequency_hz=1.2)
        .enable_plotting(show=False)
    )

    scenario.run(duration=4.0, log_interval=0.5)
    print(f"Results saved to: {scenario.sim.output_path}")


if __name__ == "__main__":
    run_demo()
