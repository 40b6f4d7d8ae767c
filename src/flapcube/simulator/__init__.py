"""Desktop simulator for FlapCube."""

from flapcube.simulator.window import SimulatorWindow

__all__ = ["SimulatorWindow"]
