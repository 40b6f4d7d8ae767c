"""FlapCube - a falling-cube arcade game with a pygame simulator."""

__version__ = "0.1.0"
