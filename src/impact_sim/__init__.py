"""Impact Lab: design a planet, aim an impactor and watch it hit."""

__version__ = "1.0.0"
