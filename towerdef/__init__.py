"""A tile-map tower-defence map game with a level editor, map files and path checks."""

__version__ = "0.1.0"
__all__ = ["__version__"]