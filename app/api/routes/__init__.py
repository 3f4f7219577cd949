from . import mockups

__all__ = ["mockups"]
