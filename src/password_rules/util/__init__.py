__all__ = ("model",)

from . import model
