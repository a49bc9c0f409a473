from .timers import Timer

__all__ = ["Timer"]
