from .weight_converter import WeightConverter

__all__ = ["WeightConverter"]
