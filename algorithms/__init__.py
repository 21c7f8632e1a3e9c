from .math_tools import MathTools
from .unit_converter import WeightConverter, DistanceConverter

__all__ = ["MathTools", "WeightConverter", "DistanceConverter"]
