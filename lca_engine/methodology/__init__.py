from .loader import get_default_methodology, load_methodology
from .schema import MethodologyConfig

__all__ = ["get_default_methodology", "load_methodology", "MethodologyConfig"]
