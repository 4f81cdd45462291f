from .annualizer import Annualizer, confidence_tier

__all__ = ["Annualizer", "confidence_tier"]
