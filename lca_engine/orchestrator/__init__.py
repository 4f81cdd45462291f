from .report_builder import InterpretationReportBuilder
from .service import InterpretationService

__all__ = ["InterpretationReportBuilder", "InterpretationService"]
