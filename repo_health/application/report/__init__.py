"""Report application layer - local analysis, AI enhancement, merge."""

from repo_health.application.report.orchestrator import AIEnhancementOrchestrator
from repo_health.application.report.use_case import ReportBuilder

__all__ = ["AIEnhancementOrchestrator", "ReportBuilder"]
