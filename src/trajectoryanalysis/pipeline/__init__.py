from .session import AnalysisSession, AnalysisSessionConfig

__all__ = ["AnalysisSession", "AnalysisSessionConfig"]
