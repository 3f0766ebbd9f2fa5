from .settings import MatchConfig, OutputFormat

__all__ = ["MatchConfig", "OutputFormat"]
