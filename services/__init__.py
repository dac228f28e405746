"""Session orchestration services."""
from .sessions import InterviewController

__all__ = ["InterviewController"]
