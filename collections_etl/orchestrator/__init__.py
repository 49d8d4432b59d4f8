"""Workflow orchestration for classifying and summarizing contact activity."""

from .service import SummaryOrchestrator

__all__ = ["SummaryOrchestrator"]
