"""Temporal workflows for the SLI service."""

from .get_sli import GetSLIWorkflow

__all__ = ["GetSLIWorkflow"]
