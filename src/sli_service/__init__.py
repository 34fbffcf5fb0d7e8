"""Prometheus SLI service.

Answers get-sli.triggered events of a quality-gate evaluation: builds a
PromQL query per requested indicator and returns one value per indicator.
"""

__version__ = "0.1.0"
