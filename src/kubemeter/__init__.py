# src/kubemeter/__init__.py
"""
kubemeter compiles metering requests into PromQL and normalizes the
returned series into billable usage.
"""

__version__ = "0.1.0"
