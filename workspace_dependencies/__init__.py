"""
Workspace Dependencies Tool

A tool for consolidating the direct dependencies of one or more cargo workspaces
into a single CSV report.
"""

__version__ = "0.1.0"

from .cli import main

__all__ = ["main"]
