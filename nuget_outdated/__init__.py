"""
NuGet Outdated

A tool for finding outdated NuGet package references in .NET projects.
"""

__version__ = "0.1.0"

from .checker import Checker
from .cli import main

__all__ = ["Checker", "main"]
