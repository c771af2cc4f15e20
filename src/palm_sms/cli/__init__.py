"""
Palm SMS Command-Line Interface
===============================

This package provides the palm-sms command-line tool (module smsdump) for
inspecting, exporting and validating Handspring SMS databases.

The tool is a Click-based CLI application with comprehensive help and
error reporting.
"""

__all__ = ["smsdump"]
