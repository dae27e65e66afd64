"""studyhub - build a JSON catalog of course material pages for the study reader."""

__version__ = "0.1.0"
