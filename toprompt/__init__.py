"""toprompt: bundle source files into a single prompt-ready text block."""

__version__ = "0.2.0"
