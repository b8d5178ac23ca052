"""Core pieces of a Korn-style shell: formatting, numbers, unescaping, globbing, options, paths, signal names and command trees."""

__version__ = "0.1.0"