"""
Input Recorder - record keyboard and mouse input and replay it with its
original timing, driven by global hotkeys.
"""

__version__ = "0.1.0"
