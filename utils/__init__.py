"""
Image I/O, logging, presets and report helpers for the noisemap application.
"""
