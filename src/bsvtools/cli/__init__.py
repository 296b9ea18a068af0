"""
Command-line entry points for bsvtools.
"""
