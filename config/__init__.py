"""
Settings and default catalog for the shell bootstrap.
"""
