"""
Shell bootstrap package.
"""
