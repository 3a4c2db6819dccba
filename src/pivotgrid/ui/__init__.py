"""
Qt boundary adapter for the pivot grid core.
"""
