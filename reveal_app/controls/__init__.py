"""
Interactive controls with their own state machines.
"""
