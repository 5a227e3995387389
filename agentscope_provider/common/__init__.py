"""
Common utilities module initialization
"""
