"""
Infrastructure utilities.
"""
