"""
Template-aware formatting of embedded script and style code.
"""
