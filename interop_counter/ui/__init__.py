"""
Textual user interface
"""
