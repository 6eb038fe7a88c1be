"""
SOP Writer

Generates Statement-of-Purpose prompts and drafts for university applications.
"""

__version__ = "0.1.0"
