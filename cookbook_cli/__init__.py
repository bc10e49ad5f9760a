"""
cookbook-cli: download Chef cookbook versions from a Chef server API.
"""

__version__ = "0.1.0"
