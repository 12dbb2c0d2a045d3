"""
OneSpan Sign account administration.

Maps declarative resource blocks (signing logos, signing themes, data
retention settings) onto the OneSpan Sign REST API.
"""

__version__ = '0.1.0'
