"""
Well Connected Gardener.

Enhances library weeding lists by adding search results from other library
catalogs, queried over Z39.50 with yaz-client.
"""

__version__ = "0.1.0"
