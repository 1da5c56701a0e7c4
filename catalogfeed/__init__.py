"""Catalog feed export service.

Streams store products as a delimited text feed for search indexing.
"""
