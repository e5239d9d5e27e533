"""
Parsing of register pages: markup loading, text normalization, field
splitting, section extraction and search results.
"""
