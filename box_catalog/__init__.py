"""
Box catalog server: versioned box metadata served as JSON over HTTP from a
directory of ``*.metadata.json`` description files.
"""

__version__ = "0.1.0"
