"""
Veilleur - transaction lifecycle tracker.

Follows a submitted transaction through mining on the execution tier and
indexing on the index tier, as a stream of status events.
"""

__version__ = "0.1.0"
