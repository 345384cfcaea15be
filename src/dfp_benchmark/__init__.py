"""dfp_benchmark package.

Contains modules for reading standardized financial statement accounts (DFP)
of a company, resolving its sector peers from a sector-membership file, and
comparing each account against the peer-group average.

Architecture:
- Accounts are read from MongoDB (or a Dask snapshot of the collection)
- Peer names are fuzzy-matched against the companies present in the store
- Pydantic models validate the records read back from the store
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
