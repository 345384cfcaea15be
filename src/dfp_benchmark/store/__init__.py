"""Account store backends.

`AccountStore` is the narrow query interface the benchmarking core depends
on. `MongoAccountStore` queries the live collection; `FrameAccountStore`
answers the same queries from a Dask snapshot.
"""

from dfp_benchmark.store.base import AccountStore, YEAR_MAX, YEAR_MIN, check_year_range
from dfp_benchmark.store.frame import FrameAccountStore
from dfp_benchmark.store.mongo import MongoAccountStore

__all__ = [
    "AccountStore",
    "FrameAccountStore",
    "MongoAccountStore",
    "YEAR_MAX",
    "YEAR_MIN",
    "check_year_range",
]
