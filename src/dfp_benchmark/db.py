"""MongoDB helpers.

Centralizes creation of Mongo clients and the batched collection loader used
to take a Dask snapshot of the account records.
"""

from __future__ import annotations

import logging
from typing import Any, List
from typing import cast, Any as TypingAny

import certifi
import dask.dataframe as dd
import pandas as pd
from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from dfp_benchmark.config import Settings

log = logging.getLogger(__name__)


def get_client(uri: str, tls: bool = False) -> MongoClient:
    """Return a configured PyMongo MongoClient for the provided URI.

    Args:
        uri: MongoDB connection URI.
        tls: Connect with TLS, validating against the certifi CA bundle.

    Returns:
        Configured MongoClient instance.
    """
    options: dict[str, Any] = {
        "serverSelectionTimeoutMS": 30000,
        "socketTimeoutMS": 30000,
        "connectTimeoutMS": 30000,
    }
    if tls:
        options.update(tls=True, tlsCAFile=certifi.where())
    return MongoClient(uri, **options)


def get_db(
    client: MongoClient[dict[str, Any]],
    db_name: str,
) -> Database[dict[str, Any]]:
    """Return the named Database instance from a MongoClient.

    Args:
        client: PyMongo MongoClient.
        db_name: Database name.

    Returns:
        A Database object.
    """
    return client[db_name]


def get_collection(settings: Settings) -> Collection[dict[str, Any]]:
    """Return the account records collection described by `settings`."""
    client = get_client(settings.mongo_uri, settings.mongo_tls)
    return get_db(client, settings.mongo_db)[settings.mongo_collection]


def load_collection_to_ddf(
    collection: Any,
    projection: dict[str, Any],
    batch_size: int = 50_000,
) -> Any:
    """Load a MongoDB collection into a Dask DataFrame using batched reads.

    Args:
        collection: PyMongo collection (or any object with a compatible `find`).
        projection: Projection passed to `find`.
        batch_size: Number of documents per pandas batch.

    Returns:
        Dask DataFrame with one partition per ~200k rows.
    """
    cursor = collection.find({}, projection).batch_size(batch_size)

    pdf_batches: List[pd.DataFrame] = []
    buffer: List[dict[str, Any]] = []

    for doc in cursor:
        buffer.append(doc)
        if len(buffer) >= batch_size:
            pdf_batches.append(pd.DataFrame(buffer))
            buffer.clear()

    if buffer:
        pdf_batches.append(pd.DataFrame(buffer))

    dd_mod = cast(TypingAny, dd)
    if not pdf_batches:
        return dd_mod.from_pandas(pd.DataFrame(), npartitions=1)

    pdf = pd.concat(pdf_batches, ignore_index=True)
    nparts = max(1, len(pdf) // 200_000)

    log.info("Loaded %d documents into %d Dask partitions", len(pdf), nparts)

    return dd_mod.from_pandas(pdf, npartitions=nparts)
