from pymongo import MongoClient

from evote.config import MONGO_URI, MONGO_DB, MONGO_TIMEOUT_MS

if not MONGO_URI:
    raise ValueError("MONGO_URI not set. Check your .env file.")
if not MONGO_DB:
    raise ValueError("MONGO_DB not set. Check your .env file.")


def get_database(client=None):
    """
    Return the election database. Writes are journaled so a successful call
    survives a crash right after it returns.
    """
    if client is None:
        client = MongoClient(
            MONGO_URI,
            journal=True,
            serverSelectionTimeoutMS=MONGO_TIMEOUT_MS,
        )
    return client[MONGO_DB]
