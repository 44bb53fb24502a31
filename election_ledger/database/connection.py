from pymongo import MongoClient

from election_ledger import config

ELECTIONS_COLLECTION_NAME = "elections"
ACCOUNTS_COLLECTION_NAME = "accounts"
LOGS_COLLECTION_NAME = "logs"


def get_database(client: MongoClient = None):
    if not config.MONGO_URI:
        raise ValueError("❌ MONGO_URI not found. Check your .env file location.")
    if not config.MONGO_DB:
        raise ValueError("❌ MONGO_DB not found. Check your .env file location.")

    client = client or MongoClient(config.MONGO_URI)
    return client[config.MONGO_DB]
