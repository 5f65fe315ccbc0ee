import os

from pymongo import MongoClient
from pymongo.database import Database

from ..utilities.errors import SetupError
from ..utilities.logger import get_logger

# Module-level cache for the default database
_mongo_db: Database | None = None

def create_mongo_db() -> Database:
    """ Returns the default database for Documents, connecting on first use.
    Configured with the MONGO_URL and MONGO_DB_NAME environment variables. """
    global _mongo_db
    if _mongo_db is not None:
        return _mongo_db

    MONGO_URL = os.environ.get("MONGO_URL")
    if not MONGO_URL: raise SetupError("Please set MONGO_URL in your environment variables.")

    MONGO_DB_NAME = os.environ.get("MONGO_DB_NAME")
    if not MONGO_DB_NAME: raise SetupError("Please set MONGO_DB_NAME in your environment variables.")

    # Initialize database
    get_logger().debug(f"Connecting to MongoDB database '{MONGO_DB_NAME}'")
    mongo_client: MongoClient = MongoClient(MONGO_URL)
    _mongo_db = mongo_client[MONGO_DB_NAME]
    return _mongo_db

def set_mongo_db(database: Database | None) -> None:
    """ Override the default database (pass None to go back to the environment configuration). """
    global _mongo_db
    _mongo_db = database
