"""
Database configuration and connection management

This module provides the basic MongoDB setup for database connectivity.
NO collections are defined here - this is just infrastructure.
"""

import os
import logging
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pymongo import MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

logger = logging.getLogger(__name__)

# Values from a .env file in the working directory; real environment variables win
load_dotenv(find_dotenv(usecwd=True))

# Get connection settings from environment variables
MONGO_URI = os.getenv("MONGO_URI")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "blog_service")
MONGO_TIMEOUT_MS = int(os.getenv("MONGO_TIMEOUT_MS", "5000"))


def create_client(uri: Optional[str] = MONGO_URI) -> Optional[MongoClient]:
    """
    Create a MongoDB client for the given connection string.

    Returns None when no URI is configured. The client connects lazily,
    so a bad URI or an unreachable server only shows up on first use.
    """
    if not uri:
        logger.warning(
            "MONGO_URI not set; skipping DB connection. Set MONGO_URI to enable persistence."
        )
        return None

    return MongoClient(
        uri,
        serverSelectionTimeoutMS=MONGO_TIMEOUT_MS,
        tz_aware=True,
    )


def get_database(client: MongoClient) -> Database:
    """Database named in the URI, falling back to MONGO_DB_NAME."""
    return client.get_default_database(default=MONGO_DB_NAME)


def check_db_connection(client: Optional[MongoClient]) -> bool:
    """
    Test database connectivity
    Returns True if connection successful, False otherwise
    """
    if client is None:
        return False
    try:
        client.admin.command("ping")
        return True
    except PyMongoError:
        return False
