"""MongoDB Client - Connection and Collection Management"""
from typing import Any, Dict, Optional
from pymongo import MongoClient as PyMongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from pymongo import ASCENDING
from pymongo.errors import ConnectionFailure

from ..config.settings import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)

FORM_CONFIGURATIONS = "form_configurations"
TICKET_TEMPLATES = "ticket_templates"
USERS = "users"
TICKETS = "tickets"

SINGLE_DEFAULT_INDEX = "single_default_template"

# Global client instance
_client: Optional[PyMongoClient] = None
_database: Optional[Database] = None


def get_client() -> PyMongoClient:
    """Get or create MongoDB client"""
    global _client
    if _client is None:
        logger.info(f"Connecting to MongoDB: {settings.mongo_uri}")
        _client = PyMongoClient(
            settings.mongo_uri,
            serverSelectionTimeoutMS=5000,
            connectTimeoutMS=5000,
            socketTimeoutMS=30000,
        )
        try:
            _client.admin.command("ping")
            logger.info("MongoDB connection successful")
        except ConnectionFailure as e:
            logger.error(f"MongoDB connection failed: {e}")
            raise
    return _client


def get_database() -> Database:
    """Get the application database"""
    global _database
    if _database is None:
        client = get_client()
        _database = client[settings.mongo_db]
        logger.info(f"Using database: {settings.mongo_db}")
    return _database


def get_collection(name: str) -> Collection:
    """Get a collection from the database"""
    db = get_database()
    return db[name]


def close_connection() -> None:
    """Close MongoDB connection"""
    global _client, _database
    if _client is not None:
        _client.close()
        _client = None
        _database = None
        logger.info("MongoDB connection closed")


def create_indexes() -> None:
    """Create all required indexes"""
    db = get_database()
    logger.info("Creating MongoDB indexes...")
    
    # Form configurations
    form_configurations = db[FORM_CONFIGURATIONS]
    form_configurations.create_index("form_config_id", unique=True)
    form_configurations.create_index("is_active")
    
    # Ticket templates - at most one document may carry is_default=true
    ticket_templates = db[TICKET_TEMPLATES]
    ticket_templates.create_index("template_id", unique=True)
    ticket_templates.create_index("name", unique=True)
    ticket_templates.create_index(
        "is_default",
        unique=True,
        partialFilterExpression={"is_default": True},
        name=SINGLE_DEFAULT_INDEX
    )
    ticket_templates.create_index([("is_active", ASCENDING), ("name", ASCENDING)])
    
    # Users - either identity key finds the user
    users = db[USERS]
    users.create_index("email", unique=True)
    users.create_index(
        "employee_id",
        unique=True,
        partialFilterExpression={"employee_id": {"$type": "string"}}
    )
    users.create_index("ticket_template_id")
    
    # Tickets
    tickets = db[TICKETS]
    tickets.create_index("ticket_id", unique=True)
    tickets.create_index("status")
    tickets.create_index("template_id")
    
    logger.info("MongoDB indexes created successfully")


def supports_transactions() -> bool:
    """Replica set members and mongos run multi-document transactions; standalone servers do not"""
    hello = get_client().admin.command("hello")
    return bool(hello.get("setName")) or hello.get("msg") == "isdbgrid"


def health_check() -> Dict[str, Any]:
    """Ping MongoDB and report whether default-template changes run in a transaction"""
    try:
        return {"status": "healthy", "transactions": supports_transactions()}
    except Exception as e:
        logger.error(f"MongoDB health check failed: {e}")
        return {"status": "unhealthy", "error": str(e)}
