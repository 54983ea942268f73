import logging

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING

from jobboard.config import DATABASE_NAME, MONGO_URI

logger = logging.getLogger(__name__)

client = None
db = None


async def connect_to_mongo():
    global client, db

    if not MONGO_URI:
        raise ValueError("MONGO_URI environment variable is not set! Check your .env file.")

    client = AsyncIOMotorClient(MONGO_URI)
    db = client[DATABASE_NAME]
    await client.admin.command("ping")
    await ensure_indexes(db)

    if "mongodb+srv" in MONGO_URI:
        logger.info("Connected to MongoDB Atlas, database=%s", DATABASE_NAME)
    else:
        logger.info("Connected to MongoDB, database=%s", DATABASE_NAME)


async def close_mongo_connection():
    if client:
        client.close()
        logger.info("MongoDB connection closed")


async def ensure_indexes(database):
    """Unique constraints the lifecycle relies on, plus the hot query paths."""
    await database.applications.create_index(
        [("job_id", ASCENDING), ("jobseeker_id", ASCENDING)], unique=True, name="uq_application_job_seeker"
    )
    await database.applications.create_index([("recruiter_id", ASCENDING), ("status", ASCENDING)])
    await database.applications.create_index([("jobseeker_id", ASCENDING), ("applied_at", DESCENDING)])

    await database.saved_jobs.create_index(
        [("jobseeker_id", ASCENDING), ("job_id", ASCENDING)], unique=True, name="uq_saved_job_seeker_job"
    )

    await database.skills.create_index("name", unique=True)
    await database.job_categories.create_index("name", unique=True)
    await database.job_categories.create_index("parent_category")

    await database.jobs.create_index([("status", ASCENDING), ("posted_at", DESCENDING)])
    await database.jobs.create_index([("recruiter_id", ASCENDING), ("status", ASCENDING)])
    await database.jobs.create_index("required_skills")
    await database.jobs.create_index("category")


def get_db():
    return db
