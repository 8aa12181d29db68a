import os
import asyncio
import logging

from motor.motor_asyncio import AsyncIOMotorClient

logger = logging.getLogger(__name__)

MONGO_URL = os.getenv('MONGO_URL', 'mongodb://mongo:27017')
MONGO_DB = os.getenv('MONGO_DB', 'social_app')
CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]
PORT = int(os.getenv('PORT', '8000'))

MONGO = None


async def mongo_startup(max_retries: int = 3, retry_delay: int = 3):
    """Start MongoDB connection with retries"""
    global MONGO

    for attempt in range(max_retries):
        try:
            logger.info(f"Attempting to connect to MongoDB: {MONGO_URL} (attempt {attempt + 1}/{max_retries})")

            MONGO = AsyncIOMotorClient(
                MONGO_URL,
                serverSelectionTimeoutMS=5000,
                connectTimeoutMS=5000,
                socketTimeoutMS=5000,
                maxPoolSize=50,
                retryWrites=True,
                retryReads=True
            )

            # Test the connection
            await MONGO.admin.command('ping')

            logger.info("MongoDB connected successfully")
            break

        except Exception as e:
            logger.warning(f'MongoDB startup attempt {attempt + 1} failed: {e}')
            if MONGO is not None:
                MONGO.close()
                MONGO = None

            if attempt < max_retries - 1:
                logger.info(f"Retrying MongoDB connection in {retry_delay} seconds...")
                await asyncio.sleep(retry_delay)
            else:
                logger.error("Failed to connect to MongoDB after all retries")

    return MONGO


def get_database():
    if MONGO is None:
        return None
    return MONGO[MONGO_DB]


async def mongo_shutdown():
    """Close the MongoDB client"""
    global MONGO
    if MONGO is not None:
        logger.info("Closing MongoDB connection")
        MONGO.close()
        MONGO = None
