"""Persistence of generated interviews in Firestore."""

import logging

from app.core.exceptions import StorageWriteError
from app.schemas.interview import Interview

logger = logging.getLogger(__name__)


class InterviewRepository:
    """
    Writes interview records to a Firestore collection.

    Args:
        db: an async Firestore client (``firebase_admin.firestore_async.client()``)
        collection: name of the collection holding interview documents
    """

    def __init__(self, db, collection: str = "interviews"):
        self.db = db
        self.collection = collection

    async def add(self, interview: Interview) -> str:
        """Insert one record and return the id Firestore assigned to it."""
        document = interview.to_document()
        logger.info(f"💾 Saving to Firestore collection '{self.collection}'...")
        try:
            _, doc_ref = await self.db.collection(self.collection).add(document)
        except Exception as e:
            logger.error(f"❌ Firestore save failed: {type(e).__name__}: {e}", exc_info=True)
            logger.error(f"Interview data that failed to save: {document}")
            raise StorageWriteError(str(e) or type(e).__name__, record=document) from e

        logger.info(f"✅ Successfully saved to Firestore (id={doc_ref.id})")
        return doc_ref.id
