"""
Firebase Admin initialization.

Credentials are resolved in order:
1. a service-account JSON file (``FIREBASE_CREDENTIALS_PATH``)
2. inline service-account fields (``FIREBASE_PROJECT_ID``, ``FIREBASE_CLIENT_EMAIL``, ``FIREBASE_PRIVATE_KEY``)
3. Google application default credentials
"""
import logging

import firebase_admin
from firebase_admin import credentials, firestore_async

from app.core.config import Settings
from app.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "prepwise-api"


def _build_credentials(settings: Settings) -> credentials.Base:
    if settings.FIREBASE_CREDENTIALS_PATH:
        logger.info("Using Firebase service account file")
        return credentials.Certificate(settings.FIREBASE_CREDENTIALS_PATH)

    if settings.has_inline_firebase_credentials:
        logger.info(f"Using inline Firebase service account for project {settings.FIREBASE_PROJECT_ID}")
        return credentials.Certificate({
            "type": "service_account",
            "project_id": settings.FIREBASE_PROJECT_ID,
            "client_email": settings.FIREBASE_CLIENT_EMAIL,
            "private_key": settings.firebase_private_key,
            "token_uri": "https://oauth2.googleapis.com/token",
        })

    logger.warning("No Firebase service account configured, falling back to application default credentials")
    return credentials.ApplicationDefault()


def initialize_firebase(settings: Settings) -> firebase_admin.App:
    """Initialize (or reuse) the named Firebase app for this service."""
    try:
        return firebase_admin.get_app(FIREBASE_APP_NAME)
    except ValueError:
        pass

    options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
    try:
        app = firebase_admin.initialize_app(_build_credentials(settings), options=options, name=FIREBASE_APP_NAME)
    except (ValueError, IOError) as e:
        logger.error(f"Firebase initialization failed: {type(e).__name__}: {e}")
        raise ConfigurationError(f"Firebase initialization failed: {e}") from e

    logger.info("✅ Firebase initialized")
    return app


def get_firestore_client(app: firebase_admin.App):
    """Async Firestore client bound to the given Firebase app."""
    return firestore_async.client(app=app)


def shutdown_firebase(app: firebase_admin.App) -> None:
    firebase_admin.delete_app(app)
    logger.info("Firebase app deleted")
