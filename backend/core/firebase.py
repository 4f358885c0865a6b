"""
Firebase Admin initialization and ID token verification.
"""
import logging
import threading
from typing import Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore

from core.config import FIREBASE_CLIENT_EMAIL, FIREBASE_PRIVATE_KEY, FIREBASE_PROJECT_ID
from core.exceptions import ServiceUnavailableError, UnauthorizedError
from models.content_models import CallerIdentity

logger = logging.getLogger(__name__)

_app: Optional[firebase_admin.App] = None
_init_lock = threading.Lock()


def is_configured() -> bool:
    return bool(FIREBASE_PROJECT_ID and FIREBASE_CLIENT_EMAIL and FIREBASE_PRIVATE_KEY)


def initialize_firebase() -> firebase_admin.App:
    """
    Initialize the default Firebase app from service account env vars.

    Sync routes run in the threadpool, so first use is serialized.
    """
    global _app
    if _app is not None:
        return _app
    with _init_lock:
        if _app is None:
            _app = _create_app()
    return _app


def _create_app() -> firebase_admin.App:
    if not is_configured():
        raise ServiceUnavailableError(
            "Firebase configuration is required for notes and workspaces",
            error="Database not configured",
        )

    service_account = {
        "type": "service_account",
        "project_id": FIREBASE_PROJECT_ID,
        "client_email": FIREBASE_CLIENT_EMAIL,
        # .env files carry the key with escaped newlines
        "private_key": FIREBASE_PRIVATE_KEY.replace("\\n", "\n"),
        "token_uri": "https://oauth2.googleapis.com/token",
    }
    try:
        app = firebase_admin.initialize_app(credentials.Certificate(service_account))
    except ValueError as e:
        logger.error(f"Firebase initialization error: {e}")
        raise ServiceUnavailableError(str(e), error="Database not configured")

    logger.info("Firebase initialized successfully")
    return app


def get_firestore_client():
    """Firestore client bound to the default app."""
    return firestore.client(initialize_firebase())


class FirebaseTokenVerifier:
    """Maps a Firebase ID token to the caller's identity."""

    def verify(self, token: str) -> CallerIdentity:
        app = initialize_firebase()
        try:
            decoded = auth.verify_id_token(token, app=app)
        except (ValueError, auth.InvalidIdTokenError, auth.ExpiredIdTokenError, auth.RevokedIdTokenError) as e:
            logger.info(f"Token verification failed: {type(e).__name__}")
            raise UnauthorizedError("Please provide a valid authorization token", error="Invalid token")
        except auth.CertificateFetchError as e:
            logger.error(f"Could not fetch token signing certificates: {e}")
            raise ServiceUnavailableError("Token verification is temporarily unavailable")
        return CallerIdentity(uid=decoded["uid"], email=decoded.get("email"), claims=decoded)


# Global token verifier instance
token_verifier = FirebaseTokenVerifier()
