"""
Firebase Admin initialisation.

The service account is optional: without FIREBASE_CREDENTIALS_PATH the app
runs with no object storage and no identity provider, and the features that
need them answer with an ExternalServiceError.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import firebase_admin
from firebase_admin import credentials

from config import FirebaseSettings
from shared.logging import get_logger

log = get_logger(__name__)


def init_firebase_app(settings: FirebaseSettings) -> Optional[firebase_admin.App]:
    """Return the default Firebase app, initialising it once.

    Returns None when Firebase is not configured.

    Raises:
        FileNotFoundError: the configured service account file is missing.
    """
    if not settings.is_configured:
        log.warning("firebase_not_configured")
        return None

    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    path = Path(settings.firebase_credentials_path)
    if not path.is_file():
        raise FileNotFoundError(f"Firebase service account JSON not found: {path}")

    options = {}
    if settings.firebase_storage_bucket:
        options["storageBucket"] = settings.firebase_storage_bucket

    app = firebase_admin.initialize_app(credentials.Certificate(str(path)), options or None)
    log.info("firebase_initialized", bucket=settings.firebase_storage_bucket or None)
    return app
