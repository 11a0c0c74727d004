"""Firebase Auth implementation of IdentityProvider.

Clients sign in with Google or Apple through the Firebase SDK and send the
resulting Firebase ID token; the backend only verifies it.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import firebase_admin
from firebase_admin import auth

from infrastructure.identity.protocol import VerifiedIdentity
from shared.logging import get_logger

log = get_logger(__name__)


class FirebaseIdentityProvider:
    def __init__(self, app: firebase_admin.App) -> None:
        self._app = app

    async def verify_id_token(self, id_token: str) -> Optional[VerifiedIdentity]:
        try:
            claims = await asyncio.to_thread(auth.verify_id_token, id_token, self._app)
        except (auth.InvalidIdTokenError, ValueError) as e:
            # ExpiredIdTokenError and RevokedIdTokenError subclass InvalidIdTokenError
            log.info("id_token_rejected", error_type=type(e).__name__)
            return None

        email = claims.get("email")
        if not email:
            log.info("id_token_rejected", reason="no_email")
            return None
        return VerifiedIdentity(
            uid=claims["uid"],
            email=email.lower(),
            name=claims.get("name"),
            picture=claims.get("picture"),
            provider=(claims.get("firebase") or {}).get("sign_in_provider"),
        )

    async def delete_user(self, uid: str) -> None:
        try:
            await asyncio.to_thread(auth.delete_user, uid, self._app)
        except auth.UserNotFoundError:
            log.info("identity_user_already_absent", uid=uid)
