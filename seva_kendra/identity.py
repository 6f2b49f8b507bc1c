# seva_kendra/identity.py

"""Registration, login and bearer-token verification.

Login failures share one message whether the phone is unknown or the
password is wrong, so callers cannot probe which numbers are registered.
Password digests never leave this module: every outward value is a
:class:`UserOut` projection.
"""

import logging
from typing import Optional

from .config import Settings
from .exceptions import AuthenticationError, ConflictError, ValidationError
from .models import utcnow
from .schemas import AuthResponse, LoginIn, RegisterIn, Role, TokenClaims, UserOut
from .store import USERS, Store
from .utils import create_jwt, decode_jwt, dummy_password_hash, hash_password, verify_password

logger = logging.getLogger(__name__)

BAD_CREDENTIALS = "Invalid phone number or password"
PHONE_TAKEN = "User already exists with this phone number"


def normalize_phone(phone: str) -> str:
    phone = (phone or "").strip()
    if len(phone) != 10 or not phone.isascii() or not phone.isdigit():
        raise ValidationError("Phone number must be 10 digits")
    return phone


class Identity:
    def __init__(self, store: Store, settings: Settings):
        self.store = store
        self.settings = settings

    def _issue(self, user: dict, message: str) -> AuthResponse:
        token = create_jwt(
            {"sub": str(user["id"]), "phone": user["phone"], "role": user["role"]},
            settings=self.settings,
        )
        return AuthResponse(message=message, user=UserOut.model_validate(user), token=token)

    def register(self, data: RegisterIn) -> AuthResponse:
        if not (data.name or "").strip() or not (data.phone or "").strip() or not data.password:
            raise ValidationError("Please provide name, phone and password")
        phone = normalize_phone(data.phone)

        if self.store.find_one(USERS, phone=phone) is not None:
            raise ConflictError(PHONE_TAKEN, field="phone")

        try:
            user = self.store.insert(
                USERS,
                {
                    "name": data.name.strip(),
                    "phone": phone,
                    "password_hash": hash_password(data.password),
                    "role": Role.user.value,
                    "created_at": utcnow(),
                },
            )
        except ConflictError:
            # Lost a race with a concurrent registration for the same phone
            raise ConflictError(PHONE_TAKEN, field="phone")

        logger.info("Registered user %s (%s)", user["id"], phone)
        return self._issue(user, "Registration successful")

    def login(self, data: LoginIn) -> AuthResponse:
        if not (data.phone or "").strip() or not data.password:
            raise ValidationError("Please provide phone and password")

        user = self.store.find_one(USERS, phone=data.phone.strip())
        stored_hash = user["password_hash"] if user is not None else dummy_password_hash()
        if not verify_password(data.password, stored_hash) or user is None:
            logger.warning("Failed login for %s", data.phone.strip())
            raise AuthenticationError(BAD_CREDENTIALS)

        logger.info("User %s logged in", user["id"])
        return self._issue(user, "Login successful")

    def verify_token(self, token: Optional[str]) -> TokenClaims:
        if not token:
            raise AuthenticationError("No token provided")
        payload = decode_jwt(token, settings=self.settings)
        try:
            return TokenClaims(user_id=int(payload["sub"]), phone=payload["phone"], role=payload["role"])
        except (KeyError, TypeError, ValueError):
            raise AuthenticationError("Invalid token")
