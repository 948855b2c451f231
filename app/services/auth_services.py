# app/services/auth_services.py
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from email_validator import EmailNotValidError, validate_email
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.config import Settings
from app.core.dependencies import get_settings, get_store
from app.core.exceptions import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
    ValidationFailedError,
)
from app.models.auth_models import (
    OAuthProfile,
    SigninRequest,
    SignupRequest,
    TokenData,
    UserPublic,
    UserRecord,
    default_avatar,
)
from app.models.common import as_utc, utc_now
from app.models.password_validation import PasswordValidationError
from app.services.database.base_store import PromptLibraryStore

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

TEMPORARY_USER_NAME = "Temporary User"
BCRYPT_MAX_PASSWORD_BYTES = 72


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        # Not a bcrypt hash, or a password over 72 bytes
        return False


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def create_access_token(user: UserRecord, app_settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=app_settings.JWT_EXPIRE_DAYS))
    to_encode = {
        "sub": user.id,
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "exp": expire,
        "type": "access",
    }
    return jwt.encode(to_encode, app_settings.JWT_SECRET, algorithm=app_settings.JWT_ALGORITHM)


def decode_access_token(token: str, app_settings: Settings) -> TokenData:
    payload = jwt.decode(token, app_settings.JWT_SECRET, algorithms=[app_settings.JWT_ALGORITHM])
    if payload.get("type", "access") != "access":
        raise JWTError("Invalid token type")
    user_id = payload.get("sub") or payload.get("id")
    if not user_id:
        raise JWTError("Invalid token payload")
    return TokenData(sub=str(user_id), email=payload.get("email"), name=payload.get("name"))


def validate_password(password: str, app_settings: Settings):
    errors = []
    if len(password) < app_settings.PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {app_settings.PASSWORD_MIN_LENGTH} characters long")
    # bcrypt only hashes the first 72 bytes
    if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        errors.append(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes long")
    if app_settings.PASSWORD_REQUIRE_COMPLEXITY:
        if not any(char.isdigit() for char in password):
            errors.append("Password must contain a digit")
        if not any(char.isupper() for char in password):
            errors.append("Password must contain an uppercase letter")
        if not any(char.islower() for char in password):
            errors.append("Password must contain a lowercase letter")
        if not any(char in "!@#$%^&*()" for char in password):
            errors.append("Password must contain a special character")

    if errors:
        raise PasswordValidationError(errors)

    return True


def normalize_email(email: str) -> str:
    try:
        result = validate_email(email.strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise ValidationFailedError(str(e)) from e
    return result.normalized.lower()


def to_public(user: UserRecord) -> UserPublic:
    return UserPublic.model_validate(user.model_dump())


async def signup(store: PromptLibraryStore, app_settings: Settings, request: SignupRequest):
    email = normalize_email(request.email)
    try:
        validate_password(request.password, app_settings)
    except PasswordValidationError as e:
        raise ValidationFailedError(e.messages[0]) from e

    if await store.get_user_by_email(email):
        raise ConflictError("User already exists with this email")

    user = UserRecord(
        email=email,
        name=request.name,
        password_hash=hash_password(request.password, app_settings.BCRYPT_ROUNDS),
        provider="email",
        verified=False,
        avatar=default_avatar(request.name),
    )
    user = await store.create_user(user)
    logger.info(f"New user signed up: {user.id}")
    return create_access_token(user, app_settings), user


async def signin(store: PromptLibraryStore, app_settings: Settings, request: SigninRequest):
    try:
        email = normalize_email(request.email)
    except ValidationFailedError:
        raise AuthenticationError("Invalid credentials")

    user = await store.get_user_by_email(email)
    if not user or not user.password_hash:
        raise AuthenticationError("Invalid credentials")
    if not verify_password(request.password, user.password_hash):
        raise AuthenticationError("Invalid credentials")
    return create_access_token(user, app_settings), user


def generate_verification_code() -> str:
    return secrets.token_hex(3).upper()


async def send_verification_code(
    store: PromptLibraryStore, app_settings: Settings, email: str, name: Optional[str] = None
) -> UserRecord:
    email = normalize_email(email)
    code = generate_verification_code()
    expiry = utc_now() + timedelta(minutes=app_settings.VERIFICATION_CODE_TTL_MINUTES)

    user = await store.get_user_by_email(email)
    if user:
        user = await store.update_user(
            user.id,
            {"verification_code": code, "verification_expiry": expiry, "updated_at": utc_now()},
        )
    else:
        display_name = (name or "").strip() or TEMPORARY_USER_NAME
        user = await store.create_user(
            UserRecord(
                email=email,
                name=display_name,
                provider="verification_code",
                avatar=default_avatar(display_name),
                verification_code=code,
                verification_expiry=expiry,
            )
        )

    # No mail transport is configured; the code goes to the server log
    logger.info(f"Verification code for {email}: {code}")
    return user


async def verify_code(store: PromptLibraryStore, app_settings: Settings, email: str, code: str):
    try:
        email = normalize_email(email)
    except ValidationFailedError:
        raise AuthenticationError("Invalid verification request")

    user = await store.get_user_by_email(email)
    if not user or not user.verification_code or not user.verification_expiry:
        raise AuthenticationError("Invalid verification request")
    if utc_now() > as_utc(user.verification_expiry):
        raise AuthenticationError("Verification code expired")
    submitted = code.strip().upper().encode("utf-8")
    if not secrets.compare_digest(user.verification_code.encode("utf-8"), submitted):
        raise AuthenticationError("Invalid verification code")

    user = await store.update_user(
        user.id,
        {
            "verified": True,
            "verification_code": None,
            "verification_expiry": None,
            "updated_at": utc_now(),
        },
    )
    return create_access_token(user, app_settings), user


async def find_or_create_oauth_user(store: PromptLibraryStore, profile: OAuthProfile, provider: str) -> UserRecord:
    """Provider-verified identity: create the account or switch an existing one over."""
    email = normalize_email(profile.email)
    user = await store.get_user_by_email(email)
    if user:
        changes = {"provider": provider, "verified": True, "updated_at": utc_now()}
        if profile.avatar:
            changes["avatar"] = profile.avatar
        return await store.update_user(user.id, changes)

    name = profile.name or email.split("@")[0]
    return await store.create_user(
        UserRecord(
            email=email,
            name=name,
            provider=provider,
            verified=True,
            avatar=profile.avatar or default_avatar(name),
        )
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: PromptLibraryStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
) -> UserRecord:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    try:
        token_data = decode_access_token(credentials.credentials, app_settings)
    except JWTError as e:
        logger.debug(f"Rejected access token: {e}")
        raise PermissionDeniedError("Invalid or expired token")

    user = await store.get_user(token_data.sub)
    if user is None:
        raise AuthenticationError("User not found")
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    store: PromptLibraryStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
) -> Optional[UserRecord]:
    if credentials is None or not credentials.credentials:
        return None
    try:
        token_data = decode_access_token(credentials.credentials, app_settings)
    except JWTError:
        return None
    return await store.get_user(token_data.sub)
