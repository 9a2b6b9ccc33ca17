"""IdentityService: registration, authentication, credentials, role checks and profiles."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable

import jwt

from utils.log import get_logger
from utils.parsing import new_id, normalize_email, utc_now
from utils.schema import ROLE_EMPLOYER, ROLE_JOB_SEEKER, ROLES
from utils.security import hash_password, verify_password

from ..errors import (
    DuplicateEmail,
    InvalidCredentials,
    NotFound,
    Unauthenticated,
    WeakPassword,
    WrongCurrentPassword,
    WrongRole,
)
from ..models import Employer, JobSeeker, User
from ..repository import UserRepository
from ..validation import FieldErrors, normalize_keys

log = get_logger(__name__)

JWT_ALGORITHM = "HS256"
DEFAULT_TOKEN_TTL = timedelta(days=30)
DEFAULT_MIN_PASSWORD_LENGTH = 6

_PROFILE_ALIASES = {"resumeLink": "resume", "yearsOfExperience": "experience"}


class IdentityService:
    """
    Owns users and session credentials.

    Credentials are HS256 JWTs carrying the user id ('sub'), role and expiry, so they
    can be verified without a lookup; authorize() still loads the live user record.
    """

    def __init__(
        self,
        users: UserRepository,
        jwt_secret: str,
        token_ttl: timedelta = DEFAULT_TOKEN_TTL,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
        hash_iterations: int | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not jwt_secret:
            raise ValueError("jwt_secret must not be empty")
        self._users = users
        self._secret = jwt_secret
        self._token_ttl = token_ttl
        self._min_password_length = min_password_length
        self._hash_kwargs = {"iterations": hash_iterations} if hash_iterations else {}
        self._clock = clock
        # Compared against when the email is unknown so both failure paths cost the same
        self._dummy_hash = hash_password(new_id(), **self._hash_kwargs)

    @property
    def users(self) -> UserRepository:
        return self._users

    def _hash(self, password: str) -> str:
        return hash_password(password, **self._hash_kwargs)

    # --- Registration & login ---

    def register(self, name: str, email: str, password: str, role: str, **role_fields: Any) -> User:
        """
        Create an employer or job seeker account.

        Role-specific fields: company (employer); resume, skills, experience (job seeker).
        location and phone apply to both. Fields of the other role are ignored.
        """
        data = normalize_keys(role_fields, _PROFILE_ALIASES)
        data.update({"name": name, "email": email, "role": role})

        errors = FieldErrors()
        name = errors.require_text(data, "name", "Name")
        email = normalize_email(errors.require_text(data, "email", "Email"))
        role = errors.require_choice(data, "role", "Role", ROLES)
        if password is None or password == "":
            errors.add("password", "Password is required")
        elif not isinstance(password, str):
            errors.add("password", "Password must be a string")
        elif len(password) < self._min_password_length:
            errors.add("password", f"Password must be at least {self._min_password_length} characters")

        common = {
            "id": new_id(),
            "name": name,
            "email": email,
            "location": errors.optional_text(data, "location"),
            "phone": errors.optional_text(data, "phone"),
            "created_date": self._clock(),
        }
        if role == ROLE_JOB_SEEKER:
            variant = {
                "resume": errors.optional_text(data, "resume"),
                "skills": errors.skills(data),
                "experience": errors.optional_int(data, "experience", "Experience", minimum=0),
            }
        else:
            variant = {"company": errors.optional_text(data, "company")}
        errors.raise_if_any()

        if self._users.get_by_email(email) is not None:
            raise DuplicateEmail()

        common["password_hash"] = self._hash(password)
        user_cls = Employer if role == ROLE_EMPLOYER else JobSeeker
        user = self._users.add(user_cls(**common, **variant))
        log.info("Registered %s %s", user.role, user.id)
        return user

    def authenticate(self, email: str, password: str) -> str:
        """Return a signed credential. Unknown email and wrong password fail identically."""
        if not isinstance(password, str):
            password = ""
        user = self._users.get_by_email(normalize_email(email))
        if user is None:
            verify_password(password, self._dummy_hash)
            log.warning("Rejected login for unknown email")
            raise InvalidCredentials()
        if not verify_password(password, user.password_hash):
            log.warning("Rejected login for user %s", user.id)
            raise InvalidCredentials()
        return self.issue_credential(user)

    def issue_credential(self, user: User) -> str:
        issued = self._clock()
        payload = {
            "sub": user.id,
            "role": user.role,
            "iat": int(issued.timestamp()),
            "exp": int((issued + self._token_ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def authorize(self, credential: str | None, required_role: str | None = None) -> User:
        """
        Verify a credential and return the live user.

        Raises:
            Unauthenticated: missing, malformed, tampered or expired credential, or unknown user.
            WrongRole: the user's role differs from required_role.
        """
        if not credential:
            raise Unauthenticated("Not authorized, no token")
        try:
            claims = jwt.decode(
                credential,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise Unauthenticated("Not authorized, token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise Unauthenticated("Not authorized, token failed") from exc

        user = self._users.get(claims["sub"])
        if user is None:
            raise Unauthenticated("User not found")
        if required_role is not None and user.role != required_role:
            raise WrongRole(f"Access denied. {required_role.replace('_', ' ').title()}s only.")
        return user

    # --- Account maintenance ---

    def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        if not isinstance(new_password, str) or len(new_password) < self._min_password_length:
            raise WeakPassword.for_field(
                "newPassword", f"New password must be at least {self._min_password_length} characters"
            )
        user = self.get_profile(user_id)
        if not verify_password(current_password or "", user.password_hash):
            raise WrongCurrentPassword()
        self._users.update(user.id, {"password_hash": self._hash(new_password)})
        log.info("Password changed for user %s", user.id)

    def get_profile(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def update_profile(self, user: User, fields: dict[str, Any]) -> User:
        """
        Update the caller's own profile. Only the fields of the user's variant
        (see User.PROFILE_FIELDS) are applied; email, role and password are ignored.
        """
        data = normalize_keys(fields, _PROFILE_ALIASES)
        errors = FieldErrors()
        updates: dict[str, Any] = {}
        for field_name in user.PROFILE_FIELDS:
            if field_name not in data:
                continue
            if field_name == "name":
                updates["name"] = errors.require_text(data, "name", "Name")
            elif field_name == "skills":
                updates["skills"] = errors.skills(data)
            elif field_name == "experience":
                updates["experience"] = errors.optional_int(data, "experience", "Experience", minimum=0)
            else:
                updates[field_name] = errors.optional_text(data, field_name)
        errors.raise_if_any()

        if updates:
            self._users.update(user.id, updates)
        return self.get_profile(user.id)
