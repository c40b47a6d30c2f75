'''
Login against the single shared voting password.
'''
import secrets
from fastapi import HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from .security import JWTHandler
from ..common.config import settings
from ..models import token as token_models
from ..common.logger import log

class LoginService:
    """
    Service for handling voter login.
    Any name is accepted as long as the shared password matches.
    """

    def _validate_username(self, username: str | None) -> str:
        username = (username or "").strip()
        if not username:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username cannot be empty"
            )
        if len(username) > settings.MAX_USERNAME_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Username too long"
            )
        return username

    async def login_user(self, form_data: OAuth2PasswordRequestForm) -> token_models.Token:
        log.info(f"Attempting login for user: {form_data.username}")

        username = self._validate_username(form_data.username)

        password_ok = secrets.compare_digest(
            (form_data.password or "").encode("utf-8"),
            settings.VOTING_PASSWORD.encode("utf-8")
        )
        if not password_ok:
            log.warning(f"Failed login attempt for username: {username}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid password",
                headers={"WWW-Authenticate": "Bearer"},
            )

        access_token = JWTHandler.create_access_token(subject=username)
        log.info(f"Login successful for user: {username}")

        return token_models.Token(access_token=access_token, token_type="bearer", username=username)
