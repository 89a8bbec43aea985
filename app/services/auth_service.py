import bcrypt
from typing import Union
from loguru import logger

from app.db.models.users import User as DBUser
from app.db.storage import MemStorage


def verify_password(plain_password: str, hashed_password: str) -> bool:
    is_valid = bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    logger.debug(f"Password verification result: {is_valid}")
    return is_valid


def get_password_hash(password: str, rounds: int = 12) -> str:
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')
    logger.debug(f"Generated password hash: {hashed[:10]}...")
    return hashed


class AuthService:

    def __init__(self, storage: MemStorage):
        self.storage = storage

    def authenticate_user(self, email: str, password: str) -> Union[DBUser, None]:
        logger.debug(f"Authenticating user: {email}")
        user = self.storage.get_user_by_email(email)

        if not user:
            logger.warning(f"Authentication failed: user {email} not found")
            return None

        if not user.hashed_password:
            logger.warning(f"Authentication failed: user {email} has no local password")
            return None

        if not verify_password(password, user.hashed_password):
            logger.warning(f"Authentication failed: invalid password for user {email}")
            return None

        logger.info(f"User authenticated: {email}")
        return user
