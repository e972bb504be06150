from vicash.auth.jwt import create_access_token, verify_token
from vicash.auth.password import hash_password, verify_password
from vicash.auth.dependencies import get_current_user

__all__ = [
    "create_access_token",
    "verify_token",
    "hash_password",
    "verify_password",
    "get_current_user",
]
