# backend/utils/hashing.py
import bcrypt

# bcrypt only reads the first 72 bytes of a password
_MAX_BYTES = 72

def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_BYTES]

def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")

def verify_password(plain_password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(plain_password), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False
