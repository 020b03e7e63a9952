import bcrypt

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode('utf-8')) > MAX_PASSWORD_BYTES


def hash_password(password: str, rounds: int = 10) -> str:
    if password_too_long(password):
        raise ValueError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds)).decode('utf-8')


def verify_password(password: str, hashed: str) -> bool:
    if password_too_long(password):
        return False
    return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))
