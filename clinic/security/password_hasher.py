# clinic/security/password_hasher.py
import bcrypt


class PasswordHasher:
    """bcrypt hashing. Inputs longer than 72 bytes are rejected upstream."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(
                password.encode("utf-8"), password_hash.encode("utf-8")
            )
        except ValueError:
            # Malformed stored hash
            return False


__all__ = ["PasswordHasher"]
