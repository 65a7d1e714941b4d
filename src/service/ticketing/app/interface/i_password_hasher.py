from abc import ABC, abstractmethod

from pydantic import SecretStr


class IPasswordHasher(ABC):
    """One-way hashing of login passwords; plain text only ever travels as SecretStr"""

    @abstractmethod
    def hash_password(self, *, plain_password: SecretStr) -> str: ...

    @abstractmethod
    def verify_password(self, *, plain_password: SecretStr, hashed_password: str) -> bool:
        """False for a wrong password and for a hash this hasher cannot read"""
