"""
DocVault User Directory — read-only lookup of user display names.

The catalog never owns users. A directory is injected into the store (and
may be swapped per call); the store treats it as advisory and re-reads it
on every projection, so a directory that changes between calls is fine.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel

logger = logging.getLogger("docvault.security.directory")


class User(BaseModel):
    id: str
    name: str


class UserDirectory:
    """Interface: resolve user ids to ``User`` records."""

    def get_user(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_users(self) -> List[User]:
        raise NotImplementedError

    def __contains__(self, user_id: object) -> bool:
        return isinstance(user_id, str) and self.get_user(user_id) is not None


class StaticUserDirectory(UserDirectory):
    """In-memory directory, listed in insertion order."""

    def __init__(self, users: Optional[Iterable[Union[User, Mapping[str, Any]]]] = None):
        self._users: Dict[str, User] = {}
        for user in users or []:
            self.add_user(user)

    @classmethod
    def from_config(cls, config: Optional[Any] = None) -> "StaticUserDirectory":
        """Build the directory from the ``users`` section of docvault.yaml."""
        if config is None:
            from docvault.engine.config import get_config
            config = get_config()
        users = [User(id=u.id, name=u.name) for u in config.users]
        logger.debug(f"Loaded {len(users)} user(s) from config")
        return cls(users)

    def add_user(self, user: Union[User, Mapping[str, Any]]) -> User:
        if not isinstance(user, User):
            user = User(**user)
        self._users[user.id] = user
        return user

    def remove_user(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None

    def get_user(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def list_users(self) -> List[User]:
        return list(self._users.values())

    def __len__(self) -> int:
        return len(self._users)

    def __repr__(self) -> str:
        return f"<StaticUserDirectory users={len(self._users)}>"
