from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.codec import from_json, to_json
from ..core.constants import SESSIONS_KEY, USERS_KEY
from ..storage.store import KeyValueStore
from .model import SessionToken, User


class UserRepository(Protocol):
    """Repository interface for login accounts and their session tokens.

    Services depend on this interface, not on a concrete store.
    """

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def save(self, user: User) -> User:
        raise NotImplementedError

    def get_token(self, token: str) -> Optional[SessionToken]:
        raise NotImplementedError

    def save_token(self, token: SessionToken) -> None:
        raise NotImplementedError

    def delete_token(self, token: str) -> bool:
        raise NotImplementedError


class StoreUserRepository:
    """Users under `hrms_users`, tokens under `hrms_sessions`."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def _users(self) -> list[User]:
        return [from_json(User, item) for item in self._store.get(USERS_KEY, [])]

    def _tokens(self) -> list[SessionToken]:
        return [from_json(SessionToken, item) for item in self._store.get(SESSIONS_KEY, [])]

    def has_users(self) -> bool:
        return self._store.get(USERS_KEY) is not None

    def list_all(self) -> list[User]:
        return self._users()

    def get_by_id(self, user_id: str) -> Optional[User]:
        for u in self._users():
            if u.id == user_id:
                return u
        return None

    def get_by_email(self, email: str) -> Optional[User]:
        needle = (email or "").strip().lower()
        for u in self._users():
            if u.email.lower() == needle:
                return u
        return None

    def save(self, user: User) -> User:
        users = [u for u in self._users() if u.id != user.id]
        users.append(user)
        self._store.set(USERS_KEY, to_json(users))
        return user

    def save_all(self, users: Sequence[User]) -> None:
        self._store.set(USERS_KEY, to_json(list(users)))

    def get_token(self, token: str) -> Optional[SessionToken]:
        for t in self._tokens():
            if t.token == token:
                return t
        return None

    def save_token(self, token: SessionToken) -> None:
        tokens = [t for t in self._tokens() if t.token != token.token]
        tokens.append(token)
        self._store.set(SESSIONS_KEY, to_json(tokens))

    def delete_token(self, token: str) -> bool:
        tokens = self._tokens()
        kept = [t for t in tokens if t.token != token]
        if len(kept) == len(tokens):
            return False
        self._store.set(SESSIONS_KEY, to_json(kept))
        return True
