"""
Client-side state for the shared lists API.

`IdentityStore` remembers who this client is between runs (the equivalent of a
browser's local storage) and `TodoClient` sends that identity with every call.
"""
import json
import logging
import random
import string
import time
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

IDENTITY_HEADER = "X-User-Id"
MISSING_IDENTITY_DETAIL = "User ID required"


class TodoApiError(Exception):
    def __init__(self, status_code: int, detail: str):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


def new_identity() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"user-{int(time.time() * 1000)}-{suffix}"


class IdentityStore:
    """Persists the identity (and an optional signed token) as a small JSON file."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else None
        self._data: dict[str, str] = {}
        if self.path and self.path.exists():
            try:
                self._data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError:
                logger.warning("Ignoring unreadable identity file %s", self.path)
                self._data = {}

    @property
    def user_id(self) -> str | None:
        value = self._data.get("userId")
        if value in (None, "", "undefined", "null"):
            return None
        return value

    @property
    def token(self) -> str | None:
        return self._data.get("accessToken")

    def has_identity(self) -> bool:
        return self.user_id is not None

    def set(self, user_id: str, token: str | None = None):
        self._data = {"userId": user_id}
        if token:
            self._data["accessToken"] = token
        self._save()

    def get_or_create(self) -> str:
        if not self.has_identity():
            self.set(new_identity())
        return self.user_id

    def reset(self) -> str:
        self._data = {}
        return self.get_or_create()

    def _save(self):
        if self.path:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(self._data), encoding="utf-8")


class TodoClient:
    def __init__(self, http: httpx.AsyncClient, identity: IdentityStore | None = None):
        self.http = http
        self.identity = identity or IdentityStore()

    def _headers(self, with_identity: bool = True) -> dict[str, str]:
        if not with_identity:
            return {}
        headers = {IDENTITY_HEADER: self.identity.get_or_create()}
        if self.identity.token:
            headers["Authorization"] = f"Bearer {self.identity.token}"
        return headers

    async def _send(self, method: str, url: str, *, with_identity: bool = True, **kwargs) -> httpx.Response:
        response = await self.http.request(method, url, headers=self._headers(with_identity), **kwargs)
        if response.is_error:
            raise TodoApiError(response.status_code, _detail(response))
        return response

    async def _call(self, method: str, url: str, **kwargs):
        """Send with identity; regenerate it once if the server says it is missing."""
        try:
            response = await self._send(method, url, **kwargs)
        except TodoApiError as e:
            if e.status_code != 401 or e.detail != MISSING_IDENTITY_DETAIL:
                raise
            logger.info("Server rejected the stored identity, generating a new one")
            self.identity.reset()
            response = await self._send(method, url, **kwargs)
        return response.json()

    # ── Auth ──────────────────────────────────────────────

    async def register(self, username: str, password: str) -> dict:
        response = await self._send(
            "POST", "/auth/register", with_identity=False,
            json={"username": username, "password": password},
        )
        return self._remember_account(response.json())

    async def login(self, username: str, password: str) -> dict:
        response = await self._send(
            "POST", "/auth/login", with_identity=False,
            json={"username": username, "password": password},
        )
        return self._remember_account(response.json())

    def _remember_account(self, user: dict) -> dict:
        self.identity.set(user["id"], user.get("accessToken"))
        return user

    # ── Lists ─────────────────────────────────────────────

    async def get_all_lists(self) -> dict:
        return await self._call("GET", "/todos")

    async def create_list(self, title: str) -> dict:
        return await self._call("POST", "/todos", json={"title": title})

    async def get_list(self, list_id: str) -> dict:
        # Public access first so shared links work without any stored identity
        try:
            response = await self._send("GET", f"/todos/{list_id}", with_identity=False)
            return response.json()
        except TodoApiError as e:
            if e.status_code != 403:
                raise
        return await self._call("GET", f"/todos/{list_id}")

    async def rename_list(self, list_id: str, title: str) -> dict:
        return await self._call("PUT", f"/todos/{list_id}", json={"title": title})

    async def delete_list(self, list_id: str) -> dict:
        return await self._call("DELETE", f"/todos/{list_id}")

    async def add_user(self, list_id: str, username: str | None = None) -> dict:
        # Guests join without an identity and adopt the one the server mints.
        # Registered accounts may omit the username; guests must name themselves.
        response = await self._send(
            "POST", f"/todos/{list_id}/users",
            with_identity=self.identity.has_identity(),
            json={"username": username} if username else {},
        )
        data = response.json()
        if data.get("generatedUserId"):
            self.identity.set(data["generatedUserId"], data.get("accessToken"))
        return data

    async def get_users(self, list_id: str) -> dict:
        return await self._call("GET", f"/todos/{list_id}/users")

    # ── Tasks ─────────────────────────────────────────────

    async def add_tasks(self, list_id: str, tasks: list[str], username: str | None = None) -> dict:
        return await self._call("POST", f"/todos/{list_id}/tasks", json={"tasks": tasks, "username": username})

    async def update_task(self, list_id: str, task_id: str, **updates) -> dict:
        return await self._call("PUT", f"/todos/{list_id}/tasks/{task_id}", json=updates)

    async def delete_task(self, list_id: str, task_id: str) -> dict:
        return await self._call("DELETE", f"/todos/{list_id}/tasks/{task_id}")


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text
    if isinstance(body, dict):
        return str(body.get("detail", body))
    return str(body)
