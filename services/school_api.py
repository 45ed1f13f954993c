"""
services/school_api.py

Async client for the marks workflow endpoints.

The caller owns a TokenSession and hands it to the client explicitly; the
client only reads and rotates it. When several requests fail with 401 at the
same time, exactly one refresh call is made and every waiter reuses its
result.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from config.settings import settings

logger = logging.getLogger(__name__)


class SchoolApiError(Exception):
    """Backend call failed (transport error or non 2xx response)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class TokenSession:
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return bool(self.access_token)

    def clear(self):
        self.access_token = None
        self.refresh_token = None


def _server_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        if isinstance(error, str):
            return error
        if body.get("message"):
            return body["message"]
        if body.get("detail"):
            return str(body["detail"])
    return f"HTTP {response.status_code}"


class SchoolApiClient:
    """Marks / GPA / roster endpoints of the school backend"""

    def __init__(
        self,
        session: TokenSession,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session
        self._http = httpx.AsyncClient(
            base_url=(base_url or settings.API_BASE_URL).rstrip("/"),
            timeout=timeout or settings.API_TIMEOUT,
            transport=transport,
        )
        self._refresh_task: Optional[asyncio.Task] = None

    async def aclose(self):
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    # ===============================================================
    # transport
    # ===============================================================

    def _headers(self, token: Optional[str]) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def _send(self, method: str, path: str, token: Optional[str], **kwargs) -> httpx.Response:
        try:
            return await self._http.request(method, path, headers=self._headers(token), **kwargs)
        except httpx.TimeoutException:
            raise SchoolApiError("Server did not respond in time")
        except httpx.HTTPError as e:
            raise SchoolApiError(f"Could not reach the server: {e}")

    async def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        token = self.session.access_token
        response = await self._send(method, path, token, **kwargs)

        if response.status_code == 401 and self.session.refresh_token:
            await self.refresh_tokens(stale_access_token=token)
            response = await self._send(method, path, self.session.access_token, **kwargs)

        if response.is_error:
            message = _server_message(response)
            logger.warning("%s %s failed: %s %s", method, path, response.status_code, message)
            raise SchoolApiError(message, response.status_code)
        return response.json()

    # ===============================================================
    # auth
    # ===============================================================

    async def login(self, username: str, password: str) -> TokenSession:
        response = await self._send(
            "POST", "/auth/teacher/login", None, json={"username": username, "password": password}
        )
        if response.is_error:
            raise SchoolApiError(_server_message(response), response.status_code)
        body = response.json()
        self.session.access_token = body["access_token"]
        self.session.refresh_token = body["refresh_token"]
        return self.session

    async def refresh_tokens(self, stale_access_token: Optional[str] = None):
        """
        Rotate the token pair once for every concurrent caller.
        A caller whose token was already replaced returns without a new call.
        """
        if stale_access_token is not None and self.session.access_token != stale_access_token:
            return

        if self._refresh_task is None:
            self._refresh_task = asyncio.ensure_future(self._do_refresh())
        task = self._refresh_task
        try:
            await asyncio.shield(task)
        finally:
            if self._refresh_task is task and task.done():
                self._refresh_task = None

    async def _do_refresh(self):
        response = await self._send(
            "POST", "/auth/teacher/refresh", None, json={"refresh_token": self.session.refresh_token}
        )
        if response.is_error:
            self.session.clear()
            raise SchoolApiError("Session expired, please sign in again", response.status_code)
        body = response.json()
        self.session.access_token = body["access_token"]
        self.session.refresh_token = body["refresh_token"]
        logger.debug("Token pair rotated")

    async def get_teacher_profile(self) -> Dict[str, Any]:
        return (await self._request("GET", "/auth/teacher/profile")).get("data") or {}

    # ===============================================================
    # reference data
    # ===============================================================

    async def get_subjects(self) -> List[Dict[str, Any]]:
        return (await self._request("GET", "/sub/getSubjects")).get("data") or []

    async def get_exams(self) -> List[Dict[str, Any]]:
        return (await self._request("GET", "/exams/getExams")).get("data") or []

    async def get_students_by_class(self, year: int, level: str) -> List[Dict[str, Any]]:
        return (await self._request("GET", f"/students/getStudentsByClass/{year}/{level}")).get("data") or []

    # ===============================================================
    # marks / GPA
    # ===============================================================

    async def get_class_marks(self, level: str, year: int, exam: str) -> List[Dict[str, Any]]:
        return (await self._request("GET", f"/marks/getClassMarks/{level}/{year}/{exam}")).get("data") or []

    async def get_gpa(self, year: int) -> List[Dict[str, Any]]:
        return (await self._request("GET", f"/marks/getGPA/{year}")).get("data") or []

    async def add_marks(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/marks/addMarks", json=payload)

    async def add_gpa(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/marks/addGPA", json=payload)
