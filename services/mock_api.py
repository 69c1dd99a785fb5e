"""
In-process stand-in for the HTTP API.

Requests are matched against a route table and dispatched to the services. Latency and
random write failures are simulated here and only here; the services themselves are
deterministic. Every request resolves to an ApiResponse, never to an exception.
"""
import asyncio
import logging
import random
import re
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl, urlsplit

from services import assessment_service, candidate_service, job_service
from services.config import Settings
from services.errors import (
    AssessmentValidationError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from services.search_service import assessment_result, candidate_result, job_result
from services.store import DataStore

logger = logging.getLogger(__name__)


class TransientNetworkError(Exception):
    """Simulated network failure. Raised before the store is touched."""


@dataclass
class ApiResponse:
    status: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


Handler = Callable[[Dict[str, str], Dict[str, str], Any], Awaitable[ApiResponse]]


def _int_param(query: Dict[str, str], name: str, default: int) -> int:
    raw = query.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer", {name: "Must be an integer"}) from None


def _require_object(body: Any) -> Dict[str, Any]:
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", {"body": "Must be an object"})
    return body


class MockApi:
    def __init__(
        self,
        store: DataStore,
        settings: Optional[Settings] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.store = store
        self.settings = settings or Settings()
        self._rng = rng or random.Random()
        self._sleep = sleep
        self._initialized = False
        self._search_cache: Dict[str, Tuple[float, List[Dict[str, Any]]]] = {}
        # (method, pattern, handler, is_write)
        self._routes: List[Tuple[str, re.Pattern, Handler, bool]] = [
            ("GET", re.compile(r"^/api/jobs$"), self._list_jobs, False),
            ("POST", re.compile(r"^/api/jobs$"), self._create_job, True),
            ("PATCH", re.compile(r"^/api/jobs/(?P<id>[^/]+)/reorder$"), self._reorder_job, True),
            ("PATCH", re.compile(r"^/api/jobs/(?P<id>[^/]+)$"), self._update_job, True),
            ("GET", re.compile(r"^/api/candidates$"), self._list_candidates, False),
            ("POST", re.compile(r"^/api/candidates$"), self._create_candidate, True),
            ("PATCH", re.compile(r"^/api/candidates/(?P<id>[^/]+)$"), self._update_candidate, True),
            ("GET", re.compile(r"^/api/candidates/(?P<id>[^/]+)/timeline$"), self._timeline, False),
            ("GET", re.compile(r"^/api/assessments/(?P<job_id>[^/]+)$"), self._get_assessment, False),
            ("PUT", re.compile(r"^/api/assessments/(?P<job_id>[^/]+)$"), self._save_assessment, True),
            ("POST", re.compile(r"^/api/assessments/(?P<job_id>[^/]+)/submit$"), self._submit, True),
            ("GET", re.compile(r"^/api/search$"), self._search, False),
            ("GET", re.compile(r"^/api/export$"), self._export, False),
            ("POST", re.compile(r"^/api/reset$"), self._reset, True),
        ]

    async def request(
        self,
        method: str,
        path: str,
        query: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> ApiResponse:
        method = method.upper()
        parts = urlsplit(path)
        params_query = dict(parse_qsl(parts.query))
        params_query.update({k: str(v) for k, v in (query or {}).items() if v is not None})
        path = parts.path.rstrip("/") or "/"

        if method == "DELETE" and path.startswith("/api/"):
            return ApiResponse(501, {"error": "Delete not implemented"})

        route = self._match(method, path)
        if route is None:
            return ApiResponse(404, {"error": "Endpoint not found"})
        handler, params, is_write = route

        try:
            if not self._initialized:
                self.store.init()
                self._initialized = True
            if handler == self._reorder_job and self._rng.random() < self.settings.reorder_error_rate:
                return ApiResponse(500, {"error": "Reorder failed"})
            await self._simulate_network(is_write)
            response = await handler(params, params_query, body)
            if is_write and response.ok:
                self._search_cache.clear()
            return response
        except TransientNetworkError as e:
            logger.warning("Simulated network failure on %s %s", method, path)
            return ApiResponse(503, {"error": str(e)})
        except AssessmentValidationError as e:
            return ApiResponse(400, {
                "error": str(e),
                "fields": e.fields,
                "issues": [{"question_id": i.question_id, "code": i.code, "message": i.message} for i in e.issues],
            })
        except ValidationError as e:
            return ApiResponse(400, {"error": str(e), "fields": e.fields})
        except NotFoundError as e:
            return ApiResponse(404, {"error": str(e)})
        except StorageError as e:
            logger.error(f"Storage error on {method} {path}: {e}")
            return ApiResponse(500, {"error": "Storage error"})
        except Exception:
            logger.exception("API Error on %s %s", method, path)
            return ApiResponse(500, {"error": "Internal server error"})

    def _match(self, method: str, path: str) -> Optional[Tuple[Handler, Dict[str, str], bool]]:
        for route_method, pattern, handler, is_write in self._routes:
            if route_method != method:
                continue
            found = pattern.match(path)
            if found:
                return handler, found.groupdict(), is_write
        return None

    async def _simulate_network(self, is_write: bool) -> None:
        low, high = self.settings.latency_min_ms, self.settings.latency_max_ms
        if high > 0:
            await self._sleep(self._rng.uniform(low, high) / 1000.0)
        if is_write and self._rng.random() < self.settings.write_error_rate:
            raise TransientNetworkError("Network error")

    # Jobs

    async def _list_jobs(self, params, query, body) -> ApiResponse:
        page = job_service.list_jobs(
            self.store,
            search=query.get("search"),
            status=query.get("status"),
            sort=query.get("sort"),
            page=_int_param(query, "page", 1),
            page_size=_int_param(query, "page_size", job_service.JOBS_PAGE_SIZE),
        )
        result = page.to_dict()
        result["jobs"] = result.pop("items")
        return ApiResponse(200, result)

    async def _create_job(self, params, query, body) -> ApiResponse:
        return ApiResponse(201, job_service.create_job(self.store, _require_object(body)))

    async def _update_job(self, params, query, body) -> ApiResponse:
        return ApiResponse(200, job_service.update_job(self.store, params["id"], _require_object(body)))

    async def _reorder_job(self, params, query, body) -> ApiResponse:
        data = _require_object(body)
        result = job_service.reorder_job(
            self.store, params["id"], data.get("from_order"), data.get("to_order")
        )
        return ApiResponse(200, result)

    # Candidates

    async def _list_candidates(self, params, query, body) -> ApiResponse:
        page = candidate_service.list_candidates(
            self.store,
            search=query.get("search"),
            stage=query.get("stage"),
            job_id=query.get("job_id"),
            page=_int_param(query, "page", 1),
            page_size=_int_param(query, "page_size", candidate_service.CANDIDATES_PAGE_SIZE),
        )
        result = page.to_dict()
        result["candidates"] = result.pop("items")
        return ApiResponse(200, result)

    async def _create_candidate(self, params, query, body) -> ApiResponse:
        return ApiResponse(201, candidate_service.create_candidate(self.store, _require_object(body)))

    async def _update_candidate(self, params, query, body) -> ApiResponse:
        updated = candidate_service.update_candidate(self.store, params["id"], _require_object(body))
        return ApiResponse(200, updated)

    async def _timeline(self, params, query, body) -> ApiResponse:
        return ApiResponse(200, {"timeline": candidate_service.get_timeline(self.store, params["id"])})

    # Assessments

    async def _get_assessment(self, params, query, body) -> ApiResponse:
        return ApiResponse(200, {"assessment": assessment_service.get_assessment(self.store, params["job_id"])})

    async def _save_assessment(self, params, query, body) -> ApiResponse:
        saved = assessment_service.save_assessment(self.store, params["job_id"], _require_object(body))
        return ApiResponse(200, saved)

    async def _submit(self, params, query, body) -> ApiResponse:
        data = _require_object(body)
        saved = assessment_service.submit_response(
            self.store, params["job_id"], data.get("candidate_id"), data.get("responses") or {}
        )
        return ApiResponse(201, {"submission_id": saved["id"]})

    async def _lookup_assessment(self, job_id: str) -> Optional[Dict[str, Any]]:
        # Yield so lookups for many jobs interleave like separate requests
        await asyncio.sleep(0)
        return assessment_service.get_assessment(self.store, job_id)

    async def fetch_assessments(self, job_ids: List[str]) -> List[Optional[Dict[str, Any]]]:
        """Independent lookups gathered concurrently; results follow the order of job_ids."""
        return list(await asyncio.gather(*(self._lookup_assessment(jid) for jid in job_ids)))

    # Search and admin

    def _evict_expired(self, now: float) -> None:
        ttl = self.settings.search_cache_ttl
        for key in [k for k, (stored_at, _) in self._search_cache.items() if now - stored_at >= ttl]:
            del self._search_cache[key]

    async def _search(self, params, query, body) -> ApiResponse:
        text = (query.get("q") or "").strip()
        if not text:
            return ApiResponse(200, {"results": []})

        cache_key = text.lower()
        self._evict_expired(time.monotonic())
        cached = self._search_cache.get(cache_key)
        if cached:
            return ApiResponse(200, {"results": cached[1]})

        jobs = job_service.list_jobs(self.store, search=text, page=1, page_size=10)
        candidates = candidate_service.list_candidates(self.store, search=text, page=1, page_size=10)

        all_jobs = job_service.list_jobs(self.store, page=1, page_size=100).items
        assessments = await self.fetch_assessments([j["id"] for j in all_jobs])
        assessment_hits = [
            hit for hit in (assessment_result(job, a, text) for job, a in zip(all_jobs, assessments)) if hit
        ]

        results = (
            [job_result(j) for j in jobs.items]
            + [candidate_result(c) for c in candidates.items]
            + assessment_hits
        )
        self._search_cache[cache_key] = (time.monotonic(), results)
        return ApiResponse(200, {"results": results})

    async def _export(self, params, query, body) -> ApiResponse:
        return ApiResponse(200, self.store.export_all())

    async def _reset(self, params, query, body) -> ApiResponse:
        self.store.reset_all()
        return ApiResponse(200, {"success": True})
