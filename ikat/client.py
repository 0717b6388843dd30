"""ikat client logic: single requests, replace and batch fan-out."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger
from tqdm import tqdm

from ikat._http.requests_adapter import RequestsTransport
from ikat.config import IkatConfig
from ikat.exceptions import (
    IkatError,
    IkatOperationError,
    Operation,
    UnsupportedOperationError,
)
from ikat.keys import extract_key
from ikat.models import DeleteResult, UploadFile, UploadResult

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence
    from types import TracebackType

    from typing_extensions import Self

    from ikat._http.ports import FormFile, HttpResponse, HttpTransport
    from ikat.profiles import ApiProfile

_T = TypeVar("_T")
_R = TypeVar("_R")

FileLike = UploadFile | Path | str
"""An ``UploadFile`` or a path to a local file."""


def _error_detail(resp: HttpResponse) -> str:
    """Return the remote ``message`` field, or a generic description."""
    body = resp.body
    if isinstance(body, dict):
        message = body.get("message")
        if message:
            return str(message)
    return f"Request failed with status code {resp.status_code}"


def _as_upload_file(file: FileLike) -> UploadFile:
    """Read *file* from disk unless it is already an ``UploadFile``."""
    if isinstance(file, UploadFile):
        return file
    return UploadFile.from_path(file)


def _file_label(file: FileLike) -> str:
    """Filename reported in batch upload results."""
    if isinstance(file, UploadFile):
        return file.name
    return Path(file).name


class IkatClient:
    """Client for the ikat file-hosting API.

    One class serves both API revisions; the revision is chosen by
    ``IkatConfig.api_version``.  Can be used as a context manager to keep
    one HTTP session open across calls::

        with IkatClient(cfg) as client:
            client.upload("images", Path("photo.jpg"))
            client.list_files("images")

    Without the context manager, each call opens and closes its own
    session.
    """

    def __init__(
        self,
        cfg: IkatConfig | None = None,
        *,
        transport: HttpTransport | None = None,
        transport_factory: Callable[[], HttpTransport] | None = None,
    ) -> None:
        """Store configuration and an optional transport for DI.

        When *cfg* is ``None``, configuration is loaded from environment
        variables and the config file via :meth:`IkatConfig.load`.

        When *transport* is provided it is used for every call and never
        closed by the client.  Otherwise transports are created with
        *transport_factory* (``RequestsTransport`` by default).
        """
        self._cfg = (cfg or IkatConfig.load()).require_api_key()
        self._transport = transport
        self._transport_factory: Callable[[], HttpTransport] = (
            transport_factory or RequestsTransport
        )
        # Persistent transport opened by __enter__, closed by __exit__.
        # Only the thread that opened it uses it.
        self._persistent_transport: HttpTransport | None = None
        self._persistent_owner: int | None = None

    # ------------------------------------------------------------------
    # Context manager (optional session reuse)
    # ------------------------------------------------------------------

    def __enter__(self) -> Self:
        """Open a persistent HTTP session for the lifetime of this block."""
        if self._transport is None:
            self._persistent_transport = self._transport_factory()
            self._persistent_owner = threading.get_ident()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the persistent HTTP session."""
        if self._persistent_transport is not None:
            self._persistent_transport.close()
            self._persistent_transport = None
            self._persistent_owner = None

    @property
    def config(self) -> IkatConfig:
        """Immutable client configuration."""
        return self._cfg

    @property
    def profile(self) -> ApiProfile:
        """Request conventions of the configured API revision."""
        return self._cfg.profile

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    @contextmanager
    def _http(self) -> Iterator[HttpTransport]:
        """Yield the injected/persistent transport or a short-lived one.

        Batch worker threads never share the persistent session; each of
        their calls gets its own short-lived transport.
        """
        http = self._transport
        if http is None and self._persistent_owner == threading.get_ident():
            http = self._persistent_transport
        if http is not None:
            yield http
            return
        http = self._transport_factory()
        try:
            yield http
        finally:
            http.close()

    def _headers(self) -> dict[str, str]:
        headers = {"x-api-key": self._cfg.api_key}
        if self._cfg.origin:
            headers["Origin"] = self._cfg.origin
        return headers

    def _call(
        self,
        operation: Operation,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
        files: dict[str, FormFile] | None = None,
    ) -> Any:  # noqa: ANN401
        """Perform one request and return the decoded body.

        Raises ``IkatOperationError`` tagged with *operation* on a
        transport failure or a non-2xx response.
        """
        url = f"{self._cfg.resolved_base_url}{path}"
        with self._http() as http:
            try:
                resp = http.request(
                    method,
                    url,
                    headers=self._headers(),
                    json=json,
                    data=data,
                    files=files,
                    timeout=self._cfg.resolved_timeout,
                )
            except Exception as e:  # noqa: BLE001
                # Custom transports may raise anything; callers only see IkatError.
                raise IkatOperationError(operation, str(e), cause=e) from e
        if not resp.ok:
            raise IkatOperationError(
                operation, _error_detail(resp), status_code=resp.status_code
            )
        logger.debug(f"{operation.value}: {method} {path} -> HTTP {resp.status_code}")
        logger.trace(f"{operation.value} response body: {resp.body}")
        return resp.body

    # ------------------------------------------------------------------
    # Single-item operations
    # ------------------------------------------------------------------

    def upload(
        self,
        bucket: str,
        file: FileLike,
        *,
        allow_public_access: bool = True,
    ) -> Any:  # noqa: ANN401
        """Upload *file* to *bucket* and return the service response.

        The legacy revision answers with a single ``url``; the current one
        with a ``urls`` map (``original`` plus WebP ``large``/``small``/
        ``thumb`` variants for images).  *allow_public_access* is only
        sent to the current revision.
        """
        upload_file = _as_upload_file(file)
        data: dict[str, str] | None = None
        if self.profile.sends_access_flag:
            data = {"allowPublicAccess": str(allow_public_access).lower()}
        elif not allow_public_access:
            logger.warning(
                f"API {self.profile.version.value} has no private uploads; "
                f"{upload_file.name!r} will be public"
            )
        files: dict[str, FormFile] = {
            "file": (upload_file.name, upload_file.content, upload_file.content_type),
        }
        return self._call(
            Operation.UPLOAD,
            self.profile.upload_method,
            f"/upload/{bucket}",
            data=data,
            files=files,
        )

    def list_files(self, bucket: str) -> Any:  # noqa: ANN401
        """List the files stored in *bucket*."""
        return self._call(Operation.LIST, "GET", f"/files/{bucket}")

    def remove(self, bucket: str, key: str) -> Any:  # noqa: ANN401
        """Delete one file by key.

        The current revision also accepts a full file URL and deletes the
        generated image variants along with the original.
        """
        if self.profile.normalizes_remove_key:
            key = extract_key(key)
        return self._call(
            Operation.REMOVE,
            "POST",
            "/files/delete",
            json={"bucket": bucket, "key": key},
        )

    def delete_bucket(self, bucket: str) -> Any:  # noqa: ANN401
        """Delete *bucket* and everything in it (current revision only)."""
        if not self.profile.supports("bucket_deletion"):
            raise UnsupportedOperationError(
                f"delete_bucket is not available in API "
                f"{self.profile.version.value}; remove files one by one instead"
            )
        return self._call(
            Operation.DELETE_BUCKET,
            "POST",
            "/files/delete-bucket",
            json={"bucket": bucket},
        )

    # ------------------------------------------------------------------
    # Compose operations
    # ------------------------------------------------------------------

    def replace(
        self,
        bucket: str,
        file: FileLike,
        old_key: str | None = None,
        *,
        allow_public_access: bool = True,
    ) -> Any:  # noqa: ANN401
        """Upload *file*, first trying to delete *old_key* (key or URL).

        The deletion is best-effort: its failure is logged and the upload
        still happens.  Returns the upload response.
        """
        if old_key:
            self._discard_old_file(bucket, extract_key(old_key))
        return self.upload(bucket, file, allow_public_access=allow_public_access)

    def _discard_old_file(self, bucket: str, key: str) -> None:
        """Best-effort cleanup: delete *key*, logging instead of raising."""
        try:
            self.remove(bucket, key)
        except IkatError as e:
            logger.warning(f"[replace] Failed to delete old file {key!r}: {e}")
            return
        logger.debug(f"[replace] Deleted old file {key!r}")

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    def delete_multiple(
        self,
        bucket: str,
        keys: Sequence[str],
        *,
        max_workers: int | None = None,
        progress: bool = False,
    ) -> list[DeleteResult]:
        """Delete several files by key or URL.

        Returns one ``DeleteResult`` per input, in input order.  A failed
        deletion is reported in its entry and does not stop the others.
        """

        def delete_one(raw_key: str) -> DeleteResult:
            key = extract_key(raw_key)
            try:
                self.remove(bucket, key)
            except IkatError as e:
                return DeleteResult(key=key, success=False, error=str(e))
            return DeleteResult(key=key, success=True)

        results = self._fan_out(
            delete_one, keys, max_workers=max_workers, desc="Deleting", progress=progress
        )
        self._log_batch_summary("delete_multiple", bucket, results)
        return results

    def upload_multiple(
        self,
        bucket: str,
        files: Sequence[FileLike],
        *,
        allow_public_access: bool = True,
        max_workers: int | None = None,
        progress: bool = False,
    ) -> list[UploadResult]:
        """Upload several files to *bucket*.

        Returns one ``UploadResult`` per input, in input order, carrying
        the service response on success or the error message on failure.
        """

        def upload_one(file: FileLike) -> UploadResult:
            name = _file_label(file)
            try:
                data = self.upload(bucket, file, allow_public_access=allow_public_access)
            except (IkatError, OSError) as e:
                return UploadResult(file=name, success=False, error=str(e))
            return UploadResult(file=name, success=True, data=data)

        results = self._fan_out(
            upload_one, files, max_workers=max_workers, desc="Uploading", progress=progress
        )
        self._log_batch_summary("upload_multiple", bucket, results)
        return results

    @staticmethod
    def _fan_out(
        func: Callable[[_T], _R],
        items: Sequence[_T],
        *,
        max_workers: int | None,
        desc: str,
        progress: bool,
    ) -> list[_R]:
        """Apply *func* to every item, keeping input order.

        Runs sequentially unless *max_workers* > 1, in which case items go
        through a bounded thread pool.
        """
        items = list(items)
        if not max_workers or max_workers <= 1 or len(items) <= 1:
            return [
                func(item)
                for item in tqdm(
                    items, desc=desc, unit="file", leave=False, disable=not progress
                )
            ]
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(
                tqdm(
                    executor.map(func, items),
                    total=len(items),
                    desc=desc,
                    unit="file",
                    leave=False,
                    disable=not progress,
                )
            )

    @staticmethod
    def _log_batch_summary(
        name: str,
        bucket: str,
        results: Sequence[DeleteResult] | Sequence[UploadResult],
    ) -> None:
        failed = sum(1 for r in results if not r.success)
        if failed:
            logger.warning(
                f"{name}: {failed} of {len(results)} item(s) failed in bucket {bucket!r}"
            )
        else:
            logger.debug(f"{name}: {len(results)} item(s) done in bucket {bucket!r}")
