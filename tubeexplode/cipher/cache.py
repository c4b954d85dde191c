import logging
from concurrent.futures import Future
from threading import Lock
from typing import Callable, Optional

from tubeexplode.cipher.manifest import CipherManifest

logger = logging.getLogger(__name__)


class ManifestCache:
    """
    Thread-safe single-slot cache for the resolved CipherManifest.

    The first caller to find the slot empty runs the resolver; callers that
    arrive while it is running wait on the same Future instead of resolving
    again. Failures are handed to every waiter and are not cached, so the
    next call starts a fresh resolution.
    """

    def __init__(self):
        self._manifest: Optional[CipherManifest] = None
        self._in_flight: Optional[Future] = None
        self._lock = Lock()

    def peek(self) -> Optional[CipherManifest]:
        """Return the cached manifest without resolving."""
        with self._lock:
            return self._manifest

    def get_or_resolve(self, resolve_fn: Callable[[], CipherManifest]) -> CipherManifest:
        """
        Return the cached manifest, resolving it with ``resolve_fn`` if empty.

        There is no timeout while waiting on another caller's resolution.
        """
        with self._lock:
            if self._manifest is not None:
                return self._manifest
            future = self._in_flight
            is_owner = future is None
            if is_owner:
                future = Future()
                self._in_flight = future

        if not is_owner:
            logger.debug("[cipher] Waiting for in-flight manifest resolution")
            return future.result()

        try:
            manifest = resolve_fn()
        except BaseException as e:
            with self._lock:
                if self._in_flight is future:
                    self._in_flight = None
            future.set_exception(e)
            raise

        with self._lock:
            # Skip publishing if invalidate() ran while this resolution was in flight
            if self._in_flight is future:
                self._manifest = manifest
                self._in_flight = None
        future.set_result(manifest)
        return manifest

    def invalidate(self) -> None:
        """
        Drop the cached manifest.

        A resolution already in flight still answers its own callers but is
        not stored; the next call resolves again.
        """
        with self._lock:
            self._in_flight = None
            if self._manifest is not None:
                logger.warning(
                    f"[cipher] Dropping cached manifest (sts={self._manifest.signature_timestamp})"
                )
            self._manifest = None
