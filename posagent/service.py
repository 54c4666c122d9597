"""Hosting the agent as an operating-system service.

The service manager object (``svc``) is anything that provides
``install()``, ``uninstall()``, ``start()`` and ``stop()`` methods. Errors
those methods raise are wrapped in :class:`ServiceError`.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol

SERVICE_NAME = "SimsimPOSAgent"

# Name of the single-instance lock. The "Global\" prefix makes it visible
# across terminal-server sessions on hosts that honour it.
MUTEX_NAME = "Global\\SimsimPOSAgent"

UNINSTALL_STOP_TIMEOUT = 10.0

_log = logging.getLogger(__name__)


class ServiceError(Exception):
    """A service-manager operation failed."""


class AlreadyRunningError(ServiceError):
    """Another instance of the agent holds the single-instance lock."""

    def __init__(self, message: str = "service: another instance is already running") -> None:
        super().__init__(message)


class ServiceManager(Protocol):
    """What the functions here need from a platform service manager."""

    def install(self) -> Any: ...

    def uninstall(self) -> Any: ...

    def start(self) -> Any: ...

    def stop(self) -> Any: ...


class Runnable(Protocol):
    """A long-running component that returns once ``stop_event`` is set."""

    def run(self, stop_event: threading.Event) -> Any: ...


@dataclass(frozen=True)
class ServiceConfig:
    """Identity of the service entry in the operating-system service manager."""

    name: str
    display_name: str
    description: str
    user_name: str


def build_config() -> ServiceConfig:
    """Return the service identity shared by install and run."""
    return ServiceConfig(
        name=SERVICE_NAME,
        display_name="Simsim POS Agent",
        description=(
            "Local printer agent for Simsim POS — handles receipt printing "
            "and cash drawer control."
        ),
        user_name="NT AUTHORITY\\LocalService",
    )


@dataclass(frozen=True)
class Handle:
    """Single-instance lock handle. On this platform the lock is a no-op."""

    def release(self) -> None:
        """Release the lock. Safe to call more than once."""
        return None

    def __enter__(self) -> "Handle":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.release()


def acquire_single_instance() -> Handle:
    """Take the single-instance lock named by ``MUTEX_NAME``.

    Raises :class:`AlreadyRunningError` where the lock is enforced and held
    elsewhere; on this platform the lock is never contended.
    """
    return Handle()


def status() -> str:
    """Return a human-readable service state."""
    return "unsupported on this platform"


def _post_install() -> None:
    """Platform enrichment after install; nothing to do on this platform."""
    return None


_ACTIONS = {
    "install": lambda svc: svc.install(),
    "uninstall": lambda svc: svc.uninstall(),
    "start": lambda svc: svc.start(),
    "stop": lambda svc: svc.stop(),
}


def _control(svc: ServiceManager, action: str) -> None:
    try:
        operation = _ACTIONS[action]
    except KeyError:
        raise ServiceError(f"unknown action {action!r}") from None
    try:
        operation(svc)
    except Exception as exc:
        raise ServiceError(f"Failed to {action} {svc}: {exc}") from exc


def install(svc: ServiceManager) -> None:
    """Register the service and apply platform post-install settings."""
    try:
        _control(svc, "install")
    except ServiceError as exc:
        raise ServiceError(f"install: {exc}") from exc
    try:
        _post_install()
    except Exception as exc:
        raise ServiceError(
            f"post-install (service installed; recovery actions unset): {exc}"
        ) from exc


def uninstall(svc: ServiceManager) -> None:
    """Stop the service if it is running, then unregister it."""
    uninstall_with_deps(svc, status, UNINSTALL_STOP_TIMEOUT, _log)


def uninstall_with_deps(
    svc: ServiceManager,
    status: Callable[[], str],
    stop_timeout: float,
    logger: logging.Logger,
) -> None:
    """Uninstall with an injected status query, stop timeout (seconds) and logger.

    A failing status query or a failing or hung stop is logged and does
    not prevent the unregister; a failing unregister raises ServiceError.
    """
    state = ""
    try:
        state = status()
    except Exception as exc:
        logger.warning(
            "service: status query failed before uninstall; proceeding anyway (err=%s)", exc
        )
    if state == "running":
        logger.info("service: stopping before uninstall (stop_timeout=%ss)", stop_timeout)
        try:
            stop_with_timeout(svc, stop_timeout)
        except Exception as exc:
            logger.warning(
                "service: stop before uninstall failed; proceeding to unregister anyway (err=%s)",
                exc,
            )
    try:
        _control(svc, "uninstall")
    except ServiceError as exc:
        raise ServiceError(f"uninstall: {exc}") from exc


def stop_with_timeout(svc: ServiceManager, timeout: float) -> None:
    """Stop the service, giving up after ``timeout`` seconds.

    On timeout the stop keeps running in a background daemon thread.
    """
    outcome: "queue.Queue[Optional[Exception]]" = queue.Queue(maxsize=1)

    def run() -> None:
        try:
            _control(svc, "stop")
        except Exception as exc:
            outcome.put(exc)
        else:
            outcome.put(None)

    threading.Thread(target=run, name="service-stop", daemon=True).start()
    try:
        error = outcome.get(timeout=timeout)
    except queue.Empty:
        raise ServiceError(f"stop did not return within {timeout}s") from None
    if error is not None:
        raise error


@dataclass
class Program:
    """Runs the API server and optional heartbeat loop in background threads.

    ``server`` and ``heartbeat`` each provide ``run(stop_event)`` that
    returns once the event is set.
    """

    server: Runnable
    logger: logging.Logger = field(default_factory=lambda: _log)
    heartbeat: Optional[Runnable] = None
    stop_timeout: float = 10.0
    heartbeat_stop_timeout: float = 2.0

    _stop_event: Optional[threading.Event] = field(default=None, init=False, repr=False)
    _server_done: "Optional[queue.Queue[Optional[Exception]]]" = field(
        default=None, init=False, repr=False
    )
    _heartbeat_done: Optional[threading.Event] = field(default=None, init=False, repr=False)

    def start(self) -> None:
        """Launch the server (and heartbeat) without blocking."""
        stop_event = threading.Event()
        server_done: "queue.Queue[Optional[Exception]]" = queue.Queue(maxsize=1)
        self._stop_event = stop_event
        self._server_done = server_done

        def run_server() -> None:
            try:
                self.server.run(stop_event)
            except Exception as exc:
                server_done.put(exc)
            else:
                server_done.put(None)

        threading.Thread(target=run_server, name="api-server", daemon=True).start()

        if self.heartbeat is not None:
            heartbeat = self.heartbeat
            heartbeat_done = threading.Event()
            self._heartbeat_done = heartbeat_done

            def run_heartbeat() -> None:
                try:
                    heartbeat.run(stop_event)
                finally:
                    heartbeat_done.set()

            threading.Thread(target=run_heartbeat, name="heartbeat", daemon=True).start()

        self.logger.info(
            "service started (service_name=%s, heartbeat_enabled=%s)",
            SERVICE_NAME,
            self.heartbeat is not None,
        )

    def stop(self) -> None:
        """Signal shutdown and wait for the server, then the heartbeat, to exit."""
        self.logger.info("service stopping (service_name=%s)", SERVICE_NAME)
        if self._stop_event is None or self._server_done is None:
            return
        self._stop_event.set()
        try:
            error = self._server_done.get(timeout=self.stop_timeout)
        except queue.Empty:
            raise ServiceError(
                f"service: server did not exit within {self.stop_timeout}s of stop"
            ) from None
        if error is not None:
            self.logger.error("service: server returned error on shutdown (err=%s)", error)
        if self._heartbeat_done is not None:
            if not self._heartbeat_done.wait(timeout=self.heartbeat_stop_timeout):
                raise ServiceError(
                    "service: heartbeat loop did not exit within "
                    f"{self.heartbeat_stop_timeout}s of stop"
                )