"""Structured logging facade."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar, Token
from threading import RLock
from typing import Any, Dict, Iterator, List, Mapping, MutableMapping

from .config import LoggingSettings, get_settings
from .dispatcher import Dispatcher, Sink
from .queue import RingBufferQueue
from .sampling import should_emit
from .schema import build_log_record
from .sinks.memory import InMemorySink
from .sinks.stdout import StdoutSink


_CONTEXT: ContextVar[Mapping[str, Any]] = ContextVar("logging_lib_context", default={})


class StructuredLogger:
    """Structured logger bound to a component name."""

    def __init__(self, name: str, manager: "LoggerManager") -> None:
        self._name = name
        self._manager = manager

    @property
    def name(self) -> str:
        return self._name

    def debug(self, message: str, **fields: Any) -> None:
        self._log("DEBUG", message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log("INFO", message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log("WARNING", message, **fields)

    def error(self, message: str, **fields: Any) -> None:
        self._log("ERROR", message, **fields)

    def critical(self, message: str, **fields: Any) -> None:
        self._log("CRITICAL", message, **fields)

    def _log(self, level: str, message: str, **fields: Any) -> None:
        """Build, filter and dispatch one record."""

        manager = self._manager
        settings = manager.settings

        if not should_emit(level, settings):
            return

        runtime_context = dict(manager.base_context)
        runtime_context.update(_CONTEXT.get())

        explicit_context = fields.pop("context", {}) or {}
        if explicit_context:
            runtime_context.update(explicit_context)

        record = build_log_record(
            level=level,
            message=message,
            settings=settings,
            component=self._name,
            context=runtime_context,
            **fields,
        )

        manager.dispatcher.submit(record)


class LoggerManager:
    """Owns the queue, dispatcher, sinks and logger instances."""

    def __init__(self) -> None:
        self._lock = RLock()
        self._loggers: Dict[str, StructuredLogger] = {}
        self._settings: LoggingSettings | None = None
        self._dispatcher: Dispatcher | None = None
        self._queue: RingBufferQueue | None = None
        self._base_context: MutableMapping[str, Any] = {}

    def configure(self, settings: LoggingSettings) -> None:
        """(Re)build the pipeline for ``settings``; existing loggers are discarded."""

        with self._lock:
            self._shutdown_dispatcher()

            self._settings = settings
            self._loggers.clear()

            self._queue = RingBufferQueue(settings.queue_size, on_drop=self._handle_drop)
            self._dispatcher = Dispatcher(
                self._queue,
                self._build_sinks(settings),
                auto_flush=settings.auto_flush,
            )
            self._base_context = dict(settings.default_context)

    @property
    def dispatcher(self) -> Dispatcher:
        dispatcher = self._dispatcher

        if dispatcher is None:
            self.configure(self.settings)
            dispatcher = self._dispatcher

        assert dispatcher is not None  # For type checkers

        return dispatcher

    @property
    def settings(self) -> LoggingSettings:
        settings = self._settings

        if settings is None:
            settings = get_settings()
            self.configure(settings)

        return settings

    @property
    def base_context(self) -> Mapping[str, Any]:
        return dict(self._base_context)

    def get_logger(self, name: str) -> StructuredLogger:
        with self._lock:
            logger = self._loggers.get(name)

            if logger is None:
                logger = StructuredLogger(name, self)
                self._loggers[name] = logger

            return logger

    def memory_sinks(self) -> List[InMemorySink]:
        """Return the in-memory sinks of the active dispatcher."""

        dispatcher = self._dispatcher
        if dispatcher is None:
            return []
        return [sink for sink in dispatcher.sinks if isinstance(sink, InMemorySink)]

    def flush(self) -> int:
        dispatcher = self._dispatcher
        if dispatcher is None:
            return 0
        return dispatcher.flush()

    def reset(self) -> None:
        with self._lock:
            self._shutdown_dispatcher()
            self._loggers.clear()
            self._settings = None
            self._queue = None
            self._base_context.clear()

    # --------------------- internal helpers ---------------------
    @staticmethod
    def _build_sinks(settings: LoggingSettings) -> List[Sink]:
        sinks: List[Sink] = []

        for sink_name in settings.sinks:
            name = sink_name.strip().lower()

            if name == "stdout":
                sinks.append(StdoutSink())
            elif name == "memory":
                sinks.append(InMemorySink())

        if not sinks:
            sinks.append(StdoutSink())

        return sinks

    def _shutdown_dispatcher(self) -> None:
        dispatcher = self._dispatcher

        if dispatcher is not None:
            dispatcher.stop()

        self._dispatcher = None

    def _handle_drop(self, dropped: Mapping[str, object]) -> None:
        dispatcher = self._dispatcher
        queue = self._queue
        settings = self._settings

        if dispatcher is None or queue is None or settings is None:
            return

        notice_context = dict(self._base_context)
        notice_context["drop"] = queue.drop_event(dropped)

        notice = build_log_record(
            level="WARNING",
            message="log_drop",
            settings=settings,
            component="logging.queue",
            context=notice_context,
        )

        dispatcher.emit_immediate(notice)


_MANAGER = LoggerManager()


def configure_manager(settings: LoggingSettings) -> None:
    _MANAGER.configure(settings)


def get_manager() -> LoggerManager:
    return _MANAGER


def get_logger(name: str) -> StructuredLogger:
    """Return the structured logger registered under ``name``."""

    return _MANAGER.get_logger(name)


def flush() -> int:
    """Flush queued records of the global manager."""

    return _MANAGER.flush()


def push_context(**context: Any) -> Token:
    current = dict(_CONTEXT.get())
    current.update(context)
    return _CONTEXT.set(current)


def pop_context(token: Token) -> None:
    _CONTEXT.reset(token)


def get_context() -> Mapping[str, Any]:
    return dict(_CONTEXT.get())


@contextmanager
def logger_context(**context: Any) -> Iterator[Mapping[str, Any]]:
    """Bind ``context`` to every record logged inside the block."""

    token = push_context(**context)
    try:
        yield get_context()
    finally:
        pop_context(token)


def reset_loggers() -> None:
    _MANAGER.reset()
