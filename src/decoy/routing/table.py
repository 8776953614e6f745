"""Ordered route table for one logical host.

Bindings are registered during setup and frozen before the server
accepts requests. Resolution walks the bindings in a fixed order and
stops at the first one that answers:

1. exact paths (dict lookup)
2. patterns, in registration order
3. mounts (sub-tables and directories), in registration order
4. file bindings
5. the default handler, or an empty 404
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from pathlib import Path

import anyio.to_thread

from decoy._internal.invoke import invoke
from decoy._internal.types import Handler
from decoy.errors import ConfigurationError
from decoy.http.content_types import ContentTypes
from decoy.http.request import Request
from decoy.http.response import Response, not_found
from decoy.routing.bindings import (
    Binding,
    ExactPath,
    FileBinding,
    Mount,
    PatternPath,
    normalize_methods,
    normalize_prefix,
)
from decoy.routing.negotiation import negotiate
from decoy.static import StaticResolver

logger = logging.getLogger("decoy.routing")


def compile_pattern(pattern: str | re.Pattern[str], flags: int = 0) -> re.Pattern[str]:
    """Compile *pattern*, turning regex syntax errors into ConfigurationError.

    Already compiled patterns are returned unchanged; *flags* only apply
    to strings.
    """
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        msg = f"Invalid pattern {pattern!r}: {exc}"
        raise ConfigurationError(msg) from exc


class RouteTable:
    """Bindings plus a default handler, scoped to one host.

    Usage::

        table = RouteTable()
        table.bind("/login.xml", lambda: response("<ok/>", content_type="text/xml"))
        table.bind_pattern(r"\\.php$", lambda request: f"no {request.path}")
        table.mount("/files/", "./public")
        table.file("/robots.txt", "./robots.txt")

        @table.default
        def fallback():
            return "This is default."

        response = await table.resolve("/login.xml")
    """

    __slots__ = (
        "_bindings",
        "_default",
        "_exact",
        "_files",
        "_frozen",
        "content_types",
        "static",
    )

    def __init__(
        self,
        *,
        static: StaticResolver | None = None,
        content_types: ContentTypes | None = None,
    ) -> None:
        self.static: StaticResolver = static or StaticResolver()
        self.content_types: ContentTypes = content_types or ContentTypes()
        self._bindings: list[Binding] = []
        self._exact: dict[str, ExactPath] = {}
        self._files: dict[str, FileBinding] = {}
        self._default: Handler | None = None
        self._frozen = False

    # -- Registration --

    def bind(
        self,
        path: str,
        handler: Handler | None = None,
        *,
        methods: Iterable[str] | None = None,
    ) -> Handler | Callable[[Handler], Handler]:
        """Answer the literal *path* with *handler*.

        A later binding for the same path replaces the earlier one. Without
        *handler* this returns a decorator.
        """
        if handler is None:

            def decorator(func: Handler) -> Handler:
                return self.bind(path, func, methods=methods)

            return decorator

        self._check_not_frozen()
        binding = ExactPath(path, handler, normalize_methods(methods))
        previous = self._exact.get(path)
        if previous is not None:
            self._bindings.remove(previous)
        self._exact[path] = binding
        self._bindings.append(binding)
        return handler

    def bind_pattern(
        self,
        pattern: str | re.Pattern[str],
        handler: Handler | None = None,
        *,
        methods: Iterable[str] | None = None,
    ) -> Handler | Callable[[Handler], Handler]:
        """Answer every path that *pattern* matches (``re.search``).

        Patterns are tried in registration order. Named groups are passed
        to the handler by name. Without *handler* this returns a decorator.
        """
        compiled = compile_pattern(pattern)
        if handler is None:

            def decorator(func: Handler) -> Handler:
                return self.bind_pattern(compiled, func, methods=methods)

            return decorator

        self._check_not_frozen()
        self._bindings.append(PatternPath(compiled, handler, normalize_methods(methods)))
        return handler

    def mount(self, prefix: str, target: RouteTable | str | Path) -> None:
        """Delegate everything below *prefix* to a table or a directory."""
        self._check_not_frozen()
        if isinstance(target, RouteTable):
            if target is self:
                msg = f"Cannot mount a route table inside itself at {prefix!r}"
                raise ConfigurationError(msg)
            resolved: RouteTable | Path = target
        else:
            resolved = Path(target).resolve()
            if not resolved.is_dir():
                msg = f"Mount target {str(target)!r} for {prefix!r} is not a directory"
                raise ConfigurationError(msg)
        self._bindings.append(Mount(normalize_prefix(prefix), resolved))

    def public_dir(self, directory: str | Path) -> None:
        """Serve *directory* at the root of this table."""
        self.mount("/", directory)

    def file(self, path: str, filesystem_path: str | Path) -> None:
        """Serve the file at *filesystem_path* for the literal *path*.

        The file does not need to exist yet; it is looked up per request.
        """
        self._check_not_frozen()
        binding = FileBinding(path, Path(filesystem_path).absolute())
        previous = self._files.get(path)
        if previous is not None:
            self._bindings.remove(previous)
        self._files[path] = binding
        self._bindings.append(binding)

    def default(self, handler: Handler) -> Handler:
        """Set the handler for requests nothing else answers.

        Returns *handler*, so this also works as a decorator.
        """
        self._check_not_frozen()
        self._default = handler
        return handler

    set_default = default

    # -- Introspection --

    @property
    def bindings(self) -> tuple[Binding, ...]:
        """Every binding, in registration order."""
        return tuple(self._bindings)

    @property
    def default_handler(self) -> Handler | None:
        return self._default

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Refuse further registration, here and in every mounted table."""
        if self._frozen:
            return
        self._frozen = True
        for binding in self._bindings:
            if isinstance(binding, Mount) and isinstance(binding.target, RouteTable):
                binding.target.freeze()

    # -- Resolution --

    async def resolve(self, path: str, request: Request | None = None) -> Response:
        """Dispatch *path* through the bindings and return the response.

        *request* carries method, headers and host for handlers; when
        omitted a GET request for *path* is synthesized.
        """
        if request is None:
            request = Request.for_path(path)
            path = request.path
        method = request.method

        # 1. Exact path
        exact = self._exact.get(path)
        if exact is not None and exact.allows(method):
            return await self._call(exact.handler, request)

        # 2. Patterns, first match wins
        for binding in self._bindings:
            if not isinstance(binding, PatternPath) or not binding.allows(method):
                continue
            match = binding.pattern.search(path)
            if match is not None:
                matched = request.with_captures(match.groupdict(), match.groups())
                return await self._call(binding.handler, matched)

        # 3. Mounts; a literal file binding shadows any mount at its path
        if path not in self._files:
            for binding in self._bindings:
                if not isinstance(binding, Mount):
                    continue
                remainder = binding.remainder(path)
                if remainder is None:
                    continue
                if isinstance(binding.target, RouteTable):
                    mounted = request.with_path(remainder, request.mount_path.rstrip("/") + binding.prefix)
                    return await binding.target.resolve(remainder, mounted)
                found = await anyio.to_thread.run_sync(self.static.resolve, binding.target, remainder)
                if found is not None:
                    served = await self._serve(found)
                    if served is not None:
                        return served

        # 4. File bindings
        file_binding = self._files.get(path)
        if file_binding is not None:
            served = await self._serve(file_binding.filesystem_path)
            if served is not None:
                return served
            logger.debug("File for %s missing: %s", path, file_binding.filesystem_path)
            return not_found()

        # 5. Default
        if self._default is not None:
            return await self._call(self._default, request)
        return not_found()

    # -- Helpers --

    async def _call(self, handler: Handler, request: Request) -> Response:
        return negotiate(await invoke(handler, request))

    async def _serve(self, file_path: Path) -> Response | None:
        """Read *file_path* into a response, or ``None`` if it is gone."""
        try:
            body = await anyio.to_thread.run_sync(self.static.read, file_path)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
            return None
        return Response(body=body, content_type=self.content_types.for_path(file_path))

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify a route table after the server has started. "
                "Register bindings and hosts before calling run()."
            )
            raise RuntimeError(msg)
