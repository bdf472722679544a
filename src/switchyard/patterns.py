r"""Path template compilation and full-path matching.

Templates are regular expressions; named groups written as ``(?P<name>...)``
become path parameters::

    pattern = compile_pattern(r"/people/(?P<id>\d+)")
    pattern.match("/people/42")      # {"id": "42"}
    pattern.match("/people/42/x")    # None
"""

from __future__ import annotations

import re

from switchyard.errors import InvalidPatternError


class CompiledPattern:
    """An immutable, fully anchored path matcher."""

    __slots__ = ("_regex", "template")

    def __init__(self, template: str, regex: re.Pattern[str]) -> None:
        self.template = template
        self._regex = regex

    @property
    def group_names(self) -> tuple[str, ...]:
        return tuple(self._regex.groupindex)

    def match(self, path: str) -> dict[str, str] | None:
        """Return the named captures if *path* matches in full, else ``None``.

        Unnamed groups are ignored. Named groups that did not take part in
        the match are omitted.
        """
        m = self._regex.fullmatch(path)
        if m is None:
            return None
        return {name: value for name, value in m.groupdict().items() if value is not None}

    def __repr__(self) -> str:
        return f"CompiledPattern({self.template!r})"


def compile_pattern(template: str) -> CompiledPattern:
    """Compile *template*, raising :class:`InvalidPatternError` if it is not a valid regex."""
    if not isinstance(template, str):
        raise InvalidPatternError(repr(template), "template must be a string")
    try:
        regex = re.compile(template)
    except re.error as exc:
        raise InvalidPatternError(template, str(exc)) from exc
    return CompiledPattern(template, regex)
