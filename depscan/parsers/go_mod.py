"""Parser for Go go.mod files.

The file is tokenized line by line (identifiers, quoted strings, parens,
``=>`` and trailing ``//`` comments) and then parsed directive by
directive, so quoted paths and comments never leak into module paths.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from depscan.exceptions import ParseError
from depscan.models import Exclude, ModFile, OverrideDirective, Requirement

log = structlog.get_logger("depscan.parser")

# vMAJOR.MINOR.PATCH with optional pre-release / build metadata
# (covers pseudo-versions and +incompatible).
_VERSION_RE = re.compile(r"^v\d+\.\d+\.\d+(?:-[0-9A-Za-z.\-]+)?(?:\+[0-9A-Za-z.\-]+)?$")

_LPAREN = "lparen"
_RPAREN = "rparen"
_ARROW = "arrow"
_IDENT = "ident"
_STRING = "string"

# Recognised but irrelevant to license scanning.
_IGNORED_VERBS = frozenset({"toolchain", "retract", "godebug", "tool", "ignore"})


@dataclass
class _Token:
    kind: str
    text: str


@dataclass
class _Line:
    number: int
    tokens: list[_Token]
    comment: str | None = None

    @property
    def kinds(self) -> list[str]:
        return [t.kind for t in self.tokens]


@dataclass
class _Directive:
    verb: str
    line: _Line
    args: list[_Token] = field(default_factory=list)
    comment: str | None = None


def _tokenize_line(text: str, number: int) -> _Line:
    tokens: list[_Token] = []
    comment: str | None = None
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
            continue
        if text.startswith("//", i):
            comment = text[i + 2 :].strip()
            break
        if ch == "(":
            tokens.append(_Token(_LPAREN, ch))
            i += 1
            continue
        if ch == ")":
            tokens.append(_Token(_RPAREN, ch))
            i += 1
            continue
        if text.startswith("=>", i):
            tokens.append(_Token(_ARROW, "=>"))
            i += 2
            continue
        if ch == '"':
            value, i = _read_interpreted_string(text, i, number)
            tokens.append(_Token(_STRING, value))
            continue
        if ch == "`":
            end = text.find("`", i + 1)
            if end < 0:
                raise ParseError("unterminated raw string", number)
            tokens.append(_Token(_STRING, text[i + 1 : end]))
            i = end + 1
            continue
        start = i
        while i < n:
            c = text[i]
            if c.isspace() or c in '()"`' or text.startswith("//", i) or text.startswith("=>", i):
                break
            i += 1
        tokens.append(_Token(_IDENT, text[start:i]))
    return _Line(number=number, tokens=tokens, comment=comment)


def _read_interpreted_string(text: str, start: int, number: int) -> tuple[str, int]:
    out: list[str] = []
    i = start + 1
    while i < len(text):
        c = text[i]
        if c == "\\":
            if i + 1 >= len(text):
                break
            nxt = text[i + 1]
            out.append({"n": "\n", "t": "\t"}.get(nxt, nxt))
            i += 2
            continue
        if c == '"':
            return "".join(out), i + 1
        out.append(c)
        i += 1
    raise ParseError("unterminated quoted string", number)


def _directives(content: str) -> list[_Directive]:
    """Group tokenized lines into directives, expanding ``verb ( ... )`` blocks."""
    lines = [
        _tokenize_line(text, number)
        for number, text in enumerate(content.splitlines(), start=1)
    ]
    result: list[_Directive] = []
    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        if not line.tokens:
            continue

        head = line.tokens[0]
        if head.kind != _IDENT:
            raise ParseError(f"unexpected {head.text!r}", line.number)
        verb = head.text
        rest = line.tokens[1:]

        if rest and rest[0].kind == _LPAREN:
            if len(rest) == 2 and rest[1].kind == _RPAREN:
                continue  # empty block on one line: "require ()"
            if len(rest) != 1:
                raise ParseError(f"unexpected tokens after '{verb} ('", line.number)
            opened_at = line.number
            closed = False
            while i < len(lines):
                entry = lines[i]
                i += 1
                if not entry.tokens:
                    continue
                if entry.kinds == [_RPAREN]:
                    closed = True
                    break
                if _LPAREN in entry.kinds or _RPAREN in entry.kinds:
                    raise ParseError(
                        f"unexpected parenthesis inside {verb} block", entry.number
                    )
                result.append(
                    _Directive(verb=verb, line=entry, args=entry.tokens, comment=entry.comment)
                )
            if not closed:
                raise ParseError(f"unterminated {verb} block", opened_at)
            continue

        if _LPAREN in line.kinds or _RPAREN in line.kinds:
            raise ParseError("unexpected parenthesis", line.number)
        result.append(_Directive(verb=verb, line=line, args=rest, comment=line.comment))
    return result


def _is_indirect(comment: str | None) -> bool:
    fields = (comment or "").split()
    if not fields:
        return False
    return fields[0] == "indirect" or fields[0].startswith("indirect;")


def _is_local_path(path: str) -> bool:
    return (
        path in (".", "..")
        or path.startswith(("./", "../", "/", ".\\", "..\\", "\\"))
        or (len(path) > 2 and path[1] == ":" and path[2] in "/\\")
    )


def _check_version(version: str, number: int) -> str:
    if not _VERSION_RE.match(version):
        raise ParseError(f"invalid version {version!r}", number)
    return version


def _parse_require(d: _Directive) -> Requirement:
    if len(d.args) != 2 or any(t.kind not in (_IDENT, _STRING) for t in d.args):
        raise ParseError("usage: require module/path v1.2.3", d.line.number)
    path, version = d.args[0].text, d.args[1].text
    return Requirement(
        path=path,
        version=_check_version(version, d.line.number),
        indirect=_is_indirect(d.comment),
    )


def _parse_replace(d: _Directive) -> OverrideDirective:
    kinds = [t.kind for t in d.args]
    if kinds.count(_ARROW) != 1:
        raise ParseError("usage: replace module/path [v1.2.3] => other/module v1.4.5", d.line.number)
    arrow = kinds.index(_ARROW)
    lhs, rhs = d.args[:arrow], d.args[arrow + 1 :]
    if len(lhs) not in (1, 2) or len(rhs) not in (1, 2):
        raise ParseError("usage: replace module/path [v1.2.3] => other/module v1.4.5", d.line.number)

    from_path = lhs[0].text
    from_version = _check_version(lhs[1].text, d.line.number) if len(lhs) == 2 else None
    to_path = rhs[0].text

    if _is_local_path(to_path):
        if len(rhs) == 2:
            raise ParseError("replacement directory cannot have a version", d.line.number)
        return OverrideDirective(
            from_path=from_path,
            from_version=from_version,
            to_path=to_path,
            to_local_dir=to_path,
        )

    if len(rhs) != 2:
        raise ParseError("replacement module must have a version", d.line.number)
    return OverrideDirective(
        from_path=from_path,
        from_version=from_version,
        to_path=to_path,
        to_version=_check_version(rhs[1].text, d.line.number),
    )


def _parse_exclude(d: _Directive) -> Exclude:
    if len(d.args) != 2:
        raise ParseError("usage: exclude module/path v1.2.3", d.line.number)
    return Exclude(path=d.args[0].text, version=_check_version(d.args[1].text, d.line.number))


def parse_go_mod(content: str) -> ModFile:
    """Parse go.mod text into a :class:`ModFile`.

    Raises :class:`ParseError` when the module directive is missing or a
    block or directive is malformed.
    """
    module: str | None = None
    go_version: str | None = None
    requirements: list[Requirement] = []
    overrides: list[OverrideDirective] = []
    excludes: list[Exclude] = []

    for d in _directives(content):
        if d.verb == "module":
            if module is not None:
                raise ParseError("repeated module statement", d.line.number)
            if len(d.args) != 1:
                raise ParseError("usage: module module/path", d.line.number)
            module = d.args[0].text
        elif d.verb == "go":
            if len(d.args) != 1:
                raise ParseError("usage: go 1.23", d.line.number)
            go_version = d.args[0].text
        elif d.verb == "require":
            requirements.append(_parse_require(d))
        elif d.verb == "replace":
            overrides.append(_parse_replace(d))
        elif d.verb == "exclude":
            excludes.append(_parse_exclude(d))
        elif d.verb in _IGNORED_VERBS:
            continue
        else:
            log.debug("parser.unknown_directive", verb=d.verb, line=d.line.number)

    if module is None:
        raise ParseError("no module directive found")

    return ModFile(
        module=module,
        requirements=tuple(requirements),
        overrides=tuple(overrides),
        excludes=tuple(excludes),
        go_version=go_version,
    )


def read_go_mod(path: str | Path) -> ModFile:
    """Read and parse the go.mod file at *path*."""
    file_path = Path(path)
    try:
        content = file_path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ParseError(f"failed to read {file_path}: {e}") from e
    return GoModParser().parse(file_path, content)


class GoModParser:
    def parse(self, file_path: Path, content: str) -> ModFile:
        modfile = parse_go_mod(content)
        log.debug(
            "parser.parsed",
            file=str(file_path),
            module=modfile.module,
            requirements=len(modfile.requirements),
            overrides=len(modfile.overrides),
        )
        return modfile
