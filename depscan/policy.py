"""Filtering, license policy and ordering over a dependency list.

Every function returns a new list and leaves its input untouched.

License terms in allow/deny/fail-on lists match by family: a term matches
an identifier when they are equal, or when the identifier starts with the
term followed by ``-``. Comparison is case-insensitive. ``GPL`` therefore
matches ``GPL-2.0`` and ``GPL-3.0`` but not ``LGPL-2.1`` or ``AGPL-3.0``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from depscan.aggregator import path_sort_key
from depscan.models import Dependency

SORT_KEYS = ("path", "version", "license")


@dataclass(frozen=True)
class FilterOptions:
    direct_only: bool = False
    indirect_only: bool = False
    allow: tuple[str, ...] = field(default=())
    deny: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        if self.direct_only and self.indirect_only:
            raise ValueError("direct_only and indirect_only are mutually exclusive")


def parse_csv(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated flag value, dropping blanks."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def license_matches(identifier: str, terms: Iterable[str]) -> bool:
    """True if *identifier* belongs to any of the license families in *terms*."""
    ident = identifier.casefold()
    for term in terms:
        t = term.casefold()
        if ident == t or ident.startswith(t + "-"):
            return True
    return False


def direct_only(deps: Sequence[Dependency]) -> list[Dependency]:
    return [d for d in deps if not d.indirect]


def indirect_only(deps: Sequence[Dependency]) -> list[Dependency]:
    return [d for d in deps if d.indirect]


def filter_by_license(deps: Sequence[Dependency], *licenses: str) -> list[Dependency]:
    """Keep dependencies whose license is exactly one of *licenses*."""
    wanted = set(licenses)
    return [d for d in deps if d.license in wanted]


def allow_licenses(deps: Sequence[Dependency], terms: Sequence[str]) -> list[Dependency]:
    """Keep only dependencies matching the allow-list (no-op when empty)."""
    if not terms:
        return list(deps)
    return [d for d in deps if license_matches(d.license, terms)]


def deny_licenses(deps: Sequence[Dependency], terms: Sequence[str]) -> list[Dependency]:
    """Drop dependencies matching the deny-list."""
    if not terms:
        return list(deps)
    return [d for d in deps if not license_matches(d.license, terms)]


def apply_filters(deps: Sequence[Dependency], options: FilterOptions) -> list[Dependency]:
    result = list(deps)
    if options.direct_only:
        result = direct_only(result)
    if options.indirect_only:
        result = indirect_only(result)
    result = allow_licenses(result, options.allow)
    return deny_licenses(result, options.deny)


def check_fail_on(deps: Sequence[Dependency], terms: Sequence[str]) -> list[Dependency]:
    """Return the dependencies violating the fail-on list.

    Callers pass the full, unfiltered set; an empty result means no violation.
    """
    if not terms:
        return []
    return [d for d in deps if license_matches(d.license, terms)]


def find_non_mit(deps: Sequence[Dependency]) -> list[Dependency]:
    """Dependencies whose license identifier does not mention MIT."""
    return [d for d in deps if "MIT" not in d.license.upper()]


_SEMVER_RE = re.compile(
    r"^v(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$"
)


def version_sort_key(version: str) -> tuple:
    """Semantic-version ordering key: v1.9.0 < v1.10.0, pre-releases before releases.

    Build metadata is ignored. Strings that are not semantic versions sort
    after all that are, in plain string order.
    """
    m = _SEMVER_RE.match(version)
    if m is None:
        return (1, version)
    release = tuple(int(part or 0) for part in m.group(1, 2, 3))
    if m.group(4) is None:
        return (0, release, 1, (), version)
    # Numeric identifiers compare numerically and precede alphanumeric ones.
    pre = tuple(
        (0, int(ident), "") if ident.isdigit() else (1, 0, ident)
        for ident in m.group(4).split(".")
    )
    return (0, release, 0, pre, version)


_SORTERS: dict[str, Callable[[Dependency], tuple]] = {
    "path": lambda d: (path_sort_key(d),),
    "version": lambda d: (version_sort_key(d.version), path_sort_key(d)),
    "license": lambda d: (d.license, path_sort_key(d)),
}


def sort_dependencies(deps: Sequence[Dependency], key: str = "path") -> list[Dependency]:
    """Order by ``path``, ``version`` or ``license``; ties broken by path."""
    try:
        sorter = _SORTERS[key]
    except KeyError:
        raise ValueError(f"unknown sort key {key!r}, expected one of {SORT_KEYS}") from None
    return sorted(deps, key=sorter)
