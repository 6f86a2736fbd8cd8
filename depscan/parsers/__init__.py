"""Manifest parsers."""

from depscan.parsers.go_mod import GoModParser, parse_go_mod, read_go_mod

__all__ = ["GoModParser", "parse_go_mod", "read_go_mod"]
