"""LicenseClassifier: identify a license from the text of its file.

Tier 1 compares word-shingle fingerprints of the input against the bundled
corpus of license texts in ``corpus/`` (one ``<SPDX-ID>.txt`` per license)
and accepts the best match whose coverage reaches the threshold. Tier 2
falls back to the phrase signatures in :mod:`depscan.licenses.keywords`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

import structlog

from depscan.exceptions import ClassificationWarning
from depscan.licenses.keywords import detect_license_by_keywords
from depscan.models import UNKNOWN_LICENSE

log = structlog.get_logger("depscan.licenses")

CORPUS_DIR = Path(__file__).parent / "corpus"

DEFAULT_THRESHOLD = 0.8
SHINGLE_SIZE = 3

# License files larger than this are truncated before classification.
MAX_LICENSE_BYTES = 1024 * 1024

_WORD_RE = re.compile(r"[a-z0-9]+")


def _normalize(text: str) -> list[str]:
    # "licence" and "license" are interchangeable in real-world files
    return [w if w != "licence" else "license" for w in _WORD_RE.findall(text.lower())]


def fingerprint(text: str, size: int = SHINGLE_SIZE) -> frozenset[tuple[str, ...]]:
    """Return the set of *size*-word shingles of the normalized text."""
    words = _normalize(text)
    if len(words) < size:
        return frozenset([tuple(words)]) if words else frozenset()
    return frozenset(tuple(words[i : i + size]) for i in range(len(words) - size + 1))


@dataclass(frozen=True)
class LicenseMatch:
    license_id: str
    confidence: float


@lru_cache(maxsize=1)
def load_corpus(corpus_dir: Path = CORPUS_DIR) -> dict[str, frozenset[tuple[str, ...]]]:
    """Load and fingerprint every ``*.txt`` license text in *corpus_dir*."""
    corpus: dict[str, frozenset[tuple[str, ...]]] = {}
    for path in sorted(corpus_dir.glob("*.txt")):
        corpus[path.stem] = fingerprint(path.read_text(encoding="utf-8"))
    return corpus


class LicenseClassifier:
    """Two-tier license classifier: fingerprint match, then keyword scan."""

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        corpus: dict[str, frozenset[tuple[str, ...]]] | None = None,
    ) -> None:
        self.threshold = threshold
        self._corpus = corpus if corpus is not None else load_corpus()

    def match(self, text: str) -> LicenseMatch | None:
        """Return the best corpus match at or above the threshold, if any.

        Confidence is the fraction of the known license's shingles found in
        *text*, so surrounding copyright lines or appended notices do not
        lower the score.
        """
        shingles = fingerprint(text)
        if not shingles:
            return None

        best: tuple[float, int, str] | None = None
        for license_id, known in self._corpus.items():
            if not known:
                continue
            score = len(known & shingles) / len(known)
            # Prefer higher score, then the longer (more specific) text.
            key = (score, len(known), license_id)
            if best is None or key[:2] > best[:2]:
                best = key

        if best is None or best[0] < self.threshold:
            return None
        return LicenseMatch(license_id=best[2], confidence=round(best[0], 4))

    def classify(self, data: bytes | str) -> str:
        """Return an SPDX-like identifier for *data*, or ``UNKNOWN``.

        Never raises: undecodable bytes are replaced before matching.
        """
        if isinstance(data, bytes):
            text = data[:MAX_LICENSE_BYTES].decode("utf-8", errors="replace")
        else:
            text = data

        found = self.match(text)
        if found is not None:
            log.debug(
                "classifier.matched",
                license=found.license_id,
                confidence=found.confidence,
            )
            return found.license_id

        fallback = detect_license_by_keywords(text)
        log.debug("classifier.keyword_fallback", license=fallback)
        return fallback

    def classify_file(self, path: str | Path) -> str:
        """Read and classify a license file.

        Raises :class:`ClassificationWarning` if the file cannot be read.
        """
        try:
            with open(path, "rb") as fh:
                data = fh.read(MAX_LICENSE_BYTES)
        except OSError as e:
            raise ClassificationWarning(f"failed to read license file {path}: {e}") from e
        return self.classify(data)


def classify_license(data: bytes | str) -> str:
    """Classify with the default threshold and bundled corpus."""
    return LicenseClassifier().classify(data) if data else UNKNOWN_LICENSE
