"""
Stop word sets per language, loaded lazily from INI files.

File layout: <directory>/stopwords.<lang>.ini

    [stopwords]
    words = der, die, das
        und oder

Words may be separated by commas and/or whitespace (including continuation
lines). A missing or broken file means "no stop words" for that language.
Language codes are two or three letters; unknown codes use the default language.
"""

import configparser
import logging
import re
import threading
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_LANG = "de"

_SEPARATORS = re.compile(r"[,\s]+")
_LANG_CODE = re.compile(r"^[a-z]{2,3}$")
_FILE_PREFIX = "stopwords."
_FILE_SUFFIX = ".ini"


def parse_stopwords(raw: str) -> FrozenSet[str]:
    """Normalized (stripped, lowercased) words from a separator-delimited list."""
    return frozenset(w.strip().lower() for w in _SEPARATORS.split(raw or "") if w.strip())


def _clean_lang(lang: Optional[str]) -> str:
    return (lang or "").strip().lower()


class StopWordCache:
    """
    Language -> frozenset of stop words. Each language is loaded at most once;
    afterwards lookups are lock-free reads of an immutable set.

    Only languages with a stop word file (or a preloaded set) get their own
    entry; any other code resolves to the default language, so the cache is
    bounded by the files on disk.
    """

    def __init__(self, directory: Optional[Path] = None, default_lang: str = DEFAULT_LANG) -> None:
        self._dir = Path(directory) if directory else None
        self._default_lang = _clean_lang(default_lang) or DEFAULT_LANG
        self._sets: Dict[str, Optional[FrozenSet[str]]] = {}
        self._available: Optional[FrozenSet[str]] = None
        self._lock = threading.Lock()

    @classmethod
    def preloaded(cls, sets: Mapping[str, Iterable[str]], default_lang: str = DEFAULT_LANG) -> "StopWordCache":
        """Cache with fixed contents and no file access (tests, embedding hosts)."""
        cache = cls(directory=None, default_lang=default_lang)
        for lang, words in sets.items():
            cache._sets[_clean_lang(lang)] = frozenset(w.strip().lower() for w in words if w.strip())
        return cache

    @classmethod
    def empty(cls) -> "StopWordCache":
        return cls(directory=None)

    def available(self) -> FrozenSet[str]:
        """Languages that have a stopwords.<lang>.ini file; the directory is scanned once."""
        if self._available is None:
            with self._lock:
                if self._available is None:
                    self._available = self._scan()
        return self._available

    def resolve_lang(self, lang: Optional[str]) -> str:
        """Cache key for lang: a known language code, else the default language."""
        lang = _clean_lang(lang)
        if not _LANG_CODE.match(lang):
            return self._default_lang
        if lang in self._sets or lang in self.available():
            return lang
        return self._default_lang

    def get(self, lang: Optional[str] = None) -> Optional[FrozenSet[str]]:
        """Stop words for lang, or None when none are available (fail-open)."""
        key = self.resolve_lang(lang)
        if key in self._sets:
            return self._sets[key]
        with self._lock:
            if key not in self._sets:
                self._sets[key] = self._load(key)
        return self._sets[key]

    def _path(self, lang: str) -> Optional[Path]:
        if self._dir is None:
            return None
        return self._dir / f"{_FILE_PREFIX}{lang}{_FILE_SUFFIX}"

    def _scan(self) -> FrozenSet[str]:
        if self._dir is None or not self._dir.is_dir():
            return frozenset()
        langs = set()
        for path in self._dir.glob(f"{_FILE_PREFIX}*{_FILE_SUFFIX}"):
            lang = path.name[len(_FILE_PREFIX):-len(_FILE_SUFFIX)].lower()
            if _LANG_CODE.match(lang):
                langs.add(lang)
        return frozenset(langs)

    def _load(self, lang: str) -> Optional[FrozenSet[str]]:
        path = self._path(lang)
        if path is None:
            return None
        if not path.is_file():
            logger.warning("Stopwords file not found: %s", path)
            return None
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(path, encoding="utf-8")
        except (configparser.Error, OSError, UnicodeDecodeError) as e:
            logger.warning("Stopwords ini parse failed: %s (%s)", path, e)
            return None
        words = parse_stopwords(parser.get("stopwords", "words", fallback=""))
        if not words:
            logger.warning("Stopwords file has no [stopwords] words: %s", path)
            return None
        logger.info("Loaded %d stop words for lang=%s", len(words), lang)
        return words
