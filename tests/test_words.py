"""
Word splitting and stop word loading.
"""

import logging
import threading
from pathlib import Path

from phonetic import StopWordCache, normalize_query, split_words, unique_words

ROOT = Path(__file__).resolve().parent.parent


def test_split_letters_only_and_min_length():
    assert split_words("Hallo, Welt! 42x a b") == ["hallo", "welt"]
    assert split_words("foo_bar2baz--qux") == ["foo", "bar", "baz", "qux"]
    assert split_words("") == []
    assert split_words("1 2 3 ! ?") == []


def test_split_keeps_unicode_letters():
    assert split_words("Grüße aus Köln") == ["grüße", "aus", "köln"]


def test_split_respects_max_words():
    text = " ".join(["wort"] * 3 + ["alpha", "beta", "gamma", "delta", "epsilon", "zeta"])
    assert len(split_words(text, max_words=6)) == 6
    assert split_words(text, max_words=0) == []
    assert len(split_words(text)) == 9


def test_split_filters_stop_words():
    assert split_words("der Hund und die Katze", stop_words={"der", "die", "und"}) == ["hund", "katze"]
    # no set -> no filtering
    assert split_words("der Hund", stop_words=None) == ["der", "hund"]
    assert split_words("der Hund", stop_words=frozenset()) == ["der", "hund"]


def test_max_words_counts_words_after_stop_word_filter():
    words = split_words("der die das eins zwei drei", max_words=2, stop_words={"der", "die", "das"})
    assert words == ["eins", "zwei"]


def test_normalize_query_and_unique_words():
    assert normalize_query("  a   b \n\t c ") == "a b c"
    assert normalize_query(None) == ""
    assert unique_words(["welt", "hallo", "welt"]) == ["welt", "hallo"]


def test_stop_words_loaded_from_ini(tmp_path):
    (tmp_path / "stopwords.xx.ini").write_text(
        "[stopwords]\nwords = Foo, bar\n    BAZ qux\n", encoding="utf-8"
    )
    cache = StopWordCache(tmp_path)
    assert cache.get("xx") == frozenset({"foo", "bar", "baz", "qux"})
    assert cache.get(" XX ") is cache.get("xx")


def test_missing_stop_word_file_is_fail_open_and_cached(tmp_path, caplog):
    caplog.set_level(logging.WARNING, logger="phonetic.stopwords")
    cache = StopWordCache(tmp_path)
    assert cache.get("fr") is None
    assert cache.get("fr") is None
    assert sum("not found" in r.getMessage() for r in caplog.records) == 1
    assert split_words("le chat", stop_words=cache.get("fr")) == ["le", "chat"]


def test_default_language_and_shipped_files():
    cache = StopWordCache(ROOT / "local" / "StopWords")
    assert "und" in cache.get(None)
    assert "und" in cache.get("de")
    assert "the" in cache.get("en")
    assert "welt" not in cache.get("de")


def test_preloaded_and_empty_caches():
    cache = StopWordCache.preloaded({"DE": ["Der", " die "]})
    assert cache.get("de") == frozenset({"der", "die"})
    # no "en" set: falls back to the default language
    assert cache.get("en") is cache.get("de")
    assert StopWordCache.empty().get("de") is None


def test_concurrent_first_load_yields_one_set(tmp_path):
    (tmp_path / "stopwords.de.ini").write_text("[stopwords]\nwords = der die das\n", encoding="utf-8")
    cache = StopWordCache(tmp_path)
    results = []
    threads = [threading.Thread(target=lambda: results.append(cache.get("de"))) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(results) == 8
    assert all(r is results[0] for r in results)


def test_numeric_symbols_are_not_letters():
    assert split_words("x½ Ⅻx a² welt") == ["welt"]
    assert split_words("m² Fläche") == ["fläche"]
    assert split_words("Ⅻ ¾ ①②") == []


def test_unknown_languages_share_the_default_entry(tmp_path):
    (tmp_path / "stopwords.de.ini").write_text("[stopwords]\nwords = der die\n", encoding="utf-8")
    (tmp_path / "stopwords.en.ini").write_text("[stopwords]\nwords = the\n", encoding="utf-8")
    cache = StopWordCache(tmp_path)
    assert cache.available() == frozenset({"de", "en"})

    for i in range(300):
        assert cache.get(f"zz{i}") is cache.get("de")
    for lang in ["../etc/passwd", "x", "ENGLISH", "", None]:
        assert cache.resolve_lang(lang) == "de"
    assert cache.get("EN") == frozenset({"the"})
    assert set(cache._sets) == {"de", "en"}


def test_unknown_language_logs_missing_default_once(tmp_path, caplog):
    caplog.set_level(logging.WARNING, logger="phonetic.stopwords")
    cache = StopWordCache(tmp_path / "absent")
    for lang in ["fr", "it", "zz", "qq"]:
        assert cache.get(lang) is None
    assert sum("not found" in r.getMessage() for r in caplog.records) == 1
