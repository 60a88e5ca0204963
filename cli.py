#!/usr/bin/env python3
"""
CLI for the phonetic search index.

Commands:
  init                      Create the index tables
  index <content_id> <file> Index a UTF-8 text file under a 32-hex content id
  search <q>                Search; print matching content ids and links
  delete <content_id>       Remove all index rows of a content id
  encode <word>...          Show phonetic code and token for words
"""

import argparse
import logging
import sys
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError

from backend.app.config import DATABASE_URL, LOG_LEVEL
from backend.app.index_service import build_index_client
from indexer import ContentMetadata
from phonetic import cologne_phonetic, reverse_code_to_token
from storage import InvalidIdentifier, MissingIdentifier, StorageUnavailable


def cmd_init(args: argparse.Namespace) -> None:
    client = build_index_client(database_url=args.db)
    client.backend.connect()
    print("Index tables ready in", args.db)


def cmd_index(args: argparse.Namespace) -> None:
    path = Path(args.file)
    if not path.is_file():
        print("Not a file:", path, file=sys.stderr)
        sys.exit(1)
    client = build_index_client(database_url=args.db)
    meta = ContentMetadata(
        direct_link=args.link,
        title=args.title,
        description=args.description,
        lang=args.lang,
        read_roles=args.role,
    )
    report = client.index_content(args.content_id, path.read_text(encoding="utf-8", errors="replace"), meta)
    if not report.indexed:
        print("No indexable text in", path)
        return
    print("Indexed", report.content_id, "words:", report.words, "tokens:", report.tokens)


def cmd_search(args: argparse.Namespace) -> None:
    client = build_index_client(database_url=args.db)
    outcome = client.search(args.query, args.lang)
    if not outcome.ok:
        print("Search failed:", outcome.message, file=sys.stderr)
        sys.exit(1)
    print("Query:", outcome.query)
    print("Matches:", len(outcome.items))
    for hit in outcome.items:
        print(" -", hit.content_id, hit.title or "(untitled)", hit.direct_link)


def cmd_delete(args: argparse.Namespace) -> None:
    client = build_index_client(database_url=args.db)
    report = client.delete_content(args.content_id)
    print("Deleted", report.content_id, "index rows:", report.removed)
    for target, ok in report.targets.items():
        print(f" - {target}: {'ok' if ok else 'FAILED ' + report.errors.get(target, '')}")
    if not report.ok:
        sys.exit(1)


def cmd_encode(args: argparse.Namespace) -> None:
    for word in args.words:
        code = cologne_phonetic(word)
        token, length = reverse_code_to_token(code)
        print(f"{word}\t{code or '-'}\t{token}\t{length}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Phonetic (Cologne) full-text search index")
    parser.add_argument("--db", default=DATABASE_URL, help="SQLAlchemy database URL")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("init", help="Create the index tables")
    p_index = sub.add_parser("index", help="Index a text file")
    p_index.add_argument("content_id", help="32 hex character content id")
    p_index.add_argument("file", help="UTF-8 text file")
    p_index.add_argument("--link", default=None, help="Direct link shown in results")
    p_index.add_argument("--title", default="", help="Result title")
    p_index.add_argument("--description", default="", help="Result description")
    p_index.add_argument("--lang", default=None, help="Stop word language")
    p_index.add_argument("--role", type=int, action="append", default=None, help="Read role id (repeatable)")
    p_search = sub.add_parser("search", help="Search the index")
    p_search.add_argument("query", help="Query text")
    p_search.add_argument("--lang", default=None, help="Stop word language")
    p_delete = sub.add_parser("delete", help="Delete a content id from the index")
    p_delete.add_argument("content_id", help="32 hex character content id")
    p_encode = sub.add_parser("encode", help="Show phonetic codes and tokens")
    p_encode.add_argument("words", nargs="+", help="Words to encode")
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")
    commands = {
        "init": cmd_init,
        "index": cmd_index,
        "search": cmd_search,
        "delete": cmd_delete,
        "encode": cmd_encode,
    }
    try:
        commands[args.command](args)
    except (MissingIdentifier, InvalidIdentifier) as e:
        print(e, file=sys.stderr)
        sys.exit(2)
    except (StorageUnavailable, SQLAlchemyError) as e:
        print(e, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
