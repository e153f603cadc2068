"""Entry point for the Muzakir reader assistant."""

import argparse
import asyncio
import logging
import sys

from src.config import AppConfig, load_config
from src.dictionary.service import extract_lookup_target
from src.errors import MuzakirError
from src.models.query_result import ChatRequest
from src.services import Services, build_services
from src.storage.database import initialize_database

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Muzakir reader assistant")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the database schema")

    ask = sub.add_parser("ask", help="Answer a question about the corpus")
    ask.add_argument("question")
    ask.add_argument("--chapter", help="Title of the chapter being read")
    ask.add_argument("--reference", help="Selected passage the question is about")
    ask.add_argument(
        "--language", choices=["tr", "en"], help="Answer language (default: app.language)"
    )
    ask.add_argument(
        "--context-only",
        action="store_true",
        help="Print the assembled context instead of generating an answer",
    )

    search = sub.add_parser("search", help="Semantic search over passages")
    search.add_argument("query")
    search.add_argument("--limit", type=int)
    search.add_argument("--threshold", type=float)

    define = sub.add_parser("define", help="Look up a word in the dictionary")
    define.add_argument("selection", help="Selected word or phrase")
    define.add_argument("--following", help="Text that follows the selection")

    chapters = sub.add_parser("chapters", help="List the chapters of a book")
    chapters.add_argument("book_slug")

    return parser


async def _run(args: argparse.Namespace, config: AppConfig, services: Services) -> int:
    if args.command == "ask":
        if args.context_only:
            result = await services.pipeline.answer_question(
                args.question,
                current_chapter_title=args.chapter,
                reference_text=args.reference,
            )
            print(result.context or "(no relevant context found)")
            print("\nSources:")
            for source in result.sources:
                print(f"  - {source}")
            return 0

        response = await services.chat.respond(
            ChatRequest(
                question=args.question,
                current_chapter=args.chapter,
                language=args.language or config.app.language,
                reference_text=args.reference,
            )
        )
        print(response.response)
        if response.sources:
            print("\nSources:")
            for source in response.sources:
                print(f"  - {source}")
        return 0

    if args.command == "search":
        matches = await services.vector_store.search(
            args.query,
            limit=args.limit if args.limit is not None else config.retrieval.search_limit,
            threshold=(
                args.threshold if args.threshold is not None
                else config.retrieval.match_threshold
            ),
        )
        for match in matches:
            print(f"[{match.similarity:.3f}] {match.book_title} — {match.chapter_title}"
                  f" ({match.book_slug or '-'})")
            print(f"    {match.content[:200]}")
        return 0

    if args.command == "define":
        word, context = extract_lookup_target(args.selection, args.following)
        result = await services.dictionary.lookup(word, context)
        if not result.found or result.entry is None:
            print(f"No definition found for {word!r}")
            return 1
        print(f"{result.entry.word} ({result.method.value if result.method else '-'})")
        print(f"    {result.entry.definition}")
        return 0

    if args.command == "chapters":
        chapters = await services.chapters.list_chapters(args.book_slug)
        if not chapters:
            print(f"No chapters found for {args.book_slug!r}")
            return 1
        for chapter in chapters:
            print(f"  {chapter.chapter_number:>3}. {chapter.title}")
        return 0

    return 2


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, load configuration and run one command."""
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    logging.basicConfig(
        level=config.app.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Ensure the schema exists before any read
    initialize_database(config.storage.sqlite_path)
    if args.command == "init-db":
        logger.info("Database ready at %s", config.storage.sqlite_path)
        return 0

    services = build_services(config)
    try:
        return asyncio.run(_run(args, config, services))
    except MuzakirError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
