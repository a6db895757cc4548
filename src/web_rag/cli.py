"""Command-line entry point: ingest URLs, then answer questions interactively.

Usage::

    web-rag https://example.com/a https://example.com/b
    web-rag --collection docs --top-k 3 https://example.com
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Any, TextIO

from pydantic import ValidationError

from web_rag.answerer import Answerer
from web_rag.config import Settings, settings
from web_rag.exceptions import WebRagError
from web_rag.generation.llm import get_generator
from web_rag.ingestion.embedder import get_embedder
from web_rag.ingestion.pipeline import IngestionPipeline
from web_rag.retrieval.chroma_store import ChromaVectorStore
from web_rag.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)

PROMPT = "\nPlease enter your question>>> "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="web-rag",
        description="Load web pages into a vector store and answer questions about them.",
    )
    parser.add_argument("urls", nargs="+", metavar="URL", help="web page to ingest")
    parser.add_argument("--collection", help="vector-store collection (default: fresh per run)")
    parser.add_argument("--chunk-size", type=int, help="maximum characters per chunk")
    parser.add_argument("--batch-size", type=int, help="documents per store write")
    parser.add_argument("--top-k", type=int, help="maximum results per question")
    parser.add_argument("--score-threshold", type=float, help="minimum similarity in [0, 1]")
    parser.add_argument("--log-level", help="logging level, e.g. INFO or DEBUG")
    return parser


def resolve_settings(args: argparse.Namespace, base: Settings = settings) -> Settings:
    """Return *base* with command-line overrides applied and validated."""
    overrides: dict[str, Any] = {
        "chroma_collection": args.collection,
        "chunk_size": args.chunk_size,
        "batch_size": args.batch_size,
        "top_k": args.top_k,
        "score_threshold": args.score_threshold,
        "log_level": args.log_level,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if not overrides:
        return base
    return Settings(**{**base.model_dump(), **overrides})


def run_interactive(
    answerer: Answerer,
    *,
    stdin: TextIO | None = None,
    out: TextIO | None = None,
    prompt: str = PROMPT,
) -> None:
    """Prompt for questions and answer them until input ends.

    There is no quit command; the loop stops on end of input or Ctrl-C.
    """
    stdin = stdin or sys.stdin
    out = out or sys.stdout
    while True:
        print(prompt, end="", file=out, flush=True)
        try:
            line = stdin.readline()
        except KeyboardInterrupt:
            print(file=out)
            return
        if not line:
            print(file=out)
            return
        try:
            answerer.answer(line.strip())
        except KeyboardInterrupt:
            print("\nInterrupted.", file=out, flush=True)


def main(argv: Sequence[str] | None = None, *, stdin: TextIO | None = None, out: TextIO | None = None) -> int:
    args = build_parser().parse_args(argv)
    out = out or sys.stdout

    try:
        cfg = resolve_settings(args)
    except ValidationError as exc:
        print(f"Error: invalid configuration: {exc}", file=out)
        return 1

    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        embedder = get_embedder(
            model=cfg.embedding_model,
            base_url=cfg.embedding_base_url,
            api_key=cfg.openai_api_key,
            timeout=cfg.llm_timeout,
        )
        store = ChromaVectorStore(
            embedder,
            cfg.chroma_collection,
            host=cfg.chroma_host,
            port=cfg.chroma_port,
            path=cfg.chroma_path,
        )
        if not store.health_check():
            raise WebRagError("Vector store is not reachable")

        pipeline = IngestionPipeline(
            store,
            chunk_size=cfg.chunk_size,
            chunk_overlap=cfg.chunk_overlap,
            batch_size=cfg.batch_size,
            request_timeout=cfg.request_timeout,
            fetch_retries=cfg.fetch_retries,
            write_retries=cfg.write_retries,
            retry_backoff=cfg.retry_backoff,
            out=out,
        )
        pipeline.ingest(args.urls)

        generator = get_generator(
            temperature=cfg.llm_temperature,
            model=cfg.llm_model_name,
            base_url=cfg.llm_base_url,
            api_key=cfg.openai_api_key,
            timeout=cfg.llm_timeout,
        )
    except Exception as exc:
        logger.debug("Startup failed", exc_info=True)
        print(f"Error: {exc}", file=out)
        return 1

    retriever = SemanticRetriever(store, k=cfg.top_k, score_threshold=cfg.score_threshold)
    answerer = Answerer(retriever, generator, temperature=cfg.llm_temperature, out=out)
    run_interactive(answerer, stdin=stdin, out=out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
