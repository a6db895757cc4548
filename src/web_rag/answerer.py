"""Retrieval-augmented answering for a single question."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from web_rag.generation.llm import GenerationModel
from web_rag.generation.prompts import build_answer_prompt, format_result
from web_rag.retrieval.models import Document
from web_rag.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)

NO_CONTEXT_MESSAGE = "\nNo relevant context found. Please try a different question."


class Answerer:
    """Grounds each question in retrieved chunks and streams the answer.

    Parameters
    ----------
    retriever:
        Applies the top-k / threshold policy.
    generator:
        Chat model producing the answer.
    temperature:
        Sampling temperature for every generation call.
    out:
        Stream receiving results and answer fragments.
    """

    def __init__(
        self,
        retriever: SemanticRetriever,
        generator: GenerationModel,
        *,
        temperature: float = 0.8,
        out: TextIO | None = None,
    ) -> None:
        self._retriever = retriever
        self._generator = generator
        self.temperature = temperature
        self._out = out or sys.stdout

    def answer(self, question: str) -> str | None:
        """Answer *question*, writing progress and output to the stream.

        Returns the full generated text, or ``None`` when nothing was
        generated: a blank question, no relevant context, or a failed
        search or generation call.
        """
        if not question.strip():
            logger.debug("Ignoring blank question")
            return None

        try:
            results = self._retriever.search(question)
        except Exception as exc:
            logger.exception("Search failed for %r", question)
            self._print(f"Failed to search for relevant documents: {exc}")
            return None

        if not results:
            self._print(NO_CONTEXT_MESSAGE)
            return None

        self.display_results(results)
        return self.generate(question, results)

    def display_results(self, results: list[Document]) -> None:
        self._print(f"\nFound {len(results)} relevant documents:")
        for rank, doc in enumerate(results, 1):
            self._print(f"\n{format_result(rank, doc)}")
        self._print("")

    def generate(self, question: str, results: list[Document]) -> str | None:
        """Stream an answer grounded in *results*; fragments are written as they arrive."""
        messages = build_answer_prompt(question, results)
        self._print("Generating answer...\n")

        fragments: list[str] = []
        try:
            for fragment in self._generator.stream(messages, temperature=self.temperature):
                fragments.append(fragment)
                print(fragment, end="", file=self._out, flush=True)
        except Exception as exc:
            logger.exception("Generation failed")
            self._print(f"\nFailed to generate an answer: {exc}")
            return None

        self._print("")
        return "".join(fragments)

    def _print(self, message: str) -> None:
        print(message, file=self._out, flush=True)
