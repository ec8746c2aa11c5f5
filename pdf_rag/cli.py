"""
Command line entry point.

    pdf-rag ingest <pdf> [--chunk-size N] [--chunk-overlap N]
    pdf-rag query <question...> [--top-k N]
    pdf-rag pipeline <pdf> [question...]
    pdf-rag serve

Dependencies: argparse, pdf_rag.core.orchestrator, pdf_rag.api.main
System role: Operator access to the pipeline without the HTTP server
"""

import argparse
import asyncio
import logging
import sys

from pdf_rag.boundary.vdb import QdrantConnection
from pdf_rag.configs import get_settings
from pdf_rag.core.exceptions import PdfRagError
from pdf_rag.core.orchestrator import Orchestrator
from pdf_rag.core.processing_config import ProcessingConfig
from pdf_rag.observability import configure_logging
from pdf_rag.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

DEFAULT_QUESTION = "What is the leave policy?"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pdf-rag", description="PDF RAG pipeline")
    commands = parser.add_subparsers(dest="command", required=True)

    ingest = commands.add_parser("ingest", help="Load, chunk, embed and store a PDF")
    ingest.add_argument("pdf")
    ingest.add_argument("--chunk-size", type=int)
    ingest.add_argument("--chunk-overlap", type=int)

    query = commands.add_parser("query", help="Ask a question of the knowledge base")
    query.add_argument("question", nargs="+")
    query.add_argument("--top-k", type=int)

    pipeline = commands.add_parser("pipeline", help="Ingest a PDF, then ask a question")
    pipeline.add_argument("pdf")
    pipeline.add_argument("question", nargs="*")
    pipeline.add_argument("--chunk-size", type=int)
    pipeline.add_argument("--chunk-overlap", type=int)
    pipeline.add_argument("--top-k", type=int)

    commands.add_parser("serve", help="Run the HTTP API")
    return parser


def _config_for(args: argparse.Namespace, base: ProcessingConfig) -> ProcessingConfig:
    overrides = {
        field: value
        for field, value in (
            ("chunk_size", getattr(args, "chunk_size", None)),
            ("chunk_overlap", getattr(args, "chunk_overlap", None)),
        )
        if value is not None
    }
    return base.with_overrides(**overrides) if overrides else base


async def _run(args: argparse.Namespace) -> None:
    settings = get_settings()
    config = _config_for(args, ProcessingConfig.from_settings(settings))
    top_k = getattr(args, "top_k", None) or settings.pipeline.default_top_k

    async with QdrantConnection.from_settings(settings.qdrant) as connection:
        orchestrator = Orchestrator(connection, settings.qdrant.collection)

        if args.command in ("ingest", "pipeline"):
            result = await orchestrator.process_pdf(args.pdf, config)
            print(
                f"Stored {result.chunk_count} chunks from {result.page_count} pages "
                f"in {result.processing_time_ms:.0f} ms"
            )

        if args.command in ("query", "pipeline"):
            question = " ".join(args.question) or DEFAULT_QUESTION
            answer = await orchestrator.query_knowledge_base(question, config, top_k=top_k)
            for rank, item in enumerate(answer.results, start=1):
                print(f"#{rank} score={item.score:.4f} page={item.record.metadata.get('page')}")
            print()
            print(answer.answer)


def main(argv: list[str] | None = None) -> int:
    """
    Run the CLI.

    Returns:
        int: Process exit code (1 on pipeline errors)
    """
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)

    if args.command == "serve":
        from pdf_rag.api.main import main as serve

        serve()
        return 0

    try:
        asyncio.run(_run(args))
    except PdfRagError as e:
        log_exception_with_context(logger, f"{args.command} failed", e)
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
