"""
Script to ingest property brochures into the embedded corpus.

Each PDF is read page by page, split into property records, embedded
and written to the corpus store, replacing whatever that document
produced on a previous run.

Usage:
    python -m propmatch.scripts.run_ingest brochure.pdf
    python -m propmatch.scripts.run_ingest a.pdf b.pdf --concurrency 4
    python -m propmatch.scripts.run_ingest brochure.pdf --source-id dubai-hills
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

import structlog

from propmatch.analysis import EmbeddingGenerator, RetryingEmbedder
from propmatch.config import configure_logging, get_settings
from propmatch.database import CorpusStore, get_corpus_store
from propmatch.exceptions import DocumentError
from propmatch.extraction import DocumentIngestor, PdfPageSource
from propmatch.indexing import EmbeddingIndexer

logger = structlog.get_logger()


async def run_ingest(
    paths: list[Path],
    source_id: Optional[str] = None,
    concurrency: Optional[int] = None,
    ingestor: Optional[DocumentIngestor] = None,
    indexer: Optional[EmbeddingIndexer] = None,
    store: Optional[CorpusStore] = None,
) -> dict:
    """
    Ingests brochures into the corpus.

    Args:
        paths: PDF files to ingest
        source_id: Corpus key; only valid with a single file (default: file stem)
        concurrency: Records embedded in parallel

    Returns:
        Run statistics
    """
    if source_id and len(paths) > 1:
        raise ValueError("--source-id can only be used with a single file")

    settings = get_settings()
    ingestor = ingestor or DocumentIngestor()
    if indexer is None:
        embedder = RetryingEmbedder(
            EmbeddingGenerator(), attempts=settings.embedding_retry_attempts
        )
        indexer = EmbeddingIndexer(
            embedder,
            store=store or get_corpus_store(settings),
            concurrency=concurrency or settings.index_concurrency,
        )

    stats = {
        "documents": len(paths),
        "documents_failed": 0,
        "records": 0,
        "indexed": 0,
        "index_errors": 0,
    }

    logger.info("Starting ingestion", documents=len(paths))

    for path in paths:
        source = PdfPageSource(path)
        doc_id = source_id or source.name

        try:
            records = ingestor.ingest(source)
        except DocumentError as e:
            stats["documents_failed"] += 1
            logger.error("Document skipped", path=str(path), error=str(e))
            continue

        result = await indexer.index_source(doc_id, records)
        stats["records"] += len(records)
        stats["indexed"] += result.succeeded
        stats["index_errors"] += result.failed

        logger.info(
            "Document indexed",
            source_id=doc_id,
            records=len(records),
            indexed=result.succeeded,
            failed=result.failed,
        )

    logger.info("Ingestion finished", **stats)
    return stats


def main():
    """Script entry point."""
    parser = argparse.ArgumentParser(
        description="Ingest property brochures into the embedded corpus"
    )
    parser.add_argument("files", nargs="+", type=Path, help="PDF brochures")
    parser.add_argument(
        "--source-id",
        default=None,
        help="Corpus key for the document (default: file name)",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Records embedded in parallel",
    )
    parser.add_argument("--log-level", default=None, help="Logging level")

    args = parser.parse_args()
    configure_logging(args.log_level)

    try:
        stats = asyncio.run(
            run_ingest(
                paths=args.files,
                source_id=args.source_id,
                concurrency=args.concurrency,
            )
        )
    except KeyboardInterrupt:
        logger.info("Ingestion interrupted by user")
        sys.exit(130)
    except Exception as e:
        logger.error("Fatal ingestion error", error=str(e))
        sys.exit(1)

    print("\n" + "=" * 50)
    print("INGESTION SUMMARY")
    print("=" * 50)
    print(f"Documents:         {stats['documents']}")
    print(f"Documents failed:  {stats['documents_failed']}")
    print(f"Records extracted: {stats['records']}")
    print(f"Records indexed:   {stats['indexed']}")
    print(f"Indexing errors:   {stats['index_errors']}")
    print("=" * 50)

    if stats["documents_failed"] or stats["index_errors"]:
        sys.exit(1)


if __name__ == "__main__":
    main()
