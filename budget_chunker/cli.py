"""
Command-line interface for text chunking
"""
import sys
import json
import logging
import argparse

from budget_chunker.config import MAX_TOKENS_PER_CHUNK, TOKEN_COUNTER, TIKTOKEN_ENCODING, CHUNKER_MAX_WORKERS
from budget_chunker.core.chunking import Chunker, ChunkingError
from budget_chunker.core.counters import get_token_counter

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Split a text file into chunks that fit a token budget.")
    parser.add_argument("-i", "--input", default=None, help="Path to the input text file (default: read stdin).")
    parser.add_argument("-t", "--max_tokens", type=int, default=MAX_TOKENS_PER_CHUNK, help=f"Maximum tokens per chunk (default: {MAX_TOKENS_PER_CHUNK}).")
    parser.add_argument("--counter", default=TOKEN_COUNTER, choices=["tiktoken", "words"], help=f"Token counter to use (default: {TOKEN_COUNTER}).")
    parser.add_argument("--encoding", default=TIKTOKEN_ENCODING, help=f"tiktoken encoding name (default: {TIKTOKEN_ENCODING}).")
    parser.add_argument("--format", default="text", choices=["text", "jsonl"], help="Output format (default: text).")
    parser.add_argument("--stats", action="store_true", help="Print chunk statistics to stderr.")
    parser.add_argument("--workers", type=int, default=CHUNKER_MAX_WORKERS, help=f"Worker threads for token counting (default: {CHUNKER_MAX_WORKERS}).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if args.max_tokens <= 0:
        parser.error("--max_tokens must be a positive integer")
    if args.workers < 1:
        parser.error("--workers must be at least 1")

    if args.input:
        with open(args.input, 'r', encoding='utf-8') as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    if args.counter == "tiktoken":
        token_counter = get_token_counter("tiktoken", encoding_name=args.encoding)
    else:
        token_counter = get_token_counter(args.counter)

    try:
        chunker = Chunker(args.max_tokens, token_counter, max_workers=args.workers)
        chunks = chunker.chunk_text(text)
    except ChunkingError as e:
        logger.error(f"Chunking failed: {str(e)}")
        return 1

    for index, chunk in enumerate(chunks):
        if args.format == "jsonl":
            print(json.dumps({
                "index": index,
                "text": chunk.text,
                "token_count": chunk.token_count,
                "start": chunk.start,
                "end": chunk.end,
            }, ensure_ascii=False))
        else:
            if index:
                print("-" * 80)
            print(chunk.text)

    if args.stats:
        stats = chunker.get_stats(chunks)
        print(stats.summary(), file=sys.stderr)
        print(json.dumps(stats.to_dict(), indent=2), file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
