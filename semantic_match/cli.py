#!/usr/bin/env python3
"""
Command-line access to training and matching.

Examples:
  semantic-match train "The cat sleeps on the mat." "Dogs are loyal animals."
  semantic-match train --file corpus.json
  semantic-match test "A cat is sleeping on a mat."
"""

import argparse
import asyncio
import json
import sys

from .core import config
from .core.exceptions import ModelLoadError
from .core.match_service import SemanticMatchService


def _load_sentences(path):
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
        raise ValueError(f"{path} must contain a JSON array of strings")
    return data


def train_command(service, args) -> int:
    sentences = list(args.sentences)
    if args.file:
        try:
            sentences.extend(_load_sentences(args.file))
        except (OSError, ValueError) as e:
            print(f"ERROR: {e}", file=sys.stderr)
            return 1

    outcome = asyncio.run(service.train_model(sentences))
    print(json.dumps({"success": outcome.success, "message": outcome.message,
                      "count": outcome.count, "failed": outcome.failed}, indent=2))
    return 0 if outcome.success else 1


def match_command(service, args) -> int:
    try:
        outcome = asyncio.run(service.match(args.sentence))
    except ModelLoadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    result = outcome.to_response()
    result["status"] = outcome.status.value
    print(json.dumps(result, indent=2))
    return 0


def main(argv=None, service=None) -> int:
    parser = argparse.ArgumentParser(
        prog="semantic-match",
        description="Train a sentence corpus and match sentences against it",
    )
    parser.add_argument("--training-file", default=None,
                        help=f"Persisted sentence list (default: {config.TRAINING_FILE})")
    parser.add_argument("--threshold", type=float, default=None,
                        help=f"Similarity threshold (default: {config.SIMILARITY_THRESHOLD})")
    subparsers = parser.add_subparsers(dest="command", required=True)

    train_parser = subparsers.add_parser("train", help="Replace the corpus with new sentences")
    train_parser.add_argument("sentences", nargs="*", help="Sentences to train on")
    train_parser.add_argument("--file", help="JSON file holding an array of sentences")

    test_parser = subparsers.add_parser("test", help="Find the best match for a sentence")
    test_parser.add_argument("sentence", help="Sentence to match")

    args = parser.parse_args(argv)

    issues = config.validate_config()
    if issues:
        for issue in issues:
            print(f"ERROR: {issue}", file=sys.stderr)
        return 1

    if service is None:
        service = SemanticMatchService(training_file=args.training_file, threshold=args.threshold)

    if args.command == "train":
        return train_command(service, args)
    return match_command(service, args)


if __name__ == "__main__":
    sys.exit(main())
