"""Dictionary-based spell checker that writes a JSON correction report."""

from __future__ import annotations

import argparse
import json
import os
import sys
import time
import tracemalloc
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from trainingkit.editdistance import edit_distance
from trainingkit.suggest_bst import SuggestionTree
from trainingkit.trie import Trie

DICTIONARY_SAMPLE_LIMIT = 500_000
MAX_DISTANCE = 2
AUTOCOMPLETE_LIMIT = 10


@dataclass
class Correction:
    """A misspelled word and its ranked suggestions."""

    word: str
    suggestions: List[str] = field(default_factory=list)


@dataclass
class Report:
    """Summary of a spell-checking run."""

    total_words: int = 0
    misspelled_words: int = 0
    corrections: List[Correction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_words": self.total_words,
            "misspelled_words": self.misspelled_words,
            "corrections": [
                {"word": c.word, "suggestions": list(c.suggestions)} for c in self.corrections
            ],
        }


class _CallProfiler:
    """Call counts and wall-clock time per function on the profiled thread."""

    def __init__(self) -> None:
        self._totals: Dict[str, List[float]] = {}
        self._stack: List[Tuple[str, float]] = []

    @staticmethod
    def _key(frame: Any, event: str, arg: Any) -> str:
        if event.startswith("c_"):
            return f"<built-in {getattr(arg, '__qualname__', repr(arg))}>"
        code = frame.f_code
        return f"{code.co_filename}:{code.co_firstlineno}({code.co_name})"

    def _hook(self, frame: Any, event: str, arg: Any) -> None:
        if event in ("call", "c_call"):
            self._stack.append((self._key(frame, event, arg), time.perf_counter()))
        elif event in ("return", "c_return", "c_exception") and self._stack:
            key, started = self._stack.pop()
            entry = self._totals.setdefault(key, [0, 0.0])
            entry[0] += 1
            entry[1] += time.perf_counter() - started

    def enable(self) -> None:
        sys.setprofile(self._hook)

    def disable(self) -> None:
        sys.setprofile(None)

    def dump(self, path: str) -> None:
        rows = sorted(self._totals.items(), key=lambda kv: kv[1][1], reverse=True)
        with open(path, "w", encoding="utf-8") as out:
            out.write(f"{'calls':>10} {'seconds':>12}  function\n")
            for key, (calls, seconds) in rows:
                out.write(f"{int(calls):>10} {seconds:12.6f}  {key}\n")


def load_dictionary(lines: Iterable[str]) -> Tuple[Trie, List[str]]:
    """Index non-blank lines into a trie; also return the words kept for matching."""
    trie = Trie()
    words: List[str] = []
    for line in lines:
        word = line.strip()
        if not word:
            continue
        trie.insert(word)
        if len(words) < DICTIONARY_SAMPLE_LIMIT:
            words.append(word)
    return trie, words


def suggest_corrections(
    word: str, trie: Trie, dictionary: Sequence[str], max_distance: int = MAX_DISTANCE
) -> List[str]:
    """Dictionary words within ``max_distance`` edits of ``word``, most relevant first."""
    tree = SuggestionTree()
    for candidate in dictionary:
        distance = edit_distance(word, candidate, max_distance)
        if distance > max_distance:
            continue
        _, freq = trie.search(candidate)
        tree.insert(candidate, distance, freq)
    return tree.suggestions()


def check_words(
    words: Iterable[str],
    trie: Trie,
    dictionary: Sequence[str],
    workers: Optional[int] = None,
) -> Report:
    """Check each non-blank line and collect corrections for unknown words."""
    report = Report()
    misspelled: List[str] = []
    for line in words:
        word = line.strip()
        if not word:
            continue
        report.total_words += 1
        found, _ = trie.search(word)
        if not found:
            misspelled.append(word)
    report.misspelled_words = len(misspelled)

    with ThreadPoolExecutor(max_workers=workers or os.cpu_count() or 1) as pool:
        results = pool.map(lambda w: suggest_corrections(w, trie, dictionary), misspelled)
        report.corrections = [
            Correction(word, suggestions) for word, suggestions in zip(misspelled, results)
        ]
    return report


def _run(args: argparse.Namespace) -> bool:
    start = time.perf_counter()
    try:
        words_file = open(args.words, encoding="utf-8")
    except OSError as exc:
        print(exc)
        return False
    with words_file:
        print(f"Indexing words from {args.words}...")
        trie, dictionary = load_dictionary(words_file)
    print(f"Total indexing time: {time.perf_counter() - start:.6f}s")

    print("Enter word for auto completion")
    tokens = sys.stdin.readline().split()
    query = tokens[0] if tokens else ""
    matches, _ = trie.autocomplete(query, AUTOCOMPLETE_LIMIT)
    print("Suggestions for", query, "are:", ", ".join(matches))

    try:
        input_file = open(args.input, encoding="utf-8")
    except OSError as exc:
        print(exc)
        return False
    workers = os.cpu_count() or 1
    print(f"Processing input with {workers} workers...")
    with input_file:
        report = check_words(input_file, trie, dictionary, workers)
    print(f"Total time taken: {time.perf_counter() - start:.6f}s")

    try:
        with open(args.report, "w", encoding="utf-8") as out:
            json.dump(report.to_dict(), out)
            out.write("\n")
    except OSError as exc:
        print(exc)
        return False
    print(f"Report written to {args.report}")
    return True


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Index the dictionary, offer autocompletion, then check the input file."""
    parser = argparse.ArgumentParser(prog="spellcheck", description=__doc__)
    parser.add_argument("--cpuprofile", default="", metavar="FILE", help="write cpu profile to FILE")
    parser.add_argument("--memprofile", default="", metavar="FILE", help="write memory profile to FILE")
    parser.add_argument("--words", default="words.txt", help="dictionary file")
    parser.add_argument("--input", default="input.txt", help="words to check")
    parser.add_argument("--report", default="report.json", help="where to write the report")
    args = parser.parse_args(argv)

    profiler: Optional[_CallProfiler] = None
    if args.cpuprofile:
        try:
            open(args.cpuprofile, "w", encoding="utf-8").close()
        except OSError as exc:
            print(f"could not create CPU profile: {exc}", file=sys.stderr)
            return
        profiler = _CallProfiler()
        profiler.enable()
    if args.memprofile:
        tracemalloc.start()

    try:
        succeeded = _run(args)
        if succeeded and args.memprofile:
            try:
                tracemalloc.take_snapshot().dump(args.memprofile)
            except OSError as exc:
                print(f"could not write memory profile: {exc}", file=sys.stderr)
    finally:
        if tracemalloc.is_tracing():
            tracemalloc.stop()
        if profiler is not None:
            profiler.disable()
            try:
                profiler.dump(args.cpuprofile)
            except OSError as exc:
                print(f"could not write CPU profile: {exc}", file=sys.stderr)


if __name__ == "__main__":
    main()