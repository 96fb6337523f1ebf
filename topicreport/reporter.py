from __future__ import annotations

import io
import sys
import threading
from typing import Iterable, Sequence, TextIO

import numpy as np

from .types import CatchwordEntry, ClusterInput, ClusterSummary

SLAB_SIZE = 100


class ReporterError(Exception):
    pass


class DestinationUnavailableError(ReporterError, OSError):
    pass


class InvalidInputError(ReporterError, ValueError):
    pass


class ReporterClosedError(ReporterError):
    pass


class Reporter:
    def __init__(self, path: str, console: TextIO | None = None) -> None:
        self.path = str(path)
        self._console = console
        self._lock = threading.Lock()
        self._closed = False
        try:
            self._out = open(self.path, "w", encoding="utf-8", newline="")
        except OSError as exc:
            self._closed = True
            raise DestinationUnavailableError(f"Cannot open report destination {self.path}: {exc}") from exc

    def __enter__(self) -> Reporter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        if not getattr(self, "_closed", True):
            self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._out.close()

    def write_text(self, text: str, echo_to_console: bool = True) -> None:
        self._commit(text, echo_to_console)

    def write_buffer(self, buffer: io.StringIO | Iterable[str], echo_to_console: bool = True) -> None:
        if isinstance(buffer, io.StringIO):
            text = buffer.getvalue()
        else:
            text = "".join(buffer)
        self._commit(text, echo_to_console)

    def report_catchwords(
        self,
        topic_id: int,
        threshold_values: Sequence[float],
        catchword_indices: Sequence[int],
        vocabulary: Sequence[str],
        echo: bool = True,
    ) -> None:
        # topic_id is not rendered; the caller prints its own topic header.
        entries = catchword_entries(threshold_values, catchword_indices, vocabulary)
        out = io.StringIO()
        out.write("Catchwords:\n")
        for entry in entries:
            out.write(f"{entry.term}:{entry.word_id}({_fmt_float(entry.threshold)}) ")
        out.write("\n")
        self.write_buffer(out, echo)

    def report_cluster_summary(
        self,
        num_topics: int,
        distances: Sequence[float],
        catchwords_per_topic: Sequence[Sequence[int]],
        closest_docs_per_topic: Sequence[Sequence[int]],
        coherences: Sequence[float],
        nl_coherences: Sequence[float],
        echo: bool = True,
    ) -> None:
        if num_topics < 0:
            raise InvalidInputError(f"num_topics must be non-negative, got {num_topics}")
        arrays = {
            "distances": distances,
            "catchwords_per_topic": catchwords_per_topic,
            "closest_docs_per_topic": closest_docs_per_topic,
            "coherences": coherences,
            "nl_coherences": nl_coherences,
        }
        for name, values in arrays.items():
            if len(values) != num_topics:
                raise InvalidInputError(f"{name} has {len(values)} entries, expected {num_topics}")

        clusters = [
            ClusterInput(
                topic_id=t,
                distsq=float(distances[t]),
                catchwords=list(catchwords_per_topic[t]),
                closest_docs=list(closest_docs_per_topic[t]),
                coherence=float(coherences[t]),
                raw_coherence=float(nl_coherences[t]),
            )
            for t in range(num_topics)
        ]
        self.report_clusters(clusters, echo)

    def report_clusters(self, clusters: Sequence[ClusterInput], echo: bool = True) -> None:
        summaries = cluster_summaries(clusters)
        out = io.StringIO()
        catchless = 0
        for s in summaries:
            out.write(
                f"{'Cluster':<12}{s.topic_id}"
                f"{'  size:':<12}{s.size}"
                f"{'  distsq_sum:':<15}{_fmt_float(s.distsq)}"
                f"{'  raw_coh:':<15}{_fmt_float(s.raw_coherence)}"
                f"{'  flt_coh:':<15}{_fmt_float(s.coherence)}"
                f"  #catchwords: {s.num_catchwords}\n"
            )
            if s.num_catchwords == 0:
                catchless += 1
        out.write(f"#Topics with no catchwords: {catchless}({len(summaries)})\n")
        self.write_buffer(out, echo)

    def report_eigen_spectrum(self, eigenvalues: Sequence[float], num_topics: int, echo: bool = True) -> None:
        values = _checked_eigenvalues(eigenvalues, num_topics)
        roots = np.sqrt(values)

        out = io.StringIO()
        out.write("Eigvals:  ")
        for t, root in enumerate(roots):
            out.write(f"({t}): {_fmt_float(root)}\t")
        out.write("\n")
        for slab, total in enumerate(_slab_cumulative(values)):
            out.write(f"Sum of Top-{(slab + 1) * SLAB_SIZE} eig vals: {_fmt_float(total)}\n")
        self.write_buffer(out, echo)

    def _commit(self, text: str, echo: bool) -> None:
        with self._lock:
            if self._closed:
                raise ReporterClosedError(f"Reporter for {self.path} is closed")
            if not text:
                return
            try:
                self._out.write(text)
                self._out.flush()
            except OSError as exc:
                raise DestinationUnavailableError(f"Cannot write report destination {self.path}: {exc}") from exc
            if echo:
                console = self._console if self._console is not None else sys.stdout
                console.write(text)
                console.flush()


def open_reporter(path: str, console: TextIO | None = None) -> Reporter:
    """Open a reporter, terminating the process if the destination is unusable."""
    try:
        return Reporter(path, console=console)
    except DestinationUnavailableError as exc:
        raise SystemExit(str(exc)) from exc


def catchword_entries(
    threshold_values: Sequence[float],
    catchword_indices: Sequence[int],
    vocabulary: Sequence[str],
) -> list[CatchwordEntry]:
    entries: list[CatchwordEntry] = []
    for idx in catchword_indices:
        word_id = int(idx)
        if not 0 <= word_id < len(vocabulary) or word_id >= len(threshold_values):
            raise InvalidInputError(f"Catchword index {word_id} out of range")
        entries.append(CatchwordEntry(word_id, vocabulary[word_id], float(threshold_values[word_id])))
    return entries


def cluster_summaries(clusters: Sequence[ClusterInput]) -> list[ClusterSummary]:
    summaries = [
        ClusterSummary(
            topic_id=c.topic_id,
            size=len(c.closest_docs),
            distsq=c.distsq,
            raw_coherence=c.raw_coherence,
            coherence=c.coherence,
            num_catchwords=len(c.catchwords),
        )
        for c in clusters
    ]
    summaries.sort(key=lambda s: (s.size, s.topic_id))
    return summaries


def slab_cumulative_sums(eigenvalues: Sequence[float], num_topics: int) -> np.ndarray:
    return _slab_cumulative(_checked_eigenvalues(eigenvalues, num_topics))


def _checked_eigenvalues(eigenvalues: Sequence[float], num_topics: int) -> np.ndarray:
    values = np.asarray(eigenvalues, dtype=float).reshape(-1)
    if num_topics < 0 or num_topics > values.shape[0]:
        raise InvalidInputError(f"num_topics={num_topics} outside eigenvalue range 0..{values.shape[0]}")
    values = values[:num_topics]
    if np.any(np.isnan(values)) or np.any(values < 0):
        raise InvalidInputError("Eigenvalues must be non-negative numbers")
    return values


def _slab_cumulative(values: np.ndarray) -> np.ndarray:
    n_slabs = values.shape[0] // SLAB_SIZE
    if n_slabs == 0:
        return np.zeros(0, dtype=float)
    slab_totals = values[: n_slabs * SLAB_SIZE].reshape(n_slabs, SLAB_SIZE).sum(axis=1)
    return np.cumsum(slab_totals)


def _fmt_float(value: float) -> str:
    return format(float(value), "g")
