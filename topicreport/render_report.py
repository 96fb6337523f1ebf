from __future__ import annotations

import argparse
import json
from pathlib import Path

from .reporter import InvalidInputError, Reporter, open_reporter
from .types import ClusterInput, ReportRun


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render a saved topic-model run into a report log.")
    parser.add_argument("--run-path", required=True, help="JSON file with the run's pipeline outputs.")
    parser.add_argument("--log-path", default="output/report.log", help="Report destination (truncated).")
    parser.add_argument("--quiet", action="store_true", help="Write the log only, without console echo.")
    parser.add_argument(
        "--top-eigen",
        type=int,
        default=None,
        help="Number of leading eigenvalues to render (default: all).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    run_path = Path(args.run_path)
    if not run_path.exists():
        raise SystemExit(f"Run file not found: {run_path}")

    try:
        run = load_run(run_path)
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise SystemExit(f"Malformed run file {run_path}: {exc}") from exc

    log_path = Path(args.log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    with open_reporter(str(log_path)) as reporter:
        try:
            render_run(reporter, run, echo=not args.quiet, top_eigen=args.top_eigen)
        except InvalidInputError as exc:
            raise SystemExit(f"Cannot render {run_path}: {exc}") from exc

    print(f"Done. Report written to: {log_path.resolve()}")


def load_run(path: Path) -> ReportRun:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("top-level JSON must be an object")
    clusters = [
        ClusterInput(
            topic_id=topic_id,
            distsq=float(item["distsq"]),
            catchwords=[int(x) for x in item.get("catchwords", [])],
            closest_docs=[int(x) for x in item.get("closest_docs", [])],
            coherence=float(item["coherence"]),
            raw_coherence=float(item["raw_coherence"]),
        )
        for topic_id, item in enumerate(payload.get("clusters", []))
    ]
    return ReportRun(
        vocabulary=[str(term) for term in payload["vocabulary"]],
        catch_thresholds=[float(x) for x in payload["catch_thresholds"]],
        clusters=clusters,
        eigenvalues=[float(x) for x in payload.get("eigenvalues", [])],
    )


def render_run(reporter: Reporter, run: ReportRun, echo: bool = True, top_eigen: int | None = None) -> None:
    for cluster in run.clusters:
        reporter.write_text(f"Topic {cluster.topic_id} ({len(cluster.closest_docs)} docs)\n", echo)
        reporter.report_catchwords(
            cluster.topic_id,
            run.catch_thresholds,
            cluster.catchwords,
            run.vocabulary,
            echo=echo,
        )
    reporter.report_clusters(run.clusters, echo=echo)

    if run.eigenvalues:
        num_eigen = len(run.eigenvalues) if top_eigen is None else min(top_eigen, len(run.eigenvalues))
        reporter.report_eigen_spectrum(run.eigenvalues, num_eigen, echo=echo)


if __name__ == "__main__":
    main()
