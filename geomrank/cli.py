"""Command-line interface for geomrank - geometric re-ranking of visual-term search results."""

import json
from pathlib import Path
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.types import ResultSet
from .index.position_index import PositionIndex, QueryDocument
from .index.posting import PayloadPostingList, PositionPayloadCoordinator
from .match.rerank import MODEL_NAMES, verifier_from_settings
from .match.score import ScoringScheme
from .utils.config import settings
from .utils.error_handler import ConfigurationError, GeomRankError
from .utils.log import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

console = Console()

app = typer.Typer(
    name="geomrank",
    help="Geometric re-ranking of image search results by RANSAC over matched visual terms",
    add_completion=False
)

SCHEME_FORMULAS = {
    ScoringScheme.BINARY: "s if fit else 0",
    ScoringScheme.MULTIPLY_NUM_MATCHES: "inliers * s if fit else 0",
    ScoringScheme.NUM_MATCHES: "inliers if fit else 0",
    ScoringScheme.MULTIPLY_PERCENTAGE_MATCHES: "inliers / (inliers + outliers) * s if fit else 0",
    ScoringScheme.PERCENTAGE_MATCHES: "inliers / (inliers + outliers) if fit else 0",
}


def _build_posting_list(occurrences) -> PayloadPostingList:
    """One posting list from ``[term, x, y]`` rows; a bare ``[term]`` has no position."""
    posting_list = PayloadPostingList(PositionPayloadCoordinator())
    for row in occurrences:
        if len(row) >= 3:
            posting_list.insert(row[0], (float(row[1]), float(row[2])))
        else:
            posting_list.insert(row[0])
    return posting_list


def load_fixture(path: Path) -> Tuple[PositionIndex, QueryDocument, ResultSet]:
    """Load an index, a query and an initial ranking from a JSON file.

    The file holds ``documents`` (doc id -> ``[[term, x, y], ...]``),
    ``query`` (``[[term, x, y], ...]``) and ``results`` (``[[doc_id, score], ...]``
    in rank order).

    Raises:
        ConfigurationError: If the file is missing, is not JSON or lacks a section
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            f"Cannot read fixture: {path}",
            details={"path": str(path), "error": str(e)}
        )

    missing = [key for key in ("documents", "query", "results") if key not in data]
    if missing:
        raise ConfigurationError(
            f"Fixture is missing sections: {missing}",
            details={"path": str(path), "missing": missing}
        )

    index = PositionIndex()
    for doc_id, occurrences in data["documents"].items():
        index.add_document(int(doc_id), _build_posting_list(occurrences))

    query = QueryDocument.from_positions((row[0], row[1:]) for row in data["query"])
    results = data["results"]
    result_set = ResultSet(
        doc_ids=[int(doc_id) for doc_id, _score in results],
        scores=[float(score) for _doc_id, score in results],
    )
    return index, query, result_set


@app.callback()
def main_options(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL for this run"),
):
    """Geometric re-ranking of image search results."""
    if log_level:
        configure_logging(log_level)


@app.command()
def rerank(
    fixture: Path = typer.Argument(..., help="JSON file with documents, query and initial results"),
    model: str = typer.Option("affine", "--model", "-m", help=f"Transform to fit: {', '.join(MODEL_NAMES)}"),
    scheme: Optional[str] = typer.Option(None, "--scheme", "-s", help="Scoring scheme name"),
    num_docs: Optional[int] = typer.Option(None, "--num-docs", "-n", help="Documents to re-rank (<= 0 for all)"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for RANSAC sampling"),
):
    """Re-rank the initial results of a fixture and print the new ranking."""
    overrides = {}
    if scheme is not None:
        overrides["GEOM_SCORING_SCHEME"] = scheme
    if num_docs is not None:
        overrides["GEOM_NUM_DOCS_RERANK"] = num_docs
    if seed is not None:
        overrides["RANSAC_SEED"] = seed
    run_settings = settings.model_copy(update=overrides)

    try:
        verifier = verifier_from_settings(model, run_settings)
        index, query, result_set = load_fixture(fixture)
    except GeomRankError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    original = result_set.scores.copy()
    modified = verifier.modify_scores(index, query, result_set)

    console.print(Panel.fit(
        f"[bold blue]Geometric re-ranking[/bold blue]\n"
        f"[dim]model={model} scheme={verifier.config.scoring_scheme.value} "
        f"documents={result_set.size} indexed_terms={len(index)}[/dim]",
        border_style="blue"
    ))

    table = Table(title="Re-ranked results")
    table.add_column("Rank", justify="right")
    table.add_column("Doc", justify="right")
    table.add_column("Original", justify="right")
    table.add_column("Score", justify="right", style="green")

    order = sorted(range(result_set.size), key=lambda i: -result_set.scores[i])
    for new_rank, i in enumerate(order, start=1):
        table.add_row(
            str(new_rank),
            str(int(result_set.doc_ids[i])),
            f"{original[i]:.4f}",
            f"{result_set.scores[i]:.4f}",
        )
    console.print(table)

    if not modified:
        console.print("[yellow]⚠ Empty result set, nothing re-ranked[/yellow]")
    logger.info("Fixture re-ranked", fixture=str(fixture), modified=modified)


@app.command()
def schemes():
    """List the available scoring schemes."""
    table = Table(title="Scoring schemes")
    table.add_column("Name", style="bold")
    table.add_column("Score")
    for s in ScoringScheme:
        name = f"{s.value} (default)" if s.value == settings.GEOM_SCORING_SCHEME else s.value
        table.add_row(name, SCHEME_FORMULAS[s])
    console.print(table)
