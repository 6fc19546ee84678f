"""CLI entry point for blogclust."""

import json
import logging
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from .config import load_config, DEFAULT_CONFIG

console = Console()


@click.group()
@click.option("--config", "-c", "config_path", default=None, help="Path to config file")
@click.option("--verbose", "-v", count=True, help="More logging (-v info, -vv debug)")
@click.pass_context
def cli(ctx, config_path, verbose):
    """blogclust - group blogs by word usage with Pearson k-means."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


def _get_config(ctx) -> dict:
    config = load_config(ctx.obj.get("config_path"))
    _setup_logging(config, ctx.obj.get("verbose", 0))
    return config


def _setup_logging(config: dict, verbose: int) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, str(config.get("log_level", "WARNING")).upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _resolve_dataset(ctx, data) -> tuple[dict, Path]:
    """Load config and locate the dataset, exiting on bad config or a missing file."""
    try:
        config = _get_config(ctx)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        ctx.exit(1)

    data_path = Path(data) if data else Path(config["data_path"])
    if not data_path.is_file():
        console.print(f"[red]Dataset not found: {data_path}[/]")
        ctx.exit(1)
    return config, data_path


@cli.command()
@click.option("--path", default=None, help="Directory for config.yaml (default: ~/.blogclust)")
def init(path):
    """Write a default configuration file."""
    import yaml

    base = Path(path).expanduser().resolve() if path else Path("~/.blogclust").expanduser()
    base.mkdir(parents=True, exist_ok=True)

    config_file = base / "config.yaml"
    if config_file.exists():
        console.print(f"[yellow]Config already exists: {config_file}[/]")
        return

    header = (
        "# Tab-separated dataset: header row of words, then name + counts per blog\n"
        "# (or set BLOGCLUST_DATA env var)\n\n"
    )
    config_file.write_text(header + yaml.dump(DEFAULT_CONFIG, default_flow_style=False))
    console.print(f"[green]✓ Created config: {config_file}[/]")


def render_tree(payload: dict) -> Tree:
    """Expandable-style tree of clusters and their blogs."""
    tree = Tree("[bold]Clusters[/]")
    for key, value in payload.items():
        branch = tree.add(f"[cyan]Cluster {int(key) + 1}[/] (Count: {value['count']})")
        for blog in value["blogs"]:
            branch.add(escape(blog))
    return tree


def render_table(payload: dict) -> Table:
    table = Table(title="Clusters")
    table.add_column("#", style="dim", width=3)
    table.add_column("Count", justify="right", style="green")
    table.add_column("Blogs", max_width=80)

    for key, value in payload.items():
        table.add_row(str(int(key) + 1), str(value["count"]), escape(", ".join(value["blogs"])))
    return table


@cli.command()
@click.argument("data", required=False)
@click.option("-k", "k", type=int, default=None, help="Number of clusters")
@click.option("--max-iterations", type=int, default=None, help="Iteration cap")
@click.option("--seed", type=int, default=None, help="Seed for centroid initialization")
@click.option("--allow-empty", is_flag=True, default=False, help="Allow k larger than the number of blogs")
@click.option("--format", "fmt", type=click.Choice(["tree", "table", "json"]), default="tree")
@click.option("--output", "-o", default=None, help="Also write the JSON result to this file")
@click.pass_context
def cluster(ctx, data, k, max_iterations, seed, allow_empty, fmt, output):
    """Cluster the blogs in DATA (default: data_path from config)."""
    from .ingest.loader import CorpusLoader
    from .service import ClusterService

    config, data_path = _resolve_dataset(ctx, data)

    loader = CorpusLoader(data_path)
    loader.start()
    service = ClusterService(config)

    try:
        service.initialize(
            loader,
            k=k,
            max_iterations=max_iterations,
            seed=seed,
            allow_empty_clusters=allow_empty or None,
        )
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        ctx.exit(1)

    grouping = service.get_grouping()
    if grouping is None:
        console.print("[red]Clusters not found[/]")
        ctx.exit(1)

    payload = grouping.to_payload()
    if output:
        Path(output).write_text(json.dumps(payload, indent=2))

    if fmt == "json":
        click.echo(json.dumps(payload, indent=2))
        return

    console.print(render_tree(payload) if fmt == "tree" else render_table(payload))
    status = "converged" if grouping.converged else "hit iteration cap"
    console.print(
        f"[green]✓ {grouping.total} blogs in {grouping.k} clusters[/] "
        f"[dim]({status} after {grouping.iterations} iteration(s), {grouping.elapsed:.2f}s)[/]"
    )
    if output:
        console.print(f"  → {output}")


@cli.command()
@click.argument("data", required=False)
@click.pass_context
def inspect(ctx, data):
    """Show dataset statistics."""
    from .ingest.loader import load_corpus

    _, data_path = _resolve_dataset(ctx, data)

    try:
        corpus = load_corpus(data_path)
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        ctx.exit(1)

    constant = corpus.constant_documents()
    console.print(f"\n[bold]📊 Dataset {data_path.name}[/]")
    console.print(f"  Blogs: {len(corpus)}")
    console.print(f"  Words: {corpus.dimensions}")
    console.print(f"  Constant blogs: {len(constant)}")
    for name in constant:
        console.print(f"    [dim]{escape(name)}[/]")


if __name__ == "__main__":
    cli()
