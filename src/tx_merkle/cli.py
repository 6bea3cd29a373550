#!/usr/bin/env python3
"""
tx-merkle CLI

Command-line interface for committing to transaction lists with a Merkle
tree and for generating and verifying inclusion proofs.
"""

import json
import logging
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .config import Settings
from .constants import OUTPUT_FORMATS, SUPPORTED_HASH_ALGORITHMS
from .errors import MerkleTreeError
from .services import ProofService, ProofServiceError
from .utils import shorten_digest
from .visualize import render_proof, render_summary, render_tree

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, level: str = "INFO"):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def format_json(payload) -> str:
    """Format a pydantic model or dict for JSON output."""
    if hasattr(payload, "model_dump"):
        payload = payload.model_dump()
    return json.dumps(payload, indent=2)


def _service(ctx) -> ProofService:
    return ctx.obj["service"]


def _output_format(ctx, output_format: Optional[str]) -> str:
    return output_format or ctx.obj["settings"].output_format


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--algorithm",
    "-a",
    envvar="TX_MERKLE_HASH_ALGORITHM",
    type=click.Choice(SUPPORTED_HASH_ALGORITHMS, case_sensitive=False),
    help="Hash algorithm for leaves and parents (default: sha256)",
)
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False),
    help="Load settings from this .env file",
)
@click.pass_context
def cli(ctx, verbose: bool, algorithm: Optional[str], env_file: Optional[str]):
    """
    tx-merkle - Merkle commitments and inclusion proofs for transaction lists.

    Transaction files ending in .json hold a JSON array of strings or a
    JSON object with a "transactions" array. Any other file is plain text
    with one transaction per line.
    The number of transactions must be a power of two.
    """
    try:
        settings = Settings.from_env(env_file)
        if algorithm:
            settings = Settings(
                hash_algorithm=algorithm,
                log_level=settings.log_level,
                accept_empty_proof=settings.accept_empty_proof,
                output_format=settings.output_format,
            )
    except ValueError as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    setup_logging(verbose, settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["settings"] = settings
    ctx.obj["service"] = ProofService(settings)


@cli.command()
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def root(ctx, transactions_file: str):
    """
    Print the root digest of a transaction list.

    TRANSACTIONS_FILE: File holding the ordered transactions
    """
    try:
        tree = _service(ctx).load_tree(transactions_file)
    except (ProofServiceError, MerkleTreeError) as e:
        logger.error(f"Error computing root: {e}")
        raise click.ClickException(str(e))

    click.echo(tree.root_digest())


@cli.command()
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("transaction", required=False)
@click.option("--index", "-i", type=int, help="Prove the leaf at this position instead")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    help="Output format (default from TX_MERKLE_OUTPUT_FORMAT, json)",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the proof JSON to a file")
@click.pass_context
def prove(
    ctx,
    transactions_file: str,
    transaction: Optional[str] = None,
    index: Optional[int] = None,
    output_format: Optional[str] = None,
    output: Optional[str] = None,
):
    """
    Generate an inclusion proof.

    TRANSACTIONS_FILE: File holding the ordered transactions

    TRANSACTION: Transaction to prove (first occurrence). Use --index to
    pick a specific occurrence of a duplicated transaction.
    """
    if transaction is None and index is None:
        raise click.UsageError("Give a TRANSACTION or --index")

    try:
        service = _service(ctx)
        tree = service.load_tree(transactions_file)
        document = service.create_proof(tree, transaction=transaction, index=index)
    except (ProofServiceError, MerkleTreeError) as e:
        logger.error(f"Error generating proof: {e}")
        raise click.ClickException(str(e))

    if output:
        try:
            with open(output, "w", encoding="utf-8") as f:
                f.write(format_json(document))
        except OSError as e:
            logger.error(f"Error writing proof to {output}: {e}")
            raise click.ClickException(f"Failed to write {output}: {e}")
        console.print(f"[green]Proof written to {output}[/green]", highlight=False)
        return

    if _output_format(ctx, output_format) == "json":
        click.echo(format_json(document))
    else:
        console.print(render_proof(document))


@cli.command()
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.argument("proof_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    help="Output format (default from TX_MERKLE_OUTPUT_FORMAT, json)",
)
@click.pass_context
def verify(ctx, transactions_file: str, proof_file: str, output_format: Optional[str] = None):
    """
    Verify a saved proof against a transaction list.

    Exits with status 0 when the proof is valid and 1 otherwise.

    TRANSACTIONS_FILE: File holding the ordered transactions

    PROOF_FILE: Proof JSON written by 'prove --output'
    """
    try:
        service = _service(ctx)
        tree = service.load_tree(transactions_file, require_root=False)
        document = service.load_proof(proof_file)
        report = service.verify_document(tree, document)
    except ProofServiceError as e:
        logger.error(f"Error verifying proof: {e}")
        raise click.ClickException(str(e))

    if _output_format(ctx, output_format) == "json":
        click.echo(format_json(report))
    elif report.valid:
        console.print(
            Panel(
                f"Transaction {escape(repr(document.transaction))} is included\n"
                f"root {report.root}",
                title="Valid proof",
                border_style="green",
            )
        )
    else:
        reason = report.error or "recomputed root does not match"
        console.print(
            Panel(
                f"Transaction {escape(repr(document.transaction))}: {reason}",
                title="Invalid proof",
                border_style="red",
            )
        )

    if not report.valid:
        ctx.exit(1)


@cli.command()
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    help="Output format (default from TX_MERKLE_OUTPUT_FORMAT, json)",
)
@click.pass_context
def inspect(ctx, transactions_file: str, output_format: Optional[str] = None):
    """
    Inspect a transaction list: height, node count, root and layers.

    Lists whose size is not a power of two are reported, not rejected.
    """
    try:
        service = _service(ctx)
        tree = service.load_tree(transactions_file, require_root=False)
    except ProofServiceError as e:
        logger.error(f"Inspection failed: {e}")
        raise click.ClickException(str(e))

    if _output_format(ctx, output_format) == "json":
        click.echo(format_json(service.snapshot(tree)))
        return

    console.print(render_summary(tree))
    if not tree.is_empty:
        console.print("\n[bold cyan]Layers:[/bold cyan]")
        for depth, level in enumerate(reversed(tree.levels())):
            digests = ", ".join(shorten_digest(d) for d in level)
            console.print(f"  {depth:2d}: {digests}", highlight=False)


@cli.command()
@click.argument("transactions_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--transaction", "-t", help="Highlight the proof path of this transaction")
@click.option("--index", "-i", type=int, help="Highlight the proof path of the leaf at this position")
@click.option("--full", is_flag=True, help="Show complete digests")
@click.pass_context
def visualize(
    ctx,
    transactions_file: str,
    transaction: Optional[str] = None,
    index: Optional[int] = None,
    full: bool = False,
):
    """Visualize the Merkle tree and, optionally, a proof path."""
    try:
        service = _service(ctx)
        tree = service.load_tree(transactions_file, require_root=False)
        if transaction is not None:
            index = tree.index_of(transaction)
            if index is None:
                raise click.ClickException(f"Transaction {transaction!r} is not part of this merkle tree")
        if index is not None and not 0 <= index < len(tree):
            raise click.ClickException(f"Leaf index {index} out of range")

        console.print(render_tree(tree, highlight_index=index, full_digests=full))
        if index is not None and not tree.is_empty:
            console.print(
                "[green]green[/green]: path to the root, "
                "[yellow]yellow[/yellow]: proof siblings"
            )
    except ProofServiceError as e:
        console.print(f"[red]Visualization error: {e}[/red]", style="bold")
        if ctx.obj.get("verbose"):
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    cli()
