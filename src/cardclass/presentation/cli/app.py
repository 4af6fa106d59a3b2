"""cardclass CLI application using Typer.

This module provides command-line access to the classifier: single and
batch classification against a JSON context file, plus rule and model
utilities for operators.
"""

import asyncio
import json
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from cardclass.application.dtos import (
    BatchClassificationCompletedEvent,
    BatchClassificationProgressEvent,
    BatchClassificationResult,
    BatchItemResult,
    ClassificationComparisonReport,
    ComparisonSide,
)
from cardclass.application.services import (
    BatchClassificationService,
    ClassificationComparisonService,
    PromptImprovementService,
    analyze_rule_coverage,
)
from cardclass.domain.classification.seed_rules import build_seed_rules
from cardclass.domain.classification.services import TransactionClassificationService
from cardclass.domain.classification.value_objects import ClassifyResult
from cardclass.domain.shared.exceptions import DomainException
from cardclass.infrastructure.integration.ai import (
    DEFAULT_MODEL_ID,
    SettingsModelProviderFactory,
    list_models,
)
from cardclass.presentation.cli.schemas import (
    ContextFile,
    PromptsInput,
    TransactionInput,
    TransactionsFile,
)
from cardclass_config import get_settings

app = typer.Typer(
    name="cardclass",
    help="cardclass - Corporate card transaction classifier",
    no_args_is_help=True,
)
console = Console()

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _configure_logging() -> None:
    """Configure logging once per process from settings."""
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )
    logging.getLogger("cardclass").setLevel(log_level)

    # Quiet down noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("anthropic").setLevel(logging.WARNING)


@app.callback()
def main() -> None:
    _configure_logging()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_context(path: Path) -> ContextFile:
    return _load_json(path, ContextFile)


def _load_transactions(path: Path) -> TransactionsFile:
    return _load_json(path, TransactionsFile)


def _load_json(path: Path, model):
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Cannot read {path}: {e}[/red]")
        raise typer.Exit(code=1) from e

    # A bare list is accepted for transaction files
    if isinstance(data, list) and model is TransactionsFile:
        data = {"transactions": data}

    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        console.print(f"[red]Invalid {path.name}:[/red]\n{escape(str(e))}")
        raise typer.Exit(code=1) from e


def _fail(error: DomainException) -> typer.Exit:
    logger.debug("Command failed: %s (%s)", error.message, error.code.value)
    console.print(f"[red]{error.message}[/red] [dim]({error.code.value})[/dim]")
    for key, value in error.details.items():
        console.print(f"  [dim]{key}: {value}[/dim]")
    return typer.Exit(code=1)


def _print_result(result: ClassifyResult) -> None:
    table = Table(show_header=False, box=None)
    table.add_column(style="cyan")
    table.add_column()
    table.add_row("계정과목", f"{result.account_code} {result.account_name}")
    table.add_row("신뢰도", f"{result.confidence:.2f}")
    table.add_row("방식", result.method.value)
    if result.rule_name:
        table.add_row("룰", result.rule_name)
    if result.model_id:
        table.add_row("모델", result.model_id)
    table.add_row("사유", result.reason)
    console.print(table)


def _print_batch_result(result: BatchClassificationResult) -> None:
    table = Table(title="Batch classification")
    table.add_column("Row", justify="right")
    table.add_column("Merchant")
    table.add_column("Account")
    table.add_column("Method")
    table.add_column("Confidence", justify="right")

    for item in result.items:
        merchant = item.transaction.merchant_name or "-"
        if item.result is None:
            table.add_row(
                str(item.row),
                merchant,
                f"[red]{item.error}[/red]",
                item.error_code or "",
                "",
            )
            continue
        table.add_row(
            str(item.row),
            merchant,
            f"{item.result.account_code} {item.result.account_name}",
            item.result.method.value,
            f"{item.result.confidence:.2f}",
        )

    console.print(table)
    console.print(
        f"total={result.total} success={result.success} failed={result.failed} "
        f"rule={result.rule_classified} ai={result.ai_classified}"
    )


def _print_comparison(report: ClassificationComparisonReport) -> None:
    table = Table(title=f"{report.left_label} vs {report.right_label}")
    table.add_column("Row", justify="right")
    table.add_column("Merchant")
    table.add_column(report.left_label)
    table.add_column(report.right_label)
    for row in report.disagreements:
        table.add_row(
            str(row.row),
            row.transaction.merchant_name or "-",
            _describe_side(row.left),
            _describe_side(row.right),
        )
    if report.disagreements:
        console.print(table)

    console.print(
        f"Agreement: {report.agreed}/{report.total} "
        f"({report.agreement_rate * 100:.1f}%)"
    )


def _describe_side(item: BatchItemResult) -> str:
    if item.result is None:
        return f"[red]{item.error_code}[/red]"
    return f"{item.result.account_code} {item.result.account_name}"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("classify")
def classify(  # NOQA: PLR0913
    context_file: Path = typer.Argument(..., help="JSON file with accounts/rules"),
    amount: str = typer.Option(..., "--amount", "-a", help="Transaction amount"),
    merchant: Optional[str] = typer.Option(None, "--merchant", "-m"),
    mcc: Optional[str] = typer.Option(None, "--mcc"),
    date: Optional[str] = typer.Option(None, "--date", help="YYYY-MM-DD"),
    description: Optional[str] = typer.Option(None, "--description", "-d"),
    model: Optional[str] = typer.Option(None, "--model", help="Registered model id"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Classify a single transaction: rules first, AI as fallback."""
    settings = get_settings()
    context_input = _load_context(context_file)
    if model:
        context_input.model_id = model

    try:
        transaction = TransactionInput(
            amount=amount,
            merchant_name=merchant,
            mcc_code=mcc,
            transaction_date=date,
            description=description,
        ).to_domain()
    except PydanticValidationError as e:
        console.print(f"[red]Invalid transaction:[/red]\n{e}")
        raise typer.Exit(code=1) from e

    service = TransactionClassificationService(SettingsModelProviderFactory(settings))
    try:
        context = context_input.to_domain(
            default_temperature=settings.ai_temperature,
            examples_limit=settings.recent_examples_limit,
        )
        result = asyncio.run(service.classify(transaction, context))
    except DomainException as e:
        raise _fail(e) from e

    if as_json:
        console.print_json(json.dumps(result.to_dict(), ensure_ascii=False))
    else:
        _print_result(result)


@app.command("batch")
def batch(
    context_file: Path = typer.Argument(..., help="JSON file with accounts/rules"),
    transactions_file: Path = typer.Argument(..., help="JSON file of transactions"),
    chunk_size: Optional[int] = typer.Option(
        None,
        "--chunk-size",
        min=1,
        help="Concurrent classifications per group",
    ),
    model: Optional[str] = typer.Option(None, "--model", help="Registered model id"),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON"),
) -> None:
    """Classify every transaction of a file, isolating per-row failures."""
    settings = get_settings()
    context_input = _load_context(context_file)
    transactions = _load_transactions(transactions_file)
    if model:
        context_input.model_id = model

    try:
        context = context_input.to_domain(
            default_temperature=settings.ai_temperature,
            examples_limit=settings.recent_examples_limit,
        )
    except DomainException as e:
        raise _fail(e) from e

    service = BatchClassificationService(
        TransactionClassificationService(SettingsModelProviderFactory(settings)),
        chunk_size=chunk_size or settings.batch_chunk_size,
    )

    async def run() -> BatchClassificationResult:
        result = BatchClassificationResult()
        async for event in service.classify_batch_streaming(
            transactions.to_domain(),
            context,
        ):
            if isinstance(event, BatchClassificationProgressEvent) and not as_json:
                console.print(f"[dim]{event.message}[/dim]")
            elif isinstance(event, BatchClassificationCompletedEvent):
                result = event.result or result
        return result

    result = asyncio.run(run())

    if as_json:
        console.print_json(json.dumps(result.to_dict(), ensure_ascii=False))
    else:
        _print_batch_result(result)


@app.command("models")
def models() -> None:
    """List registered AI models."""
    settings = get_settings()
    table = Table(title="Registered models")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Provider")
    table.add_column("Description")

    for config in list_models():
        model_id = config.id
        if config.id == (settings.default_model_id or DEFAULT_MODEL_ID):
            model_id += " [green](default)[/green]"
        table.add_row(model_id, config.name, config.provider.value, config.description)

    console.print(table)


@app.command("seed-rules")
def seed_rules(
    context_file: Path = typer.Argument(..., help="JSON file with accounts"),
    as_json: bool = typer.Option(False, "--json", help="Print rules as JSON"),
) -> None:
    """Show which sample MCC rules map onto the context's accounts."""
    context_input = _load_context(context_file)
    result = build_seed_rules(context_input.to_accounts())

    if as_json:
        rules = [
            {
                "name": rule.name,
                "priority": rule.priority,
                "conditions": rule.conditions.to_dict(),
                "account_code": rule.account.code,
            }
            for rule in result.rules
        ]
        console.print_json(json.dumps({"rules": rules}, ensure_ascii=False))
        return

    table = Table(title="Sample rules")
    table.add_column("Priority", justify="right")
    table.add_column("Name")
    table.add_column("Conditions")
    table.add_column("Account")
    for rule in result.rules:
        table.add_row(
            str(rule.priority),
            rule.name,
            str(rule.conditions),
            rule.account.display_label,
        )
    console.print(table)
    console.print(f"{result.created}/{result.total} rules created")
    for sample in result.skipped:
        console.print(f"[yellow]skipped[/yellow] {sample.name} ({sample.account_code})")


@app.command("coverage")
def coverage(
    context_file: Path = typer.Argument(..., help="JSON file with accounts/rules"),
    transactions_file: Path = typer.Argument(..., help="JSON file of transactions"),
) -> None:
    """Report how many transactions the rules classify without AI."""
    context_input = _load_context(context_file)
    transactions = _load_transactions(transactions_file).to_domain()

    try:
        rules = context_input.to_rules(context_input.to_accounts())
    except DomainException as e:
        raise _fail(e) from e

    report = analyze_rule_coverage(rules, transactions)

    table = Table(title="Rule hits")
    table.add_column("Rule")
    table.add_column("Hits", justify="right")
    for name, hits in report.hits_by_rule.items():
        table.add_row(name, str(hits))
    console.print(table)

    console.print(
        f"Coverage: {report.matched}/{report.total} ({report.coverage * 100:.1f}%)"
    )
    for tx in report.unmatched:
        console.print(
            f"  [yellow]unmatched[/yellow] {tx.merchant_name or '-'} "
            f"(MCC {tx.mcc_code or '-'}, {tx.amount})"
        )


@app.command("improve-prompt")
def improve_prompt(
    context_file: Path = typer.Argument(
        ...,
        help="JSON file with accounts, prompts and confirmed examples",
    ),
    model: Optional[str] = typer.Option(None, "--model", help="Registered model id"),
) -> None:
    """Suggest an improved system prompt from confirmed classifications."""
    settings = get_settings()
    context_input = _load_context(context_file)

    service = PromptImprovementService(SettingsModelProviderFactory(settings))
    try:
        context = context_input.to_domain(
            default_temperature=settings.ai_temperature,
        )
        suggestion = asyncio.run(
            service.suggest(
                context.templates.system_prompt,
                context.recent_examples,
                context.accounts,
                model_id=model or context.model_id,
            ),
        )
    except DomainException as e:
        raise _fail(e) from e

    console.print(f"[bold]Analyzed {suggestion.analyzed_count} examples[/bold]\n")
    console.print("[bold cyan]Reasoning[/bold cyan]")
    console.print(suggestion.reasoning)
    console.print("\n[bold cyan]Suggested system prompt[/bold cyan]")
    console.print(suggestion.suggested_prompt, markup=False)


@app.command("compare-models")
def compare_models(
    context_file: Path = typer.Argument(..., help="JSON file with accounts"),
    transactions_file: Path = typer.Argument(..., help="JSON file of transactions"),
    left_model: str = typer.Argument(..., help="First registered model id"),
    right_model: str = typer.Argument(..., help="Second registered model id"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    """Classify a sample with two models, AI only, and report agreement."""
    _run_comparison(
        context_file,
        transactions_file,
        ComparisonSide(label=left_model, model_id=left_model),
        ComparisonSide(label=right_model, model_id=right_model),
        as_json=as_json,
    )


@app.command("compare-prompts")
def compare_prompts(
    context_file: Path = typer.Argument(..., help="JSON file with current prompts"),
    transactions_file: Path = typer.Argument(..., help="JSON file of transactions"),
    prompts_file: Path = typer.Argument(..., help="JSON file with candidate prompts"),
    model: Optional[str] = typer.Option(None, "--model", help="Registered model id"),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    """Classify a sample with current and candidate prompts, AI only."""
    candidate = _load_json(prompts_file, PromptsInput)
    _run_comparison(
        context_file,
        transactions_file,
        ComparisonSide(label="current", model_id=model),
        ComparisonSide(
            label="candidate",
            model_id=model,
            templates=candidate.to_domain(),
        ),
        as_json=as_json,
    )


def _run_comparison(
    context_file: Path,
    transactions_file: Path,
    left: ComparisonSide,
    right: ComparisonSide,
    as_json: bool,
) -> None:
    settings = get_settings()
    context_input = _load_context(context_file)
    transactions = _load_transactions(transactions_file)
    provider_factory = SettingsModelProviderFactory(settings)

    try:
        context = context_input.to_domain(
            default_temperature=settings.ai_temperature,
            examples_limit=settings.recent_examples_limit,
        )
        # Unknown ids and missing credentials fail before any call is made
        for side in (left, right):
            provider_factory.get_provider(side.model_id or context.model_id)
    except DomainException as e:
        raise _fail(e) from e

    service = ClassificationComparisonService(
        TransactionClassificationService(provider_factory),
        chunk_size=settings.batch_chunk_size,
    )
    report = asyncio.run(
        service.compare(transactions.to_domain(), context, left, right),
    )

    if as_json:
        console.print_json(json.dumps(report.to_dict(), ensure_ascii=False))
    else:
        _print_comparison(report)


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
