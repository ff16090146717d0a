import argparse
import asyncio
from pathlib import Path

from legallens.accounts.exceptions import AccountValidationError
from legallens.accounts.service import AccountService, normalize_email
from legallens.analysis.exceptions import AnalysisServiceError
from legallens.analysis.factory import AnalysisClientFactory
from legallens.assistant.exceptions import AssistantError
from legallens.assistant.service import AssistantService
from legallens.config.settings import Settings
from legallens.ingestion.batch import build_upload_batch
from legallens.ingestion.events import BatchEvent, ItemSettled
from legallens.ingestion.exceptions import FileReadError
from legallens.ingestion.file_loader import FileLoader
from legallens.ingestion.models import CandidateFile
from legallens.logging.logger import Log
from legallens.storage.connection import close_store, get_store, init_store
from legallens.storage.exceptions import StorageError
from legallens.storage.repositories.documents_repository import DocumentsRepository
from legallens.storage.repositories.recent_analyses_repository import (
    RecentAnalysesRepository,
)
from legallens.storage.repositories.users_repository import UsersRepository


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="legallens", description="Analyze contracts and browse stored analyses."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    sign_in = commands.add_parser("sign-in", help="Sign in and remember the current user")
    sign_in.add_argument("--email", required=True)
    sign_in.add_argument("--password", required=True)
    sign_in.add_argument("--name", default=None, help="Display name")
    sign_in.add_argument("--register", action="store_true", help="Require a display name")
    commands.add_parser("sign-out", help="Forget the current user")

    analyze = commands.add_parser("analyze", help="Analyze one or more files as a batch")
    analyze.add_argument("--user", default=None, help="Owner e-mail (default: current user)")
    analyze.add_argument("files", nargs="+", type=Path)

    documents = commands.add_parser("documents", help="List a user's documents")
    documents.add_argument("--user", default=None, help="Owner e-mail (default: current user)")

    ask = commands.add_parser("ask", help="Ask a question about one clause of a document")
    ask.add_argument("document_id")
    ask.add_argument("clause_id")
    ask.add_argument("question")

    compare = commands.add_parser("compare", help="Compare two or more analyzed documents")
    compare.add_argument("document_ids", nargs="+")

    commands.add_parser("recent", help="List recent analyses")
    commands.add_parser("clear-recent", help="Clear the recent analyses cache")
    return parser


def _resolve_user(user: str | None) -> str | None:
    if user:
        return normalize_email(user)
    current = UsersRepository(get_store()).get_current_user()
    return current.id if current else None


def _print_settled(event: BatchEvent) -> None:
    if isinstance(event, ItemSettled):
        item = event.item
        detail = item.document.id if item.document else item.error
        print(f"{item.status.value:<8} {item.name}  {detail}")


async def _analyze(settings: Settings, user_id: str, paths: list[Path]) -> int:
    loader = FileLoader()
    candidates: list[CandidateFile] = []
    for path in paths:
        try:
            candidates.append(loader.load(path))
        except FileReadError as exc:
            print(f"skipped  {path}  {exc}")

    client = AnalysisClientFactory.create(settings)
    try:
        batch = build_upload_batch(client, get_store(), user_id)
        submitted = batch.submit(candidates)
        for rejection in submitted.rejected:
            print(f"rejected {rejection.file_name}  {rejection}")

        batch.subscribe(_print_settled)
        settled = await batch.analyze_all()
    finally:
        await client.aclose()
    if settled is None:
        return 1
    if settled.navigate_to is not None:
        analysis = settled.navigate_to.analysis
        print(f"\n{settled.navigate_to.file_name}: {analysis.overall_risk.value} risk "
              f"({analysis.risk_score}/100)\n{analysis.summary}")
    return 0 if not settled.failed else 1


async def _ask(settings: Settings, document_id: str, clause_id: str, question: str) -> int:
    client = AnalysisClientFactory.create(settings)
    try:
        service = AssistantService(client, DocumentsRepository(get_store()))
        exchange = await service.ask_about_clause(document_id, clause_id, question)
    finally:
        await client.aclose()
    print(exchange.answer)
    return 0


async def _compare(settings: Settings, document_ids: list[str]) -> int:
    client = AnalysisClientFactory.create(settings)
    try:
        service = AssistantService(client, DocumentsRepository(get_store()))
        result = await service.compare(document_ids)
    finally:
        await client.aclose()
    print(f"Recommended: {result.recommended_id}\n{result.reasoning}")
    for difference in result.key_differences:
        print(f"  - {difference}")
    return 0


def _dispatch(args: argparse.Namespace, settings: Settings) -> int:
    store = get_store()
    if args.command == "sign-in":
        user = AccountService(UsersRepository(store)).sign_in(
            args.email, args.password, name=args.name, register=args.register
        )
        print(f"Signed in as {user.name} <{user.email}>")
        return 0
    if args.command == "sign-out":
        AccountService(UsersRepository(store)).sign_out()
        return 0
    if args.command in ("analyze", "documents"):
        user_id = _resolve_user(args.user)
        if user_id is None:
            print("No user given and nobody is signed in. Use --user or sign-in.")
            return 2
        if args.command == "analyze":
            return asyncio.run(_analyze(settings, user_id, args.files))
        for document in DocumentsRepository(store).find_by_user(user_id):
            analysis = document.analysis
            print(f"{document.id}  {document.upload_date:%Y-%m-%d %H:%M}  "
                  f"{analysis.overall_risk.value:<6} {analysis.risk_score:>3}  {document.file_name}")
        return 0
    if args.command == "ask":
        return asyncio.run(_ask(settings, args.document_id, args.clause_id, args.question))
    if args.command == "compare":
        return asyncio.run(_compare(settings, args.document_ids))
    if args.command == "recent":
        for entry in RecentAnalysesRepository(store).find_all():
            print(f"{entry.id}  {entry.created_at:%Y-%m-%d %H:%M}  "
                  f"{entry.risk_summary.value:<6} {entry.risk_score:>3}  {entry.name}")
        return 0
    RecentAnalysesRepository(store).clear()
    return 0


def run(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_store(settings)

    try:
        return _dispatch(args, settings)
    except (
        AccountValidationError,
        AssistantError,
        AnalysisServiceError,
        StorageError,
        ValueError,
    ) as exc:
        Log.error(f"Command {args.command} failed: {exc}")
        print(f"error: {exc}")
        return 1
    finally:
        close_store()


def main() -> None:
    """Entry point: load settings -> open store -> run the requested command."""
    raise SystemExit(run())


if __name__ == "__main__":
    main()
