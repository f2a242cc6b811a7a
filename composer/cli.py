"""Command-line entry point for composing contracts."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from catalog.registry import DEFAULT_CATALOG, ContractTypeCatalog, list_contract_types
from composer.config import Settings
from composer.exceptions import ComposerError
from composer.lifecycle import DraftLifecycle, DraftPhase
from composer.logging_config import configure_logging
from composer.session import TOKEN_KEY, SessionContext, TokenStore
from tools.contract_client import ContractServiceClient

logger = logging.getLogger("vibelegal.cli")


def _parse_pairs(pairs: list[str], flag: str, parser: argparse.ArgumentParser) -> dict[str, str]:
    values: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            parser.error(f"{flag} expects KEY=VALUE, got '{pair}'")
        values[key.strip()] = value
    return values


def _check_inputs(
    catalog: ContractTypeCatalog, args: argparse.Namespace, parser: argparse.ArgumentParser
) -> None:
    """Reject a contract type or input key the catalog does not define."""
    if args.type not in catalog:
        parser.error(f"unknown contract type '{args.type}' (see --list-types)")
    definition = catalog.lookup(args.type)
    for key in args.params:
        if definition.parameter(key) is None:
            parser.error(f"--param: '{args.type}' has no parameter '{key}' (see --describe)")
    for key in args.options:
        if definition.clause_option(key) is None:
            parser.error(f"--option: '{args.type}' has no clause option '{key}' (see --describe)")


def describe_type(catalog: ContractTypeCatalog, type_id: str) -> str:
    """Human-readable summary of a contract type's inputs."""
    definition = catalog.lookup(type_id)
    lines = [f"{definition.id} ({definition.jurisdiction})"]
    if definition.description:
        lines.append(f"  {definition.description}")
    lines.append("")
    lines.append("Parameters (--param KEY=VALUE):")
    for spec in definition.parameters:
        suffix = f" [{' | '.join(spec.enum_values)}]" if spec.enum_values else ""
        lines.append(f"  {spec.key:<24} {spec.label} ({spec.kind.value}){suffix}")
    lines.append("")
    lines.append("Clause options (--option KEY=VALUE, first is default):")
    for option in definition.clause_options:
        values = ", ".join(v.value for v in option.variations)
        lines.append(f"  {option.key:<24} {option.label}: {values}")
    return "\n".join(lines)


async def compose(args: argparse.Namespace, session: SessionContext, settings: Settings) -> int:
    """Run one draft from selection to export."""
    client = ContractServiceClient(
        session,
        list_retry_attempts=settings.list_retry_attempts,
        list_retry_wait_seconds=settings.list_retry_wait_seconds,
    )
    async with client:
        draft = DraftLifecycle(
            session,
            client=client,
            saved_notice_seconds=settings.saved_notice_seconds,
        )
        draft.select_type(args.type)
        draft.edit_parties(client_name=args.client_name, other_party_name=args.other_party_name)
        for key, value in args.params.items():
            draft.edit_parameter(key, value)
        for key, value in args.options.items():
            draft.edit_option(key, value)

        print(f"Composing {args.type}...")
        document = await draft.submit()
        if document is None:
            print(f"✗ {draft.last_error.message if draft.last_error else 'Generation failed'}")
            return 1

        if args.title:
            draft.set_title(args.title)

        path = draft.download(args.output_dir)
        print(f"✓ Contract written to {path}")

        if args.save:
            await draft.save()
            if draft.phase is not DraftPhase.SAVED:
                print(f"✗ Save failed: {draft.last_error.message if draft.last_error else 'unknown error'}")
                return 1
            print(f"✓ Saved as '{document.title}'")
    return 0


async def list_saved(session: SessionContext, settings: Settings) -> int:
    client = ContractServiceClient(
        session,
        list_retry_attempts=settings.list_retry_attempts,
        list_retry_wait_seconds=settings.list_retry_wait_seconds,
    )
    async with client:
        contracts = await client.list_user_contracts()
    if not contracts:
        print("No contracts yet")
        return 0
    for contract in contracts:
        created = contract.created_at.strftime("%b %d, %Y")
        print(f"  [{contract.id}] {contract.title} | {contract.contract_type} | Created {created}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vibelegal",
        description="Compose, export and save generated contracts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # See what can be composed
  vibelegal --list-types
  vibelegal --describe "California Employment Agreement"

  # Store the session token once
  vibelegal --login <token>

  # Compose, download and save
  vibelegal --type "California Employment Agreement" \\
      --client-name "Acme Inc." --other-party-name "John Doe" \\
      --param annual_salary=120000 --param overtime_status=Exempt \\
      --param arbitration_county=Alameda --param governing_law_county=Alameda \\
      --option arbitration=jams_provider --save
        """,
    )
    parser.add_argument("--list-types", action="store_true", help="List available contract types")
    parser.add_argument("--describe", metavar="TYPE", help="Show the inputs of a contract type")
    parser.add_argument("--login", metavar="TOKEN", help="Store the session token")
    parser.add_argument("--logout", action="store_true", help="Forget the session token")
    parser.add_argument("--list-saved", action="store_true", help="List your saved contracts")
    parser.add_argument("--type", help="Contract type to compose")
    parser.add_argument("--client-name", default="", help="Your name or company")
    parser.add_argument("--other-party-name", default="", help="Other party name")
    parser.add_argument("--param", action="append", default=[], metavar="KEY=VALUE", help="Contract parameter")
    parser.add_argument("--option", action="append", default=[], metavar="KEY=VALUE", help="Clause option")
    parser.add_argument("--title", help="Contract title (default: type and party names)")
    parser.add_argument("--save", action="store_true", help="Save the contract to your account")
    parser.add_argument("--output-dir", type=Path, default=Path("outputs"), help="Download directory (default: outputs/)")
    return parser


async def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(settings.log_level)
    store = TokenStore(settings.session_file)

    if args.login:
        store.set(TOKEN_KEY, args.login)
        print("✓ Session token stored")
        return 0
    if args.logout:
        store.delete(TOKEN_KEY)
        print("✓ Session token removed")
        return 0

    if args.list_types:
        for jurisdiction, type_ids in sorted(list_contract_types().items()):
            print(f"\n{jurisdiction.upper()}:")
            for type_id in sorted(type_ids):
                print(f"  - {type_id}")
        return 0

    try:
        if args.describe:
            print(describe_type(DEFAULT_CATALOG, args.describe))
            return 0

        session = SessionContext.from_settings(settings, store)

        if args.list_saved:
            return await list_saved(session, settings)

        if not args.type:
            parser.error("--type is required (or use --list-types)")

        args.params = _parse_pairs(args.param, "--param", parser)
        args.options = _parse_pairs(args.option, "--option", parser)
        _check_inputs(DEFAULT_CATALOG, args, parser)
        return await compose(args, session, settings)
    except ComposerError as exc:
        logger.debug("Command failed: %s", exc.to_dict(), exc_info=True)
        print(f"✗ {exc.message}")
        return 1


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
