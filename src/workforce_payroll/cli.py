"""Workforce payroll command line interface.

Operator tools for running payroll outside the HTTP API.

Usage:
    workforce-payroll init-db
    workforce-payroll calculate PERIOD_ID
    workforce-payroll mark-paid PERIOD_ID
    workforce-payroll reset PERIOD_ID
    workforce-payroll export PERIOD_ID --output payroll.jsonl
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import TextIO
from uuid import UUID

from workforce_payroll.config import configure_logging
from workforce_payroll.database import create_schema, dispose_db, get_session
from workforce_payroll.errors import PayrollError, ValidationError
from workforce_payroll.services.export_service import ExportService
from workforce_payroll.services.payroll_service import PayrollService


def parse_uuid(s: str) -> UUID:
    """Parse UUID string."""
    return UUID(s)


class PayrollCli:
    """Payroll Command Line Interface."""

    def __init__(self, stdout: TextIO | None = None) -> None:
        self.parser = self._build_parser()
        self.stdout = stdout or sys.stdout

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="workforce-payroll",
            description="Workforce payroll operational tools",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser(
            "init-db",
            help="Create payroll tables in the configured database",
        )

        calculate = subparsers.add_parser(
            "calculate",
            help="Run payroll for a DRAFT pay period",
        )
        calculate.add_argument("pay_period_id", type=parse_uuid, help="Pay period ID")

        paid = subparsers.add_parser(
            "mark-paid",
            help="Mark a COMPLETED pay period as PAID",
        )
        paid.add_argument("pay_period_id", type=parse_uuid, help="Pay period ID")

        reset = subparsers.add_parser(
            "reset",
            help="Return a PROCESSING pay period left by an interrupted run to DRAFT",
        )
        reset.add_argument("pay_period_id", type=parse_uuid, help="Pay period ID")

        export = subparsers.add_parser(
            "export",
            help="Export a pay period as JSON lines",
        )
        export.add_argument("pay_period_id", type=parse_uuid, help="Pay period ID")
        export.add_argument(
            "--output",
            type=str,
            help="Output file (default: stdout)",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        configure_logging()

        # Dispatch to command handler
        handlers: dict[str, Callable[[argparse.Namespace], Awaitable[int]]] = {
            "init-db": self._cmd_init_db,
            "calculate": self._cmd_calculate,
            "mark-paid": self._cmd_mark_paid,
            "reset": self._cmd_reset,
            "export": self._cmd_export,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        return asyncio.run(self._dispatch(handler, parsed))

    async def _dispatch(
        self,
        handler: Callable[[argparse.Namespace], Awaitable[int]],
        args: argparse.Namespace,
    ) -> int:
        try:
            return await handler(args)
        except ValidationError as e:
            print(f"Error: {e}", file=sys.stderr)
            for field, message in e.errors.items():
                print(f"  {field}: {message}", file=sys.stderr)
            return 1
        except PayrollError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        finally:
            await dispose_db()

    async def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create database tables."""
        await create_schema()
        print("Schema created.", file=self.stdout)
        return 0

    async def _cmd_calculate(self, args: argparse.Namespace) -> int:
        """Run payroll for a pay period."""
        async with get_session() as session:
            count = await PayrollService(session).calculate_payroll(args.pay_period_id)
        print(f"Calculated payroll for {count} employees", file=self.stdout)
        return 0

    async def _cmd_mark_paid(self, args: argparse.Namespace) -> int:
        """Mark a pay period as paid."""
        async with get_session() as session:
            pay_period = await PayrollService(session).mark_as_paid(args.pay_period_id)
            print(
                f"Pay period {pay_period.pay_period_id} is now {pay_period.status}",
                file=self.stdout,
            )
        return 0

    async def _cmd_reset(self, args: argparse.Namespace) -> int:
        """Reset an interrupted run."""
        async with get_session() as session:
            pay_period = await PayrollService(session).reset_run(args.pay_period_id)
            print(
                f"Pay period {pay_period.pay_period_id} is now {pay_period.status}",
                file=self.stdout,
            )
        return 0

    async def _cmd_export(self, args: argparse.Namespace) -> int:
        """Export a pay period to JSON lines."""
        async with get_session() as session:
            rows = await ExportService(session).generate_export(args.pay_period_id)

        lines = [json.dumps(row.to_dict()) for row in rows]
        if args.output:
            with open(args.output, "w") as f:
                for line in lines:
                    f.write(line + "\n")
            print(f"Exported {len(lines)} rows to {args.output}", file=self.stdout)
        else:
            for line in lines:
                print(line, file=self.stdout)
        return 0


def main() -> None:
    """CLI entry point."""
    cli = PayrollCli()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
