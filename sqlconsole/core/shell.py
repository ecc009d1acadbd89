"""Interactive terminal console for running SQL through the same service as the web UI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from tabulate import tabulate

from sqlconsole.core.cli import build_parser, load_cli_settings
from sqlconsole.core.config import validate_rows_limit
from sqlconsole.core.dependencies import build_dependencies
from sqlconsole.core.logging_utils import configure_logging
from sqlconsole.core.results import PageRender
from sqlconsole.core.service import ConsoleService

_exit_commands = {"/exit", "exit", "quit", ":q"}


def format_page(page: PageRender) -> str:
    """Render *page* as plain text for a terminal."""

    result = page.result
    if result is None:
        return "OK"
    if result.error is not None:
        return f"Error: {result.error}"
    if result.grid is not None:
        count = result.grid.row_count
        table = tabulate(result.grid.rows, headers=result.grid.columns, tablefmt="grid")
        return f"{table}\n({count} row{'s' if count != 1 else ''})"
    if result.rows_affected is not None:
        return f"OK, {result.rows_affected} row{'s' if result.rows_affected != 1 else ''} affected"
    return "OK"


@dataclass
class ShellCLI:
    """Line-oriented SQL console built on top of :class:`ConsoleService`."""

    service: ConsoleService
    input_func: Callable[[str], str] = field(default=input)
    output_func: Callable[[str], None] = field(default=print)
    prompt: str = "sql> "

    def start(self) -> None:
        """Run the read-eval-print loop until EOF or an exit command."""

        self.output_func(
            "Type SQL to query the database. Use '/exec <sql>' for statements,"
            " '/limit [n]' to view or change the row limit, and '/exit' to leave."
        )
        while True:
            try:
                raw = self.input_func(self.prompt)
            except EOFError:
                self.output_func("\nSession ended.")
                break

            line = raw.strip()
            if not line:
                continue
            if line.lower() in _exit_commands:
                self.output_func("Session ended.")
                break
            if line.startswith("/limit"):
                self._handle_limit_command(line)
                continue
            if line.startswith("/exec"):
                statement = line[len("/exec"):].strip()
                if not statement:
                    self.output_func("Usage: /exec <sql>")
                    continue
                page = self.service.execute(statement)
            else:
                page = self.service.query(line)
            self.output_func(format_page(page))
            self.output_func("")

    def _handle_limit_command(self, command: str) -> None:
        parts = command.split(maxsplit=1)
        if len(parts) == 1:
            self.output_func(f"Row limit is {self.service.row_limit}.")
            return
        try:
            limit = validate_rows_limit(int(parts[1]))
        except ValueError:
            self.output_func("Usage: /limit <non-negative integer>")
            return
        self.service.row_limit = limit
        self.output_func(f"Row limit set to {limit}.")


def main() -> None:
    """CLI entry point for the terminal console."""

    args = build_parser("Run SQL from the terminal").parse_args()
    configure_logging(debug=args.debug)
    settings = load_cli_settings(args)
    service = build_dependencies(settings).build_service(settings)
    ShellCLI(service=service).start()


if __name__ == "__main__":
    main()
