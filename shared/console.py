"""
PassForge Console Interface
============================

Rich-powered console abstraction shared by every PassForge command.

The class wraps :class:`rich.console.Console` and adds helpers for the
banner, section headers, coloured status messages, tables, findings and
status spinners, all with one consistent palette.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

import datetime as _dt
from contextlib import contextmanager
from typing import Any, Generator, Sequence

from rich.align import Align
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

from shared.models import Finding, Severity

# ---------------------------------------------------------------------------
# Theme
# ---------------------------------------------------------------------------
_FORGE_THEME = Theme(
    {
        "forge.section": "bold bright_magenta",
        "forge.success": "bold green",
        "forge.warning": "bold yellow",
        "forge.error": "bold red",
        "forge.info": "bold bright_blue",
        "forge.dim": "dim white",
        "forge.critical": "bold white on red",
        "forge.high": "bold red",
        "forge.medium": "bold yellow",
        "forge.low": "bold bright_cyan",
        "forge.informational": "bold bright_blue",
        "forge.tagline": "bold bright_green",
    }
)

_BANNER_ART = r"""
[bright_cyan]
  ___              ___
 | _ \__ _ ______ | __|__ _ _ __ _ ___
 |  _/ _` (_-<_-< | _/ _ \ '_/ _` / -_)
 |_| \__,_/__/__/ |_|\___/_| \__, \___|
                             |___/
[/bright_cyan]"""

_TAGLINE = "Password generation, strength, rotation and policy toolkit"

_SEVERITY_STYLES: dict[Severity, str] = {
    Severity.CRITICAL: "forge.critical",
    Severity.HIGH: "forge.high",
    Severity.MEDIUM: "forge.medium",
    Severity.LOW: "forge.low",
    Severity.INFO: "forge.informational",
}


def _styled_table(title: str) -> Table:
    return Table(
        title=title,
        border_style="bright_cyan",
        header_style="bold bright_magenta",
        show_lines=True,
        padding=(0, 1),
    )


class ForgeConsole:
    """Unified console interface for PassForge commands.

    Usage::

        con = ForgeConsole()
        con.banner()
        con.section("Policy Check")
        con.success("Password accepted")
    """

    def __init__(self, *, quiet: bool = False) -> None:
        """Initialise the console.

        Args:
            quiet: Suppress all output (JSON mode, ``--quiet``).
        """
        self._console = Console(
            theme=_FORGE_THEME,
            quiet=quiet,
            highlight=False,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Banner / section
    # ------------------------------------------------------------------ #

    def banner(self, version: str = "1.0.0") -> None:
        """Display the PassForge banner with version and local time."""
        now = _dt.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        subtitle = (
            f"[forge.tagline]{_TAGLINE}[/forge.tagline]\n"
            f"[forge.dim]Version: {version}  |  {now}[/forge.dim]"
        )
        panel = Panel(
            Align.center(Text.from_markup(_BANNER_ART + "\n" + subtitle)),
            border_style="bright_cyan",
            padding=(0, 2),
        )
        self._console.print(panel)

    def section(self, title: str) -> None:
        """Print a prominent section header."""
        self._console.rule(f"  {title}  ", style="forge.section", characters="─")
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(f"[forge.success][✔] SUCCESS:[/forge.success] {message}")

    def warning(self, message: str) -> None:
        self._console.print(f"[forge.warning][⚠] WARNING:[/forge.warning] {message}")

    def error(self, message: str) -> None:
        self._console.print(f"[forge.error][✘] ERROR:[/forge.error] {escape(message)}")

    # ------------------------------------------------------------------ #
    #  Tables
    # ------------------------------------------------------------------ #

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[Any]]) -> None:
        """Render a two-or-more column table; cells are stringified."""
        tbl = _styled_table(title)
        for col_name in columns:
            tbl.add_column(col_name)
        for row in rows:
            tbl.add_row(*(escape(str(cell)) for cell in row))
        self._console.print(tbl)

    def findings_table(self, findings: Sequence[Finding]) -> None:
        """Render findings most-severe first, with their recommendations.

        Finding text can echo pattern fragments such as ``"[]{"``, so every
        cell is markup-escaped.
        """
        if not findings:
            self.success("No findings")
            return

        order = list(Severity)
        ranked = sorted(findings, key=lambda f: order.index(f.severity))
        show_advice = any(f.recommendation for f in ranked)

        tbl = _styled_table("Findings")
        tbl.add_column("#", style="dim", width=4, justify="right")
        tbl.add_column("Severity", width=10)
        tbl.add_column("Title")
        tbl.add_column("Description", ratio=2)
        if show_advice:
            tbl.add_column("Recommendation", style="forge.dim")

        for idx, finding in enumerate(ranked, start=1):
            style = _SEVERITY_STYLES[finding.severity]
            cells = [
                str(idx),
                f"[{style}]{finding.severity.value}[/{style}]",
                escape(finding.title),
                escape(finding.description),
            ]
            if show_advice:
                cells.append(escape(finding.recommendation))
            tbl.add_row(*cells)

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Status spinner
    # ------------------------------------------------------------------ #

    @contextmanager
    def status(self, message: str = "Working...") -> Generator[Any, None, None]:
        """Context-manager showing a spinner with a status message.

        Example::

            with con.status("Benchmarking Argon2id..."):
                options = asyncio.run(recommend_options())
        """
        with self._console.status(
            f"[forge.info]{message}[/forge.info]",
            spinner="dots",
            spinner_style="bright_cyan",
        ) as status_obj:
            yield status_obj

