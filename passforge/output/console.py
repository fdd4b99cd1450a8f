"""
PassForge Console Output
=========================

Rich-based renderers for every PassForge result: a strength meter for
composite analysis, a rotation panel for expiry estimates, a violation
table for policy checks and plain listings for generated secrets.

Generated passwords may contain ``[`` and ``]``; everything that echoes
user or generator text goes through :func:`rich.markup.escape`.

References:
    - Rich Library Documentation. https://rich.readthedocs.io/
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from shared.console import ForgeConsole
from passforge.analyzers.crack_cost import format_crack_cost
from passforge.core.models import (
    ExpiryEstimate,
    GeneratedPassword,
    MinimumRequirementsResult,
    PolicyResult,
    QuickStrengthResult,
    StrengthResult,
    ViolationSeverity,
)


# ===================================================================== #
#  Colour Maps
# ===================================================================== #

_STRENGTH_COLOURS: dict[str, str] = {
    "weak": "bold red",
    "medium": "bold yellow",
    "strong": "bold green",
    "very-strong": "bold bright_green",
}

_VIOLATION_COLOURS: dict[ViolationSeverity, str] = {
    ViolationSeverity.ERROR: "bold red",
    ViolationSeverity.WARNING: "yellow",
}

_METER_WIDTH = 40


def _table(title: Optional[str] = None) -> Table:
    return Table(
        title=title,
        border_style="bright_cyan",
        header_style="bold bright_magenta",
        show_lines=True,
    )


class ForgeConsoleOutput:
    """Console renderers used by the ``passforge`` CLI.

    Args:
        console: Shared console; a fresh one is created when omitted.
    """

    def __init__(self, console: Optional[ForgeConsole] = None) -> None:
        self.console = console or ForgeConsole()
        self._rich = self.console.rich

    # ------------------------------------------------------------------ #
    #  Strength
    # ------------------------------------------------------------------ #

    def _meter(self, score: int, band: str) -> Text:
        filled = max(0, min(_METER_WIDTH, int(score / 100 * _METER_WIDTH)))
        colour = _STRENGTH_COLOURS.get(band, "white")

        meter = Text()
        meter.append("Score: ", style="bold")
        meter.append(f"{score}/100  ")
        meter.append("[", style="dim")
        for i in range(_METER_WIDTH):
            if i >= filled:
                meter.append("░", style="dim")
            elif i < _METER_WIDTH * 0.40:
                meter.append("█", style="red")
            elif i < _METER_WIDTH * 0.60:
                meter.append("█", style="yellow")
            elif i < _METER_WIDTH * 0.80:
                meter.append("█", style="green")
            else:
                meter.append("█", style="bright_green")
        meter.append("]", style="dim")
        meter.append(f"  {band.upper()}", style=colour)
        return meter

    def display_strength(
        self,
        result: StrengthResult,
        crack_cost_usd: Optional[float] = None,
        hash_algorithm: str = "argon2id",
    ) -> None:
        """Strength meter, detail table, weaknesses and suggestions."""
        self.console.section("Strength Analysis")
        self._rich.print(Panel(
            self._meter(result.score, result.strength.value),
            title="Strength Meter",
            border_style="cyan",
        ))

        tbl = _table()
        tbl.add_column("Property", style="bold")
        tbl.add_column("Value")
        tbl.add_row("Entropy", f"{result.entropy:.1f} bits")
        tbl.add_row("Crack Time", result.crack_time)
        if crack_cost_usd is not None:
            tbl.add_row(f"Crack Cost ({hash_algorithm})", format_crack_cost(crack_cost_usd))
        self._rich.print(tbl)

        if result.weaknesses:
            self._rich.print()
            self._rich.print("[bold]Weaknesses:[/bold]")
            for weakness in result.weaknesses:
                self._rich.print(f"  [yellow]⚠[/yellow] {escape(weakness)}")

        if result.feedback.suggestions:
            self._rich.print()
            self._rich.print("[bold]Suggestions:[/bold]")
            for suggestion in result.feedback.suggestions:
                self._rich.print(f"  [bright_cyan]•[/bright_cyan] {escape(suggestion)}")

    def display_quick(
        self,
        quick: QuickStrengthResult,
        minimum: MinimumRequirementsResult,
    ) -> None:
        self.console.section("Quick Check")
        self._rich.print(self._meter(quick.score, quick.strength.value))
        if minimum.meets:
            self.console.success("Minimum requirements met")
        else:
            for item in minimum.missing:
                self.console.warning(f"Missing: {item}")

    # ------------------------------------------------------------------ #
    #  Rotation
    # ------------------------------------------------------------------ #

    def display_expiry(self, estimate: ExpiryEstimate, schedule: str, rotate_now: bool) -> None:
        """Rotation schedule with dates, remaining days and crack cost."""
        self.console.section("Rotation Recommendation")

        tbl = _table()
        tbl.add_column("Property", style="bold")
        tbl.add_column("Value")
        tbl.add_row("Schedule", schedule)
        tbl.add_row("Rotation Period", f"{estimate.rotation_period_days} days")
        tbl.add_row("Expires", estimate.expiry_date.strftime("%Y-%m-%d"))
        tbl.add_row("Days Remaining", str(estimate.days_remaining))
        tbl.add_row("Next Check", estimate.next_check_date.strftime("%Y-%m-%d"))
        tbl.add_row("Entropy", f"{estimate.entropy:.1f} bits")
        tbl.add_row("Crack Cost", format_crack_cost(estimate.estimated_crack_cost))
        self._rich.print(tbl)

        self._rich.print(Panel(
            escape(estimate.reason),
            title="Rotate Now" if rotate_now else "Reason",
            border_style="red" if rotate_now else "green",
        ))

    # ------------------------------------------------------------------ #
    #  Policy
    # ------------------------------------------------------------------ #

    def display_policy(self, result: PolicyResult) -> None:
        """Verdict line followed by the ordered violation table."""
        self.console.section("Policy Validation")
        verdict = "VALID" if result.valid else "INVALID"
        colour = "bold green" if result.valid else "bold red"
        self._rich.print(f"[{colour}]{verdict}[/{colour}]  score {result.score}/100")

        if not result.violations:
            return

        tbl = _table("Violations")
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Severity")
        tbl.add_column("Field")
        tbl.add_column("Message")
        tbl.add_column("Details", style="dim")
        for idx, violation in enumerate(result.violations, start=1):
            colour = _VIOLATION_COLOURS[violation.severity]
            tbl.add_row(
                str(idx),
                f"[{colour}]{violation.severity.value}[/{colour}]",
                violation.field,
                escape(violation.message),
                escape(violation.details or ""),
            )
        self._rich.print(tbl)

    # ------------------------------------------------------------------ #
    #  Generation / hashing
    # ------------------------------------------------------------------ #

    def display_generated(self, generated: Sequence[GeneratedPassword], title: str = "Generated") -> None:
        self.console.section(title)
        tbl = _table()
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Secret", style="bold")
        tbl.add_column("Entropy", justify="right")
        tbl.add_column("Strength")
        for idx, item in enumerate(generated, start=1):
            colour = _STRENGTH_COLOURS.get(item.strength.value, "white")
            tbl.add_row(
                str(idx),
                escape(item.password),
                f"{item.entropy:.1f} bits",
                f"[{colour}]{item.strength.value}[/{colour}]",
            )
        self._rich.print(tbl)

    def display_hash(self, raw: dict[str, Any]) -> None:
        """Encoded hash plus the parameters it was produced with."""
        self.console.section("Argon2id")
        if "verified" in raw:
            if raw["verified"]:
                self.console.success("Password matches hash")
            else:
                self.console.error("Password does not match hash")
            return

        options = raw.get("options", {})
        estimate = raw.get("estimate_ms", {})
        tbl = _table()
        tbl.add_column("Property", style="bold")
        tbl.add_column("Value")
        tbl.add_row("Encoded", escape(raw.get("encoded", "")))
        tbl.add_row("Salt (hex)", raw.get("salt_hex", ""))
        tbl.add_row("Memory", f"{options.get('memory_kib')} KiB")
        tbl.add_row("Iterations", str(options.get("iterations")))
        tbl.add_row("Parallelism", str(options.get("parallelism")))
        tbl.add_row(
            "Expected Time",
            f"{estimate.get('min')}-{estimate.get('max')} ms (optimal {estimate.get('optimal')} ms)",
        )
        self._rich.print(tbl)

    def display_calibration(self, raw: dict[str, Any]) -> None:
        """Recommended parameters from :func:`recommend_options`."""
        self.console.section("Argon2id Calibration")
        options = raw.get("options", {})
        estimate = raw.get("estimate_ms", {})
        self.console.table(
            f"Target {raw.get('target_ms')} ms",
            ["Parameter", "Value"],
            [
                ("memory_kib", options.get("memory_kib")),
                ("iterations", options.get("iterations")),
                ("parallelism", options.get("parallelism")),
                ("hash_length", options.get("hash_length")),
                ("estimated ms", f"{estimate.get('min')}-{estimate.get('max')}"),
            ],
        )
