"""Rich-based console rendering of report results.

:class:`ReportConsole` renders each of the three variants: a score card
plus pillar table for a single company, a feature table for a comparison,
and a pick-list for an ambiguous query.  It only reads typed data; scoring
is delegated to a :class:`~startup_guardian.services.scoring.WeightSession`.
"""

from __future__ import annotations

from typing import IO

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from startup_guardian.domain.enums import RiskLevel, StatusColor
from startup_guardian.domain.values import (
    TIE,
    AmbiguityResponse,
    ComparisonReport,
    ReportResult,
    SafetyReport,
    Source,
    StabilityScore,
)
from startup_guardian.services.scoring import WeightSession

_STATUS_STYLE = {
    StatusColor.GREEN: "green",
    StatusColor.YELLOW: "yellow",
    StatusColor.RED: "red",
}

_RISK_STYLE = {
    RiskLevel.LOW: "bold green",
    RiskLevel.MEDIUM: "bold yellow",
    RiskLevel.HIGH: "bold red",
}

DISCLAIMER = (
    "Generated by AI from real-time public search data. Scores, risk levels "
    "and winners are estimates only. Verify critical details (runway, equity "
    "terms, visa policy) with the company before making career decisions."
)


class ReportConsole:
    """Renders report results to a terminal.

    Parameters
    ----------
    file:
        Output stream.  Defaults to ``sys.stdout``.
    width:
        Fixed console width, mainly for tests.
    """

    def __init__(self, file: IO[str] | None = None, width: int | None = None) -> None:
        self._console = Console(file=file, width=width)

    @property
    def console(self) -> Console:
        return self._console

    def print_result(self, result: ReportResult, session: WeightSession | None = None) -> None:
        """Dispatch on the variant of *result*."""
        if isinstance(result, SafetyReport):
            self.print_single(session or WeightSession.from_report(result))
        elif isinstance(result, ComparisonReport):
            self.print_battle(result)
        elif isinstance(result, AmbiguityResponse):
            self.print_ambiguous(result)
        else:
            raise TypeError(f"Unknown report variant: {type(result).__name__}")

    # -- single ----------------------------------------------------------------

    def print_single(self, session: WeightSession) -> None:
        report = session.report
        score = session.score()
        profile = report.profile

        self._console.print()
        self._console.print(
            Panel(
                f"[bold]{escape(profile.name or 'Unknown company')}[/bold]\n"
                f"{escape(profile.product)}\n"
                f"[dim]Founded {escape(profile.founded or '?')} · {escape(profile.location or '?')} · "
                f"{escape(profile.last_funding or 'funding unknown')}[/dim]",
                title="Company",
            )
        )
        self._print_score(score, session)

        table = Table(title="Pillars", show_lines=False)
        table.add_column("#", justify="right")
        table.add_column("Pillar")
        table.add_column("Weight", justify="right")
        table.add_column("Status")
        table.add_column("Summary")
        weights = session.weights
        for p in report.pillars:
            table.add_row(
                str(p.id),
                escape(p.title or p.category),
                f"{weights.get(p.id, 0)}%",
                f"[{_STATUS_STYLE[p.status]}]{p.status.value}[/]",
                escape(p.summary),
            )
        self._console.print(table)

        if report.summary.guardian_take:
            self._console.print(f"[bold]Guardian's take:[/bold] {escape(report.summary.guardian_take)}")
        if report.summary.red_flags:
            self._console.print(f"[red]Red flags:[/red] {escape(report.summary.red_flags)}")
        visa = report.visa_safety
        self._console.print(
            f"[dim]Visa: H-1B {escape(visa.h1b_sponsor)} · Green card {escape(visa.green_card)} · "
            f"E-Verify {escape(visa.e_verify)}[/dim]"
        )
        self._print_sources(report.sources)
        self._console.print(f"[dim italic]{DISCLAIMER}[/dim italic]")

    def _print_score(self, score: StabilityScore, session: WeightSession) -> None:
        origin = "AI score" if session.use_ai else "custom weights"
        self._console.print(
            f"Stability score: [bold]{score.score}[/bold]/100  "
            f"[{_RISK_STYLE[score.risk_level]}]{score.risk_level.value} risk[/]  "
            f"verdict: [bold]{score.verdict.value}[/bold]  [dim]({origin})[/dim]"
        )
        if not session.is_balanced:
            self._console.print(
                f"[yellow]Weights total {session.total}%, not 100%; "
                "the score is renormalized.[/yellow]"
            )

    # -- battle ----------------------------------------------------------------

    def print_battle(self, report: ComparisonReport) -> None:
        table = Table(title=escape(" vs ".join(report.companies)) or "Comparison")
        table.add_column("Feature")
        for company in report.companies:
            table.add_column(escape(company))
        table.add_column("Winner")
        for row in report.rows:
            winner = report.winner_of(row)
            table.add_row(
                escape(row.feature),
                *(escape(row.value_for(c)) for c in report.companies),
                "[dim]Tie[/dim]" if winner == TIE else f"[bold]{escape(winner)}[/bold]",
            )
        self._console.print()
        self._console.print(table)
        if report.guardian_verdict:
            self._console.print(Panel(escape(report.guardian_verdict), title="Guardian's verdict"))
        self._print_sources(report.sources)
        self._console.print(f"[dim italic]{DISCLAIMER}[/dim italic]")

    # -- ambiguous -------------------------------------------------------------

    def print_ambiguous(self, response: AmbiguityResponse) -> None:
        self._console.print()
        self._console.print(
            f"[yellow]'{escape(response.original_query)}' matches several companies. "
            "Which one did you mean?[/yellow]"
        )
        for i, option in enumerate(response.options, start=1):
            self._console.print(f"  {i}. {escape(option)}")

    # -- shared ----------------------------------------------------------------

    def _print_sources(self, sources: tuple[Source, ...]) -> None:
        if not sources:
            return
        self._console.print("[bold]Sources[/bold]")
        for s in sources:
            self._console.print(f"  - {escape(s.title)} [dim]{escape(s.uri)}[/dim]", highlight=False)

    def print_error(self, message: str) -> None:
        self._console.print(f"[bold red]{escape(message)}[/bold red]")
