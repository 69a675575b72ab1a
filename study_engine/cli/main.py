"""
Typer CLI for study-engine.

Commands:
    study-engine score ASSESSMENT.json           - Score a level assessment
    study-engine weakness CONCEPTS.json          - Weakness radar (most urgent first)
    study-engine review SCHEDULE.json -o pass    - Advance a review schedule
    study-engine due SCHEDULES.json              - Reviews due now
    study-engine missions MISSIONS.json -t TIER  - Recommended missions
    study-engine streak STREAK.json -d DATE      - Record a day of activity
    study-engine remind ROUTINE.json             - Next reminder instant
    study-engine plan PLAN.json                  - Full daily plan

Every command accepts --json for machine-readable output and --now to pin
the current instant (ISO 8601; naive values use STUDY_ENGINE_TIMEZONE).
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path
from typing import Iterator, Optional, TypeVar

import typer
from loguru import logger
from pydantic import BaseModel, ValidationError
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from config import get_settings
from study_engine.adaptive.mission_ranker import MissionRanker
from study_engine.adaptive.weakness import WeaknessPrioritizer, WeaknessReport
from study_engine.cli.schemas import (
    AssessmentDocument,
    ConceptsDocument,
    MissionsDocument,
    PlanDocument,
    RoutineIn,
    ScheduleIn,
    SchedulesDocument,
    StreakIn,
)
from study_engine.core.errors import EngineError, OrderingViolationError
from study_engine.core.models import ReviewSchedule
from study_engine.core.tiers import Tier
from study_engine.delivery.reminder import ReminderScheduler
from study_engine.learning.streak import StreakMilestone, StreakTracker, local_date
from study_engine.study.daily_plan import DailyPlan, DailyPlanner
from study_engine.study.proficiency import ProficiencyScorer
from study_engine.study.review_scheduler import ReviewScheduler

app = typer.Typer(
    help="study-engine CLI: proficiency scoring, weakness radar, review and streak scheduling",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)

DocumentT = TypeVar("DocumentT", bound=BaseModel)

JSON_OPTION = typer.Option(False, "--json", help="Print JSON instead of a table")
NOW_OPTION = typer.Option(None, "--now", help="Current instant, ISO 8601 (default: now)")


def _document_argument(help_text: str):
    return typer.Argument(..., exists=True, dir_okay=False, readable=True, help=help_text)


# ========================================
# Context Builder (Dependency Injection)
# ========================================


class CLIContext:
    """
    Dependency injection container for CLI commands.

    Builds components from settings on first use.
    """

    def __init__(self):
        self.settings = get_settings()
        self._planner: DailyPlanner | None = None

    @property
    def zone(self):
        return self.settings.zone

    @property
    def planner(self) -> DailyPlanner:
        if self._planner is None:
            self._planner = DailyPlanner.from_settings(self.settings)
        return self._planner

    def now(self, value: str | None) -> datetime:
        """Parse --now, attaching the configured zone to naive values."""
        if value is None:
            return datetime.now(self.zone)
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            raise typer.BadParameter(f"not an ISO 8601 datetime: {value}", param_hint="--now") from None
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=self.zone)


def _build_context() -> CLIContext:
    """Build CLI context with dependency injection."""
    return CLIContext()


@contextmanager
def _engine_errors() -> Iterator[None]:
    """Translate document and engine errors into exit codes."""
    try:
        yield
    except ValidationError as e:
        err_console.print(f"[red]Invalid document:[/red] {escape(str(e))}")
        raise typer.Exit(code=2)
    except EngineError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


def _load(path: Path, model: type[DocumentT]) -> DocumentT:
    logger.debug(f"Loading {model.__name__} from {path}")
    return model.model_validate_json(path.read_text(encoding="utf-8"))


def _emit_json(payload) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _days_label(days: float) -> str:
    return "never" if days == float("inf") else f"{days:.1f}"


def _weakness_table(reports: list[WeaknessReport], title: str = "Weakness Radar") -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Concept")
    table.add_column("Category", style="dim")
    table.add_column("Urgency")
    table.add_column("Success", justify="right")
    table.add_column("Days", justify="right")
    for report in reports:
        c = report.concept
        table.add_row(
            str(report.rank),
            c.name,
            c.category,
            f"[{report.urgency.color}]{report.urgency.value}[/{report.urgency.color}]",
            f"{c.success_rate:.0f}%",
            _days_label(report.days_since_practice),
        )
    return table


def _schedule_table(schedules: list[ReviewSchedule], title: str) -> Table:
    table = Table(title=title)
    table.add_column("Concept")
    table.add_column("Rung", justify="right")
    table.add_column("Due at")
    for s in schedules:
        table.add_row(s.concept_id, str(s.interval_index), s.due_at.isoformat(timespec="minutes"))
    return table


# ========================================
# Assessment
# ========================================


@app.command("score")
def score(
    path: Path = _document_argument("Assessment JSON: {catalog: [...], responses: [...]}"),
    json_out: bool = JSON_OPTION,
):
    """Score a level assessment and report the proficiency tier."""
    with _engine_errors():
        doc = _load(path, AssessmentDocument)
        scorer = ProficiencyScorer()
        questions, answers = doc.questions(), doc.answers()
        result = scorer.score(answers, questions)
        breakdown = scorer.breakdown(answers, questions)

    if json_out:
        payload = result.to_dict()
        payload["breakdown"] = [s.to_dict() for s in breakdown.values()]
        _emit_json(payload)
        return

    tier = result.tier
    rprint(
        f"{tier.emoji} [bold {tier.color}]{tier.value}[/bold {tier.color}] "
        f"- {result.percentage:.2f}% ({result.earned_points}/{result.possible_points} points)"
    )
    table = Table(title="By tier")
    table.add_column("Tier")
    table.add_column("Points", justify="right")
    table.add_column("Score", justify="right")
    for tier_score in breakdown.values():
        table.add_row(
            tier_score.tier.display_name,
            f"{tier_score.earned_points}/{tier_score.possible_points}",
            f"{tier_score.percentage:.0f}%",
        )
    console.print(table)
    if result.ignored_question_ids:
        rprint(f"[yellow]Ignored responses to unknown questions:[/yellow] {', '.join(result.ignored_question_ids)}")


# ========================================
# Weakness & Reviews
# ========================================


@app.command("weakness")
def weakness(
    path: Path = _document_argument("Concepts JSON: {concepts: [...]}"),
    now: Optional[str] = NOW_OPTION,
    json_out: bool = JSON_OPTION,
):
    """Rank concepts by review urgency."""
    ctx = _build_context()
    current = ctx.now(now)
    with _engine_errors():
        concepts = _load(path, ConceptsDocument).to_domain(ctx.zone)
        reports = WeaknessPrioritizer.from_settings(ctx.settings).assess(concepts, current)

    if json_out:
        _emit_json([r.to_dict() for r in reports])
        return
    if not reports:
        rprint("[green]No concepts to review.[/green]")
        return
    console.print(_weakness_table(reports))


@app.command("review")
def review(
    path: Path = _document_argument("Schedule JSON: {conceptId, intervalIndex, dueAt}"),
    outcome: str = typer.Option(..., "--outcome", "-o", help="Review outcome: pass or fail"),
    now: Optional[str] = NOW_OPTION,
    json_out: bool = JSON_OPTION,
):
    """Advance a review schedule after a completed review."""
    ctx = _build_context()
    current = ctx.now(now)
    with _engine_errors():
        schedule = _load(path, ScheduleIn).to_domain(ctx.zone)
        updated = ReviewScheduler.from_settings(ctx.settings).next_due(schedule, outcome, current)

    if json_out:
        _emit_json(updated.to_dict())
        return
    rprint(
        f"[cyan]{updated.concept_id}[/cyan]: rung {schedule.interval_index} -> {updated.interval_index}, "
        f"next review {updated.due_at.isoformat(timespec='minutes')}"
    )


@app.command("due")
def due(
    path: Path = _document_argument("Schedules JSON: {schedules: [...], concepts: [...]}"),
    now: Optional[str] = NOW_OPTION,
    json_out: bool = JSON_OPTION,
):
    """List reviews due now, most urgent concept first."""
    ctx = _build_context()
    current = ctx.now(now)
    with _engine_errors():
        doc = _load(path, SchedulesDocument)
        concepts = doc.to_domain(ctx.zone)
        due_now = ReviewScheduler.from_settings(ctx.settings).due_today(
            doc.schedule_records(ctx.zone), current, concepts=concepts or None
        )

    if json_out:
        _emit_json([s.to_dict() for s in due_now])
        return
    if not due_now:
        rprint("[green]Nothing due right now![/green]")
        return
    console.print(_schedule_table(due_now, f"Due now ({len(due_now)})"))


# ========================================
# Missions
# ========================================


@app.command("missions")
def missions(
    path: Path = _document_argument("Missions JSON: {missions: [...], concepts: [...]}"),
    tier: Tier = typer.Option(..., "--tier", "-t", help="Learner tier"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=0, help="Maximum missions"),
    now: Optional[str] = NOW_OPTION,
    json_out: bool = JSON_OPTION,
):
    """Recommend missions for the learner's tier, weakest concepts first."""
    ctx = _build_context()
    current = ctx.now(now)
    with _engine_errors():
        doc = _load(path, MissionsDocument)
        ranking = WeaknessPrioritizer.from_settings(ctx.settings).rank(doc.to_domain(ctx.zone), current)
        ranked = MissionRanker.from_settings(ctx.settings).rank(
            doc.mission_records(), ranking, tier, limit=limit
        )

    if json_out:
        _emit_json([m.to_dict() for m in ranked])
        return
    if not ranked:
        rprint(f"[yellow]No missions for tier {tier.value}.[/yellow]")
        return
    table = Table(title=f"Recommended missions ({tier.display_name})")
    table.add_column("#", justify="right")
    table.add_column("Mission")
    table.add_column("Concept")
    table.add_column("Minutes", justify="right")
    table.add_column("Steps", justify="right")
    for position, mission in enumerate(ranked, start=1):
        table.add_row(
            str(position), mission.id, mission.concept_id, str(mission.estimated_minutes), str(len(mission.steps))
        )
    console.print(table)


# ========================================
# Routine
# ========================================


@app.command("streak")
def streak(
    path: Path = _document_argument("Streak JSON: {currentStreak, longestStreak, totalActiveDays, lastActiveDate}"),
    on: Optional[str] = typer.Option(None, "--date", "-d", help="Activity date YYYY-MM-DD (default: today)"),
    json_out: bool = JSON_OPTION,
):
    """Record a day of activity and print the updated streak."""
    ctx = _build_context()
    if on is None:
        activity_date = local_date(datetime.now(ctx.zone), ctx.zone)
    else:
        try:
            activity_date = date.fromisoformat(on)
        except ValueError:
            raise typer.BadParameter(f"not a YYYY-MM-DD date: {on}", param_hint="--date") from None

    with _engine_errors():
        state = _load(path, StreakIn).to_domain()
        try:
            updated = StreakTracker().record_activity(state, activity_date)
        except OrderingViolationError as e:
            err_console.print(f"[yellow]Out-of-order activity ignored:[/yellow] {escape(str(e))}")
            raise typer.Exit(code=1)

    if json_out:
        _emit_json(updated.to_dict())
        return
    milestone = StreakMilestone.for_streak(updated.current_streak)
    rprint(
        f"{milestone.emoji} [bold]{updated.current_streak}[/bold]-day streak "
        f"(longest {updated.longest_streak}, {updated.total_active_days} active days)"
    )


@app.command("remind")
def remind(
    path: Path = _document_argument("Routine JSON: {dailyGoal, reminderTime, enabled, studyDurationMinutes}"),
    now: Optional[str] = NOW_OPTION,
    json_out: bool = JSON_OPTION,
):
    """Show when the next study reminder fires and what it says."""
    ctx = _build_context()
    current = ctx.now(now)
    with _engine_errors():
        routine = _load(path, RoutineIn).to_domain(ctx.settings.get_routine_config())
        scheduler = ReminderScheduler(ctx.zone)
        trigger = scheduler.next_trigger(routine, current)
        message = scheduler.build_message(routine)

    if json_out:
        _emit_json({
            "next_trigger": trigger.isoformat() if trigger else None,
            "message": message.to_dict() if trigger else None,
        })
        return
    if trigger is None:
        rprint("[dim]Reminders are disabled.[/dim]")
        return
    rprint(f"Next reminder: [bold]{trigger.isoformat(timespec='minutes')}[/bold]")
    rprint(f"{message.title} {message.body}")


# ========================================
# Daily Plan
# ========================================


def _render_plan(plan: DailyPlan) -> None:
    tier = plan.tier
    header = f"{tier.emoji} [bold {tier.color}]{tier.display_name}[/bold {tier.color}]"
    if plan.proficiency:
        header += f" ({plan.proficiency.percentage:.1f}%)"
    rprint(f"\n[bold]Plan for {plan.date.isoformat()}[/bold] - {header}")
    rprint(f"{plan.streak_milestone.emoji} {plan.streak_days}-day streak")

    if plan.weak_concepts:
        console.print(_weakness_table(plan.weak_concepts[:5], title="Top weak concepts"))
    if plan.goal_reviews:
        console.print(
            _schedule_table(plan.goal_reviews, f"Today's reviews ({len(plan.goal_reviews)} of {len(plan.due_reviews)} due)")
        )
    else:
        rprint("[green]No reviews due.[/green]")
    if plan.missions:
        rprint(f"[bold]Missions[/bold] (~{plan.estimated_minutes} min): " + ", ".join(m.id for m in plan.missions))
    if plan.next_reminder:
        rprint(f"[dim]Next reminder {plan.next_reminder.isoformat(timespec='minutes')}[/dim]")


@app.command("plan")
def plan(
    path: Path = _document_argument("Plan JSON: routine, concepts, schedules, missions, tier or catalog+responses, streak"),
    now: Optional[str] = NOW_OPTION,
    json_out: bool = JSON_OPTION,
):
    """Build today's study plan."""
    ctx = _build_context()
    current = ctx.now(now)
    with _engine_errors():
        doc = _load(path, PlanDocument)
        daily = ctx.planner.build_plan(
            now=current,
            routine=doc.routine.to_domain(ctx.settings.get_routine_config()),
            concepts=[c.to_domain(ctx.zone) for c in doc.concepts],
            schedules=[s.to_domain(ctx.zone) for s in doc.schedules],
            missions=[m.to_domain() for m in doc.missions],
            tier=doc.tier,
            responses=[r.to_domain() for r in doc.responses] if doc.responses is not None else None,
            catalog=[q.to_domain() for q in doc.catalog] if doc.catalog is not None else None,
            streak=doc.streak.to_domain() if doc.streak else None,
        )

    if json_out:
        _emit_json(daily.to_dict())
        return
    _render_plan(daily)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Adaptive proficiency and review scheduling engine."""
    try:
        settings = get_settings()
    except ValidationError as e:
        err_console.print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(code=2)

    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
