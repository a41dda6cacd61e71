"""
QuestCore CLI - drive the learning engine from a terminal.

Usage:
    questcore focus                       # Current focus skill
    questcore practice                    # Practice session (interactive)
    questcore practice --answers 3,7,9    # Practice session with scripted answers
    questcore stats                       # Skill proficiency table
    questcore map                         # Curriculum map with level statuses
    questcore complete math-preK --quests 3
    questcore attempt math-preK --quests 1
    questcore place grade2 --focus addition_within_20
    questcore reset --subject math
"""

from __future__ import annotations

import random
import sys
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Annotated

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import get_settings
from questcore.core.exceptions import PersistenceError
from questcore.core.skills import Skill
from questcore.core.subjects import CurriculumGrade, CurriculumSubject, LearningSubject
from questcore.curriculum import (
    CurriculumLevel,
    CurriculumProgressionEngine,
    CurriculumRepository,
    LevelStatus,
    SqlKeyValueStore,
    reference_catalog,
)
from questcore.db.database import get_database
from questcore.learning.placement import PlacementProfile, grade_band_for
from questcore.learning.problem import ProblemResult
from questcore.progress import LoggingAchievementReporter, ProgressStore, SqlProgressRepository
from questcore.study import ExerciseSessionPlanner

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="questcore",
    help="QuestCore - adaptive math practice and curriculum progression",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

STORAGE_ERROR_MESSAGE = "Something went wrong saving progress. Please try again."

STATUS_STYLES = {
    LevelStatus.COMPLETED: "[green]completed[/]",
    LevelStatus.CURRENT: "[bold yellow]current[/]",
    LevelStatus.LOCKED: "[dim]locked[/]",
}


@dataclass
class Services:
    store: ProgressStore
    planner: ExerciseSessionPlanner
    curriculum: CurriculumProgressionEngine


def _configure_logging(verbose: bool) -> None:
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if settings.log_file:
        logger.add(settings.log_file, level=settings.log_level, rotation="1 MB", retention=3)


def _services() -> Services:
    settings = get_settings()
    database = get_database()
    store = ProgressStore(SqlProgressRepository(database), LoggingAchievementReporter(), settings=settings)
    curriculum = CurriculumProgressionEngine(
        reference_catalog(),
        CurriculumRepository(SqlKeyValueStore(database), reference_catalog()),
        settings=settings,
    )
    return Services(store=store, planner=ExerciseSessionPlanner(store), curriculum=curriculum)


@contextmanager
def _storage_errors() -> Generator[None, None, None]:
    """Report storage failures with a generic retry message and exit non-zero."""
    try:
        yield
    except PersistenceError as e:
        logger.error(f"Storage failure: {e}")
        console.print(f"[red]{STORAGE_ERROR_MESSAGE}[/]")
        raise typer.Exit(code=1) from e


def _level_or_exit(level_id: str) -> CurriculumLevel:
    level = reference_catalog().level_by_id(level_id)
    if level is None:
        console.print(f"[red]Unknown level: {level_id}[/]")
        raise typer.Exit(code=2)
    return level


def _parse_answers(raw: str) -> list[int]:
    try:
        return [int(part) for part in raw.split(",") if part.strip()]
    except ValueError as e:
        raise typer.BadParameter("answers must be comma-separated whole numbers") from e


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
) -> None:
    """QuestCore - adaptive math practice and curriculum progression."""
    _configure_logging(verbose)


# =============================================================================
# Practice Commands
# =============================================================================


@app.command()
def focus(
    subject: Annotated[LearningSubject, typer.Option("--subject", "-s", help="Practice subject")] = LearningSubject.MATH,
) -> None:
    """Show the skill the next practice session will target."""
    with _storage_errors():
        services = _services()
        skill = services.store.focus_skill(subject)
        proficiency = services.store.proficiency(skill, subject)

    console.print(
        Panel(
            f"[bold cyan]{skill.display_name}[/]\n"
            f"{skill.description}\n\n"
            f"Grade: {skill.grade_band.display_name}\n"
            f"Proficiency: {proficiency:+.2f}",
            title="Focus skill",
            border_style="cyan",
        )
    )


@app.command()
def practice(
    subject: Annotated[LearningSubject, typer.Option("--subject", "-s", help="Practice subject")] = LearningSubject.MATH,
    answers: Annotated[
        str | None, typer.Option("--answers", "-a", help="Comma-separated answers instead of prompting")
    ] = None,
    seed: Annotated[int | None, typer.Option("--seed", help="Random seed for problem generation")] = None,
    unlimited: Annotated[bool, typer.Option("--unlimited", help="Ignore the daily free-session limit")] = False,
) -> None:
    """
    Run one practice session on the focus skill.

    Examples:
        questcore practice                   # Answer each problem at the prompt
        questcore practice -a 4,6,9,2,5      # Scripted answers (missing ones count as wrong)
    """
    scripted = _parse_answers(answers) if answers is not None else None

    with _storage_errors():
        services = _services()
        if not services.store.can_start_exercise(subject, unlimited=unlimited):
            console.print("[yellow]Today's free session is used up. Come back tomorrow![/]")
            return

        session = services.planner.plan(subject, rng=random.Random(seed))
        console.print(
            Panel(
                f"[bold cyan]{session.skill.display_name}[/]\n"
                f"Problems: {len(session.problems)}",
                title="Practice",
                border_style="cyan",
            )
        )

        results: list[ProblemResult] = []
        for i, problem in enumerate(session.problems):
            console.print(f"[bold]{i + 1}.[/] {problem.prompt}")
            if scripted is None:
                answer = typer.prompt("Answer", type=int)
            else:
                answer = scripted[i] if i < len(scripted) else None
            result = ProblemResult.from_answer(problem, answer)
            mark = "[green]correct[/]" if result.is_correct else f"[red]answer was {problem.correct_answer}[/]"
            console.print(f"   {mark}")
            results.append(result)

        report = services.store.record_session(subject, results)

    correct = sum(1 for r in results if r.is_correct)
    console.print(f"\nScore: [bold]{correct}/{len(results)}[/]  (sessions: {report.total_sessions})")
    for skill in report.newly_mastered_skills:
        console.print(f"[bold green]New skill mastered: {skill.display_name}![/]")


@app.command()
def stats(
    subject: Annotated[LearningSubject, typer.Option("--subject", "-s", help="Practice subject")] = LearningSubject.MATH,
) -> None:
    """Show per-skill proficiency along the learning path."""
    with _storage_errors():
        services = _services()
        progress = services.store.subject_progress(subject)
        records = services.store.skill_records(subject)
    engine = services.store.mastery_engine

    table = Table(title=f"{subject.display_name} skills")
    table.add_column("Skill", style="cyan")
    table.add_column("Grade")
    table.add_column("Proficiency", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Mastered", justify="center")

    for record in records:
        skill = Skill(record.skill_id)
        table.add_row(
            skill.display_name,
            skill.grade_band.display_name,
            f"{record.proficiency:+.2f}",
            str(record.streak),
            "[green]yes[/]" if engine.is_mastered(record.proficiency) else "",
        )

    console.print(table)
    console.print(
        f"Sessions: {progress.total_sessions}  Correct answers: {progress.total_correct_answers}  "
        f"Today: {progress.daily_exercise_count}"
    )


# =============================================================================
# Curriculum Commands
# =============================================================================


@app.command(name="map")
def curriculum_map(
    subject: Annotated[
        CurriculumSubject | None, typer.Option("--subject", "-s", help="Only show one subject")
    ] = None,
) -> None:
    """Show the curriculum map with level statuses."""
    with _storage_errors():
        engine = _services().curriculum

    subjects = [subject] if subject else list(engine.catalog.subjects)
    for current in subjects:
        review = {level.id for level in engine.levels_needing_review(current)}
        table = Table(title=current.display_name)
        table.add_column("Level", style="cyan")
        table.add_column("Title")
        table.add_column("Status")
        table.add_column("Attempts", justify="right")
        table.add_column("Best", justify="right")

        for level in engine.catalog.levels(current):
            record = engine.record(level, current)
            title = level.title + (" [magenta](review together)[/]" if level.id in review else "")
            table.add_row(
                level.id,
                title,
                STATUS_STYLES[engine.status(level, current)],
                str(record.attempts),
                f"{record.best_completed_quest_count}/{level.quests_required_for_mastery}",
            )
        console.print(table)

    overall = engine.overall_progress()
    placement = engine.placement_grade.display_name if engine.placement_grade else "none"
    console.print(
        f"Level [bold]{overall.level_number}[/] "
        f"({overall.completed_levels}/{overall.total_levels} completed, "
        f"{overall.progress_to_next:.0%} to next)  Placement: {placement}"
    )


@app.command()
def complete(
    level_id: Annotated[str, typer.Argument(help="Level id, e.g. math-grade1")],
    quests: Annotated[int, typer.Option("--quests", "-q", min=0, help="Quests completed in this attempt")],
    assisted: Annotated[bool, typer.Option("--assisted", help="Accept an offered assisted unlock")] = False,
) -> None:
    """Finish a level attempt and unlock the next level."""
    level = _level_or_exit(level_id)
    subject = level.subject

    with _storage_errors():
        engine = _services().curriculum

        if assisted and not engine.should_offer_assisted_unlock(level, subject, quests):
            console.print("[yellow]An assisted unlock is not available for this level right now.[/]")
            raise typer.Exit(code=1)
        if not assisted and quests < level.quests_required_for_mastery:
            console.print(
                f"[yellow]{level.title} needs {level.quests_required_for_mastery} quests "
                f"(got {quests}).[/] Use 'attempt' to record a partial attempt."
            )
            raise typer.Exit(code=1)

        advanced = engine.mark_level_completed(level, subject, quests, assisted=assisted)

    if advanced:
        upcoming = engine.current_level(subject)
        nxt = upcoming.title if upcoming else f"the whole {subject.display_name} path is complete"
        console.print(f"[green]Level complete![/] Next: {nxt}")
    else:
        console.print("[dim]Level replayed; progress unchanged.[/]")


@app.command()
def attempt(
    level_id: Annotated[str, typer.Argument(help="Level id, e.g. math-grade1")],
    quests: Annotated[int, typer.Option("--quests", "-q", min=0, help="Quests completed before leaving")],
) -> None:
    """Record an unfinished level attempt."""
    level = _level_or_exit(level_id)
    subject = level.subject

    with _storage_errors():
        engine = _services().curriculum
        offer = engine.should_offer_assisted_unlock(level, subject, quests)
        engine.record_incomplete_attempt(level, subject, quests)

    record = engine.record(level, subject)
    console.print(f"Attempt recorded ({record.attempts} so far, best {record.best_completed_quest_count}).")
    if offer:
        console.print(
            f"[magenta]So close! You can unlock the next level together:[/] "
            f"questcore complete {level.id} --quests {quests} --assisted"
        )


@app.command()
def place(
    grade: Annotated[CurriculumGrade, typer.Argument(help="Placement grade")],
    focus_skills: Annotated[
        list[Skill] | None, typer.Option("--focus", "-f", help="Skill to start a little ahead on")
    ] = None,
    subject: Annotated[LearningSubject, typer.Option("--subject", "-s", help="Practice subject")] = LearningSubject.MATH,
) -> None:
    """Place the learner at a grade: seeds skill proficiency and curriculum cursors."""
    profile = PlacementProfile(grade_band=grade_band_for(grade), focus_skills=frozenset(focus_skills or ()))

    with _storage_errors():
        services = _services()
        seeds = services.store.apply_placement(profile, subject)
        services.curriculum.apply_placement(grade)

    mastered = sum(1 for value in seeds.values() if services.store.mastery_engine.is_mastered(value))
    console.print(
        f"[green]Placed at {grade.display_name}[/] "
        f"({mastered} skills already mastered, focus: {services.store.focus_skill(subject).display_name})"
    )


@app.command()
def reset(
    subject: Annotated[
        CurriculumSubject | None, typer.Option("--subject", "-s", help="Only reset one subject")
    ] = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Reset curriculum progress (all subjects, or one)."""
    target = subject.display_name if subject else "all subjects"
    if not yes and not typer.confirm(f"Reset curriculum progress for {target}?"):
        raise typer.Abort()

    with _storage_errors():
        engine = _services().curriculum
        if subject:
            engine.reset_subject(subject)
        else:
            engine.reset_progress()

    console.print(f"[green]Curriculum progress reset for {target}.[/]")


def run() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    run()
