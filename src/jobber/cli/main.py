"""The ``jobber`` command: record, edit, list and report jobs.

Several operations may be combined in one invocation. They always run in
this order, against a ledger loaded once and saved once at the end:

    join, drop, list/total/csv, start/end/add or message, report
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from jobber.configuration.settings import DEFAULT_CONFIG_PATH, Settings, resolve_settings
from jobber.errors import (
    EndBeforeStartError,
    InvalidConfigError,
    JobberError,
    NoOpenJobError,
    OpenJobError,
    PersistenceError,
    TimeParseError,
)
from jobber.ledger import DEFAULT_RESOLUTION, Job, Ledger, find_overlaps, parse_filter
from jobber.reports import DEFAULT_CSV_COLUMNS, build_calendar_report, export_csv, parse_columns
from jobber.storage import LedgerStore
from jobber.temporal import TIME_FORMAT_EXAMPLES, TimeExpressionParser
from jobber.cli.presentation import Presenter
from jobber.cli.prompts import AssumeYesPrompter, Prompter

logger = logging.getLogger(__name__)

TIME_HELP = "TIME can be one of: " + ", ".join(
    f"'{example}' ({meaning})" for example, meaning in TIME_FORMAT_EXAMPLES
)


@dataclass
class Session:
    """Everything one invocation works with."""

    settings: Settings
    ledger: Ledger
    store: LedgerStore
    parser: TimeExpressionParser
    presenter: Presenter
    prompter: Prompter
    now: datetime
    failed: bool = False

    def fail(self, error: Exception) -> None:
        self.presenter.error(error)
        self.failed = True


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _require_time(parser: TimeExpressionParser, text: str, now: datetime) -> datetime:
    parsed = parser.parse(text, reference_time=now)
    if parsed is None:
        raise TimeParseError(text)
    return parsed.timestamp


def _parse_positions(text: str) -> List[int]:
    try:
        return [int(part) for part in text.split(",") if part.strip()]
    except ValueError:
        raise typer.BadParameter(f"Positions must be numbers: {text!r}", param_hint="--join")


def _message_option(text: Optional[str]) -> Optional[str]:
    """Message from the command line, with ``\\n`` escapes as line breaks."""
    if text is None:
        return None
    return text.replace("\\n", "\n")


def _resolve_times(
    parser: TimeExpressionParser,
    now: datetime,
    start: Optional[str],
    end: Optional[str],
    duration: Optional[float],
):
    """Start and end times from the options, completed by ``duration``."""
    start_time = _require_time(parser, start, now) if start is not None else None
    end_time = _require_time(parser, end, now) if end is not None else None
    if duration is not None:
        span = timedelta(hours=duration)
        if start_time is None and end_time is not None:
            start_time = end_time - span
        elif end_time is None and start_time is not None:
            end_time = start_time + span
        elif start_time is None:
            raise typer.BadParameter(
                "You gave a duration but no end or start time!", param_hint="--duration"
            )
        else:
            raise typer.BadParameter(
                "You gave a duration but both end and start time!", param_hint="--duration"
            )
    return start_time, end_time


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def run_join(session: Session, positions: List[int]) -> None:
    preview = session.ledger.preview_join(positions, session.now)
    session.presenter.show_join(preview)
    question = f"Do you really want to merge {len(preview.positions)} jobs into the above job?"
    confirmed = session.prompter.confirm(question)
    session.ledger.join(preview.positions, confirmed, session.now)
    if confirmed:
        session.presenter.info(f"Merge jobs {','.join(map(str, preview.positions))}...")
    else:
        session.presenter.info("Join canceled")


def run_drop(session: Session, position: int) -> None:
    session.presenter.show_job(session.ledger.job_at(position), position)
    confirmed = session.prompter.confirm("Do you really want to delete this job?")
    if session.ledger.drop(position, confirmed) is not None:
        session.presenter.info(f"Deleting job #{position}")
    else:
        session.presenter.info("Deletion canceled.")


def run_list(session: Session, filter_text: Optional[str], totals_only: bool) -> None:
    query_filter = parse_filter(filter_text, session.parser, session.now)
    logger.debug(f"listing jobs with filter {query_filter!r}")
    result = session.ledger.query(query_filter, session.now)
    session.presenter.show_query(result, session.ledger.running_job(), totals_only)


def run_export(session: Session, filter_text: Optional[str], columns_text: str) -> None:
    columns = parse_columns(columns_text)
    query_filter = parse_filter(filter_text, session.parser, session.now)
    result = session.ledger.query(query_filter, session.now)
    text = export_csv(
        result.entries,
        columns,
        resolution=session.settings.resolution,
        rate=session.settings.rate,
        now=session.now,
    )
    session.presenter.show_csv(text)


def _back_message(session: Session, message: Optional[str]) -> Optional[str]:
    """``message``, or the last job's message when none was given."""
    if message is not None:
        return message
    last = session.ledger.last_job
    if last is None:
        return None
    return last.message


def _warn_overlaps(session: Session, job: Job) -> None:
    position = next(i for i, other in enumerate(session.ledger, start=1) if other is job)
    overlaps = find_overlaps(session.ledger, job, session.now)
    session.presenter.show_overlaps(position, overlaps)


def _valid_end_time(session: Session, job: Job, end_time: datetime) -> Optional[datetime]:
    """``end_time``, or one asked for until it is after the job's start.

    Returns:
        None if the user cancels
    """
    while not Job.check(job.start, end_time):
        session.presenter.error(EndBeforeStartError())
        answer = session.prompter.ask("Please enter a valid end time (nothing to cancel)")
        if not answer:
            return None
        parsed = session.parser.parse(answer)
        if parsed is not None:
            end_time = parsed.timestamp
    return end_time


def end_running_job(
    session: Session,
    end_time: datetime,
    message: Optional[str] = None,
    title: str = "Ending job:",
) -> bool:
    """End the running job, asking again while the end time is invalid.

    The message is only touched once a valid end time is known.

    Returns:
        True if a job was ended
    """
    job = session.ledger.running_job()
    if job is None:
        session.fail(NoOpenJobError())
        return False

    end_time = _valid_end_time(session, job, end_time)
    if end_time is None:
        session.presenter.info("Running job remains open!")
        return False

    if message is not None:
        session.ledger.append_message(message)
    if not job.message:
        job.message = session.prompter.ask_lines("Please enter a message (empty line quits):")
    session.ledger.end(end_time)

    session.presenter.show_job(job, len(session.ledger), title=title)
    _warn_overlaps(session, job)
    return True


def _close_open_job(session: Session) -> bool:
    """Ask for an end time for the running job before starting another."""
    running = session.ledger.running_job()
    session.presenter.warn("There is still an open job!")
    session.presenter.show_job(running, len(session.ledger))
    while True:
        answer = session.prompter.ask(
            "Do you want to close this job first (enter time or nothing to cancel)?"
        )
        if not answer:
            session.presenter.info("Canceling job start. Running job remains open!")
            return False
        parsed = session.parser.parse(answer)
        if parsed is None:
            session.presenter.warn("Please enter a valid time.")
            continue
        if not Job.check(running.start, parsed.timestamp):
            session.presenter.error(EndBeforeStartError())
            continue
        return end_running_job(session, parsed.timestamp)


def start_job(session: Session, start_time: datetime, message: Optional[str] = None) -> Optional[Job]:
    try:
        job = session.ledger.start(start_time, message or "")
    except OpenJobError:
        if not _close_open_job(session):
            return None
        job = session.ledger.start(start_time, message or "")
    session.presenter.show_job(job, len(session.ledger), title="Starting new job:")
    _warn_overlaps(session, job)
    return job


def add_job(session: Session, start_time: datetime, end_time: datetime, message: Optional[str]) -> None:
    if not Job.check(start_time, end_time):
        raise EndBeforeStartError(
            details={"start": start_time.isoformat(), "end": end_time.isoformat()}
        )
    if session.ledger.running_job() is not None and not _close_open_job(session):
        return
    if not message:
        message = session.prompter.ask_lines("Please enter a message (empty line quits):")
    job = session.ledger.add(start_time, end_time, message)
    session.presenter.show_job(job, len(session.ledger), title="Adding job:")
    _warn_overlaps(session, job)


def append_message(session: Session, message: str) -> None:
    if session.ledger.running_job() is not None:
        job = session.ledger.append_message(message)
        logger.debug("appended message to running job")
        session.presenter.show_job(job, len(session.ledger))
        return
    session.presenter.warn("No job running.")
    if session.prompter.confirm("Would you like to start a new one now?"):
        start_job(session, session.now, message)


def run_report(session: Session) -> None:
    report = build_calendar_report(
        session.ledger,
        resolution=session.settings.resolution,
        rate=session.settings.rate,
        now=session.now,
    )
    session.presenter.show_report(report)


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


def main(
    ctx: typer.Context,
    start: Optional[str] = typer.Option(
        None, "--start", "-s", metavar="TIME", help="Start work at TIME (e.g. now)"
    ),
    back: Optional[str] = typer.Option(
        None, "--back", "-b", metavar="TIME", help="Like --start but reuse the last job's message"
    ),
    end: Optional[str] = typer.Option(
        None, "--end", "-e", metavar="TIME", help="End work at TIME (e.g. now)"
    ),
    duration: Optional[float] = typer.Option(
        None, "--duration", "-d", metavar="HOURS", help="Work time in hours"
    ),
    message: Optional[str] = typer.Option(
        None, "--message", "-m", help="Add message to job (\\n for line breaks)"
    ),
    drop: Optional[int] = typer.Option(None, "--drop", "-D", metavar="POS", help="Drop job at given position"),
    join: Optional[str] = typer.Option(
        None, "--join", "-j", metavar="POS1,POS2[,...]", help="Join two or more jobs"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Confirm drop/join without asking"),
    list_jobs: bool = typer.Option(False, "--list", "-l", help="List existing jobs"),
    total: bool = typer.Option(False, "--total", "-t", help="Measure existing jobs"),
    filter_text: Optional[str] = typer.Option(
        None, "--filter", "-F", metavar="TIME|COUNT", help="Only jobs since TIME or the last COUNT jobs"
    ),
    report: bool = typer.Option(False, "--report", "-r", help="Report existing jobs"),
    csv_columns: Optional[str] = typer.Option(
        None,
        "--csv",
        metavar="COLUMNS",
        help=f"Export jobs as CSV with these columns (e.g. {DEFAULT_CSV_COLUMNS})",
    ),
    resolution: Optional[float] = typer.Option(
        None, "--resolution", "-R", help="Time resolution in hours (default: 0.25)"
    ),
    rate: Optional[float] = typer.Option(None, "--money", "-M", metavar="RATE", help="Display hours*RATE"),
    data_file: Optional[Path] = typer.Option(None, "--file", "-f", help="Job file (default: jobber.dat)"),
    config_path: Path = typer.Option(DEFAULT_CONFIG_PATH, "--config", help="Path to config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Output more information"),
) -> None:
    """jobber - job time tracker."""
    if ctx.invoked_subcommand is not None:
        return

    _configure_logging(verbose)
    console = Console(highlight=False)

    try:
        settings = resolve_settings(
            path=config_path,
            overrides={"resolution": resolution, "rate": rate, "data_file": data_file},
        )
    except InvalidConfigError as e:
        Presenter(console, DEFAULT_RESOLUTION).error(e)
        raise typer.Exit(code=1)

    now = datetime.now()
    parser = TimeExpressionParser()
    try:
        if start is not None and back is not None:
            raise typer.BadParameter("Use either --start or --back", param_hint="--back")
        start_time, end_time = _resolve_times(
            parser, now, start if start is not None else back, end, duration
        )
        positions = _parse_positions(join) if join is not None else None
    except TimeParseError as e:
        Presenter(console, settings.resolution).error(e)
        raise typer.Exit(code=1)

    store = LedgerStore(settings.data_file, lock_timeout=settings.lock_timeout)
    try:
        jobs = store.load()
    except PersistenceError as e:
        Presenter(console, settings.resolution).error(e)
        raise typer.Exit(code=1)
    logger.debug(f"opened '{store.path}' with {len(jobs)} jobs")

    session = Session(
        settings=settings,
        ledger=Ledger(jobs, resolution=settings.resolution),
        store=store,
        parser=parser,
        presenter=Presenter(console, settings.resolution, settings.rate, now),
        prompter=AssumeYesPrompter() if yes else Prompter(),
        now=now,
    )
    text = _message_option(message)

    def job_message() -> Optional[str]:
        if back is None:
            return text
        return _back_message(session, text)

    steps = []
    if positions is not None:
        steps.append(lambda: run_join(session, positions))
    if drop is not None:
        steps.append(lambda: run_drop(session, drop))
    if list_jobs:
        steps.append(lambda: run_list(session, filter_text, totals_only=False))
    if total:
        steps.append(lambda: run_list(session, filter_text, totals_only=True))
    if csv_columns is not None:
        steps.append(lambda: run_export(session, filter_text, csv_columns))
    if start_time is not None and end_time is not None:
        steps.append(lambda: add_job(session, start_time, end_time, job_message()))
    elif start_time is not None:
        steps.append(lambda: start_job(session, start_time, job_message()))
    elif end_time is not None:
        steps.append(lambda: end_running_job(session, end_time, text))
    elif text is not None:
        steps.append(lambda: append_message(session, text))
    if report:
        steps.append(lambda: run_report(session))

    for step in steps:
        try:
            step()
        except JobberError as e:
            session.fail(e)

    try:
        store.save(session.ledger)
    except PersistenceError as e:
        session.presenter.error(e)
        raise typer.Exit(code=1)

    if session.failed:
        raise typer.Exit(code=1)
