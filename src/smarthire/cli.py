"""Typer CLI entrypoint for the recruiting workspace."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import typer
from pydantic import BaseModel, ValidationError

from .agents import DEFAULT_BENEFITS, DEFAULT_TONE, INTERVIEW_TONES
from .config import load_yaml
from .container import create_container
from .core.onboarding import STEP_TITLES
from .export import (
    candidate_csv,
    export_filename,
    interview_guide_html,
    interview_guide_text,
    job_candidates_csv,
)
from .logging import configure_logging
from .resume_text import extract_resume_text
from .schemas.config import load_config
from .workspace import RecruitingWorkspace

app = typer.Typer(help="Recruiting pipeline CLI: jobs, candidates and AI agents.")


@app.callback()
def main_callback(
    ctx: typer.Context,
    state_dir: Optional[Path] = typer.Option(
        None, file_okay=False, resolve_path=True, help="Directory holding the saved workspace."
    ),
    config: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help="YAML config path."),
    log_level: str = typer.Option("WARNING", help="Log level for structured logging."),
) -> None:
    """Open the saved workspace before running a command."""
    settings: dict[str, Any] = {}
    if config:
        try:
            settings = load_config(load_yaml(config)).to_settings()
        except (ValueError, ValidationError) as exc:
            raise typer.BadParameter(str(exc), param_hint="config") from exc
    if state_dir:
        settings.setdefault("storage", {})["path"] = str(state_dir)

    configure_logging(log_level)

    container = create_container(settings=settings)
    ctx.obj = container.workspace()
    ctx.call_on_close(lambda: _flush_messages(ctx.obj))


# -- jobs ----------------------------------------------------------------


@app.command("demo")
def load_demo(ctx: typer.Context) -> None:
    """Add the sample jobs and candidates."""
    workspace = _workspace(ctx)
    workspace.load_demo_data()
    typer.echo(f"{len(workspace.store.jobs)} jobs, {len(workspace.store.candidates)} candidates.")


@app.command("jobs")
def list_jobs(ctx: typer.Context, as_json: bool = typer.Option(False, "--json", help="Print JSON.")) -> None:
    """List jobs, most recent first."""
    workspace = _workspace(ctx)
    jobs = workspace.store.jobs
    if as_json:
        _echo_json([job.model_dump(mode="json") for job in jobs])
        return
    for job in jobs:
        count = len(workspace.store.candidates_for_job(job.id))
        typer.echo(f"{job.id}\t{job.status}\t{job.title}\t{job.location}\t{count} candidates")


@app.command("job-create")
def create_job(
    ctx: typer.Context,
    title: str = typer.Option(..., help="Job title."),
    location: str = typer.Option("", help="Location."),
    salary: str = typer.Option("", help="Salary range, free text."),
    seniority: str = typer.Option("Mid-Level", help="Seniority level."),
    skills: str = typer.Option("", help="Comma-separated required skills."),
    responsibility: Optional[List[str]] = typer.Option(None, help="Responsibility (repeatable)."),
    description: str = typer.Option("", help="Job description text."),
    generate: bool = typer.Option(False, "--generate", help="Let the AI write the description."),
    status: str = typer.Option("active", help="active, closed or draft."),
) -> None:
    """Create a job posting."""
    workspace = _workspace(ctx)
    skill_list = _split_commas(skills)
    responsibilities = responsibility or []
    if generate:
        draft = workspace.draft_job_description(title, skill_list, responsibilities, salary, seniority)
        if draft is None:
            raise typer.Exit(code=1)
        description = draft.description
    try:
        job = workspace.create_job(
            title,
            location=location,
            salary_range=salary,
            seniority=seniority,
            skills=skill_list,
            responsibilities=responsibilities,
            description=description,
            status=status,
        )
    except ValidationError as exc:
        raise typer.BadParameter(str(exc), param_hint="status") from exc
    if job is None:
        raise typer.Exit(code=1)
    typer.echo(job.id)


@app.command("job-delete")
def delete_job(ctx: typer.Context, job_id: str = typer.Argument(..., help="Job identifier.")) -> None:
    """Delete a job and every candidate attached to it."""
    if not _workspace(ctx).delete_job(job_id):
        raise typer.Exit(code=1)


@app.command("draft-description")
def draft_description(
    ctx: typer.Context,
    title: str = typer.Option(..., help="Job title."),
    skills: str = typer.Option(..., help="Comma-separated required skills."),
    responsibility: Optional[List[str]] = typer.Option(None, help="Responsibility (repeatable)."),
    salary: str = typer.Option("", help="Salary range, free text."),
    seniority: str = typer.Option("Mid-Level", help="Seniority level."),
) -> None:
    """Generate a job description without saving a job."""
    draft = _workspace(ctx).draft_job_description(
        title, _split_commas(skills), responsibility or [], salary, seniority
    )
    if draft is None:
        raise typer.Exit(code=1)
    typer.echo(draft.description)


@app.command("sourcing")
def sourcing(
    ctx: typer.Context,
    title: str = typer.Option(..., help="Role title."),
    skills: str = typer.Option("", help="Comma-separated skills."),
    location: str = typer.Option("", help="Location."),
) -> None:
    """Generate a sourcing strategy for a role."""
    result = _workspace(ctx).generate_sourcing_strategy(title, _split_commas(skills), location)
    _echo_result(result)


# -- candidates ----------------------------------------------------------


@app.command("candidates")
def list_candidates(
    ctx: typer.Context,
    job: Optional[str] = typer.Option(None, help="Only candidates of this job."),
    status: str = typer.Option("any", help="any, all (hides rejected) or a status name."),
    as_json: bool = typer.Option(False, "--json", help="Print JSON."),
) -> None:
    """List candidates, most recent first."""
    workspace = _workspace(ctx)
    try:
        if job:
            candidates = workspace.store.candidates_for_job(job, status)
        else:
            candidates = workspace.store.filter_candidates(status)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="status") from exc
    if as_json:
        _echo_json([item.model_dump(mode="json") for item in candidates])
        return
    for item in candidates:
        score = item.ai_analysis.fit_score if item.ai_analysis else "-"
        typer.echo(f"{item.id}\t{item.job_id}\t{item.status}\t{score}\t{item.name}")


@app.command("candidate")
def show_candidate(ctx: typer.Context, candidate_id: str = typer.Argument(...)) -> None:
    """Print one candidate as JSON."""
    candidate = _workspace(ctx).store.get_candidate(candidate_id)
    if candidate is None:
        typer.echo("Candidate not found", err=True)
        raise typer.Exit(code=1)
    _echo_json(candidate.model_dump(mode="json"))


@app.command("screen")
def screen(
    ctx: typer.Context,
    job: str = typer.Option(..., help="Job identifier."),
    name: str = typer.Option(..., help="Candidate name."),
    resume: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help=".txt or .pdf resume."),
    resume_text: str = typer.Option("", help="Resume text pasted inline."),
    email: str = typer.Option("", help="Email address."),
    phone: str = typer.Option("", help="Phone number."),
) -> None:
    """Screen a resume against a job and save the candidate."""
    workspace = _workspace(ctx)
    text = _resume_text(resume, resume_text)
    candidate = workspace.screen_candidate(job, name, text, email=email, phone=phone)
    if candidate is None:
        raise typer.Exit(code=1)
    analysis = candidate.ai_analysis
    typer.echo(candidate.id)
    if analysis is not None:
        typer.echo(f"Fit score {analysis.fit_score} ({analysis.fit_band}), {analysis.recommendation}")


@app.command("candidate-add")
def add_candidate(
    ctx: typer.Context,
    job: str = typer.Option(..., help="Job identifier."),
    name: str = typer.Option(..., help="Candidate name."),
    resume: Optional[Path] = typer.Option(None, exists=True, readable=True, dir_okay=False, help=".txt or .pdf resume."),
    resume_text: str = typer.Option("", help="Resume text pasted inline."),
    email: str = typer.Option("", help="Email address."),
    phone: str = typer.Option("", help="Phone number."),
    notes: Optional[str] = typer.Option(None, help="Recruiter notes."),
) -> None:
    """Add a candidate without screening."""
    text = _resume_text(resume, resume_text)
    candidate = _workspace(ctx).add_candidate(job, name, email=email, phone=phone, resume_text=text, notes=notes)
    if candidate is None:
        raise typer.Exit(code=1)
    typer.echo(candidate.id)


@app.command("candidate-delete")
def delete_candidate(ctx: typer.Context, candidate_id: str = typer.Argument(...)) -> None:
    """Delete a candidate."""
    if not _workspace(ctx).delete_candidate(candidate_id):
        raise typer.Exit(code=1)


@app.command("candidate-status")
def candidate_status(
    ctx: typer.Context,
    candidate_id: str = typer.Argument(...),
    action: str = typer.Argument(..., help="advance, reject, restore or a status name."),
) -> None:
    """Move a candidate through the pipeline."""
    workspace = _workspace(ctx)
    if action == "advance":
        updated = workspace.advance_candidate(candidate_id)
    elif action == "reject":
        updated = workspace.reject_candidate(candidate_id)
    elif action == "restore":
        updated = workspace.restore_candidate(candidate_id)
    else:
        try:
            updated = workspace.set_candidate_status(candidate_id, action)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="action") from exc
    if updated is None:
        raise typer.Exit(code=1)
    typer.echo(updated.status)


@app.command("notes")
def notes(ctx: typer.Context, candidate_id: str = typer.Argument(...), text: str = typer.Argument(...)) -> None:
    """Replace a candidate's notes."""
    if _workspace(ctx).update_notes(candidate_id, text) is None:
        raise typer.Exit(code=1)


@app.command("questions")
def questions(
    ctx: typer.Context,
    candidate_id: str = typer.Argument(...),
    tone: str = typer.Option(DEFAULT_TONE, help=f"One of: {', '.join(INTERVIEW_TONES)}."),
) -> None:
    """Generate interview questions for a screened candidate."""
    result = _workspace(ctx).generate_interview_questions(candidate_id, tone)
    if result is None:
        raise typer.Exit(code=1)
    typer.echo(interview_guide_text(result))


@app.command("salary")
def salary(ctx: typer.Context, candidate_id: str = typer.Argument(...)) -> None:
    """Estimate the market salary range for the candidate's job."""
    _echo_result(_workspace(ctx).estimate_salary(candidate_id))


@app.command("background")
def background(ctx: typer.Context, candidate_id: str = typer.Argument(...)) -> None:
    """Summarize risk signals in the candidate's resume."""
    _echo_result(_workspace(ctx).check_background(candidate_id))


@app.command("offer")
def offer(
    ctx: typer.Context,
    candidate_id: str = typer.Argument(...),
    salary: str = typer.Option(..., help="Offered salary."),
    start_date: str = typer.Option(..., help="Start date."),
    benefits: str = typer.Option(DEFAULT_BENEFITS, help="Benefits summary."),
) -> None:
    """Draft an offer letter and move the candidate to the offer stage."""
    _echo_result(_workspace(ctx).generate_offer(candidate_id, salary, start_date, benefits))


# -- exports and overview ------------------------------------------------


@app.command("export-candidate")
def export_candidate(
    ctx: typer.Context,
    candidate_id: str = typer.Argument(...),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="CSV path (default: derived from the name)."),
) -> None:
    """Export one screened candidate to CSV."""
    workspace = _workspace(ctx)
    candidate = workspace.store.get_candidate(candidate_id)
    job = workspace.store.get_job(candidate.job_id) if candidate else None
    if candidate is None or job is None:
        typer.echo("Candidate not found", err=True)
        raise typer.Exit(code=1)
    try:
        content = candidate_csv(candidate, job)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    path = output or Path(export_filename("candidate", candidate.name))
    _write_text(path, content)
    workspace.notifications.add_toast("CSV export started", "info")


@app.command("export-job")
def export_job(
    ctx: typer.Context,
    job_id: str = typer.Argument(...),
    status: str = typer.Option("all", help="any, all (hides rejected) or a status name."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="CSV path (default: derived from the title)."),
) -> None:
    """Export a job's candidate list to CSV."""
    workspace = _workspace(ctx)
    job = workspace.store.get_job(job_id)
    if job is None:
        typer.echo("Job not found", err=True)
        raise typer.Exit(code=1)
    try:
        candidates = workspace.store.candidates_for_job(job_id, status)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="status") from exc
    path = output or Path(export_filename("job", f"{job.title} candidates"))
    _write_text(path, job_candidates_csv(candidates))
    workspace.notifications.add_toast("Candidate list exported", "success")


@app.command("guide")
def guide(
    ctx: typer.Context,
    candidate_id: str = typer.Argument(...),
    html: bool = typer.Option(False, "--html", help="Render a printable HTML page."),
    tone: str = typer.Option(DEFAULT_TONE, help="Tone label shown on the HTML guide."),
    output: Optional[Path] = typer.Option(None, dir_okay=False, help="Write to a file instead of stdout."),
) -> None:
    """Render the stored interview questions."""
    workspace = _workspace(ctx)
    candidate = workspace.store.get_candidate(candidate_id)
    job = workspace.store.get_job(candidate.job_id) if candidate else None
    if candidate is None or job is None or candidate.interview_questions is None:
        typer.echo("No interview questions for this candidate", err=True)
        raise typer.Exit(code=1)
    if html:
        content = interview_guide_html(candidate, job, tone)
    else:
        content = interview_guide_text(candidate.interview_questions)
    if output:
        _write_text(output, content)
    else:
        typer.echo(content)


@app.command("search")
def search(ctx: typer.Context, query: str = typer.Argument(...)) -> None:
    """Search jobs by title or location and candidates by name or email."""
    results = _workspace(ctx).search(query)
    for job in results.jobs:
        typer.echo(f"job\t{job.id}\t{job.title}\t{job.location}")
    for item in results.candidates:
        typer.echo(f"candidate\t{item.id}\t{item.name}\t{item.email}")
    if not results:
        typer.echo("No matches.")


@app.command("dashboard")
def dashboard(ctx: typer.Context) -> None:
    """Show pipeline counts and AI usage."""
    summary = _workspace(ctx).dashboard()
    typer.echo(f"Active jobs: {summary.active_jobs}")
    typer.echo(f"Candidates screened: {summary.screened}")
    typer.echo(f"Offers ready: {summary.offers_ready}")
    typer.echo(f"AI usage: {summary.usage_count} / {summary.usage_limit}")
    for title, count in summary.candidates_per_job:
        typer.echo(f"  {title}: {count}")


@app.command("onboarding")
def onboarding(
    ctx: typer.Context,
    next_step: bool = typer.Option(False, "--next", help="Confirm the current review step."),
    skip: bool = typer.Option(False, "--skip", help="Dismiss the guided flow for good."),
) -> None:
    """Show or move the guided first-run flow."""
    workspace = _workspace(ctx)
    if skip:
        workspace.skip_onboarding()
    elif next_step:
        workspace.next_onboarding_step()
    progress = workspace.store.onboarding
    if progress.active:
        typer.echo(f"Step {progress.step}: {STEP_TITLES[progress.step]}")
    else:
        typer.echo("Onboarding complete." if progress.completed else "Onboarding inactive.")


@app.command("usage-reset")
def usage_reset(ctx: typer.Context) -> None:
    """Reset the AI usage counter."""
    _workspace(ctx).reset_usage()


def _workspace(ctx: typer.Context) -> RecruitingWorkspace:
    return ctx.obj


def _split_commas(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _resume_text(resume: Path | None, inline: str) -> str:
    if resume is None:
        return inline
    try:
        return extract_resume_text(resume)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="resume") from exc


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _echo_result(result: BaseModel | None) -> None:
    if result is None:
        raise typer.Exit(code=1)
    _echo_json(result.model_dump(mode="json"))


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    typer.echo(f"Saved {path}")


def _flush_messages(workspace: RecruitingWorkspace | None) -> None:
    if workspace is None:
        return
    for notification in workspace.notifications.notifications:
        typer.echo(f"[{notification.severity}] {notification.title}: {notification.message}", err=True)
    for toast in workspace.notifications.toasts:
        typer.echo(f"[{toast.severity}] {toast.message}", err=True)
        workspace.notifications.remove_toast(toast.id)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
