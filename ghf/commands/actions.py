# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""GitHub Actions commands (read-only).

Resources:
  GET /repos/{owner}/{repo}/actions/workflows             {"total_count", "workflows": [...]}
  GET /repos/{owner}/{repo}/actions/runs                  {"total_count", "workflow_runs": [...]}
  GET /repos/{owner}/{repo}/actions/workflows/{wf}/runs
  GET /repos/{owner}/{repo}/actions/runs/{run_id}
  GET /repos/{owner}/{repo}/actions/runs/{run_id}/jobs    {"total_count", "jobs": [...]}
  GET /repos/{owner}/{repo}/actions/secrets               (auth; admin access)
  GET /repos/{owner}/{repo}/actions/variables             (auth; write access)
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from ..context import RunContext
from ..display import (
    EMPTY_CELL,
    format_date,
    print_key_value,
    print_muted,
    print_section,
    print_table,
    print_title,
    state_badge,
    truncate,
)
from .common import add_pagination_args, add_repo_arg, list_fetch, positive_int, run_paginated, short_sha, split_repo

STEP_ICONS = {"success": "✔", "failure": "✖"}


def _conclusion(status: Any, conclusion: Any) -> str:
    return state_badge(conclusion) if conclusion else f"pending ({status or EMPTY_CELL})"


def cmd_workflows(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Workflows — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="actions.workflows",
        filters=(owner, repo),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/actions/workflows",
            items_key="workflows",
            summarize=lambda w: {
                "id": w.get("id"),
                "name": w.get("name"),
                "state": w.get("state"),
                "path": w.get("path"),
            },
        ),
        headers=["ID", "Name", "State", "File"],
        row=lambda w: [w["id"], truncate(w["name"], 40), state_badge(w["state"]), w["path"]],
        empty_message="No workflows.",
    )


def cmd_runs(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    if args.workflow:
        endpoint = f"/repos/{owner}/{repo}/actions/workflows/{args.workflow}/runs"
    else:
        endpoint = f"/repos/{owner}/{repo}/actions/runs"
    print_title(f"Workflow Runs — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="actions.runs",
        filters=(owner, repo, args.workflow, args.branch, args.status),
        fetch=list_fetch(
            ctx, endpoint,
            params={"branch": args.branch, "status": args.status},
            items_key="workflow_runs",
            summarize=lambda r: {
                "id": r.get("id"),
                "name": r.get("name"),
                "head_branch": r.get("head_branch"),
                "event": r.get("event"),
                "status": r.get("status"),
                "conclusion": r.get("conclusion"),
                "created_at": r.get("created_at"),
            },
        ),
        headers=["ID", "Workflow", "Branch", "Event", "Result", "Started"],
        row=lambda r: [
            r["id"],
            truncate(r["name"], 30),
            r["head_branch"],
            r["event"],
            _conclusion(r["status"], r["conclusion"]),
            format_date(r["created_at"]),
        ],
        empty_message="No runs.",
    )


def _jobs(ctx: RunContext, owner: str, repo: str, run_id: int, per_page: int) -> List[Dict[str, Any]]:
    data = ctx.client.get(f"/repos/{owner}/{repo}/actions/runs/{run_id}/jobs", params={"per_page": per_page})
    return (data or {}).get("jobs") or []


def cmd_run(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    run = ctx.client.get(f"/repos/{owner}/{repo}/actions/runs/{args.run_id}")
    jobs = _jobs(ctx, owner, repo, args.run_id, per_page=50)
    print_title(f"Run #{run.get('run_number')} — {run.get('name') or EMPTY_CELL}")
    print_key_value([
        ("ID", run.get("id")),
        ("Workflow", run.get("name") or EMPTY_CELL),
        ("Branch", run.get("head_branch") or EMPTY_CELL),
        ("Commit", short_sha(run.get("head_sha")) or EMPTY_CELL),
        ("Event", run.get("event")),
        ("Status", state_badge(run.get("status"))),
        ("Conclusion", _conclusion(run.get("status"), run.get("conclusion"))),
        ("Attempt", run.get("run_attempt") or 1),
        ("Started", format_date(run.get("created_at"))),
        ("Updated", format_date(run.get("updated_at"))),
        ("URL", run.get("html_url")),
    ])
    if jobs:
        print_section("Jobs")
        print_table(
            ["ID", "Name", "Status", "Conclusion", "Started", "Completed"],
            [
                [
                    j.get("id"),
                    truncate(j.get("name"), 30),
                    state_badge(j.get("status")),
                    _conclusion(j.get("status"), j.get("conclusion")),
                    format_date(j.get("started_at")),
                    format_date(j.get("completed_at")),
                ]
                for j in jobs
            ],
        )
    return 0


def cmd_jobs(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    jobs = _jobs(ctx, owner, repo, args.run_id, per_page=100)
    print_title(f"Jobs — Run {args.run_id} in {args.owner_repo}")
    if not jobs:
        print_muted("No jobs.")
        return 0
    for job in jobs:
        print(f"\n  {state_badge(job.get('conclusion') or job.get('status'))} {job.get('name')}")
        print_muted(f"Runner: {job.get('runner_name') or EMPTY_CELL}  Started: {format_date(job.get('started_at'))}")
        for step in job.get("steps") or []:
            icon = STEP_ICONS.get(step.get("conclusion"), "○")
            print(f"    {icon} {step.get('name')}  ({step.get('number')})")
    return 0


def cmd_secrets(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Secrets — {args.owner_repo}")
    print_muted("Secret values are never exposed by the API, only names.")
    return run_paginated(
        ctx, args,
        op_tag="actions.secrets",
        filters=(ctx.viewer_key(), owner, repo),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/actions/secrets",
            items_key="secrets",
            summarize=lambda s: {"name": s.get("name"), "updated_at": s.get("updated_at")},
        ),
        headers=["Name", "Updated"],
        row=lambda s: [s["name"], format_date(s["updated_at"])],
        empty_message="No secrets.",
    )


def cmd_variables(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Variables — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="actions.variables",
        filters=(ctx.viewer_key(), owner, repo),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/actions/variables",
            items_key="variables",
            summarize=lambda v: {"name": v.get("name"), "value": v.get("value"), "updated_at": v.get("updated_at")},
        ),
        headers=["Name", "Value", "Updated"],
        row=lambda v: [v["name"], truncate(v["value"], 60), format_date(v["updated_at"])],
        empty_message="No variables.",
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    actions = subparsers.add_parser("actions", help="GitHub Actions commands")
    sub = actions.add_subparsers(dest="actions_command", metavar="<command>")
    sub.required = True

    p_wf = sub.add_parser("workflows", help="List workflows")
    add_repo_arg(p_wf)
    add_pagination_args(p_wf)
    p_wf.set_defaults(func=cmd_workflows)

    p_runs = sub.add_parser("runs", help="List workflow runs")
    add_repo_arg(p_runs)
    p_runs.add_argument("-w", "--workflow", default=None, help="Workflow ID or file name")
    p_runs.add_argument("-b", "--branch", default=None, help="Filter by branch")
    p_runs.add_argument(
        "-s", "--status", default=None,
        choices=("completed", "in_progress", "queued", "success", "failure", "cancelled"),
    )
    add_pagination_args(p_runs, default_limit=20)
    p_runs.set_defaults(func=cmd_runs)

    for name, help_text, func in (
        ("run", "View a workflow run and its jobs", cmd_run),
        ("jobs", "List jobs and steps for a workflow run", cmd_jobs),
    ):
        p = sub.add_parser(name, help=help_text)
        add_repo_arg(p)
        p.add_argument("run_id", type=positive_int)
        p.set_defaults(func=func)

    for name, help_text, func in (
        ("secrets", "List secret names (requires auth + admin access)", cmd_secrets),
        ("variables", "List Actions variables (requires auth + write access)", cmd_variables),
    ):
        p = sub.add_parser(name, help=help_text)
        add_repo_arg(p)
        add_pagination_args(p)
        p.set_defaults(func=func)
