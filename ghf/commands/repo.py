# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Repository commands.

Resources:
  GET /user/repos, /users/{u}/repos                    (repo list)
  GET /repos/{owner}/{repo}                            (view, clone-url)
  GET /repos/{owner}/{repo}/{branches,contributors,releases,tags,commits,forks}
  GET /repos/{owner}/{repo}/{collaborators,hooks}      (auth; push/admin access)
  GET /repos/{owner}/{repo}/{languages,topics,readme}  (single object, not paged)
  GET /repos/{owner}/{repo}/commits/{sha}
"""

from __future__ import annotations

import argparse
import base64
import binascii
from typing import Any, Dict, Sequence

from ..cache.cache_keys import KeyPart
from ..context import RunContext
from ..display import (
    EMPTY_CELL,
    format_date,
    print_key_value,
    print_muted,
    print_section,
    print_table,
    print_title,
    truncate,
    yes_no,
)
from ..exceptions import CommandError
from ..paginate import Page
from .common import (
    COMMIT_HEADERS,
    add_pagination_args,
    add_repo_arg,
    commit_row,
    commit_summary,
    first_line,
    list_fetch,
    login_of,
    run_paginated,
    short_sha,
    split_repo,
)


def _repo_summary(r: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "full_name": r.get("full_name"),
        "stargazers_count": r.get("stargazers_count", 0),
        "language": r.get("language"),
        "private": bool(r.get("private")),
        "fork": bool(r.get("fork")),
        "updated_at": r.get("updated_at"),
    }


def _repo_row(r: Dict[str, Any]) -> Sequence[Any]:
    return [
        r["full_name"],
        r["stargazers_count"],
        r["language"],
        yes_no(r["private"]),
        yes_no(r["fork"]),
        format_date(r["updated_at"]),
    ]


def cmd_list(ctx: RunContext, args: argparse.Namespace) -> int:
    username = args.username
    if not username:
        ctx.require_auth()
    # /user/repos depends on the token, so key it by token.
    who = username or ctx.viewer_key()

    def fetch(filters: Sequence[KeyPart], page: int, per_page: int) -> Page:
        _, repo_type, sort = filters
        endpoint = f"/users/{username}/repos" if username else "/user/repos"
        data = ctx.client.get(
            endpoint,
            params={"type": repo_type, "sort": sort, "per_page": per_page, "page": page},
        )
        return Page(items=[_repo_summary(r) for r in data or []])

    print_title(f"Repos — {username}" if username else "Your Repositories")
    return run_paginated(
        ctx, args,
        op_tag="repo.list",
        filters=(who, args.type, args.sort),
        fetch=fetch,
        headers=["Repo", "Stars", "Lang", "Private", "Fork", "Updated"],
        row=_repo_row,
        empty_message="No repos found.",
    )


def cmd_view(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    r = ctx.client.get(f"/repos/{owner}/{repo}")
    print_title(r.get("full_name") or args.owner_repo)
    if r.get("description"):
        print(f"\n  {r['description']}\n")
    print_key_value([
        ("Owner", login_of(r.get("owner"))),
        ("Visibility", r.get("visibility") or ("private" if r.get("private") else "public")),
        ("Default branch", r.get("default_branch")),
        ("Language", r.get("language") or EMPTY_CELL),
        ("Stars", r.get("stargazers_count")),
        ("Forks", r.get("forks_count")),
        ("Watchers", r.get("subscribers_count", r.get("watchers_count"))),
        ("Open issues", r.get("open_issues_count")),
        ("License", (r.get("license") or {}).get("spdx_id") or EMPTY_CELL),
        ("Topics", ", ".join(r.get("topics") or []) or EMPTY_CELL),
        ("Fork", bool(r.get("fork"))),
        ("Archived", bool(r.get("archived"))),
        ("Template", bool(r.get("is_template"))),
        ("Size", f"{r.get('size', 0)} KB"),
        ("Created", format_date(r.get("created_at"))),
        ("Pushed", format_date(r.get("pushed_at"))),
        ("Clone (HTTPS)", r.get("clone_url")),
        ("Clone (SSH)", r.get("ssh_url")),
        ("URL", r.get("html_url")),
    ])
    return 0


def cmd_branches(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Branches — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="repo.branches",
        filters=(owner, repo),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/branches",
            summarize=lambda b: {
                "name": b.get("name"),
                "sha": (b.get("commit") or {}).get("sha"),
                "protected": bool(b.get("protected")),
            },
        ),
        headers=["Branch", "SHA", "Protected"],
        row=lambda b: [b["name"], short_sha(b["sha"]), yes_no(b["protected"])],
        empty_message="No branches.",
    )


def cmd_contributors(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Contributors — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="repo.contributors",
        filters=(owner, repo),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/contributors",
            summarize=lambda u: {
                "login": u.get("login"),
                "type": u.get("type"),
                "contributions": u.get("contributions", 0),
            },
        ),
        headers=["Login", "Type", "Contributions"],
        row=lambda u: [u["login"], u["type"], u["contributions"]],
        empty_message="No contributors.",
    )


def cmd_releases(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Releases — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="repo.releases",
        filters=(owner, repo),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/releases",
            summarize=lambda r: {
                "tag_name": r.get("tag_name"),
                "name": r.get("name"),
                "prerelease": bool(r.get("prerelease")),
                "assets": len(r.get("assets") or []),
                "published_at": r.get("published_at"),
            },
        ),
        headers=["Tag", "Name", "Prerelease", "Assets", "Published"],
        row=lambda r: [
            r["tag_name"],
            truncate(r["name"], 30),
            "pre" if r["prerelease"] else "stable",
            r["assets"],
            format_date(r["published_at"]),
        ],
        empty_message="No releases.",
    )


def cmd_tags(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Tags — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="repo.tags",
        filters=(owner, repo),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/tags",
            summarize=lambda t: {"name": t.get("name"), "sha": (t.get("commit") or {}).get("sha")},
        ),
        headers=["Tag", "SHA"],
        row=lambda t: [t["name"], short_sha(t["sha"])],
        empty_message="No tags.",
    )


def cmd_commits(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    suffix = f" ({args.branch})" if args.branch else ""
    print_title(f"Commits — {args.owner_repo}{suffix}")
    return run_paginated(
        ctx, args,
        op_tag="repo.commits",
        filters=(owner, repo, args.branch, args.author),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/commits",
            params={"sha": args.branch, "author": args.author},
            summarize=commit_summary,
        ),
        headers=COMMIT_HEADERS,
        row=commit_row,
        empty_message="No commits.",
    )


def cmd_forks(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Forks — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="repo.forks",
        filters=(owner, repo, args.sort),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/forks",
            params={"sort": args.sort},
            summarize=lambda f: {
                "full_name": f.get("full_name"),
                "owner": login_of(f.get("owner")),
                "stargazers_count": f.get("stargazers_count", 0),
                "updated_at": f.get("updated_at"),
            },
        ),
        headers=["Fork", "Owner", "Stars", "Updated"],
        row=lambda f: [f["full_name"], f["owner"], f["stargazers_count"], format_date(f["updated_at"])],
        empty_message="No forks.",
    )


def cmd_collaborators(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Collaborators — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="repo.collaborators",
        filters=(ctx.viewer_key(), owner, repo),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/collaborators",
            summarize=lambda u: {
                "login": u.get("login"),
                "role": u.get("role_name"),
                "html_url": u.get("html_url"),
            },
        ),
        headers=["Login", "Role", "URL"],
        row=lambda u: [u["login"], u["role"], u["html_url"]],
        empty_message="No collaborators.",
    )


def cmd_webhooks(ctx: RunContext, args: argparse.Namespace) -> int:
    ctx.require_auth()
    owner, repo = split_repo(args.owner_repo)
    print_title(f"Webhooks — {args.owner_repo}")
    return run_paginated(
        ctx, args,
        op_tag="repo.webhooks",
        filters=(ctx.viewer_key(), owner, repo),
        fetch=list_fetch(
            ctx, f"/repos/{owner}/{repo}/hooks",
            summarize=lambda w: {
                "id": w.get("id"),
                "url": (w.get("config") or {}).get("url"),
                "events": ", ".join(w.get("events") or []),
                "active": bool(w.get("active")),
                "created_at": w.get("created_at"),
            },
        ),
        headers=["ID", "URL", "Events", "Active", "Created"],
        row=lambda w: [w["id"], truncate(w["url"], 50), w["events"], yes_no(w["active"]), format_date(w["created_at"])],
        empty_message="No webhooks.",
    )


def language_rows(languages: Dict[str, int]) -> Sequence[Sequence[Any]]:
    """Largest first: [language, bytes, percent]."""
    total = sum(languages.values())
    if not total:
        return []
    ordered = sorted(languages.items(), key=lambda kv: kv[1], reverse=True)
    return [[lang, f"{n:,}", f"{n / total * 100:.1f}%"] for lang, n in ordered]


def cmd_languages(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    data = ctx.client.get(f"/repos/{owner}/{repo}/languages") or {}
    print_title(f"Languages — {args.owner_repo}")
    rows = language_rows(data)
    if not rows:
        print_muted("No language data.")
        return 0
    print_table(["Language", "Bytes", "Percentage"], rows)
    return 0


def cmd_topics(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    data = ctx.client.get(f"/repos/{owner}/{repo}/topics") or {}
    print_title(f"Topics — {args.owner_repo}")
    names = data.get("names") or []
    if not names:
        print_muted("No topics.")
        return 0
    print("\n  " + "  ".join(f"[{n}]" for n in names) + "\n")
    return 0


def decode_readme(data: Dict[str, Any]) -> str:
    if data.get("encoding", "base64") != "base64":
        return data.get("content") or ""
    try:
        return base64.b64decode(data.get("content") or "").decode("utf-8", errors="replace")
    except (binascii.Error, ValueError) as e:
        raise CommandError(f"README content could not be decoded: {e}")


def cmd_readme(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    data = ctx.client.get(f"/repos/{owner}/{repo}/readme") or {}
    print_title(f"README — {args.owner_repo}")
    print("\n" + decode_readme(data))
    return 0


def cmd_commit(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    cm = ctx.client.get(f"/repos/{owner}/{repo}/commits/{args.sha}")
    commit = cm.get("commit") or {}
    author = commit.get("author") or {}
    stats = cm.get("stats") or {}
    files = cm.get("files") or []
    print_title(f"Commit {short_sha(cm.get('sha'))} — {args.owner_repo}")
    print_key_value([
        ("Author", f"{author.get('name')} <{author.get('email')}>"),
        ("Date", format_date(author.get("date"))),
        ("Committer", (commit.get("committer") or {}).get("name")),
        ("Message", first_line(commit.get("message"))),
        ("Additions", stats.get("additions", 0)),
        ("Deletions", stats.get("deletions", 0)),
        ("Total changes", stats.get("total", 0)),
        ("Files changed", len(files)),
    ])
    if files:
        print_section("Files Changed")
        print_table(
            ["Filename", "+", "-", "Status"],
            [[truncate(f.get("filename"), 60), f.get("additions"), f.get("deletions"), f.get("status")] for f in files],
        )
    return 0


def cmd_clone_url(ctx: RunContext, args: argparse.Namespace) -> int:
    owner, repo = split_repo(args.owner_repo)
    r = ctx.client.get(f"/repos/{owner}/{repo}")
    print_title(f"Clone URLs — {args.owner_repo}")
    print_key_value([
        ("HTTPS", r.get("clone_url")),
        ("SSH", r.get("ssh_url")),
        ("Git", r.get("git_url")),
    ])
    print(f"\n  git clone {r.get('clone_url')}")
    return 0


def register(subparsers: argparse._SubParsersAction) -> None:
    repo = subparsers.add_parser("repo", help="Repository commands")
    sub = repo.add_subparsers(dest="repo_command", metavar="<command>")
    sub.required = True

    p_list = sub.add_parser("list", help="List repos for a user (omit username for your own, incl. private)")
    p_list.add_argument("username", nargs="?", default=None)
    p_list.add_argument(
        "-t", "--type", choices=("all", "public", "private", "forks", "sources", "member"), default="all",
    )
    p_list.add_argument(
        "-s", "--sort", choices=("created", "updated", "pushed", "full_name"), default="updated",
    )
    add_pagination_args(p_list)
    p_list.set_defaults(func=cmd_list)

    p_view = sub.add_parser("view", help="View repository details")
    add_repo_arg(p_view)
    p_view.set_defaults(func=cmd_view)

    paged = [
        ("branches", "List branches", cmd_branches, 30),
        ("contributors", "List top contributors", cmd_contributors, 20),
        ("releases", "List releases", cmd_releases, 10),
        ("tags", "List tags", cmd_tags, 20),
        ("collaborators", "List collaborators (requires auth + push access)", cmd_collaborators, 30),
        ("webhooks", "List webhooks (requires auth + admin access)", cmd_webhooks, 30),
    ]
    for name, help_text, func, limit in paged:
        p = sub.add_parser(name, help=help_text)
        add_repo_arg(p)
        add_pagination_args(p, default_limit=limit)
        p.set_defaults(func=func)

    p_commits = sub.add_parser("commits", help="List commits")
    add_repo_arg(p_commits)
    p_commits.add_argument("-b", "--branch", default=None, help="Branch or SHA to list commits for")
    p_commits.add_argument("-a", "--author", default=None, help="Filter by author login or email")
    add_pagination_args(p_commits, default_limit=20)
    p_commits.set_defaults(func=cmd_commits)

    p_forks = sub.add_parser("forks", help="List forks")
    add_repo_arg(p_forks)
    p_forks.add_argument("-s", "--sort", choices=("newest", "oldest", "stargazers", "watchers"), default="newest")
    add_pagination_args(p_forks, default_limit=20)
    p_forks.set_defaults(func=cmd_forks)

    p_commit = sub.add_parser("commit", help="View a single commit")
    add_repo_arg(p_commit)
    p_commit.add_argument("sha")
    p_commit.set_defaults(func=cmd_commit)

    for name, help_text, func in (
        ("languages", "Show language breakdown", cmd_languages),
        ("topics", "List topics", cmd_topics),
        ("readme", "Print the README", cmd_readme),
        ("clone-url", "Show clone URLs", cmd_clone_url),
    ):
        p = sub.add_parser(name, help=help_text)
        add_repo_arg(p)
        p.set_defaults(func=func)
