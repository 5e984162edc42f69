from __future__ import annotations

from typing import Literal

from pydantic import Field

from domain.diagrams.base import DiagramBase, DiagramElement, duplicate_ids, fill_missing_ids

CommitType = Literal["NORMAL", "REVERSE", "HIGHLIGHT"]


class GitCommit(DiagramElement):
    id: str | None = None
    message: str | None = None
    commit_type: CommitType = "NORMAL"
    tag: str | None = None
    branch: str | None = None
    parent_ids: list[str] = Field(default_factory=list)
    is_merge: bool = False
    merge_branch: str | None = None
    is_cherry_pick: bool = False
    cherry_pick_parent: str | None = None


class GitBranch(DiagramElement):
    name: str = Field(..., min_length=1)
    order: int | None = None
    parent_branch: str | None = None
    created_at_commit: str | None = None


class GitGraphDiagram(DiagramBase):
    """Commits in chronological order; ``branches`` lists every branch except the main one."""

    kind: Literal["git_graph"] = "git_graph"
    orientation: Literal["LR", "TB"] = "LR"
    main_branch: str = "main"
    commits: list[GitCommit] = Field(default_factory=list)
    branches: list[GitBranch] = Field(default_factory=list)

    def commit_ids(self) -> list[str]:
        return fill_missing_ids(
            [commit.id for commit in self.commits],
            [f"commit_{index}" for index in range(len(self.commits))],
        )

    def branch_of(self, commit: GitCommit) -> str:
        return commit.branch or self.main_branch

    def validation_problems(self) -> list[str]:
        ids = [commit.id for commit in self.commits if commit.id]
        problems = [f"Duplicate commit id: {commit_id}" for commit_id in duplicate_ids(ids)]
        names = [self.main_branch] + [branch.name for branch in self.branches]
        problems.extend(f"Duplicate branch name: {name}" for name in duplicate_ids(names))
        return problems
