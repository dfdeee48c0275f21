import asyncio

from code_review_chat.issue_state import apply_current_milestone, assign_author, issue_state_tasks
from code_review_chat.models import IssueInfo, Milestone

M = Milestone(number=7, title="October 2026")


async def test_unassigned_issue_gets_both_tasks(make_issue):
    issue = make_issue(current_milestone=M)
    info = IssueInfo(author="alice")

    tasks = issue_state_tasks(issue, info)
    await asyncio.gather(*tasks)

    assert len(tasks) == 2
    issue.add_assignee.assert_awaited_once_with("alice")
    issue.set_milestone.assert_awaited_once_with(M)


async def test_assigned_issue_only_checks_milestone(make_issue):
    issue = make_issue()
    info = IssueInfo(author="alice", assignee="bob")

    tasks = issue_state_tasks(issue, info)
    await asyncio.gather(*tasks)

    assert len(tasks) == 1
    issue.add_assignee.assert_not_awaited()
    issue.get_current_repo_milestone.assert_awaited_once()


async def test_assign_author_noop_when_assigned(make_issue):
    issue = make_issue()
    await assign_author(issue, IssueInfo(author="alice", assignee="alice"))
    issue.add_assignee.assert_not_awaited()


async def test_existing_milestone_is_kept(make_issue):
    issue = make_issue(current_milestone=M)
    await apply_current_milestone(issue, IssueInfo(author="alice", milestone=Milestone(1, "Old")))
    issue.set_milestone.assert_not_awaited()
