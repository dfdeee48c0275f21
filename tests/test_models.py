import pytest

from code_review_chat.models import (
    ChannelMembership,
    ChatMessage,
    MessageSubtype,
    PullRequestSummary,
    RepoIdentity,
    ReviewState,
)


class TestChatMessage:
    def test_parses_plain_message(self):
        msg = ChatMessage.from_api(
            {
                "type": "message",
                "ts": "1700000000.000100",
                "text": "hello",
                "reply_count": 2,
                "reactions": [{"name": "white_check_mark", "count": 1, "users": ["U1"]}],
            }
        )

        assert msg.subtype is MessageSubtype.NONE
        assert msg.reply_count == 2
        assert msg.has_reaction("white_check_mark")
        assert not msg.has_reaction("eyes")

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("tombstone", MessageSubtype.TOMBSTONE),
            ("channel_join", MessageSubtype.CHANNEL_JOIN),
            ("bot_add", MessageSubtype.OTHER),
            ("", MessageSubtype.NONE),
            (None, MessageSubtype.NONE),
        ],
    )
    def test_subtypes(self, raw, expected):
        msg = ChatMessage.from_api({"ts": "1.0", "subtype": raw})
        assert msg.subtype is expected

    def test_missing_fields_get_defaults(self):
        msg = ChatMessage.from_api({"ts": "1.0"})

        assert msg.text == ""
        assert msg.reply_count == 0
        assert msg.reactions == ()

    def test_zero_count_reaction_does_not_count(self):
        msg = ChatMessage.from_api({"ts": "1.0", "reactions": [{"name": "white_check_mark", "count": 0}]})
        assert not msg.has_reaction("white_check_mark")

    def test_message_without_ts_is_rejected(self):
        with pytest.raises(ValueError):
            ChatMessage.from_api({"text": "no ts"})


def test_channel_membership_requires_true_is_member():
    assert ChannelMembership.from_api({"id": "C1", "name": "a"}).is_member is False
    assert ChannelMembership.from_api({"id": "C1", "name": "a", "is_member": True}).is_member is True
    assert ChannelMembership.from_api({"id": "C1"}) is None


def test_pull_request_from_event():
    event = {
        "action": "opened",
        "pull_request": {
            "number": 12,
            "html_url": "https://github.com/o/r/pull/12",
            "title": "Add thing",
            "draft": True,
            "additions": 10,
            "deletions": 3,
            "changed_files": 2,
            "user": {"login": "bob"},
            "body": None,
        },
    }

    pr = PullRequestSummary.from_event(event)

    assert pr.number == 12
    assert pr.owner == "bob"
    assert pr.draft is True
    assert pr.body == ""


def test_pull_request_from_event_without_pr():
    with pytest.raises(ValueError):
        PullRequestSummary.from_event({"issue": {}})


def test_repo_identity_parse():
    repo = RepoIdentity.parse("microsoft/vscode")
    assert (repo.owner, repo.repo, repo.full_name) == ("microsoft", "vscode", "microsoft/vscode")

    with pytest.raises(ValueError):
        RepoIdentity.parse("vscode")


def test_review_state_claimed():
    assert not ReviewState(False, False).claimed
    assert ReviewState(True, False).claimed
    assert ReviewState(False, True).claimed
