"""Tests for the eligibility policy."""

import pytest

from autoban.moderation.eligibility import (
    DEFAULT_BAN_REASON,
    ActorAuthority,
    Decision,
    DecisionType,
    MemberSnapshot,
    SkipReason,
    evaluate,
)
from fakes import EXTRA_ROLE, GUILD_ID, OWNER_ID, TARGET_ROLE, FakeGuild, FakeMember, make_actor_member


def snapshot(member_id=2, role_ids=(TARGET_ROLE,), *, is_bot=False, is_owner=False, top=1):
    return MemberSnapshot(
        member_id=member_id,
        tag=f"member{member_id}",
        is_bot=is_bot,
        is_owner=is_owner,
        role_ids=frozenset(role_ids),
        top_role_position=top,
    )


STRONG_ACTOR = ActorAuthority(can_ban=True, top_role_position=10)


class TestEvaluate:
    """Each check of the policy in isolation."""

    def test_sole_target_role_is_banned(self):
        decision = evaluate(snapshot(), TARGET_ROLE, STRONG_ACTOR, "Startup scan: missing required role")
        assert decision == Decision.ban("Startup scan: missing required role")
        assert decision.is_ban

    def test_default_reason(self):
        decision = evaluate(snapshot(), TARGET_ROLE, STRONG_ACTOR)
        assert decision.reason == DEFAULT_BAN_REASON

    def test_missing_member_is_skipped(self):
        decision = evaluate(None, TARGET_ROLE, STRONG_ACTOR)
        assert decision.action is DecisionType.SKIP
        assert decision.skip_reason is SkipReason.NO_MEMBER

    @pytest.mark.parametrize("role_ids", [(), (TARGET_ROLE,), (TARGET_ROLE, EXTRA_ROLE)])
    def test_bots_are_always_skipped(self, role_ids):
        decision = evaluate(snapshot(role_ids=role_ids, is_bot=True), TARGET_ROLE, STRONG_ACTOR)
        assert decision.skip_reason is SkipReason.BOT_ACCOUNT

    def test_owner_is_always_skipped(self):
        decision = evaluate(snapshot(is_owner=True), TARGET_ROLE, STRONG_ACTOR)
        assert decision.skip_reason is SkipReason.GUILD_OWNER

    @pytest.mark.parametrize("role_ids", [(), (EXTRA_ROLE,)])
    def test_members_without_target_role_are_skipped(self, role_ids):
        decision = evaluate(snapshot(role_ids=role_ids), TARGET_ROLE, STRONG_ACTOR)
        assert decision.skip_reason is SkipReason.MISSING_TARGET_ROLE

    def test_target_role_plus_another_role_is_skipped(self):
        decision = evaluate(snapshot(role_ids=(TARGET_ROLE, EXTRA_ROLE)), TARGET_ROLE, STRONG_ACTOR)
        assert decision.skip_reason is SkipReason.HAS_OTHER_ROLES

    def test_actor_without_ban_permission_is_skipped(self):
        actor = ActorAuthority(can_ban=False, top_role_position=10)
        decision = evaluate(snapshot(), TARGET_ROLE, actor)
        assert decision.skip_reason is SkipReason.INSUFFICIENT_AUTHORITY

    @pytest.mark.parametrize("actor_top", [0, 1])
    def test_actor_must_strictly_outrank_member(self, actor_top):
        actor = ActorAuthority(can_ban=True, top_role_position=actor_top)
        decision = evaluate(snapshot(top=1), TARGET_ROLE, actor)
        assert decision.skip_reason is SkipReason.INSUFFICIENT_AUTHORITY

    def test_bot_check_wins_over_owner_check(self):
        decision = evaluate(snapshot(is_bot=True, is_owner=True), TARGET_ROLE, STRONG_ACTOR)
        assert decision.skip_reason is SkipReason.BOT_ACCOUNT


class TestSnapshots:
    def test_member_snapshot_drops_everyone_role(self):
        guild = FakeGuild()
        member = FakeMember(7, (TARGET_ROLE,))

        captured = MemberSnapshot.from_member(member, guild)

        assert captured.role_ids == frozenset({TARGET_ROLE})
        assert GUILD_ID not in captured.role_ids
        assert captured.is_owner is False
        assert captured.tag == "member7"

    def test_member_snapshot_flags_owner(self):
        captured = MemberSnapshot.from_member(FakeMember(OWNER_ID, (TARGET_ROLE,)), FakeGuild())
        assert captured.is_owner is True

    def test_actor_authority_from_member(self):
        actor = ActorAuthority.from_member(make_actor_member(ban_members=True, top_position=4))
        assert actor == ActorAuthority(can_ban=True, top_role_position=4)

    def test_unknown_actor_has_no_authority(self):
        actor = ActorAuthority.from_member(None)
        assert actor.can_ban is False
        assert evaluate(snapshot(top=0), TARGET_ROLE, actor).skip_reason is SkipReason.INSUFFICIENT_AUTHORITY
