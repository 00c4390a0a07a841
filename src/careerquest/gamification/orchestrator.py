"""Progress orchestrator: one call per user event, one new snapshot out.

The orchestrator never touches storage. It takes a snapshot, computes the
full next snapshot plus the diff the dashboard needs, and leaves the single
commit to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, NamedTuple

from careerquest.gamification import streak_service
from careerquest.gamification.achievement_engine import AchievementRuleEngine, get_achievement_engine
from careerquest.gamification.enums import TriggerKind
from careerquest.gamification.level_thresholds import level_number
from careerquest.gamification.milestone_engine import MilestoneEngine, check_reward_ids, default_milestones
from careerquest.gamification.notifications import build_notifications
from careerquest.gamification.schemas import (
    ActivityEvent,
    ActivityLogEntry,
    ActivityOutcome,
    EarnedAchievement,
    EventOutcome,
    Milestone,
    ProfileSnapshot,
    TriggerEvent,
)
from careerquest.gamification.xp_service import activity_xp, award, trigger_xp

logger = logging.getLogger(__name__)


class _Settlement(NamedTuple):
    profile: ProfileSnapshot
    new_achievements: tuple[EarnedAchievement, ...]
    completed_milestones: tuple[str, ...]
    milestone_rewards: tuple[EarnedAchievement, ...]
    total_xp_gained: int
    final_level: int
    reached_level: int | None


def _trigger_facts(profile: ProfileSnapshot, trigger: TriggerEvent) -> dict[str, Any]:
    """Profile fields a trigger establishes before rules are evaluated."""
    kind = trigger.kind
    if kind == TriggerKind.ASSESSMENT_COMPLETED:
        return {"assessment_completed": True}
    if kind == TriggerKind.RECOMMENDATIONS_GENERATED and trigger.recommendations:
        merged = profile.career_recommendations + tuple(
            r for r in dict.fromkeys(trigger.recommendations) if r not in profile.career_recommendations
        )
        return {"career_recommendations": merged}
    if kind == TriggerKind.CAREER_SELECTED and trigger.career_path:
        return {"selected_career_path": trigger.career_path}
    if kind == TriggerKind.ROADMAP_GENERATED:
        return {"has_learning_roadmap": True}
    if kind == TriggerKind.SKILL_GAP_ANALYSIS:
        return {"has_skill_gap_analysis": True}
    if kind == TriggerKind.ATS_IMPROVEMENT:
        return {"resume_attached": True}
    return {}


class ProgressOrchestrator:
    """Composes XP, streak, achievement and milestone rules into one transaction.

    Milestone rewards in ``milestone_set`` (the default set when omitted)
    must not reuse a registry achievement id.
    """

    def __init__(
        self,
        achievements: AchievementRuleEngine | None = None,
        milestones: MilestoneEngine | None = None,
        milestone_set: Iterable[Milestone] | None = None,
    ) -> None:
        self.achievements = achievements if achievements is not None else get_achievement_engine()
        self.milestones = milestones if milestones is not None else MilestoneEngine()
        check_reward_ids(
            default_milestones() if milestone_set is None else milestone_set,
            (d.id for d in self.achievements.definitions),
        )

    def process_activity(
        self,
        profile: ProfileSnapshot,
        activity: ActivityEvent,
        now: datetime | None = None,
    ) -> ActivityOutcome:
        """Award a completed activity.

        Steps: activity XP, streak update, achievements against the updated
        snapshot, milestones against the snapshot including those
        achievements, final level. An activity id already in the profile's
        log is ignored and the snapshot is returned untouched.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        if profile.has_activity(activity.id):
            logger.info("Ignoring duplicate activity %s for user %s", activity.id, profile.user_id)
            return ActivityOutcome(
                xp_awarded=0,
                total_xp_gained=0,
                final_level=profile.level,
                profile=profile,
                updated_streak=profile.streak,
                duplicate=True,
            )

        xp_awarded = activity_xp(activity.kind)
        base = award(profile.experience_points, xp_awarded)
        updated_streak = streak_service.update(profile.streak, activity.completed_at)

        working = profile.model_copy(
            update={
                "experience_points": base.new_xp,
                "level": level_number(base.new_xp),
                "streak": updated_streak,
                "activity_log": profile.activity_log + (ActivityLogEntry.from_activity(activity),),
            }
        )
        settled = self._settle(profile, working, TriggerEvent.activity_completed(activity), now)

        return ActivityOutcome(
            xp_awarded=xp_awarded,
            total_xp_gained=settled.total_xp_gained,
            new_achievements=settled.new_achievements,
            newly_completed_milestones=settled.completed_milestones,
            milestone_rewards=settled.milestone_rewards,
            leveled_up=base.leveled_up,
            new_level=base.new_level,
            final_level=settled.final_level,
            updated_streak=updated_streak,
            profile=settled.profile,
            notifications=build_notifications(
                settled.new_achievements,
                settled.milestone_rewards,
                settled.reached_level,
                now,
                previous_streak=profile.streak,
                updated_streak=updated_streak,
            ),
        )

    def process_event(
        self,
        profile: ProfileSnapshot,
        trigger: TriggerEvent,
        now: datetime | None = None,
    ) -> EventOutcome:
        """Award a non-activity trigger (assessment, chat, resume, ...)."""
        if trigger.kind == TriggerKind.ACTIVITY_COMPLETED:
            if trigger.activity is None:
                msg = "activity_completed triggers must carry an activity"
                raise ValueError(msg)
            return self.process_activity(profile, trigger.activity, now)

        if now is None:
            now = datetime.now(timezone.utc)

        xp_awarded = trigger_xp(trigger.kind, trigger.amount)
        base = award(profile.experience_points, xp_awarded)

        working = profile.model_copy(
            update={
                **_trigger_facts(profile, trigger),
                "experience_points": base.new_xp,
                "level": level_number(base.new_xp),
            }
        )
        settled = self._settle(profile, working, trigger, now)

        return EventOutcome(
            xp_awarded=xp_awarded,
            total_xp_gained=settled.total_xp_gained,
            new_achievements=settled.new_achievements,
            newly_completed_milestones=settled.completed_milestones,
            milestone_rewards=settled.milestone_rewards,
            leveled_up=base.leveled_up,
            new_level=base.new_level,
            final_level=settled.final_level,
            profile=settled.profile,
            notifications=build_notifications(
                settled.new_achievements,
                settled.milestone_rewards,
                settled.reached_level,
                now,
            ),
        )

    def _settle(
        self,
        original: ProfileSnapshot,
        working: ProfileSnapshot,
        trigger: TriggerEvent,
        now: datetime,
    ) -> _Settlement:
        """Evaluate achievements then milestones on top of working, and finalise."""
        new_achievements = tuple(self.achievements.evaluate(working, trigger, now))
        after_achievements = award(working.experience_points, sum(a.xp_reward for a in new_achievements))
        working = working.model_copy(
            update={
                "experience_points": after_achievements.new_xp,
                "level": level_number(after_achievements.new_xp),
                "earned_achievements": working.earned_achievements + new_achievements,
            }
        )

        evaluation = self.milestones.evaluate(working, now)
        # A completed milestone whose reward id is already earned pays nothing.
        rewards = tuple(reward for _, reward in evaluation.completed if reward.id not in working.earned_ids)
        final_xp = award(working.experience_points, sum(r.xp_reward for r in rewards)).new_xp
        final_level = level_number(final_xp)
        original_level = level_number(original.experience_points)

        final = working.model_copy(
            update={
                "experience_points": final_xp,
                "level": final_level,
                "milestones": evaluation.milestones,
                "earned_achievements": working.earned_achievements + rewards,
                "version": original.version + 1,
                "updated_at": now,
            }
        )
        reached_level = final_level if final_level > original_level else None
        if reached_level is not None:
            logger.info("User %s reached level %d", original.user_id, reached_level)

        return _Settlement(
            profile=final,
            new_achievements=new_achievements,
            completed_milestones=tuple(milestone_id for milestone_id, _ in evaluation.completed),
            milestone_rewards=rewards,
            total_xp_gained=final_xp - original.experience_points,
            final_level=final_level,
            reached_level=reached_level,
        )
