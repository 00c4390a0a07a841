"""UI notification payloads and their Redis pub/sub delivery."""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import datetime

import structlog

from careerquest.gamification.enums import NotificationType, StreakType
from careerquest.gamification.level_thresholds import level_title
from careerquest.gamification.schemas import EarnedAchievement, Notification, StreakRecord

logger = structlog.get_logger()

STREAK_NOTIFICATION_INTERVAL = 7


def achievement_notification(achievement: EarnedAchievement) -> Notification:
    return Notification(
        type=NotificationType.ACHIEVEMENT,
        id=f"achievement_{achievement.id}",
        title="Achievement Unlocked!",
        message=f"{achievement.title} - {achievement.description}",
        timestamp=achievement.earned_at,
        icon=achievement.badge_icon,
        xp=achievement.xp_reward,
    )


def milestone_notification(reward: EarnedAchievement) -> Notification:
    return Notification(
        type=NotificationType.MILESTONE,
        id=f"milestone_{reward.id}",
        title="Milestone Complete!",
        message=f"{reward.title} - {reward.description}",
        timestamp=reward.earned_at,
        icon=reward.badge_icon,
        xp=reward.xp_reward,
    )


def level_up_notification(level: int, now: datetime) -> Notification:
    return Notification(
        type=NotificationType.LEVELUP,
        id=f"levelup_{level}",
        title="Level Up!",
        message=f"You've reached level {level} - {level_title(level)}",
        timestamp=now,
        icon="\U0001f389",
        level=level,
    )


def streak_notification(streak: StreakRecord, now: datetime) -> Notification:
    unit = "week" if streak.streak_type == StreakType.WEEKLY else "day"
    return Notification(
        type=NotificationType.STREAK,
        id=f"streak_{streak.current_streak}",
        title="Streak Milestone!",
        message=f"{streak.current_streak} {unit} learning streak! Keep it up!",
        timestamp=streak.last_activity_date or now,
        icon="\U0001f525",
        streak=streak.current_streak,
    )


def build_notifications(
    new_achievements: Sequence[EarnedAchievement],
    milestone_rewards: Sequence[EarnedAchievement],
    new_level: int | None,
    now: datetime,
    previous_streak: StreakRecord | None = None,
    updated_streak: StreakRecord | None = None,
) -> tuple[Notification, ...]:
    """One event per earned achievement and milestone reward, one for a level-up,
    and one when the streak has just advanced to a multiple of seven.
    """
    notifications = [achievement_notification(a) for a in new_achievements]
    notifications += [milestone_notification(r) for r in milestone_rewards]

    if new_level is not None:
        notifications.append(level_up_notification(new_level, now))

    if previous_streak is not None and updated_streak is not None:
        current = updated_streak.current_streak
        advanced = current != previous_streak.current_streak
        if advanced and current > 0 and current % STREAK_NOTIFICATION_INTERVAL == 0:
            notifications.append(streak_notification(updated_streak, now))

    return tuple(notifications)


async def publish_notifications(
    redis: object,
    user_id: str,
    notifications: Sequence[Notification],
    channel_prefix: str = "pubsub:",
) -> int:
    """Publish each notification on ``{prefix}{type}``. Returns the number sent.

    Delivery is best effort: a failed publish is logged and skipped.
    """
    if redis is None:
        return 0

    sent = 0
    for notification in notifications:
        channel = f"{channel_prefix}{notification.type.value}"
        try:
            await redis.publish(  # type: ignore[attr-defined]
                channel,
                json.dumps({"user_id": user_id, "notification": notification.model_dump(mode="json")}),
            )
            sent += 1
        except Exception:
            logger.warning(
                "notification_publish_failed",
                user_id=user_id,
                channel=channel,
                notification_id=notification.id,
                exc_info=True,
            )
    return sent
