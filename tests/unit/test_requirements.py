"""Unit tests for requirement parsing and evaluation."""

from datetime import datetime, timedelta, timezone

import pytest

from careerquest.gamification.enums import SkillLevel, StreakType, TimeWindow, TriggerKind
from careerquest.gamification.errors import (
    ConfigurationError,
    MalformedRequirementString,
    UnknownRequirement,
)
from careerquest.gamification.requirements import (
    REQUIREMENT_KINDS,
    ActivitiesCompletedAtLeast,
    ActivityTypeIs,
    AssessmentCompleted,
    AtsImprovementAtLeast,
    CareerSelected,
    CareersExploredAtLeast,
    ChatMilestone,
    DailyStreakAtLeast,
    LevelAtLeast,
    ProfileCompletenessAtLeast,
    RoadmapProgressAtLeast,
    SkillAtExpertLevel,
    SkillsLearnedAtLeast,
    StreakDaysAtLeast,
    TimeOfDayActivityDays,
    WeekendActiveWeeks,
    all_met,
    parse_requirement,
    parse_requirements,
)
from careerquest.gamification.schemas import (
    ActivityLogEntry,
    ProfileSnapshot,
    SkillProgress,
    StreakRecord,
    TriggerEvent,
)

MONDAY = datetime(2026, 3, 2, 14, 0, 0, tzinfo=timezone.utc)


def _profile(**kwargs) -> ProfileSnapshot:
    return ProfileSnapshot(user_id="user-1", **kwargs)


def _log(*timestamps: datetime) -> tuple[ActivityLogEntry, ...]:
    return tuple(
        ActivityLogEntry(id=f"activity_{i}", kind="course", completed_at=ts)
        for i, ts in enumerate(timestamps)
    )


class TestParseAchievementVocabulary:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("daily_streak_7", DailyStreakAtLeast(days=7)),
            ("explore_5_careers", CareersExploredAtLeast(count=5)),
            ("roadmap_50_percent", RoadmapProgressAtLeast(percent=50)),
            ("early_morning_streak_5", TimeOfDayActivityDays(window=TimeWindow.MORNING, days=5)),
            ("late_night_streak_5", TimeOfDayActivityDays(window=TimeWindow.NIGHT, days=5)),
            ("weekend_activity_4_weeks", WeekendActiveWeeks(weeks=4)),
            ("ats_score_improvement_20", AtsImprovementAtLeast(points=20)),
            ("chat_conversations_10", ChatMilestone(count=10)),
            ("complete_profile_100", ProfileCompletenessAtLeast(percent=100)),
            ("complete_activity", ActivityTypeIs(trigger=TriggerKind.ACTIVITY_COMPLETED)),
            ("complete_assessment", AssessmentCompleted()),
            ("skill_expert_level", SkillAtExpertLevel()),
            ("career_selected", CareerSelected()),
        ],
    )
    def test_known_strings(self, raw, expected):
        assert parse_requirement(raw) == expected

    def test_surrounding_whitespace_ignored(self):
        assert parse_requirement("  daily_streak_3 ") == DailyStreakAtLeast(days=3)


class TestParseMilestoneVocabulary:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("streak_days:7", StreakDaysAtLeast(days=7)),
            ("level_reached:5", LevelAtLeast(level=5)),
            ("skills_learned:3", SkillsLearnedAtLeast(count=3)),
            ("activities_completed:10", ActivitiesCompletedAtLeast(count=10)),
            ("progress_percentage:50", RoadmapProgressAtLeast(percent=50)),
            ("assessment_complete", AssessmentCompleted()),
        ],
    )
    def test_typed_strings(self, raw, expected):
        assert parse_requirement(raw) == expected

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("streak_days", StreakDaysAtLeast(days=1)),
            ("streak_days:", StreakDaysAtLeast(days=1)),
            ("skills_learned", SkillsLearnedAtLeast(count=1)),
            ("progress_percentage", RoadmapProgressAtLeast(percent=100)),
            ("level_reached", LevelAtLeast(level=1)),
        ],
    )
    def test_missing_value_uses_default(self, raw, expected):
        assert parse_requirement(raw) == expected


class TestParseDictsAndErrors:
    def test_dict_form(self):
        assert parse_requirement({"kind": "daily_streak_at_least", "days": 3}) == DailyStreakAtLeast(days=3)

    def test_variant_passes_through(self):
        requirement = LevelAtLeast(level=2)
        assert parse_requirement(requirement) is requirement

    def test_parse_requirements_preserves_order(self):
        parsed = parse_requirements(["assessment_complete", {"kind": "level_at_least", "level": 3}])
        assert parsed == (AssessmentCompleted(), LevelAtLeast(level=3))

    @pytest.mark.parametrize("raw", ["fly_to_the_moon", "bogus:3", {"kind": "nope"}, 42])
    def test_unknown_requirement(self, raw):
        with pytest.raises(UnknownRequirement):
            parse_requirement(raw)

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "daily_streak_seven",
            "streak_days:abc",
            "daily_streak_0",
            "assessment_complete:1",
            {"kind": "chat_milestone"},
            {"days": 3},
        ],
    )
    def test_malformed_requirement(self, raw):
        with pytest.raises(MalformedRequirementString):
            parse_requirement(raw)

    def test_parse_errors_are_configuration_errors(self):
        with pytest.raises(ConfigurationError):
            parse_requirement("streak_days:x")

    def test_every_variant_is_registered(self):
        assert len(REQUIREMENT_KINDS) == 18


class TestTriggerGatedRequirements:
    def test_activity_type_needs_matching_trigger(self):
        requirement = ActivityTypeIs(trigger=TriggerKind.ASSESSMENT_COMPLETED)
        profile = _profile()
        assert requirement.is_met(profile) is False
        assert requirement.is_met(profile, TriggerEvent.chat_milestone(3)) is False
        assert requirement.is_met(profile, TriggerEvent.assessment_completed()) is True

    def test_chat_milestone_count(self):
        requirement = ChatMilestone(count=10)
        assert requirement.is_met(_profile(), TriggerEvent.chat_milestone(9)) is False
        assert requirement.is_met(_profile(), TriggerEvent.chat_milestone(10)) is True

    def test_ats_improvement_points(self):
        requirement = AtsImprovementAtLeast(points=20)
        assert requirement.is_met(_profile(), TriggerEvent.ats_improvement(19)) is False
        assert requirement.is_met(_profile(), TriggerEvent.ats_improvement(25)) is True

    def test_career_selected_needs_trigger_and_path(self):
        requirement = CareerSelected()
        trigger = TriggerEvent.career_selected("Data Engineer")
        assert requirement.is_met(_profile(), trigger) is False
        assert requirement.is_met(_profile(selected_career_path="Data Engineer"), trigger) is True
        assert requirement.is_met(_profile(selected_career_path="Data Engineer")) is False


class TestProfileStateRequirements:
    def test_daily_streak_only_counts_daily_streaks(self):
        daily = StreakRecord(current_streak=7, longest_streak=7, last_activity_date=MONDAY)
        weekly = daily.model_copy(update={"streak_type": StreakType.WEEKLY})
        assert DailyStreakAtLeast(days=7).is_met(_profile(streak=daily)) is True
        assert DailyStreakAtLeast(days=7).is_met(_profile(streak=weekly)) is False
        assert StreakDaysAtLeast(days=7).is_met(_profile(streak=weekly)) is True

    def test_skill_at_expert_level(self):
        skills = {
            "sql": SkillProgress(skill_id="sql", skill_name="SQL", current_level=SkillLevel.ADVANCED),
        }
        assert SkillAtExpertLevel().is_met(_profile(skill_progress=skills)) is False
        skills["python"] = SkillProgress(skill_id="python", skill_name="Python", current_level=SkillLevel.EXPERT)
        assert SkillAtExpertLevel().is_met(_profile(skill_progress=skills)) is True
        assert SkillsLearnedAtLeast(count=2).is_met(_profile(skill_progress=skills)) is True

    def test_roadmap_progress(self):
        assert RoadmapProgressAtLeast(percent=50).is_met(_profile(overall_progress=49.9)) is False
        assert RoadmapProgressAtLeast(percent=50).is_met(_profile(overall_progress=50)) is True

    def test_activities_completed_counts_log(self):
        profile = _profile(activity_log=_log(MONDAY, MONDAY + timedelta(days=1)))
        assert ActivitiesCompletedAtLeast(count=2).is_met(profile) is True
        assert ActivitiesCompletedAtLeast(count=3).is_met(profile) is False

    def test_level_at_least(self):
        assert LevelAtLeast(level=5).is_met(_profile(level=4)) is False
        assert LevelAtLeast(level=5).is_met(_profile(level=5)) is True


class TestCalendarRequirements:
    def test_morning_days_are_distinct(self):
        mornings = [MONDAY.replace(hour=7) + timedelta(days=d) for d in range(4)]
        same_day_twice = mornings + [mornings[0].replace(hour=8)]
        requirement = TimeOfDayActivityDays(window=TimeWindow.MORNING, days=5)
        assert requirement.is_met(_profile(activity_log=_log(*same_day_twice))) is False
        fifth = MONDAY.replace(hour=8) + timedelta(days=4)
        assert requirement.is_met(_profile(activity_log=_log(*mornings, fifth))) is True

    def test_nine_am_is_not_morning(self):
        requirement = TimeOfDayActivityDays(window=TimeWindow.MORNING, days=1)
        assert requirement.is_met(_profile(activity_log=_log(MONDAY.replace(hour=9)))) is False

    def test_night_window_starts_at_nine_pm(self):
        requirement = TimeOfDayActivityDays(window=TimeWindow.NIGHT, days=1)
        assert requirement.is_met(_profile(activity_log=_log(MONDAY.replace(hour=20)))) is False
        assert requirement.is_met(_profile(activity_log=_log(MONDAY.replace(hour=21)))) is True

    def test_weekend_weeks_must_be_consecutive(self):
        saturday = MONDAY + timedelta(days=5)
        consecutive = [saturday + timedelta(weeks=w) for w in range(4)]
        requirement = WeekendActiveWeeks(weeks=4)
        assert requirement.is_met(_profile(activity_log=_log(*consecutive))) is True

        with_gap = consecutive[:3] + [saturday + timedelta(weeks=4)]
        assert requirement.is_met(_profile(activity_log=_log(*with_gap))) is False

    def test_weekday_activity_does_not_count_as_weekend(self):
        weekdays = [MONDAY + timedelta(weeks=w) for w in range(4)]
        assert WeekendActiveWeeks(weeks=1).is_met(_profile(activity_log=_log(*weekdays))) is False


class TestAllMet:
    def test_all_requirements_must_hold(self):
        profile = _profile(assessment_completed=True, level=2)
        assert all_met([AssessmentCompleted(), LevelAtLeast(level=2)], profile) is True
        assert all_met([AssessmentCompleted(), LevelAtLeast(level=3)], profile) is False
