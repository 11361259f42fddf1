"""
Tests for adaptive difficulty, per-word game sessions and the Dutch hint reveal.
"""

from datetime import timedelta

import pytest

from palabras.models.schemas import DifficultySettings
from palabras.services.difficulty_tuner import HintState

T, F = True, False


class TestDefaults:

    def test_default_settings(self, tuner):
        settings = tuner.default_settings()

        assert settings.max_options == 4
        assert settings.show_hints is False
        assert settings.show_dutch_on_second_mistake is False
        assert settings.extra_time is False
        assert settings.font_size == "normal"
        assert settings.dyslexia_friendly is False


class TestAdjust:

    def test_too_few_outcomes_returns_input(self, tuner):
        current = tuner.default_settings()
        assert tuner.adjust(current, [F, F, F, F]) is current

    def test_low_accuracy_eases(self, tuner):
        current = tuner.default_settings()

        adjusted = tuner.adjust(current, [T, F, F, F, T])

        assert adjusted.max_options == 3
        assert adjusted.show_hints is True
        assert adjusted.extra_time is True
        assert current.max_options == 4  # исходные настройки не меняются

    def test_ease_floors_at_two_options(self, tuner):
        current = DifficultySettings(max_options=2)
        assert tuner.adjust(current, [F] * 5).max_options == 2

    def test_ease_takes_priority_over_escalation(self, tuner):
        # последние 10: 7/10, последние 5: 2/5
        outcomes = [T, T, T, T, T, T, T, F, F, F]
        adjusted = tuner.adjust(tuner.default_settings(), outcomes)
        assert adjusted.max_options == 3
        assert adjusted.show_hints is True

    def test_sustained_accuracy_escalates(self, tuner):
        current = DifficultySettings(max_options=4, show_hints=True, extra_time=True)

        adjusted = tuner.adjust(current, [T] * 10)

        assert adjusted.max_options == 5
        assert adjusted.show_hints is False
        assert adjusted.extra_time is False

    def test_escalate_caps_at_six_options(self, tuner):
        current = DifficultySettings(max_options=6)
        assert tuner.adjust(current, [T] * 10).max_options == 6

    def test_ninety_percent_is_not_enough_to_escalate(self, tuner):
        current = tuner.default_settings()
        assert tuner.adjust(current, [F] + [T] * 9) is current

    def test_good_but_short_window_is_unchanged(self, tuner):
        current = tuner.default_settings()
        assert tuner.adjust(current, [T] * 9) is current

    def test_keeps_unrelated_settings(self, tuner):
        current = DifficultySettings(font_size="large", dyslexia_friendly=True)

        adjusted = tuner.adjust(current, [F] * 5)

        assert adjusted.font_size == "large"
        assert adjusted.dyslexia_friendly is True


class TestShouldEase:

    def test_false_with_fewer_than_five(self, tuner):
        assert tuner.should_ease([F, F]) is False
        assert tuner.should_ease([]) is False

    def test_true_below_seventy_percent(self, tuner):
        assert tuner.should_ease([T, F, F, F, T]) is True

    def test_false_at_eighty_percent(self, tuner):
        assert tuner.should_ease([T, T, F, T, T]) is False

    @pytest.mark.parametrize("prefix", [[], [F] * 5, [T] * 7, [T, F, T]])
    def test_only_last_five_matter(self, tuner, prefix):
        assert tuner.should_ease(prefix + [T, T, T, T, F]) is False
        assert tuner.should_ease(prefix + [F, F, T, F, T]) is True


class TestPresentationLookups:

    def test_time_limit(self, tuner):
        assert tuner.time_limit(DifficultySettings(extra_time=True), 10) == 15
        assert tuner.time_limit(DifficultySettings(), 10) == 10
        assert tuner.time_limit(DifficultySettings(extra_time=True), timedelta(seconds=20)) == timedelta(seconds=30)

    @pytest.mark.parametrize("size,token", [
        ("normal", "text-base"),
        ("large", "text-lg"),
        ("extra-large", "text-xl"),
    ])
    def test_font_size_token(self, tuner, size, token):
        assert tuner.font_size_token(DifficultySettings(font_size=size)) == token

    def test_dyslexia_token(self, tuner):
        assert tuner.dyslexia_token(DifficultySettings(dyslexia_friendly=True)) == \
            "font-dyslexic tracking-wide leading-relaxed"
        assert tuner.dyslexia_token(DifficultySettings()) is None


class TestGameSession:

    def test_create(self, tuner, now):
        session = tuner.create_session("perro", now=now)

        assert session.word_id == "perro"
        assert session.attempts == []
        assert session.current_streak == 0
        assert session.mistake_count == 0
        assert session.start_time == now

    def test_update_counts_streak_and_mistakes(self, tuner):
        session = tuner.create_session("perro")
        for correct in [T, T, F, T]:
            session = tuner.update_session(session, correct)

        assert session.attempts == [T, T, F, T]
        assert session.current_streak == 1
        assert session.mistake_count == 1

    def test_dutch_hint_after_two_mistakes(self, tuner):
        session = tuner.create_session("perro")
        session = tuner.update_session(session, F)
        assert tuner.should_show_dutch_hint(session) is False

        session = tuner.update_session(session, F)
        assert tuner.should_show_dutch_hint(session) is True


class TestHintState:

    def _answer(self, tuner, state, session, settings, correct):
        session = tuner.update_session(session, correct)
        return tuner.next_hint_state(state, session, settings, correct), session

    def test_shown_on_second_mistake_when_enabled(self, tuner):
        settings = DifficultySettings(show_dutch_on_second_mistake=True)
        session = tuner.create_session("gato")

        state, session = self._answer(tuner, HintState.HIDDEN, session, settings, F)
        assert state == HintState.HIDDEN

        state, session = self._answer(tuner, state, session, settings, F)
        assert state == HintState.SHOWN

    def test_stays_hidden_when_disabled(self, tuner):
        settings = DifficultySettings()
        session = tuner.create_session("gato")
        state = HintState.HIDDEN
        for _ in range(3):
            state, session = self._answer(tuner, state, session, settings, F)
        assert state == HintState.HIDDEN

    def test_correct_answer_hides(self, tuner):
        settings = DifficultySettings(show_dutch_on_second_mistake=True)
        session = tuner.create_session("gato")
        state = HintState.HIDDEN
        for _ in range(2):
            state, session = self._answer(tuner, state, session, settings, F)
        assert state == HintState.SHOWN

        state, session = self._answer(tuner, state, session, settings, T)
        assert state == HintState.HIDDEN
