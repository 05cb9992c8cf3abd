import json

import pytest
from unittest.mock import patch

from quiz_runner.app import (
    SessionExitRequested, session_prompt, handle_input, run_quiz_session, run_quiz, cmd_open, main,
)
from quiz_runner.config import QuizConfig
from quiz_runner.models import QuestionRecord, MovedTo, QuizComplete, FREE_TEXT
from quiz_runner.session import start


@pytest.fixture
def config(tmp_path):
    return QuizConfig(question_dir=str(tmp_path), auto_advance_delay=0)


def test_session_exit_requested_is_exception():
    with pytest.raises(SessionExitRequested):
        raise SessionExitRequested()


def test_session_prompt_raises_on_q():
    with patch("quiz_runner.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("quiz_runner.app.Prompt.ask", return_value="menu"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_keeps_answer_text_and_passes_options():
    """Answers come back unnormalised; only the exit words are intercepted."""
    with patch("quiz_runner.app.Prompt.ask", return_value="  Paris ") as ask:
        assert session_prompt("Your answer", default="", show_default=False) == "  Paris "
    ask.assert_called_once_with("Your answer", default="", show_default=False)


def test_session_prompt_exit_words_ignore_case():
    with patch("quiz_runner.app.Prompt.ask", return_value=" Q "):
        with pytest.raises(SessionExitRequested):
            session_prompt("Toggle an option")


def test_handle_input_single_choice_auto_advances(mixed_questions, config):
    session = start(mixed_questions)
    assert handle_input(session, "2", config) == MovedTo(1)
    assert session.evaluated[0] is True


def test_handle_input_invalid_option(mixed_questions, config):
    session = start(mixed_questions)
    assert handle_input(session, "9", config) is None
    assert handle_input(session, "x", config) is None
    assert session.answers == {}


def test_handle_input_multiple_choice_needs_selection(mixed_questions, config):
    session = start(mixed_questions)
    session.current_index = 1
    assert handle_input(session, "", config) is None
    assert session.current_index == 1
    handle_input(session, "1", config)
    handle_input(session, "3", config)
    assert handle_input(session, "", config) == MovedTo(2)


def test_handle_input_free_text_stays_for_feedback(mixed_questions, config):
    session = start(mixed_questions)
    session.current_index = 2
    assert handle_input(session, "paris", config) is None
    assert session.evaluated[2] is True
    assert handle_input(session, "", config) == QuizComplete()


def test_handle_input_locked_question_ignores_answers(mixed_questions, config):
    session = start(mixed_questions)
    session.current_index = 2
    handle_input(session, "lyon", config)
    assert handle_input(session, "paris", config) is None
    assert session.answers[2] == "lyon"


def test_handle_input_back_and_shuffle(mixed_questions, config):
    session = start(mixed_questions)
    session.current_index = 1
    handle_input(session, "b", config)
    assert session.current_index == 0
    handle_input(session, "s", config)
    assert session.shuffle_options_enabled is True
    assert config.shuffle_options is True


def test_run_quiz_session_all_correct(mixed_questions, config):
    session = start(mixed_questions)
    with patch("quiz_runner.app.Prompt.ask", side_effect=["2", "1", "3", "", "paris", ""]):
        report = run_quiz_session(session, config)
    assert report.correct_count == 3
    assert report.accuracy_percent == 100


def test_run_quiz_session_exits_on_q(mixed_questions, config):
    """User answers first question then types 'q' on second."""
    session = start(mixed_questions)
    with patch("quiz_runner.app.Prompt.ask", side_effect=["1", "q"]):
        with pytest.raises(SessionExitRequested):
            run_quiz_session(session, config)
    assert session.evaluated == {0: True}
    assert session.current_index == 1


def test_run_quiz_retry_missed(mixed_questions, config):
    """Missing the first question offers a one-question retry round."""
    session = start(mixed_questions)
    answers = ["1", "1", "3", "", "paris", "", "missed", "2", "menu"]
    with patch("quiz_runner.app.Prompt.ask", side_effect=answers) as ask:
        run_quiz(session, config)
    assert ask.call_count == len(answers)


def test_cmd_open_runs_selected_file(tmp_path, config):
    f = tmp_path / "basics.json"
    f.write_text(json.dumps([{"question": "2 + 2?", "options": ["3", "4"], "correctAnswerIndex": 1}]))
    with patch("quiz_runner.app.Prompt.ask", side_effect=["1", "2", "menu"]) as ask:
        cmd_open(config)
    assert ask.call_count == 3


def test_cmd_open_missing_path(config):
    with patch("quiz_runner.app.Prompt.ask", side_effect=["does/not/exist.json"]):
        cmd_open(config)


def test_main_quits(monkeypatch):
    monkeypatch.setenv("QUIZ_RUNNER_AUTO_ADVANCE_DELAY", "0")
    with patch("quiz_runner.app.setup_logging"), \
            patch("quiz_runner.app.Prompt.ask", side_effect=["shuffle", "bogus", "quit"]) as ask:
        main()
    assert ask.call_count == 3


def test_handle_input_free_text_accepts_b_and_s_as_answers(config):
    questions = [
        QuestionRecord(kind=FREE_TEXT, prompt="First letter of 'banana'?", correct_text="b"),
        QuestionRecord(kind=FREE_TEXT, prompt="First letter of 'sun'?", correct_text="S"),
    ]
    session = start(questions)
    session.current_index = 1
    handle_input(session, "s", config)
    assert session.answers[1] == "s"
    assert session.shuffle_options_enabled is False
    assert session.evaluated[1] is True
    handle_input(session, "b", config)
    assert session.current_index == 0
    handle_input(session, "b", config)
    assert session.answers[0] == "b"
    assert session.current_index == 0


def test_handle_input_free_text_slash_commands(mixed_questions, config):
    session = start(mixed_questions)
    session.current_index = 2
    handle_input(session, "/s", config)
    assert session.shuffle_options_enabled is True
    handle_input(session, "/b", config)
    assert session.current_index == 1
    assert 2 not in session.answers
