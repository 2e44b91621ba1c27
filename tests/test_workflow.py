"""Tests for services/workflow.py -- stage transitions on immutable sessions."""

import pytest

from models.session import CapturedDetails, Paper, ReviewSession, ReviewType, Stage
from services import workflow
from services.workflow import (
    Action,
    PaperNotFoundError,
    TransitionError,
    WorkflowBusyError,
    available_actions,
)


def _papers(n):
    return [Paper(id=f"paper-{i}", title=f"Paper {i}", url=f"https://doi.org/10/{i}") for i in range(n)]


def _run_to(stage: Stage) -> ReviewSession:
    """Walk a fresh session forward to ``stage`` through the public transitions."""
    session = ReviewSession()
    if stage >= Stage.SEARCH:
        session = workflow.submit_search(session, "flood preparedness", ReviewType.SLR)
    if stage >= Stage.EXTRACT:
        session = workflow.search_completed(session, _papers(10), "summary")
    if stage >= Stage.SYNTHESIZE:
        session = workflow.synthesis_completed(session, "synthesis")
    if stage >= Stage.WRITE:
        session = workflow.draft_completed(session, "[TAJUK] T")
    if stage >= Stage.FINISH:
        session = workflow.finalize(session)
    return session


class TestSubmitSearch:

    def test_blank_question_is_noop(self):
        session = ReviewSession()
        assert workflow.submit_search(session, "", ReviewType.SLR) is session
        assert workflow.submit_search(session, "   ", ReviewType.SLR) is session

    def test_moves_to_search(self):
        session = workflow.submit_search(ReviewSession(), " flood ", ReviewType.SCOPING, "Shaffril 2021")
        assert session.stage == Stage.SEARCH
        assert session.topic == "flood"
        assert session.review_type == ReviewType.SCOPING
        assert session.references == "Shaffril 2021"

    def test_input_session_is_not_mutated(self):
        before = ReviewSession()
        workflow.submit_search(before, "flood", ReviewType.SLR)
        assert before.stage == Stage.PLAN

    def test_not_allowed_after_extract(self):
        with pytest.raises(TransitionError):
            workflow.submit_search(_run_to(Stage.EXTRACT), "again", ReviewType.SLR)

    def test_busy_session_rejected(self):
        session = workflow.begin_call(_run_to(Stage.SEARCH))
        with pytest.raises(WorkflowBusyError):
            workflow.submit_search(session, "again", ReviewType.SLR)


class TestForwardTransitions:

    def test_search_completed_sets_metrics(self):
        session = workflow.begin_call(_run_to(Stage.SEARCH))
        session = workflow.search_completed(session, _papers(10), "summary")
        assert session.stage == Stage.EXTRACT
        assert session.loading is False
        assert session.metrics.identified == 10
        assert session.metrics.screened == 10
        assert session.metrics.excluded == 2
        assert session.metrics.included == 8

    def test_metrics_round_down(self):
        session = workflow.search_completed(_run_to(Stage.SEARCH), _papers(7), "s")
        assert session.metrics.excluded == 1
        assert session.metrics.included == 5

    def test_full_walk_is_monotonic(self):
        stages = [_run_to(stage).stage for stage in Stage]
        assert stages == sorted(stages)
        assert all(1 <= s <= 6 for s in stages)

    def test_synthesize_requires_results(self):
        session = _run_to(Stage.SEARCH).model_copy(update={"stage": Stage.EXTRACT})
        with pytest.raises(TransitionError):
            workflow.require_action(session, Action.SYNTHESIZE)

    def test_write_only_after_synthesis(self):
        with pytest.raises(TransitionError):
            workflow.require_action(_run_to(Stage.EXTRACT), Action.WRITE)
        with pytest.raises(TransitionError):
            workflow.draft_completed(_run_to(Stage.EXTRACT), "draft")

    def test_finalize_only_from_write(self):
        with pytest.raises(TransitionError):
            workflow.finalize(_run_to(Stage.SYNTHESIZE))
        assert workflow.finalize(_run_to(Stage.WRITE)).stage == Stage.FINISH

    def test_late_result_cannot_move_stage_back(self):
        with pytest.raises(TransitionError):
            workflow.search_completed(_run_to(Stage.SYNTHESIZE), _papers(1), "late")


class TestCapture:

    def test_attaches_details_to_one_paper(self):
        details = CapturedDetails(methodology="Survey", findings=("a", "b"), citation="X (2020)")
        session = workflow.paper_captured(_run_to(Stage.EXTRACT), "paper-3", details)
        assert session.find_paper("paper-3").captured_data == details
        assert session.find_paper("paper-2").captured_data is None
        assert [p.id for p in session.papers] == [f"paper-{i}" for i in range(10)]

    def test_unknown_paper(self):
        with pytest.raises(PaperNotFoundError):
            workflow.paper_captured(_run_to(Stage.EXTRACT), "paper-99", CapturedDetails())


class TestReset:

    def test_reset_from_finish(self):
        session = workflow.reset(_run_to(Stage.FINISH))
        assert session.stage == Stage.PLAN
        assert session.papers == ()
        assert session.synthesis == ""
        assert session.draft == ""
        assert session.search_summary is None
        assert session.metrics.identified == 0

    def test_reset_keeps_identity_and_question(self):
        finished = _run_to(Stage.FINISH)
        session = workflow.reset(finished)
        assert session.id == finished.id
        assert session.topic == "flood preparedness"

    @pytest.mark.parametrize("stage", [Stage.PLAN, Stage.EXTRACT, Stage.WRITE])
    def test_reset_only_from_finish(self, stage):
        with pytest.raises(TransitionError):
            workflow.reset(_run_to(stage))


class TestAvailableActions:

    def test_per_stage(self):
        assert available_actions(ReviewSession()) == [Action.SEARCH]
        assert available_actions(_run_to(Stage.EXTRACT)) == [Action.CAPTURE, Action.SYNTHESIZE]
        assert available_actions(_run_to(Stage.WRITE)) == [Action.FINALIZE]
        assert set(available_actions(_run_to(Stage.FINISH))) == {Action.RESET, Action.EXPORT, Action.TRANSFER}

    def test_nothing_while_loading(self):
        assert available_actions(workflow.begin_call(_run_to(Stage.EXTRACT))) == []

    def test_call_failed_clears_loading_only(self):
        session = workflow.begin_call(_run_to(Stage.SYNTHESIZE))
        failed = workflow.call_failed(session)
        assert failed.loading is False
        assert failed.stage == Stage.SYNTHESIZE
