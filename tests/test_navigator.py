"""End-to-end behaviour of the NavigationSystem facade."""

import json
import time
from concurrent.futures import Executor, Future

import pytest

from campus_nav.gazetteer import Gazetteer
from campus_nav.models import Coord, MatchOutcome, ReplyAction, SessionStatus
from campus_nav.nav_config import NavConfig
from campus_nav.navigator import NavigationSystem
from campus_nav.route_provider import RouteProvider, RouteProviderError

GAZ = Gazetteer.default()
GATE = GAZ["gate"].coord
CSE = GAZ["cse"].coord


class FakeProvider(RouteProvider):
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def fetch(self, start, end):
        self.calls.append((start, end))
        if self.fail:
            raise RouteProviderError("no network")
        mid = Coord((start.lat + end.lat) / 2, (start.lon + end.lon) / 2)
        return [start, mid, end]


class InlineExecutor(Executor):
    """Runs each request as soon as it is submitted."""

    def submit(self, fn, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class ManualExecutor(Executor):
    """Holds requests until the test decides they finish."""

    def __init__(self):
        self.jobs = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.jobs.append((future, fn, args, kwargs))
        return future

    def run(self, index):
        future, fn, args, kwargs = self.jobs[index]
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def nav(tmp_path, provider, clock):
    return NavigationSystem(
        provider=provider,
        config=NavConfig(log_dir=str(tmp_path)),
        clock=clock,
        executor=InlineExecutor(),
    )


def test_confident_command_starts_route(nav, provider):
    nav.update(GATE)
    reply = nav.handle_text("Navigate to CSE Block")

    assert reply.action is ReplyAction.NAVIGATE
    assert reply.outcome is MatchOutcome.CONFIDENT
    assert reply.match.key == "cse"
    assert reply.message == "Navigating to CSE Block. Please follow the route on the map."
    assert nav.is_active
    assert nav.session.geometry.coordinates[-1] == CSE
    assert provider.calls == [(GATE, CSE)]


def test_command_before_first_fix_waits_for_position(nav, provider):
    reply = nav.handle_text("go to cse block")
    assert reply.action is ReplyAction.NAVIGATE
    assert nav.session.status is SessionStatus.REQUESTING
    assert provider.calls == []

    result = nav.update(GATE)
    assert result.status is SessionStatus.REQUESTING
    assert nav.session.status is SessionStatus.ACTIVE
    assert provider.calls == [(GATE, CSE)]


def test_ambiguous_match_needs_yes(nav):
    nav.update(GATE)
    reply = nav.handle_text("Where is the hostel")
    assert reply.action is ReplyAction.CONFIRM
    assert reply.outcome is MatchOutcome.AMBIGUOUS
    assert reply.message.startswith("Did you mean Mother Theresa Hostel?")
    assert nav.session.status is SessionStatus.IDLE

    reply = nav.handle_text("yes")
    assert reply.action is ReplyAction.NAVIGATE
    assert nav.session.destination_key == "hostel1"
    assert nav.pending_confirmation is None


def test_declined_suggestion_leaves_state_untouched(nav):
    nav.update(GATE)
    nav.handle_text("navigate to cse block")
    geometry = nav.session.geometry

    nav.handle_text("take me to the canteen")
    reply = nav.handle_text("no")
    assert reply.action is ReplyAction.DECLINED
    assert nav.session.destination_key == "cse"
    assert nav.session.geometry is geometry


def test_new_command_replaces_pending_confirmation(nav):
    nav.update(GATE)
    nav.handle_text("where is the hostel")
    reply = nav.handle_text("navigate to gate")
    assert reply.match.key == "gate"
    assert nav.pending_confirmation is None


def test_not_found_keeps_active_session(nav):
    nav.update(GATE)
    nav.handle_text("navigate to cse block")
    reply = nav.handle_text("take me to the moon")
    assert reply.action is ReplyAction.NOT_FOUND
    assert nav.session.destination_key == "cse"
    assert nav.is_active


def test_empty_command_asks_for_help(nav):
    reply = nav.handle_text("navigate to")
    assert reply.action is ReplyAction.HELP
    assert reply.outcome is MatchOutcome.NO_COMMAND


def test_cancel_navigation(nav):
    nav.update(GATE)
    nav.handle_text("navigate to cse block")

    reply = nav.handle_text("Please cancel the navigation")
    assert reply.action is ReplyAction.CANCEL
    assert reply.message == "Navigation cancelled."
    assert nav.session.status is SessionStatus.IDLE
    assert nav.session.geometry is None
    assert not nav.map_locked

    reply = nav.handle_text("cancel navigation")
    assert reply.message == "There is no active navigation to cancel."


def test_provider_failure_falls_back_to_straight_line(tmp_path):
    nav = NavigationSystem(
        provider=FakeProvider(fail=True),
        config=NavConfig(log_dir=str(tmp_path)),
        executor=InlineExecutor(),
    )
    nav.update(GATE)
    nav.handle_text("navigate to cse block")
    assert nav.is_active
    assert nav.session.geometry.coordinates == (GATE, CSE)


def test_provider_crash_falls_back_to_straight_line(tmp_path):
    class BrokenProvider(RouteProvider):
        def fetch(self, start, end):
            raise ValueError("bad payload")

    nav = NavigationSystem(
        provider=BrokenProvider(),
        config=NavConfig(log_dir=str(tmp_path)),
        executor=InlineExecutor(),
    )
    nav.update(GATE)
    nav.select_destination("cse")
    assert nav.session.geometry.coordinates == (GATE, CSE)


@pytest.fixture
def manual():
    return ManualExecutor()


@pytest.fixture
def slow_nav(tmp_path, provider, clock, manual):
    return NavigationSystem(
        provider=provider,
        config=NavConfig(log_dir=str(tmp_path)),
        clock=clock,
        executor=manual,
    )


def test_position_updates_do_not_wait_for_the_provider(slow_nav, provider, manual):
    slow_nav.handle_text("go to cse block")
    result = slow_nav.update(GATE)
    assert result.status is SessionStatus.REQUESTING
    assert provider.calls == []
    assert len(manual.jobs) == 1

    result = slow_nav.update(GATE)
    assert result.status is SessionStatus.REQUESTING
    assert len(manual.jobs) == 1

    manual.run(0)
    slow_nav.tick()
    assert slow_nav.is_active
    assert slow_nav.animator.running
    assert provider.calls == [(GATE, CSE)]


def test_route_for_earlier_destination_arriving_late_is_discarded(slow_nav, manual):
    slow_nav.update(GATE)
    slow_nav.select_destination("cse")
    slow_nav.select_destination("canteen")
    assert len(manual.jobs) == 2
    assert slow_nav.session.status is SessionStatus.REQUESTING

    manual.run(1)
    manual.run(0)
    assert slow_nav.process_responses() == 1

    session = slow_nav.session
    assert session.status is SessionStatus.ACTIVE
    assert session.destination_key == "canteen"
    assert session.geometry.end == GAZ["canteen"].coord


def test_cancel_discards_response_in_flight(slow_nav, manual):
    slow_nav.update(GATE)
    slow_nav.select_destination("cse")
    slow_nav.stop_navigation()

    manual.run(0)
    assert slow_nav.process_responses() == 0
    assert slow_nav.session.status is SessionStatus.IDLE
    assert not slow_nav.animator.running


def test_default_executor_delivers_in_background(tmp_path, provider):
    nav = NavigationSystem(provider=provider, config=NavConfig(log_dir=str(tmp_path)))
    try:
        nav.update(GATE)
        nav.select_destination("cse")
        deadline = time.monotonic() + 5
        while not nav.is_active and time.monotonic() < deadline:
            time.sleep(0.01)
            nav.tick()
        assert nav.is_active
        assert nav.session.geometry.end == CSE
    finally:
        nav.close()


def test_reveal_locks_map_then_arrival_releases_it(nav, clock):
    nav.update(GATE)
    nav.handle_text("navigate to cse block")
    assert nav.animator.running
    assert not nav.map_locked

    clock.now = 1000
    assert len(nav.tick()) == 31
    clock.now = 2000
    nav.tick()
    assert nav.map_locked

    result = nav.update(CSE)
    assert result.status is SessionStatus.ARRIVED
    assert result.arrived_now
    assert result.progress_percent == 100.0
    assert result.message == "You have reached CSE Block."
    assert not nav.map_locked

    assert nav.acknowledge_arrival()
    assert nav.session.status is SessionStatus.IDLE


def test_new_destination_drops_reveal_in_flight(nav, clock):
    nav.update(GATE)
    nav.select_destination("cse")
    first_generation = nav.session.generation
    clock.now = 500
    nav.tick()

    nav.select_destination("canteen")
    assert nav.session.generation != first_generation
    clock.now = 600
    revealed = nav.tick()
    assert revealed[0] == GATE
    assert len(revealed) == 4
    assert nav.session.destination_key == "canteen"


def test_tamil_replies(nav):
    reply = nav.handle_text("navigate to", language="ta")
    assert reply.language == "ta"
    assert reply.message.startswith("எங்கு செல்ல")

    nav.language = "ta"
    reply = nav.handle_text("xyz")
    assert reply.message.startswith("மன்னிக்கவும்")


def test_unknown_key_raises(nav):
    with pytest.raises(KeyError):
        nav.select_destination("library")


def test_route_and_events_are_logged(nav, tmp_path):
    nav.update(GATE)
    nav.handle_text("navigate to cse block")
    nav.update(GATE)

    route = json.loads((tmp_path / "active_route.json").read_text(encoding="utf-8"))
    assert route["destination_key"] == "cse"
    events = (tmp_path / "nav_session.jsonl").read_text(encoding="utf-8").splitlines()
    assert [json.loads(e)["status"] for e in events] == ["idle", "active"]
