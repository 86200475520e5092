import asyncio
from collections import Counter
import pytest

from fsmkit import create_machine_factory
from fsmkit.core.config import FactoryConfig
from fsmkit.core.exceptions import (
    CyclicTransitionError,
    InvalidEdgeError,
    InvalidInitialStateError,
    InvalidTransitionError,
    MissingLockError,
    NoTransitionsError,
)
from fsmkit.core.state import Machine, MachineFactory


SIMPLE = {
    "init": {"from": ["A", "B"], "to": "C"},
    "reset": {"from": ["B", "C"], "to": "A"},
}

THRU = {
    "init": {"from": "A", "to": "B"},
    "effect": {"from": ["A", "B", "D"], "to": "C"},
    "dispute": {"from": "C", "to": "D"},
}


def test_simple_state_machine():
    seen = []
    handlers = {
        "onEnterA": lambda ctx: setattr(ctx, "foo", "bar"),
        "onLeaveA": lambda ctx: seen.append(("leave A", ctx)),
        "onEnterC": lambda ctx: seen.append(("enter C", ctx)),
    }
    fsm = create_machine_factory(SIMPLE, handlers=handlers)

    with pytest.raises(InvalidInitialStateError, match="Invalid initial state of: D"):
        fsm({"state": "D"})
    with pytest.raises(InvalidInitialStateError, match="Invalid initial state"):
        fsm()

    machine = fsm({"state": "A"})

    assert machine.can("C")
    assert not machine.can("D")
    assert machine.transitions() == ["init"]

    asyncio.run(machine.to("C"))
    assert machine.state == "C"
    assert seen == [("leave A", machine), ("enter C", machine)]

    asyncio.run(machine.to("A"))
    assert machine.state == "A"
    assert machine.foo == "bar"

    assert machine.edge("C") == "init"
    with pytest.raises(InvalidEdgeError, match="Invalid edge"):
        machine.edge("B")

    with pytest.raises(InvalidTransitionError, match="Invalid transition"):
        asyncio.run(machine.reset())

    machine2 = fsm({"state": "B"})
    assert machine2.transitions() == ["init", "reset"]


def test_state_field_cannot_be_written_directly():
    machine = create_machine_factory(SIMPLE)({"state": "A"})

    with pytest.raises(MissingLockError, match="Missing lock"):
        machine.state = "C"
    with pytest.raises(MissingLockError, match="Missing lock"):
        machine.state = "A"
    with pytest.raises(MissingLockError, match="Missing lock"):
        machine["state"] = "C"
    with pytest.raises(MissingLockError, match="Missing lock"):
        del machine.state
    with pytest.raises(MissingLockError, match="Missing lock"):
        machine._commit(object(), "C")

    assert machine.state == "A"


def test_other_context_fields_are_writable():
    machine = create_machine_factory(SIMPLE)({"state": "A", "count": 1})
    machine.count = 2
    machine["label"] = "first"
    assert machine.count == 2
    assert machine.label == "first"
    assert "label" in machine
    del machine.label
    assert "label" not in machine
    with pytest.raises(AttributeError):
        machine.missing


def test_context_is_copied():
    context = {"state": "A", "owner": "ops"}
    machine = create_machine_factory(SIMPLE)(context)
    asyncio.run(machine.to("C"))
    machine.owner = "dev"
    assert context == {"state": "A", "owner": "ops"}
    assert machine.snapshot() == {"state": "C", "owner": "dev"}


def test_object_contexts_are_copied_from_attributes():
    class Order:
        def __init__(self):
            self.state = "PENDING"
            self.order_id = 7

    order = Order()
    factory = create_machine_factory({"process": {"from": "PENDING", "to": "PROCESSING"}})
    machine = factory(order)
    asyncio.run(machine.process())

    assert machine.order_id == 7
    assert machine.state == "PROCESSING"
    assert order.state == "PENDING"


def test_thru_mechanisms():
    calls = Counter()
    handlers = {
        f"on{name.capitalize()}": (lambda n: lambda ctx: calls.update([n]))(name)
        for name in THRU
    }
    fsm = create_machine_factory(THRU, handlers=handlers)

    machine = fsm({"state": "A"})
    assert machine.will("D")
    assert asyncio.run(machine.thru("D")) == ["effect", "dispute"]
    assert machine.state == "D"
    assert calls == Counter({"effect": 1, "dispute": 1})

    machine2 = fsm({"state": "A"})
    assert machine2.will("B", "D")
    asyncio.run(machine2.thru("B", "D"))
    assert machine2.state == "D"
    assert calls == Counter({"init": 1, "effect": 2, "dispute": 2})

    assert not machine2.will("A")
    with pytest.raises(InvalidTransitionError, match="Invalid transition"):
        asyncio.run(machine2.thru("A"))
    with pytest.raises(InvalidTransitionError, match="Invalid transition"):
        asyncio.run(machine2.to("A"))

    machine3 = fsm({"state": "C"})
    assert not machine3.will("C")
    with pytest.raises(CyclicTransitionError, match="Potential cyclic transition"):
        asyncio.run(machine3.thru("C"))
    assert machine3.will("D", "C")


def test_thru_takes_the_shortest_route(order_transitions):
    machine = create_machine_factory(order_transitions)({"state": "PENDING"})

    assert machine.path("PASSED") == [("PENDING", "PROCESSING"), ("PROCESSING", "PASSED")]
    assert asyncio.run(machine.thru("PASSED")) == ["process", "pass"]
    assert machine.state == "PASSED"


def test_path_is_none_when_unreachable(order_transitions):
    machine = create_machine_factory(order_transitions)({"state": "PASSED"})
    assert machine.path("PENDING") is None
    assert machine.will("PENDING") is False


def test_empty_thru_is_a_no_op(order_transitions):
    machine = create_machine_factory(order_transitions)({"state": "PENDING"})
    assert machine.path() == []
    assert machine.will() is True
    assert asyncio.run(machine.thru()) == []
    assert machine.state == "PENDING"


def test_self_loop_with_cycles_allowed():
    calls = []
    fsm = create_machine_factory(
        {"loop": {"from": "C", "to": "C"}, "leave": {"from": "C", "to": "D"}},
        handlers={"onLoop": lambda ctx: calls.append("loop")},
        allow_cyclical_transitions=True,
    )
    machine = fsm({"state": "C"})
    assert machine.will("C")
    assert asyncio.run(machine.thru("C")) == ["loop"]
    assert machine.state == "C"
    assert calls == ["loop"]


def test_self_loop_without_cycles_allowed():
    fsm = create_machine_factory({"loop": {"from": "C", "to": "C"}})
    machine = fsm({"state": "C"})
    assert not machine.will("C")
    with pytest.raises(CyclicTransitionError):
        asyncio.run(machine.thru("C"))
    # Direct transitions are not affected by the cycle guard.
    assert machine.can("C")
    assert asyncio.run(machine.to("C")) == "C"


def test_will_agrees_with_thru(order_transitions):
    fsm = create_machine_factory(order_transitions)
    chains = [("PASSED",), ("IN_REVIEW", "FAILED"), ("FAILED",), ("ERRORED", "PASSED"), ("PENDING",)]
    for chain in chains:
        machine = fsm({"state": "PENDING"})
        if machine.will(*chain):
            asyncio.run(machine.thru(*chain))
            assert machine.state == chain[-1]
        else:
            with pytest.raises((InvalidTransitionError, CyclicTransitionError)):
                asyncio.run(machine.thru(*chain))


def test_direct_and_path_lookups_disagree_on_shared_edges():
    calls = []
    fsm = create_machine_factory(
        {"first": {"from": "A", "to": "B"}, "second": {"from": "A", "to": "B"}},
        handlers={"onFirst": lambda ctx: calls.append("first"), "onSecond": lambda ctx: calls.append("second")},
    )

    direct = fsm({"state": "A"})
    assert direct.edge("B") == "second"
    asyncio.run(direct.to("B"))

    planned = fsm({"state": "A"})
    assert asyncio.run(planned.thru("B")) == ["first"]

    assert calls == ["second", "first"]


def test_custom_state_key():
    with pytest.raises(NoTransitionsError, match="No transitions supplied"):
        create_machine_factory()

    fsm = create_machine_factory(SIMPLE, state_key="beam")
    with pytest.raises(InvalidInitialStateError, match="Invalid initial state"):
        fsm({"state": "A"})

    machine = fsm({"beam": "A"})
    asyncio.run(machine.to("C"))
    assert machine.beam == "C"
    assert machine.state == "C"
    with pytest.raises(MissingLockError):
        machine.beam = "A"


def test_trigger_reaches_transitions_named_like_methods():
    fsm = create_machine_factory({"to": {"from": "A", "to": "B"}, "pass": {"from": "B", "to": "C"}})
    machine = fsm({"state": "A"})
    assert asyncio.run(machine.trigger("to")) == "B"
    assert asyncio.run(machine.trigger("pass")) == "C"
    with pytest.raises(InvalidTransitionError):
        asyncio.run(machine.trigger("missing"))


def test_transition_names_shadow_context_fields():
    machine = create_machine_factory(SIMPLE)({"state": "A", "init": "context value"})
    assert callable(machine.init)
    assert machine["init"] == "context value"


def test_concurrent_transitions_on_one_machine_are_serialized():
    events = []

    def hook(label):
        async def _hook(ctx):
            events.append(label)
            await asyncio.sleep(0)

        return _hook

    fsm = create_machine_factory(
        {"go": {"from": "A", "to": "B"}, "back": {"from": "B", "to": "A"}},
        handlers={
            "onBeforeGo": hook("before go"),
            "onAfterGo": hook("after go"),
            "onBeforeBack": hook("before back"),
            "onAfterBack": hook("after back"),
        },
    )
    machine = fsm({"state": "A"})

    async def run_both():
        return await asyncio.gather(machine.go(), machine.back())

    assert asyncio.run(run_both()) == ["B", "A"]
    assert events == ["before go", "after go", "before back", "after back"]
    assert machine.state == "A"


def test_factory_exposes_graph_artifacts():
    fsm = create_machine_factory(SIMPLE)
    assert isinstance(fsm, MachineFactory)
    assert fsm.states == ("A", "B", "C")
    assert dict(fsm.edges) == {"init": (("A", "C"), ("B", "C")), "reset": (("B", "A"), ("C", "A"))}
    assert fsm.to_document() == {
        "states": ["A", "B", "C"],
        "edges": {"init": [["A", "C"], ["B", "C"]], "reset": [["B", "A"], ["C", "A"]]},
    }
    assert isinstance(fsm({"state": "A"}), Machine)


def test_factory_from_config_and_file(write_definition):
    config = FactoryConfig(transitions=SIMPLE, state_key="status")
    machine = create_machine_factory(config=config)({"status": "B"})
    assert machine.transitions() == ["init", "reset"]

    path = write_definition({"stateKey": "status", "transitions": SIMPLE})
    from_file = MachineFactory.from_file(path, handlers={"onEnterC": lambda ctx: setattr(ctx, "seen", True)})
    machine = from_file({"status": "A"})
    asyncio.run(machine.init())
    assert machine.seen is True
    assert machine.status == "C"


def test_repr_shows_the_state():
    machine = create_machine_factory(SIMPLE)({"state": "A"})
    assert repr(machine) == "<Machine state='A'>"


def test_hook_can_advance_its_own_machine():
    calls = []

    async def auto_advance(ctx):
        calls.append(("enter C", ctx.state))
        await ctx.to("D")

    fsm = create_machine_factory(
        {"init": {"from": "A", "to": "C"}, "settle": {"from": "C", "to": "D"}},
        handlers={
            "onEnterC": auto_advance,
            "onSettle": lambda ctx: calls.append(("settle", ctx.state)),
            "onAfterInit": lambda ctx: calls.append(("after init", ctx.state)),
        },
    )
    machine = fsm({"state": "A"})

    async def run():
        return await asyncio.wait_for(machine.init(), timeout=1)

    assert asyncio.run(run()) == "C"
    assert machine.state == "D"
    assert calls == [("enter C", "C"), ("settle", "C"), ("after init", "D")]


def test_failure_inside_thru_stops_the_chain(order_transitions):
    calls = []

    def explode(ctx):
        raise RuntimeError("processing hook failed")

    fsm = create_machine_factory(
        order_transitions,
        handlers={"onEnterPROCESSING": explode, "onPass": lambda ctx: calls.append("pass")},
    )
    machine = fsm({"state": "PENDING"})

    with pytest.raises(RuntimeError, match="processing hook failed"):
        asyncio.run(machine.thru("PASSED"))
    assert machine.state == "PROCESSING"
    assert calls == []

    async def finish():
        return await asyncio.wait_for(machine.to("PASSED"), timeout=1)

    assert asyncio.run(finish()) == "PASSED"
    assert calls == ["pass"]


def test_plan_lists_names_with_their_edges(order_transitions):
    machine = create_machine_factory(order_transitions)({"state": "PENDING"})
    assert machine.plan("IN_REVIEW", "PASSED") == [
        ("process", ("PENDING", "PROCESSING")),
        ("review", ("PROCESSING", "IN_REVIEW")),
        ("pass", ("IN_REVIEW", "PASSED")),
    ]
    assert machine.plan() == []
    with pytest.raises(CyclicTransitionError):
        machine.plan("PENDING")
    with pytest.raises(InvalidTransitionError):
        machine.plan("NOWHERE")


@pytest.mark.parametrize("value", [True, 1.0])
def test_initial_state_must_match_type_as_well_as_value(value):
    fsm = create_machine_factory({"step": {"from": 1, "to": 2}})
    with pytest.raises(InvalidInitialStateError):
        fsm({"state": value})
    machine = fsm({"state": 1})
    assert machine.can(2)
    assert not machine.can(2.0)
