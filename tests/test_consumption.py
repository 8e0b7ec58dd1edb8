"""Tests for resource consumption and auto-flip."""

import pytest

from brassworks.engine.events import RuleViolation
from brassworks.models.board import Link


def link(engine, owner_id, a, b):
    engine.state.get_player(owner_id).links.append(
        Link(from_city=a, to_city=b, era=engine.state.era, owner_id=owner_id)
    )
    engine.state.touch_topology()


def test_coal_comes_from_nearest_mine_first(engine, place_industry):
    link(engine, "p1", "birmingham", "dudley")
    link(engine, "p1", "dudley", "wolverhampton")
    far = place_industry(engine, "p2", "wolverhampton", "coal_2", coal=3)
    near = place_industry(engine, "p2", "dudley", "coal_1", coal=1)

    plan = engine.consumer.plan_coal("birmingham", 2)

    assert [(d.industry_id, d.amount) for d in plan.draws] == [(near.id, 1), (far.id, 1)]
    assert plan.cost == 0

    engine.consumer.consume(plan)

    assert near.coal == 0
    assert far.coal == 2


def test_coal_from_market_needs_merchant_connection(engine):
    with pytest.raises(RuleViolation, match="No coal source"):
        engine.consumer.plan_coal("stoke", 1)

    link(engine, "p1", "stoke", "warrington")
    plan = engine.consumer.plan_coal("stoke", 2)

    assert plan.market_cubes == 2
    assert plan.cost == 1 + 2

    engine.consumer.consume(plan)
    assert engine.state.coal_market.current_price() == 2


def test_planning_does_not_change_state(engine, place_industry):
    mine = place_industry(engine, "p2", "dudley", "coal_1", coal=2)
    before = engine.state.to_dict()

    engine.consumer.plan_coal("dudley", 2)
    engine.consumer.plan_iron(3)

    assert mine.coal == 2
    assert engine.state.to_dict() == before


def test_iron_from_any_works_then_market(engine, place_industry):
    works = place_industry(engine, "p2", "coalbrookdale", "iron_1", iron=1)

    plan = engine.consumer.plan_iron(2)

    assert plan.draws[0].industry_id == works.id
    assert plan.market_cubes == 1
    assert plan.cost == 2


def test_own_brewery_preferred_over_opponent(engine, place_industry):
    link(engine, "p1", "birmingham", "dudley")
    theirs = place_industry(engine, "p2", "birmingham", "brewery_1", slot=2, beer=1)
    mine = place_industry(engine, "p1", "stoke", "brewery_1", beer=1)
    alice = engine.state.get_player("p1")

    plan = engine.consumer.plan_beer(alice, "dudley", 1)

    assert [d.industry_id for d in plan.draws] == [mine.id]
    assert theirs.beer == 1


def test_opponent_beer_must_be_connected(engine, place_industry):
    place_industry(engine, "p2", "stoke", "brewery_1", beer=1)
    alice = engine.state.get_player("p1")

    with pytest.raises(RuleViolation, match="Not enough beer"):
        engine.consumer.plan_beer(alice, "birmingham", 1)

    link(engine, "p1", "birmingham", "dudley")
    merchant = engine.state.get_merchant("gloucester")
    plan = engine.consumer.plan_beer(alice, "birmingham", 1, merchant=merchant)

    assert plan.merchant_draw is not None
    engine.consumer.consume(plan)
    assert not merchant.has_beer


def test_emptied_mine_flips_and_raises_income(engine, place_industry):
    mine = place_industry(engine, "p2", "dudley", "coal_2", coal=1)
    bob = engine.state.get_player("p2")

    plan = engine.consumer.plan_coal("dudley", 1)
    affected = engine.consumer.consume(plan)
    flipped = engine.flipper.check(affected)

    assert flipped == [mine]
    assert mine.flipped
    assert bob.income == 11
    assert engine.state.game_log[-1]["type"] == "flip"


def test_income_is_capped_when_flipping(engine, place_industry):
    bob = engine.state.get_player("p2")
    bob.income = 30
    mine = place_industry(engine, "p2", "dudley", "coal_4", coal=0)

    engine.flipper.check([mine])

    assert mine.flipped
    assert bob.income == 30


def test_flipped_mines_are_not_a_coal_source(engine, place_industry):
    place_industry(engine, "p2", "stoke", "coal_1", coal=2, flipped=True)

    with pytest.raises(RuleViolation):
        engine.consumer.plan_coal("stoke", 1)
