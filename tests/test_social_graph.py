import random
import uuid

import pytest

from moodfeed.core.errors import NotFoundError, ValidationError
from moodfeed.schemas.social import SendRequestStatus
from moodfeed.services import social_graph_service as graph
from moodfeed.services.profile_service import profile_to_response


async def edges(db, profile):
    return await profile_to_response(db, profile)


async def test_request_lifecycle(db, make_profile):
    a = await make_profile("Alice")
    b = await make_profile("Bob")

    assert await graph.send_request(db, a, b.id) == SendRequestStatus.SENT
    a_view, b_view = await edges(db, a), await edges(db, b)
    assert a_view.outgoing_requests == [b.id]
    assert b_view.incoming_requests == [a.id]

    assert await graph.accept_request(db, b, a.id) is True
    a_view, b_view = await edges(db, a), await edges(db, b)
    assert a_view.friends == [b.id]
    assert b_view.friends == [a.id]
    assert a_view.outgoing_requests == [] and b_view.incoming_requests == []


async def test_send_request_is_idempotent(db, make_profile):
    a = await make_profile("Alice")
    b = await make_profile("Bob")
    await graph.send_request(db, a, b.id)
    await graph.send_request(db, a, b.id)
    assert await graph.get_outgoing_ids(db, a.id) == [b.id]
    assert await graph.get_incoming_ids(db, b.id) == [a.id]


async def test_self_request_rejected_without_mutation(db, make_profile):
    a = await make_profile("Alice")
    with pytest.raises(ValidationError) as exc:
        await graph.send_request(db, a, a.id)
    assert exc.value.kind == "SELF_REQUEST"
    assert await graph.get_outgoing_ids(db, a.id) == []
    assert await graph.get_incoming_ids(db, a.id) == []


async def test_request_to_unknown_user(db, make_profile):
    a = await make_profile("Alice")
    with pytest.raises(NotFoundError):
        await graph.send_request(db, a, uuid.uuid4())


async def test_already_friends_short_circuits(db, make_profile):
    a = await make_profile("Alice")
    b = await make_profile("Bob")
    await graph.send_request(db, a, b.id)
    await graph.accept_request(db, b, a.id)

    assert await graph.send_request(db, a, b.id) == SendRequestStatus.ALREADY_FRIENDS
    assert await graph.send_request(db, b, a.id) == SendRequestStatus.ALREADY_FRIENDS
    assert await graph.get_outgoing_ids(db, a.id) == []
    assert await graph.get_outgoing_ids(db, b.id) == []


async def test_accept_without_pending_request_fails(db, make_profile):
    a = await make_profile("Alice")
    b = await make_profile("Bob")
    with pytest.raises(NotFoundError) as exc:
        await graph.accept_request(db, b, a.id)
    assert exc.value.kind == "REQUEST_NOT_FOUND"
    assert not await graph.are_friends(db, a.id, b.id)


async def test_accept_twice_is_a_no_op(db, make_profile):
    a = await make_profile("Alice")
    b = await make_profile("Bob")
    await graph.send_request(db, a, b.id)
    await graph.accept_request(db, b, a.id)
    assert await graph.accept_request(db, b, a.id) is True
    assert await graph.get_friend_ids(db, a.id) == {b.id}


async def test_crossing_requests_settled_by_one_accept(db, make_profile):
    a = await make_profile("Alice")
    b = await make_profile("Bob")
    await graph.send_request(db, a, b.id)
    await graph.send_request(db, b, a.id)
    await graph.accept_request(db, b, a.id)
    assert await graph.are_friends(db, a.id, b.id)
    for p in (a, b):
        assert await graph.get_incoming_ids(db, p.id) == []
        assert await graph.get_outgoing_ids(db, p.id) == []


async def test_reject_and_cancel_clear_both_sides(db, make_profile):
    a = await make_profile("Alice")
    b = await make_profile("Bob")
    c = await make_profile("Carol")
    await graph.send_request(db, a, b.id)
    await graph.send_request(db, a, c.id)

    assert await graph.reject_request(db, b, a.id) is True
    assert await graph.reject_request(db, b, a.id) is False
    assert await graph.cancel_request(db, a, c.id) is True
    assert await graph.cancel_request(db, a, c.id) is False

    assert await graph.get_outgoing_ids(db, a.id) == []
    assert await graph.get_incoming_ids(db, b.id) == []
    assert await graph.get_incoming_ids(db, c.id) == []
    assert not await graph.are_friends(db, a.id, b.id)


async def test_remove_friend_is_symmetric(db, make_profile):
    a = await make_profile("Alice")
    b = await make_profile("Bob")
    await graph.send_request(db, a, b.id)
    await graph.accept_request(db, b, a.id)

    assert await graph.remove_friend(db, b, a.id) is True
    assert await graph.get_friend_ids(db, a.id) == set()
    assert await graph.get_friend_ids(db, b.id) == set()
    assert await graph.remove_friend(db, b, a.id) is False


async def test_two_senders_to_same_target_are_both_kept(db, make_profile):
    target = await make_profile("Target")
    a = await make_profile("Alice")
    b = await make_profile("Bob")
    await graph.send_request(db, a, target.id)
    await graph.send_request(db, b, target.id)
    assert set(await graph.get_incoming_ids(db, target.id)) == {a.id, b.id}


async def test_list_requests(db, make_profile):
    a = await make_profile("Alice")
    b = await make_profile("Bob")
    c = await make_profile("Carol")
    await graph.send_request(db, b, a.id)
    await graph.send_request(db, a, c.id)
    incoming, outgoing = await graph.list_requests(db, a)
    assert [p.id for p in incoming] == [b.id]
    assert [p.id for p in outgoing] == [c.id]


async def test_symmetry_holds_after_random_operations(db, make_profile):
    people = [await make_profile(f"User {i}") for i in range(5)]
    rng = random.Random(7)
    for _ in range(60):
        x, y = rng.sample(people, 2)
        op = rng.choice(["send", "accept", "reject", "cancel", "unfriend"])
        if op == "send":
            await graph.send_request(db, x, y.id)
        elif op == "accept":
            if await graph.has_pending_request(db, y.id, x.id):
                await graph.accept_request(db, x, y.id)
        elif op == "reject":
            await graph.reject_request(db, x, y.id)
        elif op == "cancel":
            await graph.cancel_request(db, x, y.id)
        else:
            await graph.remove_friend(db, x, y.id)

    for x in people:
        friends = await graph.get_friend_ids(db, x.id)
        outgoing = await graph.get_outgoing_ids(db, x.id)
        assert x.id not in friends
        for y in people:
            if y.id == x.id:
                continue
            assert (y.id in friends) == (x.id in await graph.get_friend_ids(db, y.id))
            assert (y.id in outgoing) == (x.id in await graph.get_incoming_ids(db, y.id))
