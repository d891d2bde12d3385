from __future__ import annotations

import pytest

from conftest import listing_data, publish
from updoo.errors import NotFound, Unauthorized
from updoo.models.enums import Language, ListingStatus
from updoo.services.identity import Caller
from updoo.services.listing_lifecycle import FeedQuery


def _assert_hidden(lifecycle, listing_id, *callers):
    for caller in callers:
        with pytest.raises(NotFound):
            lifecycle.get(listing_id, caller)


def test_unpublished_listings_are_indistinguishable_from_missing(
    lifecycle, client, other_client, freelancer, admin, reference
):
    draft = lifecycle.create(listing_data(reference), client)
    _assert_hidden(lifecycle, draft.id, other_client, freelancer, Caller.anonymous())
    assert lifecycle.get(draft.id, client).status == ListingStatus.DRAFT
    assert lifecycle.get(draft.id, admin).status == ListingStatus.DRAFT

    lifecycle.submit_for_review(draft.id, client)
    _assert_hidden(lifecycle, draft.id, other_client, freelancer, Caller.anonymous())

    lifecycle.reject(draft.id, admin, "The description is missing details")
    _assert_hidden(lifecycle, draft.id, other_client, freelancer, Caller.anonymous())
    assert lifecycle.get(draft.id, client).status == ListingStatus.REJECTED

    with pytest.raises(NotFound) as missing:
        lifecycle.get(999_999, other_client)
    with pytest.raises(NotFound) as hidden:
        lifecycle.get(draft.id, other_client)
    assert str(missing.value) == str(hidden.value)


def test_published_listing_is_public(lifecycle, client, admin, reference):
    published = publish(lifecycle, client, admin, reference)
    assert lifecycle.get(published.id, Caller.anonymous()).status == ListingStatus.PUBLISHED


def test_closed_listing_is_hidden_from_strangers(lifecycle, client, other_client, admin, reference):
    published = publish(lifecycle, client, admin, reference)
    lifecycle.close(published.id, client)

    _assert_hidden(lifecycle, published.id, other_client, Caller.anonymous())
    assert lifecycle.get(published.id, client).status == ListingStatus.CLOSED
    assert lifecycle.get(published.id, admin).status == ListingStatus.CLOSED


def test_feed_contains_only_live_published_listings(lifecycle, client, admin, reference, clock):
    lifecycle.create(listing_data(reference, title="Draft listing"), client)
    short = publish(lifecycle, client, admin, reference, title="Short listing", offer_days=7)
    clock.advance(minutes=1)
    long = publish(lifecycle, client, admin, reference, title="Long listing", offer_days=30)
    clock.advance(minutes=1)
    closed = publish(lifecycle, client, admin, reference, title="Closed listing")
    lifecycle.close(closed.id, client)

    page = lifecycle.feed(FeedQuery())
    assert [item.listing.id for item in page.items] == [long.id, short.id]
    assert page.total == 2

    clock.current = short.deadline
    page = lifecycle.feed(FeedQuery())
    assert [item.listing.id for item in page.items] == [long.id]
    assert all(not item.is_expired for item in page.items)


def test_feed_filters(lifecycle, client, admin, reference, clock):
    python_pl = publish(lifecycle, client, admin, reference, skill_ids=[reference["python"]])
    clock.advance(minutes=1)
    figma_en = publish(
        lifecycle,
        client,
        admin,
        reference,
        category_id=reference["writing"],
        language="ENGLISH",
        skill_ids=[reference["figma"]],
    )

    by_category = lifecycle.feed(FeedQuery(category_id=reference["writing"]))
    assert [item.listing.id for item in by_category.items] == [figma_en.id]

    by_language = lifecycle.feed(FeedQuery(language=Language.POLISH))
    assert [item.listing.id for item in by_language.items] == [python_pl.id]

    by_skills = lifecycle.feed(FeedQuery(skill_ids=[reference["figma"], reference["sql"]]))
    assert [item.listing.id for item in by_skills.items] == [figma_en.id]


def test_feed_paginates_newest_first_and_clamps_input(lifecycle, client, admin, reference, clock):
    ids = []
    for index in range(3):
        ids.append(publish(lifecycle, client, admin, reference, title=f"Listing {index}").id)
        clock.advance(minutes=1)

    first = lifecycle.feed(FeedQuery(page=1, page_size=2))
    second = lifecycle.feed(FeedQuery(page=2, page_size=2))
    assert [item.listing.id for item in first.items] == [ids[2], ids[1]]
    assert [item.listing.id for item in second.items] == [ids[0]]
    assert first.total == second.total == 3

    clamped = lifecycle.feed(FeedQuery(page=0, page_size=10_000))
    assert clamped.page == 1
    assert clamped.page_size == 100


def test_my_listings_include_every_state(lifecycle, client, other_client, admin, reference, clock):
    draft = lifecycle.create(listing_data(reference), client)
    published = publish(lifecycle, client, admin, reference, offer_days=7)
    lifecycle.create(listing_data(reference), other_client)

    clock.advance(days=8)
    mine = {snapshot.listing.id: snapshot for snapshot in lifecycle.my_listings(client)}
    feed = lifecycle.feed(FeedQuery())

    assert set(mine) == {draft.id, published.id}
    assert mine[published.id].display_status == "EXPIRED"
    assert mine[draft.id].display_status == "DRAFT"
    assert published.id not in {item.listing.id for item in feed.items}

    with pytest.raises(Unauthorized):
        lifecycle.my_listings(Caller.anonymous())


def test_admin_listings_filter_by_status(lifecycle, client, admin, reference):
    draft = lifecycle.create(listing_data(reference), client)
    pending = lifecycle.create(listing_data(reference), admin)

    page = lifecycle.admin_listings(admin, status=ListingStatus.PENDING_REVIEW)
    assert [item.listing.id for item in page.items] == [pending.id]
    assert lifecycle.admin_listings(admin).total == 2
    assert draft.id in {item.listing.id for item in lifecycle.admin_listings(admin).items}

    with pytest.raises(Unauthorized):
        lifecycle.admin_listings(client)
