from datetime import datetime, timedelta, timezone

import pytest

from conftest import make_auction, make_product, make_user
from storefront.core.exceptions import (
    AuctionNotActive,
    BidConflict,
    BidTooLow,
    InvalidBidAmount,
    ProductNotFound,
)
from storefront.enums.catalog import AuctionStatus
from storefront.models.product import Bid
from storefront.services.bidding import (
    auction_status,
    commit_bid,
    list_auctions,
    list_bids,
    minimum_acceptable_bid,
    place_bid,
    winning_bid,
)
from storefront.services.product_service import get_product


NOW = datetime(2026, 10, 1, 12, 0, 0)


def _auction(db, **kwargs):
    return make_auction(db, prod_id="AUC_1", now=NOW, **kwargs)


def test_first_bid_below_starting_minimum_is_rejected(db, buyer):
    _auction(db)

    with pytest.raises(BidTooLow) as exc:
        place_bid(db, "AUC_1", buyer, 1050, now=NOW)

    assert exc.value.minimum == pytest.approx(1100.0)
    assert exc.value.detail["error_code"] == "BID_TOO_LOW"
    assert list_bids(db, "AUC_1") == []
    assert get_product(db, "AUC_1").current_bid == pytest.approx(1000.0)


def test_bid_at_minimum_is_accepted(db, buyer):
    _auction(db)

    bid, product = place_bid(db, "AUC_1", buyer, 1100, now=NOW)

    assert bid.amount == pytest.approx(1100.0)
    assert bid.user_id == str(buyer.id)
    assert bid.user_name == "Test Buyer"
    assert bid.user_phone == "07700000000"
    assert product.current_bid == pytest.approx(1100.0)
    assert product.bid_count == 1
    assert minimum_acceptable_bid(product) == pytest.approx(1200.0)


def test_current_bid_tracks_highest_accepted_bid(db, buyer):
    _auction(db)
    rival = make_user(db, username="rival", full_name="Rival Bidder")

    amounts = [1100, 1250, 1350, 1600]
    for i, amount in enumerate(amounts):
        bidder = buyer if i % 2 == 0 else rival
        before = minimum_acceptable_bid(get_product(db, "AUC_1"))
        assert amount >= before
        place_bid(db, "AUC_1", bidder, amount, now=NOW + timedelta(seconds=i))

    product = get_product(db, "AUC_1")
    assert product.current_bid == pytest.approx(max(amounts))
    assert product.bid_count == len(amounts)

    history = list_bids(db, "AUC_1")
    assert [b.amount for b in history] == [1600, 1350, 1250, 1100]
    winner = winning_bid(product)
    assert winner.amount == pytest.approx(1600.0)
    assert winner.user_id == str(rival.id)


def test_rejected_bid_after_accepted_one_reports_fresh_minimum(db, buyer):
    _auction(db)
    place_bid(db, "AUC_1", buyer, 1100, now=NOW)

    with pytest.raises(BidTooLow) as exc:
        place_bid(db, "AUC_1", buyer, 1150, now=NOW + timedelta(seconds=1))

    assert exc.value.minimum == pytest.approx(1200.0)
    assert len(list_bids(db, "AUC_1")) == 1


@pytest.mark.parametrize(
    "starts_in, ends_in",
    [
        (timedelta(hours=1), timedelta(hours=2)),     # upcoming
        (timedelta(hours=-2), timedelta(hours=-1)),   # ended
        (timedelta(hours=-1), timedelta(0)),          # ends exactly now
    ],
)
def test_bid_outside_auction_window_is_rejected(db, buyer, starts_in, ends_in):
    _auction(db, starts_in=starts_in, ends_in=ends_in)

    with pytest.raises(AuctionNotActive):
        place_bid(db, "AUC_1", buyer, 5000, now=NOW)

    product = get_product(db, "AUC_1")
    assert product.bid_count == 0
    assert product.current_bid == pytest.approx(1000.0)
    assert list_bids(db, "AUC_1") == []


def test_bid_at_auction_start_is_accepted(db, buyer):
    _auction(db, starts_in=timedelta(0))

    bid, _ = place_bid(db, "AUC_1", buyer, 1100, now=NOW)
    assert bid.amount == pytest.approx(1100.0)


def test_bid_on_regular_product_is_rejected(db, buyer):
    make_product(db, prod_id="REG_1")

    with pytest.raises(AuctionNotActive):
        place_bid(db, "REG_1", buyer, 500, now=NOW)


def test_bid_on_missing_product(db, buyer):
    with pytest.raises(ProductNotFound) as exc:
        place_bid(db, "NOPE", buyer, 500, now=NOW)
    assert exc.value.status_code == 404


@pytest.mark.parametrize("amount", [0, -10, float("nan"), float("inf"), "1200", None, True])
def test_bid_amount_must_be_finite_positive_number(db, buyer, amount):
    _auction(db)

    with pytest.raises(InvalidBidAmount):
        place_bid(db, "AUC_1", buyer, amount, now=NOW)
    assert list_bids(db, "AUC_1") == []


def test_racing_bids_only_one_wins(db, buyer):
    _auction(db)
    rival = make_user(db, username="rival", full_name="Rival Bidder")
    place_bid(db, "AUC_1", buyer, 1100, now=NOW)

    # both bidders read the product while the standing bid was 1100
    product = get_product(db, "AUC_1")
    read_version = product.version

    place_bid(db, "AUC_1", buyer, 1200, now=NOW + timedelta(seconds=1))

    with pytest.raises(BidTooLow) as exc:
        commit_bid(
            db,
            product,
            rival,
            1150.0,
            expected_version=read_version,
            now=NOW + timedelta(seconds=1),
        )
    assert exc.value.minimum == pytest.approx(1300.0)

    product = get_product(db, "AUC_1")
    assert product.current_bid == pytest.approx(1200.0)
    assert [b.amount for b in list_bids(db, "AUC_1")] == [1200, 1100]


def test_stale_bid_that_still_clears_minimum_reports_conflict(db, buyer):
    _auction(db)
    rival = make_user(db, username="rival")
    product = get_product(db, "AUC_1")
    read_version = product.version

    place_bid(db, "AUC_1", buyer, 1100, now=NOW)

    with pytest.raises(BidConflict) as exc:
        commit_bid(db, product, rival, 1500.0, expected_version=read_version, now=NOW)
    assert exc.value.status_code == 409

    product = get_product(db, "AUC_1")
    assert product.current_bid == pytest.approx(1100.0)
    assert product.bid_count == 1


def test_winning_bid_prefers_earlier_bid_on_equal_amounts(db, buyer):
    product = _auction(db)
    db.add_all([
        Bid(product_id="AUC_1", amount=1300, user_id="late", created_at=NOW + timedelta(seconds=5)),
        Bid(product_id="AUC_1", amount=1300, user_id="early", created_at=NOW),
        Bid(product_id="AUC_1", amount=1200, user_id="low", created_at=NOW - timedelta(seconds=5)),
    ])
    db.commit()
    db.refresh(product)

    assert winning_bid(product).user_id == "early"


def test_auction_status_and_listing(db):
    make_auction(db, prod_id="LIVE", now=NOW)
    make_auction(db, prod_id="SOON", starts_in=timedelta(days=1), ends_in=timedelta(days=2), now=NOW)
    make_auction(db, prod_id="DONE", starts_in=timedelta(days=-2), ends_in=timedelta(days=-1), now=NOW)
    make_product(db, prod_id="PLAIN")

    assert auction_status(get_product(db, "LIVE"), NOW) == AuctionStatus.active
    assert auction_status(get_product(db, "SOON"), NOW) == AuctionStatus.upcoming
    assert auction_status(get_product(db, "DONE"), NOW) == AuctionStatus.ended

    assert [p.product_id for p in list_auctions(db, AuctionStatus.active, NOW)] == ["LIVE"]
    assert [p.product_id for p in list_auctions(db, AuctionStatus.upcoming, NOW)] == ["SOON"]
    assert [p.product_id for p in list_auctions(db, AuctionStatus.ended, NOW)] == ["DONE"]
    assert {p.product_id for p in list_auctions(db, None, NOW)} == {"LIVE", "SOON", "DONE"}


def test_offset_aware_auction_dates_are_stored_as_utc(db, buyer):
    plus_three = timezone(timedelta(hours=3))
    # 09:00 to 11:00 UTC, so the auction closed an hour before NOW
    make_product(
        db,
        prod_id="TZ",
        is_auction=True,
        starting_bid=50,
        minimum_bid_increment=10,
        auction_start_date=datetime(2026, 10, 1, 12, 0, tzinfo=plus_three),
        auction_end_date=datetime(2026, 10, 1, 14, 0, tzinfo=plus_three),
    )

    product = get_product(db, "TZ")
    assert product.auction_start_date == datetime(2026, 10, 1, 9, 0)
    assert product.auction_end_date == datetime(2026, 10, 1, 11, 0)
    assert auction_status(product, NOW) == AuctionStatus.ended

    with pytest.raises(AuctionNotActive):
        place_bid(db, "TZ", buyer, 100, now=NOW)
    assert list_bids(db, "TZ") == []
