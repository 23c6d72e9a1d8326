import pytest

from conftest import make_loan

from app.schemas.loan import LoanStatus
from app.services.loan_query import filter_loans


@pytest.fixture
def loans():
    return [
        make_loan(id="loan_1", user_id="user1", status=LoanStatus.PENDING),
        make_loan(id="loan_2", user_id="user2", status=LoanStatus.UNDER_REVIEW, reviewed_by="officer1"),
        make_loan(id="loan_3", user_id="user1", status=LoanStatus.UNDER_REVIEW, reviewed_by="officer1"),
        make_loan(id="loan_4", user_id="user2", status=LoanStatus.PENDING),
        make_loan(id="loan_5", user_id="user1", status=LoanStatus.PENDING),
    ]


def _ids(result):
    return [loan.id for loan in result.loans]


def test_no_predicates_returns_everything_in_order(loans):
    result = filter_loans(loans)
    assert _ids(result) == ["loan_1", "loan_2", "loan_3", "loan_4", "loan_5"]
    assert result.count == 5


def test_status_predicate(loans):
    result = filter_loans(loans, status=LoanStatus.PENDING)
    assert _ids(result) == ["loan_1", "loan_4", "loan_5"]


def test_status_accepts_raw_value(loans):
    assert _ids(filter_loans(loans, status="under_review")) == ["loan_2", "loan_3"]


def test_user_predicate(loans):
    assert _ids(filter_loans(loans, user_id="user2")) == ["loan_2", "loan_4"]


@pytest.mark.parametrize("status", list(LoanStatus))
@pytest.mark.parametrize("user_id", ["user1", "user2", "nobody"])
def test_combined_predicates_are_the_intersection(loans, status, user_id):
    by_status = set(_ids(filter_loans(loans, status=status)))
    by_user = set(_ids(filter_loans(loans, user_id=user_id)))
    combined = filter_loans(loans, status=status, user_id=user_id)
    assert set(_ids(combined)) == by_status & by_user
    assert combined.count == len(combined.loans)


def test_unknown_status_value_raises(loans):
    with pytest.raises(ValueError):
        filter_loans(loans, status="archived")


def test_empty_input():
    result = filter_loans([])
    assert result.loans == ()
    assert result.count == 0
