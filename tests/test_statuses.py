import pytest

from rumbo.shared.schemas.statuses import StopStatus, TERMINAL_STOP_STATUSES, allowed


@pytest.mark.parametrize(
    "current,new",
    [
        (StopStatus.PENDING, StopStatus.EN_ROUTE),
        (StopStatus.PENDING, StopStatus.CANCELLED),
        (StopStatus.EN_ROUTE, StopStatus.DELIVERED),
        (StopStatus.EN_ROUTE, StopStatus.NOT_DELIVERED),
        (StopStatus.EN_ROUTE, StopStatus.CANCELLED),
    ],
)
def test_forward_transitions_are_allowed(current, new) -> None:
    assert allowed(current, new)


def test_pending_cannot_jump_to_delivered() -> None:
    assert not allowed(StopStatus.PENDING, StopStatus.DELIVERED)
    assert not allowed(StopStatus.PENDING, StopStatus.NOT_DELIVERED)


def test_en_route_cannot_go_back_to_pending() -> None:
    assert not allowed(StopStatus.EN_ROUTE, StopStatus.PENDING)


def test_terminal_statuses_only_accept_themselves() -> None:
    for terminal in TERMINAL_STOP_STATUSES:
        for new in StopStatus:
            assert allowed(terminal, new) == (new == terminal)


def test_plain_string_values_are_accepted() -> None:
    assert allowed("pending", "en_route")
    assert allowed("delivered", "delivered")
