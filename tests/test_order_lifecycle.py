# tests/test_order_lifecycle.py
import warnings
from pathlib import Path

import pytest

from app.core.errors import InvalidTransition
from app.models.order import OrderStatus
from app.services import order_lifecycle
from app.services.order_lifecycle import STAGE_SEQUENCE, advance_stage, set_stage


def test_advance_walks_every_stage_once():
    status = OrderStatus.PENDING
    seen = [status]
    while status != OrderStatus.DONE:
        status = advance_stage(status)
        seen.append(status)

    assert seen == STAGE_SEQUENCE


@pytest.mark.parametrize("terminal", [OrderStatus.DONE, OrderStatus.CANCELLED])
def test_advance_from_terminal_fails(terminal):
    with pytest.raises(InvalidTransition):
        advance_stage(terminal)


def test_set_stage_allows_forward_jump():
    assert set_stage(OrderStatus.PENDING, OrderStatus.FINISHING) == OrderStatus.FINISHING


def test_set_stage_rejects_backwards():
    with pytest.raises(InvalidTransition):
        set_stage(OrderStatus.FINISHING, OrderStatus.CONSULTATION)


@pytest.mark.parametrize(
    "current",
    [s for s in STAGE_SEQUENCE if s != OrderStatus.DONE],
)
def test_cancel_from_any_open_stage(current):
    assert set_stage(current, OrderStatus.CANCELLED) == OrderStatus.CANCELLED


def test_cancelled_is_absorbing():
    with pytest.raises(InvalidTransition):
        set_stage(OrderStatus.CANCELLED, OrderStatus.PENDING)
    with pytest.raises(InvalidTransition):
        set_stage(OrderStatus.DONE, OrderStatus.CANCELLED)


def test_same_stage_is_noop():
    assert set_stage(OrderStatus.DONE, OrderStatus.DONE) == OrderStatus.DONE


def test_module_compiles_without_warnings():
    path = Path(order_lifecycle.__file__)
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(path.read_text(encoding="utf-8"), str(path), "exec")
