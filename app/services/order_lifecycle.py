# app/services/order_lifecycle.py
"""
Order stage machine.

    PENDING -> CONSULTATION -> SESSION -> FINISHING -> DRIVE_LINK -> DONE
        |                                                           |
        +------------------- any non-terminal ----------------------+
                                   |
                               CANCELLED

DONE and CANCELLED are terminal. Stages never move backwards.
"""
from app.core.errors import InvalidTransition
from app.models.order import OrderStatus

STAGE_SEQUENCE: list[OrderStatus] = [
    OrderStatus.PENDING,
    OrderStatus.CONSULTATION,
    OrderStatus.SESSION,
    OrderStatus.FINISHING,
    OrderStatus.DRIVE_LINK,
    OrderStatus.DONE,
]

TERMINAL_STAGES = frozenset({OrderStatus.DONE, OrderStatus.CANCELLED})


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STAGES


def advance_stage(current: OrderStatus) -> OrderStatus:
    """
    Next stage, exactly one step forward.
    """
    if is_terminal(current):
        raise InvalidTransition(
            f"Order is {current.value}; no further stage changes are allowed",
            current=current.value,
        )
    index = STAGE_SEQUENCE.index(current)
    return STAGE_SEQUENCE[index + 1]


def set_stage(current: OrderStatus, target: OrderStatus) -> OrderStatus:
    """
    Direct admin edit: any forward jump, or CANCELLED from a non-terminal stage.

    Setting the current stage again is a no-op.
    """
    if target == current:
        return current

    if is_terminal(current):
        raise InvalidTransition(
            f"Order is {current.value}; no further stage changes are allowed",
            current=current.value,
            target=target.value,
        )

    if target == OrderStatus.CANCELLED:
        return target

    if STAGE_SEQUENCE.index(target) < STAGE_SEQUENCE.index(current):
        raise InvalidTransition(
            f"Invalid status transition: {current.value} -> {target.value}",
            current=current.value,
            target=target.value,
        )
    return target
