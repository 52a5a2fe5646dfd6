# billing/flow.py
"""
Step sequencing for the cancellation wizard.

    initial -> reasons -> (downsell, variant B only) -> confirm -> complete

Accepting the downsell leaves the sequence for the ``retained`` screen.
Transitions are pure: the view decides when to persist.
"""
from .models import Variant

INITIAL = 'initial'
REASONS = 'reasons'
DOWNSELL = 'downsell'
CONFIRM = 'confirm'
COMPLETE = 'complete'
RETAINED = 'retained'

START = 'start'
SELECT_REASON = 'select_reason'
ACCEPT_DOWNSELL = 'accept_downsell'
DECLINE_DOWNSELL = 'decline_downsell'
CONFIRM_CANCELLATION = 'confirm'

EVENTS = (START, SELECT_REASON, ACCEPT_DOWNSELL, DECLINE_DOWNSELL, CONFIRM_CANCELLATION)
TERMINAL_STEPS = (COMPLETE, RETAINED)

CANCELLATION_REASONS = [
    'Too expensive',
    'Not using it enough',
    'Found a better alternative',
    'Technical issues',
    'Poor customer service',
    'Other',
]


class InvalidTransition(Exception):
    def __init__(self, step, event, variant=None):
        self.step = step
        self.event = event
        self.variant = variant
        super().__init__(f"Cannot apply '{event}' at step '{step}' (variant {variant})")


def _check_variant(variant):
    if variant not in Variant.values:
        raise ValueError(f"Unknown variant: {variant!r}")


def shows_downsell(variant):
    _check_variant(variant)
    return variant == Variant.B


def steps_for_variant(variant):
    """The linear path a user of this variant walks when they cancel."""
    steps = [INITIAL, REASONS]
    if shows_downsell(variant):
        steps.append(DOWNSELL)
    steps += [CONFIRM, COMPLETE]
    return steps


def next_step(step, event, variant):
    _check_variant(variant)

    if step == INITIAL and event == START:
        return REASONS
    if step == REASONS and event == SELECT_REASON:
        return DOWNSELL if shows_downsell(variant) else CONFIRM
    if step == DOWNSELL and shows_downsell(variant):
        if event == DECLINE_DOWNSELL:
            return CONFIRM
        if event == ACCEPT_DOWNSELL:
            return RETAINED
    if step == CONFIRM and event == CONFIRM_CANCELLATION:
        return COMPLETE

    raise InvalidTransition(step, event, variant)


def progress(step, variant):
    """(position, total) of ``step`` along the variant's path, 1-based."""
    steps = steps_for_variant(variant)
    if step not in steps:
        return len(steps), len(steps)
    return steps.index(step) + 1, len(steps)
