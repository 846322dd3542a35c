from .base import ChatApplyError


class PlanError(ChatApplyError):
    """An edit plan cannot be applied to the given text."""


class OverlappingEditsError(PlanError):
    """Two operations of one plan touch the same region."""


class EditRangeError(PlanError):
    """An operation references offsets outside of the text."""
