from .extraction import extract_products, normalize_cards
from .modals import dismiss_modal
from .navigation import NavState, NavStep, StepKind, drive_navigation
from .search import reset_search, submit_search

__all__ = [
    "NavState",
    "NavStep",
    "StepKind",
    "dismiss_modal",
    "drive_navigation",
    "extract_products",
    "normalize_cards",
    "reset_search",
    "submit_search",
]
