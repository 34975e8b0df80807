from storefront.models.store import ScheduleWindow, Store

__all__ = [
    "ScheduleWindow",
    "Store",
]
