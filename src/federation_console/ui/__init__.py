from .notification_center import NotificationCenter
from .view_state import CollectionViewState, CollectionViewStatus, resolve_view_state

__all__ = ["CollectionViewState", "CollectionViewStatus", "NotificationCenter", "resolve_view_state"]
