"""Change alert notifiers."""
from eth_reserve.providers.notifications.notifier_abc import NotifierABC
from eth_reserve.providers.notifications.resend.resend_notifier import \
    ResendNotifier

__all__ = ["NotifierABC", "ResendNotifier"]
