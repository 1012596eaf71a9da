# storefront/services/notification_service.py
from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Purchase confirmations.
    Handed to Celery so checkout does not wait on delivery.
    """

    @staticmethod
    def send_purchase_notification(purchase_id: int, email: str) -> bool:
        """
        Enqueue the confirmation. The purchase is already stored at this
        point, so a broker outage is logged and reported as False.
        """
        try:
            send_purchase_notification_task.delay(purchase_id, email)
        except OperationalError as e:
            logger.warning(f"Could not enqueue notification for purchase {purchase_id}: {e}")
            return False
        return True


@celery_app.task(name="storefront.services.notification_service.send_purchase_notification_task")
def send_purchase_notification_task(purchase_id: int, email: str):
    """
    Celery task - a real deployment would send an email here.
    For now it only logs.
    """
    logger.info(f"[NOTIFICATION] Purchase {purchase_id} confirmed for {email}")

    return {"purchase_id": purchase_id, "email": email, "status": "sent"}
