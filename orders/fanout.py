"""
Broadcasting an order to a set of suppliers.

Each supplier gets at most one submission per order. The unique constraint on
(order, supplier) is the duplicate guard: an IntegrityError on insert with an
existing row means the supplier already has this order and is skipped without a
second notification. Any other IntegrityError is a failure for that supplier.
One supplier failing never aborts the rest of the batch.
"""
import logging

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction

from authentication.models import CustomUser
from notifications.services import NotificationService
from .exceptions import FanoutConflict, InvalidTransition, OrderError, OrderNotFound
from .models import Order, OrderSubmission
from .transitions import apply_transition
from .whatsapp import build_order_message, build_whatsapp_link

logger = logging.getLogger(__name__)

FANOUT_STATUSES = ['pending', 'submitted']


class FanoutResult:
    """Per-supplier outcomes of one broadcast"""

    def __init__(self, order, requested):
        self.order = order
        self.requested = requested
        self.created = []
        self.skipped = []
        self.failed = []

    def _outcome(self, supplier_id, supplier=None, **extra):
        outcome = {
            'supplier_id': supplier_id,
            'supplier_name': supplier.get_display_name() if supplier else None,
        }
        outcome.update(extra)
        return outcome

    def add_created(self, supplier, submission):
        self.created.append(self._outcome(
            supplier.id, supplier,
            submission_id=submission.id,
            phone_number=supplier.phone_number,
            whatsapp_url=None,
        ))

    def add_skipped(self, supplier, reason):
        self.skipped.append(self._outcome(supplier.id, supplier, reason=reason))

    def add_failed(self, supplier_id, reason, supplier=None):
        self.failed.append(self._outcome(supplier_id, supplier, reason=reason))

    @property
    def success(self):
        return bool(self.created) or (bool(self.skipped) and not self.failed)

    @property
    def message(self):
        parts = []
        if self.created:
            count = len(self.created)
            parts.append(
                f"Order {self.order.order_number} sent to {count} supplier{'' if count == 1 else 's'}."
            )
        if self.skipped:
            if len(self.skipped) == self.requested:
                parts.append('All selected suppliers have already been notified.')
            else:
                parts.append(f"{len(self.skipped)} of {self.requested} selected suppliers already notified.")
        if self.failed:
            count = len(self.failed)
            parts.append(f"{count} supplier{'' if count == 1 else 's'} could not be notified.")
        return ' '.join(parts)

    @property
    def whatsapp_links(self):
        return [
            {
                'supplier_id': outcome['supplier_id'],
                'supplier_name': outcome['supplier_name'],
                'phone_number': outcome['phone_number'],
                'whatsapp_url': outcome['whatsapp_url'],
            }
            for outcome in self.created
            if outcome['whatsapp_url']
        ]

    def to_dict(self):
        return {
            'success': self.success,
            'message': self.message,
            'order_id': self.order.id,
            'order_number': self.order.order_number,
            'order_status': self.order.status,
            'created': self.created,
            'skipped': self.skipped,
            'failed': self.failed,
            'whatsapp_links': self.whatsapp_links,
        }


class SubmissionFanoutService:
    def __init__(self, submitted_by=None):
        self.submitted_by = submitted_by

    def _check_preconditions(self, order):
        if order.assigned_supplier_id:
            raise FanoutConflict(
                f'Order {order.order_number} is assigned directly to a supplier and cannot be sent to suppliers'
            )

        if order.status not in FANOUT_STATUSES:
            raise InvalidTransition(
                f'Order {order.order_number} is {order.status}; only pending or submitted orders can be sent to suppliers',
                current_status=order.status,
                requested_status='submitted',
            )

        if (
            order.status == 'submitted'
            and not settings.ALLOW_INCREMENTAL_FANOUT
            and order.submissions.exists()
        ):
            raise FanoutConflict(f'Order {order.order_number} has already been sent to suppliers')

    def _insert(self, order, supplier):
        """Submission plus supplier notification, both or neither"""
        with transaction.atomic():
            submission = OrderSubmission.objects.create(
                order=order,
                supplier=supplier,
                submitted_by=self.submitted_by,
                notification_sent=True,
            )
            NotificationService.notify_supplier_new_order(order, supplier)
        return submission

    def send(self, order_id, supplier_ids):
        """
        Broadcast ``order_id`` to ``supplier_ids``.

        Raises before any write when the order is missing, the list is empty,
        the order has a direct supplier or the order is past broadcasting.
        Otherwise returns a FanoutResult and moves the order to submitted.
        """
        # Keep the caller's order, drop repeats
        requested_ids = list(dict.fromkeys(int(supplier_id) for supplier_id in supplier_ids or []))
        if not requested_ids:
            raise OrderError('Select at least one supplier')

        try:
            order = Order.objects.select_related(
                'load_type', 'from_district', 'to_district'
            ).get(id=order_id)
        except Order.DoesNotExist:
            raise OrderNotFound(f'Order {order_id} not found')

        self._check_preconditions(order)

        suppliers = CustomUser.objects.in_bulk(requested_ids)
        result = FanoutResult(order, requested=len(requested_ids))

        for supplier_id in requested_ids:
            supplier = suppliers.get(supplier_id)
            if supplier is None or supplier.role != 'supplier' or not supplier.is_active:
                result.add_failed(supplier_id, 'Not an active supplier account', supplier=supplier)
                continue

            try:
                submission = self._insert(order, supplier)
            except IntegrityError as e:
                if OrderSubmission.objects.filter(order=order, supplier=supplier).exists():
                    result.add_skipped(supplier, 'Already notified')
                else:
                    logger.error(f"Failed to send order {order.order_number} to supplier {supplier.id}: {e}", exc_info=True)
                    result.add_failed(supplier.id, 'Could not record the submission', supplier=supplier)
                continue
            except DatabaseError as e:
                logger.error(f"Failed to send order {order.order_number} to supplier {supplier.id}: {e}", exc_info=True)
                result.add_failed(supplier.id, 'Could not record the submission', supplier=supplier)
                continue

            result.add_created(supplier, submission)

        self._attach_whatsapp_links(order, result)
        self._mark_submitted(order)

        logger.info(
            f"Fanout of {order.order_number}: {len(result.created)} created, "
            f"{len(result.skipped)} skipped, {len(result.failed)} failed"
        )
        return result

    def _attach_whatsapp_links(self, order, result):
        if not result.created:
            return

        message = build_order_message(order)
        linked = []
        for outcome in result.created:
            url = build_whatsapp_link(outcome['phone_number'], message)
            outcome['whatsapp_url'] = url
            if url:
                linked.append(outcome['submission_id'])

        if linked:
            OrderSubmission.objects.filter(id__in=linked).update(whatsapp_sent=True)

    def _mark_submitted(self, order):
        with transaction.atomic():
            locked = Order.objects.select_for_update().get(id=order.id)
            if locked.status == 'pending' and locked.submissions.exists():
                apply_transition(locked, 'submitted', self.submitted_by, reason='Sent to suppliers')
        order.status = locked.status
