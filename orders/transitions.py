"""
Order lifecycle.

Every status change goes through ``StatusTransitionController`` so the
allowed-transition table, the history trail and the dashboard cache stay in
one place. Methods raise ``orders.exceptions`` errors; views turn them into
responses.
"""
import logging

from django.db import transaction
from django.utils import timezone

from admin_panel.cache_utils import invalidate_analytics_cache
from authentication.models import CustomUser
from notifications.services import NotificationService
from suppliers.models import Driver, Vehicle
from .exceptions import (
    AssignmentConflict,
    ExecutionDetailsError,
    InvalidTransition,
    OrderError,
    OrderNotFound,
    SubmissionNotFound,
)
from .models import Order, OrderStatusHistory, OrderSubmission
from .validators import digits_only

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS = {
    'draft': ['pending', 'rejected', 'cancelled'],
    'pending': ['submitted', 'confirmed', 'rejected', 'cancelled'],
    'submitted': ['assigned', 'confirmed', 'rejected', 'cancelled'],
    'assigned': ['confirmed', 'completed', 'rejected', 'cancelled'],
    'confirmed': ['picked_up', 'in_transit', 'completed', 'rejected', 'cancelled'],
    'picked_up': ['in_transit', 'rejected', 'cancelled'],
    'in_transit': ['delivered', 'rejected', 'cancelled'],
    'delivered': [],
    'completed': [],
    'rejected': [],
    'cancelled': [],
}

PROGRESS_STATUSES = ['picked_up', 'in_transit', 'delivered']

# Orders that can still be broadcast or confirmed by a supplier
OPEN_ORDER_STATUSES = ['pending', 'submitted', 'assigned']

ADMIN_SUBMISSION_STATUSES = ['responded', 'rejected', 'ignored']

# Statuses an admin may set directly; cancelled and rejected are routed to cancel/reject
OVERRIDE_STATUSES = ['assigned'] + PROGRESS_STATUSES

OVERRIDE_REFUSALS = {
    'confirmed': 'Orders are confirmed by direct assignment or by a supplier accepting the broadcast',
    'completed': 'Only manual orders can be completed, using mark complete',
    'submitted': 'Orders are submitted by sending them to suppliers',
    'pending': 'Orders become pending when the buyer submits them',
}


def can_transition(current_status, new_status):
    return new_status in ALLOWED_TRANSITIONS.get(current_status, [])


def apply_transition(order, new_status, user=None, reason=''):
    """
    Move ``order`` to ``new_status`` after checking the table, stamp the
    lifecycle timestamps, save and record history. The caller holds the
    transaction.
    """
    old_status = order.status
    if not can_transition(old_status, new_status):
        raise InvalidTransition(
            f'Cannot change order {order.order_number} from {old_status} to {new_status}',
            current_status=old_status,
            requested_status=new_status,
        )

    now = timezone.now()
    order.status = new_status
    if new_status == 'confirmed' and order.confirmed_at is None:
        order.confirmed_at = now
    if new_status in ['completed', 'delivered']:
        order.completed_at = now
    order.save()

    OrderStatusHistory.objects.create(
        order=order,
        old_status=old_status,
        new_status=new_status,
        changed_by=user,
        reason=reason,
    )

    invalidate_analytics_cache()
    logger.info(f"Order {order.order_number}: {old_status} -> {new_status}" + (f" ({reason})" if reason else ''))
    return order


class StatusTransitionController:
    def __init__(self, user=None):
        self.user = user

    def _load(self, order_id):
        """Row-locked order; call inside transaction.atomic()"""
        try:
            return Order.objects.select_for_update().select_related('load_type', 'buyer').get(id=order_id)
        except Order.DoesNotExist:
            raise OrderNotFound(f'Order {order_id} not found')

    def _load_submission(self, submission_id, supplier):
        try:
            return OrderSubmission.objects.select_for_update().get(id=submission_id, supplier=supplier)
        except OrderSubmission.DoesNotExist:
            raise SubmissionNotFound(f'Order submission {submission_id} not found')

    def _require_not_terminal(self, order, action):
        if order.is_terminal:
            raise InvalidTransition(
                f'Cannot {action} order {order.order_number}: it is already {order.status}',
                current_status=order.status,
            )

    # ========================================================================
    # BUYER
    # ========================================================================

    def submit_request(self, order_id):
        """Draft -> pending; admins get a transport request notification"""
        with transaction.atomic():
            order = self._load(order_id)
            apply_transition(order, 'pending', self.user, reason='Submitted by buyer')
            NotificationService.notify_admins_new_transport_request(order)
        return order

    def cancel(self, order_id, reason=''):
        with transaction.atomic():
            order = self._load(order_id)
            self._require_not_terminal(order, 'cancel')
            apply_transition(order, 'cancelled', self.user, reason=reason or 'Cancelled')
            order.submissions.filter(status__in=OrderSubmission.OPEN_STATUSES).update(status='ignored')
            NotificationService.notify_buyer_order_status(order)
        return order

    # ========================================================================
    # ADMIN
    # ========================================================================

    def assign(self, order_id, supplier_id, notes=''):
        """
        Direct assignment: pending -> confirmed with the chosen supplier.

        A confirmed order is view-only, an order that belongs to another
        supplier is a conflict, and a broadcast order must be confirmed by
        one of the suppliers it was sent to.
        """
        with transaction.atomic():
            order = self._load(order_id)

            try:
                supplier = CustomUser.objects.get(id=supplier_id, role='supplier', is_active=True)
            except CustomUser.DoesNotExist:
                raise OrderError(f'Supplier {supplier_id} not found', status_code=404)

            if order.status == 'confirmed':
                raise InvalidTransition(
                    f'Order {order.order_number} is already confirmed and can only be viewed',
                    current_status=order.status,
                    requested_status='confirmed',
                )

            if order.assigned_supplier_id and order.assigned_supplier_id != supplier.id:
                raise AssignmentConflict(
                    f'Order {order.order_number} is already assigned to {order.assigned_supplier.get_display_name()}'
                )

            if order.submissions.exists():
                raise AssignmentConflict(
                    f'Order {order.order_number} has already been sent to suppliers; '
                    f'it is confirmed by the supplier who accepts it'
                )

            if order.status != 'pending':
                raise InvalidTransition(
                    f'Only pending orders can be assigned; order {order.order_number} is {order.status}',
                    current_status=order.status,
                    requested_status='confirmed',
                )

            order.assigned_supplier = supplier
            order.assigned_at = timezone.now()
            if notes:
                order.admin_notes = notes

            apply_transition(order, 'confirmed', self.user, reason=f'Assigned to {supplier.get_display_name()}')
            NotificationService.notify_supplier_order_assigned(order, supplier)
            NotificationService.notify_buyer_order_status(order)

        return order

    def reject(self, order_id, notes=''):
        with transaction.atomic():
            order = self._load(order_id)
            self._require_not_terminal(order, 'reject')

            if notes:
                order.admin_notes = notes
            apply_transition(order, 'rejected', self.user, reason=notes or 'Rejected by admin')
            order.submissions.filter(status__in=OrderSubmission.OPEN_STATUSES).update(status='ignored')
            NotificationService.notify_buyer_order_status(order)

        return order

    def mark_complete(self, order_id):
        """Manual orders are closed by the office once the trip is done"""
        with transaction.atomic():
            order = self._load(order_id)

            if not order.is_manual:
                raise InvalidTransition(
                    f'Only manual orders can be marked complete; {order.order_number} is a buyer request',
                    current_status=order.status,
                    requested_status='completed',
                )

            if order.status not in ['assigned', 'confirmed']:
                raise InvalidTransition(
                    f'Order {order.order_number} is {order.status}; only assigned or confirmed orders can be completed',
                    current_status=order.status,
                    requested_status='completed',
                )

            apply_transition(order, 'completed', self.user, reason='Marked complete by admin')

        return order

    def update_status(self, order_id, new_status, reason=''):
        """
        Admin override for trip progress and for marking a broadcast order
        sent. Cancel and reject go through ``cancel``/``reject`` so open
        submissions are closed too; confirmation and completion are only
        reachable through ``assign``, ``confirm_submission`` and
        ``mark_complete``.
        """
        if new_status == 'cancelled':
            return self.cancel(order_id, reason=reason)
        if new_status == 'rejected':
            return self.reject(order_id, notes=reason)

        with transaction.atomic():
            order = self._load(order_id)

            if new_status not in OVERRIDE_STATUSES:
                raise InvalidTransition(
                    OVERRIDE_REFUSALS.get(new_status, f'{new_status} cannot be set directly'),
                    current_status=order.status,
                    requested_status=new_status,
                )

            if order.status == new_status:
                raise InvalidTransition(
                    f'Order {order.order_number} is already {new_status}',
                    current_status=order.status,
                    requested_status=new_status,
                )

            if new_status == 'assigned' and not order.submissions.exists():
                raise InvalidTransition(
                    f'Order {order.order_number} has not been sent to any supplier',
                    current_status=order.status,
                    requested_status=new_status,
                )

            apply_transition(order, new_status, self.user, reason=reason)
            NotificationService.notify_buyer_order_status(order)

        return order

    def send_to_suppliers(self, order_id, supplier_ids):
        from .fanout import SubmissionFanoutService

        return SubmissionFanoutService(self.user).send(order_id, supplier_ids)

    def set_submission_status(self, submission_id, new_status):
        """
        Office bookkeeping on an open submission: a supplier answered by phone
        (responded), turned it down (rejected) or never replied (ignored).
        Confirmation needs driver details and only comes from the supplier.
        """
        if new_status not in ADMIN_SUBMISSION_STATUSES:
            raise InvalidTransition(
                f'Submissions can only be marked {", ".join(ADMIN_SUBMISSION_STATUSES)}',
                requested_status=new_status,
            )

        with transaction.atomic():
            try:
                submission = OrderSubmission.objects.select_for_update().get(id=submission_id)
            except OrderSubmission.DoesNotExist:
                raise SubmissionNotFound(f'Order submission {submission_id} not found')

            if not submission.is_open:
                raise InvalidTransition(
                    f'Submission is already {submission.get_status_display().lower()}',
                    current_status=submission.status,
                    requested_status=new_status,
                )

            submission.status = new_status
            if new_status != 'ignored':
                submission.responded_at = timezone.now()
            submission.save(update_fields=['status', 'responded_at', 'updated_at'])

        return submission

    # ========================================================================
    # SUPPLIER
    # ========================================================================

    def mark_viewed(self, submission_id, supplier):
        with transaction.atomic():
            submission = self._load_submission(submission_id, supplier)
            if submission.status == 'submitted':
                submission.status = 'viewed'
                submission.save(update_fields=['status', 'updated_at'])
        return submission

    def confirm_submission(self, submission_id, supplier, driver_id, vehicle_id, driver_mobile=''):
        """
        A supplier takes a broadcast order with one of their drivers and vehicles.

        The submission becomes confirmed (accepted for manual orders), every
        other open submission of the order becomes accepted_by_other, and the
        order moves to confirmed with the execution details copied over.
        """
        with transaction.atomic():
            submission = self._load_submission(submission_id, supplier)

            if not submission.is_open:
                raise InvalidTransition(
                    f'This order has already been {submission.get_status_display().lower()}',
                    current_status=submission.status,
                    requested_status='confirmed',
                )

            order = self._load(submission.order_id)
            if order.status not in OPEN_ORDER_STATUSES:
                raise InvalidTransition(
                    f'Order {order.order_number} is no longer available ({order.status})',
                    current_status=order.status,
                    requested_status='confirmed',
                )

            try:
                driver = Driver.objects.get(id=driver_id, supplier=supplier, is_active=True)
            except Driver.DoesNotExist:
                raise ExecutionDetailsError('Driver not found or does not belong to you')

            try:
                vehicle = Vehicle.objects.get(id=vehicle_id, supplier=supplier, is_active=True)
            except Vehicle.DoesNotExist:
                raise ExecutionDetailsError('Vehicle not found or does not belong to you')

            driver_mobile = driver_mobile or driver.mobile
            if not 10 <= len(digits_only(driver_mobile)) <= 15:
                raise ExecutionDetailsError('Driver mobile must be 10 to 15 digits')

            now = timezone.now()
            submission.status = 'accepted' if order.is_manual else 'confirmed'
            submission.driver = driver
            submission.vehicle = vehicle
            submission.driver_mobile = driver_mobile
            submission.responded_at = now
            submission.save()

            others = order.submissions.exclude(id=submission.id).filter(status__in=OrderSubmission.OPEN_STATUSES)
            other_suppliers = [other.supplier for other in others.select_related('supplier')]
            others.update(status='accepted_by_other', updated_at=now)

            order.driver = driver
            order.vehicle = vehicle
            order.driver_mobile = driver_mobile
            apply_transition(order, 'confirmed', self.user, reason=f'Confirmed by supplier {supplier.get_display_name()}')

            NotificationService.notify_admins_order_confirmed(order, submission)
            if other_suppliers:
                NotificationService.notify_suppliers_order_taken(order, other_suppliers)
            NotificationService.notify_buyer_order_status(order)

        return submission

    def decline_submission(self, submission_id, supplier):
        with transaction.atomic():
            submission = self._load_submission(submission_id, supplier)

            if not submission.is_open:
                raise InvalidTransition(
                    f'This order has already been {submission.get_status_display().lower()}',
                    current_status=submission.status,
                    requested_status='rejected',
                )

            submission.status = 'rejected'
            submission.responded_at = timezone.now()
            submission.save(update_fields=['status', 'responded_at', 'updated_at'])

        return submission

    def update_progress(self, order_id, new_status, supplier=None):
        """
        Trip progress: confirmed -> picked_up -> in_transit -> delivered.

        When ``supplier`` is given the order must be theirs, either by direct
        assignment or through their confirmed submission.
        """
        if new_status not in PROGRESS_STATUSES:
            raise InvalidTransition(
                f'{new_status} is not a trip progress status',
                requested_status=new_status,
            )

        with transaction.atomic():
            order = self._load(order_id)

            if supplier is not None and not self._is_executing_supplier(order, supplier):
                raise OrderNotFound(f'Order {order_id} not found')

            apply_transition(order, new_status, self.user, reason=f'Trip update: {new_status.replace("_", " ")}')
            NotificationService.notify_buyer_order_status(order)

        return order

    def _is_executing_supplier(self, order, supplier):
        if order.assigned_supplier_id == supplier.id:
            return True
        return order.submissions.filter(
            supplier=supplier,
            status__in=OrderSubmission.CONFIRMED_STATUSES
        ).exists()
