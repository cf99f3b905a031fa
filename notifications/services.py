from .models import (
    AdminNotification,
    TransportRequestNotification,
    VehicleLocationNotification,
    SupplierNotification,
    BuyerNotification,
)
from .signals import announce_change


class NotificationService:
    """Service for creating notifications in the right store"""

    # ========================================================================
    # ADMIN
    # ========================================================================

    @staticmethod
    def notify_admins(title, message, category='system', priority='medium', notification_type='info', **related):
        """
        General admin notice. ``related`` may carry order, supplier, driver, vehicle.
        """
        return AdminNotification.objects.create(
            notification_type=notification_type,
            title=title,
            message=message,
            category=category,
            priority=priority,
            **related
        )

    @staticmethod
    def notify_admins_new_transport_request(order):
        """
        Raised when a buyer creates (or submits a draft of) a transport request.
        """
        buyer_name = order.buyer.get_display_name() if order.buyer else 'unknown'
        return TransportRequestNotification.objects.create(
            notification_type='info',
            title='New Transport Request',
            message=(
                f'New transport request {order.order_number} for {order.load_type.name} '
                f'has been created by buyer {buyer_name}'
            ),
            category='order',
            priority='medium',
            order=order,
            buyer=order.buyer,
        )

    @staticmethod
    def notify_admins_vehicle_location(location):
        supplier = location.supplier
        return VehicleLocationNotification.objects.create(
            notification_type='info',
            title='New Vehicle Location Request',
            message=(
                f'New vehicle location request from {supplier.get_display_name()} '
                f'for vehicle {location.vehicle.vehicle_number} at {location.place}, {location.district.name}'
            ),
            category='supplier_order',
            priority='medium',
            supplier=supplier,
            driver=location.driver,
            vehicle=location.vehicle,
            vehicle_location=location,
        )

    @staticmethod
    def notify_admins_order_confirmed(order, submission):
        """
        A supplier confirmed a broadcast order with driver and vehicle details.
        """
        supplier = submission.supplier
        next_step = (
            'It will be handled by the office.'
            if order.is_manual else
            'It can now be sent to the buyer.'
        )
        return AdminNotification.objects.create(
            notification_type='success',
            title='Order Confirmed by Supplier',
            message=(
                f'Order {order.order_number} has been confirmed by supplier {supplier.get_display_name()}. '
                f'Driver: {submission.driver.driver_name} ({submission.driver_mobile}), '
                f'Vehicle: {submission.vehicle.vehicle_number}. {next_step}'
            ),
            category='order_management',
            priority='high',
            order=order,
            supplier=supplier,
            driver=submission.driver,
            vehicle=submission.vehicle,
        )

    # ========================================================================
    # SUPPLIER
    # ========================================================================

    @staticmethod
    def notify_supplier_new_order(order, supplier):
        """
        Broadcast copy of an order. Created once per (order, supplier).
        """
        return SupplierNotification.objects.create(
            recipient=supplier,
            notification_type='info',
            title='New Transport Order Available',
            message=(
                f'New transport order {order.order_number} is available for your consideration. '
                f'Load: {order.load_type.name}, Route: {order.get_route_display()}'
            ),
            category='order',
            priority='high',
            order=order,
            supplier=supplier,
        )

    @staticmethod
    def notify_supplier_order_assigned(order, supplier):
        return SupplierNotification.objects.create(
            recipient=supplier,
            notification_type='success',
            title='Order Assigned to You',
            message=(
                f'Order {order.order_number} has been assigned to you. '
                f'Load: {order.load_type.name}, Route: {order.get_route_display()}'
            ),
            category='order',
            priority='high',
            order=order,
            supplier=supplier,
        )

    @staticmethod
    def notify_suppliers_order_taken(order, suppliers):
        """
        Tell the other suppliers of a broadcast that the order is gone.
        """
        notifications = [
            SupplierNotification(
                recipient=supplier,
                notification_type='info',
                title='Order No Longer Available',
                message=f'Order {order.order_number} has been accepted by another supplier.',
                category='order',
                priority='low',
                order=order,
                supplier=supplier,
            )
            for supplier in suppliers
        ]

        # Bulk create for efficiency
        SupplierNotification.objects.bulk_create(notifications)
        for supplier in suppliers:
            announce_change(SupplierNotification, recipient=supplier)

        return len(notifications)

    @staticmethod
    def notify_supplier_document_reviewed(document):
        approved = document.status == 'approved'
        message = f'Your {document.get_document_type_display()} has been {document.status}.'
        if document.review_notes:
            message = f'{message} Notes: {document.review_notes}'

        return SupplierNotification.objects.create(
            recipient=document.supplier,
            notification_type='success' if approved else 'warning',
            title='Document Approved' if approved else 'Document Rejected',
            message=message,
            category='document',
            priority='medium' if approved else 'high',
            supplier=document.supplier,
            driver=document.driver,
            vehicle=document.vehicle,
        )

    # ========================================================================
    # BUYER
    # ========================================================================

    @staticmethod
    def notify_buyer(buyer, title, message, category='order', priority='medium', notification_type='info', order=None):
        return BuyerNotification.objects.create(
            recipient=buyer,
            notification_type=notification_type,
            title=title,
            message=message,
            category=category,
            priority=priority,
            order=order,
        )

    @staticmethod
    def notify_buyer_order_status(order):
        """
        Keep the buyer of a request informed about lifecycle changes.
        """
        if order.buyer is None:
            return None

        notification_type = 'warning' if order.status in ['rejected', 'cancelled'] else 'info'
        return NotificationService.notify_buyer(
            order.buyer,
            title=f'Order {order.get_status_label()}',
            message=f'Your order {order.order_number} is now {order.get_status_label().lower()}.',
            category='order',
            priority='medium',
            notification_type=notification_type,
            order=order,
        )

    @staticmethod
    def notify_buyer_order_sent(accepted_request):
        submission = accepted_request.submission
        order = accepted_request.order
        return NotificationService.notify_buyer(
            accepted_request.buyer,
            title='Order Sent to You',
            message=(
                f'Your order {order.order_number} has been sent to you by admin. '
                f'Driver: {submission.driver.driver_name} ({submission.driver_mobile}), '
                f'Vehicle: {submission.vehicle.vehicle_number}. '
                f'You can now track your order in the Accepted Requests section.'
            ),
            category='order_management',
            priority='high',
            notification_type='success',
            order=order,
        )