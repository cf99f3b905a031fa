from django.urls import path
from reference_data.views import (
    manage_reference_list,
    manage_reference_item,
    toggle_reference_status,
)
from .views import (
    AdminOrderListView,
    get_order_statistics,
    order_detail,
    assign_order,
    reject_order,
    update_order_status,
    send_to_suppliers,
    order_submissions,
    update_submission,
    AvailableSupplierListView,
    BuyerListView,
    SuppliersConfirmedListView,
    send_to_buyer,
    SupplierDocumentListView,
    verify_document,
)
# Import manual order views
from .manual_order_views import (
    manual_orders,
    complete_order,
)

urlpatterns = [
    # Buyers orders
    path('orders/', AdminOrderListView.as_view(), name='admin-order-list'),
    path('orders/statistics/', get_order_statistics, name='admin-order-statistics'),
    path('orders/manual/', manual_orders, name='admin-manual-orders'),
    path('orders/<int:order_id>/', order_detail, name='admin-order-detail'),

    # Order assignment
    path('orders/<int:order_id>/assign/', assign_order, name='admin-assign-order'),
    path('orders/<int:order_id>/reject/', reject_order, name='admin-reject-order'),
    path('orders/<int:order_id>/update-status/', update_order_status, name='admin-update-order-status'),
    path('orders/<int:order_id>/complete/', complete_order, name='admin-complete-order'),
    path('orders/<int:order_id>/send-to-suppliers/', send_to_suppliers, name='admin-send-to-suppliers'),
    path('orders/<int:order_id>/submissions/', order_submissions, name='admin-order-submissions'),
    path('submissions/<int:submission_id>/', update_submission, name='admin-update-submission'),
    path('suppliers/available/', AvailableSupplierListView.as_view(), name='admin-available-suppliers'),
    path('buyers/', BuyerListView.as_view(), name='admin-buyers'),

    # Suppliers confirmed
    path('suppliers-confirmed/', SuppliersConfirmedListView.as_view(), name='admin-suppliers-confirmed'),
    path('suppliers-confirmed/<int:submission_id>/send-to-buyer/', send_to_buyer, name='admin-send-to-buyer'),

    # Document verification
    path('documents/', SupplierDocumentListView.as_view(), name='admin-documents'),
    path('documents/<int:document_id>/verify/', verify_document, name='admin-verify-document'),

    # Reference data (load-types, districts)
    path(
        'reference/<str:reference_type>/',
        manage_reference_list,
        name='admin-reference-list'
    ),
    path(
        'reference/<str:reference_type>/<int:item_id>/',
        manage_reference_item,
        name='admin-reference-item'
    ),
    path(
        'reference/<str:reference_type>/<int:item_id>/toggle-status/',
        toggle_reference_status,
        name='admin-reference-toggle'
    ),
]
