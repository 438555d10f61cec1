"""ViewSets and API views for the M7 distribution API v1."""
import logging

from django.conf import settings
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api import wiring
from api.v1.pagination import StandardResultsSetPagination
from api.v1.serializers import (
    CustomerSerializer,
    CustomerSummarySerializer,
    DashboardStatsSerializer,
    OrderCreateSerializer,
    OrderItemSerializer,
    OrderSerializer,
    ProductPerformanceSerializer,
    ProductSerializer,
    StockUpdateSerializer,
)
from catalog.models import Product
from catalog.services import set_product_stock
from core.exceptions import (
    DistributionError,
    EmptyOrder,
    InvalidQuantity,
    NotFound,
    PartialCommit,
    StockConflict,
    StoreUnavailable,
)
from core.pdf import download_invoice, preview_invoice
from customers.models import Customer
from customers.services import get_customer_summaries
from reports.services import get_dashboard_stats
from sales.invoice import render_invoice
from sales.models import PaymentType
from sales.services import (
    create_order,
    get_order_with_items,
    list_orders,
    mark_order_paid,
)

logger = logging.getLogger("m7")

_TRUTHY = {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _domain_error_status(exc):
    if isinstance(exc, NotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, (InvalidQuantity, EmptyOrder)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, StockConflict):
        return status.HTTP_409_CONFLICT
    if isinstance(exc, StoreUnavailable):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class StoreBackedMixin:
    """Gives views access to the injected order store and turns domain
    errors into HTTP responses.

    ``store`` can be passed to ``as_view()``; otherwise the process store
    from ``api.wiring`` is used.
    """

    store = None

    def get_store(self):
        return self.store if self.store is not None else wiring.get_store()

    def handle_exception(self, exc):
        if isinstance(exc, DistributionError):
            code = _domain_error_status(exc)
            if code >= 500:
                logger.warning("Request failed on the store: %s", exc)
            body = {"detail": str(exc)}
            if isinstance(exc, NotFound):
                body["missing_ids"] = exc.missing_ids
            return Response(body, status=code)
        return super().handle_exception(exc)


def _order_payload(order, items):
    data = OrderSerializer(order).data
    data["items"] = OrderItemSerializer(items, many=True).data
    return data


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

class OrderViewSet(StoreBackedMixin, viewsets.ViewSet):
    """
    Orders placed by customers.

    - list: most recent orders (``?limit=``, default ``ORDER_LIST_LIMIT``)
    - create: price, persist and deduct stock in one call
    - mark_paid: flag the order as paid
    - invoice: PDF download (``?preview=1`` for inline display)
    """

    permission_classes = [IsAuthenticated]

    def _limit(self, request):
        raw = request.query_params.get("limit")
        if raw in (None, ""):
            return getattr(settings, "ORDER_LIST_LIMIT", 50)
        try:
            limit = int(raw)
        except (TypeError, ValueError):
            raise ValidationError({"limit": "Must be an integer."})
        if limit < 1 or limit > 500:
            raise ValidationError({"limit": "Must be between 1 and 500."})
        return limit

    def _filters(self, request):
        params = request.query_params
        filters = {}
        payment_type = params.get("payment_type")
        if payment_type:
            if payment_type not in PaymentType.values:
                raise ValidationError({"payment_type": f"Must be one of {PaymentType.values}."})
            filters["payment_type"] = payment_type
        is_paid = (params.get("is_paid") or "").strip().lower()
        if is_paid:
            filters["is_paid"] = is_paid in _TRUTHY
        return filters

    def list(self, request):
        orders = list_orders(self.get_store(), limit=self._limit(request), **self._filters(request))
        return Response(OrderSerializer(orders, many=True).data)

    def retrieve(self, request, pk=None):
        order, _customer, items = get_order_with_items(self.get_store(), pk)
        return Response(_order_payload(order, items))

    def create(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        store = self.get_store()

        try:
            order = create_order(
                store,
                customer_id=data["customer_id"],
                payment_type=data["payment_type"],
                items=[
                    (line["product_id"], line["quantity_bags"])
                    for line in data["items"]
                ],
                order_date=data.get("order_date"),
            )
        except PartialCommit as exc:
            payload = _order_payload(exc.order, store.fetch_order_items(exc.order.pk))
            payload["warnings"] = [
                f"Stock not updated for product {product_id}: {error}"
                for product_id, error in sorted(exc.failures.items())
            ]
            return Response(payload, status=status.HTTP_201_CREATED)

        items = store.fetch_order_items(order.pk)
        return Response(_order_payload(order, items), status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"], url_path="mark-paid")
    def mark_paid(self, request, pk=None):
        order = mark_order_paid(self.get_store(), pk)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["get"], url_path="invoice")
    def invoice(self, request, pk=None):
        """Render the invoice PDF for an order."""
        order, customer, items = get_order_with_items(self.get_store(), pk)
        document = render_invoice(order, customer, items)
        preview = (request.query_params.get("preview") or "").strip().lower() in _TRUTHY
        try:
            if preview:
                return preview_invoice(document)
            return download_invoice(document)
        except RuntimeError:
            return Response(
                {"detail": "Invoice rendering is unavailable on this server."},
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

class CustomerViewSet(StoreBackedMixin, viewsets.ModelViewSet):
    """
    CRUD for customers.

    Search by name, shop name and phone. Each record carries the stored
    ``status`` and the classifier's ``risk_status``.
    """

    serializer_class = CustomerSerializer
    queryset = Customer.objects.all()
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    filterset_fields = ['status']
    search_fields = ['name', 'shop_name', 'phone']
    ordering_fields = ['created_at', 'name', 'total_debt', 'trust_score']

    @action(detail=False, methods=["get"], url_path="summaries")
    def summaries(self, request):
        """Per-customer order counts and cash / credit totals."""
        rows = get_customer_summaries(self.get_store())
        return Response(CustomerSummarySerializer(rows, many=True).data)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class ProductViewSet(StoreBackedMixin, viewsets.ModelViewSet):
    """
    CRUD for bagged products.

    Stock only changes through orders and the ``stock`` action.
    """

    serializer_class = ProductSerializer
    queryset = Product.objects.all()
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    search_fields = ['name', 'description']
    ordering_fields = ['name', 'stock_kg', 'price_per_bag', 'created_at']

    @action(detail=True, methods=["post"], url_path="stock", serializer_class=StockUpdateSerializer)
    def stock(self, request, pk=None):
        """Overwrite the stock level (kg) after a physical count."""
        serializer = StockUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = set_product_stock(self.get_store(), pk, serializer.validated_data["stock_kg"])
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"], url_path="performance")
    def performance(self, request):
        """Bags, kg and revenue sold per product, highest revenue first."""
        rows = self.get_store().fetch_product_performance()
        return Response(ProductPerformanceSerializer(rows, many=True).data)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

class DashboardStatsAPIView(StoreBackedMixin, APIView):
    """Dashboard figures; falls back to a static snapshot when the store is down."""

    permission_classes = [IsAuthenticated]

    def get(self, request):
        stats = get_dashboard_stats(self.get_store())
        return Response(DashboardStatsSerializer(stats).data)
