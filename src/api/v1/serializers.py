"""Serializers for the M7 distribution API v1."""
from rest_framework import serializers

from catalog.models import Product
from customers.models import Customer
from customers.services import classify_customer
from sales.models import Order, OrderItem, PaymentType


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class ProductSerializer(serializers.ModelSerializer):
    """Serializer for Product model.

    ``stock_kg`` is read-only here; it only moves through orders and the
    dedicated ``stock`` action.
    """

    stock_bags = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    needs_replenishment = serializers.BooleanField(read_only=True)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'description', 'stock_kg', 'price_per_bag',
            'bag_weight_kg', 'stock_bags', 'needs_replenishment',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'stock_kg', 'created_at', 'updated_at']


class StockUpdateSerializer(serializers.Serializer):
    """Absolute stock level in kg; negative values are accepted (oversold)."""

    stock_kg = serializers.DecimalField(max_digits=14, decimal_places=3)


class ProductPerformanceSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    name = serializers.CharField()
    times_ordered = serializers.IntegerField()
    total_bags_sold = serializers.IntegerField()
    total_kg_sold = serializers.DecimalField(max_digits=16, decimal_places=3)
    total_revenue = serializers.DecimalField(max_digits=16, decimal_places=2)


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

class CustomerSerializer(serializers.ModelSerializer):
    """Serializer for Customer model.

    ``risk_status`` is the classifier output; ``status`` is the stored value
    and may differ when the debt is above the risk threshold.
    """

    risk_status = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = [
            'id', 'name', 'shop_name', 'phone', 'location_geo',
            'trust_score', 'total_debt', 'status', 'risk_status',
            'created_at',
        ]
        read_only_fields = ['id', 'risk_status', 'created_at']

    def get_risk_status(self, obj) -> str:
        return classify_customer(obj).value


class CustomerSummarySerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    shop_name = serializers.CharField()
    phone = serializers.CharField()
    trust_score = serializers.IntegerField()
    total_debt = serializers.DecimalField(max_digits=14, decimal_places=2)
    status = serializers.CharField()
    total_orders = serializers.IntegerField()
    cash_sales = serializers.DecimalField(max_digits=16, decimal_places=2)
    credit_sales = serializers.DecimalField(max_digits=16, decimal_places=2)
    last_order_date = serializers.DateField(allow_null=True)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

class OrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            'id', 'product', 'product_name', 'quantity_bags',
            'quantity_kg', 'price_per_bag', 'subtotal',
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders. Line items are added by the views."""

    customer_name = serializers.CharField(source='customer.name', read_only=True)
    invoice_number = serializers.CharField(read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'invoice_number', 'customer', 'customer_name',
            'total_amount', 'payment_type', 'is_paid', 'order_date',
            'created_at',
        ]
        read_only_fields = fields


class OrderLineSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    # Range and integrality are checked by the order processor so that the
    # API and direct callers get the same InvalidQuantity error.
    quantity_bags = serializers.DecimalField(max_digits=12, decimal_places=3)


class OrderCreateSerializer(serializers.Serializer):
    """Input for ``POST /orders/``."""

    customer_id = serializers.UUIDField()
    payment_type = serializers.ChoiceField(choices=PaymentType.choices)
    items = OrderLineSerializer(many=True, allow_empty=True)
    order_date = serializers.DateField(required=False)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def _amount(**kwargs):
    return serializers.DecimalField(
        max_digits=16, decimal_places=2, coerce_to_string=False, **kwargs,
    )


class TopDebtorSerializer(serializers.Serializer):
    name = serializers.CharField()
    shop_name = serializers.CharField()
    debt = _amount()
    trust_score = serializers.IntegerField()


class WeeklySalesSerializer(serializers.Serializer):
    date = serializers.CharField()
    cash = _amount()
    credit = _amount()
    total = _amount()


class ProductRevenueSerializer(serializers.Serializer):
    name = serializers.CharField()
    revenue = _amount()
    quantity = serializers.IntegerField()


class DashboardStatsSerializer(serializers.Serializer):
    """Serializer for ``reports.services.DashboardStats`` (camelCase keys)."""

    totalRevenue = _amount(source='total_revenue')
    cashRevenue = _amount(source='cash_revenue')
    creditRevenue = _amount(source='credit_revenue')
    totalOrders = serializers.IntegerField(source='total_orders')
    totalCustomers = serializers.IntegerField(source='total_customers')
    riskCustomers = serializers.IntegerField(source='risk_customers')
    vipCustomers = serializers.IntegerField(source='vip_customers')
    topDebtors = TopDebtorSerializer(source='top_debtors', many=True)
    weeklySales = WeeklySalesSerializer(source='weekly_sales', many=True)
    productPerformance = ProductRevenueSerializer(source='product_performance', many=True)
    isFallback = serializers.BooleanField(source='is_fallback')
    isEmpty = serializers.BooleanField(source='is_empty')
