"""Main API URL router for /api/v1/."""
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from api.v1 import views as v1_views

router = DefaultRouter()
router.register(r'orders', v1_views.OrderViewSet, basename='order')
router.register(r'customers', v1_views.CustomerViewSet)
router.register(r'products', v1_views.ProductViewSet)


app_name = 'api'
urlpatterns = [
    path('', include(router.urls)),

    # Auth endpoints
    path('auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),

    # Dashboard
    path('dashboard/stats/', v1_views.DashboardStatsAPIView.as_view(), name='dashboard-stats'),
]
