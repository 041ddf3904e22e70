from django.urls import path, include
from rest_framework.routers import DefaultRouter

from apps.exchange.api.v1.views import CurrencyViewSet, ExchangeViewSet

router = DefaultRouter()
router.register(r'currencies', CurrencyViewSet, basename='currency')
router.register(r'exchange', ExchangeViewSet, basename='exchange')

urlpatterns = [
    path('', include(router.urls)),
]
