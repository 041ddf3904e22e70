"""
Main URL configuration.
"""

from django.conf import settings
from django.contrib import admin
from django.http import JsonResponse
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView


def health_check(request):
    """Liveness probe."""
    return JsonResponse({
        'status': 'healthy',
        'environment': 'development' if settings.DEBUG else 'production',
    })


urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', include('apps.exchange.api.v1.urls')),
    path('api/auth/token/', TokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
    path('health/', health_check, name='health_check'),
]
