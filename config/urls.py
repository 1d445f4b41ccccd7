"""URL configuration for the coworking booking service.

The `urlpatterns` list routes URLs to views. It includes the Django admin,
the service root, the OpenAPI schema and the per-app routers provided by
Django Rest Framework.
"""
from django.conf import settings  # type: ignore
from django.contrib import admin  # type: ignore
from django.urls import path, include  # type: ignore
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView  # type: ignore
from rest_framework.decorators import api_view, permission_classes  # type: ignore
from rest_framework.permissions import AllowAny  # type: ignore
from rest_framework.response import Response  # type: ignore


@api_view(['GET'])
@permission_classes([AllowAny])
def service_root(request):
    """Service name, version and a map of the available endpoints."""
    return Response({
        'message': settings.SERVICE_NAME,
        'version': settings.SERVICE_VERSION,
        'endpoints': {
            'auth': '/api/v1/auth/',
            'users': '/api/v1/users/',
            'rooms': '/api/v1/rooms/',
            'bookings': '/api/v1/bookings/',
            'events': '/api/v1/bookings/events/',
            'schema': '/api/schema/',
            'docs': '/api/docs/',
        },
    })


# API versioning. v1 is our initial version; future versions can be added here.

urlpatterns = [
    path('', service_root, name='service-root'),
    path('admin/', admin.site.urls),
    # Application URLs
    path('api/v1/auth/', include(('apps.users.auth_urls', 'auth'), namespace='auth')),
    path('api/v1/users/', include('apps.users.urls')),
    path('api/v1/rooms/', include('apps.rooms.urls')),
    path('api/v1/bookings/', include('apps.bookings.urls')),
    # OpenAPI schema and docs
    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='docs'),
]
