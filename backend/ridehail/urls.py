from django.contrib import admin
from django.urls import path, include

from .views import health_check

urlpatterns = [
    path('admin/', admin.site.urls),
    path("health/", health_check), # Health check endpoint
    
    # Authentication endpoints (at /api/auth/)
    path('api/auth/', include('accounts.urls')),

    # Customer ride commands (request, join, cancel, rate, history)
    path('api/customer/', include('customers.urls')),
    
    # Driver APIs (register, profile, location, availability, ride actions, history)
    path('api/driver/', include('drivers.urls')),
    
    # Ride queries (nearest drivers)
    path('api/rides/', include('rides.urls')),
]
