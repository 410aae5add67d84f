from django.urls import path
from . import views

app_name = 'rides'

urlpatterns = [
    path('nearest-drivers/', views.nearest_drivers, name='nearest-drivers'),
]
