from django.urls import path
from .views import franchise_list_create, franchise_detail, assign_manager

urlpatterns = [
    path('franchises/', franchise_list_create, name='franchise-list-create'),
    path('franchises/<int:pk>/', franchise_detail, name='franchise-detail'),
    path('franchises/<int:pk>/assign-manager/', assign_manager, name='franchise-assign-manager'),
]
