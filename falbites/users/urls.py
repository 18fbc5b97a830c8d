from django.urls import path
from .views import (
    user_list, user_detail, toggle_block, add_balance, assign_franchise,
    manager_create, manager_list, manager_delete
)

urlpatterns = [
    path('users/', user_list, name='user-list'),
    path('users/<int:pk>/', user_detail, name='user-detail'),
    path('users/toggle-block/<int:pk>/', toggle_block, name='user-toggle-block'),
    path('users/add-balance/', add_balance, name='user-add-balance'),
    path('users/assign-franchise/<int:pk>/', assign_franchise, name='user-assign-franchise'),

    # Manager endpoints
    path('admin/create-manager/', manager_create, name='manager-create'),
    path('admin/get-managers/', manager_list, name='manager-list'),
    path('admin/delete-manager/<int:pk>/', manager_delete, name='manager-delete'),
]
