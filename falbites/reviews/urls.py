from django.urls import path
from .views import review_list_create, review_delete

urlpatterns = [
    path('reviews/', review_list_create, name='review-list-create'),
    path('reviews/<int:pk>/', review_delete, name='review-delete'),
]
