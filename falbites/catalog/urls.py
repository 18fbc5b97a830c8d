from django.urls import path
from .views import (
    category_list_create, category_detail,
    top_category_list_create, top_category_detail,
    sub_category_list_create, sub_category_detail,
    brand_list_create, brand_detail,
    product_list_create, product_search, product_detail,
    products_by_creator, product_status,
    category_choice_list_create, category_choice_detail,
    product_order_list, product_order_detail
)

urlpatterns = [
    # Category endpoints
    path('categories/', category_list_create, name='category-list-create'),
    path('categories/<int:pk>/', category_detail, name='category-detail'),
    path('topcategories/', top_category_list_create, name='top-category-list-create'),
    path('topcategories/<int:pk>/', top_category_detail, name='top-category-detail'),
    path('subcategories/', sub_category_list_create, name='sub-category-list-create'),
    path('subcategories/<int:pk>/', sub_category_detail, name='sub-category-detail'),

    # Brand endpoints
    path('brands/', brand_list_create, name='brand-list-create'),
    path('brands/<int:pk>/', brand_detail, name='brand-detail'),

    # Product endpoints
    path('products/', product_list_create, name='product-list-create'),
    path('products/search/', product_search, name='product-search'),
    path('products/creator/<int:creator_id>/', products_by_creator, name='product-by-creator'),
    path('products/status/<int:pk>/', product_status, name='product-status'),
    path('products/<int:pk>/', product_detail, name='product-detail'),

    # Home screen choices
    path('category-choices/', category_choice_list_create, name='category-choice-list-create'),
    path('category-choices/<int:pk>/', category_choice_detail, name='category-choice-detail'),

    # Product orders
    path('product-orders/', product_order_list, name='product-order-list'),
    path('product-orders/<int:pk>/', product_order_detail, name='product-order-detail'),
]
