from django.contrib import admin
from .models import Category, TopCategory, SubCategory, Brand, Product, ProductType, CategoryChoice, ProductOrder


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ['title', 'created_at']
    search_fields = ['title']
    ordering = ['title']


@admin.register(TopCategory)
class TopCategoryAdmin(admin.ModelAdmin):
    list_display = ['title', 'category', 'created_at']
    list_filter = ['category']
    search_fields = ['title', 'category__title']
    ordering = ['title']


@admin.register(SubCategory)
class SubCategoryAdmin(admin.ModelAdmin):
    list_display = ['title', 'top_category', 'created_at']
    list_filter = ['top_category']
    search_fields = ['title', 'top_category__title']
    ordering = ['title']


@admin.register(Brand)
class BrandAdmin(admin.ModelAdmin):
    list_display = ['title', 'created_at']
    search_fields = ['title']
    ordering = ['title']


class ProductTypeInline(admin.TabularInline):
    model = ProductType
    extra = 0


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['title', 'category', 'brand', 'status', 'creator', 'created_at']
    list_filter = ['status', 'category', 'brand', 'created_at']
    search_fields = ['title', 'description']
    ordering = ['-created_at']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [ProductTypeInline]


@admin.register(CategoryChoice)
class CategoryChoiceAdmin(admin.ModelAdmin):
    list_display = ['title', 'types', 'product', 'category', 'created_at']
    list_filter = ['types']
    search_fields = ['title', 'category']


@admin.register(ProductOrder)
class ProductOrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'user', 'product', 'selected_type', 'quantity', 'total_price', 'status', 'order_date']
    list_filter = ['status', 'payment_method', 'order_date']
    search_fields = ['user__name', 'user__mobile_number', 'product__title', 'address']
    ordering = ['-order_date']
