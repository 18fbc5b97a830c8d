import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from falbites.core.cache_utils import cached_list, CATEGORY_LIST_CACHE_KEY
from falbites.core.pagination import paginate
from falbites.core.parsers import request_payload
from falbites.core.permissions import IsAdminOrVendorReadOnly, IsPlatformAdmin, is_vendor
from falbites.core.responses import (
    success_response, error_response, validation_error_response, filter_error_response
)
from falbites.core.uploads import attach_image, images_from_request
from .filters import ProductFilter, BrandFilter, TopCategoryFilter, SubCategoryFilter, ProductOrderFilter
from .models import Category, TopCategory, SubCategory, Brand, Product, CategoryChoice, ProductOrder
from .serializers import (
    CategorySerializer, TopCategorySerializer, SubCategorySerializer, BrandSerializer,
    ProductSerializer, ProductWriteSerializer, ProductStatusSerializer,
    CategoryChoiceSerializer, ProductOrderSerializer
)

logger = logging.getLogger(__name__)


# Category views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrVendorReadOnly])
def category_list_create(request):
    """List all categories (cached) or create a new category"""
    if request.method == 'GET':
        data = cached_list(
            CATEGORY_LIST_CACHE_KEY,
            lambda: list(CategorySerializer(Category.objects.all(), many=True).data),
        )
        return success_response(data=data)

    payload = attach_image(request, request_payload(request), required=True)
    serializer = CategorySerializer(data=payload)
    if serializer.is_valid():
        category = serializer.save()
        logger.info(f"Category {category.pk} ({category.title}) created")
        return success_response(status.HTTP_201_CREATED, message='Category created successfully', data=serializer.data)
    return validation_error_response(serializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrVendorReadOnly])
def category_detail(request, pk):
    """Retrieve, update or delete a category"""
    category = Category.objects.filter(pk=pk).first()
    if category is None:
        return error_response('Category not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return success_response(data=CategorySerializer(category).data)
    elif request.method in ('PUT', 'PATCH'):
        payload = attach_image(request, request_payload(request))
        serializer = CategorySerializer(category, data=payload, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Category {pk} updated")
            return success_response(message='Category updated successfully', data=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        category.delete()
        logger.info(f"Category {pk} deleted")
        return success_response(message='Category deleted successfully')


@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrVendorReadOnly])
def top_category_list_create(request):
    """List top categories (optionally of one category) or create one"""
    if request.method == 'GET':
        filterset = TopCategoryFilter(request.query_params, queryset=TopCategory.objects.select_related('category'))
        if not filterset.is_valid():
            return filter_error_response(filterset)
        return success_response(data=TopCategorySerializer(filterset.qs, many=True).data)

    payload = attach_image(request, request_payload(request), required=True)
    serializer = TopCategorySerializer(data=payload)
    if serializer.is_valid():
        top_category = serializer.save()
        logger.info(f"Top category {top_category.pk} ({top_category.title}) created")
        return success_response(status.HTTP_201_CREATED, message='Top category created successfully', data=serializer.data)
    return validation_error_response(serializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrVendorReadOnly])
def top_category_detail(request, pk):
    """Retrieve, update or delete a top category"""
    top_category = TopCategory.objects.select_related('category').filter(pk=pk).first()
    if top_category is None:
        return error_response('Top category not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return success_response(data=TopCategorySerializer(top_category).data)
    elif request.method in ('PUT', 'PATCH'):
        payload = attach_image(request, request_payload(request))
        serializer = TopCategorySerializer(top_category, data=payload, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Top category {pk} updated")
            return success_response(message='Top category updated successfully', data=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        top_category.delete()
        logger.info(f"Top category {pk} deleted")
        return success_response(message='Top category deleted successfully')


@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrVendorReadOnly])
def sub_category_list_create(request):
    """List sub categories (optionally of one top category) or create one"""
    if request.method == 'GET':
        filterset = SubCategoryFilter(request.query_params, queryset=SubCategory.objects.select_related('top_category'))
        if not filterset.is_valid():
            return filter_error_response(filterset)
        return success_response(data=SubCategorySerializer(filterset.qs, many=True).data)

    payload = attach_image(request, request_payload(request), required=True)
    serializer = SubCategorySerializer(data=payload)
    if serializer.is_valid():
        sub_category = serializer.save()
        logger.info(f"Sub category {sub_category.pk} ({sub_category.title}) created")
        return success_response(status.HTTP_201_CREATED, message='Sub category created successfully', data=serializer.data)
    return validation_error_response(serializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrVendorReadOnly])
def sub_category_detail(request, pk):
    """Retrieve, update or delete a sub category"""
    sub_category = SubCategory.objects.select_related('top_category').filter(pk=pk).first()
    if sub_category is None:
        return error_response('Sub category not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return success_response(data=SubCategorySerializer(sub_category).data)
    elif request.method in ('PUT', 'PATCH'):
        payload = attach_image(request, request_payload(request))
        serializer = SubCategorySerializer(sub_category, data=payload, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Sub category {pk} updated")
            return success_response(message='Sub category updated successfully', data=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        sub_category.delete()
        logger.info(f"Sub category {pk} deleted")
        return success_response(message='Sub category deleted successfully')


# Brand views
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrVendorReadOnly])
def brand_list_create(request):
    """Paginated, searchable brand list or create a new brand"""
    if request.method == 'GET':
        filterset = BrandFilter(request.query_params, queryset=Brand.objects.order_by('title'))
        if not filterset.is_valid():
            return filter_error_response(filterset)
        brands, pagination = paginate(filterset.qs, request.query_params, default_limit=50)
        return success_response(data=BrandSerializer(brands, many=True).data, pagination=pagination)

    payload = request_payload(request)
    if not str(payload.get('title') or '').strip():
        return error_response('Title and image are required')
    payload = attach_image(request, payload, required=True)
    serializer = BrandSerializer(data=payload)
    if serializer.is_valid():
        brand = serializer.save()
        logger.info(f"Brand {brand.pk} ({brand.title}) created")
        return success_response(status.HTTP_201_CREATED, message='Brand created successfully', data=serializer.data)
    return validation_error_response(serializer)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAdminOrVendorReadOnly])
def brand_detail(request, pk):
    """Retrieve, update or delete a brand"""
    brand = Brand.objects.filter(pk=pk).first()
    if brand is None:
        return error_response('Brand not found', status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return success_response(data=BrandSerializer(brand).data)
    elif request.method == 'PATCH':
        payload = attach_image(request, request_payload(request))
        serializer = BrandSerializer(brand, data=payload, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Brand {pk} updated")
            return success_response(message='Brand updated successfully', data=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        brand.delete()
        logger.info(f"Brand {pk} deleted")
        return success_response(message='Brand deleted successfully')


# Product views
def product_queryset():
    return Product.objects.select_related(
        'category', 'top_category', 'sub_category', 'brand'
    ).prefetch_related('types')


def product_write_payload(request):
    """Request payload with vendor ownership enforced"""
    payload = request_payload(request, json_fields=('types', 'tag'))
    if is_vendor(request.user):
        payload['creatorId'] = request.user.pk
    return payload


def can_edit_product(user, product):
    return not is_vendor(user) or product.creator_id == user.pk


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def product_list_create(request):
    """List all products newest first or create a new product"""
    if request.method == 'GET':
        return success_response(data=ProductSerializer(product_queryset(), many=True).data)

    serializer = ProductWriteSerializer(
        data=product_write_payload(request),
        context={'type_images': images_from_request(request)},
    )
    if serializer.is_valid():
        product = serializer.save()
        logger.info(f"Product {product.pk} ({product.title}) created with status {product.status}")
        return success_response(
            status.HTTP_201_CREATED,
            message='Product created successfully',
            data=ProductSerializer(product_queryset().get(pk=product.pk)).data,
        )
    return validation_error_response(serializer)


@api_view(['GET'])
@permission_classes([IsAdminOrVendorReadOnly])
def product_search(request):
    """Search products by ``q`` (title/description) and ``category``"""
    filterset = ProductFilter(request.query_params, queryset=product_queryset())
    if not filterset.is_valid():
        logger.warning(f"Rejected product search {dict(request.query_params)}: {filterset.errors.as_json()}")
        return filter_error_response(filterset)
    return success_response(data=ProductSerializer(filterset.qs, many=True).data)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def product_detail(request, pk):
    """Retrieve, update or delete a product"""
    product = product_queryset().filter(pk=pk).first()
    if product is None:
        return error_response('Product not found', status.HTTP_404_NOT_FOUND)
    if request.method != 'GET' and not can_edit_product(request.user, product):
        return error_response('You can only modify your own products', status.HTTP_403_FORBIDDEN)

    if request.method == 'GET':
        return success_response(data=ProductSerializer(product).data)
    elif request.method == 'PUT':
        serializer = ProductWriteSerializer(
            product,
            data=product_write_payload(request),
            partial=True,
            context={'type_images': images_from_request(request)},
        )
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Product {pk} updated")
            return success_response(
                message='Product updated successfully',
                data=ProductSerializer(product_queryset().get(pk=pk)).data,
            )
        return validation_error_response(serializer)
    else:  # DELETE
        product.delete()
        logger.info(f"Product {pk} deleted")
        return success_response(message='Product deleted successfully')


@api_view(['GET'])
@permission_classes([IsAdminOrVendorReadOnly])
def products_by_creator(request, creator_id):
    """Products submitted by one vendor; vendors may only list their own"""
    if is_vendor(request.user) and request.user.pk != creator_id:
        return error_response('You can only view your own products', status.HTTP_403_FORBIDDEN)
    products = product_queryset().filter(creator_id=creator_id)
    return success_response(count=len(products), data=ProductSerializer(products, many=True).data)


@api_view(['PATCH'])
@permission_classes([IsPlatformAdmin])
def product_status(request, pk):
    """Approve or reject a product"""
    serializer = ProductStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response('Invalid status. Allowed values: pending, success, failed')

    product = product_queryset().filter(pk=pk).first()
    if product is None:
        return error_response('Product not found', status.HTTP_404_NOT_FOUND)

    new_status = serializer.validated_data['status']
    product.status = new_status
    product.save(update_fields=['status', 'updated_at'])
    logger.info(f"Product {pk} status set to {new_status}")
    return success_response(
        message=f"Status updated to '{new_status}'",
        data=ProductSerializer(product).data,
    )


# Category choice views
@api_view(['GET', 'POST'])
@permission_classes([IsPlatformAdmin])
def category_choice_list_create(request):
    """List home screen category choices or create one (image optional)"""
    if request.method == 'GET':
        choices = CategoryChoice.objects.select_related('product')
        return success_response(data=CategoryChoiceSerializer(choices, many=True).data)

    payload = attach_image(request, request_payload(request))
    serializer = CategoryChoiceSerializer(data=payload)
    if serializer.is_valid():
        choice = serializer.save()
        logger.info(f"Category choice {choice.pk} ({choice.title}, {choice.types}) created")
        return success_response(status.HTTP_201_CREATED, data=serializer.data)
    return validation_error_response(serializer)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsPlatformAdmin])
def category_choice_detail(request, pk):
    """Retrieve, update or delete a category choice"""
    choice = CategoryChoice.objects.filter(pk=pk).first()
    if choice is None:
        return error_response('Category not found', status.HTTP_404_NOT_FOUND, key='message')

    if request.method == 'GET':
        return success_response(data=CategoryChoiceSerializer(choice).data)
    elif request.method in ('PUT', 'PATCH'):
        payload = attach_image(request, request_payload(request))
        serializer = CategoryChoiceSerializer(choice, data=payload, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Category choice {pk} updated")
            return success_response(data=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        choice.delete()
        logger.info(f"Category choice {pk} deleted")
        return success_response(message='Category deleted successfully')


# Product order views
def product_order_queryset(user):
    """Orders visible to ``user``; vendors only see orders of their own products"""
    queryset = ProductOrder.objects.select_related('user', 'product')
    if is_vendor(user):
        queryset = queryset.filter(product__creator_id=user.pk)
    return queryset


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def product_order_list(request):
    """Product orders newest first, optionally by user or status"""
    filterset = ProductOrderFilter(request.query_params, queryset=product_order_queryset(request.user))
    if not filterset.is_valid():
        return filter_error_response(filterset)
    orders = filterset.qs
    return success_response(count=len(orders), data=ProductOrderSerializer(orders, many=True).data)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def product_order_detail(request, pk):
    """Retrieve, update (status, delivery date, delivery partner) or delete a product order"""
    order = product_order_queryset(request.user).filter(pk=pk).first()
    if order is None:
        return error_response('Order not found', status.HTTP_404_NOT_FOUND, key='message')

    if request.method == 'GET':
        return success_response(data=ProductOrderSerializer(order).data)
    elif request.method == 'PATCH':
        serializer = ProductOrderSerializer(order, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Product order {pk} updated: {dict(serializer.validated_data)}")
            return success_response(message='Order status updated successfully', data=serializer.data)
        return validation_error_response(serializer)
    else:  # DELETE
        if is_vendor(request.user):
            return error_response('Only admins can delete orders', status.HTTP_403_FORBIDDEN, key='message')
        order.delete()
        logger.info(f"Product order {pk} deleted")
        return success_response(message='Order deleted successfully')
