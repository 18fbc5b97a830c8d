"""
Tests for categories, brands, products, category choices and product orders
"""
import json
import tempfile
from decimal import Decimal

from django.core.cache import cache
from django.test import TestCase, override_settings
from rest_framework import status

from falbites.catalog.models import Brand, Category, CategoryChoice, Product, ProductOrder, ProductType
from falbites.core.cache_utils import CATEGORY_LIST_CACHE_KEY
from falbites.core.test_utils import TestDataFactory, AuthenticatedAPIClient, make_png


@override_settings(MEDIA_ROOT=tempfile.mkdtemp())
class CategoryAPITests(TestCase):
    """Test category, top category and sub category endpoints"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_create_with_upload(self):
        """Test creating a category with an uploaded image"""
        response = self.client.post(
            '/api/v1/categories/', {'title': 'Fruits', 'image': make_png('fruits.png')}, format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['data']['image'].endswith('-fruits.png'))

    def test_create_requires_image(self):
        """Test that a category needs an image"""
        response = self.client.post('/api/v1/categories/', {'title': 'Fruits'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('image', response.data['errors'])
        self.assertFalse(Category.objects.exists())

    def test_list_is_cached_and_invalidated(self):
        """Test that the cached category list is dropped on writes"""
        TestDataFactory.create_category(title='Fruits')
        response = self.client.get('/api/v1/categories/')
        self.assertEqual([row['title'] for row in response.data['data']], ['Fruits'])
        self.assertIsNotNone(cache.get(CATEGORY_LIST_CACHE_KEY))

        TestDataFactory.create_category(title='Vegetables')
        response = self.client.get('/api/v1/categories/')
        self.assertEqual([row['title'] for row in response.data['data']], ['Fruits', 'Vegetables'])

    def test_vendor_can_read_but_not_write(self):
        """Test that vendors have read-only access"""
        self.client.authenticate_vendor(TestDataFactory.create_vendor())
        response = self.client.get('/api/v1/categories/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.post('/api/v1/categories/', {'title': 'X'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_title_keeps_image(self):
        """Test that renaming keeps the stored image"""
        category = TestDataFactory.create_category(title='Old')
        response = self.client.patch(f'/api/v1/categories/{category.pk}/', {'title': 'New'}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        category.refresh_from_db()
        self.assertEqual(category.title, 'New')
        self.assertTrue(category.image)

    def test_top_and_sub_category_filters(self):
        """Test filtering children by their parent"""
        fruits = TestDataFactory.create_category(title='Fruits')
        dairy = TestDataFactory.create_category(title='Dairy')
        exotic = TestDataFactory.create_top_category(category=fruits, title='Exotic')
        TestDataFactory.create_top_category(category=dairy, title='Milk')
        TestDataFactory.create_sub_category(top_category=exotic, title='Kiwi')

        response = self.client.get('/api/v1/topcategories/', {'categoryId': fruits.pk})
        self.assertEqual([row['title'] for row in response.data['data']], ['Exotic'])
        self.assertEqual(response.data['data'][0]['category']['title'], 'Fruits')

        response = self.client.get('/api/v1/subcategories/', {'topCategoryId': exotic.pk})
        self.assertEqual([row['title'] for row in response.data['data']], ['Kiwi'])

    def test_malformed_parent_filters(self):
        """Test that non-numeric parent ids are rejected instead of ignored"""
        TestDataFactory.create_top_category(category=TestDataFactory.create_category(title='Fruits'))

        response = self.client.get('/api/v1/topcategories/', {'categoryId': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('categoryId', response.data['errors'])

        response = self.client.get('/api/v1/subcategories/', {'topCategoryId': 'x1'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('topCategoryId', response.data['errors'])

    def test_top_category_needs_existing_parent(self):
        """Test that a top category needs an existing category"""
        response = self.client.post(
            '/api/v1/topcategories/',
            {'title': 'Orphan', 'categoryId': 99999, 'image': make_png()},
            format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('categoryId', response.data['errors'])

    def test_missing_category(self):
        """Test the not found error for an unknown category"""
        response = self.client.get('/api/v1/categories/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Category not found')


@override_settings(MEDIA_ROOT=tempfile.mkdtemp())
class BrandAPITests(TestCase):
    """Test brand endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())

    def test_pagination_and_search(self):
        """Test brand pagination and title search"""
        for title in ('Amul', 'Britannia', 'Cadbury', 'Dabur'):
            TestDataFactory.create_brand(title=title)
        response = self.client.get('/api/v1/brands/', {'page': 2, 'limit': 3})
        self.assertEqual([row['title'] for row in response.data['data']], ['Dabur'])
        self.assertEqual(response.data['pagination'], {'current': 2, 'pages': 2, 'total': 4})

        response = self.client.get('/api/v1/brands/', {'search': 'BRIT'})
        self.assertEqual([row['title'] for row in response.data['data']], ['Britannia'])

    def test_create_requires_title(self):
        """Test that a brand needs a title"""
        response = self.client.post('/api/v1/brands/', {'image': make_png()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Title and image are required')

    def test_duplicate_title_case_insensitive(self):
        """Test that brand titles are unique ignoring case"""
        TestDataFactory.create_brand(title='Amul')
        response = self.client.post(
            '/api/v1/brands/', {'title': 'amul', 'image': make_png()}, format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(Brand.objects.count(), 1)

    def test_patch_and_delete(self):
        """Test patching and deleting a brand"""
        brand = TestDataFactory.create_brand(title='Amul')
        response = self.client.patch(f'/api/v1/brands/{brand.pk}/', {'title': 'Amul Dairy'}, format='multipart')
        self.assertEqual(response.data['data']['title'], 'Amul Dairy')
        response = self.client.delete(f'/api/v1/brands/{brand.pk}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Brand.objects.exists())


class ProductAPITests(TestCase):
    """Test product endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.admin = TestDataFactory.create_user()
        self.client.authenticate_user(self.admin)
        self.category = TestDataFactory.create_category(title='Fruits')

    def product_payload(self, **overrides):
        data = {
            'title': 'Alphonso Mango',
            'description': 'Sweet mangoes from Ratnagiri',
            'category': self.category.pk,
            'weightOrCount': '1 dozen',
            'tag': ['seasonal'],
            'types': [
                {'title': '6 pcs', 'price': '450.00', 'withoutDiscountPrice': '500.00'},
                {'title': '12 pcs', 'price': '850.00', 'withoutDiscountPrice': '1000.00'},
            ],
        }
        data.update(overrides)
        return data

    def test_admin_product_is_approved(self):
        """Test that admin products are approved on creation"""
        response = self.client.post('/api/v1/products/', self.product_payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertEqual(data['status'], 'success')
        self.assertEqual([t['title'] for t in data['types']], ['6 pcs', '12 pcs'])
        self.assertEqual(data['category']['title'], 'Fruits')

    def test_vendor_product_is_pending_and_owned(self):
        """Test that vendor products wait for review and belong to the vendor"""
        vendor = TestDataFactory.create_vendor()
        other = TestDataFactory.create_vendor()
        self.client.authenticate_vendor(vendor)
        response = self.client.post(
            '/api/v1/products/', self.product_payload(creatorId=other.pk), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], 'pending')
        self.assertEqual(response.data['data']['creatorId'], vendor.pk)

    def test_product_requires_types(self):
        """Test that a product needs at least one type"""
        response = self.client.post('/api/v1/products/', self.product_payload(types=[]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Product.objects.exists())

    def test_multipart_types_are_decoded(self):
        """Test that JSON encoded types in multipart bodies are decoded"""
        payload = self.product_payload()
        payload['types'] = json.dumps(payload['types'])
        payload['tag'] = json.dumps(payload['tag'])
        response = self.client.post('/api/v1/products/', payload, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(ProductType.objects.count(), 2)

    def test_update_replaces_types(self):
        """Test that sending types replaces the variant list"""
        product = TestDataFactory.create_product(category=self.category)
        response = self.client.put(f'/api/v1/products/{product.pk}/', {
            'types': [{'title': 'Family pack', 'price': '99.00', 'withoutDiscountPrice': '120.00'}]
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(list(product.types.values_list('title', flat=True)), ['Family pack'])

    def test_vendor_cannot_edit_other_vendors_product(self):
        """Test that vendors cannot edit other vendors' products"""
        owner = TestDataFactory.create_vendor()
        product = TestDataFactory.create_product(creator=owner, status='pending')
        self.client.authenticate_vendor(TestDataFactory.create_vendor())
        response = self.client.put(f'/api/v1/products/{product.pk}/', {'title': 'Hijack'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_search_by_text_and_category(self):
        """Test product search by text and category"""
        veg = TestDataFactory.create_category(title='Vegetables')
        TestDataFactory.create_product(title='Red Apple', category=self.category)
        TestDataFactory.create_product(title='Green Apple', category=veg)
        TestDataFactory.create_product(title='Banana', category=self.category)

        response = self.client.get('/api/v1/products/search/', {'q': 'apple'})
        self.assertEqual({row['title'] for row in response.data['data']}, {'Red Apple', 'Green Apple'})

        response = self.client.get('/api/v1/products/search/', {'q': 'apple', 'category': self.category.pk})
        self.assertEqual([row['title'] for row in response.data['data']], ['Red Apple'])

    def test_search_rejects_malformed_filters(self):
        """Test that a non-numeric category or unknown status is a 400, not an unfiltered list"""
        TestDataFactory.create_product(title='Red Apple', category=self.category)

        response = self.client.get('/api/v1/products/search/', {'category': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertIn('category', response.data['errors'])
        self.assertTrue(response.data['error'].startswith('category: '))

        response = self.client.get('/api/v1/products/search/', {'status': 'maybe'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data['errors'])

    def test_products_by_creator(self):
        """Test listing one vendor's products"""
        vendor = TestDataFactory.create_vendor()
        TestDataFactory.create_product(creator=vendor)
        TestDataFactory.create_product()
        response = self.client.get(f'/api/v1/products/creator/{vendor.pk}/')
        self.assertEqual(response.data['count'], 1)

        self.client.authenticate_vendor(TestDataFactory.create_vendor())
        response = self.client.get(f'/api/v1/products/creator/{vendor.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_status_change(self):
        """Test approving a product"""
        product = TestDataFactory.create_product(status='pending', price=Decimal('10.00'))
        response = self.client.patch(f'/api/v1/products/status/{product.pk}/', {'status': 'failed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], "Status updated to 'failed'")
        product.refresh_from_db()
        self.assertEqual(product.status, 'failed')

    def test_status_change_rejects_unknown_value(self):
        """Test that an unknown product status is rejected"""
        product = TestDataFactory.create_product()
        response = self.client.patch(f'/api/v1/products/status/{product.pk}/', {'status': 'maybe'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Invalid status. Allowed values: pending, success, failed')

    def test_vendor_cannot_change_status(self):
        """Test that vendors cannot change product status"""
        product = TestDataFactory.create_product(status='pending')
        self.client.authenticate_vendor(TestDataFactory.create_vendor())
        response = self.client.patch(f'/api/v1/products/status/{product.pk}/', {'status': 'success'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


@override_settings(MEDIA_ROOT=tempfile.mkdtemp())
class CategoryChoiceAPITests(TestCase):
    """Test home screen category choice endpoints"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_user())
        self.product = TestDataFactory.create_product(title='Alphonso Mango')

    def test_create_product_choice_with_image(self):
        """Test creating a product choice with an uploaded image"""
        response = self.client.post(
            '/api/v1/category-choices/',
            {'title': 'Mango Mania', 'types': 'product', 'productId': self.product.pk, 'image': make_png('mango.png')},
            format='multipart'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['productId'], self.product.pk)
        self.assertTrue(response.data['data']['image'].endswith('-mango.png'))

    def test_image_is_optional(self):
        """Test creating a subscription choice without an image"""
        response = self.client.post(
            '/api/v1/category-choices/',
            {'title': 'Morning Fruits', 'types': 'subscription', 'category': 'Fruits'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['image'], '')
        self.assertIsNone(response.data['data']['productId'])

    def test_target_must_match_type(self):
        """Test that product choices need a product and subscription choices a category"""
        response = self.client.post(
            '/api/v1/category-choices/', {'title': 'No Product', 'types': 'product'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('productId', response.data['errors'])
        response = self.client.post(
            '/api/v1/category-choices/', {'title': 'No Category', 'types': 'subscription'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category', response.data['errors'])
        self.assertFalse(CategoryChoice.objects.exists())

    def test_duplicate_title(self):
        """Test that choice titles are unique"""
        TestDataFactory.create_category_choice(title='Mango Mania', product=self.product)
        response = self.client.post(
            '/api/v1/category-choices/',
            {'title': 'Mango Mania', 'types': 'product', 'productId': self.product.pk},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('title', response.data['errors'])

    def test_partial_update_keeps_stored_target(self):
        """Test that renaming a product choice does not need the product again"""
        choice = TestDataFactory.create_category_choice(product=self.product)
        response = self.client.put(f'/api/v1/category-choices/{choice.pk}/', {'title': 'Renamed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['title'], 'Renamed')
        self.assertEqual(response.data['data']['productId'], self.product.pk)

        response = self.client.patch(
            f'/api/v1/category-choices/{choice.pk}/', {'types': 'subscription'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('category', response.data['errors'])

    def test_list_get_and_delete(self):
        """Test listing, reading and deleting choices"""
        first = TestDataFactory.create_category_choice(title='B Choice', types='subscription', category='Fruits')
        TestDataFactory.create_category_choice(title='A Choice', product=self.product)
        response = self.client.get('/api/v1/category-choices/')
        self.assertEqual([row['title'] for row in response.data['data']], ['A Choice', 'B Choice'])

        response = self.client.get(f'/api/v1/category-choices/{first.pk}/')
        self.assertEqual(response.data['data']['category'], 'Fruits')

        response = self.client.delete(f'/api/v1/category-choices/{first.pk}/')
        self.assertEqual(response.data['message'], 'Category deleted successfully')
        response = self.client.get(f'/api/v1/category-choices/{first.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Category not found')

    def test_vendor_cannot_manage_choices(self):
        """Test that choices are admin only"""
        self.client.authenticate_vendor(TestDataFactory.create_vendor())
        response = self.client.get('/api/v1/category-choices/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class ProductOrderAPITests(TestCase):
    """Test product order endpoints for admins and vendors"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.vendor = TestDataFactory.create_vendor()
        self.own_product = TestDataFactory.create_product(title='Vendor Mango', creator=self.vendor)
        self.other_product = TestDataFactory.create_product(title='Admin Banana')

    def test_admin_lists_all_orders_with_filters(self):
        """Test that admins see every order and can filter by user and status"""
        self.client.authenticate_user(TestDataFactory.create_user())
        user = TestDataFactory.create_customer(name='Asha')
        TestDataFactory.create_product_order(product=self.own_product, user=user)
        TestDataFactory.create_product_order(product=self.other_product, status='Delivered')

        response = self.client.get('/api/v1/product-orders/')
        self.assertEqual(response.data['count'], 2)
        response = self.client.get('/api/v1/product-orders/', {'userId': user.pk})
        self.assertEqual(response.data['data'][0]['userId']['name'], 'Asha')
        self.assertEqual(response.data['data'][0]['productData']['title'], 'Vendor Mango')
        response = self.client.get('/api/v1/product-orders/', {'status': 'Delivered'})
        self.assertEqual(response.data['count'], 1)
        response = self.client.get('/api/v1/product-orders/', {'status': 'Lost'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_vendor_sees_only_orders_of_own_products(self):
        """Test that a vendor's list and detail are limited to its products"""
        mine = TestDataFactory.create_product_order(product=self.own_product)
        theirs = TestDataFactory.create_product_order(product=self.other_product)
        self.client.authenticate_vendor(self.vendor)

        response = self.client.get('/api/v1/product-orders/')
        self.assertEqual([row['_id'] for row in response.data['data']], [mine.pk])
        response = self.client.get(f'/api/v1/product-orders/{theirs.pk}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Order not found')

    def test_vendor_updates_status(self):
        """Test that a vendor can move its own order to delivered"""
        order = TestDataFactory.create_product_order(product=self.own_product)
        self.client.authenticate_vendor(self.vendor)
        response = self.client.patch(
            f'/api/v1/product-orders/{order.pk}/',
            {'status': 'Delivered', 'deliveryDate': '2026-03-01', 'totalPrice': '1.00'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Order status updated successfully')
        order.refresh_from_db()
        self.assertEqual(order.status, 'Delivered')
        self.assertEqual(str(order.delivery_date), '2026-03-01')
        self.assertEqual(order.total_price, Decimal('100.00'))

    def test_unknown_status_is_rejected(self):
        """Test that statuses outside the order statuses are rejected"""
        order = TestDataFactory.create_product_order()
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.patch(f'/api/v1/product-orders/{order.pk}/', {'status': 'Lost'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('status', response.data['errors'])

    def test_only_admins_delete(self):
        """Test that vendors cannot delete orders and admins can"""
        order = TestDataFactory.create_product_order(product=self.own_product)
        self.client.authenticate_vendor(self.vendor)
        response = self.client.delete(f'/api/v1/product-orders/{order.pk}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(ProductOrder.objects.filter(pk=order.pk).exists())

        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.delete(f'/api/v1/product-orders/{order.pk}/')
        self.assertEqual(response.data['message'], 'Order deleted successfully')
        self.assertFalse(ProductOrder.objects.exists())
