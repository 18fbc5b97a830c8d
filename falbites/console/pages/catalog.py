from falbites.console.forms import (
    ProductForm, ProductStatusForm, CategoryForm, TopCategoryForm, SubCategoryForm, BrandForm,
    CategoryChoiceForm, ProductOrderStatusForm
)
from .base import PageController


class ProductPage(PageController):
    title = 'Products'
    endpoint = 'products/'
    form_class = ProductForm
    server_search = True
    search_endpoint = 'products/search/'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.category = None

    def search_params(self, query):
        params = {'q': query}
        if self.category:
            params['category'] = self.category
        return params

    def wants_search(self, query):
        return bool(query.strip() or self.category)

    def filter_by_category(self, category_id):
        self.category = category_id
        return self.run_search(self.query)


class ProductStatusPage(PageController):
    """Admin review queue for vendor submitted products"""
    title = 'Product status'
    endpoint = 'products/'
    search_fields = ('title', 'status', 'category.title', 'brand.title')
    allow_create = False
    allow_update = False

    def pending(self):
        return [item for item in self.visible_items() if item.get('status') == 'pending']

    def set_status(self, product_id, status):
        envelope = self.action('PATCH', f'products/status/{product_id}/', ProductStatusForm, {'status': status})
        if envelope is None:
            return False
        if envelope.record:
            self.replace_item(envelope.record)
        return True


class VendorProductPage(PageController):
    """The signed-in vendor's own products"""
    title = 'My products'
    endpoint = 'products/'
    form_class = ProductForm
    search_fields = ('title', 'description', 'status', 'category.title')

    def vendor_id(self):
        profile = (self.session.profile if self.session else None) or {}
        return profile.get('_id')

    def list_path(self):
        return f'products/creator/{self.vendor_id()}/'


class CategoryPage(PageController):
    title = 'Categories'
    endpoint = 'categories/'
    form_class = CategoryForm
    search_fields = ('title',)


class TopCategoryPage(PageController):
    title = 'Top categories'
    endpoint = 'topcategories/'
    form_class = TopCategoryForm
    search_fields = ('title', 'category.title')


class SubCategoryPage(PageController):
    title = 'Sub categories'
    endpoint = 'subcategories/'
    form_class = SubCategoryForm
    search_fields = ('title', 'topCategory.title')


class BrandPage(PageController):
    """Server paginated and server searched (``search`` param)"""
    title = 'Brands'
    endpoint = 'brands/'
    form_class = BrandForm
    server_search = True
    search_param = 'search'
    update_method = 'PATCH'
    limit = 50

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.page = 1
        self.pages = 0
        self.total = 0

    def list_params(self):
        params = {'page': 1, 'limit': self.limit}
        if self.query.strip():
            params['search'] = self.query.strip()
        return params

    def search_params(self, query):
        return {'search': query.strip(), 'page': 1, 'limit': self.limit}

    def after_fetch(self, envelope):
        pagination = envelope.pagination or {}
        self.page = pagination.get('current', 1)
        self.pages = pagination.get('pages', 0)
        self.total = pagination.get('total', len(self.items))

    @property
    def has_more(self):
        return self.page < self.pages

    def load_more(self):
        """Append the next page; returns the newly loaded brands"""
        if not self.has_more:
            return []
        params = {**self.list_params(), 'page': self.page + 1}
        envelope = self.call('GET', self.list_path(), params=params)
        if envelope is None:
            return []
        new_items = list(envelope.items)
        self.items.extend(new_items)
        self.after_fetch(envelope)
        return new_items


class CategoryChoicePage(PageController):
    title = 'Category choices'
    endpoint = 'category-choices/'
    form_class = CategoryChoiceForm
    search_fields = ('title', 'types', 'category')
    update_method = 'PATCH'

    def of_type(self, kind):
        return [item for item in self.visible_items() if item.get('types') == kind]


class ProductOrderPage(PageController):
    """One-off product orders; vendors only ever see orders of their own products"""
    title = 'Product orders'
    endpoint = 'product-orders/'
    form_class = ProductOrderStatusForm
    search_fields = ('userId.name', 'userId.mobileNumber', 'productData.title', 'status', 'address')
    update_method = 'PATCH'
    allow_create = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.count = 0

    def after_fetch(self, envelope):
        self.count = envelope.extra.get('count', len(self.items))

    def set_status(self, order_id, status):
        envelope = self.action('PATCH', self.detail_path(order_id), ProductOrderStatusForm, {'status': status})
        if envelope is None:
            return False
        if envelope.record:
            self.replace_item(envelope.record)
        return True
