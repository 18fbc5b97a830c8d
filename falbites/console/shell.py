"""
Navigation shell: the route table of each dashboard, the collapsible sidebar
and the authentication gate in front of every page.
"""
import logging
from collections import namedtuple

from .api import ApiClient
from .pages import (
    AdminLoginPage, VendorLoginPage,
    ProductPage, ProductStatusPage, CategoryPage, TopCategoryPage, SubCategoryPage, BrandPage,
    VendorProductPage, SubscriptionPage, DailyTipPage, SubscriptionOrderPage,
    UserPage, ManagerPage, VendorPage, FranchisePage,
    DeliveryPartnerPage, PartnerVerificationPage, PayoutPage, BoxPage, BulkDeliveryPage,
    UnavailableLocationPage, ReviewPage, CategoryChoicePage, ProductOrderPage, OrderDeliveryPage,
    AttendancePage, SettingsPage, DashboardPage
)
from .session import ADMIN, VENDOR, Session
from .storage import LocalStorage

logger = logging.getLogger(__name__)

Route = namedtuple('Route', ['path', 'title', 'controller'])

ADMIN_LOGIN_PATH = '/login'
VENDOR_LOGIN_PATH = '/vendor-auth'

ADMIN_ROUTES = (
    Route('/products', 'Products', ProductPage),
    Route('/product-status', 'Product status', ProductStatusPage),
    Route('/categories', 'Categories', CategoryPage),
    Route('/top-categories', 'Top categories', TopCategoryPage),
    Route('/sub-categories', 'Sub categories', SubCategoryPage),
    Route('/brands', 'Brands', BrandPage),
    Route('/category-choice', 'Category choices', CategoryChoicePage),
    Route('/product-orders', 'Product orders', ProductOrderPage),
    Route('/subscriptions', 'Subscriptions', SubscriptionPage),
    Route('/subscription-order', 'Subscription orders', SubscriptionOrderPage),
    Route('/orders', 'Orders', OrderDeliveryPage),
    Route('/daily-tips', 'Daily tips', DailyTipPage),
    Route('/users', 'Users', UserPage),
    Route('/manager-management', 'Managers', ManagerPage),
    Route('/vendors', 'Vendors', VendorPage),
    Route('/franchise', 'Franchises', FranchisePage),
    Route('/delivery-partner', 'Delivery partners', DeliveryPartnerPage),
    Route('/deliver-attendance', 'Delivery attendance', AttendancePage),
    Route('/delivery-partner-verification', 'Partner verification', PartnerVerificationPage),
    Route('/payout', 'Payouts', PayoutPage),
    Route('/box-info', 'Box info', BoxPage),
    Route('/bulk-orders', 'Bulk deliveries', BulkDeliveryPage),
    Route('/unavailable-locations', 'Unavailable locations', UnavailableLocationPage),
    Route('/reviews', 'Reviews', ReviewPage),
    Route('/settings', 'Settings', SettingsPage),
    Route('/dashboard', 'Dashboard', DashboardPage),
)

VENDOR_ROUTES = (
    Route('/', 'Products', VendorProductPage),
    Route('/orders', 'Orders', ProductOrderPage),
)

APPS = {
    ADMIN: (ADMIN_ROUTES, ADMIN_LOGIN_PATH, AdminLoginPage),
    VENDOR: (VENDOR_ROUTES, VENDOR_LOGIN_PATH, VendorLoginPage),
}


class UnknownRoute(LookupError):
    pass


def normalize_path(path):
    path = '/' + (path or '').strip().strip('/')
    return path


class Shell:
    def __init__(self, app=ADMIN, client=None, storage=None, session=None):
        self.app = app
        self.routes, self.login_path, self.login_page = APPS[app]
        self.storage = storage or LocalStorage()
        self.session = session or Session(app, self.storage)
        self.client = client or ApiClient()
        self.client.token = self.session.token
        self.sidebar_open = True
        self.current = None
        self.current_path = None

    @property
    def home_path(self):
        return self.routes[0].path

    def toggle_sidebar(self):
        self.sidebar_open = not self.sidebar_open
        return self.sidebar_open

    def sidebar(self):
        """``(path, title, active)`` for every route"""
        return [(route.path, route.title, route.path == self.current_path) for route in self.routes]

    def resolve(self, path):
        path = normalize_path(path)
        for route in self.routes:
            if route.path == path:
                return route
        # Route lookups by title or bare name ("vendors") are accepted too
        name = path.strip('/').lower()
        for route in self.routes:
            if route.title.lower() == name or route.path.strip('/') == name:
                return route
        raise UnknownRoute(f"No page at '{path}'")

    def navigate(self, path):
        """
        Mount the page at ``path`` and return its controller. Anonymous
        sessions always land on the login page; an authenticated session
        asking for the login page lands on the home page.
        """
        path = normalize_path(path)
        if not self.session.is_authenticated:
            if path != self.login_path:
                logger.debug(f"Redirecting anonymous session from {path} to {self.login_path}")
            controller_class, path = self.login_page, self.login_path
        else:
            if path == self.login_path:
                path = self.home_path
            route = self.resolve(path)
            controller_class, path = route.controller, route.path

        if self.current is not None:
            self.current.unmount()
        self.current = controller_class(self.client, session=self.session)
        self.current_path = path
        self.current.mount()
        return self.current

    def login(self, data):
        page = self.navigate(self.login_path)
        if not page.submit(data):
            return page
        return self.navigate(self.home_path)

    def logout(self):
        self.session.logout()
        self.client.token = None
        return self.navigate(self.login_path)
