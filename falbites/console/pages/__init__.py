from .base import PageController
from .auth import AdminLoginPage, VendorLoginPage
from .catalog import (
    ProductPage, ProductStatusPage, CategoryPage, TopCategoryPage, SubCategoryPage,
    BrandPage, VendorProductPage, CategoryChoicePage, ProductOrderPage
)
from .subscriptions import SubscriptionPage, DailyTipPage, SubscriptionOrderPage, OrderDeliveryPage
from .people import UserPage, ManagerPage, VendorPage
from .franchises import FranchisePage
from .delivery import (
    DeliveryPartnerPage, PartnerVerificationPage, PayoutPage, BoxPage, BulkDeliveryPage,
    UnavailableLocationPage, AttendancePage
)
from .reviews import ReviewPage
from .settings import SettingsPage
from .dashboard import DashboardPage

__all__ = [
    'PageController',
    'AdminLoginPage', 'VendorLoginPage',
    'ProductPage', 'ProductStatusPage', 'CategoryPage', 'TopCategoryPage', 'SubCategoryPage',
    'BrandPage', 'VendorProductPage', 'CategoryChoicePage', 'ProductOrderPage',
    'SubscriptionPage', 'DailyTipPage', 'SubscriptionOrderPage', 'OrderDeliveryPage',
    'UserPage', 'ManagerPage', 'VendorPage',
    'FranchisePage',
    'DeliveryPartnerPage', 'PartnerVerificationPage', 'PayoutPage', 'BoxPage', 'BulkDeliveryPage',
    'UnavailableLocationPage', 'AttendancePage',
    'ReviewPage',
    'SettingsPage',
    'DashboardPage',
]
