from falbites.console.forms import VendorForm, ManagerForm, WalletForm, AssignFranchiseForm
from .base import PageController


class UserPage(PageController):
    title = 'Users'
    endpoint = 'users/'
    search_fields = ('name', 'mobileNumber', 'email', 'tag')
    allow_create = False
    allow_update = False
    limit = 2000

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.total_users = 0
        self.total_customers = 0

    def list_params(self):
        return {'limit': self.limit}

    def after_fetch(self, envelope):
        self.total_users = envelope.extra.get('totalUsers', len(self.items))
        self.total_customers = envelope.extra.get('totalCustomer', 0)

    def _apply(self, envelope):
        if envelope is None:
            return False
        if envelope.record:
            self.replace_item(envelope.record)
        return True

    def toggle_block(self, user_id):
        return self._apply(self.action('PATCH', f'users/toggle-block/{user_id}/'))

    def add_balance(self, user_id, amount, reason):
        data = {'userId': user_id, 'amount': amount, 'reason': reason}
        return self._apply(self.action('POST', 'users/add-balance/', WalletForm, data))

    def assign_franchise(self, user_id, franchise_id):
        data = {'franchiseId': franchise_id}
        return self._apply(self.action('PATCH', f'users/assign-franchise/{user_id}/', AssignFranchiseForm, data))


class ManagerPage(PageController):
    title = 'Managers'
    endpoint = 'admin/get-managers/'
    create_endpoint = 'admin/create-manager/'
    detail_endpoint = 'admin/delete-manager/{id}/'
    form_class = ManagerForm
    search_fields = ('name', 'mobileNumber', 'email')
    allow_update = False


class VendorPage(PageController):
    title = 'Vendors'
    endpoint = 'vendors/'
    form_class = VendorForm
    search_fields = ('name', 'username', 'brandName')
