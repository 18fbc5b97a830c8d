from .base import PageController


class DashboardPage(PageController):
    """Home figures: summary cards, monthly sales, order status split and weekly revenue"""
    title = 'Dashboard'
    endpoint = 'dashboard/stats/'
    allow_create = False
    allow_update = False

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.branch_id = None
        self.stats = []
        self.sales_data = []
        self.order_data = []
        self.revenue_data = []

    def list_params(self):
        return {'branchId': self.branch_id} if self.branch_id else None

    def extract_items(self, envelope):
        return list(envelope.extra.get('stats') or [])

    def after_fetch(self, envelope):
        self.stats = list(self.items)
        self.sales_data = envelope.extra.get('salesData') or []
        self.order_data = envelope.extra.get('orderData') or []
        self.revenue_data = envelope.extra.get('revenueData') or []

    def select_branch(self, branch_id):
        self.branch_id = branch_id
        return self.fetch_list()

    def card(self, title):
        return next((item for item in self.stats if item.get('title') == title), None)
