from falbites.console.forms import FranchiseForm, AssignManagerForm
from .base import PageController


class FranchisePage(PageController):
    title = 'Franchises'
    endpoint = 'franchises/'
    form_class = FranchiseForm
    search_fields = ('name', 'cityName', 'branchName', 'location.locationName', 'assignedManager.name')

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.managers = []

    def load_managers(self):
        envelope = self.call('GET', 'admin/get-managers/')
        if envelope is not None:
            self.managers = list(envelope.items)
        return self.managers

    def assign_manager(self, franchise_id, manager_id):
        envelope = self.action(
            'PATCH', f'franchises/{franchise_id}/assign-manager/', AssignManagerForm, {'managerId': manager_id}
        )
        if envelope is None:
            return False
        if envelope.record:
            self.replace_item(envelope.record)
        return True
