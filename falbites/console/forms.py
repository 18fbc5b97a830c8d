"""
Client side forms for the dashboard pages.

Each form validates user input before anything is sent and then serializes
itself into a ``Payload``: a JSON body, or multipart form data when files are
attached (list and object values JSON encoded, which is what the server's
multipart parsing expects).
"""
import json
import mimetypes
import os
from datetime import date, datetime
from decimal import Decimal

from django import forms
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils.datastructures import MultiValueDict

# Payload

def wire_value(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, list):
        return [wire_value(item) for item in value]
    if isinstance(value, dict):
        return {key: wire_value(item) for key, item in value.items()}
    return value


class Payload:
    """Serialized form output, ready to hand to ``ApiClient.request``"""

    def __init__(self, data, files=None):
        self.data = data
        self.files = files or []

    @property
    def multipart(self):
        return bool(self.files)

    def request_kwargs(self):
        if not self.files:
            return {'json': self.data}
        form = {}
        for key, value in self.data.items():
            if isinstance(value, (list, dict)):
                form[key] = json.dumps(value)
            elif isinstance(value, bool):
                form[key] = 'true' if value else 'false'
            else:
                form[key] = str(value)
        return {'data': form, 'files': self.files}


def upload_from_path(path):
    """Read a local file into an upload the forms accept"""
    with open(path, 'rb') as fh:
        content = fh.read()
    content_type = mimetypes.guess_type(path)[0] or 'application/octet-stream'
    return SimpleUploadedFile(os.path.basename(path), content, content_type=content_type)


# Fields

class MultipleFileInput(forms.ClearableFileInput):
    allow_multiple_selected = True


class MultipleFileField(forms.FileField):
    def __init__(self, *args, **kwargs):
        kwargs.setdefault('widget', MultipleFileInput())
        super().__init__(*args, **kwargs)

    def clean(self, data, initial=None):
        single_file_clean = super().clean
        if isinstance(data, (list, tuple)):
            if not data and self.required:
                raise forms.ValidationError(self.error_messages['required'], code='required')
            return [single_file_clean(item, initial) for item in data]
        result = single_file_clean(data, initial)
        return [result] if result else []


class JSONListField(forms.Field):
    """Accepts a list or its JSON encoding"""

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                raise forms.ValidationError('Enter a valid JSON list.', code='invalid')
        if not isinstance(value, (list, tuple)):
            raise forms.ValidationError('Enter a list.', code='invalid')
        return list(value)

    def validate(self, value):
        if self.required and not value:
            raise forms.ValidationError(self.error_messages['required'], code='required')


class CommaListField(forms.Field):
    """``"a, b"`` or ``["a", "b"]`` -> ``["a", "b"]``"""

    def to_python(self, value):
        if value in self.empty_values:
            return []
        if isinstance(value, str):
            value = value.split(',')
        return [str(item).strip() for item in value if str(item).strip()]


class EntryListField(JSONListField):
    """List of records, each validated by ``entry_form``"""

    def __init__(self, entry_form, min_entries=0, label_prefix='Entry', **kwargs):
        self.entry_form = entry_form
        self.min_entries = min_entries
        self.label_prefix = label_prefix
        super().__init__(**kwargs)

    def clean(self, value):
        entries = super().clean(value)
        if len(entries) < self.min_entries:
            raise forms.ValidationError(
                f"At least {self.min_entries} {self.label_prefix.lower()} required.", code='min_entries'
            )
        cleaned, errors = [], []
        for index, entry in enumerate(entries, start=1):
            if not isinstance(entry, dict):
                errors.append(f"{self.label_prefix} {index}: expected an object.")
                continue
            form = self.entry_form(data=entry)
            if not form.is_valid():
                for field, messages in form.errors.items():
                    errors.append(f"{self.label_prefix} {index} {field}: {messages[0]}")
                continue
            cleaned.append({key: val for key, val in form.cleaned_data.items() if val not in (None, '')})
        if errors:
            raise forms.ValidationError(errors)
        return cleaned


# Base form

class ResourceForm(forms.Form):
    """
    Base for every page form.

    ``instance`` is the record being edited; fields listed in
    ``required_on_create`` are relaxed when editing. Blank optional values are
    left out of the payload so an update only sends what was filled in.
    """
    file_fields = ()
    required_on_create = ()
    exclude_from_payload = ()

    def __init__(self, data=None, files=None, instance=None, **kwargs):
        self.instance = instance
        if files is not None and not isinstance(files, MultiValueDict):
            files = MultiValueDict({
                key: list(value) if isinstance(value, (list, tuple)) else [value]
                for key, value in files.items()
            })
        super().__init__(data, files, **kwargs)
        if self.editing:
            for name in self.required_on_create:
                self.fields[name].required = False

    @property
    def editing(self):
        return self.instance is not None

    def serialize(self, data):
        """Hook to reshape cleaned wire data (nesting, renames)"""
        return data

    def to_payload(self):
        data, files = {}, []
        for name, value in self.cleaned_data.items():
            if name in self.exclude_from_payload:
                continue
            if name in self.file_fields:
                uploads = value if isinstance(value, list) else [value]
                for upload in uploads:
                    if not upload:
                        continue
                    upload.seek(0)
                    content_type = getattr(upload, 'content_type', None) or 'application/octet-stream'
                    files.append((name, (upload.name, upload.read(), content_type)))
                continue
            if value is None or value == '' or value == []:
                continue
            data[name] = wire_value(value)
        return Payload(self.serialize(data), files)


# Auth

class AdminLoginForm(ResourceForm):
    phone = forms.CharField(max_length=15)
    password = forms.CharField(widget=forms.PasswordInput)


class VendorLoginForm(ResourceForm):
    username = forms.CharField(max_length=150)
    password = forms.CharField(widget=forms.PasswordInput)


# People

class VendorForm(ResourceForm):
    name = forms.CharField(max_length=100)
    username = forms.CharField(max_length=150)
    password = forms.CharField(widget=forms.PasswordInput)
    brandName = forms.CharField(max_length=100)

    required_on_create = ('password',)


class ManagerForm(ResourceForm):
    mobileNumber = forms.RegexField(
        regex=r'^\d{10}$', error_messages={'invalid': 'Mobile number must be exactly 10 digits.'}
    )
    name = forms.CharField(max_length=20, required=False)


class WalletForm(ResourceForm):
    userId = forms.IntegerField()
    amount = forms.DecimalField(min_value=1, max_value=10000, decimal_places=2)
    reason = forms.CharField(min_length=5, max_length=200)


class AssignFranchiseForm(ResourceForm):
    franchiseId = forms.IntegerField()


# Catalog

class BrandForm(ResourceForm):
    title = forms.CharField(max_length=100)
    image = forms.FileField()

    file_fields = ('image',)
    required_on_create = ('image',)


class CategoryForm(ResourceForm):
    title = forms.CharField(max_length=100)
    image = forms.FileField()

    file_fields = ('image',)
    required_on_create = ('image',)


class TopCategoryForm(CategoryForm):
    categoryId = forms.IntegerField()


class SubCategoryForm(CategoryForm):
    topCategoryId = forms.IntegerField()


class ProductTypeEntryForm(forms.Form):
    title = forms.CharField(max_length=100)
    price = forms.DecimalField(min_value=0, decimal_places=2)
    withoutDiscountPrice = forms.DecimalField(min_value=0, decimal_places=2, required=False)
    smallDescription = forms.CharField(max_length=200, required=False)
    imageUrl = forms.CharField(max_length=500, required=False)


class ProductForm(ResourceForm):
    title = forms.CharField(max_length=255)
    description = forms.CharField(widget=forms.Textarea)
    category = forms.IntegerField()
    topCategory = forms.IntegerField(required=False)
    subCategory = forms.IntegerField(required=False)
    brand = forms.IntegerField(required=False)
    tag = CommaListField(required=False)
    weightOrCount = forms.CharField(max_length=100, required=False)
    types = EntryListField(ProductTypeEntryForm, min_entries=1, label_prefix='Type')
    images = MultipleFileField(required=False)

    file_fields = ('images',)

    def serialize(self, data):
        data['types'] = [
            {**entry, 'withoutDiscountPrice': entry.get('withoutDiscountPrice', entry['price'])}
            for entry in data.get('types', [])
        ]
        return data


class ProductStatusForm(ResourceForm):
    status = forms.ChoiceField(choices=[('pending', 'Pending'), ('success', 'Success'), ('failed', 'Failed')])


class CategoryChoiceForm(ResourceForm):
    title = forms.CharField(max_length=100)
    types = forms.ChoiceField(choices=[('product', 'Product'), ('subscription', 'Subscription')], initial='product')
    productId = forms.IntegerField(required=False)
    category = forms.CharField(max_length=100, required=False)
    image = forms.FileField(required=False)

    file_fields = ('image',)

    def clean(self):
        cleaned_data = super().clean()
        kind = cleaned_data.get('types')
        if kind == 'product' and cleaned_data.get('productId') is None:
            self.add_error('productId', 'A product is required for product choices.')
        if kind == 'subscription' and not cleaned_data.get('category'):
            self.add_error('category', 'A category is required for subscription choices.')
        return cleaned_data


class ProductOrderStatusForm(ResourceForm):
    status = forms.ChoiceField(choices=[
        ('Pending', 'Pending'), ('Delivered', 'Delivered'), ('Failed', 'Failed'),
        ('Delayed', 'Delayed'), ('Cancelled', 'Cancelled'),
    ])
    deliveryDate = forms.DateField(required=False)


# Subscriptions

class SubscriptionTypeEntryForm(forms.Form):
    title = forms.CharField(max_length=100)
    price = forms.DecimalField(min_value=0, decimal_places=2)
    withoutDiscountPrice = forms.DecimalField(min_value=0, decimal_places=2)
    smallDescription = forms.CharField(max_length=200, required=False)


class SubscriptionForm(ResourceForm):
    title = forms.CharField(max_length=255)
    description = forms.CharField(widget=forms.Textarea)
    category = forms.CharField(max_length=100)
    weightOrCount = forms.CharField(max_length=100)
    tag = forms.CharField(max_length=50, required=False)
    types = EntryListField(SubscriptionTypeEntryForm, min_entries=1, label_prefix='Type')
    franchiseIds = JSONListField(required=False)
    selectAll = forms.BooleanField(required=False)
    images = MultipleFileField()
    mainImageIndex = forms.IntegerField(min_value=0, required=False)

    file_fields = ('images',)
    required_on_create = ('images',)
    exclude_from_payload = ('selectAll',)

    def __init__(self, *args, franchise_ids=None, **kwargs):
        self.franchise_ids = list(franchise_ids or [])
        super().__init__(*args, **kwargs)

    def clean_franchiseIds(self):
        ids = self.cleaned_data['franchiseIds']
        try:
            return [int(pk) for pk in ids]
        except (TypeError, ValueError):
            raise forms.ValidationError('Franchise ids must be numbers.', code='invalid')

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('selectAll'):
            cleaned_data['franchiseIds'] = list(self.franchise_ids)
        images = cleaned_data.get('images') or []
        index = cleaned_data.get('mainImageIndex')
        if index is not None and images and index >= len(images):
            self.add_error('mainImageIndex', 'Main image index is out of range.')
        return cleaned_data


class DailyTipForm(ResourceForm):
    title = forms.CharField(max_length=200)
    subscription = forms.ChoiceField(choices=[('free', 'Free'), ('paid', 'Paid')], initial='free')
    image = forms.FileField(required=False)

    file_fields = ('image',)


class SubscriptionOrderForm(ResourceForm):
    subscriptionStatus = forms.ChoiceField(
        choices=[('Active', 'Active'), ('Inactive', 'Inactive'), ('Cancelled', 'Cancelled')], required=False
    )
    paymentType = forms.ChoiceField(
        choices=[('COD', 'Cash on delivery'), ('ONLINE', 'Online'), ('FAILED', 'Failed')], required=False
    )
    remainingDays = forms.IntegerField(min_value=0, required=False)


class DeliveryStatusForm(ResourceForm):
    deliveryId = forms.IntegerField()
    status = forms.ChoiceField(choices=[
        ('Scheduled', 'Scheduled'), ('order placed', 'Order placed'), ('pending', 'Pending'),
        ('in transit', 'In transit'), ('out-for-delivery', 'Out for delivery'), ('delivered', 'Delivered'),
        ('cancelled', 'Cancelled'), ('paused', 'Paused'),
    ])


# Franchises

class FranchiseForm(ResourceForm):
    name = forms.CharField(max_length=255)
    cityName = forms.CharField(max_length=100)
    branchName = forms.CharField(max_length=100)
    locationName = forms.CharField(max_length=255, required=False)
    lat = forms.FloatField(required=False)
    lang = forms.FloatField(required=False)
    totalDeliveryRadius = forms.FloatField(min_value=0)
    freeDeliveryRadius = forms.FloatField(min_value=0)
    chargePerExtraKm = forms.FloatField(min_value=0)
    assignedManagerId = forms.IntegerField(required=False)

    def clean(self):
        cleaned_data = super().clean()
        free = cleaned_data.get('freeDeliveryRadius')
        total = cleaned_data.get('totalDeliveryRadius')
        if free is not None and total is not None and free > total:
            self.add_error('freeDeliveryRadius', 'Free delivery radius cannot exceed the total delivery radius.')
        return cleaned_data

    def serialize(self, data):
        location = {key: data.pop(key) for key in ('locationName', 'lat', 'lang') if key in data}
        if location:
            data['location'] = location
        return data


class AssignManagerForm(ResourceForm):
    managerId = forms.IntegerField()


# Delivery

class PayoutForm(ResourceForm):
    deliveryPartnerId = forms.IntegerField()
    monthName = forms.CharField(max_length=20)
    date = forms.DateField()
    amount = forms.DecimalField(min_value=1, max_value=100000, decimal_places=2)


class OnboardingStatusForm(ResourceForm):
    onboardingStatus = forms.ChoiceField(
        choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')]
    )


class BulkDeliveryForm(ResourceForm):
    name = forms.CharField(max_length=255)
    address = forms.CharField(widget=forms.Textarea)
    phoneNumber = forms.CharField(min_length=10, max_length=15)
    deliveryDate = forms.DateField()
    image = forms.FileField()

    file_fields = ('image',)
    required_on_create = ('image',)


class BulkDeliveryStatusForm(ResourceForm):
    status = forms.ChoiceField(
        choices=[('pending', 'Pending'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')]
    )


class UnavailableLocationForm(ResourceForm):
    city = forms.CharField(max_length=100)
    area = forms.CharField(max_length=255)
    pinCode = forms.CharField(max_length=10)
    reason = forms.CharField(max_length=255, required=False)


class AttendanceMarkForm(ResourceForm):
    type = forms.ChoiceField(choices=[('delivery-partner', 'Delivery partner')], initial='delivery-partner')
    id = forms.IntegerField()
    date = forms.DateField()
    status = forms.ChoiceField(
        choices=[('pending', 'Pending'), ('present', 'Present'), ('absent', 'Absent'), ('holiday', 'Holiday')]
    )


# Settings

LINK_FIELDS = (
    'website', 'about', 'privacy', 'termsAndConditions', 'thirdPartyLicense', 'refundAndCancelation',
    'shippingPolicy',
)


class RechargeOptionEntryForm(forms.Form):
    amount = forms.IntegerField(min_value=1)
    cashback = forms.IntegerField(min_value=0, required=False)


class SettingsForm(ResourceForm):
    """Every field is optional; only what is filled in gets patched"""
    maintenance = forms.NullBooleanField(required=False)
    website = forms.RegexField(
        regex=r'^https?://.+', max_length=255, required=False,
        error_messages={'invalid': 'Enter a URL starting with http:// or https://.'}
    )
    about = forms.CharField(max_length=500, required=False)
    privacy = forms.CharField(max_length=500, required=False)
    termsAndConditions = forms.CharField(max_length=500, required=False)
    thirdPartyLicense = forms.CharField(max_length=500, required=False)
    refundAndCancelation = forms.CharField(max_length=500, required=False)
    shippingPolicy = forms.CharField(max_length=500, required=False)
    rechargeOptions = EntryListField(RechargeOptionEntryForm, label_prefix='Option', required=False)
    minAddMoney = forms.IntegerField(min_value=1, required=False)
    maxRefers = forms.IntegerField(min_value=0, required=False)
    referReward = forms.DecimalField(min_value=0, decimal_places=2, required=False)
    deliveryTiming = forms.CharField(max_length=50, required=False)
    maxSubscriptionUpdateOrCancelTime = forms.CharField(max_length=10, required=False)
    platformFees = forms.DecimalField(min_value=0, decimal_places=2, required=False)
    bottomImage = forms.FileField(required=False)
    referImage = forms.FileField(required=False)
    referPageImageAttachment = forms.FileField(required=False)
    healthyBanner = forms.FileField(required=False)
    searchBackgroundImage = forms.FileField(required=False)
    topBannerImage = forms.FileField(required=False)

    file_fields = (
        'bottomImage', 'referImage', 'referPageImageAttachment', 'healthyBanner', 'searchBackgroundImage',
        'topBannerImage',
    )

    def serialize(self, data):
        links = {key: data.pop(key) for key in LINK_FIELDS if key in data}
        if links:
            data['links'] = links
        return data
